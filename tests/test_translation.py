"""Tests for flag translation and target validation."""
import pytest

from fbaservices.scripts.helpers import UsageError, split_list, translate_options
from fbaservices.scripts.reaction_sensitivity import MISSING_TARGETS, TRANSLATION, build_params


def test_translate_options_maps_names():
    params = translate_options(
        {"Model ID": "MyModel", "modelws": "ws1", "objfract": 0.2, "essrxn": True},
        TRANSLATION,
    )
    assert params == {
        "model": "MyModel",
        "model_ws": "ws1",
        "objective_fraction": 0.2,
        "delete_essential_reactions": True,
    }


def test_translate_options_is_deterministic():
    options = {"Model ID": "m", "media": "Carbon-D-Glucose", "rxnprobs": "probs"}
    assert translate_options(options, TRANSLATION) == translate_options(dict(options), TRANSLATION)


def test_translate_options_drops_unset_values():
    params = translate_options(
        {"Model ID": "m", "media": None, "objsens": False, "objfract": 0.0}, TRANSLATION
    )
    assert params == {"model": "m", "objective_fraction": 0.0}


def test_translate_options_ignores_untranslated_flags():
    assert translate_options({"rxnstotest": "+rxn1", "Model ID": "m"}, TRANSLATION) == {"model": "m"}


def test_aliases_share_a_parameter():
    assert translate_options({"rxnsensid": "a"}, TRANSLATION) == {"rxnsens_uid": "a"}
    assert translate_options({"outputid": "b"}, TRANSLATION) == {"rxnsens_uid": "b"}
    assert translate_options({"rxnsensid": "a", "outputid": "b"}, TRANSLATION) == {"rxnsens_uid": "a"}


def test_split_list():
    assert split_list("+rxn00001;-rxn00002") == ["+rxn00001", "-rxn00002"]
    assert split_list("rxn1; ;rxn2;") == ["rxn1", "rxn2"]
    assert split_list(None) is None


def test_build_params_with_reaction_list():
    params = build_params({"Model ID": "MyModel"}, rxnstotest="+rxn00001;-rxn00002")
    assert params == {"model": "MyModel", "reactions_to_delete": ["+rxn00001", "-rxn00002"]}


def test_build_params_with_gapfill_solution():
    params = build_params({"Model ID": "MyModel"}, gapfill="gf.1.solution.0")
    assert params["gapfill_solution_id"] == "gf.1.solution.0"
    assert "reactions_to_delete" not in params


def test_build_params_with_essential_deletion_only():
    params = build_params({"Model ID": "MyModel", "essrxn": True})
    assert params == {"model": "MyModel", "delete_essential_reactions": True}


def test_build_params_requires_a_target():
    with pytest.raises(UsageError, match=MISSING_TARGETS):
        build_params({"Model ID": "MyModel", "media": "Complete", "essrxn": False})
