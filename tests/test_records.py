"""Tests for genome records: defaults, metadata tables and derived references."""
import gc

import pytest
from pydantic import ValidationError

from fbaservices.records.base import RecordError
from fbaservices.records.genomes import Feature, Genome, ProteinFamily

GENOME_REF = "2117/Ecoli/3"


@pytest.fixture
def genome():
    data = {
        "id": "kb|g.0",
        "scientific_name": "Escherichia coli K-12",
        "domain": "Bacteria",
        "features": [
            {
                "id": "kb|g.0.peg.1",
                "feature_creation_event": "evt1",
                "function": "thr operon leader peptide",
                "protein_families": [{"id": "FIG00000001", "subject_db": "FIGfam"}],
            },
            {"id": "kb|g.0.rna.1", "feature_creation_event": "evt1", "type": "rna"},
        ],
    }
    return Genome.from_workspace(data, GENOME_REF)


def test_feature_reference_extends_parent_reference(genome):
    feature = genome.features[0]
    assert feature.parent is genome
    assert feature.reference == f"{GENOME_REF}/features/id/kb|g.0.peg.1"
    assert feature.uuid == feature.reference


def test_nested_reference(genome):
    family = genome.features[0].protein_families[0]
    assert family.reference == f"{GENOME_REF}/features/id/kb|g.0.peg.1/protein_families/id/FIG00000001"


def test_reference_is_stable_and_recomputed_after_id_change(genome):
    feature = genome.features[0]
    assert feature.reference == feature.reference
    family = feature.protein_families[0]
    before = family.reference
    feature.id = "kb|g.0.peg.9"
    assert feature.reference == f"{GENOME_REF}/features/id/kb|g.0.peg.9"
    assert family.reference == before.replace("peg.1", "peg.9")


def test_feature_defaults():
    a = Feature(id="f1", feature_creation_event="e")
    b = Feature(id="f2", feature_creation_event="e")
    assert a.type == "peg"
    assert a.aliases == []
    assert a.function is None
    a.aliases.append("thrL")
    assert b.aliases == []


def test_required_fields():
    with pytest.raises(ValidationError):
        Feature(id="f1")


def test_setters_validate():
    feature = Feature(id="f1", feature_creation_event="e")
    feature.dna_sequence_length = 120
    assert feature.dna_sequence_length == 120
    with pytest.raises(ValidationError):
        feature.dna_sequence_length = "long"


def test_attribute_tables():
    entry = Feature.attributes("id")
    assert entry["req"] is True
    assert entry["print_order"] == 0
    assert Feature.attributes("type")["default"] == "peg"
    assert Feature.attributes("subsystems")["default"] == []
    assert Feature.attributes("protein_families") is None
    assert Feature.attributes("nope") is None
    assert len(Feature.attributes()) == 20
    assert Feature.subobjects("protein_families")["class"] == "ProteinFamily"
    assert Feature.links() == []
    assert Genome.links("contigset_ref")["name"] == "contigset_ref"


def test_orphan_child_has_no_reference():
    with pytest.raises(RecordError):
        _ = Feature(id="f1", feature_creation_event="e").reference


def test_top_level_needs_workspace_reference():
    with pytest.raises(RecordError):
        _ = Genome(id="g", scientific_name="s", domain="d").reference
    with pytest.raises(RecordError):
        Feature.from_workspace({"id": "f", "feature_creation_event": "e"}, "1/2/3")


def test_add_child_links_parent(genome):
    child = genome.features[1].add("protein_families", {"id": "PF1"})
    assert isinstance(child, ProteinFamily)
    assert child.parent is genome.features[1]
    assert child.reference.endswith("/features/id/kb|g.0.rna.1/protein_families/id/PF1")
    with pytest.raises(RecordError):
        genome.add("contigs", {"id": "c1"})


def test_assigning_children_relinks(genome):
    replacement = Feature(id="kb|g.0.peg.2", feature_creation_event="e")
    genome.features = [replacement]
    assert genome.get_feature("kb|g.0.peg.2").parent is genome
    assert genome.get_feature("kb|g.0.peg.1") is None


def test_parent_reference_is_weak():
    genome = Genome(id="g", scientific_name="s", domain="d")
    feature = genome.add("features", {"id": "f1", "feature_creation_event": "e"})
    del genome
    gc.collect()
    assert feature.parent is None


def test_workspace_round_trip(genome):
    data = genome.to_workspace()
    assert data["features"][0]["protein_families"][0]["subject_db"] == "FIGfam"
    assert "md5" not in data["features"][0]
    again = Genome.from_workspace(data, GENOME_REF)
    assert again.to_workspace() == data


def test_workspace_genome_with_unlisted_keys():
    data = {
        "id": "kb|g.1",
        "scientific_name": "Bacillus subtilis",
        "domain": "Bacteria",
        "proteinset_ref": "2117/proteins/1",
        "close_genomes": [{"genome": "kb|g.2", "closeness_measure": 0.9}],
        "quality": {"completeness": 0.98},
        "features": [{"id": "kb|g.1.peg.1", "feature_creation_event": "evt1", "orthologs": ["x"]}],
    }
    genome = Genome.from_workspace(data, GENOME_REF)
    assert genome.proteinset_ref == "2117/proteins/1"
    assert Genome.links("proteinset_ref")["name"] == "proteinset_ref"
    assert Genome.attributes("quality") is None
    out = genome.to_workspace()
    assert out["quality"] == {"completeness": 0.98}
    assert out["features"][0]["orthologs"] == ["x"]
