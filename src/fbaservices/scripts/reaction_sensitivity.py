"""fba-reactionsensitivity: queue a reaction sensitivity analysis on the server."""
from __future__ import annotations

from typing import Annotated, Any

import typer

from fbaservices.domain.models import ReactionSensitivityParams
from fbaservices.runtime import bootstrap
from fbaservices.scripts.helpers import (
    UsageError,
    default_workspace,
    fail,
    print_job_data,
    run_fba_command,
    split_list,
    translate_options,
)

SERVER_COMMAND = "reaction_sensitivity_analysis"

TRANSLATION = {
    "Model ID": "model",
    "modelws": "model_ws",
    "media": "media",
    "mediaws": "media_ws",
    "objfract": "objective_fraction",
    "objrxn": "objective_reaction",
    "rxnsensid": "rxnsens_uid",
    "outputid": "rxnsens_uid",
    "workspace": "workspace",
    "deleterxns": "delete_noncontributing_reactions",
    "rxnprobs": "rxnprobs_id",
    "rxnprobsws": "rxnprobs_ws",
    "essrxn": "delete_essential_reactions",
    "objsens": "objective_sensitivity_only",
}

MISSING_TARGETS = "Must specify either a list of reactions to delete or a gapfill solution ID"

HELP = """Runs a 'reaction sensitivity' analysis.

Iteratively deletes the specified reactions (or the reactions of a gapfill
solution) and identifies a) the growth rate upon removing the reaction and
b) any reactions in the network that are inactivated when it is removed.

Provide either --rxnstotest with a ;-delimited list of reactions (prefix + or
- to test one direction; both are tested by default, in list order) or
--gapfill with a solution ID (GapfillUUID.solution.#). Gapfill reactions are
tested in reverse gapfill order unless --rxnprobs is given, in which case the
least likely reactions are tested first.

By default every reaction is replaced before the next one is tested. With
--deleterxns 'unnecessary' reactions are left out, so later reactions may
become necessary; remove the flagged reactions afterwards with
fba-delete-noncontributing-reactions. With both --deleterxns and --gapfill
the gapfill reactions are tested first, followed by the listed reactions.
"""

EPILOG = (
    "Examples: fba-reactionsensitivity --rxnstotest='+rxn00001;-rxn00002' MyModel  |  "
    "fba-reactionsensitivity --gapfill 'GapfillID'.gfsol.0 MyModel.  "
    "See also: fba-gapfill, fba-delete-noncontributing-reactions."
)


def build_params(
    options: dict[str, Any],
    *,
    rxnstotest: str | None = None,
    gapfill: str | None = None,
) -> dict[str, Any]:
    """Translate flags and attach the reaction targets.

    Raises `UsageError` when neither a reaction list, a gapfill solution nor
    the essential-reaction switch was given.
    """
    params = translate_options(options, TRANSLATION)
    targets = False
    reactions = split_list(rxnstotest)
    if reactions:
        params["reactions_to_delete"] = reactions
        targets = True
    if gapfill:
        params["gapfill_solution_id"] = gapfill
        targets = True
    if options.get("essrxn"):
        targets = True
    if not targets:
        raise UsageError(MISSING_TARGETS)
    return ReactionSensitivityParams.model_validate(params).model_dump(exclude_none=True)


def reaction_sensitivity(
    model_id: Annotated[str, typer.Argument(metavar="MODEL_ID", help="Model ID")],
    workspace: Annotated[
        str | None,
        typer.Option("--workspace", "-w", help="Workspace in which to save the RxnSensitivity object (default: current workspace)"),
    ] = None,
    rxnsensid: Annotated[
        str | None,
        typer.Option("--rxnsensid", "--outputid", "-r", help="ID for RxnSensitivity object to be outputted"),
    ] = None,
    media: Annotated[str | None, typer.Option(help="Media for sensitivity analysis")] = None,
    mediaws: Annotated[str | None, typer.Option(help="Workspace of media for sensitivity analysis")] = None,
    modelws: Annotated[
        str | None,
        typer.Option(help="Workspace in which the input model is found (default: current workspace)"),
    ] = None,
    objrxn: Annotated[
        str | None, typer.Option(help="Reaction to optimize when testing sensitivity (default: bio1)")
    ] = None,
    objfract: Annotated[
        float | None, typer.Option(help="Fraction of optimal objective to constrain (default: 0.1)")
    ] = None,
    objsens: Annotated[bool, typer.Option("--objsens", help="Analyze sensitivity of objective only")] = False,
    essrxn: Annotated[bool, typer.Option("--essrxn", help="Delete all essential reactions")] = False,
    deleterxns: Annotated[
        bool,
        typer.Option(
            "--deleterxns",
            help="Delete noncontributing reactions before testing the sensitivity of the others in the list",
        ),
    ] = False,
    rxnstotest: Annotated[
        str | None,
        typer.Option(
            help="Reactions to test, in order (;-delimited). Use + or - to specify a direction.",
        ),
    ] = None,
    gapfill: Annotated[
        str | None,
        typer.Option(help="Gapfill solution ID (UUID.solution.#). Specify this or --rxnstotest."),
    ] = None,
    rxnprobs: Annotated[
        str | None,
        typer.Option(help="RxnProbs object; lowest-likelihood gapfill reactions are tested first."),
    ] = None,
    rxnprobsws: Annotated[
        str | None, typer.Option(help="RxnProbs object workspace (default: current workspace)")
    ] = None,
    url: Annotated[str | None, typer.Option(help="Service URL (default: configured URL)")] = None,
    showerror: Annotated[
        bool, typer.Option("--showerror", "-e", help="Show the full server error trace")
    ] = False,
) -> None:
    bootstrap()
    options = {
        "Model ID": model_id,
        "workspace": default_workspace(workspace),
        "rxnsensid": rxnsensid,
        "media": media,
        "mediaws": mediaws,
        "modelws": default_workspace(modelws),
        "objrxn": objrxn,
        "objfract": objfract,
        "objsens": objsens,
        "essrxn": essrxn,
        "deleterxns": deleterxns,
        "rxnprobs": rxnprobs,
        "rxnprobsws": default_workspace(rxnprobsws),
    }
    try:
        params = build_params(options, rxnstotest=rxnstotest, gapfill=gapfill)
    except UsageError as exc:
        raise fail(str(exc)) from exc
    output = run_fba_command(params, SERVER_COMMAND, url=url, show_error=showerror)
    if output is None:
        raise fail("Reaction sensitivity analysis failed.", code=1)
    typer.echo("Reaction sensitivity job queued:")
    print_job_data(output)


app = typer.Typer(add_completion=False)
app.command(help=HELP, epilog=EPILOG)(reaction_sensitivity)


def main() -> None:  # pragma: no cover
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
