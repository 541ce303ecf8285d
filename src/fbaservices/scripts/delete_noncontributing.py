"""fba-delete-noncontributing-reactions: drop reactions flagged by a sensitivity run."""
from __future__ import annotations

from typing import Annotated

import typer

from fbaservices.domain.models import DeleteNoncontributingParams
from fbaservices.runtime import bootstrap
from fbaservices.scripts.helpers import (
    default_workspace,
    fail,
    print_job_data,
    run_fba_command,
    translate_options,
)

SERVER_COMMAND = "delete_noncontributing_reactions"

TRANSLATION = {
    "RxnSensitivity ID": "rxnsens_uid",
    "workspace": "workspace",
    "rxnsensws": "rxn_sensitivity_ws",
    "outputid": "new_model_uid",
    "outputws": "new_model_ws",
}

HELP = """Deletes the reactions marked as noncontributing in a RxnSensitivity
object (produced by fba-reactionsensitivity --deleterxns) and saves the
resulting model."""


def delete_noncontributing_reactions(
    rxnsens_id: Annotated[str, typer.Argument(metavar="RXNSENS_ID", help="RxnSensitivity ID")],
    workspace: Annotated[
        str | None,
        typer.Option("--workspace", "-w", help="Workspace to save the new model in (default: current workspace)"),
    ] = None,
    rxnsensws: Annotated[
        str | None, typer.Option(help="Workspace of the RxnSensitivity object (default: current workspace)")
    ] = None,
    outputid: Annotated[
        str | None, typer.Option("--outputid", "-o", help="ID of the new model (default: overwrite)")
    ] = None,
    outputws: Annotated[str | None, typer.Option(help="Workspace of the new model")] = None,
    url: Annotated[str | None, typer.Option(help="Service URL (default: configured URL)")] = None,
    showerror: Annotated[
        bool, typer.Option("--showerror", "-e", help="Show the full server error trace")
    ] = False,
) -> None:
    bootstrap()
    params = translate_options(
        {
            "RxnSensitivity ID": rxnsens_id,
            "workspace": default_workspace(workspace),
            "rxnsensws": default_workspace(rxnsensws),
            "outputid": outputid,
            "outputws": outputws,
        },
        TRANSLATION,
    )
    params = DeleteNoncontributingParams.model_validate(params).model_dump(exclude_none=True)
    output = run_fba_command(params, SERVER_COMMAND, url=url, show_error=showerror)
    if output is None:
        raise fail("Deletion of noncontributing reactions failed.", code=1)
    typer.echo("Delete noncontributing reactions job queued:")
    print_job_data(output)


app = typer.Typer(add_completion=False)
app.command(help=HELP)(delete_noncontributing_reactions)


def main() -> None:  # pragma: no cover
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
