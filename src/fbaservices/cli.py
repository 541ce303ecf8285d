"""`fba` root CLI: service scripts grouped as subcommands."""

from __future__ import annotations

from typing import Annotated

import typer

from fbaservices.clients.fba_client import ServerError, get_fba_client
from fbaservices.infrastructure.logging import enable_json_logging, render_panel
from fbaservices.runtime import bootstrap
from fbaservices.scripts import delete_noncontributing, reaction_sensitivity

app = typer.Typer(help="fbaModelServices command line client")


@app.callback()
def init(
    json_logs: Annotated[bool, typer.Option("--json-logs", help="Emit JSON log lines")] = False,
) -> None:
    """Bootstrap environment (dotenv + config + logging) before any command."""
    if json_logs:
        enable_json_logging()
    bootstrap()


app.command(
    "reactionsensitivity",
    help=reaction_sensitivity.HELP,
    epilog=reaction_sensitivity.EPILOG,
)(reaction_sensitivity.reaction_sensitivity)
app.command(
    "delete-noncontributing-reactions",
    help=delete_noncontributing.HELP,
)(delete_noncontributing.delete_noncontributing_reactions)


@app.command("version")
def version_cmd(
    url: Annotated[str | None, typer.Option(help="Service URL (default: configured URL)")] = None,
) -> None:
    """Print the version of the remote service."""
    try:
        with get_fba_client(url) as client:
            version = client.version()
    except ServerError as exc:
        render_panel("error", exc.message, style="red")
        raise typer.Exit(code=1) from exc
    typer.echo(version)


if __name__ == "__main__":  # pragma: no cover
    app()
