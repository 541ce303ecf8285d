"""Shared plumbing for the fba-* scripts: flag translation, submission, output."""
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import typer

from fbaservices.clients.fba_client import ServerError, get_fba_client
from fbaservices.domain.models import JobData
from fbaservices.infrastructure.logging import get_console, render_table
from fbaservices.runtime import current_workspace

logger = logging.getLogger(__name__)


class UsageError(Exception):
    """Invalid combination of script inputs, detected before any remote call."""


def translate_options(options: Mapping[str, Any], translation: Mapping[str, str]) -> dict[str, Any]:
    """Map flag (and primary argument) names to remote parameter names.

    Unset options (`None`) and switches left off (`False`) are dropped. When
    several flags map to the same parameter the first one set wins.
    """
    params: dict[str, Any] = {}
    for flag, value in options.items():
        if value is None or value is False:
            continue
        target = translation.get(flag)
        if target is None or target in params:
            continue
        params[target] = value
    return params


def split_list(value: str | None, sep: str = ";") -> list[str] | None:
    if value is None:
        return None
    return [item.strip() for item in value.split(sep) if item.strip()]


def default_workspace(value: str | None) -> str | None:
    return value if value is not None else current_workspace()


def fail(message: str, code: int = 2) -> typer.Exit:
    get_console().print(f"[red]{message}[/red]")
    return typer.Exit(code=code)


def run_fba_command(
    params: dict[str, Any],
    command: str,
    *,
    url: str | None = None,
    show_error: bool = False,
) -> Any | None:
    """Submit `params` to `command` once; return the output or None on failure."""
    client = get_fba_client(url)
    try:
        with client:
            return client.call(command, params)
    except ServerError as exc:
        logger.error("%s failed: %s", command, exc)
        console = get_console()
        console.print(f"[red]{exc.message}[/red]")
        if show_error and exc.data:
            console.print(exc.data, markup=False, highlight=False)
        return None


def print_job_data(output: Any) -> JobData:
    job = JobData.model_validate(output)
    render_table(
        "Job",
        [
            ("Job ID", job.id),
            ("Job Type", job.type),
            ("Job Owner", job.owner),
            ("Job Status", job.status),
            ("Queue Time", job.queuetime),
            ("Completion Time", job.completetime),
        ],
    )
    return job


__all__ = [
    "UsageError",
    "default_workspace",
    "fail",
    "print_job_data",
    "run_fba_command",
    "split_list",
    "translate_options",
]
