"""Logging & console helpers for scripts and the server.

Features:
    * RichHandler based structured console logging (color, tracebacks)
    * Optional JSON logging mode (machine ingest)
    * Server log files are attached per service by `ServiceLogger`
    * Helper utilities (`get_console`, `render_panel`, `render_table`) so
        service layers avoid importing rich directly.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterable
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

_INITIALIZED = False
_JSON_MODE = False
_CONSOLE: Console | None = None


class _JsonHandler(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:  # pragma: no cover - simple
        try:
            data = {
                "level": record.levelname,
                "name": record.name,
                "message": record.getMessage(),
            }
            for key in ("user", "module_name", "method", "call_id", "client_ip"):
                value = getattr(record, key, None)
                if value is not None:
                    data[key] = value
            if record.exc_info:
                data["exc_info"] = logging.Formatter().formatException(record.exc_info)
            print(json.dumps(data, ensure_ascii=False))
        except Exception:  # pragma: no cover
            self.handleError(record)


def setup_logging(
    level: str | None = None,
    json_mode: bool | None = None,
) -> None:
    global _INITIALIZED, _JSON_MODE
    if _INITIALIZED:
        return
    if json_mode is not None:
        _JSON_MODE = json_mode
    lvl_name = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    lvl = getattr(logging, lvl_name, logging.INFO)
    handlers: list[logging.Handler] = []
    if _JSON_MODE:
        handlers.append(_JsonHandler())
    else:
        handlers.append(
            RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=False)
        )
    logging.basicConfig(level=lvl, handlers=handlers, force=True,
                        format="%(message)s", datefmt="%H:%M:%S")
    _INITIALIZED = True


def enable_json_logging() -> None:
    """Switch to JSON logging (idempotent)."""
    setup_logging(json_mode=True)


def get_console() -> Console:
    """Return the shared rich Console."""
    global _CONSOLE
    if _CONSOLE is None:
        _CONSOLE = Console()
    return _CONSOLE


def render_panel(title: str, body: str, *, style: str = "cyan") -> None:
    get_console().print(Panel.fit(body, title=title, border_style=style))


def render_table(title: str, rows: Iterable[tuple[str, Any]]) -> None:
    """Render a two column key/value table."""
    table = Table(title=title)
    table.add_column("Key")
    table.add_column("Value")
    for key, value in rows:
        table.add_row(key, "" if value is None else str(value))
    get_console().print(table)


__all__ = [
    "enable_json_logging",
    "get_console",
    "render_panel",
    "render_table",
    "setup_logging",
]
