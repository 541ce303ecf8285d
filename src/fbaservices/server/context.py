"""Per-call context and service loggers for the JSON-RPC server.

Log levels follow the syslog-style scale used by the deployed services
(0 emergency .. 6 info, 7-9 debug levels); they are mapped onto stdlib
`logging` levels when a message is emitted.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, MutableMapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

EMERG, ALERT, CRIT, ERR, WARNING, NOTICE, INFO, DEBUG, DEBUG2, DEBUG3 = range(10)

_TO_LOGGING = {
    EMERG: logging.CRITICAL,
    ALERT: logging.CRITICAL,
    CRIT: logging.CRITICAL,
    ERR: logging.ERROR,
    WARNING: logging.WARNING,
    NOTICE: logging.INFO,
    INFO: logging.INFO,
    DEBUG: logging.DEBUG,
    DEBUG2: logging.DEBUG - 1,
    DEBUG3: logging.DEBUG - 2,
}

_NAMED_DEBUG = {"DEBUG": DEBUG, "DEBUG2": DEBUG2, "DEBUG3": DEBUG3}


def to_logging_level(level: int) -> int:
    return _TO_LOGGING[level]


class _ContextAdapter(logging.LoggerAdapter):
    """Prefix records with caller identity and attach it as `extra` fields."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        extra = dict(self.extra or {})
        kwargs["extra"] = {**extra, **kwargs.get("extra", {})}
        prefix = "{module_name}.{method} [{call_id}] user={user} ip={client_ip}".format(
            **{k: extra.get(k) for k in ("module_name", "method", "call_id", "user", "client_ip")}
        )
        return f"{prefix}: {msg}", kwargs


class ServiceLogger:
    def __init__(self, name: str, *, log_level: int = INFO, log_file: str | Path | None = None) -> None:
        self.name = name
        self.logger = logging.getLogger(f"fbaservices.server.{name}")
        # Gating happens in log_message against the service level.
        self.logger.setLevel(1)
        self._default_level = self._check(log_level)
        self._user_level: int | None = None
        self.log_file = str(log_file) if log_file else None
        if log_file and not any(
            isinstance(h, logging.FileHandler) and h.baseFilename == str(Path(log_file).resolve())
            for h in self.logger.handlers
        ):
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            handler = logging.FileHandler(log_file, encoding="utf-8")
            handler.setFormatter(
                logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
            )
            self.logger.addHandler(handler)

    @staticmethod
    def _check(level: int) -> int:
        if not isinstance(level, int) or level not in _TO_LOGGING:
            raise ValueError(f"Invalid log level: {level}")
        return level

    def get_log_level(self) -> int:
        return self._user_level if self._user_level is not None else self._default_level

    def set_log_level(self, level: int) -> None:
        self._user_level = self._check(level)

    def clear_user_log_level(self) -> None:
        self._user_level = None

    def log_message(
        self,
        level: int,
        message: str | Iterable[str],
        user: str | None = None,
        module: str | None = None,
        method: str | None = None,
        call_id: str | int | None = None,
        client_ip: str | None = None,
    ) -> None:
        if self._check(level) > self.get_log_level():
            return
        adapter = _ContextAdapter(
            self.logger,
            {
                "user": user,
                "module_name": module,
                "method": method,
                "call_id": call_id,
                "client_ip": client_ip,
            },
        )
        lines = [message] if isinstance(message, str) else list(message)
        for line in lines:
            adapter.log(to_logging_level(level), line)


@dataclass
class ServerContext:
    """Information about the invoker of a service method."""

    logger: ServiceLogger
    client_ip: str | None = None
    user_id: str | None = None
    authenticated: bool = False
    token: str | None = None
    module: str | None = None
    method: str | None = None
    call_id: str | int | None = None

    def _log(self, level: int, message: str | Iterable[str]) -> None:
        self.logger.log_message(
            level, message, self.user_id, self.module, self.method, self.call_id, self.client_ip
        )

    def log_err(self, message: str | Iterable[str]) -> None:
        self._log(ERR, message)

    def log_info(self, message: str | Iterable[str]) -> None:
        self._log(INFO, message)

    def log_debug(self, message: str | Iterable[str], level: int | str = 1) -> None:
        """Log at debug level 1-3 (or an absolute 7-9 / DEBUG, DEBUG2, DEBUG3)."""
        if isinstance(level, str) and level in _NAMED_DEBUG:
            level = _NAMED_DEBUG[level]
        elif level not in (DEBUG, DEBUG2, DEBUG3):
            if not isinstance(level, int) or isinstance(level, bool) or level < 1 or level > 3:
                raise ValueError(f"Invalid log level: {level}")
            level += 6
        self._log(level, message)

    def set_log_level(self, level: int) -> None:
        self.logger.set_log_level(level)

    def get_log_level(self) -> int:
        return self.logger.get_log_level()

    def clear_log_level(self) -> None:
        self.logger.clear_user_log_level()


__all__ = [
    "DEBUG",
    "ERR",
    "INFO",
    "ServerContext",
    "ServiceLogger",
    "to_logging_level",
]
