"""Server-side error types."""
from __future__ import annotations

from typing import Any

from fbaservices.domain.models import RpcError

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INTERNAL_ERROR = -32603


class ServiceError(Exception):
    """Domain error raised by a handler; `trace` replaces the Python traceback."""

    def __init__(self, message: str, trace: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.trace = trace


class NoSuchMethodError(Exception):
    code = METHOD_NOT_FOUND


class JsonRpcError(Exception):
    """A handler failure converted into its wire error plus the call context."""

    def __init__(self, error: RpcError, context: Any = None) -> None:
        super().__init__(error.message)
        self.error = error
        self.context = context


__all__ = [
    "INTERNAL_ERROR",
    "INVALID_REQUEST",
    "METHOD_NOT_FOUND",
    "PARSE_ERROR",
    "JsonRpcError",
    "NoSuchMethodError",
    "ServiceError",
]
