"""JSON-RPC client for the remote fbaModelServices server."""
from __future__ import annotations

import logging
import uuid
from typing import Any

import httpx
import orjson

from fbaservices.domain.models import (
    DeleteNoncontributingParams,
    JobData,
    ReactionSensitivityParams,
    RpcRequest,
)
from fbaservices.runtime import bootstrap

SERVICE_MODULE = "fbaModelServices"

logger = logging.getLogger(__name__)


class ServerError(Exception):
    """Error envelope returned by the remote service (or a transport failure)."""

    def __init__(self, name: str, code: int, message: str, data: str | None = None) -> None:
        super().__init__(message)
        self.name = name
        self.code = code
        self.message = message
        self.data = data

    def __str__(self) -> str:
        return f"{self.name} {self.code}: {self.message}"


class FbaModelServicesClient:
    def __init__(
        self,
        url: str,
        *,
        token: str | None = None,
        timeout: float = 1800.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.url = url
        self.token = token
        # One attempt per call: no transport retries.
        self._http = httpx.Client(timeout=timeout, transport=transport)

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = self.token
        return headers

    def call(self, method: str, *params: Any) -> Any:
        """Invoke `fbaModelServices.<method>` once and return its single result."""
        request = RpcRequest(
            method=f"{SERVICE_MODULE}.{method}",
            params=list(params),
            id=str(uuid.uuid4()),
        )
        logger.debug("calling %s (id=%s)", request.method, request.id)
        try:
            response = self._http.post(
                self.url,
                content=orjson.dumps(request.model_dump()),
                headers=self._headers(),
            )
        except httpx.HTTPError as exc:
            raise ServerError("HTTPError", -32000, str(exc)) from exc
        try:
            body = orjson.loads(response.content)
        except orjson.JSONDecodeError as exc:
            raise ServerError(
                "HTTPError", response.status_code, response.reason_phrase, response.text
            ) from exc
        if not isinstance(body, dict):
            raise ServerError("JSONRPCError", -32700, "Response body is not an object")
        error = body.get("error")
        if error:
            raise ServerError(
                error.get("name", "JSONRPCError"),
                int(error.get("code", -32603)),
                error.get("message", ""),
                error.get("data") or error.get("error"),
            )
        if response.is_error:
            raise ServerError(
                "HTTPError", response.status_code, response.reason_phrase, response.text
            )
        result = body.get("result")
        if not isinstance(result, list) or not result:
            raise ServerError("JSONRPCError", -32603, f"Empty result from {method}")
        return result[0]

    # ---- typed helpers ----

    def reaction_sensitivity_analysis(self, params: ReactionSensitivityParams) -> JobData:
        return JobData.model_validate(
            self.call("reaction_sensitivity_analysis", params.model_dump(exclude_none=True))
        )

    def delete_noncontributing_reactions(self, params: DeleteNoncontributingParams) -> JobData:
        return JobData.model_validate(
            self.call("delete_noncontributing_reactions", params.model_dump(exclude_none=True))
        )

    def jobs_done(self, job_id: str) -> JobData:
        return JobData.model_validate(self.call("jobs_done", {"jobid": job_id}))

    def version(self) -> str:
        return str(self.call("version"))

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> FbaModelServicesClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


def get_fba_client(url: str | None = None) -> FbaModelServicesClient:
    config = bootstrap().config
    return FbaModelServicesClient(url or config.url, token=config.token)


__all__ = ["FbaModelServicesClient", "ServerError", "get_fba_client"]
