"""Domain models (Pydantic) defining stable wire contracts for fbaModelServices."""
from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, Field

JobStatus = Literal["queued", "running", "done", "error"]


def _utcnow() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


# -------------------- JSON-RPC Envelope -------------------- #


class RpcRequest(BaseModel):
    """Inbound/outbound JSON-RPC 1.1 request body."""

    method: str
    params: list[Any] = Field(default_factory=list)
    id: str | int | None = None
    version: str = "1.1"


class RpcError(BaseModel):
    """Structured error carried in the `error` member of a JSON-RPC response."""

    name: str = "JSONRPCError"
    code: int
    message: str
    data: str | None = None

    def envelope(self) -> dict[str, Any]:
        return self.model_dump()


# -------------------- Jobs -------------------- #


class JobData(BaseModel):
    """Handle for a job placed on the remote queue."""

    id: str
    type: str
    status: JobStatus = "queued"
    owner: str | None = None
    queuetime: str = Field(default_factory=_utcnow)
    completetime: str | None = None
    jobdata: dict[str, Any] = Field(default_factory=dict)


# -------------------- Method Parameters -------------------- #


class ReactionSensitivityParams(BaseModel):
    """Named parameters of `reaction_sensitivity_analysis`.

    Either `reactions_to_delete`, `gapfill_solution_id` or
    `delete_essential_reactions` must be present for the job to do anything;
    the CLI enforces this before the call and the server again on receipt.
    """

    model: str
    model_ws: str | None = None
    workspace: str | None = None
    rxnsens_uid: str | None = None
    media: str | None = None
    media_ws: str | None = None
    objective_reaction: str | None = None
    objective_fraction: float | None = None
    objective_sensitivity_only: bool | None = None
    delete_essential_reactions: bool | None = None
    delete_noncontributing_reactions: bool | None = None
    reactions_to_delete: list[str] | None = None
    gapfill_solution_id: str | None = None
    rxnprobs_id: str | None = None
    rxnprobs_ws: str | None = None

    def has_targets(self) -> bool:
        return bool(
            self.reactions_to_delete
            or self.gapfill_solution_id
            or self.delete_essential_reactions
        )


class DeleteNoncontributingParams(BaseModel):
    """Named parameters of `delete_noncontributing_reactions`."""

    rxnsens_uid: str
    workspace: str | None = None
    rxn_sensitivity_ws: str | None = None
    new_model_uid: str | None = None
    new_model_ws: str | None = None


__all__ = [
    "DeleteNoncontributingParams",
    "JobData",
    "JobStatus",
    "ReactionSensitivityParams",
    "RpcError",
    "RpcRequest",
]
