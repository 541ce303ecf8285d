"""fbaModelServices method implementations served in-process.

The analyses themselves run on the remote compute cluster; the methods here
validate their input and place a job on the queue, returning its handle.
"""
from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from fbaservices.domain.models import DeleteNoncontributingParams, ReactionSensitivityParams
from fbaservices.server.context import ServerContext
from fbaservices.server.errors import ServiceError
from fbaservices.server.jobs import JobQueue

VERSION = "3.0.0"


def _validate(model: Any, params: Any) -> Any:
    if not isinstance(params, dict):
        raise ServiceError("Input parameters must be a mapping")
    try:
        return model.model_validate(params)
    except ValidationError as exc:
        raise ServiceError(f"Invalid input parameters: {exc.error_count()} error(s)", str(exc)) from exc


class FbaModelServicesImpl:
    """Handlers for the `fbaModelServices` package.

    Each public method takes the call context followed by the positional
    arguments of the request and returns a single value.
    """

    def __init__(self, config: dict[str, Any] | None = None, queue: JobQueue | None = None) -> None:
        self.config = config or {}
        self.queue = queue or JobQueue()

    def version(self, ctx: ServerContext) -> str:
        return VERSION

    def reaction_sensitivity_analysis(self, ctx: ServerContext, input_params: Any) -> dict[str, Any]:
        params = _validate(ReactionSensitivityParams, input_params)
        if not params.has_targets():
            raise ServiceError(
                "Must specify either a list of reactions to delete or a gapfill solution ID"
            )
        job = self.queue.submit(
            "ReactionSensitivityAnalysis",
            owner=ctx.user_id,
            jobdata=params.model_dump(exclude_none=True),
        )
        ctx.log_info(f"queued {job.type} job {job.id} for model {params.model}")
        return job.model_dump()

    def delete_noncontributing_reactions(self, ctx: ServerContext, input_params: Any) -> dict[str, Any]:
        params = _validate(DeleteNoncontributingParams, input_params)
        job = self.queue.submit(
            "DeleteNoncontributingReactions",
            owner=ctx.user_id,
            jobdata=params.model_dump(exclude_none=True),
        )
        ctx.log_info(f"queued {job.type} job {job.id} for {params.rxnsens_uid}")
        return job.model_dump()

    def jobs_done(self, ctx: ServerContext, input_params: Any) -> dict[str, Any]:
        if not isinstance(input_params, dict) or not input_params.get("jobid"):
            raise ServiceError("jobs_done requires a 'jobid'")
        job_id = input_params["jobid"]
        if self.queue.get(job_id) is None:
            raise ServiceError(f"Job {job_id} not found")
        ctx.log_debug(f"marking {job_id} done")
        return self.queue.complete(job_id).model_dump()
