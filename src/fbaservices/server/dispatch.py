"""JSON-RPC dispatch: method resolution, invocation and error envelopes.

Request cycle (`JsonRpcServer.handle`):
    * decode the body (parse error -32700, malformed request -32600)
    * resolve ``<package>.<method>`` against the allow-list and the registered
      handler instances (`NoSuchMethodError`, -32601)
    * invoke the handler with the call context and the positional params
    * wrap single-return methods as ``[result]``; handler failures become a
      -32603 error whose `data` carries the traceback, logged with caller identity
"""
from __future__ import annotations

import logging
import re
import traceback
from dataclasses import dataclass
from typing import Any

import orjson
from pydantic import ValidationError

from fbaservices.domain.models import RpcError, RpcRequest
from fbaservices.runtime import DEFAULT_SERVICE, get_service_name, load_deploy_config
from fbaservices.server.context import ERR, INFO, ServerContext, ServiceLogger
from fbaservices.server.errors import (
    INTERNAL_ERROR,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    JsonRpcError,
    NoSuchMethodError,
    ServiceError,
)

logger = logging.getLogger(__name__)

RETURN_COUNTS: dict[str, int] = {
    name: 1
    for name in (
        "get_models",
        "get_fbas",
        "get_gapfills",
        "get_gapgens",
        "get_reactions",
        "get_compounds",
        "get_alias",
        "get_aliassets",
        "get_media",
        "get_biochemistry",
        "get_ETCDiagram",
        "import_probanno",
        "genome_object_to_workspace",
        "genome_to_workspace",
        "add_feature_translation",
        "genome_to_fbamodel",
        "import_fbamodel",
        "export_fbamodel",
        "export_object",
        "export_genome",
        "adjust_model_reaction",
        "adjust_biomass_reaction",
        "addmedia",
        "export_media",
        "runfba",
        "export_fba",
        "import_phenotypes",
        "simulate_phenotypes",
        "add_media_transporters",
        "export_phenotypeSimulationSet",
        "integrate_reconciliation_solutions",
        "queue_runfba",
        "queue_gapfill_model",
        "queue_gapgen_model",
        "queue_wildtype_phenotype_reconciliation",
        "queue_reconciliation_sensitivity_analysis",
        "queue_combine_wildtype_phenotype_reconciliation",
        "jobs_done",
        "run_job",
        "set_cofactors",
        "find_reaction_synonyms",
        "role_to_reactions",
        "reaction_sensitivity_analysis",
        "filter_iterative_solutions",
        "delete_noncontributing_reactions",
        "fasta_to_ProteinSet",
        "ProteinSet_to_Genome",
        "fasta_to_TranscriptSet",
        "TranscriptSet_to_Genome",
        "fasta_to_ContigSet",
        "ContigSet_to_Genome",
        "annotate_workspace_Genome",
        "probanno_to_genome",
        "get_mapping",
        "adjust_mapping_role",
        "adjust_mapping_complex",
        "adjust_mapping_subsystem",
        "get_template_model",
        "import_template_fbamodel",
        "adjust_template_reaction",
        "adjust_template_biomass",
        "add_stimuli",
        "import_regulatory_model",
        "compare_models",
        "compare_genomes",
        "import_metagenome_annotation",
        "models_to_community_model",
        "metagenome_to_fbamodels",
        "version",
    )
}

_METHOD_RE = re.compile(r"^(\S+)\.([^.]+)$")


@dataclass(slots=True)
class MethodInfo:
    module: Any
    method: str
    modname: str


def build_loggers(service_name: str) -> dict[str, ServiceLogger]:
    deploy = load_deploy_config()
    log_file = deploy.get("log_file")
    userlog = ServiceLogger(service_name, log_level=int(deploy.get("log_level", INFO)), log_file=log_file)
    serverlog = ServiceLogger(service_name, log_level=INFO, log_file=userlog.log_file)
    return {"userlog": userlog, "serverlog": serverlog}


class JsonRpcServer:
    def __init__(
        self,
        instance_dispatch: dict[str, Any],
        *,
        service_name: str | None = None,
        return_counts: dict[str, int] | None = None,
        loggers: dict[str, ServiceLogger] | None = None,
    ) -> None:
        self.instance_dispatch = dict(instance_dispatch)
        self.return_counts = dict(return_counts if return_counts is not None else RETURN_COUNTS)
        self.valid_methods = frozenset(self.return_counts)
        self.service_name = service_name or get_service_name() or DEFAULT_SERVICE
        self.loggers = loggers or build_loggers(self.service_name)

    def log(self, level: int, ctx: ServerContext, message: str | list[str]) -> None:
        self.loggers["serverlog"].log_message(
            level, message, ctx.user_id, ctx.module, ctx.method, ctx.call_id, ctx.client_ip
        )

    # ---- resolution ----

    def get_method(self, full_name: str) -> MethodInfo:
        match = _METHOD_RE.match(full_name or "")
        if not match:
            raise NoSuchMethodError(
                f"'{full_name}' is not a valid method. It must contain a package name,"
                " followed by a period, followed by a method name."
            )
        package, method = match.groups()
        if method not in self.valid_methods:
            raise NoSuchMethodError(
                f"'{method}' is not a valid method in service {self.service_name}."
            )
        module = self.instance_dispatch.get(package)
        if module is None:
            raise NoSuchMethodError(f"There is no method package named '{package}'.")
        if not callable(getattr(module, method, None)):
            raise NoSuchMethodError(
                f"There is no method named '{method}' in the '{package}' package."
            )
        return MethodInfo(module=module, method=method, modname=package)

    # ---- invocation ----

    def call_method(self, request: RpcRequest, info: MethodInfo, ctx: ServerContext) -> list[Any]:
        handler = getattr(info.module, info.method)
        try:
            self.log(INFO, ctx, "start method")
            output = handler(ctx, *request.params)
            result = self._shape(info.method, output)
            self.log(INFO, ctx, "end method")
        except ServiceError as err:
            error = RpcError(
                code=INTERNAL_ERROR,
                message=err.message,
                data=err.trace or traceback.format_exc(),
            )
            raise JsonRpcError(error, ctx) from err
        except Exception as err:
            trace = traceback.format_exc()
            error = RpcError(
                code=INTERNAL_ERROR,
                message=str(err) or type(err).__name__,
                data=trace,
            )
            raise JsonRpcError(error, ctx) from err
        return result

    def _shape(self, method: str, output: Any) -> list[Any]:
        count = self.return_counts.get(method, 1)
        if count == 1:
            return [output]
        if count == 0:
            return []
        return list(output)

    def handle(
        self,
        body: bytes | str | dict[str, Any],
        *,
        client_ip: str | None = None,
        token: str | None = None,
        user_id: str | None = None,
    ) -> dict[str, Any]:
        """Run one request through resolution and invocation; never raises."""
        envelope: dict[str, Any] = {"version": "1.1", "id": None}
        try:
            data = body if isinstance(body, dict) else orjson.loads(body)
        except orjson.JSONDecodeError as exc:
            return self._error(envelope, RpcError(code=PARSE_ERROR, message=f"Parse error: {exc}"))
        if not isinstance(data, dict):
            return self._error(envelope, RpcError(code=INVALID_REQUEST, message="Invalid Request"))
        if "jsonrpc" in data:
            envelope = {"jsonrpc": str(data["jsonrpc"]), "id": data.get("id")}
        else:
            envelope = {"version": str(data.get("version", "1.1")), "id": data.get("id")}
        try:
            request = RpcRequest.model_validate(
                {k: v for k, v in data.items() if k in RpcRequest.model_fields}
            )
        except ValidationError as exc:
            return self._error(
                envelope, RpcError(code=INVALID_REQUEST, message="Invalid Request", data=str(exc))
            )
        try:
            info = self.get_method(request.method)
        except NoSuchMethodError as exc:
            logger.info("rejected %s from %s: %s", request.method, client_ip, exc)
            return self._error(
                envelope, RpcError(code=METHOD_NOT_FOUND, message=str(exc))
            )
        ctx = ServerContext(
            self.loggers["userlog"],
            client_ip=client_ip,
            user_id=user_id,
            authenticated=user_id is not None,
            token=token,
            module=info.modname,
            method=info.method,
            call_id=request.id,
        )
        try:
            result = self.call_method(request, info, ctx)
        except JsonRpcError as exc:
            lines = [exc.error.message, *(exc.error.data or "").splitlines()]
            self.log(ERR, exc.context, lines)
            return self._error(envelope, exc.error)
        return {**envelope, "result": result}

    @staticmethod
    def _error(envelope: dict[str, Any], error: RpcError) -> dict[str, Any]:
        return {**envelope, "error": error.envelope()}


__all__ = ["RETURN_COUNTS", "JsonRpcServer", "MethodInfo", "build_loggers"]
