"""HTTP surface for the JSON-RPC server (FastAPI) and the `fba-server` command."""
from __future__ import annotations

from typing import Annotated

import orjson
import typer
import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.concurrency import run_in_threadpool

from fbaservices.runtime import bootstrap, load_deploy_config
from fbaservices.server.dispatch import JsonRpcServer
from fbaservices.server.impl import VERSION, FbaModelServicesImpl


def build_server() -> JsonRpcServer:
    impl = FbaModelServicesImpl(load_deploy_config())
    return JsonRpcServer({"fbaModelServices": impl})


def create_app(server: JsonRpcServer | None = None) -> FastAPI:
    rpc_server = server or build_server()
    app = FastAPI(title="fbaModelServices", version=VERSION)

    @app.post("/")
    async def rpc(request: Request) -> Response:
        body = await request.body()
        response = await run_in_threadpool(
            rpc_server.handle,
            body,
            client_ip=request.client.host if request.client else None,
            token=request.headers.get("Authorization"),
        )
        status = 500 if "error" in response else 200
        return Response(orjson.dumps(response), status_code=status, media_type="application/json")

    return app


cli = typer.Typer(help="Serve fbaModelServices over JSON-RPC")


@cli.command()
def serve(
    host: Annotated[str, typer.Option(help="Bind address")] = "127.0.0.1",
    port: Annotated[int, typer.Option(help="Port")] = 7058,
) -> None:
    bootstrap()
    uvicorn.run(create_app(), host=host, port=port)


def main() -> None:  # pragma: no cover
    cli()


if __name__ == "__main__":  # pragma: no cover
    main()
