"""Pytest configuration and shared fixtures."""
import httpx
import orjson
import pytest

from fbaservices.clients.fba_client import FbaModelServicesClient
from fbaservices.runtime import AppContext
from fbaservices.server.context import ServiceLogger
from fbaservices.server.dispatch import JsonRpcServer
from fbaservices.server.impl import FbaModelServicesImpl


@pytest.fixture(autouse=True)
def isolated_runtime(tmp_path, monkeypatch):
    """Point configuration at an empty temp file and reset the app context."""
    monkeypatch.setenv("FBA_CONFIG", str(tmp_path / "fbaservices.yaml"))
    monkeypatch.setenv("FBA_URL", "http://fba.test/rpc")
    for var in ("FBA_WORKSPACE", "KB_AUTH_TOKEN", "KB_DEPLOYMENT_CONFIG", "KB_SERVICE_NAME"):
        monkeypatch.delenv(var, raising=False)
    AppContext.reset()
    yield
    AppContext.reset()


@pytest.fixture
def impl():
    return FbaModelServicesImpl()


@pytest.fixture
def server(impl):
    loggers = {"userlog": ServiceLogger("test"), "serverlog": ServiceLogger("test")}
    return JsonRpcServer({"fbaModelServices": impl}, loggers=loggers)


@pytest.fixture
def sent_requests():
    return []


@pytest.fixture
def client(server, sent_requests):
    """Client whose HTTP transport feeds the in-process server."""

    def handler(request: httpx.Request) -> httpx.Response:
        sent_requests.append(orjson.loads(request.content))
        body = server.handle(request.content, client_ip="127.0.0.1")
        status = 500 if "error" in body else 200
        return httpx.Response(status, content=orjson.dumps(body))

    return FbaModelServicesClient("http://fba.test/rpc", transport=httpx.MockTransport(handler))
