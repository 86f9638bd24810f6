import sys

import pytest
import uvicorn
from mcp.server.fastmcp import FastMCP
from starlette.applications import Starlette

from localdash import __main__ as dashboard_main
from localdash.tools import __main__ as mcp_main


@pytest.fixture
def served(monkeypatch):
    """Capture uvicorn.run calls instead of binding a socket."""
    calls = []

    def fake_run(app, **kwargs):
        calls.append((app, kwargs))

    monkeypatch.setattr(uvicorn, "run", fake_run)
    return calls


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, services_file):
    for name in ("LOCALDASH_HOST", "LOCALDASH_PORT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("LOCALDASH_SERVICES", str(services_file))


def test_mcp_http_transport_serves_streamable_app(served, monkeypatch):
    monkeypatch.setattr(sys, "argv", ["localdash-mcp", "--transport", "http", "--port", "8950"])

    mcp_main.main()

    assert len(served) == 1
    app, kwargs = served[0]
    assert isinstance(app, Starlette)
    assert kwargs["host"] == "127.0.0.1"
    assert kwargs["port"] == 8950


def test_mcp_stdio_transport(served, monkeypatch, tmp_path):
    transports = []
    monkeypatch.setattr(FastMCP, "run", lambda self, transport="stdio": transports.append(transport))
    monkeypatch.setattr(sys, "argv", ["localdash-mcp", "--services", str(tmp_path / "other.json")])

    mcp_main.main()

    assert transports == ["stdio"]
    assert served == []


def test_dashboard_main_applies_cli_overrides(served, monkeypatch):
    monkeypatch.setattr(sys, "argv", ["localdash", "--host", "0.0.0.0", "--port", "9100"])

    dashboard_main.main()

    app, kwargs = served[0]
    assert isinstance(app, Starlette)
    assert kwargs["host"] == "0.0.0.0"
    assert kwargs["port"] == 9100
