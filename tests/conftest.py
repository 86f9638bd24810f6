"""Shared fixtures: a temp services file, a fake prober, and a controller
that records spawns and kills instead of touching real processes."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from localdash.config import Config
from localdash.dashboard import Dashboard
from localdash.lifecycle import LifecycleController
from localdash.models import RuntimeStatus
from localdash.registry import ServiceRegistry
from localdash.status import StatusAggregator


class FakeProber:
    """Answers probes from a port -> pids table."""

    def __init__(self, bound: dict[int, list[int]] | None = None) -> None:
        self.bound: dict[int, list[int]] = dict(bound or {})
        self.calls: list[int] = []

    async def probe(self, port: int) -> RuntimeStatus:
        self.calls.append(port)
        return RuntimeStatus.from_pids(list(self.bound.get(port, [])))


class RecordingController(LifecycleController):
    """Controller whose spawns and kills are recorded, not executed.

    `bind_on_spawn` makes a spawned service appear on its port (pid 4242),
    `unbind_on_kill` frees a port once every owner has been killed.
    """

    def __init__(self, *args, bind_on_spawn: bool = False, unbind_on_kill: bool = True,
                 spawn_error: OSError | None = None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.bind_on_spawn = bind_on_spawn
        self.unbind_on_kill = unbind_on_kill
        self.spawn_error = spawn_error
        self.spawned: list[tuple[list[str], str, dict[str, str]]] = []
        self.killed: list[int] = []

    async def _spawn(self, argv, cwd, env):
        if self.spawn_error is not None:
            raise self.spawn_error
        self.spawned.append((argv, cwd, env))
        if self.bind_on_spawn and "PORT" in env:
            self.prober.bound[int(env["PORT"])] = [4242]

    def _kill(self, pid):
        self.killed.append(pid)
        if self.unbind_on_kill:
            for port, pids in list(self.prober.bound.items()):
                remaining = [p for p in pids if p not in self.killed]
                if remaining:
                    self.prober.bound[port] = remaining
                else:
                    del self.prober.bound[port]


def write_services(path: Path, services: list[dict]) -> Path:
    path.write_text(json.dumps({"services": services}, indent=2))
    return path


@pytest.fixture
def project_dir(tmp_path):
    d = tmp_path / "proj"
    d.mkdir()
    return d


@pytest.fixture
def services(project_dir):
    return [
        {"name": "web", "port": 3000, "path": str(project_dir), "startCmd": "npm run dev",
         "type": "frontend", "github": "https://github.com/example/web"},
        {"name": "api", "port": 4000, "path": str(project_dir), "startCmd": "node server.js",
         "type": "backend"},
        {"name": "docs", "port": 5000, "path": str(project_dir), "startCmd": "mkdocs serve",
         "type": "frontend"},
    ]


@pytest.fixture
def services_file(tmp_path, services):
    return write_services(tmp_path / "services.json", services)


@pytest.fixture
def registry(services_file):
    return ServiceRegistry(services_file)


@pytest.fixture
def prober():
    return FakeProber()


@pytest.fixture
def controller(registry, prober):
    return RecordingController(registry, prober, settle_delay=0, stop_confirm_delay=0)


@pytest.fixture
def dashboard(services_file, registry, prober, controller):
    config = Config(
        services_path=services_file,
        settle_delay=0,
        stop_confirm_delay=0,
        editor_command="code",
        file_browser_command="xdg-open",
    )
    return Dashboard(
        config=config,
        registry=registry,
        prober=prober,
        lifecycle=controller,
        status=StatusAggregator(registry, prober),
    )
