from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any

from .errors import DashboardError, ErrorKind

# Type tags the dashboard knows about even before any service uses them
KNOWN_TYPES = ("frontend", "backend", "api")

# Keys with a dedicated field on ServiceDescriptor; anything else is kept in `extra`
_DESCRIPTOR_KEYS = ("name", "port", "path", "startCmd", "type", "github")


def expand_path(path: str) -> str:
    """Expand a leading ``~`` to the user's home directory."""
    return os.path.expanduser(path)


def service_url(port: int) -> str:
    return f"http://localhost:{port}"


# ---------------------------------------------------------------------------
# Persisted descriptor
# ---------------------------------------------------------------------------

@dataclass
class ServiceDescriptor:
    name: str
    port: int
    path: str
    start_cmd: str
    type: str | None = None
    github: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)
    # Optional keys the JSON had, even when null or empty; written back as given
    given: frozenset[str] = field(default=frozenset(), repr=False, compare=False)

    @property
    def expanded_path(self) -> str:
        return expand_path(self.path)

    @classmethod
    def from_dict(cls, data: Any) -> ServiceDescriptor:
        """Build a descriptor from its JSON form (``startCmd`` in camelCase).

        Raises ValueError when a required field is missing or malformed.
        """
        if not isinstance(data, dict):
            raise ValueError("Service entry must be a JSON object")

        name = data.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ValueError("Service 'name' must be a non-empty string")

        port = data.get("port")
        # bool is an int subclass, but `"port": true` is never intended
        if isinstance(port, bool) or not isinstance(port, int):
            raise ValueError(f"Service '{name}' has no integer 'port'")
        if not 1 <= port <= 65535:
            raise ValueError(f"Service '{name}' port {port} is out of range")

        path = data.get("path")
        if not isinstance(path, str) or not path:
            raise ValueError(f"Service '{name}' has no 'path'")

        start_cmd = data.get("startCmd")
        if not isinstance(start_cmd, str):
            raise ValueError(f"Service '{name}' has no 'startCmd'")

        for key in ("type", "github"):
            if data.get(key) is not None and not isinstance(data[key], str):
                raise ValueError(f"Service '{name}' '{key}' must be a string")

        return cls(
            name=name,
            port=port,
            path=path,
            start_cmd=start_cmd,
            type=data.get("type"),
            github=data.get("github"),
            extra={k: v for k, v in data.items() if k not in _DESCRIPTOR_KEYS},
            given=frozenset(k for k in ("type", "github") if k in data),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "port": self.port,
            "path": self.path,
            "startCmd": self.start_cmd,
        }
        for key in ("type", "github"):
            value = getattr(self, key)
            if value is not None or key in self.given:
                data[key] = value
        data.update(self.extra)
        return data


# ---------------------------------------------------------------------------
# Derived, per-request state
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RuntimeStatus:
    running: bool
    pid: int | None = None
    pids: tuple[int, ...] = ()

    @classmethod
    def from_pids(cls, pids: list[int]) -> RuntimeStatus:
        if not pids:
            return cls(running=False)
        return cls(running=True, pid=pids[0], pids=tuple(pids))

    def to_dict(self) -> dict[str, Any]:
        return {"running": self.running, "pid": self.pid}


@dataclass(frozen=True)
class ServiceView:
    descriptor: ServiceDescriptor
    status: RuntimeStatus

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def port(self) -> int:
        return self.descriptor.port

    @property
    def running(self) -> bool:
        return self.status.running

    @property
    def url(self) -> str | None:
        return service_url(self.port) if self.running else None

    def to_dict(self) -> dict[str, Any]:
        data = self.descriptor.to_dict()
        data.setdefault("type", None)
        data.setdefault("github", None)
        data.update(
            running=self.status.running,
            pid=self.status.pid,
            url=self.url,
        )
        return data


@dataclass(frozen=True)
class QuickStatus:
    running: list[ServiceView]
    stopped: list[ServiceView]

    @property
    def total(self) -> int:
        return len(self.running) + len(self.stopped)


# ---------------------------------------------------------------------------
# Operation results
# ---------------------------------------------------------------------------

@dataclass
class Result:
    """Outcome of a lifecycle operation.

    Core operations never raise across the front-end boundary; a failure is
    a Result with ``success=False`` and ``error`` set.
    """

    success: bool
    message: str
    error: ErrorKind | None = None
    status_code: int = 200
    port: int | None = None
    service: str | None = None
    pid: int | None = None
    started: bool | None = None
    stopped: bool | None = None

    @classmethod
    def failure(cls, exc: DashboardError, port: int | None = None) -> Result:
        return cls(
            success=False,
            message=str(exc),
            error=exc.kind,
            status_code=exc.status_code,
            port=port,
            pid=getattr(exc, "pid", None),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"success": self.success}
        if self.success:
            data["message"] = self.message
        else:
            data["error"] = self.message
            data["kind"] = self.error.value if self.error else None
        for key in ("service", "port", "pid", "started", "stopped"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data
