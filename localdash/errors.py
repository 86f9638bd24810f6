"""Error kinds raised inside the core and turned into Results at its edge."""

from __future__ import annotations

import enum


class ErrorKind(str, enum.Enum):
    SERVICE_NOT_FOUND = "service_not_found"
    DIRECTORY_MISSING = "directory_missing"
    ALREADY_RUNNING = "already_running"
    NOTHING_RUNNING = "nothing_running"
    LAUNCH_FAILED = "launch_failed"
    CONFIG_IO_FAILURE = "config_io_failure"


class DashboardError(Exception):
    kind: ErrorKind
    status_code: int = 500


class ServiceNotFound(DashboardError):
    kind = ErrorKind.SERVICE_NOT_FOUND
    status_code = 404

    def __init__(self, port: int) -> None:
        super().__init__(f"No service configured for port {port}")
        self.port = port


class DirectoryMissing(DashboardError):
    kind = ErrorKind.DIRECTORY_MISSING

    def __init__(self, path: str) -> None:
        super().__init__(f"Directory not found: {path}")
        self.path = path


class AlreadyRunning(DashboardError):
    kind = ErrorKind.ALREADY_RUNNING
    status_code = 409

    def __init__(self, port: int, pid: int | None) -> None:
        super().__init__(f"Port {port} already in use (pid: {pid})")
        self.port = port
        self.pid = pid


class NothingRunning(DashboardError):
    kind = ErrorKind.NOTHING_RUNNING
    status_code = 409

    def __init__(self, port: int) -> None:
        super().__init__(f"Nothing running on port {port}")
        self.port = port


class LaunchFailed(DashboardError):
    kind = ErrorKind.LAUNCH_FAILED


class ConfigIOFailure(DashboardError):
    kind = ErrorKind.CONFIG_IO_FAILURE
