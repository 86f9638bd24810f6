"""Lifecycle Controller — starts and stops configured services by port.

Processes are launched detached and forgotten: no handle is kept, so stop
always goes back through the prober and kills whatever owns the port.
"""

from __future__ import annotations

import asyncio
import logging
import os
import signal

from .errors import (
    AlreadyRunning,
    DashboardError,
    DirectoryMissing,
    LaunchFailed,
    NothingRunning,
    ServiceNotFound,
)
from .models import Result, ServiceDescriptor
from .prober import PortProber
from .registry import ServiceRegistry

log = logging.getLogger(__name__)


class LifecycleController:
    def __init__(
        self,
        registry: ServiceRegistry,
        prober: PortProber,
        *,
        settle_delay: float = 2.0,
        stop_confirm_delay: float = 0.5,
    ) -> None:
        self.registry = registry
        self.prober = prober
        self.settle_delay = settle_delay
        self.stop_confirm_delay = stop_confirm_delay

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def start(self, port: int) -> Result:
        """Launch the service configured for `port`.

        A success only means the command was launched; ``started`` tells
        whether the port was bound once the settling delay had passed.
        """
        try:
            descriptor = self._find(port)
            cwd = self._existing_dir(descriptor)

            status = await self.prober.probe(port)
            if status.running:
                raise AlreadyRunning(port, status.pid)

            argv = descriptor.start_cmd.split()
            if not argv:
                raise LaunchFailed(f"Service '{descriptor.name}' has an empty start command")

            env = os.environ.copy()
            env["PORT"] = str(port)

            log.info("Starting %s in %s: %s", descriptor.name, cwd, descriptor.start_cmd)
            try:
                await self._spawn(argv, cwd, env)
            except OSError as exc:
                raise LaunchFailed(f"Failed to start {descriptor.name}: {exc}") from exc
        except DashboardError as exc:
            log.info("Start on port %d refused: %s", port, exc)
            return Result.failure(exc, port=port)

        await asyncio.sleep(self.settle_delay)
        status = await self.prober.probe(port)

        if status.running:
            message = f"Started {descriptor.name} on port {port}"
        else:
            message = f"Start command sent, but {descriptor.name} may still be initializing"
        log.info("%s", message)
        return Result(
            success=True,
            message=message,
            port=port,
            service=descriptor.name,
            pid=status.pid,
            started=status.running,
        )

    async def stop(self, port: int) -> Result:
        """Kill every process listening on `port`.  No graceful shutdown."""
        status = await self.prober.probe(port)
        if not status.running:
            return Result.failure(NothingRunning(port), port=port)

        for pid in status.pids:
            self._kill(pid)
        log.info("Sent SIGKILL to %s (port %d)", ", ".join(map(str, status.pids)), port)

        result = Result(
            success=True,
            message=f"Stopped service on port {port}",
            port=port,
            pid=status.pid,
        )
        if self.stop_confirm_delay > 0:
            await asyncio.sleep(self.stop_confirm_delay)
            after = await self.prober.probe(port)
            result.stopped = not after.running
            if after.running:
                result.message = (
                    f"Kill signal sent, but port {port} is still in use (pid: {after.pid})"
                )
        return result

    async def open_directory(self, port: int, command: str) -> Result:
        """Open the service's directory with an external tool (editor, file browser)."""
        try:
            descriptor = self._find(port)
            cwd = self._existing_dir(descriptor)
            argv = [*command.split(), cwd]
            try:
                await self._spawn(argv, cwd, os.environ.copy())
            except OSError as exc:
                raise LaunchFailed(f"Failed to run {command}: {exc}") from exc
        except DashboardError as exc:
            return Result.failure(exc, port=port)

        log.info("Opened %s with %s", cwd, command)
        return Result(
            success=True,
            message=f"Opened {cwd} with {command}",
            port=port,
            service=descriptor.name,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _find(self, port: int) -> ServiceDescriptor:
        descriptor = self.registry.find_by_port(port)
        if descriptor is None:
            raise ServiceNotFound(port)
        return descriptor

    @staticmethod
    def _existing_dir(descriptor: ServiceDescriptor) -> str:
        cwd = descriptor.expanded_path
        if not os.path.isdir(cwd):
            raise DirectoryMissing(cwd)
        return cwd

    async def _spawn(self, argv: list[str], cwd: str, env: dict[str, str]) -> None:
        # New session so the child outlives us and ignores our terminal's signals.
        # The handle is dropped on purpose; asyncio's child watcher reaps it.
        await asyncio.create_subprocess_exec(
            *argv,
            cwd=cwd,
            env=env,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.DEVNULL,
            preexec_fn=os.setsid,
        )

    def _kill(self, pid: int) -> None:
        try:
            os.kill(pid, signal.SIGKILL)
        except ProcessLookupError:
            pass
        except PermissionError:
            log.warning("Not permitted to kill pid %d", pid)
