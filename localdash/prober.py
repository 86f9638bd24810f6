"""Port Prober — asks the OS which processes listen on a port."""

from __future__ import annotations

import asyncio
import logging

from .models import RuntimeStatus

log = logging.getLogger(__name__)


class PortProber:
    """Point-in-time listener check backed by ``lsof``.

    Any inspection failure (lsof missing, unparsable output, timeout) is
    logged and reported as "not running".  Nothing is retried or cached.
    """

    def __init__(self, timeout: float = 5.0, lsof: str = "lsof") -> None:
        self.timeout = timeout
        self.lsof = lsof

    async def probe(self, port: int) -> RuntimeStatus:
        return RuntimeStatus.from_pids(await self.owners(port))

    async def owners(self, port: int) -> list[int]:
        """Return the pids listening on `port`, in the order lsof reports them."""
        try:
            output = await self._run_lsof(port)
        except (OSError, asyncio.TimeoutError) as exc:
            log.warning("Port probe for %d failed: %r", port, exc)
            return []

        pids: list[int] = []
        for line in output.splitlines():
            line = line.strip()
            if not line:
                continue
            try:
                pid = int(line)
            except ValueError:
                log.warning("Unexpected lsof output for port %d: %r", port, line)
                return []
            if pid not in pids:
                pids.append(pid)
        return pids

    async def _run_lsof(self, port: int) -> str:
        # Exit status 1 with empty output just means nothing is listening.
        process = await asyncio.create_subprocess_exec(
            self.lsof, "-nP", f"-iTCP:{port}", "-sTCP:LISTEN", "-t",
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.DEVNULL,
        )
        try:
            stdout, _ = await asyncio.wait_for(process.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            try:
                process.kill()
            except ProcessLookupError:
                pass
            await process.wait()
            raise
        return stdout.decode("utf-8", errors="replace")
