"""MCP Server exposing the dashboard as tools over stdio or HTTP."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError

from localdash import formatter
from localdash.dashboard import Dashboard
from localdash.errors import DashboardError

log = logging.getLogger(__name__)

# Default port for the streamable HTTP transport
DEFAULT_PORT = 8902


@dataclass(frozen=True)
class ToolReply:
    text: str
    is_error: bool = False


class DashboardTools:
    """Tool implementations, independent of the MCP transport.

    Every method returns a ToolReply; failures are text with ``is_error``
    set rather than exceptions.
    """

    def __init__(self, dashboard: Dashboard) -> None:
        self.dashboard = dashboard

    async def list_services(self, filter: str | None = "all") -> ToolReply:
        label = filter or "all"
        views = await self.dashboard.status.get_all(label)
        return ToolReply(formatter.format_service_list(views, label))

    async def check_port(self, port: int) -> ToolReply:
        status = await self.dashboard.prober.probe(port)
        descriptor = self.dashboard.registry.find_by_port(port)
        return ToolReply(formatter.format_port_check(port, status, descriptor))

    async def start_service(self, port: int) -> ToolReply:
        result = await self.dashboard.lifecycle.start(port)
        return ToolReply(formatter.format_start(result), is_error=not result.success)

    async def stop_service(self, port: int) -> ToolReply:
        result = await self.dashboard.lifecycle.stop(port)
        return ToolReply(formatter.format_stop(result), is_error=not result.success)

    async def get_service_info(self, port: int) -> ToolReply:
        view = await self.dashboard.status.get_one(port)
        if view is None:
            return ToolReply(f"No service configured for port {port}", is_error=True)
        return ToolReply(formatter.format_service_info(view))

    async def quick_status(self) -> ToolReply:
        summary = await self.dashboard.status.quick_status()
        return ToolReply(formatter.format_quick_status(summary))


async def _reply(call) -> str:
    """Await a tool call and turn error replies into MCP error results."""
    try:
        reply = await call
    except DashboardError as exc:
        log.warning("Tool call failed: %s", exc)
        raise ToolError(f"Error: {exc}") from exc
    except Exception as exc:
        log.exception("Tool call crashed")
        raise ToolError(f"Error: {exc}") from exc
    if reply.is_error:
        raise ToolError(reply.text)
    return reply.text


def create_server(dashboard: Dashboard, port: int = DEFAULT_PORT) -> FastMCP:
    """Create and configure the localhost dashboard MCP server."""

    tools = DashboardTools(dashboard)

    mcp = FastMCP(
        name="localhost-dashboard",
        instructions=(
            "Reports and controls local development services (dev servers, APIs). "
            "Use quick_status or list_services to see what is configured and running, "
            "get_service_info for details, and start_service / stop_service by port."
        ),
        host="127.0.0.1",
        port=port,
        stateless_http=True,
    )

    # ------------------------------------------------------------------
    # Tool: list_services
    # ------------------------------------------------------------------
    @mcp.tool()
    async def list_services(filter: str = "all") -> str:
        """List all configured local development services with their current status.

        Args:
            filter: "all", "running", "stopped", or a service type such as
                "frontend", "backend" or "api".
        """
        return await _reply(tools.list_services(filter))

    # ------------------------------------------------------------------
    # Tool: check_port
    # ------------------------------------------------------------------
    @mcp.tool()
    async def check_port(port: int) -> str:
        """Check if a specific port has a service listening on it.

        Args:
            port: The port number to check.
        """
        return await _reply(tools.check_port(port))

    # ------------------------------------------------------------------
    # Tool: start_service
    # ------------------------------------------------------------------
    @mcp.tool()
    async def start_service(port: int) -> str:
        """Start a configured local development service by its port number.

        Waits a couple of seconds and reports whether the port came up.  A
        service that is slow to boot is reported as still initializing;
        call check_port later to confirm.

        Args:
            port: The port number of the service to start.
        """
        return await _reply(tools.start_service(port))

    # ------------------------------------------------------------------
    # Tool: stop_service
    # ------------------------------------------------------------------
    @mcp.tool()
    async def stop_service(port: int) -> str:
        """Stop whatever is listening on a port (SIGKILL, no graceful shutdown).

        Args:
            port: The port number of the service to stop.
        """
        return await _reply(tools.stop_service(port))

    # ------------------------------------------------------------------
    # Tool: get_service_info
    # ------------------------------------------------------------------
    @mcp.tool()
    async def get_service_info(port: int) -> str:
        """Get details about a service: path, start command, type and GitHub repo.

        Args:
            port: The port number of the service.
        """
        return await _reply(tools.get_service_info(port))

    # ------------------------------------------------------------------
    # Tool: quick_status
    # ------------------------------------------------------------------
    @mcp.tool()
    async def quick_status() -> str:
        """Get a quick summary of running vs stopped services."""
        return await _reply(tools.quick_status())

    return mcp
