"""MCP tool server for the localhost dashboard.

Exposes six MCP tools:
  - list_services:    All configured services with running/stopped status
  - check_port:       Whether anything listens on a port
  - start_service:    Launch a configured service by port
  - stop_service:     Kill whatever listens on a port
  - get_service_info: Path, start command, type and repo of a service
  - quick_status:     Running vs stopped summary

Can run standalone:
    python -m localdash.tools
"""

from localdash.tools.server import DashboardTools, ToolReply, create_server

__all__ = ["DashboardTools", "ToolReply", "create_server"]
