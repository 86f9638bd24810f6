"""Run the dashboard MCP server.

Usage:
    python -m localdash.tools [--transport stdio|http] [--port PORT] [--services FILE]

stdio is what an assistant launches per session; http runs a persistent
daemon at http://127.0.0.1:PORT/mcp that several sessions can share.
"""

import argparse
import dataclasses
import logging
from pathlib import Path

import uvicorn

from localdash.config import Config
from localdash.dashboard import Dashboard
from localdash.tools.server import DEFAULT_PORT, create_server

log = logging.getLogger(__name__)


def _run_http(dashboard: Dashboard, port: int) -> None:
    server = create_server(dashboard, port=port)
    log.info("Starting localdash MCP server on http://127.0.0.1:%d/mcp", port)
    uvicorn.run(server.streamable_http_app(), host="127.0.0.1", port=port, log_level="info")


def main() -> None:
    parser = argparse.ArgumentParser(description="Localhost dashboard MCP server")
    parser.add_argument(
        "--transport", choices=("stdio", "http"), default="stdio",
        help="MCP transport (default: stdio)",
    )
    parser.add_argument(
        "--port", type=int, default=DEFAULT_PORT,
        help=f"Port for the http transport (default: {DEFAULT_PORT})",
    )
    parser.add_argument(
        "--services", type=Path, default=None,
        help="Services config file (default: $LOCALDASH_SERVICES or ./services.json)",
    )
    args = parser.parse_args()

    # stdout carries the MCP protocol on stdio — logs must go to stderr,
    # which is basicConfig's default stream.
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [localdash-mcp] %(levelname)s %(message)s",
    )

    config = Config.from_env()
    if args.services is not None:
        config = dataclasses.replace(config, services_path=args.services)
    dashboard = Dashboard.from_config(config)
    log.info("Using services config %s", config.services_path)

    if args.transport == "stdio":
        create_server(dashboard).run(transport="stdio")
    else:
        _run_http(dashboard, args.port)


if __name__ == "__main__":
    main()
