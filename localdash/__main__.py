"""Run the localhost dashboard HTTP server.

Usage:
    python -m localdash [--host HOST] [--port PORT] [--services FILE]
"""

import argparse
import dataclasses
import logging
from pathlib import Path

import uvicorn

from .config import Config
from .dashboard import Dashboard
from .http_api import create_app

log = logging.getLogger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(description="Localhost dashboard server")
    parser.add_argument("--host", default=None, help="Bind address (default: $LOCALDASH_HOST or 127.0.0.1)")
    parser.add_argument("--port", type=int, default=None, help="Port (default: $LOCALDASH_PORT or 9999)")
    parser.add_argument(
        "--services", type=Path, default=None,
        help="Services config file (default: $LOCALDASH_SERVICES or ./services.json)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [localdash] %(levelname)s %(message)s",
    )

    config = Config.from_env()
    overrides = {
        key: value
        for key, value in (
            ("host", args.host), ("port", args.port), ("services_path", args.services),
        )
        if value is not None
    }
    config = dataclasses.replace(config, **overrides)

    app = create_app(Dashboard.from_config(config))

    log.info("Dashboard: http://localhost:%d", config.port)
    log.info("API:       http://localhost:%d/api/services", config.port)
    log.info("Services:  %s", config.services_path.resolve())

    uvicorn.run(app, host=config.host, port=config.port, log_level="info")


if __name__ == "__main__":
    main()
