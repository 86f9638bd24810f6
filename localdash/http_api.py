"""HTTP API and dashboard page.

Routes:
  GET    /                      dashboard page
  GET    /api/services          all services with status (?filter=...)
  GET    /api/status/{port}     {"running", "pid"} for one port
  POST   /api/start/{port}      start a configured service
  POST   /api/stop/{port}       kill whatever listens on a port
  POST   /api/services          add a service (JSON body)
  DELETE /api/services/{port}   remove a service
  POST   /api/code/{port}       open the service directory in the editor
  POST   /api/finder/{port}     open the service directory in the file browser
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import FileResponse, JSONResponse, Response
from starlette.routing import Route

from .dashboard import Dashboard
from .errors import DashboardError
from .models import Result, ServiceDescriptor

log = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"


def _result_response(result: Result) -> JSONResponse:
    return JSONResponse(result.to_dict(), status_code=result.status_code)


def _error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def create_app(dashboard: Dashboard) -> Starlette:
    """Build the dashboard's ASGI app around `dashboard`."""

    async def index(request: Request) -> Response:
        return FileResponse(STATIC_DIR / "index.html", media_type="text/html")

    async def list_services(request: Request) -> Response:
        views = await dashboard.status.get_all(request.query_params.get("filter", "all"))
        return JSONResponse([v.to_dict() for v in views])

    async def port_status(request: Request) -> Response:
        status = await dashboard.prober.probe(request.path_params["port"])
        return JSONResponse(status.to_dict())

    async def start(request: Request) -> Response:
        return _result_response(await dashboard.lifecycle.start(request.path_params["port"]))

    async def stop(request: Request) -> Response:
        return _result_response(await dashboard.lifecycle.stop(request.path_params["port"]))

    async def add_service(request: Request) -> Response:
        try:
            descriptor = ServiceDescriptor.from_dict(await request.json())
        except json.JSONDecodeError:
            return _error_response("Request body must be JSON", 400)
        except ValueError as exc:
            return _error_response(str(exc), 400)
        dashboard.registry.append(descriptor)
        return JSONResponse({"success": True})

    async def remove_service(request: Request) -> Response:
        port = request.path_params["port"]
        removed = dashboard.registry.remove_by_port(port)
        if not removed:
            return _error_response(f"No service configured for port {port}", 404)
        return JSONResponse({"success": True, "removed": removed})

    async def open_in_editor(request: Request) -> Response:
        result = await dashboard.lifecycle.open_directory(
            request.path_params["port"], dashboard.config.editor_command,
        )
        return _result_response(result)

    async def open_in_file_browser(request: Request) -> Response:
        result = await dashboard.lifecycle.open_directory(
            request.path_params["port"], dashboard.config.file_browser_command,
        )
        return _result_response(result)

    async def dashboard_error(request: Request, exc: DashboardError) -> Response:
        log.warning("%s %s failed: %s", request.method, request.url.path, exc)
        return _error_response(str(exc), exc.status_code)

    async def unexpected_error(request: Request, exc: Exception) -> Response:
        # uvicorn logs the traceback; Starlette re-raises after this response
        return _error_response(str(exc), 500)

    routes = [
        Route("/", index, methods=["GET"]),
        Route("/index.html", index, methods=["GET"]),
        Route("/api/services", list_services, methods=["GET"]),
        Route("/api/services", add_service, methods=["POST"]),
        Route("/api/services/{port:int}", remove_service, methods=["DELETE"]),
        Route("/api/status/{port:int}", port_status, methods=["GET"]),
        Route("/api/start/{port:int}", start, methods=["POST"]),
        Route("/api/stop/{port:int}", stop, methods=["POST"]),
        Route("/api/code/{port:int}", open_in_editor, methods=["POST"]),
        Route("/api/finder/{port:int}", open_in_file_browser, methods=["POST"]),
    ]

    middleware = [
        Middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
            allow_headers=["Content-Type"],
        ),
    ]

    return Starlette(
        routes=routes,
        middleware=middleware,
        exception_handlers={
            DashboardError: dashboard_error,
            Exception: unexpected_error,
        },
    )
