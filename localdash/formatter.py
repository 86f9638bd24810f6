"""Formatter — renders snapshots and Results as text for AI assistants.

The tool server hands these strings back verbatim, so they are written to
be read by a model: one fact per line, status glyph first.
"""

from __future__ import annotations

from .models import QuickStatus, Result, RuntimeStatus, ServiceDescriptor, ServiceView, service_url

RUNNING_GLYPH = "🟢"
STOPPED_GLYPH = "⚫"

# How many stopped services quick_status lists before summarising the rest
QUICK_STATUS_STOPPED_LIMIT = 5


def format_service_line(view: ServiceView) -> str:
    if view.running:
        return f"{RUNNING_GLYPH} {view.name} [:{view.port}] {view.url}"
    return f"{STOPPED_GLYPH} {view.name} [:{view.port}] (stopped)"


def format_service_list(views: list[ServiceView], filter: str) -> str:
    body = "\n".join(format_service_line(v) for v in views)
    return f"Local Services ({filter}):\n\n{body}\n\nTotal: {len(views)} services"


def format_port_check(
    port: int,
    status: RuntimeStatus,
    descriptor: ServiceDescriptor | None,
) -> str:
    if status.running:
        suffix = f" - {descriptor.name}" if descriptor else ""
        return f"Port {port} is RUNNING (pid: {status.pid}){suffix}"
    suffix = f" - {descriptor.name} is stopped" if descriptor else ""
    return f"Port {port} is NOT running{suffix}"


def format_start(result: Result) -> str:
    if result.success:
        return f"✅ {result.message}\nURL: {service_url(result.port)}"
    return f"❌ Failed: {result.message}"


def format_stop(result: Result) -> str:
    if result.success:
        return f"✅ {result.message}"
    return f"❌ {result.message}"


def format_service_info(view: ServiceView) -> str:
    d = view.descriptor
    lines = [
        f"Service: {d.name}",
        f"Port: {d.port}",
        f"Status: {'RUNNING' if view.running else 'STOPPED'}",
        f"Type: {d.type or ''}",
        f"Path: {d.path}",
        f"Start Command: {d.start_cmd}",
        f"GitHub: {d.github or 'N/A'}",
    ]
    if view.running:
        lines.append(f"URL: {view.url}")
    return "\n".join(lines)


def format_quick_status(summary: QuickStatus) -> str:
    running = "\n".join(f"   • {v.name} → {v.url}" for v in summary.running) or "   (none)"

    shown = summary.stopped[:QUICK_STATUS_STOPPED_LIMIT]
    stopped = "\n".join(f"   • {v.name} [:{v.port}]" for v in shown)
    hidden = len(summary.stopped) - len(shown)
    if hidden > 0:
        stopped += f"\n   ... and {hidden} more"

    return (
        "📊 Local Services Status\n\n"
        f"{RUNNING_GLYPH} Running: {len(summary.running)}\n{running}\n\n"
        f"{STOPPED_GLYPH} Stopped: {len(summary.stopped)}\n{stopped}\n\n"
        f"Total: {summary.total} services configured"
    )
