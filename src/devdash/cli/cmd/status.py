"""Read-side commands: one-shot status and the live watch view."""

from __future__ import annotations

import asyncio
from typing import Any, Dict

import typer
from rich.live import Live

from ...core.bus import EventPayload
from ...runtime import DashboardContext
from ..render import dashboard
from ..support import console, dump_json, load_config, run_with_context


async def collect_status(dash: DashboardContext) -> Dict[str, Any]:
    """Poll everything once and return a JSON-ready report."""
    await dash.refresh()
    return {
        "tools": {tool.value: status for tool, status in dash.tools.snapshot().items()},
        "tools_updated": dash.tools.last_updated,
        "system": dash.system.snapshot,
    }


def status_command(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", help="Print the report as JSON"),
) -> None:
    """Poll every tool and the system metrics once, then print them."""
    config = load_config(ctx)

    async def run(dash: DashboardContext):
        report = await collect_status(dash)
        return report, dash.tools.snapshot()

    report, statuses = run_with_context(config, run)
    if json_output:
        data = dict(report)
        updated = data.pop("tools_updated")
        data["tools_updated"] = updated.isoformat() if updated else None
        typer.echo(dump_json(data))
        return

    console.print(dashboard(
        statuses,
        report["system"],
        mode=config.title_mode,
        tools_updated=report["tools_updated"],
    ))


async def watch_dashboard(dash: DashboardContext, *, refresh_per_second: float = 4) -> None:
    """Keep polling and redraw whenever the bus reports a change."""

    def view():
        return dashboard(
            dash.tools.snapshot(),
            dash.system.snapshot,
            mode=dash.config.title_mode,
            tools_updated=dash.tools.last_updated,
        )

    with Live(view(), console=console, refresh_per_second=refresh_per_second) as live:
        def redraw(_event: EventPayload) -> None:
            live.update(view())

        unsubscribe = dash.bus.subscribe_all(redraw)
        try:
            dash.start()
            await asyncio.Event().wait()
        finally:
            unsubscribe()


def watch_command(ctx: typer.Context) -> None:
    """Show a live dashboard until interrupted."""
    config = load_config(ctx, mode="watch")
    try:
        run_with_context(config, watch_dashboard)
    except KeyboardInterrupt:
        console.print("[dim]stopped[/dim]")
