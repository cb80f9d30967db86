"""Rich renderables for the dashboard state."""

from __future__ import annotations

from typing import Any, Dict, Optional

from rich.console import Group
from rich.panel import Panel
from rich.table import Table

from ..status.models import (
    AzurePayload,
    DockerPayload,
    GitHubPayload,
    KubectlPayload,
    PulumiPayload,
    SystemSnapshot,
    ToolName,
    ToolStatus,
)
from ..status.selectors import TitleMode, format_timestamp, menubar_title
from ..util.error import format_error

TOOL_LABELS = {
    ToolName.KUBECTL: "Kubernetes",
    ToolName.AZURE: "Azure",
    ToolName.GITHUB: "GitHub",
    ToolName.PULUMI: "Pulumi",
    ToolName.DOCKER: "Docker",
}


def describe_payload(payload: Any) -> str:
    if isinstance(payload, KubectlPayload):
        return f"{payload.current_context} ({len(payload.available_contexts)} contexts)"
    if isinstance(payload, AzurePayload):
        return f"{payload.current_subscription_name} ({len(payload.subscriptions)} subscriptions)"
    if isinstance(payload, GitHubPayload):
        who = f"{payload.login} ({payload.name})" if payload.name else payload.login
        return f"{who}, {len(payload.open_prs)} open PRs"
    if isinstance(payload, PulumiPayload):
        text = payload.user
        if payload.organizations:
            text += f" [{', '.join(payload.organizations)}]"
        if payload.current_stack:
            text += f", stack {payload.current_stack}"
        return text
    if isinstance(payload, DockerPayload):
        if not payload.engine_running:
            return "engine stopped"
        up = sum(1 for c in payload.containers if c.is_running)
        return f"engine running, {up}/{len(payload.containers)} containers up"
    return "Loading..."


def tools_table(statuses: Dict[ToolName, ToolStatus], last_updated=None) -> Table:
    table = Table(title=f"CLI tools (updated {format_timestamp(last_updated)})", expand=True)
    table.add_column("Tool", style="bold")
    table.add_column("Status")
    table.add_column("Error", style="red")
    for tool in ToolName:
        status = statuses[tool]
        details = describe_payload(status.payload) if status.payload is not None else "-"
        error = format_error(status.error) if status.error else ""
        table.add_row(TOOL_LABELS[tool], details, error or "")
    return table


def system_table(snapshot: SystemSnapshot) -> Table:
    table = Table(title=f"System (updated {format_timestamp(snapshot.last_updated)})", expand=True)
    table.add_column("Metric", style="bold")
    table.add_column("Value")
    location = ", ".join(part for part in (snapshot.city, snapshot.country) if part)
    rows = [
        ("Network", snapshot.network_org),
        ("IP", snapshot.network_ip),
        ("Location", location or "-"),
        ("CPU", snapshot.cpu_percent),
        ("Memory", snapshot.memory_percent),
        ("Disk", snapshot.disk_summary),
        ("Audio", snapshot.audio_device_name),
        ("Now playing", snapshot.now_playing),
    ]
    for label, value in rows:
        table.add_row(label, value)
    return table


def dashboard(
    statuses: Dict[ToolName, ToolStatus],
    snapshot: SystemSnapshot,
    *,
    mode: TitleMode | str = TitleMode.ISP,
    tools_updated: Optional[Any] = None,
) -> Group:
    return Group(
        Panel(menubar_title(snapshot, mode), title="devdash"),
        system_table(snapshot),
        tools_table(statuses, tools_updated),
    )
