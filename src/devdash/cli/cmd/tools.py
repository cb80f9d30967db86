"""Mutation commands: switch contexts, subscriptions and stacks, toggle Docker."""

from __future__ import annotations

from typing import Awaitable, Callable, Optional

import typer

from ...runtime import DashboardContext
from ...status.models import DockerPayload, ToolName, ToolStatus
from ...util.error import format_error
from ..render import describe_payload
from ..support import console, err_console, load_config, run_with_context

kube_app = typer.Typer(help="Kubernetes context commands")
az_app = typer.Typer(help="Azure subscription commands")
docker_app = typer.Typer(help="Docker container and engine commands")
pulumi_app = typer.Typer(help="Pulumi stack commands")

Mutation = Callable[[DashboardContext], Awaitable[bool]]


def _apply(ctx: typer.Context, tool: ToolName, mutation: Mutation, *, wait: bool = False) -> ToolStatus:
    """Run one mutation and report the tool's resulting status."""
    config = load_config(ctx)

    async def run(dash: DashboardContext):
        ok = await mutation(dash)
        if wait:
            await dash.mutations.drain()
        return ok, dash.tools.status(tool)

    ok, status = run_with_context(config, run)
    if not ok:
        message = format_error(status.error) if status.error else "operation failed"
        err_console.print(f"[red]Error:[/red] {message}")
        raise typer.Exit(1)
    if status.payload is not None:
        console.print(describe_payload(status.payload))
    return status


def _container_running(docker: Optional[DockerPayload], name: str) -> Optional[bool]:
    if docker is None:
        return None
    for container in docker.containers:
        if container.name == name:
            return container.is_running
    return None


@kube_app.command("use")
def kube_use(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Context to switch to"),
) -> None:
    """Switch the current kubectl context."""
    _apply(ctx, ToolName.KUBECTL, lambda dash: dash.mutations.switch_kube_context(name))


@az_app.command("use")
def az_use(
    ctx: typer.Context,
    subscription_id: str = typer.Argument(..., help="Subscription id to make default"),
) -> None:
    """Set the default Azure subscription."""
    _apply(ctx, ToolName.AZURE, lambda dash: dash.mutations.switch_azure_subscription(subscription_id))


@pulumi_app.command("select")
def pulumi_select(
    ctx: typer.Context,
    stack: str = typer.Argument(..., help="Stack to select"),
) -> None:
    """Select the current Pulumi stack."""
    _apply(ctx, ToolName.PULUMI, lambda dash: dash.mutations.select_pulumi_stack(stack))


@docker_app.command("toggle")
def docker_toggle(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Container name"),
    running: Optional[bool] = typer.Option(
        None,
        "--running/--stopped",
        help="Current state of the container; looked up when omitted",
    ),
) -> None:
    """Stop a running container or start a stopped one."""

    async def toggle(dash: DashboardContext) -> bool:
        current = running
        if current is None:
            status = await dash.tools.poll_one(ToolName.DOCKER)
            payload = status.payload if isinstance(status.payload, DockerPayload) else None
            current = _container_running(payload, name)
            if current is None:
                err_console.print(f"[red]Error:[/red] no container named {name!r}")
                raise typer.Exit(1)
        return await dash.mutations.toggle_docker_container(name, current)

    _apply(ctx, ToolName.DOCKER, toggle)


@docker_app.command("engine")
def docker_engine(
    ctx: typer.Context,
    running: Optional[bool] = typer.Option(
        None,
        "--running/--stopped",
        help="Current state of the engine; looked up when omitted",
    ),
) -> None:
    """Quit the Docker engine when it runs, launch it when it does not."""

    async def toggle(dash: DashboardContext) -> bool:
        current = running
        if current is None:
            status = await dash.tools.poll_one(ToolName.DOCKER)
            current = isinstance(status.payload, DockerPayload) and status.payload.engine_running
        if not current:
            console.print("Starting Docker engine...")
        return await dash.mutations.toggle_docker_engine(current)

    _apply(ctx, ToolName.DOCKER, toggle, wait=True)
