"""CLI entry point for devdash.

Running `devdash` without arguments prints the status once; `devdash watch`
keeps the dashboard on screen and refreshes it on every change.
"""

import json
from typing import Optional

import typer

from .. import __version__
from .cmd.status import status_command, watch_command
from .cmd.tools import az_app, docker_app, kube_app, pulumi_app
from .support import CliOptions, console, load_config

app = typer.Typer(
    name="devdash",
    help="devdash - status of your developer tools at a glance",
    no_args_is_help=False,
    add_completion=False,
    invoke_without_command=True,
)
app.add_typer(kube_app, name="kube", help="Kubernetes context commands")
app.add_typer(az_app, name="az", help="Azure subscription commands")
app.add_typer(docker_app, name="docker", help="Docker container and engine commands")
app.add_typer(pulumi_app, name="pulumi", help="Pulumi stack commands")
app.command("status")(status_command)
app.command("watch")(watch_command)


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        console.print(f"devdash {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Log level: DEBUG, INFO, WARN or ERROR",
    ),
    print_logs: bool = typer.Option(
        False,
        "--print-logs",
        help="Write logs to stderr",
    ),
):
    """devdash - status of your developer tools at a glance.

    Running without a subcommand prints the status once.
    """
    ctx.obj = CliOptions(log_level=log_level, print_logs=print_logs)
    if ctx.invoked_subcommand is not None:
        return
    status_command(ctx, json_output=False)


@app.command()
def config(
    ctx: typer.Context,
    show: bool = typer.Option(
        False,
        "--show",
        help="Show current configuration",
    ),
    path: bool = typer.Option(
        False,
        "--path",
        help="Show configuration directory",
    ),
):
    """Inspect configuration."""
    from ..core.global_paths import GlobalPath

    if path:
        console.print(GlobalPath.config())
        return

    if show:
        cfg = load_config(ctx)
        typer.echo(json.dumps(cfg.model_dump(mode="json", by_alias=True), indent=2))
        return

    console.print("Use --show to display configuration or --path to show config directory")


if __name__ == "__main__":
    app()
