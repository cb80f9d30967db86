"""Shared plumbing for CLI commands: options, config loading, one-shot runs."""

from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

import typer
from pydantic import BaseModel
from rich.console import Console

from ..core.config import Config, ConfigError, ConfigManager
from ..runtime import DashboardContext
from ..runtime.logging import LogMode, bootstrap_logging
from ..util.error import format_error

T = TypeVar("T")

console = Console()
err_console = Console(stderr=True)


@dataclass
class CliOptions:
    log_level: Optional[str] = None
    print_logs: bool = False


def options(ctx: typer.Context) -> CliOptions:
    obj = ctx.obj
    return obj if isinstance(obj, CliOptions) else CliOptions()


def load_config(ctx: typer.Context, *, mode: LogMode = "cli") -> Config:
    """Load config and bootstrap logging. Exits with status 1 on bad config."""
    opts = options(ctx)
    try:
        config = ConfigManager().get()
    except ConfigError as e:
        err_console.print(f"[red]Error:[/red] {format_error(e)}")
        raise typer.Exit(1)
    bootstrap_logging(
        config,
        mode=mode,
        level=opts.log_level,
        console=True if opts.print_logs else None,
    )
    return config


def run_with_context(config: Config, fn: Callable[[DashboardContext], Awaitable[T]]) -> T:
    """Run ``fn`` against a fresh dashboard context and tear it down."""

    async def run() -> T:
        async with DashboardContext(config) as dash:
            return await fn(dash)

    return asyncio.run(run())


def json_default(value: object) -> object:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def dump_json(payload: Dict[str, Any]) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False, default=json_default)
