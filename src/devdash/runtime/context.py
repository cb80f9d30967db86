"""Dashboard composition root and lifecycle container."""

from __future__ import annotations

import asyncio
from typing import Optional

from ..core.bus import Bus
from ..core.config import Config
from ..net import HttpClient
from ..shell import CommandRunner
from ..status import MutationCoordinator, SystemStatusAggregator, ToolStatusAggregator
from ..util.log import Log

log = Log.create({"service": "runtime"})


class DashboardContext:
    """Owns the collaborators, both aggregators and the mutation coordinator.

    Created once per process and handed to whatever presents the state.
    Use as an async context manager, or call ``start()`` / ``stop()``.
    """

    __slots__ = (
        "config",
        "bus",
        "runner",
        "http",
        "tools",
        "system",
        "mutations",
        "started",
    )

    def __init__(
        self,
        config: Config,
        *,
        runner: Optional[CommandRunner] = None,
        http: Optional[HttpClient] = None,
        bus: Optional[Bus] = None,
    ) -> None:
        polling = config.polling
        self.config = config
        self.bus = bus or Bus()
        self.runner = runner or CommandRunner(path_prefix=config.path, timeout=polling.command_timeout)
        self.http = http or HttpClient(timeout=polling.http_timeout)
        self.tools = ToolStatusAggregator(self.runner, bus=self.bus, interval=polling.interval)
        self.system = SystemStatusAggregator(
            self.runner,
            self.http,
            bus=self.bus,
            ip_info_url=config.ip_info_url,
            interval=polling.interval,
            now_playing_interval=polling.now_playing_interval,
            http_timeout=polling.http_timeout,
        )
        self.mutations = MutationCoordinator(
            self.runner,
            self.tools,
            optimistic=config.optimistic_updates,
            engine_start_delay=config.docker.engine_start_delay,
            engine_start_attempts=config.docker.engine_start_attempts,
        )
        self.started = False

    def start(self) -> None:
        """Start both aggregators' cadences. Each polls immediately."""
        if self.started:
            return
        self.tools.start()
        self.system.start()
        self.started = True
        log.info("dashboard started", {
            "interval": self.config.polling.interval,
            "now_playing_interval": self.config.polling.now_playing_interval,
        })

    async def refresh(self) -> None:
        """Manual refresh of everything, regardless of previous errors."""
        await asyncio.gather(self.tools.poll_all(), self.system.poll_all())

    async def stop(self) -> None:
        results = await asyncio.gather(
            self.mutations.stop(),
            self.tools.stop(),
            self.system.stop(),
            return_exceptions=True,
        )
        errors = [str(item) for item in results if isinstance(item, BaseException)]
        if errors:
            log.warn("shutdown completed with errors", {"errors": errors})
        await self.http.aclose()
        self.started = False

    async def __aenter__(self) -> "DashboardContext":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()
