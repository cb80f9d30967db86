"""Status polling for the developer CLIs.

Each tool owns one ``ToolStatus`` slot. A poll runs the tool's commands,
parses the output and swaps a new record into the slot; a failure in one
tool never reaches the others.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import Dict, Optional

from ..core.bus import Bus
from ..shell import CommandRunner
from ..util.log import Log
from . import commands
from .errors import ToolFailure
from .events import (
    PollCycleCompleted,
    PollCycleCompletedProps,
    ToolStatusUpdated,
    ToolStatusUpdatedProps,
)
from .models import (
    DockerPayload,
    ErrorKind,
    ToolError,
    ToolName,
    ToolPayload,
    ToolStatus,
)
from .parsers import azure, docker, github, kubectl, pulumi
from .scheduler import Coalescer, PeriodicTask

log = Log.create({"service": "status.tools"})

DEFAULT_INTERVAL = 60.0


def local_now() -> datetime:
    return datetime.now().astimezone()


class ToolStatusAggregator:
    """Owns and refreshes the ``ToolStatus`` of every tool."""

    def __init__(
        self,
        runner: CommandRunner,
        *,
        bus: Optional[Bus] = None,
        interval: float = DEFAULT_INTERVAL,
        clock: Callable[[], datetime] = local_now,
    ) -> None:
        self._runner = runner
        self._bus = bus or Bus()
        self._clock = clock
        self._statuses: Dict[ToolName, ToolStatus] = {tool: ToolStatus(tool=tool) for tool in ToolName}
        self._inflight: Coalescer[ToolName] = Coalescer()
        self._schedule = PeriodicTask("tools", interval, self.poll_all)
        self._fetchers: Dict[ToolName, Callable[[], Awaitable[ToolPayload]]] = {
            ToolName.KUBECTL: self._fetch_kubectl,
            ToolName.AZURE: self._fetch_azure,
            ToolName.GITHUB: self._fetch_github,
            ToolName.PULUMI: self._fetch_pulumi,
            ToolName.DOCKER: self._fetch_docker,
        }
        self.last_updated: Optional[datetime] = None

    # -- Read side --

    def status(self, tool: ToolName) -> ToolStatus:
        return self._statuses[tool]

    def payload(self, tool: ToolName) -> Optional[ToolPayload]:
        return self._statuses[tool].payload

    def snapshot(self) -> Dict[ToolName, ToolStatus]:
        return dict(self._statuses)

    def is_polling(self, tool: ToolName) -> bool:
        return self._inflight.busy(tool)

    # -- Lifecycle --

    def start(self) -> None:
        self._schedule.start()

    async def stop(self) -> None:
        await self._schedule.stop()
        await self._inflight.cancel_all()

    # -- Polling --

    async def poll_all(self) -> Dict[ToolName, ToolStatus]:
        """Poll every tool concurrently and stamp the cycle once all are done."""
        with log.time("poll cycle", {"aggregator": "tools"}):
            await asyncio.gather(*(self.poll_one(tool) for tool in ToolName))
        self.last_updated = self._clock()
        await self._bus.publish(
            PollCycleCompleted,
            PollCycleCompletedProps(aggregator="tools", completed_at=self.last_updated),
        )
        return self.snapshot()

    async def poll_one(self, tool: ToolName) -> ToolStatus:
        """Poll one tool. Joins the running poll when one is already in flight."""
        return await self._inflight.run(tool, lambda: self._poll(tool))

    async def refresh(self, tool: ToolName) -> ToolStatus:
        """Start a fresh poll after any in-flight one, so it sees recent side effects."""
        await self.settle(tool)
        return await self.poll_one(tool)

    async def settle(self, tool: ToolName) -> None:
        await self._inflight.settle(tool)

    async def _poll(self, tool: ToolName) -> ToolStatus:
        try:
            payload = await self._fetchers[tool]()
        except ToolFailure as e:
            log.info("tool unavailable", {"tool": tool, "kind": e.kind, "error": e.message})
            return await self.fail(tool, e.to_error())
        except Exception as e:
            log.error("tool poll failed", {"tool": tool, "error": e})
            error = ToolError(kind=ErrorKind.COMMAND_FAILED, message=str(e) or e.__class__.__name__)
            return await self.fail(tool, error)
        return await self.apply(tool, payload)

    # -- Write side --

    async def apply(self, tool: ToolName, payload: ToolPayload) -> ToolStatus:
        """Store a fresh payload and clear the tool's error."""
        return await self._store(ToolStatus(tool=tool, last_updated=self._clock(), payload=payload))

    async def fail(self, tool: ToolName, error: ToolError) -> ToolStatus:
        """Record an error. A missing binary clears the payload, other errors keep the last good one."""
        previous = self._statuses[tool].payload
        payload = None if error.kind == ErrorKind.NOT_INSTALLED else previous
        return await self._store(
            ToolStatus(tool=tool, last_updated=self._clock(), error=error, payload=payload)
        )

    async def _store(self, status: ToolStatus) -> ToolStatus:
        self._statuses[status.tool] = status
        await self._bus.publish(
            ToolStatusUpdated,
            ToolStatusUpdatedProps(tool=status.tool.value, status=status.model_dump(mode="json")),
        )
        return status

    # -- Fetchers --

    async def _fetch_kubectl(self) -> ToolPayload:
        contexts, current = await asyncio.gather(
            self._runner.run(commands.KUBECTL_CONTEXTS),
            self._runner.run(commands.KUBECTL_CURRENT_CONTEXT),
        )
        return kubectl.parse(contexts, current)

    async def _fetch_azure(self) -> ToolPayload:
        return azure.parse(await self._runner.run(commands.AZ_ACCOUNT_LIST))

    async def _fetch_github(self) -> ToolPayload:
        user, prs = await asyncio.gather(
            self._runner.run(commands.GH_USER),
            self._runner.run(commands.GH_PRS),
        )
        return github.parse(user, prs)

    async def _fetch_pulumi(self) -> ToolPayload:
        whoami, stacks = await asyncio.gather(
            self._runner.run(commands.PULUMI_WHOAMI),
            self._runner.run(commands.PULUMI_STACKS),
        )
        return pulumi.parse(whoami, stacks)

    async def _fetch_docker(self) -> ToolPayload:
        engine = await self._runner.run(commands.DOCKER_VERSION)
        if not docker.engine_running(engine):
            return DockerPayload(engine_running=False)
        return docker.parse(engine, await self._runner.run(commands.DOCKER_CONTAINERS))
