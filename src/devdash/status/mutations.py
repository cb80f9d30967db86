"""User-triggered changes: switch context/subscription/stack, toggle Docker.

Each operation runs one command, records a ``command_failed`` error on the
affected tool if the command reports failure, and otherwise re-synchronises
that tool only. Nothing here raises for an external failure; every method
returns whether the command succeeded.
"""

from __future__ import annotations

import asyncio
from typing import Set

from ..shell import CommandRunner
from ..util.log import Log
from . import commands
from .models import (
    DockerPayload,
    ErrorKind,
    KubectlPayload,
    ToolError,
    ToolName,
    ToolStatus,
)
from .parsers import docker
from .parsers.common import has_error, is_not_found
from .tools import ToolStatusAggregator

log = Log.create({"service": "status.mutations"})

DEFAULT_ENGINE_START_DELAY = 3.0
DEFAULT_ENGINE_START_ATTEMPTS = 5


def _failed(output: str) -> bool:
    return is_not_found(output) or has_error(output)


class MutationCoordinator:
    """Mutating entry points for the tools owned by a ``ToolStatusAggregator``."""

    def __init__(
        self,
        runner: CommandRunner,
        tools: ToolStatusAggregator,
        *,
        optimistic: bool = True,
        engine_start_delay: float = DEFAULT_ENGINE_START_DELAY,
        engine_start_attempts: int = DEFAULT_ENGINE_START_ATTEMPTS,
    ) -> None:
        self._runner = runner
        self._tools = tools
        self.optimistic = optimistic
        self.engine_start_delay = engine_start_delay
        self.engine_start_attempts = engine_start_attempts
        self._pending: Set[asyncio.Task[None]] = set()

    async def _reject(self, tool: ToolName, message: str, output: str) -> bool:
        log.warn("mutation failed", {"tool": tool, "message": message, "output": output.strip()[:200]})
        # a poll that started before the command would overwrite the error
        await self._tools.settle(tool)
        await self._tools.fail(tool, ToolError(kind=ErrorKind.COMMAND_FAILED, message=message))
        return False

    async def switch_kube_context(self, name: str) -> bool:
        output = await self._runner.run(commands.kubectl_use_context(name))
        if _failed(output):
            return await self._reject(ToolName.KUBECTL, "Failed to switch context", output)

        if not self.optimistic:
            await self._tools.refresh(ToolName.KUBECTL)
            return True

        await self._tools.settle(ToolName.KUBECTL)
        previous = self._tools.payload(ToolName.KUBECTL)
        contexts = previous.available_contexts if isinstance(previous, KubectlPayload) else ()
        if name not in contexts:
            contexts = (name, *contexts)
        await self._tools.apply(
            ToolName.KUBECTL,
            KubectlPayload(current_context=name, available_contexts=contexts),
        )
        log.info("switched kube context", {"context": name})
        return True

    async def switch_azure_subscription(self, subscription_id: str) -> bool:
        output = await self._runner.run(commands.az_set_subscription(subscription_id))
        if _failed(output):
            return await self._reject(ToolName.AZURE, "Failed to switch subscription", output)

        # default flags change across the whole list, so re-read all of it
        await self._tools.refresh(ToolName.AZURE)
        log.info("switched azure subscription", {"subscription": subscription_id})
        return True

    async def select_pulumi_stack(self, name: str) -> bool:
        output = await self._runner.run(commands.pulumi_select_stack(name))
        if _failed(output):
            return await self._reject(ToolName.PULUMI, "Failed to select stack", output)

        await self._tools.refresh(ToolName.PULUMI)
        return True

    async def toggle_docker_container(self, name: str, currently_running: bool) -> bool:
        command = commands.docker_stop(name) if currently_running else commands.docker_start(name)
        output = await self._runner.run(command)
        if docker.toggle_failed(output):
            verb = "stop" if currently_running else "start"
            return await self._reject(ToolName.DOCKER, f"Failed to {verb} container", output)

        await self._tools.refresh(ToolName.DOCKER)
        return True

    async def toggle_docker_engine(self, currently_running: bool) -> bool:
        if currently_running:
            output = await self._runner.run(commands.DOCKER_ENGINE_STOP)
            if _failed(output):
                return await self._reject(ToolName.DOCKER, "Failed to stop Docker engine", output)
            if self.optimistic:
                await self._tools.settle(ToolName.DOCKER)
                await self._tools.apply(ToolName.DOCKER, DockerPayload(engine_running=False))
            else:
                await self._tools.refresh(ToolName.DOCKER)
            return True

        output = await self._runner.run(commands.DOCKER_ENGINE_START)
        if _failed(output):
            return await self._reject(ToolName.DOCKER, "Failed to start Docker engine", output)

        task = asyncio.create_task(self._await_engine())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return True

    async def _await_engine(self) -> None:
        """Re-poll Docker until the engine answers or the attempts run out."""
        for attempt in range(1, self.engine_start_attempts + 1):
            await asyncio.sleep(self.engine_start_delay)
            status = await self._tools.refresh(ToolName.DOCKER)
            if _engine_up(status):
                log.info("docker engine started", {"attempt": attempt})
                return
        log.warn("docker engine did not start", {"attempts": self.engine_start_attempts})

    async def drain(self) -> None:
        """Wait for background engine-start polls."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def stop(self) -> None:
        tasks = list(self._pending)
        self._pending.clear()
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)


def _engine_up(status: ToolStatus) -> bool:
    payload = status.payload
    return isinstance(payload, DockerPayload) and payload.engine_running
