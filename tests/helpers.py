"""Shared test helpers."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from devdash.status import commands

FIXED_TIME = datetime(2024, 5, 1, 12, 30, 0, tzinfo=timezone.utc)


def fixed_clock() -> datetime:
    return FIXED_TIME


class FakeRunner:
    """Stand-in for ``CommandRunner`` that answers from a command -> output table.

    A value may be a string, a list of strings (consumed in order, the last
    one repeats), a callable returning a string, or an exception to raise.
    """

    def __init__(
        self,
        outputs: Optional[Dict[str, Any]] = None,
        *,
        default: str = "",
        delay: float = 0.0,
        delays: Optional[Dict[str, float]] = None,
    ) -> None:
        self.outputs: Dict[str, Any] = dict(outputs or {})
        self.default = default
        self.delay = delay
        self.delays: Dict[str, float] = dict(delays or {})
        self.calls: List[str] = []

    def set(self, command: str, output: Any) -> None:
        self.outputs[command] = output

    def count(self, command: str) -> int:
        return self.calls.count(command)

    async def run(self, command: str, timeout: Optional[float] = None) -> str:
        self.calls.append(command)
        delay = self.delays.get(command, self.delay)
        if delay:
            await asyncio.sleep(delay)
        value = self.outputs.get(command, self.default)
        if isinstance(value, list):
            value = value.pop(0) if len(value) > 1 else value[0]
        if isinstance(value, BaseException):
            raise value
        if callable(value):
            value = value()
        return value


class FakeHttp:
    """Stand-in for ``HttpClient`` returning a fixed body or raising."""

    def __init__(self, body: bytes = b"", error: Optional[BaseException] = None) -> None:
        self.body = body
        self.error = error
        self.calls: List[str] = []
        self.closed = False

    async def get(self, url: str, timeout: Optional[float] = None) -> bytes:
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return self.body

    async def aclose(self) -> None:
        self.closed = True


IP_INFO = b'{"ip": "203.0.113.7", "org": "AS7922 Comcast Cable", "city": "Denver", "region": "CO", "country": "US"}'

HEALTHY_TOOLS: Dict[str, str] = {
    commands.KUBECTL_CONTEXTS: "dev\nprod\n",
    commands.KUBECTL_CURRENT_CONTEXT: "dev\n",
    commands.AZ_ACCOUNT_LIST: (
        '[{"id": "s1", "name": "Sub One", "isDefault": true},'
        ' {"id": "s2", "name": "Sub Two", "isDefault": false}]'
    ),
    commands.GH_USER: '{"login": "octo", "name": "Octo Cat", "company": null, "location": "Web"}',
    commands.GH_PRS: '[{"title": "Fix bug", "repository": {"name": "repo"}}]',
    commands.PULUMI_WHOAMI: '{"user": "alice", "organizations": ["alice", "acme"], "url": "https://app.pulumi.com/alice"}',
    commands.PULUMI_STACKS: '[{"name": "dev", "current": true}, {"name": "prod", "current": false}]',
    commands.DOCKER_VERSION: "24.0.7\n",
    commands.DOCKER_CONTAINERS: "web\tnginx:latest\tUp 2 hours\ndb\tpostgres:16\tExited (0) 3 days ago\n",
}

HEALTHY_SYSTEM: Dict[str, str] = {
    commands.CPU_USAGE: "12.5\n",
    commands.MEMORY_USAGE: "63.2",
    commands.DISK_USAGE: "120Gi/460Gi (27% used)\n",
    commands.AUDIO_DEVICE: "MacBook Pro Speakers\n",
    commands.now_playing(commands.PRIMARY_PLAYER): "",
    commands.now_playing(commands.SECONDARY_PLAYER): "",
}


def healthy_runner(**kwargs: Any) -> FakeRunner:
    return FakeRunner({**HEALTHY_TOOLS, **HEALTHY_SYSTEM}, **kwargs)


def recorder() -> tuple[list, Callable[[Any], None]]:
    """A list and a bus callback that appends every payload to it."""
    events: list = []
    return events, events.append
