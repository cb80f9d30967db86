"""System metrics polling on two cadences.

The slow cycle refreshes CPU, memory, disk, audio output and network
identity; the fast cycle only asks the media players what is playing.
Each metric is written on its own, and a failing metric never blanks
another.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from datetime import datetime
from typing import Any, Optional

from ..core.bus import Bus
from ..core.config_schema import DEFAULT_IP_INFO_URL
from ..net import HttpClient, TransportError
from ..shell import CommandRunner
from ..util.log import Log
from . import commands
from .errors import ToolFailure
from .events import (
    PollCycleCompleted,
    PollCycleCompletedProps,
    SystemSnapshotUpdated,
    SystemSnapshotUpdatedProps,
)
from .models import NO_MUSIC, UNKNOWN, SystemSnapshot
from .parsers import ipinfo, now_playing, system
from .scheduler import Coalescer, PeriodicTask
from .tools import local_now

log = Log.create({"service": "status.system"})

DEFAULT_INTERVAL = 60.0
DEFAULT_NOW_PLAYING_INTERVAL = 2.0


class SystemStatusAggregator:
    """Owns the ``SystemSnapshot`` and its two refresh cadences."""

    def __init__(
        self,
        runner: CommandRunner,
        http: HttpClient,
        *,
        bus: Optional[Bus] = None,
        ip_info_url: str = DEFAULT_IP_INFO_URL,
        interval: float = DEFAULT_INTERVAL,
        now_playing_interval: float = DEFAULT_NOW_PLAYING_INTERVAL,
        http_timeout: Optional[float] = None,
        players: Sequence[str] = (commands.PRIMARY_PLAYER, commands.SECONDARY_PLAYER),
        clock: Callable[[], datetime] = local_now,
    ) -> None:
        self._runner = runner
        self._http = http
        self._bus = bus or Bus()
        self._ip_info_url = ip_info_url
        self._http_timeout = http_timeout
        self._players = tuple(players)
        self._clock = clock
        self._snapshot = SystemSnapshot()
        self._inflight: Coalescer[str] = Coalescer()
        self._slow = PeriodicTask("system", interval, self.poll_slow)
        self._fast = PeriodicTask("now_playing", now_playing_interval, self.poll_now_playing)

    @property
    def snapshot(self) -> SystemSnapshot:
        return self._snapshot

    @property
    def last_updated(self) -> Optional[datetime]:
        return self._snapshot.last_updated

    def start(self) -> None:
        self._slow.start()
        self._fast.start()

    async def stop(self) -> None:
        await asyncio.gather(self._slow.stop(), self._fast.stop())
        await self._inflight.cancel_all()

    async def poll_all(self) -> SystemSnapshot:
        """Manual refresh: both cycles."""
        await asyncio.gather(self.poll_slow(), self.poll_now_playing())
        return self._snapshot

    async def poll_slow(self) -> SystemSnapshot:
        return await self._inflight.run("slow", self._poll_slow)

    async def poll_now_playing(self) -> str:
        return await self._inflight.run("now_playing", self._poll_now_playing)

    async def _poll_slow(self) -> SystemSnapshot:
        with log.time("poll cycle", {"aggregator": "system"}):
            results = await asyncio.gather(
                self._metric("cpu_percent", commands.CPU_USAGE, system.parse_percent),
                self._metric("memory_percent", commands.MEMORY_USAGE, system.parse_percent),
                self._metric("disk_summary", commands.DISK_USAGE, system.parse_disk),
                self._metric("audio_device_name", commands.AUDIO_DEVICE, system.parse_audio_device),
                self.poll_network(),
                return_exceptions=True,
            )
        for result in results:
            if isinstance(result, Exception):
                log.error("metric poll failed", {"error": result})

        stamp = self._clock()
        await self._update(last_updated=stamp)
        await self._bus.publish(
            PollCycleCompleted,
            PollCycleCompletedProps(aggregator="system", completed_at=stamp),
        )
        return self._snapshot

    async def _metric(self, field: str, command: str, parse: Callable[[str], str]) -> None:
        try:
            value = parse(await self._runner.run(command))
        except Exception as e:
            log.error("metric parse failed", {"metric": field, "error": e})
            value = UNKNOWN
        await self._update(**{field: value})

    async def poll_network(self) -> None:
        """Refresh the IP identity. On failure only ``network_org`` changes."""
        try:
            body = await self._http.get(self._ip_info_url, timeout=self._http_timeout)
        except TransportError as e:
            await self._update(network_org=f"Error: {e}")
            return

        try:
            info = ipinfo.parse(body)
        except ToolFailure as e:
            log.warn("ip info unreadable", {"url": self._ip_info_url})
            await self._update(network_org=e.message)
            return

        await self._update(
            network_org=info.org or UNKNOWN,
            network_ip=info.ip,
            city=info.city,
            country=info.country,
        )

    async def _poll_now_playing(self) -> str:
        track: Optional[str] = None
        for player in self._players:
            try:
                track = now_playing.parse(await self._runner.run(commands.now_playing(player)))
            except Exception as e:
                log.warn("player query failed", {"player": player, "error": e})
                track = None
            if track:
                break

        value = track or NO_MUSIC
        if value != self._snapshot.now_playing:
            await self._update(now_playing=value)
        return value

    async def _update(self, **fields: Any) -> None:
        self._snapshot = self._snapshot.model_copy(update=fields)
        await self._bus.publish(
            SystemSnapshotUpdated,
            SystemSnapshotUpdatedProps(
                fields=sorted(fields),
                snapshot=self._snapshot.model_dump(mode="json"),
            ),
        )
