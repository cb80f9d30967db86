"""Bus events published when aggregator state changes."""

from datetime import datetime
from typing import Any, Dict, List

from pydantic import BaseModel

from ..core.bus import BusEvent


class ToolStatusUpdatedProps(BaseModel):
    tool: str
    status: Dict[str, Any]


class SystemSnapshotUpdatedProps(BaseModel):
    fields: List[str]
    snapshot: Dict[str, Any]


class PollCycleCompletedProps(BaseModel):
    aggregator: str
    completed_at: datetime


ToolStatusUpdated = BusEvent.define("tool.status.updated", ToolStatusUpdatedProps)
SystemSnapshotUpdated = BusEvent.define("system.snapshot.updated", SystemSnapshotUpdatedProps)
PollCycleCompleted = BusEvent.define("poll.cycle.completed", PollCycleCompletedProps)
