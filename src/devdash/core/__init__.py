"""Core infrastructure modules."""

from .global_paths import GlobalPath
from .bus import Bus, BusEvent, EventPayload

__all__ = ["GlobalPath", "Bus", "BusEvent", "EventPayload"]

# Config and Log are imported from their modules to avoid circular imports:
# from devdash.core.config import ConfigManager
# from devdash.util.log import Log
