"""Selectors that derive display strings from status snapshots."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from .models import LOADING, NO_MUSIC, SystemSnapshot, ToolStatus

NEVER = "Never"


class TitleMode(str, Enum):
    ISP = "isp"
    AUDIO = "audio"
    PLAYING = "playing"


def short_org(org: str) -> str:
    """Drop the leading autonomous-system number: ``AS7922 Comcast`` -> ``Comcast``."""
    if org.startswith("AS"):
        parts = org.split(" ")
        if len(parts) > 1:
            return " ".join(parts[1:])
    return org


def menubar_title(snapshot: SystemSnapshot, mode: TitleMode | str) -> str:
    mode = TitleMode(mode)
    if mode == TitleMode.AUDIO:
        return snapshot.audio_device_name or LOADING
    if mode == TitleMode.PLAYING:
        playing = snapshot.now_playing
        if not playing or playing == NO_MUSIC:
            return "♪ No Music"
        return f"♪ {playing}"
    return short_org(snapshot.network_org) or LOADING


def format_timestamp(value: Optional[datetime]) -> str:
    if value is None:
        return NEVER
    return value.strftime("%H:%M:%S")


def error_text(status: ToolStatus) -> Optional[str]:
    if status.error is None:
        return None
    return status.error.message
