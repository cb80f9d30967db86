"""Parsers for the OS metric commands. They never raise: bad output reads as ``Unknown``."""

import math
from typing import Optional

from ..models import UNKNOWN
from .common import first_line, is_runner_error

DEFAULT_AUDIO_DEVICE = "Built-in Output"


def parse_number(raw: str) -> Optional[float]:
    """Read a number such as ``12.5``, ``12,5`` or ``12.5%``."""
    value = first_line(raw).rstrip("%").strip().replace(",", ".")
    if not value:
        return None
    try:
        number = float(value)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


def parse_percent(raw: str) -> str:
    number = parse_number(raw)
    if number is None or not 0 <= number <= 100:
        return UNKNOWN
    return f"{number:.1f}%"


def parse_disk(raw: str) -> str:
    line = first_line(raw)
    if not line or is_runner_error(line):
        return UNKNOWN
    return line


def parse_audio_device(raw: str) -> str:
    line = first_line(raw)
    if is_runner_error(line):
        return UNKNOWN
    return line or DEFAULT_AUDIO_DEVICE
