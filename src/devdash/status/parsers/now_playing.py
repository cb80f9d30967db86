from typing import Optional

from ..models import NO_MUSIC
from .common import first_line, is_not_found, is_runner_error

SCRIPT_ERROR_MARKER = "execution error"


def parse(raw: str) -> Optional[str]:
    """The ``track - artist`` line, or None when the player has nothing playing.

    Track titles pass through unfiltered; only player and runner failures are dropped.
    """
    if is_not_found(raw) or is_runner_error(raw) or SCRIPT_ERROR_MARKER in raw:
        return None
    track = first_line(raw, limit=300)
    if not track or track == NO_MUSIC:
        return None
    return track
