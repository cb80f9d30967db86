"""Output-classification heuristics shared by the parsers.

The tools are driven through a shell that merges stdout and stderr, so
failures are recognised by the text they print. Keep every marker here so
the heuristics can be swapped for exit-code checks in one place.
"""

import json
from typing import Any

from ...shell import ERROR_PREFIX
from ..errors import ParseFailure

NOT_FOUND_MARKER = "command not found"
ERROR_MARKER = "Error"


def is_not_found(raw: str) -> bool:
    return NOT_FOUND_MARKER in raw


def has_error(raw: str) -> bool:
    """True for ``Error`` anywhere, or output opening with ``error:``/``ERROR:``."""
    if ERROR_MARKER in raw:
        return True
    return raw.lstrip().lower().startswith("error:")


def is_runner_error(raw: str) -> bool:
    """True when the runner itself failed (spawn failure or timeout)."""
    return raw.startswith(ERROR_PREFIX)


def first_line(raw: str, limit: int = 200) -> str:
    for line in raw.splitlines():
        text = line.strip()
        if text:
            return text[:limit]
    return ""


def load_json(raw: str, what: str) -> Any:
    try:
        return json.loads(raw)
    except ValueError as e:
        raise ParseFailure(f"Failed to parse {what}") from e


def text(value: Any) -> str:
    """JSON string field, with null or non-string values read as empty."""
    return value if isinstance(value, str) else ""
