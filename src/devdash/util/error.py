"""Error formatting utilities.

Turns the dashboard's classified errors into one-line, user-facing text.
"""

from typing import Any

from ..core.config_loader import ConfigError
from ..net import TransportError
from ..status.errors import ToolFailure
from ..status.models import ErrorKind, ToolError

KIND_LABELS = {
    ErrorKind.NOT_INSTALLED: "not installed",
    ErrorKind.NOT_AUTHENTICATED: "not logged in",
    ErrorKind.PARSE_FAILURE: "unreadable output",
    ErrorKind.COMMAND_FAILED: "command failed",
    ErrorKind.TRANSPORT_ERROR: "network error",
}


def format_error(error: Any) -> str | None:
    """Format known errors. Returns None for anything unrecognised."""
    if isinstance(error, ToolError):
        return f"{error.message} ({KIND_LABELS[error.kind]})"
    if isinstance(error, ToolFailure):
        return f"{error.message} ({KIND_LABELS[error.kind]})"
    if isinstance(error, TransportError):
        if error.status_code is not None:
            return f"Request to {error.url} failed: {error}"
        return f"Could not reach {error.url}: {error}"
    if isinstance(error, ConfigError):
        return str(error)
    return None

