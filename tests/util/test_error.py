from devdash.core.config_loader import ConfigError
from devdash.net import TransportError
from devdash.status.errors import NotAuthenticated
from devdash.status.models import ErrorKind, ToolError
from devdash.util.error import format_error


def test_format_tool_errors() -> None:
    error = ToolError(kind=ErrorKind.NOT_INSTALLED, message="kubectl not found")

    assert format_error(error) == "kubectl not found (not installed)"
    assert format_error(NotAuthenticated("Azure CLI not logged in")) == "Azure CLI not logged in (not logged in)"


def test_format_transport_errors() -> None:
    assert format_error(TransportError("https://ip.test", "request timed out")) == (
        "Could not reach https://ip.test: request timed out"
    )
    assert format_error(TransportError("https://ip.test", "HTTP 503 Service Unavailable", 503)) == (
        "Request to https://ip.test failed: HTTP 503 Service Unavailable"
    )


def test_format_config_error_and_unknown() -> None:
    assert format_error(ConfigError("devdash.json", "bad")) == "Config error in devdash.json: bad"
    assert format_error(ValueError("other")) is None
