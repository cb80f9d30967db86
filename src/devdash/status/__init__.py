"""Polling, aggregation and mutation of developer-tool and system status."""

from .models import (
    AzurePayload,
    AzureSubscription,
    DockerContainer,
    DockerPayload,
    ErrorKind,
    GitHubPayload,
    KubectlPayload,
    PullRequest,
    PulumiPayload,
    SystemSnapshot,
    ToolError,
    ToolName,
    ToolStatus,
)
from .mutations import MutationCoordinator
from .system import SystemStatusAggregator
from .tools import ToolStatusAggregator

__all__ = [
    "AzurePayload",
    "AzureSubscription",
    "DockerContainer",
    "DockerPayload",
    "ErrorKind",
    "GitHubPayload",
    "KubectlPayload",
    "MutationCoordinator",
    "PullRequest",
    "PulumiPayload",
    "SystemSnapshot",
    "SystemStatusAggregator",
    "ToolError",
    "ToolName",
    "ToolStatus",
    "ToolStatusAggregator",
]
