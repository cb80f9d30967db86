"""Status records shared by the aggregators and their readers.

Every record is frozen. Writers build a complete record and swap it into
its slot, so a reader always sees a fully-formed value.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

LOADING = "Loading..."
UNKNOWN = "Unknown"
NO_MUSIC = "No music playing"
NO_SUBSCRIPTION = "Not found"


class ToolName(str, Enum):
    KUBECTL = "kubectl"
    AZURE = "azure"
    GITHUB = "github"
    PULUMI = "pulumi"
    DOCKER = "docker"


class ErrorKind(str, Enum):
    NOT_INSTALLED = "not_installed"
    NOT_AUTHENTICATED = "not_authenticated"
    PARSE_FAILURE = "parse_failure"
    COMMAND_FAILED = "command_failed"
    TRANSPORT_ERROR = "transport_error"


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True)


class ToolError(_Record):
    kind: ErrorKind
    message: str


class KubectlPayload(_Record):
    tool: Literal["kubectl"] = "kubectl"
    current_context: str
    available_contexts: Tuple[str, ...] = ()


class AzureSubscription(_Record):
    id: str
    name: str
    is_default: bool = False


class AzurePayload(_Record):
    tool: Literal["azure"] = "azure"
    current_subscription_name: str = NO_SUBSCRIPTION
    subscriptions: Tuple[AzureSubscription, ...] = ()


class PullRequest(_Record):
    title: str
    repo_name: str


class GitHubPayload(_Record):
    tool: Literal["github"] = "github"
    login: str
    name: str = ""
    company: str = ""
    location: str = ""
    open_prs: Tuple[PullRequest, ...] = ()


class PulumiPayload(_Record):
    tool: Literal["pulumi"] = "pulumi"
    user: str
    organizations: Tuple[str, ...] = ()
    console_url: str = ""
    stacks: Tuple[str, ...] = ()
    current_stack: Optional[str] = None


class DockerContainer(_Record):
    name: str
    image: str
    status: str

    @property
    def is_running(self) -> bool:
        return self.status.startswith("Up")


class DockerPayload(_Record):
    tool: Literal["docker"] = "docker"
    engine_running: bool
    containers: Tuple[DockerContainer, ...] = ()


ToolPayload = Annotated[
    Union[KubectlPayload, AzurePayload, GitHubPayload, PulumiPayload, DockerPayload],
    Field(discriminator="tool"),
]


class ToolStatus(_Record):
    """Latest state of one tool. ``error`` always reflects the latest attempt."""
    tool: ToolName
    last_updated: Optional[datetime] = None
    error: Optional[ToolError] = None
    payload: Optional[ToolPayload] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.payload is not None


class SystemSnapshot(_Record):
    """System metrics as display strings, each updated independently."""
    cpu_percent: str = LOADING
    memory_percent: str = LOADING
    disk_summary: str = LOADING
    audio_device_name: str = LOADING
    now_playing: str = NO_MUSIC
    network_org: str = LOADING
    network_ip: str = LOADING
    city: str = ""
    country: str = ""
    last_updated: Optional[datetime] = None
