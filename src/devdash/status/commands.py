"""Shell commands issued by the pollers and mutations.

The tool commands must stay byte-for-byte compatible with the CLIs they drive.
"""

import shlex

KUBECTL_CONTEXTS = "kubectl config get-contexts -o name"
KUBECTL_CURRENT_CONTEXT = "kubectl config current-context"

AZ_ACCOUNT_LIST = "az account list --output json"

GH_USER = "gh api user --jq '{login: .login, name: .name, company: .company, location: .location}'"
GH_PRS = "gh pr list --author @me --json title,repository --limit 10"

PULUMI_WHOAMI = "pulumi whoami -v -j"
PULUMI_STACKS = "pulumi stack ls --json"

DOCKER_VERSION = "docker info --format '{{.ServerVersion}}'"
DOCKER_CONTAINERS = "docker ps -a --format '{{.Names}}\\t{{.Image}}\\t{{.Status}}'"
DOCKER_ENGINE_STOP = "osascript -e 'quit app \"Docker\"'"
DOCKER_ENGINE_START = "open -a Docker"

CPU_USAGE = "top -l 2 | grep 'CPU usage' | tail -1 | awk '{print $3}' | sed 's/%//'"
MEMORY_USAGE = (
    "vm_stat | awk '/Pages free:/{free=$3} /Pages active:/{active=$3} "
    "/Pages inactive:/{inactive=$3} /Pages speculative:/{spec=$3} /Pages wired down:/{wired=$4} "
    "END{total=free+active+inactive+spec+wired; used=total-free-spec; "
    "printf \"%.1f\", (used/total)*100}'"
)
DISK_USAGE = "df -h / | tail -1 | awk '{print $3\"/\"$2\" (\"$5\" used)\"}'"
AUDIO_DEVICE = (
    "system_profiler SPAudioDataType | awk '/Output Source: Default/{found=1} "
    "found && /^[[:space:]]*[A-Za-z].*:$/{print $1; exit}' | sed 's/://g' || echo 'Built-in Output'"
)

PRIMARY_PLAYER = "Spotify"
SECONDARY_PLAYER = "Music"


def kubectl_use_context(name: str) -> str:
    return f"kubectl config use-context {shlex.quote(name)}"


def az_set_subscription(subscription_id: str) -> str:
    return f"az account set --subscription {shlex.quote(subscription_id)}"


def docker_start(name: str) -> str:
    return f"docker start {shlex.quote(name)}"


def docker_stop(name: str) -> str:
    return f"docker stop {shlex.quote(name)}"


def pulumi_select_stack(name: str) -> str:
    return f"pulumi stack select {shlex.quote(name)}"


def now_playing(player: str) -> str:
    """AppleScript query that prints ``track - artist`` or nothing.

    The ``is running`` guard keeps the query from launching the player.
    """
    lines = [
        f'if application "{player}" is running then',
        f'tell application "{player}"',
        'if player state is playing then return (name of current track) & " - " & (artist of current track)',
        'end tell',
        'end if',
        'return ""',
    ]
    return "osascript " + " ".join(f"-e {shlex.quote(line)}" for line in lines)
