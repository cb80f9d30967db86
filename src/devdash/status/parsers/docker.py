from typing import List, Tuple

from ..errors import NotInstalled
from ..models import DockerContainer, DockerPayload
from .common import has_error, is_not_found

DAEMON_DOWN_MARKER = "Cannot connect to the Docker daemon"
NO_SUCH_CONTAINER_MARKER = "No such container"


def engine_running(raw: str) -> bool:
    """Whether the engine answered. A missing binary is an error, a stopped daemon is not."""
    if is_not_found(raw):
        raise NotInstalled("Docker not installed")
    if DAEMON_DOWN_MARKER in raw or has_error(raw):
        return False
    return True


def parse_containers(raw: str) -> Tuple[DockerContainer, ...]:
    containers: List[DockerContainer] = []
    names: set[str] = set()
    for line in raw.splitlines():
        if not line.strip():
            continue
        parts = line.strip().split("\t")
        if len(parts) < 3:
            continue
        name, image, status = (part.strip() for part in parts[:3])
        if name in names:
            continue
        names.add(name)
        containers.append(DockerContainer(name=name, image=image, status=status))
    return tuple(containers)


def parse(engine_raw: str, containers_raw: str = "") -> DockerPayload:
    if not engine_running(engine_raw):
        return DockerPayload(engine_running=False)
    return DockerPayload(engine_running=True, containers=parse_containers(containers_raw))


def toggle_failed(raw: str) -> bool:
    return has_error(raw) or NO_SUCH_CONTAINER_MARKER in raw
