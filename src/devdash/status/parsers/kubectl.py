from typing import List

from ..errors import CommandFailed, NotInstalled
from ..models import UNKNOWN, KubectlPayload
from .common import first_line, has_error, is_not_found


def normalize_context(value: str) -> str:
    return value.strip().replace("*", "").strip()


def parse_contexts(raw: str) -> List[str]:
    """Context names in output order, without blanks or repeats."""
    contexts: List[str] = []
    for line in raw.splitlines():
        name = normalize_context(line)
        if name and name not in contexts:
            contexts.append(name)
    return contexts


def parse_current_context(raw: str) -> str:
    if is_not_found(raw) or has_error(raw):
        return ""
    return normalize_context(first_line(raw))


def parse(contexts_raw: str, current_raw: str) -> KubectlPayload:
    if is_not_found(contexts_raw):
        raise NotInstalled("kubectl not found")
    if has_error(contexts_raw):
        raise CommandFailed(first_line(contexts_raw) or "kubectl failed")

    contexts = parse_contexts(contexts_raw)
    current = parse_current_context(current_raw)

    # current-context can briefly disagree with the list while kubeconfig is rewritten
    if current and current not in contexts:
        contexts.insert(0, current)

    return KubectlPayload(
        current_context=current or UNKNOWN,
        available_contexts=tuple(contexts),
    )
