import json
from typing import List, Optional, Tuple

from ..errors import CommandFailed, NotAuthenticated, NotInstalled, ParseFailure
from ..models import UNKNOWN, PulumiPayload
from .common import first_line, has_error, is_not_found, load_json, text

LOGIN_MARKERS = ("pulumi login", "PULUMI_ACCESS_TOKEN")


def parse_whoami(raw: str) -> dict:
    if is_not_found(raw):
        raise NotInstalled("Pulumi not found")
    if any(marker in raw for marker in LOGIN_MARKERS):
        raise NotAuthenticated("Pulumi not logged in")
    if has_error(raw):
        raise CommandFailed(first_line(raw) or "pulumi whoami failed")

    data = load_json(raw, "Pulumi identity")
    if not isinstance(data, dict):
        raise ParseFailure("Failed to parse Pulumi identity")

    orgs = data.get("organizations")
    return {
        "user": text(data.get("user")) or UNKNOWN,
        "organizations": tuple(o for o in orgs if isinstance(o, str)) if isinstance(orgs, list) else (),
        "console_url": text(data.get("url")),
    }


def parse_stacks(raw: str) -> Tuple[Tuple[str, ...], Optional[str]]:
    """Stack names and the selected stack. Outside a project both are empty."""
    try:
        data = json.loads(raw)
    except ValueError:
        return (), None
    if not isinstance(data, list):
        return (), None

    names: List[str] = []
    current: Optional[str] = None
    for item in data:
        if not isinstance(item, dict):
            continue
        name = item.get("name")
        if not isinstance(name, str) or not name or name in names:
            continue
        names.append(name)
        if item.get("current") is True and current is None:
            current = name
    return tuple(names), current


def parse(whoami_raw: str, stacks_raw: str = "") -> PulumiPayload:
    identity = parse_whoami(whoami_raw)
    stacks, current = parse_stacks(stacks_raw)
    return PulumiPayload(**identity, stacks=stacks, current_stack=current)
