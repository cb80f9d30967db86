from typing import List, Optional

from ..errors import CommandFailed, NotAuthenticated, NotInstalled, ParseFailure
from ..models import NO_SUBSCRIPTION, AzurePayload, AzureSubscription
from .common import first_line, has_error, is_not_found, load_json

LOGIN_MARKER = "Please run 'az login'"


def parse(raw: str) -> AzurePayload:
    if is_not_found(raw):
        raise NotInstalled("Azure CLI not found")
    if LOGIN_MARKER in raw:
        raise NotAuthenticated("Azure CLI not logged in")
    if has_error(raw):
        raise CommandFailed(first_line(raw) or "az account list failed")

    data = load_json(raw, "subscriptions")
    if not isinstance(data, list):
        raise ParseFailure("Failed to parse subscriptions")

    subscriptions: List[AzureSubscription] = []
    seen: set[str] = set()
    current: Optional[str] = None
    for record in data:
        if not isinstance(record, dict):
            continue
        sub_id = record.get("id")
        name = record.get("name")
        if not isinstance(sub_id, str) or not isinstance(name, str) or sub_id in seen:
            continue
        seen.add(sub_id)

        # only the first flagged record counts as the default
        is_default = record.get("isDefault") is True and current is None
        if is_default:
            current = name
        subscriptions.append(AzureSubscription(id=sub_id, name=name, is_default=is_default))

    return AzurePayload(
        current_subscription_name=current if current is not None else NO_SUBSCRIPTION,
        subscriptions=tuple(subscriptions),
    )
