"""Event bus for state-change notifications.

Events are defined with pydantic schemas and published on a ``Bus``
instance owned by the dashboard context.

Example:
    class ToolStatusUpdatedProps(BaseModel):
        tool: str

    ToolStatusUpdated = BusEvent.define("tool.status.updated", ToolStatusUpdatedProps)

    bus = Bus()
    unsubscribe = bus.subscribe(ToolStatusUpdated, lambda payload: print(payload.properties))
    await bus.publish(ToolStatusUpdated, ToolStatusUpdatedProps(tool="docker"))
    unsubscribe()
"""

import traceback
from typing import Any, Awaitable, Callable, Dict, Generic, List, Optional, TypeVar, Union

from pydantic import BaseModel

T = TypeVar('T', bound=BaseModel)

# Lazy logger to avoid circular imports
_log: Optional[Any] = None


def _get_log():
    global _log
    if _log is None:
        from ..util.log import Log
        _log = Log.create({"service": "bus"})
    return _log


class BusEvent(Generic[T]):
    """Event definition: a type string plus the pydantic model of its properties."""

    def __init__(self, event_type: str, properties_type: type[T]):
        self.type = event_type
        self.properties_type = properties_type

    @staticmethod
    def define(event_type: str, properties_type: type[T]) -> 'BusEvent[T]':
        """Define and register a new event type."""
        event = BusEvent(event_type, properties_type)
        _registry[event_type] = event
        return event


_registry: Dict[str, BusEvent] = {}


class EventPayload(BaseModel):
    """Payload delivered to subscribers."""
    type: str
    properties: Dict[str, Any]


SubscriptionCallback = Callable[[EventPayload], Union[None, Awaitable[None]]]


class Bus:
    """Publish/subscribe hub. Subscriber failures are logged, never raised."""

    def __init__(self) -> None:
        self._subscriptions: Dict[str, List[SubscriptionCallback]] = {}

    async def publish(self, event: BusEvent[T], properties: T) -> None:
        if not isinstance(properties, event.properties_type):
            if isinstance(properties, dict):
                properties = event.properties_type(**properties)
            else:
                raise TypeError(
                    f"Properties must be instance of {event.properties_type.__name__}"
                )

        payload = EventPayload(
            type=event.type,
            properties=properties.model_dump(mode="json"),
        )

        callbacks = [
            *self._subscriptions.get(event.type, []),
            *self._subscriptions.get("*", []),
        ]
        for callback in callbacks:
            try:
                result = callback(payload)
                if hasattr(result, '__await__'):
                    await result
            except Exception as e:
                _get_log().error("subscription callback failed", {
                    "error": str(e),
                    "type": event.type,
                    "traceback": traceback.format_exc(),
                })

    def subscribe(self, event: BusEvent[T], callback: SubscriptionCallback) -> Callable[[], None]:
        return self._raw_subscribe(event.type, callback)

    def subscribe_all(self, callback: SubscriptionCallback) -> Callable[[], None]:
        return self._raw_subscribe("*", callback)

    def _raw_subscribe(self, event_type: str, callback: SubscriptionCallback) -> Callable[[], None]:
        self._subscriptions.setdefault(event_type, []).append(callback)

        def unsubscribe() -> None:
            subs = self._subscriptions.get(event_type, [])
            if callback in subs:
                subs.remove(callback)

        return unsubscribe

    def clear(self) -> None:
        self._subscriptions.clear()
