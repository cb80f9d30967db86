import pytest
from pydantic import BaseModel

from devdash.core.bus import Bus, BusEvent


class PingProps(BaseModel):
    value: int


Ping = BusEvent.define("test.ping", PingProps)
Pong = BusEvent.define("test.pong", PingProps)


@pytest.mark.anyio
async def test_publish_reaches_typed_and_wildcard_subscribers() -> None:
    bus = Bus()
    typed: list = []
    everything: list = []
    bus.subscribe(Ping, typed.append)
    bus.subscribe_all(everything.append)

    await bus.publish(Ping, PingProps(value=1))
    await bus.publish(Pong, PingProps(value=2))

    assert [p.properties["value"] for p in typed] == [1]
    assert [p.type for p in everything] == ["test.ping", "test.pong"]


@pytest.mark.anyio
async def test_publish_accepts_dict_properties_and_awaits_async_callbacks() -> None:
    bus = Bus()
    seen: list = []

    async def on_ping(payload) -> None:  # type: ignore[no-untyped-def]
        seen.append(payload.properties)

    bus.subscribe(Ping, on_ping)
    await bus.publish(Ping, {"value": 3})

    assert seen == [{"value": 3}]


@pytest.mark.anyio
async def test_publish_rejects_wrong_properties() -> None:
    with pytest.raises(TypeError):
        await Bus().publish(Ping, "nope")  # type: ignore[arg-type]


@pytest.mark.anyio
async def test_failing_subscriber_does_not_stop_delivery() -> None:
    bus = Bus()
    seen: list = []

    def broken(_payload) -> None:  # type: ignore[no-untyped-def]
        raise RuntimeError("subscriber bug")

    bus.subscribe(Ping, broken)
    bus.subscribe(Ping, seen.append)
    await bus.publish(Ping, PingProps(value=4))

    assert len(seen) == 1


@pytest.mark.anyio
async def test_unsubscribe_and_clear() -> None:
    bus = Bus()
    seen: list = []
    unsubscribe = bus.subscribe(Ping, seen.append)
    unsubscribe()
    unsubscribe()
    await bus.publish(Ping, PingProps(value=5))

    bus.subscribe_all(seen.append)
    bus.clear()
    await bus.publish(Ping, PingProps(value=6))

    assert seen == []
