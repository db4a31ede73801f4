"""
Tests for the event bus: fan-out, ordering, cancellation and bounded queues.
"""

import asyncio

import pytest

from eventgraph.events.bus import EventBus, SubscriptionClosed
from eventgraph.events.topics import Topic


@pytest.mark.asyncio
async def test_broadcast_to_every_subscriber(bus):
    first = bus.subscribe("eventCreated")
    second = bus.subscribe("eventCreated")

    assert bus.publish("eventCreated", {"id": "e1"}) == 2
    assert await first.get() == {"id": "e1"}
    assert await second.get() == {"id": "e1"}


@pytest.mark.asyncio
async def test_subscribers_get_their_own_copy(bus):
    first = bus.subscribe("userUpdated")
    second = bus.subscribe("userUpdated")
    payload = {"id": "1", "username": "alice"}
    bus.publish("userUpdated", payload)

    received = await first.get()
    received["username"] = "mallory"
    assert (await second.get())["username"] == "alice"
    assert payload["username"] == "alice"


@pytest.mark.asyncio
async def test_no_replay_for_late_subscribers(bus):
    bus.publish("userCreated", {"id": "early"})
    subscription = bus.subscribe("userCreated")
    with pytest.raises(asyncio.QueueEmpty):
        subscription.get_nowait()


@pytest.mark.asyncio
async def test_delivery_in_publish_order(bus):
    subscription = bus.subscribe(Topic.EVENT_UPDATED)
    for i in range(5):
        bus.publish(Topic.EVENT_UPDATED, i)
    assert [subscription.get_nowait() for _ in range(5)] == [0, 1, 2, 3, 4]


@pytest.mark.asyncio
async def test_enum_and_string_topics_are_the_same(bus):
    subscription = bus.subscribe("eventCreated")
    bus.publish(Topic.EVENT_CREATED, "x")
    assert subscription.get_nowait() == "x"


@pytest.mark.asyncio
async def test_topics_are_isolated(bus):
    subscription = bus.subscribe("userCreated")
    assert bus.publish("userDeleted", {"id": "1"}) == 0
    assert subscription.pending() == 0


@pytest.mark.asyncio
async def test_async_iteration_until_closed(bus):
    subscription = bus.subscribe("locationCreated")
    received = []

    async def consume():
        async for payload in subscription:
            received.append(payload)

    consumer = asyncio.create_task(consume())
    bus.publish("locationCreated", "a")
    bus.publish("locationCreated", "b")
    await asyncio.sleep(0)
    while subscription.pending():
        await asyncio.sleep(0)
    subscription.close()

    await asyncio.wait_for(consumer, timeout=1)
    assert received == ["a", "b"]


@pytest.mark.asyncio
async def test_close_deregisters_and_releases_queue(bus):
    subscription = bus.subscribe("userCreated")
    bus.publish("userCreated", 1)
    assert bus.subscriber_count("userCreated") == 1

    subscription.close()
    subscription.close()

    assert subscription.closed
    assert bus.subscriber_count("userCreated") == 0
    assert bus.publish("userCreated", 2) == 0
    with pytest.raises(SubscriptionClosed):
        await subscription.get()


@pytest.mark.asyncio
async def test_context_manager_closes(bus):
    with bus.subscribe("count") as subscription:
        assert bus.topics() == ["count"]
    assert subscription.closed
    assert bus.topics() == []


@pytest.mark.asyncio
async def test_close_wakes_pending_get(bus):
    subscription = bus.subscribe("eventDeleted")
    waiter = asyncio.create_task(subscription.get())
    await asyncio.sleep(0)
    subscription.close()
    with pytest.raises(SubscriptionClosed):
        await asyncio.wait_for(waiter, timeout=1)


@pytest.mark.asyncio
async def test_bounded_queue_drops_oldest():
    bus = EventBus(max_queue_size=2)
    subscription = bus.subscribe("eventCount")
    for value in (1, 2, 3):
        bus.publish("eventCount", value)

    assert subscription.dropped == 1
    assert [subscription.get_nowait(), subscription.get_nowait()] == [2, 3]


@pytest.mark.asyncio
async def test_predicate_filters_per_subscriber(bus):
    only_u1 = bus.subscribe("eventCreated", lambda payload: payload["user_id"] == "u1")
    everything = bus.subscribe("eventCreated")

    bus.publish("eventCreated", {"id": "e1", "user_id": "u2"})
    bus.publish("eventCreated", {"id": "e2", "user_id": "u1"})

    assert only_u1.get_nowait()["id"] == "e2"
    assert only_u1.pending() == 0
    assert everything.pending() == 2


@pytest.mark.asyncio
async def test_failing_predicate_only_affects_its_subscriber(bus):
    broken = bus.subscribe("participantAdded", lambda payload: payload["missing"])
    healthy = bus.subscribe("participantAdded")

    assert bus.publish("participantAdded", {"id": "p1"}) == 1
    assert broken.pending() == 0
    assert healthy.get_nowait() == {"id": "p1"}


@pytest.mark.asyncio
async def test_bus_close_ends_all_subscriptions(bus):
    first = bus.subscribe("a")
    second = bus.subscribe("b")
    bus.close()
    assert first.closed and second.closed
    assert bus.subscriber_count() == 0
