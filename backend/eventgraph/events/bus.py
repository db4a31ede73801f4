"""
In-process publish/subscribe bus for change notifications.

Publishers call `publish()` after a mutation has been persisted; it never
awaits, so a slow subscriber can't hold up the request that published.
Each subscriber owns an asyncio.Queue and receives its own copy of every
payload published on its topic after it registered. There is no replay:
a subscriber sees nothing that was published before `subscribe()` returned.

Example:
    bus = EventBus()

    with bus.subscribe("eventCreated") as subscription:
        async for payload in subscription:
            print(payload["title"])

    # elsewhere
    bus.publish("eventCreated", {"id": "...", "title": "Launch"})

Queues are unbounded by default. With `max_queue_size` set, a full queue
discards its oldest payload to make room (drop-oldest) and counts it in
`Subscription.dropped`.
"""

import asyncio
import copy
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from eventgraph.core.logging import get_logger
from eventgraph.core.metrics import record_publication, set_subscriber_count

logger = get_logger(__name__)

Predicate = Callable[[Any], bool]

_CLOSED = object()


def topic_name(topic: Any) -> str:
    return topic.value if isinstance(topic, Enum) else str(topic)


class SubscriptionClosed(Exception):
    """Raised by `Subscription.get()` once the subscription is closed."""


class Subscription:
    """
    A consumer registered on one topic.

    Supports `async for`, blocking `await get()`, polling `get_nowait()`
    and explicit `close()`. Used as a context manager it closes on exit,
    which is how subscription resolvers release their queue when the
    client goes away.
    """

    def __init__(
        self,
        bus: "EventBus",
        topic: str,
        predicate: Optional[Predicate] = None,
        max_queue_size: int = 0,
    ):
        self.topic = topic
        self.predicate = predicate
        self.dropped = 0
        self._bus = bus
        self._max_queue_size = max_queue_size
        self._queue: asyncio.Queue = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def pending(self) -> int:
        return self._queue.qsize()

    def accepts(self, payload: Any) -> bool:
        if self.predicate is None:
            return True
        try:
            return bool(self.predicate(payload))
        except Exception as e:
            logger.error(
                "subscription_filter_failed",
                topic=self.topic,
                error=str(e),
                exc_info=True,
            )
            return False

    def deliver(self, payload: Any) -> bool:
        """Enqueue without waiting. Returns True if an old payload was dropped."""
        dropped = False
        if self._max_queue_size and self._queue.qsize() >= self._max_queue_size:
            self._queue.get_nowait()
            self.dropped += 1
            dropped = True
        self._queue.put_nowait(payload)
        return dropped

    async def get(self) -> Any:
        if self._closed:
            raise SubscriptionClosed(self.topic)
        payload = await self._queue.get()
        if payload is _CLOSED:
            raise SubscriptionClosed(self.topic)
        return payload

    def get_nowait(self) -> Any:
        """Raises asyncio.QueueEmpty if nothing is waiting."""
        if self._closed:
            raise SubscriptionClosed(self.topic)
        payload = self._queue.get_nowait()
        if payload is _CLOSED:
            raise SubscriptionClosed(self.topic)
        return payload

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._bus._remove(self)
        # Release whatever was queued and wake a pending get()
        while not self._queue.empty():
            self._queue.get_nowait()
        self._queue.put_nowait(_CLOSED)

    def __aiter__(self):
        return self

    async def __anext__(self) -> Any:
        try:
            return await self.get()
        except SubscriptionClosed:
            raise StopAsyncIteration

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class EventBus:
    """
    Topic-keyed broadcast bus.

    Not a singleton: the application builds one at startup and hands it to
    the repositories, tests build their own.
    """

    def __init__(self, max_queue_size: int = 0):
        self.max_queue_size = max_queue_size
        self._subscriptions: Dict[str, List[Subscription]] = {}

    def subscribe(self, topic: str, predicate: Optional[Predicate] = None) -> Subscription:
        """
        Register a consumer on a topic.

        Registration is immediate: anything published after this call
        returns is queued, even if iteration hasn't started yet.
        """
        topic = topic_name(topic)
        subscription = Subscription(self, topic, predicate, self.max_queue_size)
        self._subscriptions.setdefault(topic, []).append(subscription)
        set_subscriber_count(topic, len(self._subscriptions[topic]))
        logger.debug(
            "subscription_registered",
            topic=topic,
            filtered=predicate is not None,
            subscribers=len(self._subscriptions[topic]),
        )
        return subscription

    def publish(self, topic: str, payload: Any) -> int:
        """
        Deliver payload to every current subscriber of topic.
        Returns the number of subscribers that received it.
        """
        topic = topic_name(topic)
        subscribers = list(self._subscriptions.get(topic, []))
        delivered = 0
        dropped = 0

        for subscription in subscribers:
            if not subscription.accepts(payload):
                continue
            if subscription.deliver(copy.deepcopy(payload)):
                dropped += 1
            delivered += 1

        record_publication(topic, dropped)
        if dropped:
            logger.warning("subscriber_queue_full", topic=topic, dropped=dropped)
        logger.debug(
            "published",
            topic=topic,
            subscribers=len(subscribers),
            delivered=delivered,
        )
        return delivered

    def subscriber_count(self, topic: Optional[str] = None) -> int:
        if topic is not None:
            return len(self._subscriptions.get(topic_name(topic), []))
        return sum(len(subs) for subs in self._subscriptions.values())

    def topics(self) -> List[str]:
        """Topics that currently have at least one subscriber."""
        return [topic for topic, subs in self._subscriptions.items() if subs]

    def close(self) -> None:
        """Close every subscription. Used on application shutdown."""
        for subs in list(self._subscriptions.values()):
            for subscription in list(subs):
                subscription.close()
        self._subscriptions.clear()

    def _remove(self, subscription: Subscription) -> None:
        subs = self._subscriptions.get(subscription.topic)
        if not subs:
            return
        try:
            subs.remove(subscription)
        except ValueError:
            return
        set_subscriber_count(subscription.topic, len(subs))
        if not subs:
            del self._subscriptions[subscription.topic]
        logger.debug("subscription_closed", topic=subscription.topic, subscribers=len(subs))
