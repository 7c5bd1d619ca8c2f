"""
In-process publish/subscribe channel backing the GraphQL subscriptions.

Publishing is synchronous and may happen from any thread. Each subscriber owns
a bounded asyncio queue bound to the event loop it subscribed from; events are
handed over with ``call_soon_threadsafe``. A subscriber whose queue is full
misses the event rather than blocking the publisher.
"""
import asyncio
import logging
import threading
from collections import defaultdict
from typing import Any, AsyncIterator

from marketplace.core.config import settings

logger = logging.getLogger(__name__)

NEW_LISTING = "NEW_LISTING"
ORDER_STATUS_CHANGED = "ORDER_STATUS_CHANGED"


class _Subscriber:
    def __init__(self, topic: str, loop: asyncio.AbstractEventLoop, maxsize: int) -> None:
        self.topic = topic
        self.loop = loop
        self.queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)

    def deliver(self, payload: Any) -> None:
        try:
            self.loop.call_soon_threadsafe(self._put, payload)
        except RuntimeError:
            # loop already closed; the subscription is being torn down
            logger.debug("Dropped %s event for closed subscriber", self.topic)

    def _put(self, payload: Any) -> None:
        try:
            self.queue.put_nowait(payload)
        except asyncio.QueueFull:
            logger.warning("Subscriber queue full on topic=%s, event dropped", self.topic)


class EventBus:
    """Topic-keyed fan-out of events to every live subscriber."""

    def __init__(self, queue_size: int = settings.EVENT_QUEUE_SIZE) -> None:
        self._queue_size = queue_size
        self._subscribers: dict[str, list[_Subscriber]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscriber_count(self, topic: str) -> int:
        with self._lock:
            return len(self._subscribers.get(topic, ()))

    def publish(self, topic: str, payload: Any) -> int:
        """Send *payload* to every current subscriber of *topic*; return how many."""
        with self._lock:
            targets = list(self._subscribers.get(topic, ()))
        for subscriber in targets:
            subscriber.deliver(payload)
        logger.info("Published %s event to %s subscribers", topic, len(targets))
        return len(targets)

    async def subscribe(self, topic: str) -> AsyncIterator[Any]:
        """Yield events published on *topic* until the consumer stops iterating."""
        subscriber = _Subscriber(topic, asyncio.get_running_loop(), self._queue_size)
        with self._lock:
            self._subscribers[topic].append(subscriber)
        logger.info("Subscriber registered on topic=%s", topic)
        try:
            while True:
                yield await subscriber.queue.get()
        finally:
            with self._lock:
                self._subscribers[topic].remove(subscriber)
            logger.info("Subscriber removed from topic=%s", topic)
