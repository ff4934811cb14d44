"""In-process publish/subscribe channel for store changes.

Services publish after a successful write; observers (the live roll view, SSE
streams, tests) subscribe instead of re-reading the store on a timer.
"""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional

from ..core.enums import EventTopic

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Event:
    topic: EventTopic
    payload: dict = field(default_factory=dict)


Subscriber = Callable[[Event], Any]


class EventBus:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._subscribers: list[tuple[Subscriber, Optional[frozenset[EventTopic]]]] = []

    def subscribe(self, callback: Subscriber, topics: Optional[Iterable[EventTopic]] = None) -> Callable[[], None]:
        """Register a callback; returns a function that removes it again."""

        entry = (callback, frozenset(topics) if topics is not None else None)
        with self._lock:
            self._subscribers.append(entry)

        def unsubscribe() -> None:
            with self._lock:
                if entry in self._subscribers:
                    self._subscribers.remove(entry)

        return unsubscribe

    def publish(self, topic: EventTopic, payload: Optional[dict] = None) -> Event:
        event = Event(topic=topic, payload=dict(payload or {}))
        with self._lock:
            targets = list(self._subscribers)

        for callback, topics in targets:
            if topics is not None and topic not in topics:
                continue
            try:
                callback(event)
            except Exception:
                logger.exception("event subscriber failed for %s", topic.value)
        return event


class EventQueue:
    """Subscriber that buffers events for a consumer thread (e.g. an SSE response)."""

    def __init__(self, bus: EventBus, topics: Optional[Iterable[EventTopic]] = None, *, maxsize: int = 100):
        self._queue: "queue.Queue[Event]" = queue.Queue(maxsize=maxsize)
        self._unsubscribe = bus.subscribe(self._offer, topics)

    def _offer(self, event: Event) -> None:
        try:
            self._queue.put_nowait(event)
        except queue.Full:
            logger.warning("event queue full, dropping %s", event.topic.value)

    def get(self, timeout: Optional[float] = None) -> Optional[Event]:
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def close(self) -> None:
        self._unsubscribe()
