"""Per-encounter publish/subscribe bus for resolution notifications.

Design:
- Only :class:`~core.events.topics.EventTopic` topics exist; their string
  values are accepted too, anything else is a programming error and raises
  ``ValueError`` at subscribe or publish time.
- Payloads are keyword arguments.  Subscribers run synchronously in
  subscription order, after the hit has been committed (see
  :class:`core.encounter.Encounter`); an exception raised by one of them
  propagates to the publisher.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List

from core.events.topics import EventTopic

__all__ = ["EventBus", "Subscriber", "Topic"]

Topic = str | EventTopic
Subscriber = Callable[..., None]

logger = logging.getLogger(__name__)


class EventBus:
    """In-memory dispatcher owned by a single encounter."""

    def __init__(self) -> None:
        self._subscribers: Dict[EventTopic, List[Subscriber]] = {}

    @staticmethod
    def _topic(topic: Topic) -> EventTopic:
        return EventTopic(topic)

    def subscribe(self, topic: Topic, callback: Subscriber) -> None:
        """Register ``callback`` for ``topic``; duplicates are ignored."""

        callbacks = self._subscribers.setdefault(self._topic(topic), [])
        if callback not in callbacks:
            callbacks.append(callback)

    def unsubscribe(self, topic: Topic, callback: Subscriber) -> None:
        key = self._topic(topic)
        callbacks = self._subscribers.get(key, [])
        if callback in callbacks:
            callbacks.remove(callback)
        if not callbacks:
            self._subscribers.pop(key, None)

    def has_subscribers(self, topic: Topic) -> bool:
        return bool(self._subscribers.get(self._topic(topic)))

    def publish(self, topic: Topic, **payload: Any) -> int:
        """Deliver ``topic`` to its subscribers and return how many were called."""

        key = self._topic(topic)
        callbacks = list(self._subscribers.get(key, ()))
        logger.debug("publish %s to %d subscriber(s)", key.value, len(callbacks))
        for callback in callbacks:
            callback(**payload)
        return len(callbacks)
