"""
Minimal observer list used for in-process notifications.

Subscribers are plain callables invoked synchronously, in subscription
order, on the thread that calls :meth:`EventHook.emit`.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Generic, TypeVar

import structlog

logger = structlog.get_logger()

T = TypeVar("T")


class EventHook(Generic[T]):
    """A named subscription list.

    A subscriber that raises is logged and skipped; the remaining
    subscribers still receive the payload.

    Args:
        name: Event name used in log lines.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._subscribers: list[Callable[[T], None]] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        """Register *callback* and return a function that removes it."""
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def emit(self, payload: T) -> int:
        """Deliver *payload* to every subscriber.

        Returns:
            Number of subscribers that handled the payload without raising.
        """
        delivered = 0
        for callback in list(self._subscribers):
            try:
                callback(payload)
                delivered += 1
            except Exception:
                logger.exception("event_subscriber_failed", event_name=self.name)
        return delivered
