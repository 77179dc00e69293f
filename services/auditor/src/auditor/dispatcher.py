"""
Detection dispatcher for ModSentinel.

Receives :class:`DisallowedDetectedEvent` objects from the classifier
(synchronously, on the classifier's tick), queues them, and fans each
out to every enabled channel from a background task.

Flow
----
1. ``classifier.on_disallowed_detected`` → :meth:`submit` (non-blocking).
2. The drain task pops events and calls :meth:`dispatch`.
3. :meth:`dispatch` sends to each enabled channel and records
   per-channel delivery status on the event.
"""

from __future__ import annotations

import asyncio
from collections import deque

import structlog

from ms_common.models import DisallowedDetectedEvent

from .channels.base import AlertChannel

logger = structlog.get_logger()

_DEFAULT_HISTORY = 100


class DetectionDispatcher:
    """Queue detections and deliver them to channels.

    Args:
        channels: Enabled :class:`AlertChannel` implementations.
        history_size: Number of dispatched events kept for inspection.
    """

    def __init__(
        self,
        channels: list[AlertChannel],
        *,
        history_size: int = _DEFAULT_HISTORY,
    ) -> None:
        self.channels = channels
        self._queue: asyncio.Queue[DisallowedDetectedEvent] = asyncio.Queue()
        self._history: deque[DisallowedDetectedEvent] = deque(maxlen=history_size)
        self._task: asyncio.Task[None] | None = None

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def recent(self, limit: int | None = None) -> list[DisallowedDetectedEvent]:
        """Most recently dispatched events, newest first."""
        events = list(reversed(self._history))
        return events if limit is None else events[:limit]

    # ── intake ──

    def submit(self, event: DisallowedDetectedEvent) -> None:
        """Queue *event* for delivery; safe to call from the classifier tick."""
        self._queue.put_nowait(event)
        logger.debug("detection_queued", event_id=str(event.event_id))

    # ── dispatch pipeline ──

    async def dispatch(self, event: DisallowedDetectedEvent) -> bool:
        """Send *event* to every enabled channel.

        Returns:
            ``True`` if at least one channel accepted the event.
        """
        log = logger.bind(event_id=str(event.event_id), user_id=event.user_id)
        delivered_to: list[str] = []
        delivery_status: dict[str, str] = {}

        for ch in self.channels:
            if not ch.enabled:
                continue
            try:
                ok = await ch.send(event)
                if ok:
                    delivered_to.append(ch.name)
                    delivery_status[ch.name] = "delivered"
                else:
                    delivery_status[ch.name] = "failed"
            except Exception as exc:  # noqa: BLE001
                log.error("channel_send_error", channel=ch.name, error=str(exc))
                delivery_status[ch.name] = "error"

        event.delivered_to = delivered_to
        event.delivery_status = delivery_status
        self._history.append(event)

        log.info(
            "detection_dispatched",
            delivered_to=delivered_to,
            delivery_status=delivery_status,
        )
        return len(delivered_to) > 0

    async def drain(self) -> int:
        """Dispatch everything currently queued. Returns the number dispatched."""
        count = 0
        while not self._queue.empty():
            await self.dispatch(self._queue.get_nowait())
            self._queue.task_done()
            count += 1
        return count

    # ── lifecycle ──

    async def start(self) -> None:
        """Begin draining the queue in the background."""
        if self._task is None:
            self._task = asyncio.create_task(self._run())
            logger.info("dispatcher_started", channels=[c.name for c in self.channels])

    async def stop(self) -> None:
        """Stop the drain task and close all channels."""
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        for ch in self.channels:
            await ch.close()
        logger.info("dispatcher_stopped")

    async def _run(self) -> None:
        while True:
            event = await self._queue.get()
            try:
                await self.dispatch(event)
            finally:
                self._queue.task_done()
