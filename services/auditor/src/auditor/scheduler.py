"""
Cooperative periodic scheduler for the ModSentinel classifier.

Stands in for the host's per-frame tick: an asyncio task that calls
:meth:`ModClassifier.tick` every ``tick_interval_s`` seconds. The
classifier itself decides when a full pass is due.
"""

from __future__ import annotations

import asyncio

import structlog

from ms_common.config import get_settings

from auditor.classifier import ModClassifier

logger = structlog.get_logger()


class AuditScheduler:
    """Drive a :class:`ModClassifier` from a background task.

    Args:
        classifier: The classifier to tick.
        tick_interval_s: Seconds between ticks (defaults to settings).
    """

    def __init__(
        self,
        classifier: ModClassifier,
        tick_interval_s: float | None = None,
    ) -> None:
        self._classifier = classifier
        self._tick_interval = (
            tick_interval_s if tick_interval_s is not None else get_settings().tick_interval_s
        )
        self._running = False
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._running

    # ── lifecycle ──

    async def start(self) -> None:
        """Begin ticking in the background."""
        if self._running:
            return
        self._running = True
        self._task = asyncio.create_task(self._run())
        logger.info("audit_scheduler_started", tick_interval_s=self._tick_interval)

    async def stop(self) -> None:
        """Stop ticking and wait for the task to finish."""
        self._running = False
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("audit_scheduler_stopped")

    # ── loop ──

    def tick_once(self) -> bool:
        """Run one tick, logging (not raising) classifier errors."""
        try:
            return self._classifier.tick()
        except Exception:
            logger.exception("audit_tick_error")
            return False

    async def _run(self) -> None:
        while self._running:
            self.tick_once()
            await asyncio.sleep(self._tick_interval)
