"""
Tests for the periodic audit scheduler.
"""

from __future__ import annotations

import asyncio
from unittest.mock import MagicMock, patch

from auditor.scheduler import AuditScheduler


class TestTickOnce:
    def test_delegates_to_classifier(self) -> None:
        classifier = MagicMock()
        classifier.tick.return_value = True
        assert AuditScheduler(classifier, tick_interval_s=0.01).tick_once() is True
        classifier.tick.assert_called_once_with()

    def test_classifier_error_is_swallowed_and_logged(self) -> None:
        classifier = MagicMock()
        classifier.tick.side_effect = RuntimeError("boom")
        assert AuditScheduler(classifier, tick_interval_s=0.01).tick_once() is False

    def test_explicit_interval_does_not_read_settings(self) -> None:
        with patch("auditor.scheduler.get_settings", side_effect=AssertionError("settings read")):
            scheduler = AuditScheduler(MagicMock(), tick_interval_s=0.25)
        assert scheduler._tick_interval == 0.25


class TestLifecycle:
    async def test_ticks_repeatedly_until_stopped(self) -> None:
        classifier = MagicMock()
        classifier.tick.return_value = False
        scheduler = AuditScheduler(classifier, tick_interval_s=0.01)
        await scheduler.start()
        assert scheduler.running is True
        await asyncio.sleep(0.05)
        await scheduler.stop()
        assert scheduler.running is False
        calls = classifier.tick.call_count
        assert calls >= 2
        await asyncio.sleep(0.03)
        assert classifier.tick.call_count == calls

    async def test_survives_failing_ticks(self) -> None:
        classifier = MagicMock()
        classifier.tick.side_effect = RuntimeError("boom")
        scheduler = AuditScheduler(classifier, tick_interval_s=0.01)
        await scheduler.start()
        await asyncio.sleep(0.05)
        await scheduler.stop()
        assert classifier.tick.call_count >= 2

    async def test_start_twice_is_noop(self) -> None:
        scheduler = AuditScheduler(MagicMock(), tick_interval_s=0.01)
        await scheduler.start()
        first = scheduler._task
        await scheduler.start()
        assert scheduler._task is first
        await scheduler.stop()

    async def test_drives_real_classifier(self, classifier, provider, make_participant) -> None:
        provider.upsert(make_participant(metadata={"x1": "1"}))
        scheduler = AuditScheduler(classifier, tick_interval_s=0.01)
        await scheduler.start()
        await asyncio.sleep(0.03)
        await scheduler.stop()
        assert classifier.get_cached_result("rig-1").disallowed == ["Phantom"]
