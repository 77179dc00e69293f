"""
Component wiring for the ModSentinel auditor.

Builds one explicitly owned set of collaborators (store, loader,
provider, classifier, dispatcher, scheduler) and connects their events.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import httpx
import structlog

from ms_common.config import Settings, get_settings

from auditor.channels import AlertChannel, LogChannel, WebhookChannel
from auditor.classifier import ModClassifier
from auditor.dataset_loader import DatasetLoader
from auditor.dataset_store import DatasetStore
from auditor.dispatcher import DetectionDispatcher
from auditor.scheduler import AuditScheduler
from auditor.session_provider import InMemorySessionProvider

logger = structlog.get_logger()


@dataclass
class AuditorRuntime:
    """All long-lived auditor components."""

    settings: Settings
    store: DatasetStore
    loader: DatasetLoader
    provider: InMemorySessionProvider
    classifier: ModClassifier
    dispatcher: DetectionDispatcher
    scheduler: AuditScheduler
    _unsubscribers: list = field(default_factory=list, repr=False)

    async def start(self) -> None:
        """Kick off the dataset fetch and start the background tasks."""
        self.loader.fetch_data()
        await self.dispatcher.start()
        await self.scheduler.start()
        logger.info("auditor_runtime_started")

    async def stop(self) -> None:
        await self.scheduler.stop()
        await self.dispatcher.stop()
        await self.loader.close()
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        logger.info("auditor_runtime_stopped")


def default_channels(settings: Settings) -> list[AlertChannel]:
    """Log channel always; webhook channel when ``webhook_url`` is set."""
    channels: list[AlertChannel] = [LogChannel()]
    if settings.webhook_url:
        channels.append(WebhookChannel.from_settings(settings))
    return channels


def build_runtime(
    settings: Settings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    channels: list[AlertChannel] | None = None,
) -> AuditorRuntime:
    """Construct and wire an :class:`AuditorRuntime`.

    Args:
        settings: Configuration (defaults to :func:`get_settings`).
        transport: Optional ``httpx`` transport for the dataset fetch.
        channels: Detection channels (defaults to :func:`default_channels`).
    """
    settings = settings or get_settings()
    store = DatasetStore()
    loader = DatasetLoader(
        store,
        url=settings.dataset_url,
        timeout_s=settings.dataset_timeout_s,
        transport=transport,
    )
    provider = InMemorySessionProvider()
    classifier = ModClassifier(
        store,
        provider,
        check_interval_s=settings.check_interval_s,
        auto_check_enabled=settings.auto_check_enabled,
    )
    dispatcher = DetectionDispatcher(channels if channels is not None else default_channels(settings))
    scheduler = AuditScheduler(classifier, tick_interval_s=settings.tick_interval_s)

    runtime = AuditorRuntime(
        settings=settings,
        store=store,
        loader=loader,
        provider=provider,
        classifier=classifier,
        dispatcher=dispatcher,
        scheduler=scheduler,
    )
    runtime._unsubscribers.append(
        provider.on_participant_left.subscribe(classifier.on_participant_left)
    )
    runtime._unsubscribers.append(
        classifier.on_disallowed_detected.subscribe(dispatcher.submit)
    )
    return runtime
