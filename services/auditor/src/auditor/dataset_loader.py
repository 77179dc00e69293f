"""
Remote reference dataset loader for ModSentinel.

Fetches the mod definitions document over HTTPS on a background asyncio
task, parses it, and replaces the tables in a :class:`DatasetStore`.
Any failure (transport error, non-2xx status, timeout, malformed
document) falls back to the embedded dataset, so every load attempt
ends with the store loaded and exactly one ``on_loaded`` notification.

No automatic retries are made; call :meth:`DatasetLoader.fetch_data`
again to retry.
"""

from __future__ import annotations

import asyncio

import httpx
import structlog

from ms_common import metrics
from ms_common.config import get_settings
from ms_common.errors import DatasetParseError
from ms_common.models import DatasetSource, DatasetStatus

from auditor.dataset_parser import parse_dataset
from auditor.dataset_store import DatasetStore
from auditor.fallback_dataset import fallback_tables

logger = structlog.get_logger()


class DatasetLoader:
    """Populate a :class:`DatasetStore` from the remote endpoint.

    Args:
        store: The store to populate.
        url: Definitions document URL (defaults to ``settings.dataset_url``).
        timeout_s: Total fetch timeout (defaults to ``settings.dataset_timeout_s``).
        transport: Optional ``httpx`` transport, e.g. ``httpx.MockTransport``.
    """

    def __init__(
        self,
        store: DatasetStore,
        url: str | None = None,
        timeout_s: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.store = store
        self.url = url or get_settings().dataset_url
        self.timeout_s = timeout_s if timeout_s is not None else get_settings().dataset_timeout_s
        self._transport = transport
        self._task: asyncio.Task[DatasetStatus] | None = None

    @property
    def is_fetching(self) -> bool:
        return self._task is not None and not self._task.done()

    # ── triggers ──

    def fetch_data(self) -> asyncio.Task[DatasetStatus] | None:
        """Start a background load unless one is already in flight.

        Must be called from within a running event loop. Returns
        immediately; observe completion via ``store.loaded`` or
        ``store.on_loaded``.

        Returns:
            The new task, or ``None`` if a fetch was already running.
        """
        if self.is_fetching:
            logger.debug("dataset_fetch_already_running", url=self.url)
            return None

        loop = asyncio.get_running_loop()
        self.store.mark_loading(True)
        self._task = loop.create_task(self.load())
        return self._task

    async def close(self) -> None:
        """Cancel an in-flight fetch, if any."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        self.store.mark_loading(False)

    # ── loading ──

    async def load(self) -> DatasetStatus:
        """Fetch, parse, and install the dataset, falling back on any failure."""
        self.store.mark_loading(True)
        log = logger.bind(url=self.url)
        log.info("dataset_fetch_started")

        try:
            body = await asyncio.wait_for(self._fetch_body(), timeout=self.timeout_s)
        except asyncio.CancelledError:
            self.store.mark_loading(False)
            raise
        except asyncio.TimeoutError:
            log.warning("dataset_fetch_timeout", timeout_s=self.timeout_s)
            return self._load_fallback()
        except httpx.HTTPError as exc:
            log.warning("dataset_fetch_failed", error=str(exc) or type(exc).__name__)
            return self._load_fallback()
        except Exception:  # noqa: BLE001
            log.exception("dataset_fetch_unexpected_error")
            return self._load_fallback()

        try:
            parsed = parse_dataset(body)
        except DatasetParseError as exc:
            log.warning("dataset_parse_failed", error=str(exc))
            return self._load_fallback()

        metrics.dataset_loads_total.labels(source=DatasetSource.REMOTE.value).inc()
        status = self.store.replace_all(parsed.disallowed, parsed.permitted, DatasetSource.REMOTE)
        log.info(
            "dataset_loaded",
            disallowed=status.disallowed_count,
            permitted=status.permitted_count,
        )
        return status

    async def _fetch_body(self) -> str:
        async with httpx.AsyncClient(
            timeout=self.timeout_s,
            transport=self._transport,
            follow_redirects=True,
        ) as client:
            resp = await client.get(self.url)
            resp.raise_for_status()
            return resp.text

    def _load_fallback(self) -> DatasetStatus:
        logger.info("dataset_loading_fallback")
        disallowed, permitted = fallback_tables()
        metrics.dataset_loads_total.labels(source=DatasetSource.FALLBACK.value).inc()
        return self.store.replace_all(disallowed, permitted, DatasetSource.FALLBACK)
