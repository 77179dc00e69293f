"""
Webhook detection channel for ModSentinel.

Each disallowed-entries detection is flattened into a compact JSON
report (session, participant, flagged display names, the one-line entry
summary) and POSTed to the configured endpoint.

Delivery policy
---------------
* 5xx responses and transport failures are retried with exponential
  backoff, up to ``max_attempts`` in total.
* 4xx responses fail immediately.
* One ``httpx.AsyncClient`` is kept per channel and carries the
  configured extra headers on every request.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog
from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_exponential

from ms_common.config import Settings
from ms_common.models import DisallowedDetectedEvent

from .base import AlertChannel

logger = structlog.get_logger()

_MAX_BACKOFF_S = 10.0


def detection_payload(event: DisallowedDetectedEvent) -> dict[str, Any]:
    """Flatten *event* into the JSON body sent to the webhook."""
    result = event.result
    return {
        "event_id": str(event.event_id),
        "session_name": event.session_name,
        "user_id": event.user_id,
        "display_name": result.display_name,
        "actor_number": result.actor_number,
        "disallowed": list(result.disallowed),
        "entries": result.formatted_entries(),
        "detected_at": event.detected_at.isoformat(),
    }


def _is_retryable(exc: BaseException) -> bool:
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code >= 500
    return isinstance(exc, httpx.TransportError)


class WebhookChannel(AlertChannel):
    """POST detection reports to a webhook URL.

    Args:
        url: Destination webhook URL.
        max_attempts: Total delivery attempts per detection.
        timeout: Per-request timeout in seconds.
        headers: Extra headers sent with every request (e.g. a shared secret).
        backoff_s: First retry delay; doubles per attempt, capped at 10 s.
        transport: Optional ``httpx`` transport, e.g. ``httpx.MockTransport``.
    """

    name: str = "webhook"

    def __init__(
        self,
        url: str,
        *,
        max_attempts: int = 3,
        timeout: float = 10.0,
        headers: dict[str, str] | None = None,
        backoff_s: float = 1.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url
        self.max_attempts = max_attempts
        self.timeout = timeout
        self.headers = dict(headers or {})
        self.backoff_s = backoff_s
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> WebhookChannel:
        """Build the channel from the ``webhook_*`` settings."""
        return cls(
            settings.webhook_url,
            max_attempts=settings.webhook_max_attempts,
            timeout=settings.webhook_timeout_s,
            headers=settings.webhook_headers,
            transport=transport,
        )

    def _http(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers=self.headers,
                transport=self._transport,
            )
        return self._client

    async def _deliver(self, payload: dict[str, Any]) -> httpx.Response:
        client = self._http()
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.backoff_s, max=_MAX_BACKOFF_S),
            retry=retry_if_exception(_is_retryable),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                resp = await client.post(self.url, json=payload)
                resp.raise_for_status()
        return resp

    async def send(self, event: DisallowedDetectedEvent) -> bool:
        """Deliver *event*; ``False`` once it is rejected or retries run out."""
        log = logger.bind(webhook_url=self.url, event_id=str(event.event_id), user_id=event.user_id)
        try:
            resp = await self._deliver(detection_payload(event))
        except httpx.HTTPStatusError as exc:
            log.error("webhook_rejected", status=exc.response.status_code)
            return False
        except httpx.TransportError as exc:
            log.error("webhook_unreachable", error=str(exc) or type(exc).__name__)
            return False
        log.info("webhook_delivered", status=resp.status_code)
        return True

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
