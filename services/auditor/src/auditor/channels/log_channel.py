"""
Structured-log detection channel for ModSentinel.
"""

from __future__ import annotations

import structlog

from ms_common.models import DisallowedDetectedEvent

from .base import AlertChannel

logger = structlog.get_logger()


class LogChannel(AlertChannel):
    """Write each detection as a ``WARNING`` structured log line."""

    name: str = "log"

    async def send(self, event: DisallowedDetectedEvent) -> bool:
        result = event.result
        logger.warning(
            "detection_reported",
            event_id=str(event.event_id),
            session_name=event.session_name,
            user_id=event.user_id,
            participant=result.display_name,
            actor_number=result.actor_number,
            disallowed=result.disallowed,
            entries=result.formatted_entries(),
        )
        return True
