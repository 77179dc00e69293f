"""
Detection event model for ModSentinel.

Raised at most once per participant account per session, the first time
the participant is found carrying disallowed entries.
"""

from __future__ import annotations

from datetime import datetime, timezone
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from ms_common.models.classification import ClassificationResult


def _utc_now() -> datetime:
    """Return the current UTC datetime."""
    return datetime.now(timezone.utc)


class DisallowedDetectedEvent(BaseModel):
    """A participant was found carrying disallowed entries.

    Attributes:
        event_id: Unique identifier.
        session_name: Session the detection happened in.
        user_id: Stable account identifier of the participant.
        result: The classification that triggered the event.
        detected_at: Detection timestamp (UTC).
        delivered_to: Channels that accepted the event.
        delivery_status: Per-channel delivery outcome.
    """

    event_id: UUID = Field(default_factory=uuid4)
    session_name: str | None = None
    user_id: str
    result: ClassificationResult
    detected_at: datetime = Field(default_factory=_utc_now)
    delivered_to: list[str] = Field(default_factory=list)
    delivery_status: dict[str, str] = Field(default_factory=dict)
