"""
Participant roster models for ModSentinel.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class ParticipantRecord(BaseModel):
    """A remote participant as published by the session host.

    Attributes:
        handle: Session-local handle (unique within the roster).
        user_id: Stable account identifier; ``None`` while the network
                 identity has not been assigned yet.
        display_name: Participant nickname.
        actor_number: Network actor (seat) index.
        metadata: Public metadata dictionary; ``None`` if unavailable.
        in_session: Whether the participant currently holds session membership.
    """

    handle: str = Field(..., min_length=1)
    user_id: str | None = None
    display_name: str | None = None
    actor_number: int | None = None
    metadata: dict[str, Any] | None = Field(default_factory=dict)
    in_session: bool = True
