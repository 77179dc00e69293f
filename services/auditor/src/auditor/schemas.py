"""
Request/response schemas for the auditor HTTP API.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class SessionJoinRequest(BaseModel):
    session_name: str = Field(..., min_length=1, max_length=255)


class RosterEntryRequest(BaseModel):
    """Published state of one participant, keyed by the handle in the path."""

    user_id: str | None = None
    display_name: str | None = None
    actor_number: int | None = None
    metadata: dict[str, Any] | None = Field(default_factory=dict)
    in_session: bool = True


class SessionStateResponse(BaseModel):
    in_session: bool
    session_name: str | None = None
    participant_count: int = 0


class SummaryResponse(BaseModel):
    in_session: bool
    session_name: str | None = None
    summary: str


class RefreshResponse(BaseModel):
    started: bool


class ClassifyResponse(BaseModel):
    classified: int
    flagged: int
