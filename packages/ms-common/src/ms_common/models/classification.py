"""
Participant classification models for ModSentinel.

A :class:`ClassificationResult` is the outcome of sorting every key a
participant publishes in its public metadata into disallowed, permitted,
or unrecognized entries.
"""

from __future__ import annotations

import enum
from datetime import datetime, timezone

from pydantic import BaseModel, Field, computed_field


def _utc_now() -> datetime:
    """Return the current UTC datetime."""
    return datetime.now(timezone.utc)


class EntryStatus(str, enum.Enum):
    """Overall verdict for one participant."""

    DISALLOWED = "disallowed"
    PERMITTED = "permitted"
    UNRECOGNIZED = "unrecognized"
    NONE = "none"


class ClassificationResult(BaseModel):
    """Classification of one participant at one point in time.

    Every raw key in ``all_entries`` lands in exactly one of
    ``disallowed`` / ``permitted`` (as display names) or
    ``unrecognized`` (as the raw key).

    Attributes:
        participant_handle: Session-local handle of the participant.
        display_name: Best-effort nickname ("Unknown" if unresolvable).
        user_id: Stable account identifier, if known.
        actor_number: Network actor (seat) index, if known.
        all_entries: Every counted metadata key, in enumeration order.
        disallowed: Display names of matched disallowed entries.
        permitted: Display names of matched permitted entries.
        unrecognized: Raw keys matching neither table.
        classified_at: Classification timestamp (UTC).
    """

    participant_handle: str = Field(..., description="Session-local participant handle.")
    display_name: str = Field(default="Unknown", description="Participant nickname.")
    user_id: str | None = Field(default=None, description="Stable account identifier.")
    actor_number: int | None = Field(default=None, description="Network actor index.")
    all_entries: list[str] = Field(default_factory=list)
    disallowed: list[str] = Field(default_factory=list)
    permitted: list[str] = Field(default_factory=list)
    unrecognized: list[str] = Field(default_factory=list)
    classified_at: datetime = Field(default_factory=_utc_now)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_disallowed(self) -> bool:
        return len(self.disallowed) > 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_any(self) -> bool:
        return len(self.all_entries) > 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def status(self) -> EntryStatus:
        if self.disallowed:
            return EntryStatus.DISALLOWED
        if self.permitted and not self.unrecognized:
            return EntryStatus.PERMITTED
        if self.unrecognized:
            return EntryStatus.UNRECOGNIZED
        return EntryStatus.NONE

    @computed_field  # type: ignore[prop-decorator]
    @property
    def status_text(self) -> str:
        if self.disallowed:
            return f"DISALLOWED ({len(self.disallowed)})"
        if self.permitted:
            return f"Permitted ({len(self.permitted)})"
        if self.unrecognized:
            return f"Unrecognized ({len(self.unrecognized)})"
        return "No Entries"

    def formatted_entries(self) -> str:
        """Render all entries on one line: ``[!x]`` disallowed, ``[+x]`` permitted, ``[?x]`` unknown."""
        parts = [f"[!{name}]" for name in self.disallowed]
        parts += [f"[+{name}]" for name in self.permitted]
        parts += [f"[?{key}]" for key in self.unrecognized]
        return " ".join(parts)
