"""
Reference dataset models for ModSentinel.
"""

from __future__ import annotations

import enum
from datetime import datetime

from pydantic import BaseModel, Field


class DatasetSource(str, enum.Enum):
    """Where the current reference dataset came from."""

    REMOTE = "remote"
    FALLBACK = "fallback"


class ParsedDataset(BaseModel):
    """The two lookup tables extracted from a definitions document.

    Attributes:
        disallowed: Entry identifier -> display name ("Known Cheats").
        permitted: Entry identifier -> display name ("Known Mods").
    """

    disallowed: dict[str, str] = Field(default_factory=dict)
    permitted: dict[str, str] = Field(default_factory=dict)


class DatasetStatus(BaseModel):
    """Point-in-time view of the reference dataset store.

    Attributes:
        loaded: ``True`` once any load (remote or fallback) has completed.
        loading: ``True`` while a fetch is in flight.
        source: Origin of the current tables, ``None`` before the first load.
        disallowed_count: Size of the disallowed table.
        permitted_count: Size of the permitted table.
        loaded_at: Time of the most recent replacement (UTC).
    """

    loaded: bool = False
    loading: bool = False
    source: DatasetSource | None = None
    disallowed_count: int = 0
    permitted_count: int = 0
    loaded_at: datetime | None = None
