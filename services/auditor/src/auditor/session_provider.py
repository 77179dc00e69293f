"""
Session provider boundary for ModSentinel.

The auditor never owns participants. It refers to them by an opaque
session-local *handle* and resolves everything else through a
:class:`SessionProvider`; every lookup returns ``None`` once the
participant has left, so callers must tolerate stale handles.

:class:`InMemorySessionProvider` is the adapter used by the HTTP
service (the host pushes its roster) and by tests.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

import structlog

from ms_common.events import EventHook
from ms_common.models import ParticipantRecord

logger = structlog.get_logger()


@runtime_checkable
class SessionProvider(Protocol):
    """What the auditor needs from the host's networking layer."""

    @property
    def in_session(self) -> bool: ...

    def current_session_name(self) -> str | None: ...

    def roster(self) -> list[str]: ...

    def has_membership(self, handle: str) -> bool: ...

    def get_metadata(self, handle: str) -> Mapping[Any, Any] | None: ...

    def get_user_id(self, handle: str) -> str | None: ...

    def get_actor_number(self, handle: str) -> int | None: ...

    def get_display_name(self, handle: str) -> str | None: ...


class InMemorySessionProvider:
    """Roster kept in memory and fed by the host.

    Attributes:
        on_participant_left: Fired with the handle of every participant
                             removed from the roster.
    """

    def __init__(self) -> None:
        self._session_name: str | None = None
        self._participants: dict[str, ParticipantRecord] = {}
        self.on_participant_left: EventHook[str] = EventHook("participant_left")

    # ── session membership ──

    @property
    def in_session(self) -> bool:
        return self._session_name is not None

    def current_session_name(self) -> str | None:
        return self._session_name

    def join(self, session_name: str) -> None:
        """Enter *session_name*, dropping the roster of any previous session."""
        if not session_name:
            raise ValueError("session_name must be non-empty")
        if self._session_name is not None and self._session_name != session_name:
            self._clear_roster()
        self._session_name = session_name
        logger.info("session_joined", session_name=session_name)

    def leave(self) -> None:
        """Leave the current session; the roster is emptied."""
        if self._session_name is None:
            return
        logger.info("session_left", session_name=self._session_name)
        self._clear_roster()
        self._session_name = None

    # ── roster ──

    def upsert(self, record: ParticipantRecord) -> None:
        """Add a participant or replace its published state."""
        self._participants[record.handle] = record

    def remove(self, handle: str) -> bool:
        """Remove *handle* from the roster and fire :attr:`on_participant_left`."""
        if self._participants.pop(handle, None) is None:
            return False
        logger.debug("participant_removed", handle=handle)
        self.on_participant_left.emit(handle)
        return True

    def snapshot(self) -> list[ParticipantRecord]:
        return list(self._participants.values())

    def _clear_roster(self) -> None:
        for handle in list(self._participants):
            self.remove(handle)

    # ── lookups ──

    def roster(self) -> list[str]:
        if not self.in_session:
            return []
        return list(self._participants)

    def has_membership(self, handle: str) -> bool:
        record = self._participants.get(handle)
        return record is not None and record.in_session

    def get_metadata(self, handle: str) -> Mapping[Any, Any] | None:
        record = self._participants.get(handle)
        return record.metadata if record is not None else None

    def get_user_id(self, handle: str) -> str | None:
        record = self._participants.get(handle)
        return record.user_id if record is not None else None

    def get_actor_number(self, handle: str) -> int | None:
        record = self._participants.get(handle)
        return record.actor_number if record is not None else None

    def get_display_name(self, handle: str) -> str | None:
        record = self._participants.get(handle)
        return record.display_name if record is not None else None
