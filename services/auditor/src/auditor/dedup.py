"""
Session-scoped detection deduplication for ModSentinel.

Remembers which participant accounts have already been reported as
carrying disallowed entries in the current session. The memory is
cleared whenever the observed session name changes (including entering
or leaving "no session"), never on individual departures, so a
participant who leaves and rejoins the same session is not reported
twice.
"""

from __future__ import annotations

import structlog

logger = structlog.get_logger()


class SessionDedupTracker:
    """Set of already-reported stable user ids for one session."""

    def __init__(self) -> None:
        self._session_name: str | None = None
        self._reported: set[str] = set()

    @property
    def session_name(self) -> str | None:
        return self._session_name

    def __len__(self) -> int:
        return len(self._reported)

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._reported

    def observe_session(self, session_name: str | None) -> bool:
        """Record the active session name, resetting on change.

        Returns:
            ``True`` if the session changed and the tracker was cleared.
        """
        if session_name == self._session_name:
            return False
        logger.info(
            "dedup_session_changed",
            previous=self._session_name,
            current=session_name,
            forgotten=len(self._reported),
        )
        self._reported.clear()
        self._session_name = session_name
        return True

    def should_report(self, user_id: str) -> bool:
        """Return ``True`` the first time *user_id* is seen this session.

        The id is remembered, so subsequent calls in the same session
        return ``False``.
        """
        if user_id in self._reported:
            return False
        self._reported.add(user_id)
        return True

    def clear(self) -> None:
        self._reported.clear()
