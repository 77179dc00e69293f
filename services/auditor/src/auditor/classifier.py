"""
Participant mod classifier for ModSentinel.

Sorts every key a participant publishes in its public metadata into
disallowed, permitted, or unrecognized entries using the reference
tables of a :class:`DatasetStore`, caches the result per participant,
and raises :attr:`ModClassifier.on_disallowed_detected` the first time a
participant account is found carrying disallowed entries in a session.

Lookup precedence is strict: the disallowed table is consulted first,
so a key present in both tables is always classified as disallowed.

Threading
---------
All mutation happens on the caller of :meth:`ModClassifier.tick` /
:meth:`ModClassifier.classify_all_participants` (the host tick). Other
callers may only use the read-only query methods.
"""

from __future__ import annotations

import time
from collections.abc import Iterable

import structlog

from ms_common import metrics
from ms_common.config import get_settings
from ms_common.events import EventHook
from ms_common.models import ClassificationResult, DisallowedDetectedEvent

from auditor.cache import ClassificationCache
from auditor.dataset_store import DatasetStore
from auditor.dedup import SessionDedupTracker
from auditor.session_provider import SessionProvider

logger = structlog.get_logger()

# Published by every client once onboarding is done; not a modification.
ONBOARDING_MARKER_KEY = "didTutorial"

UNKNOWN_DISPLAY_NAME = "Unknown"
NOT_IN_SESSION_SUMMARY = "Not in a session"


class ModClassifier:
    """Classify participants and report disallowed entries once per session.

    Args:
        store: Reference dataset store (read only).
        provider: Host session provider.
        check_interval_s: Seconds between periodic passes in :meth:`tick`.
        auto_check_enabled: When ``False`` :meth:`tick` does nothing.
        excluded_keys: Metadata keys never counted as entries.
    """

    def __init__(
        self,
        store: DatasetStore,
        provider: SessionProvider,
        check_interval_s: float | None = None,
        auto_check_enabled: bool | None = None,
        excluded_keys: Iterable[str] = (ONBOARDING_MARKER_KEY,),
    ) -> None:
        self.store = store
        self.provider = provider
        self.check_interval_s = (
            check_interval_s if check_interval_s is not None else get_settings().check_interval_s
        )
        self.auto_check_enabled = (
            auto_check_enabled
            if auto_check_enabled is not None
            else get_settings().auto_check_enabled
        )
        self.excluded_keys = frozenset(excluded_keys)
        self.cache = ClassificationCache()
        self.dedup = SessionDedupTracker()
        self.on_disallowed_detected: EventHook[DisallowedDetectedEvent] = EventHook(
            "disallowed_entries_detected"
        )
        self._last_check: float = float("-inf")

    # ── classification ──

    def classify_participant(self, handle: str) -> ClassificationResult:
        """Classify the metadata currently published by *handle*.

        Never raises for missing data: an unknown handle or absent
        metadata yields an empty result named "Unknown" where no name
        can be resolved.
        """
        result = ClassificationResult(
            participant_handle=handle,
            display_name=self.provider.get_display_name(handle) or UNKNOWN_DISPLAY_NAME,
            user_id=self.provider.get_user_id(handle),
            actor_number=self.provider.get_actor_number(handle),
        )

        metadata = self.provider.get_metadata(handle)
        if not metadata:
            return result

        for raw_key in list(metadata.keys()):
            if raw_key is None:
                continue
            key = str(raw_key)
            if not key or key in self.excluded_keys:
                continue

            result.all_entries.append(key)

            disallowed_name = self.store.get_disallowed(key)
            if disallowed_name is not None:
                result.disallowed.append(disallowed_name)
                continue

            permitted_name = self.store.get_permitted(key)
            if permitted_name is not None:
                result.permitted.append(permitted_name)
            else:
                result.unrecognized.append(key)

        return result

    def classify_all_participants(self) -> list[ClassificationResult]:
        """Classify every roster member, refresh the cache, and report detections.

        Participants without session membership or without a stable user
        id are skipped. Out of session, the cache is cleared instead.

        Returns:
            Results produced in this pass, in roster order.
        """
        self.sync_session()

        if not self.provider.in_session:
            self.clear_results()
            return []

        session_name = self.provider.current_session_name()
        results: list[ClassificationResult] = []

        for handle in self.provider.roster():
            if not self.provider.has_membership(handle):
                continue
            user_id = self.provider.get_user_id(handle)
            if not user_id:
                continue

            result = self.classify_participant(handle)
            self.cache.put(result)
            results.append(result)

            if result.has_disallowed and self.dedup.should_report(user_id):
                self._report(result, user_id, session_name)

        metrics.participants_classified_total.inc(len(results))
        return results

    def _report(
        self,
        result: ClassificationResult,
        user_id: str,
        session_name: str | None,
    ) -> None:
        event = DisallowedDetectedEvent(
            session_name=session_name,
            user_id=user_id,
            result=result,
        )
        metrics.disallowed_detections_total.inc()
        logger.warning(
            "disallowed_entries_detected",
            session_name=session_name,
            participant=result.display_name,
            user_id=user_id,
            entries=result.disallowed,
        )
        self.on_disallowed_detected.emit(event)

    # ── periodic driving ──

    def sync_session(self) -> bool:
        """Reset the dedup tracker if the active session name changed."""
        return self.dedup.observe_session(self.provider.current_session_name())

    def tick(self, now: float | None = None) -> bool:
        """Advance the periodic check by one host tick.

        Args:
            now: Monotonic time in seconds (defaults to ``time.monotonic()``).

        Returns:
            ``True`` if a classification pass ran.
        """
        if not self.auto_check_enabled:
            return False

        self.sync_session()

        if not self.provider.in_session:
            if len(self.cache):
                self.clear_results()
            return False

        now = time.monotonic() if now is None else now
        if now - self._last_check < self.check_interval_s:
            return False

        self.classify_all_participants()
        self._last_check = now
        return True

    # ── departures & reset ──

    def on_participant_left(self, handle: str) -> None:
        """Forget *handle*'s cached result (the dedup memory is kept)."""
        if self.cache.remove(handle):
            logger.debug("participant_result_evicted", handle=handle)

    def clear_results(self) -> None:
        """Drop all cached results."""
        self.cache.clear()

    def clear_cache(self) -> None:
        """Drop all cached results and the session's dedup memory."""
        self.cache.clear()
        self.dedup.clear()

    # ── queries ──

    def get_cached_result(self, handle: str) -> ClassificationResult | None:
        return self.cache.get(handle)

    def get_cached_result_by_actor(self, actor_number: int) -> ClassificationResult | None:
        return self.cache.find(lambda r: r.actor_number == actor_number)

    def get_cached_results(self) -> list[ClassificationResult]:
        return self.cache.values()

    def get_flagged_results(self) -> list[ClassificationResult]:
        """Cached results with at least one disallowed entry."""
        return [r for r in self.cache if r.has_disallowed]

    def get_summary(self) -> str:
        """One-line count of participants, those with entries, and those flagged."""
        if not self.provider.in_session:
            return NOT_IN_SESSION_SUMMARY

        results = self.cache.values()
        with_entries = sum(1 for r in results if r.has_any)
        flagged = sum(1 for r in results if r.has_disallowed)
        return f"Participants: {len(results)} | With Entries: {with_entries} | Disallowed: {flagged}"
