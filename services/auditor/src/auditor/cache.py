"""
Participant classification cache for ModSentinel.

Holds the most recent :class:`ClassificationResult` per participant
handle, in first-classified order. Entries are overwritten on every
pass and removed when the participant leaves.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator

from ms_common import metrics
from ms_common.models import ClassificationResult


class ClassificationCache:
    """Handle -> last known classification."""

    def __init__(self) -> None:
        self._results: dict[str, ClassificationResult] = {}

    def __len__(self) -> int:
        return len(self._results)

    def __iter__(self) -> Iterator[ClassificationResult]:
        return iter(list(self._results.values()))

    def __contains__(self, handle: object) -> bool:
        return handle in self._results

    def put(self, result: ClassificationResult) -> None:
        self._results[result.participant_handle] = result
        metrics.cached_participants.set(len(self._results))

    def get(self, handle: str) -> ClassificationResult | None:
        return self._results.get(handle)

    def remove(self, handle: str) -> bool:
        removed = self._results.pop(handle, None) is not None
        metrics.cached_participants.set(len(self._results))
        return removed

    def clear(self) -> None:
        self._results.clear()
        metrics.cached_participants.set(0)

    def find(self, predicate: Callable[[ClassificationResult], bool]) -> ClassificationResult | None:
        """Return the first cached result satisfying *predicate*."""
        for result in self._results.values():
            if predicate(result):
                return result
        return None

    def values(self) -> list[ClassificationResult]:
        return list(self._results.values())
