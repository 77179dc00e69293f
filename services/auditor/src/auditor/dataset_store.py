"""
Reference dataset store for ModSentinel.

Holds the disallowed and permitted lookup tables consulted by the
classifier. The store is an explicitly owned instance (one per
runtime) rather than module state, so tests can build stores from
synthetic tables.

Both tables are always replaced together by a single assignment of
freshly built mappings; readers never observe a half-written table.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from types import MappingProxyType

import structlog

from ms_common.events import EventHook
from ms_common.models import DatasetSource, DatasetStatus

logger = structlog.get_logger()


class DatasetStore:
    """Owner of the two reference tables and the load status flags.

    Attributes:
        on_loaded: Fired with the :class:`DatasetStatus` after every
                   completed replacement.
    """

    def __init__(self) -> None:
        self._tables: tuple[Mapping[str, str], Mapping[str, str]] = (
            MappingProxyType({}),
            MappingProxyType({}),
        )
        self._loaded = False
        self._loading = False
        self._source: DatasetSource | None = None
        self._loaded_at: datetime | None = None
        self.on_loaded: EventHook[DatasetStatus] = EventHook("dataset_loaded")

    # ── status ──

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def source(self) -> DatasetSource | None:
        return self._source

    def mark_loading(self, loading: bool = True) -> None:
        self._loading = loading

    def status(self) -> DatasetStatus:
        """Return a snapshot of the store's status."""
        disallowed, permitted = self._tables
        return DatasetStatus(
            loaded=self._loaded,
            loading=self._loading,
            source=self._source,
            disallowed_count=len(disallowed),
            permitted_count=len(permitted),
            loaded_at=self._loaded_at,
        )

    # ── tables ──

    @property
    def disallowed(self) -> Mapping[str, str]:
        """Read-only view of the disallowed table."""
        return self._tables[0]

    @property
    def permitted(self) -> Mapping[str, str]:
        """Read-only view of the permitted table."""
        return self._tables[1]

    def get_disallowed(self, key: str) -> str | None:
        return self._tables[0].get(key)

    def get_permitted(self, key: str) -> str | None:
        return self._tables[1].get(key)

    def replace_all(
        self,
        disallowed: Mapping[str, str],
        permitted: Mapping[str, str],
        source: DatasetSource = DatasetSource.REMOTE,
    ) -> DatasetStatus:
        """Swap in new tables, mark the store loaded, and fire :attr:`on_loaded`.

        The previous tables are discarded; nothing is merged.

        Args:
            disallowed: Entry identifier -> display name for disallowed entries.
            permitted: Entry identifier -> display name for permitted entries.
            source: Origin of the tables.

        Returns:
            The status after replacement (also the event payload).
        """
        self._tables = (
            MappingProxyType(dict(disallowed)),
            MappingProxyType(dict(permitted)),
        )
        self._source = source
        self._loaded_at = datetime.now(timezone.utc)
        self._loaded = True
        self._loading = False

        status = self.status()
        logger.info(
            "dataset_replaced",
            source=source.value,
            disallowed=status.disallowed_count,
            permitted=status.permitted_count,
        )
        self.on_loaded.emit(status)
        return status
