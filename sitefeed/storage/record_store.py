"""
Record Store
============

Process-wide store of synchronized feed records.

Each successful sync produces a new *generation*: an immutable mapping of
slug to record built off to the side and then swapped in with one reference
assignment. Readers always see one complete generation and never take a
lock; only the synchronizer writes.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional

from ..database.models import NormalizedRecord


@dataclass(frozen=True)
class Snapshot:
    """One immutable generation of the store."""

    records: Mapping[str, NormalizedRecord] = field(
        default_factory=lambda: MappingProxyType({})
    )
    generation: int = 0
    synced_at: Optional[datetime] = None


class RecordStore:
    """Keyed collection of NormalizedRecord with full-replace writes."""

    def __init__(self):
        self._snapshot = Snapshot()

    @property
    def generation(self) -> int:
        """Number of successful replaces since the store was created."""
        return self._snapshot.generation

    @property
    def last_synced_at(self) -> Optional[datetime]:
        """When the current generation was swapped in, if ever."""
        return self._snapshot.synced_at

    def snapshot(self) -> Snapshot:
        """Return the current generation."""
        return self._snapshot

    def replace_all(self, records: Iterable[NormalizedRecord]) -> int:
        """Replace the entire contents of the store.

        Records are keyed by id in iteration order, so a later record with
        the same id overwrites an earlier one.

        Args:
            records: Records of the new generation

        Returns:
            Number of records in the new generation
        """
        staged: Dict[str, NormalizedRecord] = {}
        for record in records:
            staged[record.id] = record

        self._snapshot = Snapshot(
            records=MappingProxyType(staged),
            generation=self._snapshot.generation + 1,
            synced_at=datetime.now(timezone.utc),
        )

        return len(staged)

    def get(self, record_id: str) -> Optional[NormalizedRecord]:
        """Get a record by slug."""
        return self._snapshot.records.get(record_id)

    def list_all(self) -> List[NormalizedRecord]:
        """All records, most recently published first.

        The sort is stable, so records with equal timestamps keep the
        store's insertion order.
        """
        records = list(self._snapshot.records.values())
        return sorted(records, key=lambda record: record.published_at, reverse=True)

    def count(self) -> int:
        """Number of records in the current generation."""
        return len(self._snapshot.records)

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._snapshot.records


# Global store instance
_store: Optional[RecordStore] = None


def get_record_store() -> RecordStore:
    """Get the process-wide record store (singleton pattern)."""
    global _store

    if _store is None:
        _store = RecordStore()

    return _store
