"""
SiteFeed Storage Layer
======================

In-memory record store read by page rendering and feed regeneration.
"""

from typing import List, Optional

from ..database.models import NormalizedRecord
from .record_store import RecordStore, Snapshot, get_record_store


def get_all_posts(store: Optional[RecordStore] = None) -> List[NormalizedRecord]:
    """All synchronized posts, newest first."""
    if store is None:
        store = get_record_store()
    return store.list_all()


__all__ = [
    "RecordStore",
    "Snapshot",
    "get_record_store",
    "get_all_posts",
]
