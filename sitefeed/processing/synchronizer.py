"""
Feed Store Synchronizer
=======================

Orchestrates one full-replace sync of the syndicated feed:
fetch -> extract -> normalize -> derive slug -> validate -> write.

A failed fetch never touches the store. A successful fetch always rebuilds
it from scratch, unless ``keep_stale_on_empty_result`` is set and the feed
produced nothing usable.
"""

import asyncio
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from ..config.settings import get_settings
from ..database.models import DropReason, NormalizedRecord, RawFeedEntry
from ..ingestion.content_cleaner import normalize_text
from ..ingestion.rss_extractor import extract_entries, iter_item_blocks
from ..ingestion.slugs import derive_slug
from ..storage.record_store import RecordStore, get_record_store
from ..utils.exceptions import ConfigurationError, ErrorCode
from ..utils.logging import get_logger_for_component
from ..utils.validators import parse_pub_date
from .feed_fetcher import FeedFetcher, FetchFailure


class SyncState(str, Enum):
    """Synchronizer lifecycle states."""
    IDLE = "idle"
    FETCHING = "fetching"
    FAILED = "failed"
    PARSING = "parsing"
    WRITING = "writing"


@dataclass
class SyncReport:
    """Outcome of one sync run."""

    feed_url: str
    success: bool
    entries_found: int = 0
    records_written: int = 0
    store_replaced: bool = False
    skipped: Dict[DropReason, int] = field(default_factory=dict)
    failure: Optional[FetchFailure] = None
    duration_seconds: float = 0.0

    @property
    def error(self) -> Optional[str]:
        return self.failure.describe() if self.failure else None

    @property
    def total_skipped(self) -> int:
        return sum(self.skipped.values())


class FeedSynchronizer:
    """Keeps a RecordStore in step with a remote RSS feed."""

    def __init__(
        self,
        store: Optional[RecordStore] = None,
        fetcher: Optional[FeedFetcher] = None,
        keep_stale_on_empty_result: Optional[bool] = None,
    ):
        """Initialize synchronizer.

        Args:
            store: Store to populate (default: the process-wide store)
            fetcher: Feed fetcher (default: one built from settings)
            keep_stale_on_empty_result: Leave the store untouched when a
                successful fetch yields no records (default from config)
        """
        self.settings = get_settings()
        self.store = store if store is not None else get_record_store()
        self.fetcher = fetcher or FeedFetcher()

        if keep_stale_on_empty_result is None:
            keep_stale_on_empty_result = self.settings.feed.keep_stale_on_empty_result
        self.keep_stale_on_empty_result = keep_stale_on_empty_result

        self.state = SyncState.IDLE
        self._write_lock = asyncio.Lock()
        self._inflight: Dict[str, "asyncio.Future[SyncReport]"] = {}

    async def sync(self, url: Optional[str] = None) -> SyncReport:
        """Run a sync, or join the one already running for the same URL.

        Fetch failures are logged and reported, never raised.

        Args:
            url: Feed URL (default from config)

        Returns:
            SyncReport describing what happened

        Raises:
            ConfigurationError: If no feed URL is given or configured
        """
        feed_url = url or self.settings.feed.url
        if not feed_url:
            raise ConfigurationError(
                "No feed URL given and SITEFEED_FEED__URL is not set",
                config_key="feed.url",
                error_code=ErrorCode.CONFIG_MISSING,
            )

        task = self._inflight.get(feed_url)
        if task is None:
            task = asyncio.ensure_future(self._run(feed_url))
            self._inflight[feed_url] = task
            task.add_done_callback(lambda done: self._forget(feed_url, done))

        # Shielded so one cancelled caller does not cancel the shared run
        return await asyncio.shield(task)

    def _forget(self, feed_url: str, task: "asyncio.Future[SyncReport]") -> None:
        if self._inflight.get(feed_url) is task:
            del self._inflight[feed_url]

    async def _run(self, feed_url: str) -> SyncReport:
        async with self._write_lock:
            start = time.monotonic()
            try:
                report = await self._sync_once(feed_url)
            finally:
                self.state = SyncState.IDLE
            report.duration_seconds = time.monotonic() - start
            return report

    async def _sync_once(self, feed_url: str) -> SyncReport:
        self.state = SyncState.FETCHING
        result = await self.fetcher.fetch(feed_url)

        if not result.success:
            # The fetcher has already logged the warning
            self.state = SyncState.FAILED
            return SyncReport(feed_url=feed_url, success=False, failure=result.failure)

        self.state = SyncState.PARSING
        entries = extract_entries(result.text)
        logger = get_logger_for_component("synchronizer", feed_url=feed_url)
        logger.info(f"Found {len(entries)} posts in feed {feed_url}")

        records, skipped = self.build_records(entries)
        item_count = sum(1 for _ in iter_item_blocks(result.text or ""))
        incomplete = item_count - len(entries)
        if incomplete:
            skipped[DropReason.MISSING_REQUIRED_FIELD] = incomplete

        report = SyncReport(
            feed_url=feed_url,
            success=True,
            entries_found=len(entries),
            skipped=skipped,
        )

        if not records and self.keep_stale_on_empty_result:
            return report

        self.state = SyncState.WRITING
        report.records_written = self.store.replace_all(records)
        report.store_replaced = True
        return report

    def build_records(
        self, entries: List[RawFeedEntry]
    ) -> Tuple[List[NormalizedRecord], Dict[DropReason, int]]:
        """Normalize extracted entries into storable records.

        Entries whose slug or date cannot be resolved are dropped and
        counted, in extraction order.

        Returns:
            Tuple of (records, drop counts by reason)
        """
        records = []
        skipped: Dict[DropReason, int] = {}

        for entry in entries:
            description = normalize_text(entry.description)

            slug = derive_slug(entry.link)
            if not slug:
                skipped[DropReason.UNRESOLVABLE_IDENTIFIER] = (
                    skipped.get(DropReason.UNRESOLVABLE_IDENTIFIER, 0) + 1
                )
                continue

            published_at = parse_pub_date(entry.pub_date)
            if published_at is None:
                skipped[DropReason.UNPARSEABLE_DATE] = (
                    skipped.get(DropReason.UNPARSEABLE_DATE, 0) + 1
                )
                continue

            records.append(
                NormalizedRecord(
                    id=slug,
                    title=entry.title,
                    description=description,
                    published_at=published_at,
                    external_url=entry.link,
                )
            )

        return records, skipped


# Global synchronizer instance
_synchronizer: Optional[FeedSynchronizer] = None


def get_synchronizer() -> FeedSynchronizer:
    """Get the process-wide synchronizer bound to the process-wide store."""
    global _synchronizer

    if _synchronizer is None:
        _synchronizer = FeedSynchronizer()

    return _synchronizer


async def sync_feed(url: Optional[str] = None) -> SyncReport:
    """Convenience function to sync the process-wide store."""
    return await get_synchronizer().sync(url)
