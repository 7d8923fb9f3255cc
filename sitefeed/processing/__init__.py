"""
SiteFeed Processing Module
==========================

Fetching and store synchronization for the syndicated feed.
"""

from .feed_fetcher import FeedFetcher, FetchResult, FetchFailure, FailureKind
from .synchronizer import FeedSynchronizer, SyncReport, SyncState, sync_feed

__all__ = [
    'FeedFetcher',
    'FetchResult',
    'FetchFailure',
    'FailureKind',
    'FeedSynchronizer',
    'SyncReport',
    'SyncState',
    'sync_feed',
]
