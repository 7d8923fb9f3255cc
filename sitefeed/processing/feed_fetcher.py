"""
RSS Feed Fetcher
================

Single-request feed fetching that classifies every outcome instead of
raising: a body, a bad HTTP status, or a transport failure.
"""

import asyncio
import ssl
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

import aiohttp
import certifi

from ..config.settings import get_settings
from ..utils.logging import get_logger_for_component
from ..utils.exceptions import FeedFetchError, FeedStatusError, FeedTransportError


class FailureKind(str, Enum):
    """How a fetch failed."""
    BAD_STATUS = "bad_status"
    TRANSPORT = "transport"


@dataclass
class FetchFailure:
    """Why a fetch produced no body."""

    kind: FailureKind
    status: Optional[int] = None
    reason: Optional[str] = None
    detail: Optional[str] = None

    def describe(self) -> str:
        if self.kind == FailureKind.BAD_STATUS:
            return f"{self.status} {self.reason or ''}".rstrip()
        return self.detail or "transport error"

    def to_error(self, feed_url: Optional[str] = None) -> FeedFetchError:
        """Convert to the matching exception type."""
        message = f"Failed to fetch feed: {self.describe()}"
        if self.kind == FailureKind.BAD_STATUS:
            return FeedStatusError(
                message, status=self.status, reason=self.reason, feed_url=feed_url
            )
        return FeedTransportError(message, detail=self.detail, feed_url=feed_url)


@dataclass
class FetchResult:
    """Result of feed fetch operation."""

    feed_url: str
    success: bool
    text: Optional[str] = None
    failure: Optional[FetchFailure] = None
    fetch_time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def error(self) -> Optional[str]:
        return self.failure.describe() if self.failure else None


class FeedFetcher:
    """Fetches one feed document per call, without retries."""

    def __init__(self, timeout: Optional[int] = None, user_agent: Optional[str] = None):
        """Initialize feed fetcher.

        Args:
            timeout: Total request timeout in seconds (default from config;
                unset keeps aiohttp's own default)
            user_agent: User-Agent header (default from config)
        """
        settings = get_settings()
        self.timeout = timeout if timeout is not None else settings.feed.request_timeout
        self.user_agent = user_agent or settings.feed.user_agent

        # SSL context for secure requests
        self.ssl_context = ssl.create_default_context(cafile=certifi.where())

    @asynccontextmanager
    async def get_session(self):
        """Get configured aiohttp session."""
        connector = aiohttp.TCPConnector(ssl=self.ssl_context)

        headers = {
            "User-Agent": self.user_agent,
            "Accept": "application/rss+xml, application/xml, text/xml, */*",
        }

        session_kwargs = {"connector": connector, "headers": headers}
        if self.timeout:
            session_kwargs["timeout"] = aiohttp.ClientTimeout(total=self.timeout)

        async with aiohttp.ClientSession(**session_kwargs) as session:
            yield session

    async def fetch(
        self, feed_url: str, session: Optional[aiohttp.ClientSession] = None
    ) -> FetchResult:
        """Fetch the raw text of a feed.

        Args:
            feed_url: URL of the RSS feed
            session: Existing session to use; one is opened (and closed)
                for this call when omitted

        Returns:
            FetchResult carrying the body or a classified failure
        """
        if session is None:
            async with self.get_session() as own_session:
                return await self.fetch(feed_url, own_session)

        logger = get_logger_for_component("feed_fetcher", feed_url=feed_url)
        start_time = datetime.now(timezone.utc)
        logger.info(f"Fetching feed: {feed_url}")

        try:
            async with session.get(feed_url) as response:
                if not 200 <= response.status < 300:
                    failure = FetchFailure(
                        kind=FailureKind.BAD_STATUS,
                        status=response.status,
                        reason=response.reason,
                    )
                    logger.warning(
                        f"Failed to fetch feed {feed_url}: {failure.describe()}",
                        extra={"status": response.status},
                    )
                    return FetchResult(
                        feed_url=feed_url,
                        success=False,
                        failure=failure,
                        fetch_time=start_time,
                    )

                text = await response.text(errors="replace")

        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            failure = FetchFailure(
                kind=FailureKind.TRANSPORT,
                detail=str(e) or type(e).__name__,
            )
            logger.warning(f"Failed to fetch feed {feed_url}: {failure.describe()}")
            return FetchResult(
                feed_url=feed_url, success=False, failure=failure, fetch_time=start_time
            )

        return FetchResult(
            feed_url=feed_url, success=True, text=text, fetch_time=start_time
        )
