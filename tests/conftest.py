"""
PyTest Configuration and Fixtures
=================================

Shared fixtures and configuration for SiteFeed tests.

The HTTP layer is never touched: fetchers get a mocked aiohttp session whose
responses (or transport errors) each test programs.
"""

import pytest
import os
import sys
from types import SimpleNamespace
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

# Add project root to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set test environment variables before any imports
os.environ["SITEFEED_FEED__URL"] = "https://example.substack.com/feed"
os.environ["SITEFEED_LOGGING__CONSOLE_LOGGING"] = "false"
os.environ.pop("SITEFEED_FEED__KEEP_STALE_ON_EMPTY_RESULT", None)


# ============================================================================
# Feed documents
# ============================================================================


def make_item(
    title="A Post",
    slug="a-post",
    pub_date="Thu, 05 Sep 2024 12:00:00 GMT",
    description="<p>Hello</p>",
    cdata=True,
):
    """Build one <item> block; pass None to leave a field out."""
    parts = []
    if title is not None:
        parts.append(f"<title><![CDATA[{title}]]></title>" if cdata else f"<title>{title}</title>")
    if slug is not None:
        parts.append(f"<link>https://example.substack.com/p/{slug}</link>")
    if description is not None:
        parts.append(
            f"<description><![CDATA[{description}]]></description>"
            if cdata else f"<description>{description}</description>"
        )
    if pub_date is not None:
        parts.append(f"<pubDate>{pub_date}</pubDate>")
    return "<item>" + "".join(parts) + "</item>"


def make_feed(*items):
    """Wrap item blocks in a minimal RSS channel."""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<rss version="2.0" xmlns:dc="http://purl.org/dc/elements/1.1/">'
        "<channel><title><![CDATA[Example]]></title>"
        "<link>https://example.substack.com</link>"
        + "".join(items)
        + "</channel></rss>"
    )


@pytest.fixture
def rss():
    """Builders for item blocks and feed documents."""
    return SimpleNamespace(item=make_item, feed=make_feed)


@pytest.fixture
def sample_feed():
    """Three complete posts and one without a link."""
    return make_feed(
        make_item(title="Second", slug="second", pub_date="Fri, 06 Sep 2024 08:00:00 GMT"),
        make_item(title="First", slug="first", pub_date="Thu, 05 Sep 2024 12:00:00 GMT"),
        make_item(title="Third", slug="third", pub_date="Sat, 07 Sep 2024 09:30:00 GMT"),
        make_item(title="No Link", slug=None),
    )


# ============================================================================
# HTTP mocks
# ============================================================================


def make_response(status=200, body="", reason="OK"):
    """Mocked aiohttp response."""
    response = MagicMock()
    response.status = status
    response.reason = reason
    response.text = AsyncMock(return_value=body)
    return response


def make_session(response=None, error=None):
    """Mocked aiohttp session whose ``get`` yields ``response`` or raises ``error``."""
    context_manager = MagicMock()
    if error is not None:
        context_manager.__aenter__ = AsyncMock(side_effect=error)
    else:
        context_manager.__aenter__ = AsyncMock(return_value=response)
    context_manager.__aexit__ = AsyncMock(return_value=False)

    session = MagicMock()
    session.get = MagicMock(return_value=context_manager)
    return session


@pytest.fixture
def http():
    """Builders for mocked aiohttp responses and sessions."""
    return SimpleNamespace(response=make_response, session=make_session)


@pytest.fixture
def fetcher_for():
    """Build a FeedFetcher whose own session is a mocked one."""
    from sitefeed.processing.feed_fetcher import FeedFetcher

    def build(session):
        fetcher = FeedFetcher()

        @asynccontextmanager
        async def get_session():
            yield session

        fetcher.get_session = get_session
        return fetcher

    return build


# ============================================================================
# Store fixtures
# ============================================================================


@pytest.fixture
def record_store():
    """Fresh, empty record store."""
    from sitefeed.storage.record_store import RecordStore

    return RecordStore()


@pytest.fixture
def make_record():
    """Factory for NormalizedRecord with sensible defaults."""
    from sitefeed.database.models import NormalizedRecord

    def build(slug="post", title=None, published_at=None, description=""):
        return NormalizedRecord(
            id=slug,
            title=title or slug.replace("-", " ").title(),
            description=description,
            published_at=published_at or datetime(2024, 9, 5, 12, tzinfo=timezone.utc),
            external_url=f"https://example.substack.com/p/{slug}",
        )

    return build
