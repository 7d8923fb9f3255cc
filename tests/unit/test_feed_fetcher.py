"""
Unit Tests for the Feed Fetcher
===============================

Tests for outcome classification and logging of single feed requests.
"""

import asyncio
import logging

import aiohttp
import pytest

from sitefeed.processing.feed_fetcher import (
    FailureKind,
    FeedFetcher,
    FetchFailure,
    FetchResult,
)
from sitefeed.utils.exceptions import ErrorCode, FeedStatusError, FeedTransportError

FEED_URL = "https://example.substack.com/feed"


def _warnings(caplog):
    return [record for record in caplog.records if record.levelno == logging.WARNING]


class TestFeedFetcher:
    """Test cases for FeedFetcher.fetch."""

    @pytest.mark.asyncio
    async def test_success_returns_body(self, http, caplog):
        caplog.set_level(logging.INFO, logger="sitefeed")
        session = http.session(http.response(body="<rss/>"))

        result = await FeedFetcher().fetch(FEED_URL, session)

        assert isinstance(result, FetchResult)
        assert result.success
        assert result.text == "<rss/>"
        assert result.failure is None
        assert result.error is None
        session.get.assert_called_once_with(FEED_URL)

        assert [r.levelno for r in caplog.records] == [logging.INFO]
        assert FEED_URL in caplog.records[0].getMessage()

    @pytest.mark.asyncio
    async def test_other_2xx_is_success(self, http):
        session = http.session(http.response(status=203, body="<rss/>"))

        result = await FeedFetcher().fetch(FEED_URL, session)

        assert result.success

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status, reason", [(500, "Internal Server Error"), (404, "Not Found"), (304, "Not Modified")])
    async def test_bad_status(self, http, caplog, status, reason):
        session = http.session(http.response(status=status, reason=reason, body="oops"))

        result = await FeedFetcher().fetch(FEED_URL, session)

        assert not result.success
        assert result.text is None
        assert result.failure == FetchFailure(
            kind=FailureKind.BAD_STATUS, status=status, reason=reason
        )
        assert result.error == f"{status} {reason}"

        warnings = _warnings(caplog)
        assert len(warnings) == 1
        assert str(status) in warnings[0].getMessage()
        assert reason in warnings[0].getMessage()

    @pytest.mark.asyncio
    async def test_log_records_carry_feed_context(self, http, caplog):
        session = http.session(http.response(status=503, reason="Service Unavailable"))

        await FeedFetcher().fetch(FEED_URL, session)

        warning = _warnings(caplog)[0]
        assert warning.component == "feed_fetcher"
        assert warning.feed_url == FEED_URL
        assert warning.status == 503

    @pytest.mark.asyncio
    async def test_bad_status_does_not_read_body(self, http):
        response = http.response(status=502, reason="Bad Gateway")
        session = http.session(response)

        await FeedFetcher().fetch(FEED_URL, session)

        response.text.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            aiohttp.ClientConnectionError("connection reset"),
            aiohttp.ClientPayloadError("truncated body"),
            asyncio.TimeoutError(),
            OSError("Name or service not known"),
        ],
    )
    async def test_transport_failure(self, http, caplog, error):
        session = http.session(error=error)

        result = await FeedFetcher().fetch(FEED_URL, session)

        assert not result.success
        assert result.failure.kind == FailureKind.TRANSPORT
        assert result.failure.detail
        assert len(_warnings(caplog)) == 1

    @pytest.mark.asyncio
    async def test_unexpected_errors_propagate(self, http):
        session = http.session(error=RuntimeError("bug"))

        with pytest.raises(RuntimeError):
            await FeedFetcher().fetch(FEED_URL, session)

    @pytest.mark.asyncio
    async def test_opens_own_session_when_none_given(self, http, fetcher_for):
        session = http.session(http.response(body="<rss/>"))
        fetcher = fetcher_for(session)

        result = await fetcher.fetch(FEED_URL)

        assert result.success
        session.get.assert_called_once_with(FEED_URL)

    def test_defaults_from_settings(self):
        fetcher = FeedFetcher()

        assert fetcher.timeout is None
        assert fetcher.user_agent == "SiteFeed/1.0"

    def test_explicit_arguments(self):
        fetcher = FeedFetcher(timeout=10, user_agent="Test/2.0")

        assert fetcher.timeout == 10
        assert fetcher.user_agent == "Test/2.0"


class TestFetchFailure:
    """Test conversion of failures to exceptions."""

    def test_bad_status_to_error(self):
        failure = FetchFailure(kind=FailureKind.BAD_STATUS, status=500, reason="Server Error")

        error = failure.to_error(FEED_URL)

        assert isinstance(error, FeedStatusError)
        assert error.status == 500
        assert error.error_code == ErrorCode.FEED_BAD_STATUS
        assert error.context["feed_url"] == FEED_URL
        assert error.recoverable

    def test_transport_to_error(self):
        failure = FetchFailure(kind=FailureKind.TRANSPORT, detail="DNS failure")

        error = failure.to_error()

        assert isinstance(error, FeedTransportError)
        assert error.detail == "DNS failure"
        assert error.error_code == ErrorCode.FEED_NETWORK_ERROR
        assert "DNS failure" in str(error)
