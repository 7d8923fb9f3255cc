"""
Unit Tests for RSS Regeneration
===============================
"""

import xml.etree.ElementTree as ET
from datetime import datetime, timedelta, timezone

from sitefeed.config.settings import SiteSettings
from sitefeed.delivery.rss_renderer import render_item, render_rss
from sitefeed.ingestion.rss_extractor import extract_entries
from sitefeed.storage.record_store import RecordStore


SITE = SiteSettings(
    title="Test Site",
    description="Things & stuff",
    url="https://site.example",
)


class TestRenderItem:
    """Test single item rendering."""

    def test_fields(self, make_record):
        record = make_record(
            "hello",
            title="Hello",
            description="A & B <not a tag>",
            published_at=datetime(2024, 9, 5, 12, tzinfo=timezone.utc),
        )

        item = ET.fromstring(render_item(record))

        assert item.tag == "item"
        assert item.findtext("title") == "Hello"
        assert item.findtext("link") == "https://example.substack.com/p/hello"
        assert item.find("guid").get("isPermaLink") == "true"
        assert item.findtext("description") == "A & B <not a tag>"
        assert item.findtext("pubDate") == "Thu, 05 Sep 2024 12:00:00 +0000"

    def test_text_is_escaped(self, make_record):
        rendered = render_item(make_record("x", title="Fish & <Chips>"))

        assert "Fish &amp; &lt;Chips&gt;" in rendered


class TestRenderRss:
    """Test whole-document rendering."""

    def test_channel_metadata(self):
        root = ET.fromstring(render_rss([], site=SITE))

        assert root.tag == "rss"
        assert root.get("version") == "2.0"
        channel = root.find("channel")
        assert channel.findtext("title") == "Test Site"
        assert channel.findtext("description") == "Things & stuff"
        assert channel.findtext("link").startswith("https://site.example")
        assert channel.findall("item") == []

    def test_items_keep_given_order(self, make_record):
        base = datetime(2024, 9, 5, tzinfo=timezone.utc)
        store = RecordStore()
        store.replace_all(
            [
                make_record("old", published_at=base),
                make_record("new", published_at=base + timedelta(days=2)),
                make_record("mid", published_at=base + timedelta(days=1)),
            ]
        )

        channel = ET.fromstring(render_rss(store.list_all(), site=SITE)).find("channel")

        assert [item.findtext("link").rsplit("/", 1)[-1] for item in channel.findall("item")] == [
            "new",
            "mid",
            "old",
        ]

    def test_defaults_to_configured_site(self):
        root = ET.fromstring(render_rss([]))

        assert root.find("channel").findtext("title") == "@ithaqua'kr"

    def test_output_can_be_read_back(self, make_record):
        record = make_record("round", title="Round", description="Body")

        entries = extract_entries(render_rss([record], site=SITE))

        assert len(entries) == 1
        assert entries[0].title == "Round"
        assert entries[0].link == record.external_url
