"""
RSS Renderer
============

Regenerates the site's own RSS 2.0 feed from synchronized records.
"""

from email.utils import format_datetime
from typing import Iterable, List, Optional
from xml.sax.saxutils import escape

from ..config.settings import SiteSettings, get_settings
from ..database.models import NormalizedRecord


def _element(name: str, value: str) -> str:
    return f"<{name}>{escape(value)}</{name}>"


def render_item(record: NormalizedRecord) -> str:
    """Render one record as an RSS ``<item>``."""
    parts = [
        _element("title", record.title),
        _element("link", record.external_url),
        f'<guid isPermaLink="true">{escape(record.external_url)}</guid>',
        _element("description", record.description),
        _element("pubDate", format_datetime(record.published_at)),
    ]
    return "<item>" + "".join(parts) + "</item>"


def render_rss(
    records: Iterable[NormalizedRecord], site: Optional[SiteSettings] = None
) -> str:
    """Render records as a complete RSS 2.0 document.

    Items are written in the order given; pass ``RecordStore.list_all()``
    for newest-first output.

    Args:
        records: Records to publish
        site: Channel metadata (default from config)

    Returns:
        RSS document as a string
    """
    site = site or get_settings().site
    site_url = str(site.url)

    channel: List[str] = [
        _element("title", site.title),
        _element("description", site.description),
        _element("link", site_url),
    ]
    channel.extend(render_item(record) for record in records)

    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<rss version="2.0">'
        "<channel>" + "".join(channel) + "</channel></rss>"
    )
