"""
Content Cleaner
===============

Plain-text extraction for feed descriptions.

Only tags and five entities are handled. Other entities (``&nbsp;``, ``&#8217;``)
are left exactly as they appear in the feed.
"""

import re
from typing import Optional


class ContentCleaner:
    """Strips markup from feed text and decodes the basic XML entities."""

    TAG_PATTERN = re.compile(r"<[^>]+>")
    WHITESPACE_PATTERN = re.compile(r"\s+")

    # Applied in sequence, so "&amp;lt;" ends up as "<"
    ENTITIES = (
        ("&amp;", "&"),
        ("&lt;", "<"),
        ("&gt;", ">"),
        ("&quot;", '"'),
        ("&#39;", "'"),
    )

    def strip_tags(self, text: str) -> str:
        """Remove every ``<...>`` tag, keeping the text between them."""
        return self.TAG_PATTERN.sub("", text)

    def decode_entities(self, text: str) -> str:
        """Decode the five supported entities, one after another."""
        for entity, char in self.ENTITIES:
            text = text.replace(entity, char)
        return text

    def normalize(self, raw: Optional[str]) -> str:
        """Turn an HTML fragment into a single line of plain text.

        Args:
            raw: Description text as read from the feed

        Returns:
            Text with tags removed, entities decoded and whitespace collapsed
        """
        if not raw:
            return ""

        text = self.strip_tags(raw)
        text = self.decode_entities(text)
        text = self.WHITESPACE_PATTERN.sub(" ", text)
        return text.strip()


_cleaner = ContentCleaner()


def normalize_text(raw: Optional[str]) -> str:
    """Module-level shortcut for :meth:`ContentCleaner.normalize`."""
    return _cleaner.normalize(raw)
