"""
SiteFeed Ingestion Module
=========================

Turns raw feed text into clean, identifiable entries.

This module handles:
- Tolerant extraction of <item> blocks
- Markup stripping and entity decoding
- Slug derivation from post links
"""

from .rss_extractor import extract_entries
from .content_cleaner import ContentCleaner, normalize_text
from .slugs import derive_slug

__all__ = [
    "extract_entries",
    "ContentCleaner",
    "normalize_text",
    "derive_slug",
]
