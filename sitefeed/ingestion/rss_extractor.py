"""
RSS Item Extractor
==================

Tolerant, textual extraction of ``<item>`` blocks from an RSS document.

The scan never builds a DOM and never validates the document: anything
outside of ``<item>...</item>`` is ignored, so feeds with broken markup in
the channel header still yield their items. Every lookup is a forward
``str.find`` from a cursor, which keeps the scan linear in the input size.
"""

from typing import Iterator, List, Optional

from ..database.models import RawFeedEntry


ITEM_OPEN = "<item>"
ITEM_CLOSE = "</item>"
CDATA_OPEN = "<![CDATA["
CDATA_CLOSE = "]]>"

ENTRY_FIELDS = ("title", "link", "description", "pubDate")


def iter_item_blocks(xml: str) -> Iterator[str]:
    """Yield the inner text of each ``<item>...</item>`` block in document order.

    Blocks do not nest: a block ends at the first ``</item>`` after its
    opening tag. An ``<item>`` with no closing tag ends the scan.
    """
    cursor = 0
    while True:
        start = xml.find(ITEM_OPEN, cursor)
        if start == -1:
            return
        body_start = start + len(ITEM_OPEN)
        end = xml.find(ITEM_CLOSE, body_start)
        if end == -1:
            return
        yield xml[body_start:end]
        cursor = end + len(ITEM_CLOSE)


def _skip_whitespace(text: str, pos: int) -> int:
    while pos < len(text) and text[pos].isspace():
        pos += 1
    return pos


def _skip_whitespace_back(text: str, pos: int, floor: int) -> int:
    while pos > floor and text[pos - 1].isspace():
        pos -= 1
    return pos


def _cdata_content(block: str, tag: str) -> Optional[str]:
    """Return the CDATA payload of the first ``<tag>`` that wraps one.

    The payload ends at the first ``]]>`` followed, after optional
    whitespace, by ``</tag>``; it may itself contain ``]]>``.
    """
    open_tag = f"<{tag}>"
    close_tag = f"</{tag}>"
    cursor = 0

    while True:
        start = block.find(open_tag, cursor)
        if start == -1:
            return None
        cursor = start + len(open_tag)

        # Only whitespace may sit between the tag and the CDATA marker
        marker = _skip_whitespace(block, cursor)
        if block.startswith(CDATA_OPEN, marker):
            break

    payload_start = marker + len(CDATA_OPEN)

    # Walk the closing tags forward; each one is looked at once. If none
    # fits this opening, none fits a later opening either.
    close = block.find(close_tag, payload_start)
    while close != -1:
        payload_end = _skip_whitespace_back(block, close, payload_start) - len(CDATA_CLOSE)
        if payload_end >= payload_start and block.startswith(CDATA_CLOSE, payload_end):
            return block[payload_start:payload_end]
        close = block.find(close_tag, close + len(close_tag))
    return None


def _plain_content(block: str, tag: str) -> Optional[str]:
    """Return the raw inner text of the first ``<tag>...</tag>`` pair."""
    open_tag = f"<{tag}>"
    start = block.find(open_tag)
    if start == -1:
        return None
    inner_start = start + len(open_tag)
    end = block.find(f"</{tag}>", inner_start)
    if end == -1:
        return None
    return block[inner_start:end]


def get_tag_content(block: str, tag: str) -> Optional[str]:
    """Read one field from an item block.

    A CDATA-wrapped value wins over a plain reading of the same tag. The
    result is trimmed; ``None`` means the tag is absent.
    """
    value = _cdata_content(block, tag)
    if value is None:
        value = _plain_content(block, tag)
    if value is None:
        return None
    return value.strip()


def extract_entries(xml: str) -> List[RawFeedEntry]:
    """Extract every complete entry from a raw RSS document.

    Items without a title, link or pubDate are dropped; a missing
    description becomes an empty string. Identical items are all kept.

    Args:
        xml: Raw feed text

    Returns:
        Entries in document order
    """
    entries = []

    for block in iter_item_blocks(xml or ""):
        fields = {tag: get_tag_content(block, tag) for tag in ENTRY_FIELDS}

        if not (fields["title"] and fields["link"] and fields["pubDate"]):
            continue

        entries.append(
            RawFeedEntry(
                title=fields["title"],
                link=fields["link"],
                description=fields["description"] or "",
                pub_date=fields["pubDate"],
            )
        )

    return entries
