"""
Post slug derivation.

Substack post links look like ``https://<pub>.substack.com/p/<slug>``; the
slug is the record's primary key.
"""

from typing import Optional
from urllib.parse import quote, urlsplit

POST_MARKER = "/p/"

# Left as-is when the path is percent-encoded, as a browser URL parser does
PATH_SAFE_CHARS = "/%!$&'()*+,;=:@[]|^~"


def derive_slug(link: str) -> Optional[str]:
    """Return the path segment following ``/p/`` in ``link``.

    ``None`` when the link is not an absolute URL, has no ``/p/`` marker, or
    the segment after the marker is empty. The slug is percent-encoded the
    way a URL path is, so spaces and non-ASCII characters come back escaped.
    """
    try:
        parts = urlsplit(link.strip())
    except (AttributeError, ValueError):
        return None

    if not parts.scheme or not parts.netloc:
        return None

    path = quote(parts.path, safe=PATH_SAFE_CHARS)
    marker = path.find(POST_MARKER)
    if marker == -1:
        return None

    segment = path[marker + len(POST_MARKER):].split("/", 1)[0]
    return segment or None
