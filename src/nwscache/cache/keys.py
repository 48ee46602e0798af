"""Map request URLs to cache directory names.

The only character of a URL that is unsafe in a Unix file name is ``/``.
It is replaced by the visually similar ``╱`` (U+2571) so the cache key stays
readable when browsing the cache root, e.g.::

    https://api.weather.gov/points/39.7,-97.0
    https:╱╱api.weather.gov╱points╱39.7,-97.0

No other normalisation happens: a trailing slash or a different query order
yields a different key.
"""

from __future__ import annotations

import os

PLACEHOLDER = "╱"

SEPARATORS = tuple(sorted({"/", os.sep} | ({os.altsep} if os.altsep else set())))


def sanitize(url: str) -> str:
    """Return the directory name used to cache *url*."""
    for sep in SEPARATORS:
        url = url.replace(sep, PLACEHOLDER)
    return url


def is_cacheable(url: str) -> bool:
    """``False`` for an empty URL or one already containing :data:`PLACEHOLDER`.

    Such a URL would share a key with the one that has ``/`` in the same
    position, so the cache refuses it. Real URLs percent-encode non-ASCII
    characters and never trip this check.
    """
    return bool(url) and PLACEHOLDER not in url
