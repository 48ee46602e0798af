"""Disk-backed TTL cache for weather API responses.

Entries live at ``<root>/<sanitized url>/<Expires header>`` and are served
until the instant named by their file name.

* :class:`ResponseCache` -- read and write entries for a URL.
* :func:`purge_cache` -- sweep expired entries and empty key directories.
* :mod:`nwscache.cache.expiry` -- file-name codec and validity predicates.
* :mod:`nwscache.cache.keys` -- URL to directory-name mapping.
"""

from nwscache.cache.purge import purge_cache
from nwscache.cache.store import ResponseCache

__all__ = ["ResponseCache", "purge_cache"]
