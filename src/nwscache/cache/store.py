"""Disk-backed response store keyed by URL, expiring by file name.

Layout::

    <root>/<sanitized url>/<Expires header>

One file per entry; its content is the raw response body with no framing.
Entries are written through :func:`~nwscache.config.atomic_write`, so a
reader never sees a half-written file under a valid expiry name.

The store never raises for filesystem problems. Every ``OSError`` is logged
and reported through :class:`~nwscache.models.CacheResult` /
:class:`~nwscache.models.WriteResult`, and the caller falls back to the
network. No locking is done: two processes sharing one root can race on
directory creation or on deleting an entry another is about to read.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Optional

from nwscache.cache.expiry import check_entry, encode, is_expired, parse_expiry, utcnow
from nwscache.cache.keys import is_cacheable, sanitize
from nwscache.config import atomic_write, ensure_dir, is_discard
from nwscache.models import (
    CacheEntryInfo,
    CacheResult,
    WriteResult,
    WriteStatus,
)
from nwscache.output import debug, error


class ResponseCache:
    """Store and look up response bodies under a cache root.

    The root is an explicit handle, typically the result of
    :func:`~nwscache.config.resolve_cache_root`; tests point it at a
    temporary directory.

    Args:
        root: Cache root directory. Created on the first write if missing
            (its parent must exist).

    Example::

        cache = ResponseCache(resolve_cache_root())
        cache.write(url, "Sat, 17 Oct 2026 12:00:00 GMT", body)
        result = cache.read(url)
        if result.is_hit:
            print(result.body)
    """

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def key_dir(self, url: str) -> Path:
        """Directory holding the entries for *url*."""
        return self.root / sanitize(url)

    def accepts(self, url: str) -> bool:
        """``False`` when *url* is never cached here.

        That is an ambiguous key (see :func:`~nwscache.cache.keys.is_cacheable`)
        or a root that is the discard path. :meth:`write` reports both as
        ``STORAGE_ERROR`` without touching the disk.
        """
        return is_cacheable(url) and not is_discard(self.root)

    # ------------------------------------------------------------------ #
    # Lookup
    # ------------------------------------------------------------------ #

    def read(self, url: str, now: Optional[datetime] = None) -> CacheResult:
        """Return the current entry for *url*.

        Every file in the key directory goes through
        :func:`~nwscache.cache.expiry.check_entry`, so expired and
        unparseable entries are deleted as a side effect. When several valid
        entries coexist, the one with the latest expiry wins.
        """
        if not is_cacheable(url):
            return CacheResult.storage_error(f"ambiguous cache key for {url!r}")

        if not self.root.is_dir():
            debug(f'Config dir "{self.root}" doesn\'t exist.')
            return CacheResult.miss("cache root missing", self.root)

        key_dir = self.key_dir(url)
        if not key_dir.is_dir():
            debug(f'Cache dir "{key_dir}" doesn\'t exist.')
            return CacheResult.miss("no cache directory", key_dir)

        now = now or utcnow()
        try:
            children = sorted(key_dir.iterdir())
        except OSError as exc:
            error(f'Error reading "{key_dir}": {exc}')
            return CacheResult.storage_error(str(exc), key_dir)

        best: Optional[Path] = None
        best_at: Optional[datetime] = None
        for child in children:
            if not child.is_file():
                continue
            if not check_entry(child, now):
                continue
            expires_at = parse_expiry(child.name)
            if expires_at is not None and (best_at is None or expires_at > best_at):
                best, best_at = child, expires_at

        if best is None:
            return CacheResult.miss("no valid entry", key_dir)

        try:
            body = best.read_bytes().decode("utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            error(f'Error reading cached file "{best}": {exc}')
            return CacheResult.storage_error(str(exc), best)

        debug(f'Returning cached data from "{best}".')
        return CacheResult.hit(body, best)

    # ------------------------------------------------------------------ #
    # Store
    # ------------------------------------------------------------------ #

    def write(self, url: str, expiry: str, body: str) -> WriteResult:
        """Store *body* for *url* until *expiry*.

        An empty *expiry* means the server gave no lifetime: nothing is
        written and the result is ``SKIPPED`` (still a success), so every
        later fetch of *url* misses. Older entries are left in place.
        """
        if not is_cacheable(url):
            return _write_failed(f"ambiguous cache key for {url!r}")
        if is_discard(self.root):
            debug("No home directory; response not cached.")
            return _write_failed("cache disabled", self.root)

        if not ensure_dir(self.root):
            return _write_failed("cannot create cache root", self.root)
        key_dir = self.key_dir(url)
        if not ensure_dir(key_dir):
            return _write_failed("cannot create cache directory", key_dir)

        if not expiry:
            debug(f"No expiry for {url}; not caching.")
            return WriteResult(status=WriteStatus.SKIPPED, path=key_dir, reason="no expiry")

        try:
            path = key_dir / encode(expiry)
        except ValueError as exc:
            error(str(exc))
            return _write_failed(str(exc), key_dir)

        try:
            atomic_write(path, body)
        except OSError as exc:
            error(f'Error writing "{path}": {exc}')
            return _write_failed(str(exc), path)

        debug(f'Cached {url} until "{expiry}".')
        return WriteResult(status=WriteStatus.STORED, path=path)

    # ------------------------------------------------------------------ #
    # Listing
    # ------------------------------------------------------------------ #

    def entries(self, now: Optional[datetime] = None) -> list[CacheEntryInfo]:
        """Describe every entry under the root without deleting anything."""
        if not self.root.is_dir():
            return []
        now = now or utcnow()
        infos: list[CacheEntryInfo] = []
        try:
            key_dirs = sorted(p for p in self.root.iterdir() if p.is_dir())
        except OSError as exc:
            error(f'Error reading "{self.root}": {exc}')
            return []
        for key_dir in key_dirs:
            try:
                files = sorted(p for p in key_dir.iterdir() if p.is_file())
            except OSError as exc:
                error(f'Error reading "{key_dir}": {exc}')
                continue
            for path in files:
                expires_at = parse_expiry(path.name)
                try:
                    size = path.stat().st_size
                except OSError:
                    size = 0
                infos.append(
                    CacheEntryInfo(
                        key=key_dir.name,
                        name=path.name,
                        expires_at=expires_at,
                        size=size,
                        expired=expires_at is None or is_expired(expires_at, now),
                    )
                )
        return infos


def _write_failed(reason: str, path: Optional[Path] = None) -> WriteResult:
    return WriteResult(status=WriteStatus.STORAGE_ERROR, path=path, reason=reason)
