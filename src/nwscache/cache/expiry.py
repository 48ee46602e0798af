"""Expiry encoding for cache entry file names.

An entry file is named after the ``Expires`` header of the response it
holds, verbatim, e.g. ``Sat, 17 Oct 2026 12:00:00 GMT``. That is RFC 2822
date-time text: a legal Unix file name that parses back to a timestamp with
one-second resolution.

The predicates here (:func:`is_expired`, :func:`is_valid_name`) are pure.
Deleting a stale file is a separate step (:func:`reap`);
:func:`check_entry` combines the two for callers that want a lookup to
garbage-collect as it goes.
"""

from __future__ import annotations

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from pathlib import Path
from typing import Optional

from nwscache.cache.keys import SEPARATORS
from nwscache.output import debug, error


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _aware(value: datetime) -> datetime:
    # parsedate_to_datetime returns a naive value for a "-0000" zone.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def encode(expiry: str) -> str:
    """Return the file name for an entry expiring at *expiry*.

    The header value is used as-is.

    Raises:
        ValueError: If *expiry* is empty or contains a path separator.
    """
    if not expiry:
        raise ValueError("empty expiry cannot name a cache entry")
    if any(sep in expiry for sep in SEPARATORS):
        raise ValueError(f"expiry {expiry!r} is not a valid file name")
    return expiry


def parse_expiry(name: str) -> Optional[datetime]:
    """Parse an entry file name back to an aware datetime, or ``None``."""
    try:
        parsed = parsedate_to_datetime(name)
    except (TypeError, ValueError, IndexError, OverflowError):
        return None
    if parsed is None:
        return None
    return _aware(parsed)


def is_expired(expires_at: datetime, now: datetime) -> bool:
    """An entry is expired the instant *now* reaches its expiry."""
    return _aware(now) >= _aware(expires_at)


def is_valid_name(name: str, now: datetime) -> bool:
    """``True`` when *name* parses and is still strictly in the future."""
    expires_at = parse_expiry(name)
    if expires_at is None:
        return False
    return not is_expired(expires_at, now)


def reap(path: Path) -> bool:
    """Delete an invalid entry file. Returns ``False`` if deletion failed."""
    try:
        path.unlink()
    except FileNotFoundError:
        # Already gone; another sweep got there first.
        return True
    except OSError as exc:
        error(f'Error deleting expired file "{path}": {exc}')
        return False
    debug(f'Deleted expired cache entry "{path}"')
    return True


def check_entry(path: Path, now: Optional[datetime] = None) -> bool:
    """Validity check with cleanup: invalid entries are reaped on the spot.

    Returns:
        ``True`` if the entry at *path* is still valid, ``False`` if its
        name is unparseable or expired (the file has then been deleted, or
        the deletion failure logged).
    """
    if is_valid_name(path.name, now or utcnow()):
        return True
    reap(path)
    return False
