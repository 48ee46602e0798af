"""Canonical Pydantic models shared across all nwscache modules.

The models fall into two groups:

**Configuration models** -- serialised as JSON next to the cache root:
    :class:`RequestConfig`, :class:`CacheConfig`, :class:`OutputConfig` and
    :class:`GlobalConfig`.

**Result models** -- returned by the cache and the HTTP client so callers
can tell *why* something happened instead of inferring it from an empty
string:
    :class:`CacheStatus`, :class:`CacheResult`, :class:`WriteStatus`,
    :class:`WriteResult`, :class:`PurgeReport`, :class:`CacheEntryInfo` and
    :class:`FetchedResponse`.
"""

from __future__ import annotations

import enum
from datetime import datetime
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field


# --- Configuration ---


class RequestConfig(BaseModel):
    """HTTP request settings applied to every call against the weather API."""

    user_agent: str = Field(
        default="weathr-app",
        description="User-Agent header; api.weather.gov rejects requests without one",
    )
    timeout: int = Field(default=30, description="Request timeout in seconds")
    max_retries: int = Field(
        default=0, description="Retries on connection errors and 5xx responses"
    )


class CacheConfig(BaseModel):
    """Response cache settings stored in :class:`GlobalConfig`."""

    enabled: bool = Field(default=True, description="Enable response caching")
    purge_on_start: bool = Field(
        default=True, description="Sweep expired entries once at CLI start-up"
    )


class OutputConfig(BaseModel):
    """Default output format preferences stored in :class:`GlobalConfig`."""

    format: str = Field(
        default="auto", description="Output format: auto, json, plain, rich"
    )


class GlobalConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/nwscache.json``.

    Loaded and saved by :func:`~nwscache.config.load_global_config` and
    :func:`~nwscache.config.save_global_config`. See
    :func:`~nwscache.config.resolve_config` for the precedence chain.
    """

    request: RequestConfig = Field(default_factory=RequestConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


# --- Cache results ---


class CacheStatus(str, enum.Enum):
    """Outcome of a cache lookup."""

    HIT = "hit"
    MISS = "miss"
    STORAGE_ERROR = "storage_error"


class CacheResult(BaseModel):
    """Result of :meth:`~nwscache.cache.store.ResponseCache.read`.

    ``body`` is only set on a hit; ``reason`` explains a miss or a storage
    error and ``path`` names the file or directory involved.
    """

    status: CacheStatus
    body: Optional[str] = None
    reason: Optional[str] = None
    path: Optional[Path] = None

    @classmethod
    def hit(cls, body: str, path: Path) -> CacheResult:
        return cls(status=CacheStatus.HIT, body=body, path=path)

    @classmethod
    def miss(cls, reason: str, path: Optional[Path] = None) -> CacheResult:
        return cls(status=CacheStatus.MISS, reason=reason, path=path)

    @classmethod
    def storage_error(cls, reason: str, path: Optional[Path] = None) -> CacheResult:
        return cls(status=CacheStatus.STORAGE_ERROR, reason=reason, path=path)

    @property
    def is_hit(self) -> bool:
        return self.status == CacheStatus.HIT


class WriteStatus(str, enum.Enum):
    """Outcome of a cache write."""

    STORED = "stored"
    SKIPPED = "skipped"
    STORAGE_ERROR = "storage_error"


class WriteResult(BaseModel):
    """Result of :meth:`~nwscache.cache.store.ResponseCache.write`.

    ``SKIPPED`` means the response carried no expiry and was deliberately
    not cached; it still counts as success.
    """

    status: WriteStatus
    path: Optional[Path] = None
    reason: Optional[str] = None

    @property
    def ok(self) -> bool:
        """``True`` unless the write failed on the filesystem."""
        return self.status != WriteStatus.STORAGE_ERROR


class PurgeReport(BaseModel):
    """Counters collected by :func:`~nwscache.cache.purge.purge_cache`."""

    directories_scanned: int = 0
    entries_removed: int = 0
    directories_removed: int = 0


class CacheEntryInfo(BaseModel):
    """Read-only description of one entry file, used by ``nwscache cache list``."""

    key: str
    name: str
    expires_at: Optional[datetime] = None
    size: int = 0
    expired: bool = True


# --- HTTP ---


class FetchedResponse(BaseModel):
    """A successful response from the weather API.

    ``expires`` is the raw ``Expires`` header, or ``""`` when the server sent
    none -- which the cache treats as "do not store".
    """

    url: str
    body: str
    expires: str = ""
    status_code: int = 200
