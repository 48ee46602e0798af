"""Cache-first fetching of weather API documents.

:class:`CachedFetcher` is the public entry point that ties the cache and the
HTTP client together:

1. **Hit** -- the cache holds a valid entry for the URL: return it, no
   network access.
2. **Miss** -- GET the URL, store the body under its ``Expires`` header,
   return the body. A failed store is logged and otherwise ignored; it never
   keeps the fetched data from the caller.

A network or decoding failure on a miss propagates as an
:class:`~nwscache.exceptions.NwscacheError`; there is no stale fallback and
no retry at this level.
"""

from __future__ import annotations

import json
from typing import Any, Optional, Protocol

from nwscache.cache import ResponseCache
from nwscache.exceptions import ResponseParseError
from nwscache.models import CacheStatus, FetchedResponse
from nwscache.output import clear_progress, debug, progress, warning


class Fetcher(Protocol):
    """Anything that can GET a URL; :class:`~nwscache.client.SyncClient` in practice."""

    def fetch(self, url: str) -> FetchedResponse: ...


class CachedFetcher:
    """Serve documents from the response cache, falling back to the network.

    Args:
        client: An open HTTP client.
        cache: Response cache, or ``None`` to always go to the network.

    Example::

        with SyncClient(config.request) as client:
            fetcher = CachedFetcher(client, ResponseCache(resolve_cache_root()))
            body = fetcher.fetch("https://api.weather.gov/points/39.7456,-97.0892")
    """

    def __init__(self, client: Fetcher, cache: Optional[ResponseCache] = None) -> None:
        self._client = client
        self._cache = cache

    def fetch(self, url: str) -> str:
        """Return the body for *url*, from the cache when possible.

        Raises:
            FetchConnectionError: The API could not be reached on a miss.
            ResponseDecodeError: The fetched body is not valid text.
            NotFoundError: The API answered 404.
            ServerError: The API answered with another error status.
        """
        debug(f'fetch "{url}"')
        if self._cache is not None:
            cached = self._cache.read(url)
            if cached.is_hit:
                debug("Call cached, using that data rather than requesting over http/s.")
                assert cached.body is not None
                return cached.body
            if cached.status == CacheStatus.STORAGE_ERROR:
                debug(f"Cache unavailable ({cached.reason}); fetching.")
            else:
                debug("Call not cached.")

        progress(f'Calling "{url}"')
        try:
            response = self._client.fetch(url)
        finally:
            clear_progress()

        if self._cache is not None:
            self._store(self._cache, url, response)
        return response.body

    @staticmethod
    def _store(cache: ResponseCache, url: str, response: FetchedResponse) -> None:
        if not cache.accepts(url):
            debug(f"Not caching {url}: the cache does not accept it.")
            return
        result = cache.write(url, response.expires, response.body)
        if not result.ok:
            warning(f"Could not cache response for {url}: {result.reason}")

    def fetch_json(self, url: str) -> Any:
        """Like :meth:`fetch`, decoding the body as JSON.

        Raises:
            ResponseParseError: The body is not valid JSON.
        """
        body = self.fetch(url)
        try:
            return json.loads(body)
        except json.JSONDecodeError as exc:
            raise ResponseParseError(f"Error parsing JSON from {url}: {exc}") from exc
