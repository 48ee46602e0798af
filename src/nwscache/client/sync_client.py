"""Synchronous HTTP client for the weather API.

:class:`SyncClient` wraps :class:`httpx.Client` and adds:

- **Required header** -- api.weather.gov refuses requests without a
  ``User-Agent``; the value comes from
  :attr:`~nwscache.models.RequestConfig.user_agent`.
- **Expiry extraction** -- the ``Expires`` response header is returned
  alongside the body so the cache can name the entry after it.
- **Strict decoding** -- the body is decoded with the response charset
  (UTF-8 by default) and a decoding failure raises instead of being papered
  over with replacement characters.
- **Retry with backoff** -- optional retries on 5xx and network errors with
  exponential delay (1 s, 2 s, 4 s, ...). Disabled by default.
- **Error mapping** -- network failures, 404 and other error statuses
  become typed :mod:`nwscache.exceptions`.
"""

from __future__ import annotations

import time
from typing import Optional

import httpx

from nwscache.exceptions import (
    FetchConnectionError,
    NotFoundError,
    ResponseDecodeError,
    ServerError,
)
from nwscache.models import FetchedResponse, RequestConfig
from nwscache.output import debug


class SyncClient:
    """Blocking client that fetches one URL at a time.

    Must be used as a context manager so the underlying transport is opened
    and closed properly.

    Args:
        config: Request settings (User-Agent, timeout, retries).
        transport: Optional :class:`httpx.BaseTransport`, used by tests to
            inject :class:`httpx.MockTransport`.

    Example::

        with SyncClient(RequestConfig()) as client:
            response = client.fetch("https://api.weather.gov/points/39.7456,-97.0892")
            response.expires   # "Sat, 17 Oct 2026 12:00:00 GMT"
    """

    def __init__(
        self,
        config: Optional[RequestConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._config = config or RequestConfig()
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    def __enter__(self) -> SyncClient:
        self._client = httpx.Client(
            headers={"User-Agent": self._config.user_agent},
            timeout=self._config.timeout,
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    def fetch(self, url: str) -> FetchedResponse:
        """GET *url* and return its decoded body and ``Expires`` header.

        Raises:
            FetchConnectionError: On network / timeout errors after all
                retries.
            NotFoundError: On 404.
            ServerError: On any other status >= 400 (after retries for 5xx).
            ResponseDecodeError: If the body is not valid text in its
                declared charset.
        """
        response = self._execute_with_retry(url)
        self._map_response_error(response)

        expires = response.headers.get("expires", "")
        debug(f'Expires: "{expires}"')
        return FetchedResponse(
            url=url,
            body=self._decode(response),
            expires=expires,
            status_code=response.status_code,
        )

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _execute_with_retry(self, url: str) -> httpx.Response:
        """GET with exponential-backoff retry on 5xx and network errors."""
        assert self._client is not None, "Client not initialised -- use as context manager"

        max_retries = self._config.max_retries
        for attempt in range(max_retries + 1):
            try:
                response = self._client.get(url)
            except httpx.TransportError as exc:
                if attempt < max_retries:
                    delay = 2 ** attempt
                    debug(
                        f"Connection error: {exc}, retrying in {delay}s "
                        f"(attempt {attempt + 1}/{max_retries})"
                    )
                    time.sleep(delay)
                    continue
                raise FetchConnectionError(f"Error calling {url}: {exc}") from exc

            if response.status_code >= 500 and attempt < max_retries:
                delay = 2 ** attempt
                debug(
                    f"Server error {response.status_code}, retrying in {delay}s "
                    f"(attempt {attempt + 1}/{max_retries})"
                )
                time.sleep(delay)
                continue
            return response

        raise FetchConnectionError(f"Error calling {url}")  # pragma: no cover

    @staticmethod
    def _map_response_error(response: httpx.Response) -> None:
        """Raise a typed exception for error status codes."""
        status = response.status_code
        if status < 400:
            return

        # api.weather.gov answers errors with application/problem+json.
        try:
            detail = response.json()
            if isinstance(detail, dict):
                msg = detail.get("detail") or detail.get("title") or ""
            else:
                msg = str(detail)
        except ValueError:
            msg = response.text[:200] if response.content else ""

        full_msg = f"HTTP {status}: {msg}" if msg else f"HTTP {status}"
        if status == 404:
            raise NotFoundError(full_msg)
        raise ServerError(full_msg)

    @staticmethod
    def _decode(response: httpx.Response) -> str:
        encoding = response.charset_encoding or "utf-8"
        try:
            return response.content.decode(encoding)
        except (UnicodeDecodeError, LookupError) as exc:
            raise ResponseDecodeError(
                f"Error converting response from {response.url} to text: {exc}"
            ) from exc
