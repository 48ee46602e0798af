"""Tests for cache-first fetching."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from email.utils import format_datetime
from pathlib import Path

import pytest

from nwscache.cache import ResponseCache
from nwscache.cache.keys import PLACEHOLDER
from nwscache.config import DISCARD_PATH
from nwscache.exceptions import FetchConnectionError, NotFoundError, ResponseParseError
from nwscache.fetch import CachedFetcher
from nwscache.models import FetchedResponse

URL = "https://api.weather.gov/points/39.7456,-97.0892"
BODY = '{"properties": {"gridId": "TOP"}}'


class StubClient:
    """Records every fetch and answers from a canned response."""

    def __init__(self, body: str = BODY, expires: str = "", error: Exception | None = None) -> None:
        self.body = body
        self.expires = expires
        self.error = error
        self.calls: list[str] = []

    def fetch(self, url: str) -> FetchedResponse:
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return FetchedResponse(url=url, body=self.body, expires=self.expires)


def _far_future() -> str:
    """An expiry that stays valid for the duration of the test run."""
    return format_datetime(datetime.now(timezone.utc) + timedelta(hours=1), usegmt=True)


# ------------------------------------------------------------------ #
# Hit / miss
# ------------------------------------------------------------------ #


class TestCachedFetch:
    def test_miss_fetches_once_then_hits(self, cache: ResponseCache, quiet_output) -> None:
        client = StubClient(expires=_far_future())
        fetcher = CachedFetcher(client, cache)

        assert fetcher.fetch(URL) == BODY
        assert client.calls == [URL]

        assert fetcher.fetch(URL) == BODY
        assert client.calls == [URL]

    def test_hit_makes_no_request(self, cache: ResponseCache, quiet_output) -> None:
        cache.write(URL, _far_future(), "cached")
        client = StubClient()
        assert CachedFetcher(client, cache).fetch(URL) == "cached"
        assert client.calls == []

    def test_no_expiry_always_fetches(self, cache: ResponseCache, quiet_output) -> None:
        client = StubClient(expires="")
        fetcher = CachedFetcher(client, cache)
        fetcher.fetch(URL)
        fetcher.fetch(URL)
        assert client.calls == [URL, URL]

    @pytest.mark.parametrize("body", ["{\r\n  \"a\": 1\r\n}\r\n", "line1\rline2"])
    def test_hit_returns_body_byte_for_byte(
        self, cache: ResponseCache, quiet_output, body: str
    ) -> None:
        client = StubClient(body=body, expires=_far_future())
        fetcher = CachedFetcher(client, cache)
        assert fetcher.fetch(URL) == body
        assert fetcher.fetch(URL) == body
        assert client.calls == [URL]

    def test_expired_entry_refetched(self, cache: ResponseCache, quiet_output) -> None:
        cache.write(URL, "Sat, 01 Jan 2000 00:00:00 GMT", "stale")
        client = StubClient(body="fresh", expires=_far_future())
        assert CachedFetcher(client, cache).fetch(URL) == "fresh"
        assert client.calls == [URL]

    def test_without_cache(self, quiet_output) -> None:
        client = StubClient(expires=_far_future())
        fetcher = CachedFetcher(client)
        fetcher.fetch(URL)
        fetcher.fetch(URL)
        assert len(client.calls) == 2


# ------------------------------------------------------------------ #
# Failures
# ------------------------------------------------------------------ #


class TestFetchFailures:
    def test_write_failure_still_returns_body(
        self, tmp_path: Path, quiet_output, capsys
    ) -> None:
        cache = ResponseCache(tmp_path / "missing-parent" / "root")
        client = StubClient(expires=_far_future())
        assert CachedFetcher(client, cache).fetch(URL) == BODY
        assert "Could not cache response" in capsys.readouterr().err

    def test_read_storage_error_falls_back_to_network(
        self, cache: ResponseCache, quiet_output
    ) -> None:
        url = f"https:{PLACEHOLDER}{PLACEHOLDER}example"
        client = StubClient(expires=_far_future())
        assert CachedFetcher(client, cache).fetch(url) == BODY
        assert client.calls == [url]

    def test_ambiguous_url_not_warned(self, cache: ResponseCache, quiet_output, capsys) -> None:
        url = f"https:{PLACEHOLDER}{PLACEHOLDER}example"
        CachedFetcher(StubClient(expires=_far_future()), cache).fetch(url)
        assert "Could not cache" not in capsys.readouterr().err
        assert list(cache.root.iterdir()) == []

    def test_discard_root_not_warned(self, verbose_output, capsys) -> None:
        cache = ResponseCache(DISCARD_PATH)
        CachedFetcher(StubClient(expires=_far_future()), cache).fetch(URL)
        err = capsys.readouterr().err
        assert "Could not cache" not in err
        assert "Not caching" in err

    def test_connection_error_propagates(self, cache: ResponseCache, quiet_output) -> None:
        client = StubClient(error=FetchConnectionError("down"))
        with pytest.raises(FetchConnectionError):
            CachedFetcher(client, cache).fetch(URL)
        assert not cache.key_dir(URL).exists()

    def test_http_error_writes_nothing(self, cache: ResponseCache, quiet_output) -> None:
        client = StubClient(error=NotFoundError("HTTP 404"))
        with pytest.raises(NotFoundError):
            CachedFetcher(client, cache).fetch(URL)
        assert list(cache.root.iterdir()) == []


# ------------------------------------------------------------------ #
# JSON
# ------------------------------------------------------------------ #


class TestFetchJson:
    def test_decodes(self, cache: ResponseCache, quiet_output) -> None:
        fetcher = CachedFetcher(StubClient(), cache)
        assert fetcher.fetch_json(URL) == {"properties": {"gridId": "TOP"}}

    def test_invalid_json(self, cache: ResponseCache, quiet_output) -> None:
        fetcher = CachedFetcher(StubClient(body="<html>"), cache)
        with pytest.raises(ResponseParseError) as exc_info:
            fetcher.fetch_json(URL)
        assert exc_info.value.exit_code == 1
