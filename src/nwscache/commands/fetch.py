"""Fetch commands -- ``nwscache fetch`` and ``nwscache forecast``.

Both go through :class:`~nwscache.fetch.CachedFetcher`, so a repeated call
within the lifetime the API granted (its ``Expires`` header) is answered
from disk.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Iterator

import typer

from nwscache.exceptions import NwscacheError
from nwscache.output import format_response, info, print_data, print_table

if TYPE_CHECKING:
    from nwscache.fetch import CachedFetcher

_FORECAST_HEADERS = ["Period", "Temperature", "Wind", "Forecast"]


@contextmanager
def open_fetcher(ctx: typer.Context) -> Iterator[CachedFetcher]:
    """Yield a :class:`~nwscache.fetch.CachedFetcher` for the resolved config.

    The cache is left out when it is disabled (``--no-cache`` or
    ``cache.enabled = false``) or when there is no home directory.
    """
    from nwscache.cache import ResponseCache
    from nwscache.client import SyncClient
    from nwscache.config import is_discard, resolve_cache_root, resolve_config
    from nwscache.fetch import CachedFetcher
    from nwscache.output import debug

    obj = ctx.obj or {}
    config = obj.get("config") or resolve_config()

    cache = None
    if config.cache.enabled:
        root = obj.get("cache_root") or resolve_cache_root()
        if is_discard(root):
            debug("No home directory; caching disabled.")
        else:
            cache = ResponseCache(root)

    with SyncClient(config.request) as client:
        yield CachedFetcher(client, cache)


def fetch_command(
    ctx: typer.Context,
    url: str = typer.Argument(help="Full API URL, e.g. https://api.weather.gov/points/39.7456,-97.0892"),
    raw: bool = typer.Option(False, "--raw", help="Print the body exactly as received."),
) -> None:
    """Fetch a document, from the cache when it is still fresh.

    Example::

        nwscache fetch https://api.weather.gov/points/39.7456,-97.0892
        nwscache --json fetch https://api.weather.gov/gridpoints/TOP/32,81/forecast
    """
    with open_fetcher(ctx) as fetcher:
        body = fetcher.fetch(url)
    if raw:
        print_data(body)
    else:
        format_response(body)


def forecast_command(
    ctx: typer.Context,
    latlong: str = typer.Argument(help="Location as LAT,LON, e.g. 39.7456,-97.0892"),
    hourly: bool = typer.Option(False, "--hourly", help="Use the hourly forecast."),
) -> None:
    """Show the forecast for a location.

    Resolves the points document for LAT,LON, then follows its forecast
    link. Both documents are cached independently.
    """
    from nwscache.nws import (
        describe_period,
        forecast_office,
        forecast_periods,
        get_city,
        get_key,
        get_object,
        get_state,
        load_forecast,
        parse_latlong,
        points_url,
    )

    parse_latlong(latlong)
    with open_fetcher(ctx) as fetcher:
        points = fetcher.fetch_json(points_url(latlong))
        properties = get_object(points, "properties")
        link = get_key(properties, "forecastHourly" if hourly else "forecast")
        if not link:
            raise NwscacheError(f"No forecast available for {latlong}")
        forecast = load_forecast(fetcher, link)

    city, state = get_city(properties), get_state(properties)
    place = ", ".join(part for part in (city, state) if part) or latlong
    office = forecast_office(properties)
    title = f"{place} ({office})" if office else place
    info(f"Forecast for {title}")
    rows = [describe_period(period) for period in forecast_periods(forecast)]
    print_table(_FORECAST_HEADERS, rows, title=title)
