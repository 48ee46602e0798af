"""Read-only helpers for National Weather Service API documents.

The NWS API (``https://api.weather.gov``) answers with GeoJSON. A *points*
document maps a ``lat,lon`` pair to a forecast office and carries links to
the forecast documents; forecast, station and alert documents are feature
collections. These helpers navigate such documents and never raise for a
missing key: absent values come back as ``None`` (objects) or ``""``
(scalars), so callers can chain lookups freely.

Example::

    points = fetcher.fetch_json(points_url("39.7456,-97.0892"))
    props = get_object(points, "properties")
    get_city(props), get_state(props)            # ("Linn", "KS")
    forecast = load_forecast(fetcher, get_key(props, "forecast"))
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

from nwscache.exceptions import InvalidUsageError
from nwscache.output import debug

if TYPE_CHECKING:
    from nwscache.fetch import CachedFetcher

API_BASE_URL = "https://api.weather.gov"


def parse_latlong(text: str) -> tuple[float, float]:
    """Parse ``"LAT,LON"`` into floats.

    Raises:
        InvalidUsageError: If *text* is not two comma-separated numbers in
            range.
    """
    parts = [p.strip() for p in text.split(",")]
    if len(parts) != 2:
        raise InvalidUsageError(f"Expected LAT,LON but got: {text!r}")
    try:
        lat, lon = float(parts[0]), float(parts[1])
    except ValueError:
        raise InvalidUsageError(f"Expected LAT,LON but got: {text!r}") from None
    if not (-90 <= lat <= 90) or not (-180 <= lon <= 180):
        raise InvalidUsageError(f"Coordinates out of range: {text!r}")
    return lat, lon


def points_url(latlong: str) -> str:
    """Return the points URL for *latlong*, or ``""`` for an empty string.

    The API only accepts up to four decimal places and redirects otherwise,
    so the text is passed through as given; normalising it would also
    change the cache key.
    """
    if not latlong:
        return ""
    return f"{API_BASE_URL}/points/{latlong}"


# --- Navigation ---


def get_object(doc: Any, key: str) -> Any:
    """``doc[key]`` for a mapping, else ``None``."""
    if isinstance(doc, dict):
        return doc.get(key)
    return None


def get_indexed_object(doc: Any, key: str, index: int) -> Any:
    """``doc[key][index]`` for a mapping holding a list, else ``None``."""
    items = get_object(doc, key)
    if isinstance(items, list) and -len(items) <= index < len(items):
        return items[index]
    return None


def get_key(doc: Any, key: str) -> str:
    """Scalar ``doc[key]`` as text.

    Strings are returned as-is and numbers formatted; anything else
    (missing, null, bool, nested object) gives ``""``.
    """
    value = get_object(doc, key)
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


def get_properties_key(doc: Any, key: str) -> str:
    """``doc["properties"][key]`` as text."""
    properties = get_object(doc, "properties")
    if properties is None:
        debug("get_properties_key: properties is null")
    return get_key(properties, key)


def get_properties_value_key(doc: Any, sub: str, key: str) -> str:
    """``doc["properties"][sub][key]`` as text.

    NWS wraps measured quantities as ``{"unitCode": ..., "value": ...}``, so
    ``get_properties_value_key(obs, "temperature", "value")`` reads one.
    """
    properties = get_object(doc, "properties")
    if properties is None:
        debug("get_properties_value_key: properties is null")
    return get_key(get_object(properties, sub), key)


def get_features_properties(doc: Any, index: int) -> Any:
    """``doc["features"][index]["properties"]``, or ``None``."""
    return get_object(get_indexed_object(doc, "features", index), "properties")


def get_features_key(doc: Any, index: int, key: str) -> str:
    """``doc["features"][index][key]`` as text (e.g. the feature ``id``)."""
    return get_key(get_indexed_object(doc, "features", index), key)


def get_features_properties_key(doc: Any, index: int, key: str) -> str:
    """``doc["features"][index]["properties"][key]`` as text."""
    return get_key(get_features_properties(doc, index), key)


def get_features_properties_value_key(doc: Any, index: int, value: str, key: str) -> str:
    """``doc["features"][index]["properties"][value][key]`` as text."""
    nested = get_object(get_features_properties(doc, index), value)
    if nested is None:
        debug(f'get_features_properties_value_key: "{value}" is null')
    return get_key(nested, key)


# --- Points documents ---


def get_location(properties: Any, key: str) -> str:
    """Field of ``properties["relativeLocation"]["properties"]`` as text."""
    relative = get_object(properties, "relativeLocation")
    if relative is None:
        debug("failed to get relativeLocation.")
        return ""
    return get_key(get_object(relative, "properties"), key)


def get_city(properties: Any) -> str:
    return get_location(properties, "city")


def get_state(properties: Any) -> str:
    return get_location(properties, "state")


# --- Forecast documents ---


def load_forecast(fetcher: CachedFetcher, url: str) -> Any:
    """Fetch and decode a forecast document through the cache.

    Raises:
        ResponseParseError: If the body is not valid JSON.
    """
    return fetcher.fetch_json(url)


def forecast_periods(forecast: Any) -> list[dict[str, Any]]:
    """The ``properties.periods`` list of a forecast document (``[]`` if absent)."""
    periods = get_object(get_object(forecast, "properties"), "periods")
    if not isinstance(periods, list):
        return []
    return [p for p in periods if isinstance(p, dict)]


def describe_period(period: dict[str, Any]) -> list[str]:
    """Flatten one forecast period into table cells."""
    temperature = get_key(period, "temperature")
    unit = get_key(period, "temperatureUnit")
    wind = " ".join(
        part for part in (get_key(period, "windSpeed"), get_key(period, "windDirection")) if part
    )
    return [
        get_key(period, "name"),
        f"{temperature}°{unit}" if temperature else "",
        wind,
        get_key(period, "shortForecast"),
    ]


def forecast_office(properties: Any) -> Optional[str]:
    """``"<gridId> <gridX>,<gridY>"`` for a points document, or ``None``."""
    grid_id = get_key(properties, "gridId")
    if not grid_id:
        return None
    return f"{grid_id} {get_key(properties, 'gridX')},{get_key(properties, 'gridY')}"
