"""Tests for the NWS document helpers."""

from __future__ import annotations

from typing import Any

import pytest

from nwscache.exceptions import InvalidUsageError
from nwscache.fetch import CachedFetcher
from nwscache.models import FetchedResponse
from nwscache.nws import (
    describe_period,
    forecast_office,
    forecast_periods,
    get_city,
    get_features_key,
    get_features_properties_key,
    get_features_properties_value_key,
    get_indexed_object,
    get_key,
    get_object,
    get_properties_key,
    get_properties_value_key,
    get_state,
    load_forecast,
    parse_latlong,
    points_url,
)

POINTS: dict[str, Any] = {
    "properties": {
        "gridId": "TOP",
        "gridX": 32,
        "gridY": 81,
        "forecast": "https://api.weather.gov/gridpoints/TOP/32,81/forecast",
        "relativeLocation": {"properties": {"city": "Linn", "state": "KS"}},
        "elevation": {"unitCode": "wmoUnit:m", "value": 441.96},
    }
}

STATIONS: dict[str, Any] = {
    "features": [
        {
            "id": "https://api.weather.gov/stations/KMYZ",
            "properties": {
                "stationIdentifier": "KMYZ",
                "elevation": {"unitCode": "wmoUnit:m", "value": 392.0},
            },
        }
    ]
}


class TestLatLong:
    def test_parse(self) -> None:
        assert parse_latlong("39.7456,-97.0892") == (39.7456, -97.0892)

    def test_whitespace_tolerated(self) -> None:
        assert parse_latlong(" 39.7 , -97.0 ") == (39.7, -97.0)

    @pytest.mark.parametrize("text", ["", "39.7", "a,b", "1,2,3", "91,0", "0,181"])
    def test_invalid(self, text: str) -> None:
        with pytest.raises(InvalidUsageError):
            parse_latlong(text)

    def test_points_url(self) -> None:
        assert points_url("39.7456,-97.0892") == "https://api.weather.gov/points/39.7456,-97.0892"

    def test_points_url_empty(self) -> None:
        assert points_url("") == ""


class TestNavigation:
    def test_get_object(self) -> None:
        assert get_object(POINTS, "properties") is POINTS["properties"]
        assert get_object(POINTS, "missing") is None
        assert get_object(None, "properties") is None
        assert get_object([1, 2], "properties") is None

    def test_get_indexed_object(self) -> None:
        assert get_indexed_object(STATIONS, "features", 0) is STATIONS["features"][0]
        assert get_indexed_object(STATIONS, "features", 5) is None
        assert get_indexed_object(POINTS, "properties", 0) is None

    def test_get_key(self) -> None:
        props = POINTS["properties"]
        assert get_key(props, "gridId") == "TOP"
        assert get_key(props, "gridX") == "32"
        assert get_key(props, "relativeLocation") == ""
        assert get_key(props, "missing") == ""
        assert get_key({"flag": True}, "flag") == ""

    def test_properties_helpers(self) -> None:
        assert get_properties_key(POINTS, "gridId") == "TOP"
        assert get_properties_value_key(POINTS, "elevation", "value") == "441.96"
        assert get_properties_key({}, "gridId") == ""

    def test_features_helpers(self) -> None:
        assert get_features_key(STATIONS, 0, "id") == "https://api.weather.gov/stations/KMYZ"
        assert get_features_properties_key(STATIONS, 0, "stationIdentifier") == "KMYZ"
        assert get_features_properties_value_key(STATIONS, 0, "elevation", "value") == "392.0"
        assert get_features_properties_value_key(STATIONS, 1, "elevation", "value") == ""


class TestLocation:
    def test_city_and_state(self) -> None:
        props = POINTS["properties"]
        assert get_city(props) == "Linn"
        assert get_state(props) == "KS"

    def test_missing_relative_location(self) -> None:
        assert get_city({}) == ""

    def test_forecast_office(self) -> None:
        assert forecast_office(POINTS["properties"]) == "TOP 32,81"
        assert forecast_office({}) is None


class TestForecast:
    FORECAST: dict[str, Any] = {
        "properties": {
            "periods": [
                {
                    "name": "Tonight",
                    "temperature": 38,
                    "temperatureUnit": "F",
                    "windSpeed": "5 mph",
                    "windDirection": "S",
                    "shortForecast": "Mostly Clear",
                },
                "not a period",
                {"name": "Saturday"},
            ]
        }
    }

    def test_periods(self) -> None:
        periods = forecast_periods(self.FORECAST)
        assert [p["name"] for p in periods] == ["Tonight", "Saturday"]

    def test_periods_missing(self) -> None:
        assert forecast_periods({"properties": {}}) == []
        assert forecast_periods(None) == []

    def test_describe_period(self) -> None:
        period = forecast_periods(self.FORECAST)[0]
        assert describe_period(period) == ["Tonight", "38°F", "5 mph S", "Mostly Clear"]

    def test_describe_sparse_period(self) -> None:
        assert describe_period({"name": "Saturday"}) == ["Saturday", "", "", ""]

    def test_load_forecast(self, quiet_output) -> None:
        class Client:
            def fetch(self, url: str) -> FetchedResponse:
                return FetchedResponse(url=url, body='{"properties": {"periods": []}}')

        forecast = load_forecast(CachedFetcher(Client()), "https://example/forecast")
        assert forecast == {"properties": {"periods": []}}
