"""Tests for the OpenWeather client."""

import asyncio

import httpx
import pytest

from app.core.errors import ConfigError, HttpError
from app.core.weather_api import OpenWeatherClient


def test_valka_response_is_normalized(weather_api):
    """The documented Valka response maps onto the display record."""
    record = asyncio.run(weather_api.client().get_weather(57.5389, 25.425727))

    assert record.model_dump() == {
        "place": "Valka",
        "latitude": "57.5389",
        "longitude": "25.4257",
        "temperature_c": "18.46",
        "pressure": 1012,
        "humidity": 60,
        "description": "clear sky",
    }


def test_request_uses_metric_units_and_key(weather_api):
    """Coordinates, key and units travel as query parameters."""
    asyncio.run(weather_api.client(api_key="abc123").get_weather(1.25, 2.5))

    request = weather_api.requests[0]
    assert request.method == "GET"
    assert request.url.path == "/data/2.5/weather"
    assert request.url.params["lat"] == "1.25"
    assert request.url.params["lon"] == "2.5"
    assert request.url.params["appid"] == "abc123"
    assert request.url.params["units"] == "metric"


def test_missing_name_falls_back(weather_api):
    """A payload without a name gets the default place."""
    weather_api.respond(
        json={
            "main": {"temp": -3.1, "pressure": 1030, "humidity": 90},
            "weather": [{"description": "snow"}],
        }
    )

    record = asyncio.run(weather_api.client().get_weather(0, 0))

    assert record.place == "Unknown Location"
    assert record.temperature_c == "-3.10"


@pytest.mark.parametrize("api_key", [None, "", "   ", "Your API key", "YOUR_ACTUAL_API_KEY_HERE"])
def test_unusable_key_makes_no_request(weather_api, api_key):
    """Missing or placeholder keys are refused before any network call."""
    client = OpenWeatherClient(
        api_key=api_key,
        base_url="https://weather.test/data/2.5",
        transport=httpx.MockTransport(weather_api.handler),
    )
    # None falls back to settings, which may carry a real key
    client.api_key = api_key

    with pytest.raises(ConfigError):
        asyncio.run(client.get_weather(1, 2))

    assert weather_api.requests == []


def test_error_status_keeps_body(weather_api):
    """A 401 surfaces as HttpError with the plain-text body."""
    weather_api.respond(status_code=401, text="Invalid API key")

    with pytest.raises(HttpError) as exc_info:
        asyncio.run(weather_api.client().get_weather(1, 2))

    assert exc_info.value.status_code == 401
    assert exc_info.value.body == "Invalid API key"
    assert "401" in str(exc_info.value)


@pytest.mark.parametrize(
    "body",
    [
        {"name": "Nowhere"},
        {"main": {"pressure": 1000, "humidity": 10}, "weather": [{"description": "x"}]},
        {"main": {"temp": 1, "pressure": 1000, "humidity": 10}, "weather": []},
    ],
)
def test_malformed_success_body(weather_api, body):
    """Missing temperature or description is treated like an HTTP failure."""
    weather_api.respond(json=body)

    with pytest.raises(HttpError):
        asyncio.run(weather_api.client().get_weather(1, 2))


def test_non_json_body(weather_api):
    weather_api.respond(text="<html>oops</html>")

    with pytest.raises(HttpError):
        asyncio.run(weather_api.client().get_weather(1, 2))


def test_transport_failure():
    """Connection problems become HttpError without a status."""

    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    client = OpenWeatherClient(
        api_key="k", base_url="https://weather.test", transport=httpx.MockTransport(handler)
    )

    with pytest.raises(HttpError) as exc_info:
        asyncio.run(client.get_weather(1, 2))

    assert exc_info.value.status_code is None
