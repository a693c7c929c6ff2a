"""Client for fetching current weather by coordinates from OpenWeather."""

import httpx
from typing import Optional, Iterable
from pydantic import ValidationError
from app.config import settings
from app.core.errors import ConfigError, HttpError
from app.models.weather import OpenWeatherPayload, WeatherRecord
import logging

logger = logging.getLogger(__name__)


class OpenWeatherClient:
    """Fetches current conditions for a coordinate pair and normalizes them for display"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        placeholder_keys: Optional[Iterable[str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Settings are used for anything not passed in."""
        self.api_key = api_key if api_key is not None else settings.openweather_api_key
        self.base_url = (base_url or settings.openweather_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.openweather_timeout
        self.placeholder_keys = set(
            placeholder_keys
            if placeholder_keys is not None
            else settings.placeholder_api_keys
        )
        self._transport = transport

    @property
    def has_valid_key(self) -> bool:
        """False when the key is missing, blank, or a placeholder."""
        if not self.api_key or not self.api_key.strip():
            return False
        return self.api_key not in self.placeholder_keys

    async def get_weather(self, lat: float, lon: float) -> WeatherRecord:
        """
        Get the current weather at (lat, lon).

        Raises ConfigError before any network call when the key is unusable,
        and HttpError for error statuses, transport failures and malformed bodies.
        """
        if not self.has_valid_key:
            raise ConfigError("Please add a valid OpenWeatherMap API key")

        params = {
            "lat": lat,
            "lon": lon,
            "appid": self.api_key,
            "units": "metric",
        }

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.get(
                    f"{self.base_url}/weather", params=params, timeout=self.timeout
                )
        except httpx.HTTPError as e:
            raise HttpError(f"Weather request failed: {e}") from e

        if not response.is_success:
            raise HttpError(
                f"HTTP error! status: {response.status_code}, {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            payload = OpenWeatherPayload.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise HttpError(
                f"Unable to retrieve weather data (status {response.status_code}): {e}",
                status_code=response.status_code,
                body=response.text,
            ) from e

        record = WeatherRecord.from_payload(payload, lat, lon)
        logger.info(f"Weather for {record.latitude},{record.longitude}: {record.place}")
        return record
