"""Pydantic models for weather data, both the raw OpenWeather payload and the display record."""

from pydantic import BaseModel, Field
from typing import List, Optional

UNKNOWN_PLACE = "Unknown Location"


class MainBlock(BaseModel):
    """The `main` block of an OpenWeather current-weather payload."""

    temp: float
    pressure: int
    humidity: int


class WeatherCondition(BaseModel):
    """One entry of the `weather` array."""

    description: str


class OpenWeatherPayload(BaseModel):
    """Subset of the OpenWeather `/weather` response we rely on."""

    name: Optional[str] = None
    main: MainBlock
    weather: List[WeatherCondition] = Field(min_length=1)


class WeatherRecord(BaseModel):
    """Weather details as shown in the dialog. Coordinates and temperature are pre-formatted."""

    place: str
    latitude: str
    longitude: str
    temperature_c: str
    pressure: int
    humidity: int
    description: str

    @classmethod
    def from_payload(
        cls, payload: OpenWeatherPayload, lat: float, lon: float
    ) -> "WeatherRecord":
        """Builds a display record for the requested coordinates."""
        return cls(
            place=payload.name or UNKNOWN_PLACE,
            latitude=f"{lat:.4f}",
            longitude=f"{lon:.4f}",
            temperature_c=f"{payload.main.temp:.2f}",
            pressure=payload.main.pressure,
            humidity=payload.main.humidity,
            description=payload.weather[0].description,
        )
