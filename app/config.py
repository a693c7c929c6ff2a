"""Application configuration management using Pydantic's BaseSettings."""

from pydantic_settings import BaseSettings
from typing import Optional, Tuple

from app.models.location import Accuracy


class Settings(BaseSettings):
    """Defines all configuration settings for the API, loaded from .env file."""

    # API Keys
    openweather_api_key: Optional[str] = None

    # App settings
    debug: bool = True
    log_level: str = "INFO"

    # OpenWeather settings
    openweather_base_url: str = "https://api.openweathermap.org/data/2.5"
    openweather_timeout: float = 10.0
    placeholder_api_keys: Tuple[str, ...] = (
        "Your API key",
        "YOUR_ACTUAL_API_KEY_HERE",
    )

    # Map settings (initial center is Valka, Latvia)
    default_latitude: float = 57.538900
    default_longitude: float = 25.425727
    map_latitude_delta: float = 0.0922
    map_longitude_delta: float = 0.0421

    # Location watch settings
    location_accuracy: Accuracy = Accuracy.high
    location_time_interval_ms: int = 5000
    location_distance_interval_m: float = 10.0

    # Screen session lifetime
    session_timeout_minutes: int = 60
    idle_timeout_minutes: int = 15

    class Config:
        """Pydantic model configuration."""

        env_file = ".env"


settings = Settings()
