"""Exceptions raised by the location and weather layers."""

from typing import Optional


class WeatherMapError(Exception):
    """Base class for all application errors."""


class PermissionDenied(WeatherMapError):
    """Foreground location permission was refused."""


class TrackingFailure(WeatherMapError):
    """The position subscription could not be established."""


class ConfigError(WeatherMapError):
    """The weather API key is missing or still a placeholder."""


class HttpError(WeatherMapError):
    """The weather API answered with an error, an unusable body, or not at all."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
