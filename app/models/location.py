"""Pydantic models for device location: coordinates, watch options and API requests."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Coordinates(BaseModel):
    """A point on the map."""

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class Accuracy(str, Enum):
    """Requested accuracy of the position watch."""

    high = "high"
    balanced = "balanced"
    low = "low"


class PermissionStatus(str, Enum):
    """Outcome of a foreground location permission request."""

    granted = "granted"
    denied = "denied"
    undetermined = "undetermined"


class WatchOptions(BaseModel):
    """Position watch configuration. An update is delivered when either threshold is met."""

    accuracy: Accuracy = Accuracy.high
    time_interval_ms: int = Field(default=5000, ge=0)
    distance_interval_m: float = Field(default=10.0, ge=0)


class LocationFix(BaseModel):
    """A position reported by the device."""

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    timestamp: Optional[datetime] = None

    @property
    def coordinates(self) -> Coordinates:
        return Coordinates(latitude=self.latitude, longitude=self.longitude)


class PermissionRequest(BaseModel):
    """The device's answer to the foreground permission prompt."""

    granted: bool


class FixAcceptedResponse(BaseModel):
    """Whether a reported fix passed the watch filter and reached the screen."""

    delivered: bool
    coordinates: Coordinates
