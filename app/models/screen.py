"""Pydantic models describing what the screen renders."""

from pydantic import BaseModel
from typing import List, Optional

from app.models.location import Coordinates
from app.models.weather import WeatherRecord


class MapRegion(BaseModel):
    """Visible map area: a center point plus a fixed span in degrees."""

    latitude: float
    longitude: float
    latitude_delta: float
    longitude_delta: float


class Alert(BaseModel):
    """A user-visible alert waiting to be shown."""

    title: str
    message: str


class ScreenState(BaseModel):
    """Snapshot of a screen session for the UI"""

    session_id: str
    coordinates: Coordinates
    region: MapRegion
    weather: Optional[WeatherRecord] = None
    dialog_visible: bool
    location_error: Optional[str] = None
    tracking: bool
    alerts: List[Alert] = []


class AlertsResponse(BaseModel):
    """Alerts drained from the session"""

    alerts: List[Alert]
