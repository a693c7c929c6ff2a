"""State of one running map screen: position, weather, dialog and error banner."""

import asyncio
import logging
from collections import deque
from datetime import datetime
from typing import Deque, List, Optional, Set

from app.config import settings
from app.core.errors import ConfigError, HttpError, PermissionDenied, TrackingFailure
from app.core.location_provider import LocationProvider
from app.core.location_tracker import LocationTracker
from app.core.weather_api import OpenWeatherClient
from app.models.location import Coordinates, WatchOptions
from app.models.screen import Alert, MapRegion, ScreenState
from app.models.weather import WeatherRecord

logger = logging.getLogger(__name__)

MAX_PENDING_ALERTS = 20


def default_watch_options() -> WatchOptions:
    """Watch options from settings"""
    return WatchOptions(
        accuracy=settings.location_accuracy,
        time_interval_ms=settings.location_time_interval_ms,
        distance_interval_m=settings.location_distance_interval_m,
    )


class ScreenSession:
    """
    One map screen.

    All mutation happens on the event loop that drives the session. Position
    updates replace the coordinates and schedule a weather fetch; every fetch
    draws a sequence number and only the most recently issued one may replace
    the weather record.
    """

    def __init__(
        self,
        session_id: str,
        provider: LocationProvider,
        weather_client: OpenWeatherClient,
        watch_options: Optional[WatchOptions] = None,
    ):
        self.session_id = session_id
        self.provider = provider
        self.weather_client = weather_client
        self.created_at = datetime.now()
        self.last_accessed = datetime.now()

        self.coordinates = Coordinates(
            latitude=settings.default_latitude, longitude=settings.default_longitude
        )
        self.weather: Optional[WeatherRecord] = None
        self.dialog_visible = False
        self.location_error: Optional[str] = None
        self._alerts: Deque[Alert] = deque(maxlen=MAX_PENDING_ALERTS)

        self._request_seq = 0
        self._pending: Set[asyncio.Task] = set()
        self._closed = False

        self.tracker = LocationTracker(
            provider, self._on_position, watch_options or default_watch_options()
        )

    def touch(self):
        """Update last accessed time"""
        self.last_accessed = datetime.now()

    @property
    def age_minutes(self) -> float:
        return (datetime.now() - self.created_at).total_seconds() / 60

    @property
    def idle_minutes(self) -> float:
        return (datetime.now() - self.last_accessed).total_seconds() / 60

    @property
    def closed(self) -> bool:
        return self._closed

    # --- Location ---

    async def start_tracking(self):
        """(Re)start the position watch and update the error banner accordingly."""
        try:
            await self.tracker.start()
        except PermissionDenied as e:
            self.location_error = str(e)
            return
        except TrackingFailure as e:
            self.location_error = f"Error tracking location: {e}"
            self.alert("Location Error", str(e))
            return

        # A watch is live again, so an earlier failure no longer applies
        self.location_error = None
        logger.info(f"Session {self.session_id} is tracking location")

    def stop_tracking(self):
        self.tracker.stop()

    def _on_position(self, position: Coordinates):
        self.coordinates = position
        if self._closed:
            return
        task = asyncio.create_task(
            self.fetch_weather(position.latitude, position.longitude)
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    # --- Weather ---

    async def fetch_weather(self, lat: float, lon: float) -> bool:
        """
        Fetch weather for (lat, lon) and make it the current record.

        Returns True when the record was replaced. Configuration problems raise
        an alert; remote failures are only logged and keep the previous record.
        Results of fetches superseded by a newer one are dropped.
        """
        self._request_seq += 1
        seq = self._request_seq

        try:
            record = await self.weather_client.get_weather(lat, lon)
        except ConfigError as e:
            self.alert("API Error", str(e))
            return False
        except HttpError as e:
            logger.error(f"Weather fetch error: {e}")
            return False

        if seq != self._request_seq:
            logger.info(f"Discarding stale weather result #{seq} (latest #{self._request_seq})")
            return False

        self.weather = record
        return True

    # --- Presentation ---

    async def show_weather(self) -> bool:
        """The "Show Weather" action: opens the dialog and fetches for the current position."""
        self.dialog_visible = True
        return await self.fetch_weather(
            self.coordinates.latitude, self.coordinates.longitude
        )

    def hide_dialog(self):
        self.dialog_visible = False

    @property
    def region(self) -> MapRegion:
        return MapRegion(
            latitude=self.coordinates.latitude,
            longitude=self.coordinates.longitude,
            latitude_delta=settings.map_latitude_delta,
            longitude_delta=settings.map_longitude_delta,
        )

    def alert(self, title: str, message: str):
        """Queue a user-visible alert. A repeat of the latest queued alert is dropped."""
        alert = Alert(title=title, message=message)
        if self._alerts and self._alerts[-1] == alert:
            return
        logger.warning(f"Alert for session {self.session_id}: {title}: {message}")
        self._alerts.append(alert)

    def pop_alerts(self) -> List[Alert]:
        alerts = list(self._alerts)
        self._alerts.clear()
        return alerts

    def state(self) -> ScreenState:
        """Snapshot of everything the screen renders."""
        return ScreenState(
            session_id=self.session_id,
            coordinates=self.coordinates,
            region=self.region,
            weather=self.weather,
            dialog_visible=self.dialog_visible,
            location_error=self.location_error,
            tracking=self.tracker.active,
            alerts=self.pop_alerts(),
        )

    # --- Teardown ---

    async def close(self):
        """Unmount: release the position watch and cancel in-flight fetches."""
        if self._closed:
            return
        self._closed = True
        self.tracker.stop()

        for task in list(self._pending):
            task.cancel()
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
        logger.info(f"Session {self.session_id} closed")
