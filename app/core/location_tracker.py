"""Continuous location tracking with a single owned subscription."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from app.core.errors import PermissionDenied, TrackingFailure
from app.core.location_provider import (
    LocationProvider,
    PositionCallback,
    Subscription,
)
from app.models.location import PermissionStatus, WatchOptions

logger = logging.getLogger(__name__)

PERMISSION_DENIED_MESSAGE = "Permission to access location was denied"


class LocationTracker:
    """Owns at most one position watch on a LocationProvider"""

    def __init__(
        self,
        provider: LocationProvider,
        on_position: PositionCallback,
        options: Optional[WatchOptions] = None,
    ):
        self.provider = provider
        self.on_position = on_position
        self.options = options or WatchOptions()
        self._subscription: Optional[Subscription] = None

    @property
    def active(self) -> bool:
        return self._subscription is not None

    async def start(self):
        """
        Ask for permission and start watching the position.

        Any existing watch is released first, so at most one is ever live.
        Raises PermissionDenied without subscribing when permission is refused,
        and TrackingFailure when the platform fails during setup.
        """
        try:
            status = await self.provider.request_permission()
        except Exception as e:
            raise TrackingFailure(str(e)) from e

        if status != PermissionStatus.granted:
            logger.warning(f"Location permission not granted ({status.value})")
            raise PermissionDenied(PERMISSION_DENIED_MESSAGE)

        self.stop()

        try:
            self._subscription = await self.provider.subscribe(
                self.options, self.on_position
            )
        except Exception as e:
            logger.error(f"Failed to start position watch: {e}")
            raise TrackingFailure(str(e)) from e

    def stop(self):
        """Release the active watch, if any. Safe to call repeatedly."""
        subscription, self._subscription = self._subscription, None
        if subscription is not None:
            subscription.release()

    @asynccontextmanager
    async def watching(self) -> AsyncIterator["LocationTracker"]:
        """Track for the duration of the block; the watch is always released on exit."""
        await self.start()
        try:
            yield self
        finally:
            self.stop()
