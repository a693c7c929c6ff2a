"""Location service seen by the tracker: permission prompt plus a filtered position watch."""

import math
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Callable, List, Optional

from app.models.location import (
    Coordinates,
    LocationFix,
    PermissionStatus,
    WatchOptions,
)

logger = logging.getLogger(__name__)

EARTH_RADIUS_M = 6_371_000.0

PositionCallback = Callable[[Coordinates], None]


def distance_m(a: Coordinates, b: Coordinates) -> float:
    """Great-circle distance between two points in metres (haversine)."""
    lat1, lat2 = math.radians(a.latitude), math.radians(b.latitude)
    dlat = lat2 - lat1
    dlon = math.radians(b.longitude - a.longitude)
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(math.sqrt(h))


class Subscription(ABC):
    """Handle to an active position watch."""

    @property
    @abstractmethod
    def active(self) -> bool:
        """True until release() is called."""

    @abstractmethod
    def release(self) -> None:
        """Stop position updates."""


class LocationProvider(ABC):
    """Platform location service"""

    @abstractmethod
    async def request_permission(self) -> PermissionStatus:
        """Ask for foreground location permission."""

    @abstractmethod
    async def subscribe(
        self, options: WatchOptions, callback: PositionCallback
    ) -> Subscription:
        """Start watching the position; callback receives each delivered fix."""


class DeviceSubscription(Subscription):
    """Watch on fixes reported by a device, throttled by its WatchOptions."""

    def __init__(
        self,
        provider: "DeviceLocationProvider",
        options: WatchOptions,
        callback: PositionCallback,
    ):
        self._provider = provider
        self.options = options
        self.callback = callback
        self._active = True
        self._last_position: Optional[Coordinates] = None
        self._last_time: Optional[datetime] = None

    @property
    def active(self) -> bool:
        return self._active

    def release(self) -> None:
        if not self._active:
            return
        self._active = False
        self._provider._detach(self)
        logger.info("Position watch released")

    def should_deliver(self, position: Coordinates, at: datetime) -> bool:
        """Either threshold (elapsed time or distance moved) lets a fix through."""
        if self._last_position is None or self._last_time is None:
            return True

        elapsed_ms = (at - self._last_time).total_seconds() * 1000
        if elapsed_ms >= self.options.time_interval_ms:
            return True

        return distance_m(self._last_position, position) >= self.options.distance_interval_m

    def deliver(self, position: Coordinates, at: datetime) -> bool:
        if not self._active or not self.should_deliver(position, at):
            return False
        self._last_position = position
        self._last_time = at
        self.callback(position)
        return True


class DeviceLocationProvider(LocationProvider):
    """
    Location service backed by a remote device.

    The device client reports its permission decision and raw position fixes
    over HTTP; this provider replays them to subscribers the way a platform
    location service would.
    """

    def __init__(self, permission: PermissionStatus = PermissionStatus.undetermined):
        self.permission = permission
        self._subscriptions: List[DeviceSubscription] = []

    def set_permission(self, granted: bool) -> None:
        """Record the answer the device gave to the permission prompt."""
        self.permission = (
            PermissionStatus.granted if granted else PermissionStatus.denied
        )

    async def request_permission(self) -> PermissionStatus:
        return self.permission

    async def subscribe(
        self, options: WatchOptions, callback: PositionCallback
    ) -> Subscription:
        if self.permission != PermissionStatus.granted:
            raise RuntimeError("Location permission has not been granted")

        subscription = DeviceSubscription(self, options, callback)
        self._subscriptions.append(subscription)
        logger.info(
            f"Position watch started (accuracy={options.accuracy.value}, "
            f"interval={options.time_interval_ms}ms, distance={options.distance_interval_m}m)"
        )
        return subscription

    @property
    def active_subscriptions(self) -> int:
        return len(self._subscriptions)

    def report_fix(self, fix: LocationFix) -> bool:
        """Offer a fix to every live watch. Returns True if any watch delivered it."""
        at = fix.timestamp or datetime.now(timezone.utc)
        if at.tzinfo is None:
            at = at.replace(tzinfo=timezone.utc)

        if not self._subscriptions:
            logger.debug("Dropping fix reported with no active watch")
            return False

        delivered = False
        for subscription in list(self._subscriptions):
            if subscription.deliver(fix.coordinates, at):
                delivered = True
        return delivered

    def _detach(self, subscription: DeviceSubscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)
