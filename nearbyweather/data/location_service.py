"""Interface to the host's location and permission services."""
import logging
from typing import Optional

from nearbyweather.core.config import Settings
from nearbyweather.core.models_shared import Coordinate

logger = logging.getLogger(__name__)

class AbstractLocationService:
    """Where the user is and whether we are allowed to know."""

    def current_location(self) -> Optional[Coordinate]:
        raise NotImplementedError("Subclasses must implement current_location()")

    def location_permissions_granted(self) -> bool:
        raise NotImplementedError("Subclasses must implement location_permissions_granted()")

class StaticLocationService(AbstractLocationService):
    """Location service backed by fixed values, for hosts without positioning."""

    def __init__(self, location: Optional[Coordinate] = None, permissions_granted: bool = True):
        self._location = location
        self._permissions_granted = permissions_granted

    @classmethod
    def from_settings(cls, settings: Settings) -> "StaticLocationService":
        location = None
        if settings.USER_LATITUDE is not None and settings.USER_LONGITUDE is not None:
            location = Coordinate(latitude=settings.USER_LATITUDE, longitude=settings.USER_LONGITUDE)
        return cls(location=location, permissions_granted=settings.LOCATION_PERMISSION_GRANTED)

    def current_location(self) -> Optional[Coordinate]:
        return self._location

    def location_permissions_granted(self) -> bool:
        return self._permissions_granted

    def update(self, location: Optional[Coordinate] = None, permissions_granted: Optional[bool] = None) -> None:
        if location is not None:
            self._location = location
        if permissions_granted is not None:
            if permissions_granted != self._permissions_granted:
                logger.info(f"Location permission changed to {'granted' if permissions_granted else 'denied'}")
            self._permissions_granted = permissions_granted
