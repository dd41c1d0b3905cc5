"""Services module for NearbyWeather."""
import logging
from nearbyweather.services.cache_store import WeatherInformationStore
from nearbyweather.services.refresh_coordinator import (
    RefreshCoordinator,
    RefreshError,
    RefreshTimeoutError,
    RefreshResult
)
from nearbyweather.services.lifecycle_guard import AppLifecycle, LifecycleGuard

logger = logging.getLogger(__name__)

__all__ = [
    "WeatherInformationStore",
    "RefreshCoordinator",
    "RefreshError",
    "RefreshTimeoutError",
    "RefreshResult",
    "AppLifecycle",
    "LifecycleGuard"
]
