"""Core module for NearbyWeather."""
from logging import getLogger
from nearbyweather.core.config import settings, Settings
from nearbyweather.core.utils import setup_logging
from nearbyweather.core.preferences import (
    ConfigurationError,
    AmountOfResults,
    TemperatureUnit,
    DistanceSpeedUnit
)
from nearbyweather.core.models_shared import (
    Coordinate,
    WeatherStation,
    WeatherObservation,
    ErrorType,
    ErrorData,
    WeatherDataContainer,
    BulkWeatherDataContainer,
    StoredContents,
    DEFAULT_BOOKMARKED_LOCATION
)

logger = getLogger(__name__)

__all__ = [
    "settings",
    "Settings",
    "setup_logging",
    # Preferences
    "ConfigurationError",
    "AmountOfResults",
    "TemperatureUnit",
    "DistanceSpeedUnit",
    # Location models
    "Coordinate",
    "WeatherStation",
    "DEFAULT_BOOKMARKED_LOCATION",
    # Weather models
    "WeatherObservation",
    "ErrorType",
    "ErrorData",
    "WeatherDataContainer",
    "BulkWeatherDataContainer",
    "StoredContents"
]
