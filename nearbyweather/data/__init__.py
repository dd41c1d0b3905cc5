"""Data module for NearbyWeather: fetch, location and persistence gateways."""
import logging
from nearbyweather.data.fetch_gateway import (
    AbstractWeatherFetchGateway,
    OpenWeatherMapGateway,
    ReachabilityStatus
)
from nearbyweather.data.location_service import AbstractLocationService, StaticLocationService
from nearbyweather.data.persistence import SnapshotPersistence, STORED_CONTENTS_KEY

logger = logging.getLogger(__name__)

__all__ = [
    "AbstractWeatherFetchGateway",
    "OpenWeatherMapGateway",
    "ReachabilityStatus",
    "AbstractLocationService",
    "StaticLocationService",
    "SnapshotPersistence",
    "STORED_CONTENTS_KEY"
]
