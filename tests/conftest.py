"""Pytest configuration with shared fixtures for the weather cache tests."""
import logging
from typing import List

import pytest
from hypothesis import settings as hypothesis_settings

from nearbyweather.core.config import Settings
from nearbyweather.core.models_shared import Coordinate, WeatherStation, StoredContents
from nearbyweather.data.location_service import StaticLocationService
from nearbyweather.services.cache_store import WeatherInformationStore
from nearbyweather.services.refresh_coordinator import RefreshCoordinator

from helpers import FIXED_NOW, USER_POSITION, FakeFetchGateway, RecordingPersistence

logger = logging.getLogger(__name__)

@pytest.fixture
def stations() -> List[WeatherStation]:
    return [
        WeatherStation(identifier=2950159, name="Berlin", country_code="DE",
                       coordinates=Coordinate(latitude=52.5244, longitude=13.4105)),
        WeatherStation(identifier=2643743, name="London", country_code="GB",
                       coordinates=Coordinate(latitude=51.5085, longitude=-0.1257)),
        WeatherStation(identifier=1850147, name="Tokyo", country_code="JP",
                       coordinates=Coordinate(latitude=35.6895, longitude=139.6917)),
    ]

@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Test-specific settings configuration."""
    return Settings(
        ENVIRONMENT="testing",
        LOG_LEVEL="DEBUG",
        OPENWEATHERMAP_API_KEY="test-key",
        OPENWEATHERMAP_BASE_URL="https://owm.test/data/2.5",
        APP_DATA_PATH=tmp_path,
        REFRESH_TIMEOUT_SECONDS=1.0,
        REFRESH_ON_APP_START=False,
        USER_LATITUDE=USER_POSITION.latitude,
        USER_LONGITUDE=USER_POSITION.longitude
    )

@pytest.fixture
def fake_gateway() -> FakeFetchGateway:
    return FakeFetchGateway()

@pytest.fixture
def location_service() -> StaticLocationService:
    return StaticLocationService(location=USER_POSITION, permissions_granted=True)

@pytest.fixture
def persistence(tmp_path) -> RecordingPersistence:
    return RecordingPersistence(tmp_path / "test_weather.db")

@pytest.fixture
def store(persistence, stations) -> WeatherInformationStore:
    return WeatherInformationStore(persistence, StoredContents(bookmarked_locations=stations))

@pytest.fixture
def coordinator(store, fake_gateway, location_service) -> RefreshCoordinator:
    return RefreshCoordinator(
        store=store,
        fetch_gateway=fake_gateway,
        location_service=location_service,
        timeout_seconds=1.0,
        clock=lambda: FIXED_NOW
    )

# Hypothesis settings for property-based testing
hypothesis_settings.register_profile("default", max_examples=50, deadline=None)
hypothesis_settings.load_profile("default")
