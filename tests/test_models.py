"""Tests for the shared weather data models."""
from datetime import datetime

import pytest
from pydantic import ValidationError

from hypothesis import given

from nearbyweather.core.models_shared import (
    Coordinate,
    DEFAULT_BOOKMARKED_LOCATION,
    ErrorData,
    ErrorType,
    WeatherDataContainer,
    BulkWeatherDataContainer,
    WeatherObservation,
    StoredContents
)

from helpers import make_observation, st_stored_contents

def test_coordinate_validation():
    """Test coordinate range validation."""
    coord = Coordinate(latitude=37.323002, longitude=-122.032181)
    assert coord.latitude == 37.323002

    with pytest.raises(ValidationError):
        Coordinate(latitude=91, longitude=0)
    with pytest.raises(ValidationError):
        Coordinate(latitude=0, longitude=-181)

def test_seed_contents():
    """First launch starts with exactly the default bookmark and no weather data."""
    contents = StoredContents.seed()
    assert contents.bookmarked_locations == [DEFAULT_BOOKMARKED_LOCATION]
    assert contents.bookmarked_weather_data is None
    assert contents.nearby_weather_data is None
    assert DEFAULT_BOOKMARKED_LOCATION.identifier == 5341145
    assert DEFAULT_BOOKMARKED_LOCATION.name == "Cupertino"

def test_unauthorized_error():
    assert ErrorData(error_type=ErrorType.HTTP_ERROR, http_status_code=401).is_unauthorized
    assert not ErrorData(error_type=ErrorType.HTTP_ERROR, http_status_code=404).is_unauthorized
    assert not ErrorData(error_type=ErrorType.REQUEST_FAILED).is_unauthorized

def test_container_holds_error_or_observation():
    """A container never carries both an error and an observation."""
    error = ErrorData(error_type=ErrorType.REQUEST_FAILED)
    observation = make_observation(42)

    assert WeatherDataContainer(location_identifier=42, error_data=error).weather_information is None
    assert WeatherDataContainer(location_identifier=42, weather_information=observation).error_data is None
    with pytest.raises(ValidationError):
        WeatherDataContainer(location_identifier=42, error_data=error, weather_information=observation)

    with pytest.raises(ValidationError):
        BulkWeatherDataContainer(error_data=error, weather_information_list=[observation])
    assert BulkWeatherDataContainer(weather_information_list=[]).weather_information_list == []

def test_models_are_frozen():
    contents = StoredContents.seed()
    with pytest.raises(ValidationError):
        contents.nearby_weather_data = BulkWeatherDataContainer()

def test_observation_requires_aware_timestamp():
    data = make_observation(1).model_dump()
    data["observed_at_utc"] = datetime(2024, 5, 24, 12, 0)
    with pytest.raises(ValidationError):
        WeatherObservation.model_validate(data)

@given(contents=st_stored_contents)
def test_stored_contents_json_round_trip(contents):
    """Test stored contents survive JSON serialization unchanged."""
    assert StoredContents.model_validate_json(contents.model_dump_json()) == contents
