"""Shared data models for NearbyWeather."""
from enum import Enum
from typing import Optional, List
from pydantic import BaseModel, Field, AwareDatetime, model_validator

HTTP_STATUS_UNAUTHORIZED = 401

# Coordinate and location models
class Coordinate(BaseModel):
    """Geographic coordinate."""
    model_config = {"frozen": True}

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)

class WeatherStation(BaseModel):
    """A location the user can bookmark, identified by its OpenWeatherMap city id."""
    model_config = {"frozen": True}

    identifier: int
    name: str
    country_code: str
    coordinates: Coordinate

DEFAULT_BOOKMARKED_LOCATION = WeatherStation(
    identifier=5341145,
    name="Cupertino",
    country_code="US",
    coordinates=Coordinate(latitude=37.323002, longitude=-122.032181)
)

class WeatherObservation(BaseModel):
    """Current conditions observed at one location, in standard units (K, m/s)."""
    model_config = {"frozen": True}

    location_identifier: int
    location_name: str
    country_code: Optional[str] = None
    coordinates: Coordinate
    observed_at_utc: AwareDatetime
    temperature_kelvin: float
    feels_like_kelvin: Optional[float] = None
    humidity_percent: Optional[int] = Field(None, ge=0, le=100)
    pressure_hpa: Optional[float] = None
    wind_speed_mps: Optional[float] = Field(None, ge=0)
    wind_direction_degrees: Optional[float] = None
    cloud_cover_percent: Optional[int] = Field(None, ge=0, le=100)
    condition_code: Optional[int] = None
    condition_main: Optional[str] = None
    condition_description: Optional[str] = None

class ErrorType(str, Enum):
    """Reasons a single fetch can fail."""
    HTTP_ERROR = "http_error"
    REQUEST_TIMEOUT = "request_timeout"
    REQUEST_FAILED = "request_failed"
    MALFORMED_RESPONSE = "malformed_response"
    LOCATION_UNAVAILABLE = "location_unavailable"
    LOCATION_ACCESS_DENIED = "location_access_denied"

class ErrorData(BaseModel):
    """Structured failure kept alongside the record it belongs to."""
    model_config = {"frozen": True}

    error_type: ErrorType
    http_status_code: Optional[int] = None
    message: Optional[str] = None

    @property
    def is_unauthorized(self) -> bool:
        return self.http_status_code == HTTP_STATUS_UNAUTHORIZED

class WeatherDataContainer(BaseModel):
    """Outcome of fetching one bookmarked location.

    Each bookmarked location is downloaded on its own, so each carries its own
    error while the others may still be presentable.
    """
    model_config = {"frozen": True}

    location_identifier: int
    error_data: Optional[ErrorData] = None
    weather_information: Optional[WeatherObservation] = None

    @model_validator(mode="after")
    def check_exclusive(self) -> "WeatherDataContainer":
        if self.error_data is not None and self.weather_information is not None:
            raise ValueError("A weather data container holds either an error or an observation, not both")
        return self

class BulkWeatherDataContainer(BaseModel):
    """Outcome of the nearby query, which succeeds or fails as a whole."""
    model_config = {"frozen": True}

    error_data: Optional[ErrorData] = None
    weather_information_list: Optional[List[WeatherObservation]] = None

    @model_validator(mode="after")
    def check_exclusive(self) -> "BulkWeatherDataContainer":
        if self.error_data is not None and self.weather_information_list is not None:
            raise ValueError("A bulk weather data container holds either an error or observations, not both")
        return self

class StoredContents(BaseModel):
    """The cached state persisted between launches."""
    model_config = {"frozen": True}

    bookmarked_locations: List[WeatherStation] = Field(default_factory=list)
    bookmarked_weather_data: Optional[List[WeatherDataContainer]] = None
    nearby_weather_data: Optional[BulkWeatherDataContainer] = None
    last_refreshed_at: Optional[AwareDatetime] = None

    @classmethod
    def seed(cls) -> "StoredContents":
        """Contents used on first launch."""
        return cls(bookmarked_locations=[DEFAULT_BOOKMARKED_LOCATION])
