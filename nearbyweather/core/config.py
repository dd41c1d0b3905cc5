"""Configuration module for NearbyWeather."""
import logging
from pathlib import Path
from typing import Optional
from enum import Enum

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings as PydanticBaseSettings

from nearbyweather.core.preferences import AmountOfResults, TemperatureUnit, DistanceSpeedUnit

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent

class Environment(str, Enum):
    """Application environment."""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"

class Settings(PydanticBaseSettings):
    """Application settings."""
    model_config = {
        "env_file": PROJECT_ROOT / ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "NEARBYWEATHER_",
        "extra": "ignore"
    }

    # Core settings
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: Environment = Environment.DEVELOPMENT

    # OpenWeatherMap settings
    OPENWEATHERMAP_API_KEY: Optional[SecretStr] = None
    OPENWEATHERMAP_BASE_URL: str = "https://api.openweathermap.org/data/2.5"
    HTTP_REQUEST_TIMEOUT: float = Field(30.0, gt=0)

    # Refresh behaviour
    REFRESH_TIMEOUT_SECONDS: float = Field(60.0, gt=0)
    REFRESH_ON_APP_START: bool = False
    PREFERRED_BOOKMARK_ID: Optional[int] = None

    # Display preferences
    AMOUNT_OF_RESULTS: AmountOfResults = AmountOfResults.TEN
    TEMPERATURE_UNIT: TemperatureUnit = TemperatureUnit.CELSIUS
    WINDSPEED_UNIT: DistanceSpeedUnit = DistanceSpeedUnit.KILOMETRES

    # Storage paths
    APP_DATA_PATH: Path = Path.home() / ".nearbyweather"

    # Fixed user position for hosts without location services
    USER_LATITUDE: Optional[float] = Field(None, ge=-90, le=90)
    USER_LONGITUDE: Optional[float] = Field(None, ge=-180, le=180)
    LOCATION_PERMISSION_GRANTED: bool = True

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Normalize log level to uppercase."""
        return v.upper()

    @field_validator("OPENWEATHERMAP_BASE_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @model_validator(mode="after")
    def resolve_paths(self) -> "Settings":
        """Resolve relative storage paths against the project root."""
        if not self.APP_DATA_PATH.is_absolute():
            self.APP_DATA_PATH = PROJECT_ROOT / self.APP_DATA_PATH
        return self

    @property
    def has_api_key(self) -> bool:
        return self.OPENWEATHERMAP_API_KEY is not None and bool(self.OPENWEATHERMAP_API_KEY.get_secret_value())

    @property
    def database_path(self) -> Path:
        return self.APP_DATA_PATH / "nearbyweather.db"

# Create global settings instance
settings = Settings()
