"""User preferences shown as fixed-range selections in the settings screen."""
import logging
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)

class ConfigurationError(ValueError):
    """Raised when an external selection cannot be mapped to a preference."""
    pass

class AmountOfResults(int, Enum):
    """Number of nearby results requested from the bulk query."""
    TEN = 10
    TWENTY = 20
    THIRTY = 30
    FORTY = 40
    FIFTY = 50

    @classmethod
    def from_index(cls, index: int) -> "AmountOfResults":
        """Translate a settings row index into a results amount."""
        return _member_at(cls, index)

class TemperatureUnit(str, Enum):
    """Temperature unit used by presentation layers."""
    CELSIUS = "celsius"
    FAHRENHEIT = "fahrenheit"
    KELVIN = "kelvin"

    @classmethod
    def from_index(cls, index: int) -> "TemperatureUnit":
        """Translate a settings row index into a temperature unit."""
        return _member_at(cls, index)

    @property
    def symbol(self) -> str:
        if self is TemperatureUnit.CELSIUS:
            return "°C"
        if self is TemperatureUnit.FAHRENHEIT:
            return "°F"
        return "K"

    def from_kelvin(self, value: Optional[float]) -> Optional[float]:
        """Convert a raw kelvin reading into this unit."""
        if value is None:
            return None
        if self is TemperatureUnit.CELSIUS:
            return value - 273.15
        if self is TemperatureUnit.FAHRENHEIT:
            return value * 9 / 5 - 459.67
        return value

class DistanceSpeedUnit(str, Enum):
    """Wind speed unit used by presentation layers."""
    KILOMETRES = "kph"
    MILES = "mph"

    @classmethod
    def from_index(cls, index: int) -> "DistanceSpeedUnit":
        """Translate a settings row index into a wind speed unit."""
        return _member_at(cls, index)

    @property
    def symbol(self) -> str:
        return "km/h" if self is DistanceSpeedUnit.KILOMETRES else "mph"

    def from_metres_per_second(self, value: Optional[float]) -> Optional[float]:
        """Convert a raw m/s reading into this unit."""
        if value is None:
            return None
        if self is DistanceSpeedUnit.KILOMETRES:
            return value * 3.6
        return value * 2.23694

def _member_at(enum_cls, index: int):
    members = list(enum_cls)
    if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(members):
        logger.error(f"Selection index {index!r} out of range for {enum_cls.__name__}")
        raise ConfigurationError(
            f"{enum_cls.__name__} selection index must be between 0 and {len(members) - 1}, got {index!r}"
        )
    return members[index]
