"""Tests for preference selections and unit conversion."""
import pytest

from nearbyweather.core.preferences import (
    AmountOfResults,
    ConfigurationError,
    DistanceSpeedUnit,
    TemperatureUnit
)

@pytest.mark.parametrize("index,expected", [
    (0, AmountOfResults.TEN),
    (1, AmountOfResults.TWENTY),
    (2, AmountOfResults.THIRTY),
    (3, AmountOfResults.FORTY),
    (4, AmountOfResults.FIFTY),
])
def test_amount_of_results_from_index(index, expected):
    assert AmountOfResults.from_index(index) is expected
    assert int(expected) == (index + 1) * 10

@pytest.mark.parametrize("enum_cls,index", [
    (AmountOfResults, 5),
    (AmountOfResults, -1),
    (TemperatureUnit, 3),
    (DistanceSpeedUnit, 2),
    (DistanceSpeedUnit, True),
    (TemperatureUnit, "0"),
])
def test_invalid_selection_raises(enum_cls, index):
    """Test out-of-range selections are reported instead of crashing."""
    with pytest.raises(ConfigurationError):
        enum_cls.from_index(index)

def test_unit_selection_order():
    assert TemperatureUnit.from_index(0) is TemperatureUnit.CELSIUS
    assert TemperatureUnit.from_index(1) is TemperatureUnit.FAHRENHEIT
    assert TemperatureUnit.from_index(2) is TemperatureUnit.KELVIN
    assert DistanceSpeedUnit.from_index(0) is DistanceSpeedUnit.KILOMETRES
    assert DistanceSpeedUnit.from_index(1) is DistanceSpeedUnit.MILES

def test_temperature_conversion():
    """Test kelvin readings convert into every unit."""
    assert TemperatureUnit.CELSIUS.from_kelvin(273.15) == pytest.approx(0.0)
    assert TemperatureUnit.FAHRENHEIT.from_kelvin(273.15) == pytest.approx(32.0)
    assert TemperatureUnit.KELVIN.from_kelvin(300.0) == 300.0
    assert TemperatureUnit.CELSIUS.from_kelvin(None) is None
    assert TemperatureUnit.FAHRENHEIT.symbol == "°F"

def test_wind_speed_conversion():
    assert DistanceSpeedUnit.KILOMETRES.from_metres_per_second(10) == pytest.approx(36.0)
    assert DistanceSpeedUnit.MILES.from_metres_per_second(10) == pytest.approx(22.3694)
    assert DistanceSpeedUnit.MILES.from_metres_per_second(None) is None
    assert DistanceSpeedUnit.KILOMETRES.symbol == "km/h"
