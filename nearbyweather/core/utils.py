"""Utility functions for NearbyWeather."""
import logging
from typing import Optional

from rich.text import Text

from nearbyweather.core.preferences import TemperatureUnit

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Libraries that log every request or query at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "aiosqlite")

CARDINAL_DIRECTIONS = (
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW"
)

def _degrees_to_cardinal(degrees: Optional[float]) -> str:
    """Name the compass point closest to a wind direction in degrees."""
    if degrees is None:
        return ""
    sector = 360 / len(CARDINAL_DIRECTIONS)
    return CARDINAL_DIRECTIONS[round(degrees / sector) % len(CARDINAL_DIRECTIONS)]

def _format_temperature_rich(temp_kelvin: Optional[float], unit: TemperatureUnit) -> Text:
    """Format a kelvin reading in the preferred unit, colored by how warm it is."""
    if temp_kelvin is None:
        return Text("-", style="dim")

    text = Text(f"{unit.from_kelvin(temp_kelvin):.1f} {unit.symbol}")
    celsius = TemperatureUnit.CELSIUS.from_kelvin(temp_kelvin)

    if celsius < 0:
        text.stylize("bold bright_blue")
    elif celsius < 10:
        text.stylize("blue")
    elif celsius < 20:
        text.stylize("green")
    elif celsius < 30:
        text.stylize("yellow")
    else:
        text.stylize("bold red")

    return text

def setup_logging(log_level_str: str) -> None:
    """Send log records to stderr at the given level, replacing earlier handlers."""
    level = getattr(logging, log_level_str.upper(), logging.INFO)

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    noisy_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(noisy_level)

    logger.debug("Logging configured with level: %s", logging.getLevelName(level))
