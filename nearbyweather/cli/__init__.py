"""CLI module for NearbyWeather."""
import logging
from nearbyweather.cli.main import app_cli
from nearbyweather.cli.utils_cli import (
    display_contents_rich,
    display_observation_rich,
    display_bookmarks_rich
)

logger = logging.getLogger(__name__)

__all__ = [
    "app_cli",
    "display_contents_rich",
    "display_observation_rich",
    "display_bookmarks_rich"
]
