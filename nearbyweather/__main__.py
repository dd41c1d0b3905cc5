"""Main entry point for NearbyWeather."""
import logging
import sys
from typing import NoReturn

from nearbyweather.cli.main import app_cli

logger = logging.getLogger(__name__)

def run_application_cli() -> NoReturn:
    """Main entry point for CLI application."""
    try:
        app_cli()
    except Exception as e:
        logger.exception("Critical error during application startup: %s", str(e))
        sys.exit(1)

if __name__ == "__main__":
    run_application_cli()
