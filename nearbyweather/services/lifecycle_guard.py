"""App lifecycle signal and the guard that drops location-based data."""
import logging
from typing import Awaitable, Callable, List

from nearbyweather.data.location_service import AbstractLocationService
from nearbyweather.services.cache_store import WeatherInformationStore

logger = logging.getLogger(__name__)

LifecycleHandler = Callable[[], Awaitable[None]]

class AppLifecycle:
    """Broadcasts "did become active" to its handlers, in registration order."""

    def __init__(self):
        self._did_become_active_handlers: List[LifecycleHandler] = []

    def on_did_become_active(self, handler: LifecycleHandler) -> Callable[[], None]:
        self._did_become_active_handlers.append(handler)

        def remove() -> None:
            if handler in self._did_become_active_handlers:
                self._did_become_active_handlers.remove(handler)

        return remove

    async def post_did_become_active(self) -> None:
        for handler in list(self._did_become_active_handlers):
            try:
                await handler()
            except Exception:
                logger.exception("Lifecycle handler failed")

class LifecycleGuard:
    """Discards nearby weather data once location permission is gone."""

    def __init__(self, store: WeatherInformationStore, location_service: AbstractLocationService):
        self.store = store
        self.location_service = location_service
        self._unsubscribe = None

    def subscribe(self, lifecycle: AppLifecycle) -> None:
        self._unsubscribe = lifecycle.on_did_become_active(self.discard_location_based_data_if_needed)

    def unsubscribe(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def discard_location_based_data_if_needed(self) -> None:
        if self.location_service.location_permissions_granted():
            return
        logger.info("Location permission not granted, discarding nearby weather data")
        await self.store.discard_nearby_weather_data()
