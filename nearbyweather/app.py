"""Composition root wiring the NearbyWeather services together."""
import logging
from enum import Enum
from typing import Optional

from nearbyweather.core.config import Settings, settings as default_settings
from nearbyweather.data.fetch_gateway import AbstractWeatherFetchGateway, OpenWeatherMapGateway
from nearbyweather.data.location_service import AbstractLocationService, StaticLocationService
from nearbyweather.data.persistence import SnapshotPersistence
from nearbyweather.services.cache_store import WeatherInformationStore
from nearbyweather.services.lifecycle_guard import AppLifecycle, LifecycleGuard
from nearbyweather.services.refresh_coordinator import (
    RefreshCoordinator,
    RefreshError,
    RefreshResult
)

logger = logging.getLogger(__name__)

class BackgroundFetchResult(str, Enum):
    """Outcome reported back to the host's background fetch scheduler."""
    NEW_DATA = "new_data"
    NO_DATA = "no_data"
    FAILED = "failed"

class NearbyWeatherApp:
    """Owns one instance of every service and hands them out to consumers."""

    def __init__(
        self,
        settings: Settings,
        store: WeatherInformationStore,
        coordinator: RefreshCoordinator,
        fetch_gateway: AbstractWeatherFetchGateway,
        location_service: AbstractLocationService,
        lifecycle: AppLifecycle,
        lifecycle_guard: LifecycleGuard
    ):
        self.settings = settings
        self.store = store
        self.coordinator = coordinator
        self.fetch_gateway = fetch_gateway
        self.location_service = location_service
        self.lifecycle = lifecycle
        self.lifecycle_guard = lifecycle_guard

    @classmethod
    async def create(
        cls,
        settings: Optional[Settings] = None,
        fetch_gateway: Optional[AbstractWeatherFetchGateway] = None,
        location_service: Optional[AbstractLocationService] = None,
        persistence: Optional[SnapshotPersistence] = None
    ) -> "NearbyWeatherApp":
        settings = settings or default_settings
        fetch_gateway = fetch_gateway or OpenWeatherMapGateway(settings)
        location_service = location_service or StaticLocationService.from_settings(settings)
        persistence = persistence or SnapshotPersistence(settings.database_path)

        store = await WeatherInformationStore.create(persistence)
        coordinator = RefreshCoordinator(
            store=store,
            fetch_gateway=fetch_gateway,
            location_service=location_service,
            timeout_seconds=settings.REFRESH_TIMEOUT_SECONDS,
            amount_of_results=settings.AMOUNT_OF_RESULTS,
            preferred_bookmark_id=settings.PREFERRED_BOOKMARK_ID
        )
        store.bind_refresh(coordinator.refresh)

        lifecycle = AppLifecycle()
        lifecycle_guard = LifecycleGuard(store, location_service)
        lifecycle_guard.subscribe(lifecycle)

        app = cls(
            settings=settings,
            store=store,
            coordinator=coordinator,
            fetch_gateway=fetch_gateway,
            location_service=location_service,
            lifecycle=lifecycle,
            lifecycle_guard=lifecycle_guard
        )
        lifecycle.on_did_become_active(app.refresh_weather_data_if_needed)
        logger.info(f"NearbyWeather services initialized (environment: {settings.ENVIRONMENT.value})")
        return app

    async def did_become_active(self) -> None:
        await self.lifecycle.post_did_become_active()

    async def refresh_weather_data_if_needed(self) -> None:
        """Refresh on activation when an API key exists and the user asked for it."""
        if not (self.settings.has_api_key and self.settings.REFRESH_ON_APP_START):
            return
        try:
            await self.coordinator.refresh()
        except RefreshError as e:
            logger.warning(f"Refresh on app start failed: {e}")

    async def perform_background_fetch(self, time_budget: Optional[float] = None) -> BackgroundFetchResult:
        """Entry point for the host's background fetch, bounded by its time budget."""
        timeout = self.coordinator.timeout_seconds
        if time_budget is not None:
            timeout = min(timeout, time_budget)

        try:
            result = await self.coordinator.update_preferred_bookmark(timeout_seconds=timeout)
        except RefreshError as e:
            logger.warning(f"Background fetch failed: {e}")
            return BackgroundFetchResult.FAILED

        if result is RefreshResult.UPDATED:
            return BackgroundFetchResult.NEW_DATA
        return BackgroundFetchResult.NO_DATA

    async def aclose(self) -> None:
        await self.store.aclose()
        await self.coordinator.aclose()
        await self.fetch_gateway.close()

    async def __aenter__(self) -> "NearbyWeatherApp":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()