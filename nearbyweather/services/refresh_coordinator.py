"""Refresh coordinator: concurrent fetches merged into the weather store."""
import asyncio
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, List, Optional, Sequence, Set

from nearbyweather.core.models_shared import (
    ErrorType,
    ErrorData,
    WeatherStation,
    WeatherDataContainer,
    BulkWeatherDataContainer
)
from nearbyweather.core.preferences import AmountOfResults
from nearbyweather.data.fetch_gateway import AbstractWeatherFetchGateway, ReachabilityStatus
from nearbyweather.data.location_service import AbstractLocationService
from nearbyweather.services.cache_store import WeatherInformationStore

logger = logging.getLogger(__name__)

DEFAULT_REFRESH_TIMEOUT_SECONDS = 60.0

class RefreshError(Exception):
    """Refresh specific errors."""
    pass

class RefreshTimeoutError(RefreshError):
    """Raised when a refresh round does not finish before its deadline."""
    pass

class RefreshResult(str, Enum):
    """How a refresh round ended when it did not fail."""
    UPDATED = "updated"
    NO_DATA = "no_data"
    NOT_REACHABLE = "not_reachable"

class RefreshCoordinator:
    """Fetches all bookmarked locations and the nearby query, then commits.

    Every fetch runs as its own task. A round either commits once, after every
    task finished, or raises ``RefreshTimeoutError`` and commits nothing; tasks
    still running at the deadline are left to finish and their results are
    dropped.
    """

    def __init__(
        self,
        store: WeatherInformationStore,
        fetch_gateway: AbstractWeatherFetchGateway,
        location_service: AbstractLocationService,
        timeout_seconds: float = DEFAULT_REFRESH_TIMEOUT_SECONDS,
        amount_of_results: AmountOfResults = AmountOfResults.TEN,
        preferred_bookmark_id: Optional[int] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.store = store
        self.fetch_gateway = fetch_gateway
        self.location_service = location_service
        self.timeout_seconds = timeout_seconds
        self.amount_of_results = amount_of_results
        self.preferred_bookmark_id = preferred_bookmark_id
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._abandoned_tasks: Set[asyncio.Task] = set()

    async def _is_reachable(self) -> bool:
        status = await self.fetch_gateway.refresh_reachability()
        return status == ReachabilityStatus.CONNECTED

    async def refresh(self) -> RefreshResult:
        """Run one full refresh round."""
        if not await self._is_reachable():
            logger.info("Network not reachable, skipping weather refresh")
            return RefreshResult.NOT_REACHABLE

        locations = self.store.bookmarked_locations
        logger.info(f"Refreshing weather for {len(locations)} bookmarked locations and nearby results")

        bookmarked_tasks = [
            asyncio.create_task(self._fetch_bookmarked(location.identifier))
            for location in locations
        ]
        nearby_task = asyncio.create_task(self._fetch_nearby())

        await self._wait_for(bookmarked_tasks + [nearby_task], self.timeout_seconds)

        bookmarked_weather_data = [task.result() for task in bookmarked_tasks if task.result() is not None]
        nearby_weather_data = nearby_task.result()

        # do not publish a refresh if nothing at all came back
        if not bookmarked_weather_data and nearby_weather_data is None:
            logger.info("Weather refresh returned no data, keeping cached contents")
            return RefreshResult.NO_DATA

        await self.store.commit(
            bookmarked_weather_data=bookmarked_weather_data or None,
            nearby_weather_data=nearby_weather_data,
            refreshed_at=self._clock()
        )
        return RefreshResult.UPDATED

    async def update_preferred_bookmark(self, timeout_seconds: Optional[float] = None) -> RefreshResult:
        """Refresh only the preferred bookmarked location."""
        if not await self._is_reachable():
            logger.info("Network not reachable, skipping preferred bookmark refresh")
            return RefreshResult.NOT_REACHABLE

        location = self.preferred_location()
        if location is None:
            logger.info("No bookmarked location to refresh")
            return RefreshResult.NO_DATA

        task = asyncio.create_task(self._fetch_bookmarked(location.identifier))
        await self._wait_for(
            [task], self.timeout_seconds if timeout_seconds is None else timeout_seconds
        )

        record = task.result()
        if record is None:
            return RefreshResult.NO_DATA
        await self.store.merge_bookmarked_record(record, refreshed_at=self._clock())
        return RefreshResult.UPDATED

    def preferred_location(self) -> Optional[WeatherStation]:
        """The configured preferred bookmark, else the first one."""
        locations = self.store.bookmarked_locations
        if self.preferred_bookmark_id is not None:
            for location in locations:
                if location.identifier == self.preferred_bookmark_id:
                    return location
            logger.debug(f"Preferred bookmark {self.preferred_bookmark_id} is not bookmarked, using first")
        return locations[0] if locations else None

    async def _wait_for(self, tasks: Sequence[asyncio.Task], timeout_seconds: float) -> None:
        _, pending = await asyncio.wait(tasks, timeout=timeout_seconds)
        if not pending:
            return
        for task in pending:
            self._abandoned_tasks.add(task)
            task.add_done_callback(self._abandoned_tasks.discard)
        logger.warning(
            f"Weather refresh timed out after {timeout_seconds:g}s with {len(pending)} "
            f"of {len(tasks)} requests outstanding, discarding results"
        )
        raise RefreshTimeoutError(f"Weather refresh did not finish within {timeout_seconds:g} seconds")

    async def _fetch_bookmarked(self, location_identifier: int) -> Optional[WeatherDataContainer]:
        try:
            return await self.fetch_gateway.fetch_single(location_identifier)
        except Exception as e:
            logger.error(f"Fetching weather for location {location_identifier} failed: {e}")
            return WeatherDataContainer(
                location_identifier=location_identifier,
                error_data=ErrorData(error_type=ErrorType.REQUEST_FAILED, message=str(e))
            )

    async def _fetch_nearby(self) -> Optional[BulkWeatherDataContainer]:
        if not self.location_service.location_permissions_granted():
            return BulkWeatherDataContainer(
                error_data=ErrorData(
                    error_type=ErrorType.LOCATION_ACCESS_DENIED,
                    message="Location permission not granted"
                )
            )

        center = self.location_service.current_location()
        if center is None:
            return BulkWeatherDataContainer(
                error_data=ErrorData(
                    error_type=ErrorType.LOCATION_UNAVAILABLE,
                    message="Current location unavailable"
                )
            )

        try:
            return await self.fetch_gateway.fetch_bulk(center, self.amount_of_results)
        except Exception as e:
            logger.error(f"Fetching nearby weather failed: {e}")
            return BulkWeatherDataContainer(
                error_data=ErrorData(error_type=ErrorType.REQUEST_FAILED, message=str(e))
            )

    @property
    def abandoned_requests(self) -> List[asyncio.Task]:
        return list(self._abandoned_tasks)

    async def aclose(self) -> None:
        """Cancel requests left running by timed-out rounds."""
        tasks = list(self._abandoned_tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
