"""In-memory weather information store, persisted after every change."""
import asyncio
import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, List, Optional, Sequence, Set

from nearbyweather.core.models_shared import (
    StoredContents,
    WeatherStation,
    WeatherObservation,
    WeatherDataContainer,
    BulkWeatherDataContainer
)
from nearbyweather.data.persistence import SnapshotPersistence

logger = logging.getLogger(__name__)

Observer = Callable[[], None]
RefreshTrigger = Callable[[], Awaitable[Any]]

class WeatherInformationStore:
    """Authoritative holder of the cached weather state.

    The contents are an immutable ``StoredContents`` replaced wholesale on each
    mutation. Mutations run under a single lock and each one is followed by a
    save and a synchronous notification of every observer, in registration
    order. Reads never await, so they always see one complete snapshot.
    """

    def __init__(self, persistence: SnapshotPersistence, contents: Optional[StoredContents] = None):
        self._persistence = persistence
        self._contents = contents or StoredContents.seed()
        self._write_lock = asyncio.Lock()
        self._observers: List[Observer] = []
        self._refresh_trigger: Optional[RefreshTrigger] = None
        self._refresh_tasks: Set[asyncio.Task] = set()

    @classmethod
    async def create(cls, persistence: SnapshotPersistence) -> "WeatherInformationStore":
        """Build a store from persisted contents, or the seed location on first run."""
        contents = await persistence.load()
        if contents is None:
            logger.info("Starting with default bookmarked location")
            contents = StoredContents.seed()
        else:
            logger.info(f"Restored {len(contents.bookmarked_locations)} bookmarked locations from storage")
        return cls(persistence, contents)

    # Reads

    def current_snapshot(self) -> StoredContents:
        return self._contents.model_copy(deep=True)

    @property
    def bookmarked_locations(self) -> List[WeatherStation]:
        return list(self._contents.bookmarked_locations)

    @property
    def bookmarked_weather_data(self) -> Optional[List[WeatherDataContainer]]:
        records = self._contents.bookmarked_weather_data
        return list(records) if records is not None else None

    @property
    def last_refreshed_at(self) -> Optional[datetime]:
        """When the last refresh round or background fetch was stored."""
        return self._contents.last_refreshed_at

    @property
    def nearby_weather_data(self) -> Optional[BulkWeatherDataContainer]:
        return self._contents.nearby_weather_data

    def lookup(self, identifier: int) -> Optional[WeatherObservation]:
        """Find the observation for a location, preferring bookmarked results."""
        contents = self._contents
        for record in contents.bookmarked_weather_data or []:
            observation = record.weather_information
            if observation is not None and observation.location_identifier == identifier:
                return observation

        nearby = contents.nearby_weather_data
        if nearby is not None:
            for observation in nearby.weather_information_list or []:
                if observation.location_identifier == identifier:
                    return observation
        return None

    @property
    def has_displayable_data(self) -> bool:
        """Whether there is anything to show, errors included."""
        contents = self._contents
        records = contents.bookmarked_weather_data or []
        nearby = contents.nearby_weather_data
        return (
            any(r.error_data is not None or r.weather_information is not None for r in records)
            or (nearby is not None and (nearby.error_data is not None or nearby.weather_information_list is not None))
        )

    @property
    def has_displayable_weather_data(self) -> bool:
        """Whether there are actual observations to show."""
        contents = self._contents
        records = contents.bookmarked_weather_data or []
        nearby = contents.nearby_weather_data
        return (
            any(r.weather_information is not None for r in records)
            or (nearby is not None and nearby.weather_information_list is not None)
        )

    @property
    def api_key_unauthorized(self) -> bool:
        contents = self._contents
        records = contents.bookmarked_weather_data or []
        nearby = contents.nearby_weather_data
        return (
            any(r.error_data is not None and r.error_data.is_unauthorized for r in records)
            or (nearby is not None and nearby.error_data is not None and nearby.error_data.is_unauthorized)
        )

    # Observers

    def add_observer(self, observer: Observer) -> Callable[[], None]:
        """Register a callback run after every change. Returns its remover."""
        self._observers.append(observer)

        def remove() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return remove

    def _notify_observers(self) -> None:
        for observer in list(self._observers):
            try:
                observer()
            except Exception:
                logger.exception("Weather store observer failed")

    # Mutations

    async def _persist_and_notify(self) -> None:
        await self._persistence.save(self._contents)
        self._notify_observers()

    async def commit(
        self,
        bookmarked_weather_data: Optional[Sequence[WeatherDataContainer]] = None,
        nearby_weather_data: Optional[BulkWeatherDataContainer] = None,
        refreshed_at: Optional[datetime] = None
    ) -> bool:
        """Replace the given categories wholesale; absent ones keep their data.

        Returns ``False`` without touching anything when both are absent.
        """
        if not bookmarked_weather_data and nearby_weather_data is None:
            return False

        async with self._write_lock:
            update = {}
            if bookmarked_weather_data:
                update["bookmarked_weather_data"] = list(bookmarked_weather_data)
            if nearby_weather_data is not None:
                update["nearby_weather_data"] = nearby_weather_data
            if refreshed_at is not None:
                update["last_refreshed_at"] = refreshed_at
            self._contents = self._contents.model_copy(update=update)
            await self._persist_and_notify()

        logger.info(
            f"Committed weather data (bookmarked: {len(bookmarked_weather_data or [])}, "
            f"nearby: {'yes' if nearby_weather_data is not None else 'no'})"
        )
        return True

    async def merge_bookmarked_record(
        self,
        record: WeatherDataContainer,
        refreshed_at: Optional[datetime] = None
    ) -> None:
        """Replace the record of one bookmarked location, keeping the others.

        Records of locations that are no longer bookmarked are dropped.
        """
        async with self._write_lock:
            contents = self._contents
            by_identifier = {r.location_identifier: r for r in contents.bookmarked_weather_data or []}
            by_identifier[record.location_identifier] = record
            records = [
                by_identifier[location.identifier]
                for location in contents.bookmarked_locations
                if location.identifier in by_identifier
            ]
            update = {"bookmarked_weather_data": records}
            if refreshed_at is not None:
                update["last_refreshed_at"] = refreshed_at
            self._contents = contents.model_copy(update=update)
            await self._persist_and_notify()

    async def discard_nearby_weather_data(self) -> None:
        async with self._write_lock:
            self._contents = self._contents.model_copy(update={"nearby_weather_data": None})
            await self._persist_and_notify()
        logger.info("Discarded nearby weather data")

    async def reset(self) -> None:
        """Drop the stored contents and start over from the default bookmark."""
        async with self._write_lock:
            await self._persistence.clear()
            self._contents = StoredContents.seed()
            self._notify_observers()
        logger.info("Weather store reset to default bookmarked location")

    async def set_bookmarked_locations(self, locations: Sequence[WeatherStation]) -> None:
        """Replace the bookmarked locations, store them and refresh in the background."""
        async with self._write_lock:
            self._contents = self._contents.model_copy(update={"bookmarked_locations": list(locations)})
            await self._persist_and_notify()
        logger.info(f"Bookmarked locations set to {[location.identifier for location in locations]}")
        self._schedule_refresh()

    # Background refreshes

    def bind_refresh(self, trigger: RefreshTrigger) -> None:
        """Set what runs after the bookmarked locations change."""
        self._refresh_trigger = trigger

    def _schedule_refresh(self) -> None:
        if self._refresh_trigger is None:
            logger.debug("No refresh bound, skipping refresh after bookmark change")
            return
        task = asyncio.get_running_loop().create_task(self._refresh_trigger())
        self._refresh_tasks.add(task)
        task.add_done_callback(self._on_refresh_done)

    def _on_refresh_done(self, task: asyncio.Task) -> None:
        self._refresh_tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.warning(f"Background refresh after bookmark change failed: {error}")

    async def wait_for_pending_refreshes(self) -> None:
        while self._refresh_tasks:
            await asyncio.gather(*list(self._refresh_tasks), return_exceptions=True)

    async def aclose(self) -> None:
        await self.wait_for_pending_refreshes()
