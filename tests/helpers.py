"""Test doubles, factories and hypothesis strategies shared by the test modules."""
import asyncio
from datetime import datetime, timezone
from typing import Dict, List, Optional, Set, Union

from hypothesis import strategies as st

from nearbyweather.core.models_shared import (
    Coordinate,
    WeatherStation,
    WeatherObservation,
    WeatherDataContainer,
    BulkWeatherDataContainer,
    ErrorData,
    ErrorType,
    StoredContents
)
from nearbyweather.core.preferences import AmountOfResults
from nearbyweather.data.fetch_gateway import AbstractWeatherFetchGateway, ReachabilityStatus
from nearbyweather.data.persistence import SnapshotPersistence

FIXED_NOW = datetime(2024, 5, 24, 12, 0, tzinfo=timezone.utc)
USER_POSITION = Coordinate(latitude=52.52, longitude=13.405)
NEARBY_IDENTIFIERS = (2950158, 2950157)

def make_observation(identifier: int, temperature_kelvin: float = 288.15, name: Optional[str] = None) -> WeatherObservation:
    return WeatherObservation(
        location_identifier=identifier,
        location_name=name or f"Station {identifier}",
        country_code="DE",
        coordinates=Coordinate(latitude=52.5, longitude=13.4),
        observed_at_utc=FIXED_NOW,
        temperature_kelvin=temperature_kelvin,
        humidity_percent=65,
        wind_speed_mps=3.4,
        wind_direction_degrees=270,
        condition_code=802,
        condition_main="Clouds",
        condition_description="scattered clouds"
    )

# Hypothesis strategies for property-based testing
st_coordinates = st.builds(
    Coordinate,
    latitude=st.floats(min_value=-90, max_value=90, allow_nan=False, allow_infinity=False),
    longitude=st.floats(min_value=-180, max_value=180, allow_nan=False, allow_infinity=False)
)

st_stations = st.builds(
    WeatherStation,
    identifier=st.integers(min_value=1, max_value=10_000_000),
    name=st.text(min_size=1, max_size=40),
    country_code=st.text(min_size=2, max_size=2, alphabet=st.characters(whitelist_categories=("Lu",))),
    coordinates=st_coordinates
)

st_observations = st.builds(
    WeatherObservation,
    location_identifier=st.integers(min_value=1, max_value=10_000_000),
    location_name=st.text(min_size=1, max_size=40),
    country_code=st.one_of(st.none(), st.just("US")),
    coordinates=st_coordinates,
    observed_at_utc=st.datetimes(
        min_value=datetime(2000, 1, 1), max_value=datetime(2100, 1, 1), timezones=st.just(timezone.utc)
    ),
    temperature_kelvin=st.floats(min_value=180, max_value=340, allow_nan=False),
    humidity_percent=st.one_of(st.none(), st.integers(min_value=0, max_value=100)),
    wind_speed_mps=st.one_of(st.none(), st.floats(min_value=0, max_value=80, allow_nan=False))
)

st_error_data = st.builds(
    ErrorData,
    error_type=st.sampled_from(ErrorType),
    http_status_code=st.one_of(st.none(), st.sampled_from([401, 404, 429, 500])),
    message=st.one_of(st.none(), st.text(max_size=60))
)

@st.composite
def st_containers(draw):
    identifier = draw(st.integers(min_value=1, max_value=10_000_000))
    kind = draw(st.sampled_from(["error", "observation", "empty"]))
    if kind == "error":
        return WeatherDataContainer(location_identifier=identifier, error_data=draw(st_error_data))
    if kind == "observation":
        return WeatherDataContainer(location_identifier=identifier, weather_information=draw(st_observations))
    return WeatherDataContainer(location_identifier=identifier)

st_bulk_containers = st.one_of(
    st.builds(BulkWeatherDataContainer, error_data=st_error_data),
    st.builds(BulkWeatherDataContainer, weather_information_list=st.lists(st_observations, max_size=5)),
    st.just(BulkWeatherDataContainer())
)

st_stored_contents = st.builds(
    StoredContents,
    bookmarked_locations=st.lists(st_stations, max_size=5),
    bookmarked_weather_data=st.one_of(st.none(), st.lists(st_containers(), max_size=5)),
    nearby_weather_data=st.one_of(st.none(), st_bulk_containers),
    last_refreshed_at=st.one_of(
        st.none(),
        st.datetimes(min_value=datetime(2000, 1, 1), max_value=datetime(2100, 1, 1), timezones=st.just(timezone.utc))
    )
)

class FakeFetchGateway(AbstractWeatherFetchGateway):
    """Scriptable fetch gateway recording every call it receives."""

    def __init__(self):
        self.single_outcomes: Dict[int, Union[WeatherDataContainer, Exception]] = {}
        self.bulk_outcome: Union[BulkWeatherDataContainer, Exception, None] = BulkWeatherDataContainer(
            weather_information_list=[make_observation(i, 280.0) for i in NEARBY_IDENTIFIERS]
        )
        self.hanging: Set[int] = set()
        self.hang_bulk = False
        self.release: Optional[asyncio.Event] = None
        self.reachability = ReachabilityStatus.CONNECTED
        self.single_calls: List[int] = []
        self.bulk_calls: List[tuple] = []

    async def _hang(self) -> None:
        if self.release is None:
            self.release = asyncio.Event()
        await self.release.wait()

    async def fetch_single(self, location_identifier: int) -> WeatherDataContainer:
        self.single_calls.append(location_identifier)
        if location_identifier in self.hanging:
            await self._hang()
        outcome = self.single_outcomes.get(location_identifier)
        if isinstance(outcome, Exception):
            raise outcome
        if outcome is not None:
            return outcome
        return WeatherDataContainer(
            location_identifier=location_identifier,
            weather_information=make_observation(location_identifier)
        )

    async def fetch_bulk(self, center: Coordinate, amount: AmountOfResults = AmountOfResults.TEN):
        self.bulk_calls.append((center, amount))
        if self.hang_bulk:
            await self._hang()
        if isinstance(self.bulk_outcome, Exception):
            raise self.bulk_outcome
        return self.bulk_outcome

    def reachability_status(self) -> ReachabilityStatus:
        return self.reachability

class RecordingPersistence(SnapshotPersistence):
    """SQLite persistence that also remembers every snapshot it was asked to save."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.saved: List[StoredContents] = []

    async def save(self, contents: StoredContents) -> bool:
        self.saved.append(contents)
        return await super().save(contents)

