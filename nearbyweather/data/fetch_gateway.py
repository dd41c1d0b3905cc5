"""Gateways fetching weather observations from remote APIs."""
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Dict, Any

import httpx
from pydantic import ValidationError

from nearbyweather.core.config import Settings
from nearbyweather.core.models_shared import (
    Coordinate,
    WeatherObservation,
    ErrorType,
    ErrorData,
    WeatherDataContainer,
    BulkWeatherDataContainer
)
from nearbyweather.core.preferences import AmountOfResults

logger = logging.getLogger(__name__)

class ReachabilityStatus(str, Enum):
    """Network reachability as reported by the host."""
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"

class AbstractWeatherFetchGateway:
    """Interface the refresh coordinator fetches through.

    Implementations never raise for per-request failures; they return the
    failure as ``ErrorData`` inside the container instead.
    """

    async def fetch_single(self, location_identifier: int) -> WeatherDataContainer:
        """Fetch current weather for one bookmarked location."""
        raise NotImplementedError("Subclasses must implement fetch_single()")

    async def fetch_bulk(
        self,
        center: Coordinate,
        amount: AmountOfResults = AmountOfResults.TEN
    ) -> Optional[BulkWeatherDataContainer]:
        """Fetch current weather for the locations around ``center``."""
        raise NotImplementedError("Subclasses must implement fetch_bulk()")

    def reachability_status(self) -> ReachabilityStatus:
        raise NotImplementedError("Subclasses must implement reachability_status()")

    async def refresh_reachability(self) -> ReachabilityStatus:
        """Update the reachability status before a refresh round and return it."""
        return self.reachability_status()

    async def close(self) -> None:
        """Release network resources."""
        return None

class OpenWeatherMapGateway(AbstractWeatherFetchGateway):
    """Fetch gateway for the OpenWeatherMap current weather API."""

    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        self.base_url = settings.OPENWEATHERMAP_BASE_URL
        self.api_key = (
            settings.OPENWEATHERMAP_API_KEY.get_secret_value()
            if settings.OPENWEATHERMAP_API_KEY is not None else ""
        )
        self.client = client or httpx.AsyncClient(timeout=settings.HTTP_REQUEST_TIMEOUT)
        self._reachability = ReachabilityStatus.CONNECTED

    def reachability_status(self) -> ReachabilityStatus:
        return self._reachability

    def set_reachability(self, status: ReachabilityStatus) -> None:
        """Record the reachability reported by the host's network monitor."""
        if status != self._reachability:
            logger.info(f"Network reachability changed to {status.value}")
        self._reachability = status

    async def check_reachability(self) -> ReachabilityStatus:
        """Check whether the API host answers at all and record the result."""
        try:
            await self.client.head(self.base_url)
            self.set_reachability(ReachabilityStatus.CONNECTED)
        except httpx.RequestError as e:
            logger.warning(f"Reachability check failed: {e}")
            self.set_reachability(ReachabilityStatus.DISCONNECTED)
        return self._reachability

    async def refresh_reachability(self) -> ReachabilityStatus:
        return await self.check_reachability()

    async def fetch_single(self, location_identifier: int) -> WeatherDataContainer:
        """Get current weather for one city id from OpenWeatherMap."""
        payload = await self._get_json("/weather", {"id": location_identifier})
        if isinstance(payload, ErrorData):
            return WeatherDataContainer(location_identifier=location_identifier, error_data=payload)

        try:
            observation = _parse_observation(payload)
        except (KeyError, IndexError, TypeError, ValueError, ValidationError) as e:
            logger.error(f"Invalid OpenWeatherMap response for location {location_identifier}: {e}")
            return WeatherDataContainer(
                location_identifier=location_identifier,
                error_data=ErrorData(error_type=ErrorType.MALFORMED_RESPONSE, message=str(e))
            )
        return WeatherDataContainer(location_identifier=location_identifier, weather_information=observation)

    async def fetch_bulk(
        self,
        center: Coordinate,
        amount: AmountOfResults = AmountOfResults.TEN
    ) -> Optional[BulkWeatherDataContainer]:
        """Get current weather for the cities closest to ``center``."""
        params = {"lat": center.latitude, "lon": center.longitude, "cnt": int(amount)}
        payload = await self._get_json("/find", params)
        if isinstance(payload, ErrorData):
            return BulkWeatherDataContainer(error_data=payload)

        try:
            observations = [_parse_observation(item) for item in payload["list"]]
        except (KeyError, IndexError, TypeError, ValueError, ValidationError) as e:
            logger.error(f"Invalid OpenWeatherMap bulk response: {e}")
            return BulkWeatherDataContainer(
                error_data=ErrorData(error_type=ErrorType.MALFORMED_RESPONSE, message=str(e))
            )
        return BulkWeatherDataContainer(weather_information_list=observations)

    async def _get_json(self, path: str, params: Dict[str, Any]):
        """Issue a GET request, returning the decoded body or the failure."""
        query = {**params, "appid": self.api_key}
        try:
            response = await self.client.get(f"{self.base_url}{path}", params=query)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            logger.error(f"OpenWeatherMap API error {status_code} for {path}")
            return ErrorData(
                error_type=ErrorType.HTTP_ERROR,
                http_status_code=status_code,
                message=_error_message(e.response)
            )
        except httpx.TimeoutException as e:
            logger.warning(f"OpenWeatherMap request to {path} timed out: {e}")
            return ErrorData(error_type=ErrorType.REQUEST_TIMEOUT, message=str(e) or "Request timed out")
        except httpx.RequestError as e:
            logger.warning(f"OpenWeatherMap request to {path} failed: {e}")
            return ErrorData(error_type=ErrorType.REQUEST_FAILED, message=str(e) or type(e).__name__)
        except ValueError as e:
            logger.error(f"OpenWeatherMap returned undecodable JSON for {path}: {e}")
            return ErrorData(error_type=ErrorType.MALFORMED_RESPONSE, message=str(e))

    async def close(self) -> None:
        """Close HTTP client."""
        await self.client.aclose()

def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason_phrase

def _parse_observation(data: Dict[str, Any]) -> WeatherObservation:
    """Parse one OpenWeatherMap city entry into an observation."""
    main = data["main"]
    wind = data.get("wind") or {}
    conditions = (data.get("weather") or [{}])[0]
    return WeatherObservation(
        location_identifier=data["id"],
        location_name=data["name"],
        country_code=(data.get("sys") or {}).get("country"),
        coordinates=Coordinate(latitude=data["coord"]["lat"], longitude=data["coord"]["lon"]),
        observed_at_utc=datetime.fromtimestamp(data["dt"], tz=timezone.utc),
        temperature_kelvin=main["temp"],
        feels_like_kelvin=main.get("feels_like"),
        humidity_percent=main.get("humidity"),
        pressure_hpa=main.get("pressure"),
        wind_speed_mps=wind.get("speed"),
        wind_direction_degrees=wind.get("deg"),
        cloud_cover_percent=(data.get("clouds") or {}).get("all"),
        condition_code=conditions.get("id"),
        condition_main=conditions.get("main"),
        condition_description=conditions.get("description")
    )
