"""Utility functions for the NearbyWeather CLI."""
import logging
from typing import List

from rich.console import Console
from rich.table import Table
from rich.text import Text
from rich.panel import Panel

from nearbyweather.core.models_shared import (
    ErrorData,
    ErrorType,
    StoredContents,
    WeatherObservation,
    WeatherStation
)
from nearbyweather.core.preferences import TemperatureUnit, DistanceSpeedUnit
from nearbyweather.core.utils import _format_temperature_rich, _degrees_to_cardinal

logger = logging.getLogger(__name__)
console = Console()

def describe_error(error: ErrorData) -> str:
    """Short, user-facing text for a stored fetch error."""
    if error.is_unauthorized:
        return "Unauthorized - check your API key"
    if error.error_type == ErrorType.HTTP_ERROR:
        return f"Unavailable (HTTP {error.http_status_code})"
    if error.error_type == ErrorType.LOCATION_ACCESS_DENIED:
        return "Location access denied"
    if error.error_type == ErrorType.LOCATION_UNAVAILABLE:
        return "Location unavailable"
    if error.error_type == ErrorType.REQUEST_TIMEOUT:
        return "Request timed out"
    return "Unavailable"

def _wind_text(observation: WeatherObservation, windspeed_unit: DistanceSpeedUnit) -> Text:
    speed = windspeed_unit.from_metres_per_second(observation.wind_speed_mps)
    if speed is None:
        return Text("-", style="dim")
    wind_str = f"{speed:.1f} {windspeed_unit.symbol}"
    cardinal = _degrees_to_cardinal(observation.wind_direction_degrees)
    if cardinal:
        wind_str += f" {cardinal}"
    return Text(wind_str)

def _observation_row(
    observation: WeatherObservation,
    temperature_unit: TemperatureUnit,
    windspeed_unit: DistanceSpeedUnit
) -> List:
    return [
        Text(observation.condition_description or observation.condition_main or "-"),
        _format_temperature_rich(observation.temperature_kelvin, temperature_unit),
        _wind_text(observation, windspeed_unit),
        Text(f"{observation.humidity_percent}%" if observation.humidity_percent is not None else "-")
    ]

def display_contents_rich(
    contents: StoredContents,
    temperature_unit: TemperatureUnit = TemperatureUnit.CELSIUS,
    windspeed_unit: DistanceSpeedUnit = DistanceSpeedUnit.KILOMETRES
) -> None:
    """Display bookmarked and nearby weather using Rich tables."""
    bookmarked_table = Table(title="Bookmarked Locations", expand=True)
    bookmarked_table.add_column("Location", style="magenta")
    bookmarked_table.add_column("Condition", style="green")
    bookmarked_table.add_column("Temperature", justify="right")
    bookmarked_table.add_column("Wind", style="yellow", justify="right")
    bookmarked_table.add_column("Humidity", style="blue", justify="right")

    records = {r.location_identifier: r for r in contents.bookmarked_weather_data or []}
    for location in contents.bookmarked_locations:
        label = f"{location.name}, {location.country_code}"
        record = records.get(location.identifier)
        if record is not None and record.weather_information is not None:
            bookmarked_table.add_row(
                label, *_observation_row(record.weather_information, temperature_unit, windspeed_unit)
            )
        elif record is not None and record.error_data is not None:
            bookmarked_table.add_row(label, Text(describe_error(record.error_data), style="red"), "", "", "")
        else:
            bookmarked_table.add_row(label, Text("No data yet", style="dim"), "", "", "")
    console.print(bookmarked_table)

    nearby = contents.nearby_weather_data
    if nearby is None:
        console.print(Panel(Text("No nearby weather data", style="dim"), title="Nearby", expand=False))
        return
    if nearby.error_data is not None:
        console.print(Panel(Text(describe_error(nearby.error_data), style="red"), title="Nearby", expand=False))
        return

    nearby_table = Table(title="Nearby", expand=True)
    nearby_table.add_column("Location", style="magenta")
    nearby_table.add_column("Condition", style="green")
    nearby_table.add_column("Temperature", justify="right")
    nearby_table.add_column("Wind", style="yellow", justify="right")
    nearby_table.add_column("Humidity", style="blue", justify="right")
    for observation in nearby.weather_information_list or []:
        label = observation.location_name
        if observation.country_code:
            label += f", {observation.country_code}"
        nearby_table.add_row(label, *_observation_row(observation, temperature_unit, windspeed_unit))
    console.print(nearby_table)

def display_observation_rich(
    observation: WeatherObservation,
    temperature_unit: TemperatureUnit = TemperatureUnit.CELSIUS,
    windspeed_unit: DistanceSpeedUnit = DistanceSpeedUnit.KILOMETRES
) -> None:
    """Display a single observation as a detail panel."""
    table = Table(show_header=False, box=None)
    table.add_column(style="cyan")
    table.add_column()

    table.add_row("Temperature:", _format_temperature_rich(observation.temperature_kelvin, temperature_unit))
    if observation.feels_like_kelvin is not None:
        table.add_row("Feels Like:", _format_temperature_rich(observation.feels_like_kelvin, temperature_unit))
    if observation.condition_description:
        table.add_row("Condition:", Text(observation.condition_description))
    table.add_row("Wind:", _wind_text(observation, windspeed_unit))
    if observation.humidity_percent is not None:
        table.add_row("Humidity:", Text(f"{observation.humidity_percent}%"))
    if observation.pressure_hpa is not None:
        table.add_row("Pressure:", Text(f"{observation.pressure_hpa:.0f} hPa"))
    if observation.cloud_cover_percent is not None:
        table.add_row("Cloud Cover:", Text(f"{observation.cloud_cover_percent}%"))
    table.add_row("Observed:", Text(observation.observed_at_utc.strftime("%Y-%m-%d %H:%M UTC")))

    title = observation.location_name
    if observation.country_code:
        title += f", {observation.country_code}"
    console.print(Panel(table, title=title, expand=False))

def display_bookmarks_rich(locations: List[WeatherStation]) -> None:
    table = Table(title="Bookmarked Locations")
    table.add_column("#", justify="right")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="magenta")
    table.add_column("Country")
    table.add_column("Coordinates", justify="right")
    for position, location in enumerate(locations, start=1):
        table.add_row(
            str(position),
            str(location.identifier),
            location.name,
            location.country_code,
            f"{location.coordinates.latitude:.4f}, {location.coordinates.longitude:.4f}"
        )
    console.print(table)