"""Main CLI application for NearbyWeather using Typer."""
import asyncio
import logging
from typing import Optional
from typing_extensions import Annotated

import typer
from rich.console import Console
from rich.table import Table

from nearbyweather import __version__ as app_version
from nearbyweather.app import NearbyWeatherApp
from nearbyweather.core.config import settings
from nearbyweather.core.models_shared import Coordinate, WeatherStation
from nearbyweather.core.preferences import TemperatureUnit, DistanceSpeedUnit
from nearbyweather.core.utils import setup_logging
from nearbyweather.services.refresh_coordinator import RefreshResult, RefreshTimeoutError
from nearbyweather.cli.utils_cli import (
    display_contents_rich,
    display_observation_rich,
    display_bookmarks_rich
)

logger = logging.getLogger(__name__)
console = Console()

# Create Typer application instance
app_cli = typer.Typer(
    name="nearbyweather",
    help="Cached current weather for bookmarked and nearby locations",
    rich_markup_mode="rich"
)
bookmarks_cli = typer.Typer(help="Manage bookmarked locations.")
app_cli.add_typer(bookmarks_cli, name="bookmarks")

async def _build_app() -> NearbyWeatherApp:
    return await NearbyWeatherApp.create(settings)

def _run(action):
    """Build the services, run ``action`` with them and shut them down."""
    async def runner():
        app = await _build_app()
        try:
            return await action(app)
        finally:
            await app.aclose()

    return asyncio.run(runner())

@app_cli.callback()
def main_callback(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False
):
    setup_logging("DEBUG" if verbose else settings.LOG_LEVEL)

# --- CLI Commands ---

@app_cli.command(name="refresh", help="Fetch weather for all bookmarked and nearby locations.")
def refresh_command():
    async def action(app: NearbyWeatherApp):
        return await app.coordinator.refresh()

    try:
        result = _run(action)
    except RefreshTimeoutError as e:
        console.print(f"[red]Refresh failed: {e}[/red]")
        raise typer.Exit(1)

    if result is RefreshResult.NOT_REACHABLE:
        console.print("[yellow]Network not reachable, nothing refreshed.[/yellow]")
    elif result is RefreshResult.NO_DATA:
        console.print("[yellow]No weather data received, cached data kept.[/yellow]")
    else:
        console.print("[green]Weather data updated.[/green]")

@app_cli.command(name="show", help="Show cached weather data.")
def show_command(
    temperature_unit: Annotated[Optional[TemperatureUnit], typer.Option("--temperature-unit", "-t", help="Temperature unit.")] = None,
    windspeed_unit: Annotated[Optional[DistanceSpeedUnit], typer.Option("--windspeed-unit", "-w", help="Wind speed unit.")] = None
):
    async def action(app: NearbyWeatherApp):
        return app.store.current_snapshot()

    contents = _run(action)
    display_contents_rich(
        contents,
        temperature_unit=temperature_unit or settings.TEMPERATURE_UNIT,
        windspeed_unit=windspeed_unit or settings.WINDSPEED_UNIT
    )

@app_cli.command(name="lookup", help="Show cached weather for one location ID.")
def lookup_command(
    identifier: Annotated[int, typer.Argument(help="OpenWeatherMap city ID.")]
):
    async def action(app: NearbyWeatherApp):
        return app.store.lookup(identifier)

    observation = _run(action)
    if observation is None:
        console.print(f"[red]No weather data for location {identifier}[/red]")
        raise typer.Exit(1)
    display_observation_rich(observation, settings.TEMPERATURE_UNIT, settings.WINDSPEED_UNIT)

@app_cli.command(name="status", help="Show the state of the weather cache.")
def status_command():
    async def action(app: NearbyWeatherApp):
        store = app.store
        refreshed_at = store.last_refreshed_at
        return {
            "Last refreshed": refreshed_at.strftime("%Y-%m-%d %H:%M UTC") if refreshed_at else "never",
            "Bookmarked locations": str(len(store.bookmarked_locations)),
            "Has displayable data": "yes" if store.has_displayable_data else "no",
            "Has weather data": "yes" if store.has_displayable_weather_data else "no",
            "API key unauthorized": "yes" if store.api_key_unauthorized else "no",
            "API key configured": "yes" if app.settings.has_api_key else "no"
        }, store.api_key_unauthorized

    rows, unauthorized = _run(action)
    table = Table(title=f"NearbyWeather {app_version}", show_header=False)
    table.add_column(style="cyan")
    table.add_column()
    for name, value in rows.items():
        table.add_row(name, value)
    console.print(table)
    if unauthorized:
        console.print("[red]The OpenWeatherMap API key was rejected. Please enter a valid key.[/red]")

@app_cli.command(name="background-fetch", help="Refresh the preferred bookmark as a background fetch would.")
def background_fetch_command(
    time_budget: Annotated[Optional[float], typer.Option("--time-budget", help="Seconds the host allows.")] = None
):
    async def action(app: NearbyWeatherApp):
        return await app.perform_background_fetch(time_budget=time_budget)

    result = _run(action)
    console.print(f"Background fetch result: [bold]{result.value}[/bold]")

@bookmarks_cli.command(name="list", help="List bookmarked locations.")
def bookmarks_list_command():
    async def action(app: NearbyWeatherApp):
        return app.store.bookmarked_locations

    display_bookmarks_rich(_run(action))

@bookmarks_cli.command(name="add", help="Bookmark a location and refresh.")
def bookmarks_add_command(
    identifier: Annotated[int, typer.Argument(help="OpenWeatherMap city ID.")],
    name: Annotated[str, typer.Argument(help="Display name.")],
    country: Annotated[str, typer.Argument(help="Country code.")],
    latitude: Annotated[float, typer.Option("--lat", min=-90, max=90, help="Latitude.")],
    longitude: Annotated[float, typer.Option("--lon", min=-180, max=180, help="Longitude.")]
):
    station = WeatherStation(
        identifier=identifier,
        name=name,
        country_code=country,
        coordinates=Coordinate(latitude=latitude, longitude=longitude)
    )

    async def action(app: NearbyWeatherApp):
        locations = app.store.bookmarked_locations
        if any(location.identifier == identifier for location in locations):
            return False
        await app.store.set_bookmarked_locations(locations + [station])
        return True

    if not _run(action):
        console.print(f"[yellow]Location {identifier} is already bookmarked.[/yellow]")
        raise typer.Exit(1)
    console.print(f"[green]Bookmarked {name}, {country}.[/green]")

@bookmarks_cli.command(name="remove", help="Remove a bookmarked location.")
def bookmarks_remove_command(
    identifier: Annotated[int, typer.Argument(help="OpenWeatherMap city ID.")]
):
    async def action(app: NearbyWeatherApp):
        locations = app.store.bookmarked_locations
        remaining = [location for location in locations if location.identifier != identifier]
        if len(remaining) == len(locations):
            return False
        await app.store.set_bookmarked_locations(remaining)
        return True

    if not _run(action):
        console.print(f"[red]Location {identifier} is not bookmarked.[/red]")
        raise typer.Exit(1)
    console.print(f"[green]Removed location {identifier}.[/green]")

@app_cli.command(name="reset", help="Delete cached weather data and bookmarks.")
def reset_command(
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Do not ask for confirmation.")] = False
):
    if not yes:
        typer.confirm("Delete all cached weather data and bookmarks?", abort=True)

    async def action(app: NearbyWeatherApp):
        await app.store.reset()

    _run(action)
    console.print("[green]Weather cache reset.[/green]")
