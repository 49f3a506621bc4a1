"""Print current conditions once, then keep watching for a while."""
import asyncio
import logging
import sys
import time
from typing import List

from .api import fetch_and_dispatch, start_poll, stop_poll
from .config import Settings, setup_logging
from .models import CallbackSet, WeatherError

def console_callbacks(logger: logging.Logger) -> CallbackSet[List[str]]:
    """Callbacks that log each field and record which ones arrived."""
    def on_temperature(celsius: float, fahrenheit: float, seen: List[str]) -> None:
        seen.append('temperature')
        logger.info(f"Temperature: {celsius:.1f}°C / {fahrenheit:.1f}°F")

    def on_condition(description: str, seen: List[str]) -> None:
        seen.append('condition')
        logger.info(f"Conditions: {description}")

    def on_wind(speed_kph: float, direction_deg: float, seen: List[str]) -> None:
        seen.append('wind')
        logger.info(f"Wind: {speed_kph:.1f} km/h from {direction_deg:.0f}°")

    def on_pressure(hpa: float, seen: List[str]) -> None:
        seen.append('pressure')
        logger.info(f"Pressure: {hpa:.1f} hPa")

    def on_humidity(percent: int, seen: List[str]) -> None:
        seen.append('humidity')
        logger.info(f"Humidity: {percent}%")

    return CallbackSet(
        on_temperature=on_temperature,
        on_condition=on_condition,
        on_wind=on_wind,
        on_pressure=on_pressure,
        on_humidity=on_humidity,
        user_data=[]
    )

def watch(location: str, duration: float = 30.0) -> None:
    """Fetch once, then poll ``location`` for ``duration`` seconds."""
    settings = Settings.load()
    logger = setup_logging(settings)
    try:
        client = settings.client()
        callbacks = console_callbacks(logger)

        logger.info(f"Current conditions for {location}")
        asyncio.run(fetch_and_dispatch(client, callbacks, location, logger))

        logger.info(f"Polling every {settings.poll_interval:g}s for {duration:g}s")
        handle = start_poll(client, callbacks, location, settings.poll_interval, logger)
        try:
            time.sleep(duration)
        finally:
            stop_poll(handle)
        logger.info(f"Received {len(callbacks.user_data)} field updates")
    except WeatherError as e:
        logger.error(f"Weather client error: {e}")
        sys.exit(1)
    except Exception:
        logger.exception("Unexpected error occurred")
        sys.exit(1)

def main() -> None:
    """Entry point."""
    try:
        default = Settings.load().location or "DE/Berlin"
        location = input(f"Enter a location [{default}]: ").strip() or default
        watch(location)
    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
        sys.exit(0)

if __name__ == "__main__":
    main()
