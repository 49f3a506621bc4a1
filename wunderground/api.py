"""Public entry points: clients, single fetches and timed polling."""
import logging
from pathlib import Path
from typing import Any, Optional, Union

from .config import ClientConfig, read_api_key
from .dispatcher import dispatch
from .fetcher import WundergroundFetcher
from .models import CallbackSet, ConfigError, Units, WeatherSnapshot
from .parser import parse_current_conditions
from .poller import Interval, IntervalUnit, PollHandle, daily, hourly, interval_seconds, minutely

def new_client(
    api_key: str,
    units: Units = Units.METRIC,
    language: str = "EN",
    language_variant: str = "",
    **options: Any
) -> ClientConfig:
    """Create a client from an inline API key."""
    return ClientConfig(
        api_key=api_key,
        units=units,
        language=language,
        language_variant=language_variant,
        **options
    )

def client_from_file(
    path: Union[str, Path],
    units: Units = Units.METRIC,
    language: str = "EN",
    language_variant: str = "",
    **options: Any
) -> ClientConfig:
    """Create a client whose API key is the first line of ``path``."""
    return new_client(read_api_key(path), units, language, language_variant, **options)

async def fetch_raw(
    client: ClientConfig,
    location: str,
    logger: Optional[logging.Logger] = None
) -> bytes:
    """Fetch the unparsed current-conditions body."""
    async with WundergroundFetcher(client, logger) as fetcher:
        return await fetcher.fetch_current_conditions(location)

async def fetch_and_dispatch(
    client: ClientConfig,
    callbacks: CallbackSet,
    location: str,
    logger: Optional[logging.Logger] = None
) -> WeatherSnapshot:
    """Fetch, parse and dispatch once.

    TransportError and ParseError reach the caller; on ParseError no
    callback has run.
    """
    if callbacks is None:
        raise ConfigError("A callback set is required")
    raw = await fetch_raw(client, location, logger)
    snapshot = parse_current_conditions(raw)
    dispatch(snapshot, callbacks)
    return snapshot

def start_poll(
    client: ClientConfig,
    callbacks: CallbackSet,
    location: str,
    interval: Interval,
    logger: Optional[logging.Logger] = None
) -> PollHandle:
    """Start polling in the background and return its handle immediately."""
    return PollHandle(client, callbacks, location, interval, logger=logger).start()

def start_poll_every(
    client: ClientConfig,
    callbacks: CallbackSet,
    location: str,
    unit: IntervalUnit,
    multiplier: int = 1,
    logger: Optional[logging.Logger] = None
) -> PollHandle:
    return start_poll(client, callbacks, location, interval_seconds(unit, multiplier), logger)

def start_poll_minutely(client: ClientConfig, callbacks: CallbackSet, location: str) -> PollHandle:
    return start_poll(client, callbacks, location, minutely())

def start_poll_hourly(client: ClientConfig, callbacks: CallbackSet, location: str) -> PollHandle:
    return start_poll(client, callbacks, location, hourly())

def start_poll_daily(client: ClientConfig, callbacks: CallbackSet, location: str) -> PollHandle:
    return start_poll(client, callbacks, location, daily())

def stop_poll(handle: Optional[PollHandle]) -> None:
    """Stop a poll and block until its thread has exited."""
    if handle is None:
        return
    handle.stop()
