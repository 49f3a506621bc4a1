"""Weather Underground current-conditions client."""
from .api import (
    client_from_file, fetch_and_dispatch, fetch_raw, new_client,
    start_poll, start_poll_daily, start_poll_every, start_poll_hourly,
    start_poll_minutely, stop_poll
)
from .config import ClientConfig, Settings, coordinates, read_api_key, setup_logging
from .dispatcher import dispatch
from .models import *
from .parser import parse_current_conditions
from .poller import IntervalUnit, PollHandle, PollState, daily, hourly, interval_seconds, minutely

__all__ = [
    'new_client', 'client_from_file', 'fetch_raw', 'fetch_and_dispatch',
    'start_poll', 'start_poll_every', 'start_poll_minutely', 'start_poll_hourly',
    'start_poll_daily', 'stop_poll',
    'ClientConfig', 'Settings', 'coordinates', 'read_api_key', 'setup_logging',
    'dispatch', 'parse_current_conditions',
    'IntervalUnit', 'PollHandle', 'PollState', 'interval_seconds',
    'minutely', 'hourly', 'daily',
    'Units', 'CallbackSet', 'WeatherSnapshot', 'Temperature', 'Wind', 'FieldKind',
    'WeatherError', 'ConfigError', 'TransportError', 'TransportErrorKind',
    'ParseError', 'ParseErrorKind', 'PollError',
]
