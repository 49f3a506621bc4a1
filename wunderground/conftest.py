"""Shared fixtures for the client tests."""
import copy
import json

import pytest

from .config import ClientConfig
from .models import CallbackSet

OBSERVATIONS = {
    'temp_c': 21.5,
    'temp_f': 70.7,
    'weather': 'Partly Cloudy',
    'wind_kph': 12.9,
    'wind_degrees': 250,
    'pressure_mb': '1013',
    'relative_humidity': '87',
    'observation_epoch': '1700000000',
    'local_tz_long': 'Europe/Berlin',
}

def make_payload(drop=(), **overrides) -> bytes:
    observations = copy.deepcopy(OBSERVATIONS)
    observations.update(overrides)
    for key in drop:
        observations.pop(key, None)
    return json.dumps({'current_observations': observations}).encode()

class Recorder:
    """Collects callback invocations as (field, args) tuples."""

    def __init__(self):
        self.calls = []

    def callbacks(self, user_data=None) -> CallbackSet:
        return CallbackSet(
            on_temperature=lambda c, f, user: self.calls.append(('temperature', (c, f), user)),
            on_condition=lambda text, user: self.calls.append(('condition', (text,), user)),
            on_wind=lambda kph, deg, user: self.calls.append(('wind', (kph, deg), user)),
            on_pressure=lambda hpa, user: self.calls.append(('pressure', (hpa,), user)),
            on_humidity=lambda pct, user: self.calls.append(('humidity', (pct,), user)),
            user_data=user_data,
        )

    @property
    def fields(self):
        return [name for name, _, _ in self.calls]

@pytest.fixture
def payload() -> bytes:
    return make_payload()

@pytest.fixture
def recorder() -> Recorder:
    return Recorder()

@pytest.fixture
def client() -> ClientConfig:
    return ClientConfig(api_key='TESTKEY')
