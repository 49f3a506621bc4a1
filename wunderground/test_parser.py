"""Tests for payload parsing."""
from datetime import datetime

import pytest
import pytz

from .conftest import make_payload
from .models import ParseError, ParseErrorKind, Temperature, WeatherSnapshot, Wind
from .parser import parse_current_conditions

def test_full_payload_yields_every_field(payload):
    snapshot = parse_current_conditions(payload)

    assert snapshot.temperature == Temperature(21.5, 70.7)
    assert snapshot.condition == 'Partly Cloudy'
    assert snapshot.wind == Wind(12.9, 250.0)
    assert snapshot.pressure_hpa == 1013.0
    assert snapshot.humidity_percent == 87

def test_observation_time_is_localized(payload):
    snapshot = parse_current_conditions(payload)

    expected = datetime(2023, 11, 14, 22, 13, 20, tzinfo=pytz.UTC)
    assert snapshot.observed_at == expected
    assert snapshot.observed_at.tzinfo.zone == 'Europe/Berlin'

def test_unknown_timezone_falls_back_to_utc():
    snapshot = parse_current_conditions(make_payload(local_tz_long='Mars/Olympus'))
    assert snapshot.observed_at.utcoffset().total_seconds() == 0

@pytest.mark.parametrize('raw', [
    b'not json at all',
    b'{"current_observations": ',
    b'[1, 2, 3]',
    b'{"response": {}}',
    b'{"current_observations": "sunny"}',
    b'\xff\xfe\x00garbage',
    b'',
])
def test_malformed_documents_raise(raw):
    with pytest.raises(ParseError) as excinfo:
        parse_current_conditions(raw)
    assert excinfo.value.kind is ParseErrorKind.MALFORMED_JSON

def test_live_api_container_name_is_accepted():
    raw = b'{"current_observation": {"weather": "Clear", "pressure_mb": 1001.5}}'
    snapshot = parse_current_conditions(raw)
    assert snapshot.condition == 'Clear'
    assert snapshot.pressure_hpa == 1001.5

def test_text_payload_is_accepted(payload):
    assert parse_current_conditions(payload.decode()).condition == 'Partly Cloudy'

def test_empty_container_yields_empty_snapshot():
    snapshot = parse_current_conditions(b'{"current_observations": {}}')
    assert snapshot == WeatherSnapshot()
    assert snapshot.present_fields() == ()

def test_temperature_needs_both_parts():
    snapshot = parse_current_conditions(make_payload(drop=['temp_f']))

    assert snapshot.temperature is None
    assert snapshot.condition == 'Partly Cloudy'
    assert snapshot.wind is not None

def test_wind_needs_both_parts():
    snapshot = parse_current_conditions(make_payload(drop=['wind_degrees']))

    assert snapshot.wind is None
    assert snapshot.temperature == Temperature(21.5, 70.7)

@pytest.mark.parametrize('raw_value,expected', [
    ('87', 87),
    ('87%', 87),
    (' 42 ', 42),
    (55, 55),
    (61.9, 61),
    ('N/A', None),
    ('', None),
    (None, None),
    (True, None),
    ({'value': 3}, None),
    (float('inf'), None),
    (float('nan'), None),
    (10 ** 400, 10 ** 400),
])
def test_humidity_coercion(raw_value, expected):
    snapshot = parse_current_conditions(make_payload(relative_humidity=raw_value))
    assert snapshot.humidity_percent == expected
    # the other groups are unaffected
    assert snapshot.pressure_hpa == 1013.0

def test_non_numeric_groups_are_absent_not_fatal():
    snapshot = parse_current_conditions(
        make_payload(temp_c='warm', wind_kph=None, pressure_mb=[1013])
    )

    assert snapshot.temperature is None
    assert snapshot.wind is None
    assert snapshot.pressure_hpa is None
    assert snapshot.condition == 'Partly Cloudy'
    assert snapshot.humidity_percent == 87

def test_numeric_strings_are_coerced():
    snapshot = parse_current_conditions(make_payload(temp_c='-3.5', temp_f='25.7'))
    assert snapshot.temperature == Temperature(-3.5, 25.7)

def test_condition_must_be_text():
    snapshot = parse_current_conditions(make_payload(weather={'text': 'Rain'}))
    assert snapshot.condition is None

@pytest.mark.parametrize('literal', [b'1e400', b'-1e400', b'NaN', b'Infinity'])
def test_non_finite_humidity_is_absent(literal):
    raw = make_payload().replace(b'"87"', literal)
    snapshot = parse_current_conditions(raw)

    assert snapshot.humidity_percent is None
    assert snapshot.temperature == Temperature(21.5, 70.7)
    assert snapshot.condition == 'Partly Cloudy'
    assert snapshot.wind == Wind(12.9, 250.0)
    assert snapshot.pressure_hpa == 1013.0

def test_non_finite_numbers_are_absent_elsewhere():
    raw = make_payload().replace(b'"1013"', b'1e400').replace(b'21.5', b'NaN')
    raw = raw.replace(b'"1700000000"', b'1' + b'0' * 400)
    snapshot = parse_current_conditions(raw)

    assert snapshot.pressure_hpa is None
    assert snapshot.temperature is None
    assert snapshot.observed_at is None
    assert snapshot.humidity_percent == 87
