"""Decoding of current-conditions payloads into weather snapshots."""
from datetime import datetime
import json
import logging
import math
import re
from typing import Any, Dict, Optional, Union

import pytz

from .models import ParseError, Temperature, WeatherSnapshot, Wind

logger = logging.getLogger(__name__)

# The original service nests observations under ``current_observations``;
# the live API spells it ``current_observation``.
OBSERVATION_KEYS = ('current_observations', 'current_observation')

_LEADING_INT = re.compile(r'^\s*([+-]?\d+)')

def parse_current_conditions(raw: Union[bytes, str]) -> WeatherSnapshot:
    """Parse a raw API payload.

    Raises ParseError when the document is not JSON or carries no
    observations object. Inside that object every field group is read
    on its own, so a missing or garbled group only leaves that group
    empty.
    """
    try:
        document = json.loads(raw)
    except (TypeError, ValueError) as e:
        # UnicodeDecodeError and JSONDecodeError are both ValueErrors
        raise ParseError(f"Payload is not valid JSON: {e}") from e

    observations = _find_observations(document)
    if observations is None:
        raise ParseError("Payload has no current observations object")

    snapshot = WeatherSnapshot(
        temperature=_temperature(observations),
        condition=_condition(observations),
        wind=_wind(observations),
        pressure_hpa=_as_float(observations.get('pressure_mb')),
        humidity_percent=_as_percent(observations.get('relative_humidity')),
        observed_at=_observed_at(observations),
    )
    logger.debug(f"Parsed fields: {[kind.name for kind in snapshot.present_fields()]}")
    return snapshot

def _find_observations(document: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(document, dict):
        return None
    for key in OBSERVATION_KEYS:
        if key in document:
            value = document[key]
            return value if isinstance(value, dict) else None
    return None

def _as_float(value: Any) -> Optional[float]:
    """Lenient numeric coercion; anything unusable is None."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float, str)):
        try:
            number = float(value.strip() if isinstance(value, str) else value)
        except (OverflowError, ValueError):
            return None
    else:
        return None
    return number if math.isfinite(number) else None

def _as_percent(value: Any) -> Optional[int]:
    """Read humidity such as ``"87"``, ``"87%"`` or ``87``."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        return int(match.group(1)) if match else None
    return None

def _temperature(observations: Dict[str, Any]) -> Optional[Temperature]:
    celsius = _as_float(observations.get('temp_c'))
    fahrenheit = _as_float(observations.get('temp_f'))
    if celsius is None or fahrenheit is None:
        return None
    return Temperature(celsius, fahrenheit)

def _condition(observations: Dict[str, Any]) -> Optional[str]:
    value = observations.get('weather')
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None

def _wind(observations: Dict[str, Any]) -> Optional[Wind]:
    speed = _as_float(observations.get('wind_kph'))
    direction = _as_float(observations.get('wind_degrees'))
    if speed is None or direction is None:
        return None
    return Wind(speed, direction)

def _observed_at(observations: Dict[str, Any]) -> Optional[datetime]:
    epoch = _as_float(observations.get('observation_epoch'))
    if epoch is None:
        return None
    try:
        timestamp = datetime.fromtimestamp(epoch, pytz.UTC)
    except (OverflowError, OSError, ValueError):
        return None

    zone = observations.get('local_tz_long')
    if isinstance(zone, str) and zone:
        try:
            return timestamp.astimezone(pytz.timezone(zone))
        except pytz.exceptions.UnknownTimeZoneError:
            logger.debug(f"Unknown observation timezone: {zone}")
    return timestamp
