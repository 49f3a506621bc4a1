"""Domain models and type definitions for the Wunderground client."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum, auto
from typing import Any, Callable, Generic, NamedTuple, Optional, TypeVar

UserT = TypeVar('UserT')

class WeatherError(Exception):
    """Base exception for the Wunderground client."""
    pass

class ConfigError(WeatherError):
    """Raised when construction or call parameters are invalid."""
    pass

class PollError(WeatherError):
    """Raised when a poll handle is used out of order."""
    pass

class TransportErrorKind(Enum):
    """Ways a single HTTP round trip can fail."""
    TIMEOUT = auto()
    CONNECTION_FAILED = auto()
    TLS_ERROR = auto()
    HTTP_STATUS = auto()

class TransportError(WeatherError):
    """Raised when fetching from the API fails."""

    def __init__(
        self,
        kind: TransportErrorKind,
        message: str,
        status: Optional[int] = None
    ):
        super().__init__(message)
        self.kind = kind
        self.status = status

class ParseErrorKind(Enum):
    """Whole-document decode failures."""
    MALFORMED_JSON = auto()

class ParseError(WeatherError):
    """Raised when a payload cannot be decoded into a snapshot."""

    def __init__(self, message: str, kind: ParseErrorKind = ParseErrorKind.MALFORMED_JSON):
        super().__init__(message)
        self.kind = kind

class Units(Enum):
    """Unit systems understood by the API, valued by their request code."""
    METRIC = 'm'    # Celsius, km/h, hPa
    IMPERIAL = 'e'  # Fahrenheit, mph, inHg
    HYBRID = 'h'    # Celsius with mph

    @property
    def code(self) -> str:
        return self.value

    @classmethod
    def parse(cls, text: Optional[str]) -> 'Units':
        """Look up units by name or code, defaulting to metric."""
        if not text:
            return cls.METRIC
        text = text.strip()
        for unit in cls:
            if text.upper() == unit.name or text.lower() == unit.value:
                return unit
        return cls.METRIC

class FieldKind(Enum):
    """Dispatchable field groups, in dispatch order."""
    TEMPERATURE = auto()
    CONDITION = auto()
    WIND = auto()
    PRESSURE = auto()
    HUMIDITY = auto()

class Temperature(NamedTuple):
    celsius: float
    fahrenheit: float

class Wind(NamedTuple):
    speed_kph: float
    direction_deg: float

@dataclass(frozen=True)
class WeatherSnapshot:
    """One parsed observation; every field group may be absent."""
    temperature: Optional[Temperature] = None
    condition: Optional[str] = None
    wind: Optional[Wind] = None
    pressure_hpa: Optional[float] = None
    humidity_percent: Optional[int] = None
    observed_at: Optional[datetime] = None

    def present_fields(self) -> tuple:
        """Field kinds carrying a value, in dispatch order."""
        values = {
            FieldKind.TEMPERATURE: self.temperature,
            FieldKind.CONDITION: self.condition,
            FieldKind.WIND: self.wind,
            FieldKind.PRESSURE: self.pressure_hpa,
            FieldKind.HUMIDITY: self.humidity_percent,
        }
        return tuple(kind for kind in FieldKind if values[kind] is not None)

TemperatureCallback = Callable[[float, float, Any], None]
ConditionCallback = Callable[[str, Any], None]
WindCallback = Callable[[float, float, Any], None]
PressureCallback = Callable[[float, Any], None]
HumidityCallback = Callable[[int, Any], None]

@dataclass
class CallbackSet(Generic[UserT]):
    """Per-field handlers plus one user value handed to each of them."""
    on_temperature: Optional[TemperatureCallback] = None
    on_condition: Optional[ConditionCallback] = None
    on_wind: Optional[WindCallback] = None
    on_pressure: Optional[PressureCallback] = None
    on_humidity: Optional[HumidityCallback] = None
    user_data: Optional[UserT] = None

    def handler_for(self, kind: FieldKind) -> Optional[Callable[..., None]]:
        return {
            FieldKind.TEMPERATURE: self.on_temperature,
            FieldKind.CONDITION: self.on_condition,
            FieldKind.WIND: self.on_wind,
            FieldKind.PRESSURE: self.on_pressure,
            FieldKind.HUMIDITY: self.on_humidity,
        }[kind]

    def is_empty(self) -> bool:
        return all(self.handler_for(kind) is None for kind in FieldKind)
