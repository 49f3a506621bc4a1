"""Configuration management for the Wunderground client."""
from dataclasses import dataclass, field
from functools import lru_cache
import logging
import logging.handlers
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from dotenv import load_dotenv
import yaml

from .models import ConfigError, Units

DEFAULT_BASE_URL = "https://api.wunderground.com/api"
DEFAULT_TIMEOUT = 10.0

@dataclass(frozen=True)
class ClientConfig:
    """Credentials and formatting preferences for API requests."""
    api_key: str
    units: Units = Units.METRIC
    language: str = "EN"
    language_variant: str = ""
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    raise_for_status: bool = True

    def __post_init__(self) -> None:
        """Validate client settings."""
        if not isinstance(self.api_key, str) or not self.api_key.strip():
            raise ConfigError("API key must be a non-empty string")
        if not isinstance(self.units, Units):
            raise ConfigError(f"Invalid units: {self.units!r}")
        for name in ('language', 'language_variant'):
            value = getattr(self, name)
            if not isinstance(value, str) or len(value) > 2 or (value and not value.isalpha()):
                raise ConfigError(f"Invalid {name}: {value!r}")
        if not self.language:
            raise ConfigError("Language must not be empty")
        if not self.base_url:
            raise ConfigError("Base URL must not be empty")
        if self.timeout <= 0:
            raise ConfigError(f"Timeout must be positive, got {self.timeout}")
        object.__setattr__(self, 'base_url', self.base_url.rstrip('/'))

    @property
    def language_code(self) -> str:
        """Language as sent in the request path, e.g. ``EN`` or ``DE-AT``."""
        if self.language_variant:
            return f"{self.language.upper()}-{self.language_variant.upper()}"
        return self.language.upper()

def coordinates(latitude: float, longitude: float) -> str:
    """Format a ``lat,lon`` location string."""
    if not -90 <= float(latitude) <= 90:
        raise ConfigError(f"Invalid latitude: {latitude}")
    if not -180 <= float(longitude) <= 180:
        raise ConfigError(f"Invalid longitude: {longitude}")
    return f"{float(latitude):g},{float(longitude):g}"

def read_api_key(path: Union[str, Path]) -> str:
    """Read an API key from the first line of a file."""
    try:
        with open(path, encoding='utf-8') as f:
            line = f.readline()
    except OSError as e:
        raise ConfigError(f"Cannot read API key file {path}: {e}") from e

    key = line.rstrip('\r\n')
    if not key:
        raise ConfigError(f"API key file {path} is empty")
    return key

@dataclass(frozen=True)
class Settings:
    """Application settings gathered from .env, YAML and the environment."""
    api_key: Optional[str] = None
    api_key_file: Optional[Path] = None
    units: Units = Units.METRIC
    language: str = "EN"
    language_variant: str = ""
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    location: Optional[str] = None
    poll_interval: float = 300.0
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_file: Optional[Path] = None
    extra: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @classmethod
    @lru_cache(maxsize=1)
    def load(cls) -> 'Settings':
        """Load settings from .env, an optional YAML file and the environment."""
        load_dotenv()
        return cls.from_mapping(os.environ)

    @classmethod
    def from_mapping(cls, env) -> 'Settings':
        """Build settings from an environment-like mapping."""
        values: Dict[str, Any] = {}
        config_file = env.get("WUNDERGROUND_CONFIG")
        if config_file:
            values.update(load_yaml_settings(config_file))

        overrides = {
            'api_key': env.get("WUNDERGROUND_API_KEY"),
            'api_key_file': env.get("WUNDERGROUND_API_KEY_FILE"),
            'units': env.get("WUNDERGROUND_UNITS"),
            'language': env.get("WUNDERGROUND_LANGUAGE"),
            'language_variant': env.get("WUNDERGROUND_LANGUAGE_VARIANT"),
            'base_url': env.get("WUNDERGROUND_BASE_URL"),
            'timeout': env.get("WUNDERGROUND_TIMEOUT"),
            'location': env.get("WUNDERGROUND_LOCATION"),
            'poll_interval': env.get("WUNDERGROUND_POLL_INTERVAL"),
            'log_level': env.get("LOG_LEVEL"),
            'log_file': env.get("LOG_FILE"),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})

        known = set(cls.__dataclass_fields__) - {'extra'}
        extra = {k: v for k, v in values.items() if k not in known}
        values = {k: v for k, v in values.items() if k in known}

        try:
            if 'units' in values and not isinstance(values['units'], Units):
                values['units'] = Units.parse(str(values['units']))
            for name in ('timeout', 'poll_interval'):
                if name in values:
                    values[name] = float(values[name])
            for name in ('api_key_file', 'log_file'):
                if values.get(name):
                    values[name] = Path(values[name])
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid setting value: {e}") from e

        return cls(extra=extra, **values)

    def client(self) -> ClientConfig:
        """Build the client configuration these settings describe."""
        api_key = self.api_key
        if not api_key and self.api_key_file:
            api_key = read_api_key(self.api_key_file)
        if not api_key:
            raise ConfigError(
                "No API key configured; set WUNDERGROUND_API_KEY "
                "or WUNDERGROUND_API_KEY_FILE"
            )
        return ClientConfig(
            api_key=api_key,
            units=self.units,
            language=self.language,
            language_variant=self.language_variant,
            base_url=self.base_url,
            timeout=self.timeout,
        )

def load_yaml_settings(path: Union[str, Path]) -> Dict[str, Any]:
    """Read a flat mapping of settings from a YAML file."""
    try:
        with open(path, encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"Cannot read settings file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid settings file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Settings file {path} must contain a mapping")
    return data

def setup_logging(settings: Settings) -> logging.Logger:
    """Configure package logging."""
    logger = logging.getLogger("wunderground")
    logger.setLevel(settings.log_level)
    if logger.handlers:
        return logger

    formatter = logging.Formatter(settings.log_format)

    # Always log to stdout
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # Optionally log to file
    if settings.log_file:
        file_handler = logging.handlers.RotatingFileHandler(
            settings.log_file,
            maxBytes=10_485_760,  # 10MB
            backupCount=5
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
