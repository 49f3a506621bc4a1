"""Wunderground API fetcher with proper error handling and typing."""
import asyncio
import logging
from typing import Dict, Optional
from urllib.parse import quote

import aiohttp

from .config import ClientConfig
from .models import ConfigError, TransportError, TransportErrorKind

def build_url(config: ClientConfig, location: str) -> str:
    """Build the current-conditions URL for a location."""
    if not location or not location.strip():
        raise ConfigError("Location must be a non-empty string")
    return (
        f"{config.base_url}/{quote(config.api_key, safe='')}"
        f"/conditions/lang:{config.language_code}"
        f"/q/{quote(location.strip(), safe='/,.-')}.json"
    )

def request_params(config: ClientConfig) -> Dict[str, str]:
    return {'units': config.units.code}

class WundergroundFetcher:
    """Async fetcher for raw current-conditions payloads."""

    def __init__(self, config: ClientConfig, logger: Optional[logging.Logger] = None):
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> 'WundergroundFetcher':
        timeout = aiohttp.ClientTimeout(total=self.config.timeout)
        self._session = aiohttp.ClientSession(
            timeout=timeout,
            headers={'Accept': 'application/json', 'Accept-Encoding': 'gzip, deflate'}
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._session:
            await self._session.close()
            self._session = None

    async def fetch_current_conditions(self, location: str) -> bytes:
        """Fetch the raw JSON body for one location."""
        if not self._session:
            raise TransportError(
                TransportErrorKind.CONNECTION_FAILED,
                "Fetcher session not initialized"
            )

        url = build_url(self.config, location)
        self.logger.debug(f"Fetching current conditions for {location}")

        try:
            async with self._session.get(
                url,
                params=request_params(self.config),
                ssl=True
            ) as response:
                if self.config.raise_for_status:
                    response.raise_for_status()
                elif response.status >= 400:
                    self.logger.debug(
                        f"Passing through HTTP {response.status} body for {location}"
                    )
                body = await response.read()
                self.logger.debug(f"Received {len(body)} bytes for {location}")
                return body

        except asyncio.TimeoutError as e:
            raise TransportError(
                TransportErrorKind.TIMEOUT,
                f"Request for {location} timed out after {self.config.timeout}s"
            ) from e
        except aiohttp.ClientResponseError as e:
            raise TransportError(
                TransportErrorKind.HTTP_STATUS,
                f"HTTP {e.status} fetching {location}: {e.message}",
                status=e.status
            ) from e
        except aiohttp.ClientSSLError as e:
            raise TransportError(
                TransportErrorKind.TLS_ERROR,
                f"TLS verification failed for {location}: {e}"
            ) from e
        except aiohttp.ClientError as e:
            raise TransportError(
                TransportErrorKind.CONNECTION_FAILED,
                f"Failed to fetch current conditions for {location}: {e}"
            ) from e
