"""Background polling of current conditions.

A PollHandle owns one daemon thread running its own asyncio loop. The
loop fetches, parses and dispatches, then sleeps for the interval on a
threading.Event so that stop() wakes it at once. Cycles for one handle
never overlap; separate handles share nothing but the immutable client
config.
"""
import asyncio
from datetime import timedelta
from enum import Enum, auto
import logging
import threading
from typing import Callable, Optional, Union

from .config import ClientConfig
from .dispatcher import dispatch
from .fetcher import WundergroundFetcher
from .models import CallbackSet, ConfigError, ParseError, PollError, TransportError
from .parser import parse_current_conditions

Interval = Union[int, float, timedelta]
FetcherFactory = Callable[[ClientConfig, Optional[logging.Logger]], WundergroundFetcher]

class IntervalUnit(Enum):
    """Polling interval units, valued in seconds."""
    SECONDS = 1
    MINUTES = 60
    HOURS = 3600
    DAYS = 86400

def interval_seconds(unit: IntervalUnit, multiplier: int = 1) -> int:
    """Convert ``multiplier`` units to seconds."""
    if not isinstance(unit, IntervalUnit):
        raise ConfigError(f"Invalid interval unit: {unit!r}")
    if multiplier <= 0:
        raise ConfigError(f"Interval multiplier must be positive, got {multiplier}")
    return unit.value * multiplier

def minutely() -> int:
    return interval_seconds(IntervalUnit.MINUTES)

def hourly() -> int:
    return interval_seconds(IntervalUnit.HOURS)

def daily() -> int:
    return interval_seconds(IntervalUnit.DAYS)

def _to_seconds(interval: Interval) -> float:
    if isinstance(interval, timedelta):
        return interval.total_seconds()
    if isinstance(interval, bool) or not isinstance(interval, (int, float)):
        raise ConfigError(f"Invalid interval: {interval!r}")
    return float(interval)

class PollState(Enum):
    IDLE = auto()
    RUNNING = auto()
    STOPPING = auto()
    STOPPED = auto()

class PollHandle:
    """Repeated fetch-parse-dispatch for one location."""

    def __init__(
        self,
        client: ClientConfig,
        callbacks: CallbackSet,
        location: str,
        interval: Interval,
        fetcher_factory: Optional[FetcherFactory] = None,
        logger: Optional[logging.Logger] = None
    ):
        if not isinstance(client, ClientConfig):
            raise ConfigError("A client configuration is required")
        if callbacks is None or callbacks.is_empty():
            raise ConfigError("A callback set with at least one handler is required")
        if not isinstance(location, str) or not location.strip():
            raise ConfigError("Location must be a non-empty string")
        seconds = _to_seconds(interval)
        if seconds <= 0:
            raise ConfigError(f"Interval must be positive, got {interval}")

        self.client = client
        self.callbacks = callbacks
        self.location = str(location.strip())
        self.interval = seconds
        self.logger = logger or logging.getLogger(__name__)
        self._fetcher_factory = fetcher_factory or WundergroundFetcher
        self._state = PollState.IDLE
        self._lock = threading.Lock()
        self._stop_requested = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.cycles = 0

    @property
    def state(self) -> PollState:
        return self._state

    @property
    def running(self) -> bool:
        return self._state is PollState.RUNNING

    def start(self) -> 'PollHandle':
        """Spawn the polling thread and return without waiting for a cycle."""
        with self._lock:
            if self._state is not PollState.IDLE:
                raise PollError(f"Poll for {self.location} already {self._state.name.lower()}")
            self._thread = threading.Thread(
                target=self._thread_main,
                name=f"wunderground-poll-{self.location}",
                daemon=True
            )
            self._state = PollState.RUNNING
            self._thread.start()

        self.logger.info(f"Polling {self.location} every {self.interval:g}s")
        return self

    def stop(self, timeout: Optional[float] = None) -> None:
        """Signal the loop to exit and wait until it has.

        Once this returns no further callbacks run for this handle.
        """
        with self._lock:
            if self._state is PollState.IDLE:
                self._state = PollState.STOPPED
                return
            if self._state is PollState.STOPPED:
                return
            self._state = PollState.STOPPING
            self._stop_requested.set()
            thread = self._thread

        if thread is threading.current_thread():
            # Called from one of our own callbacks; the loop exits after
            # the current dispatch.
            self.logger.debug(f"Stop requested from poll thread for {self.location}")
            return

        thread.join(timeout)
        if thread.is_alive():
            self.logger.warning(
                f"Poll thread for {self.location} still running after {timeout}s"
            )
            return

        with self._lock:
            self._state = PollState.STOPPED
        self.logger.info(f"Stopped polling {self.location} after {self.cycles} cycles")

    def __enter__(self) -> 'PollHandle':
        if self._state is PollState.IDLE:
            self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()

    def _thread_main(self) -> None:
        try:
            asyncio.run(self._run())
        except Exception:
            self.logger.exception(f"Poll loop for {self.location} crashed")
        finally:
            with self._lock:
                self._state = PollState.STOPPED

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        async with self._fetcher_factory(self.client, self.logger) as fetcher:
            while not self._stop_requested.is_set():
                await self._cycle(fetcher)
                if self._stop_requested.is_set():
                    break
                await loop.run_in_executor(None, self._stop_requested.wait, self.interval)

    async def _cycle(self, fetcher: WundergroundFetcher) -> None:
        """Run one fetch-parse-dispatch pass; failures end only this pass."""
        self.cycles += 1
        try:
            raw = await fetcher.fetch_current_conditions(self.location)
            snapshot = parse_current_conditions(raw)
        except (TransportError, ParseError) as e:
            self.logger.warning(f"Poll cycle {self.cycles} for {self.location} failed: {e}")
            return
        except Exception:
            self.logger.exception(f"Poll cycle {self.cycles} for {self.location} crashed")
            return

        if self._stop_requested.is_set():
            return

        try:
            dispatch(snapshot, self.callbacks)
        except Exception:
            self.logger.exception(f"Callback failed while polling {self.location}")
