"""Request lifecycle for the weather card: Idle, Loading, Error, Success."""
import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional, Union

from local_clock import LocalClock
from view_model import ViewModel, build_view_model
from weather_data import WeatherReport, METRIC, UNIT_SYSTEMS
from weather_provider import WeatherProviderBase, WeatherProviderError, ConfigurationError


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Loading:
    query: str


@dataclass(frozen=True)
class Error:
    message: str
    kind: str = "service"


@dataclass(frozen=True)
class Success:
    report: WeatherReport


RequestState = Union[Idle, Loading, Error, Success]
Listener = Callable[["FetchController"], None]


class RequestHandle:
    """Cancellation token for one issued request."""

    def __init__(self, generation: int, query: str, units: str, task: "asyncio.Task"):
        self.generation = generation
        self.query = query
        self.units = units
        self._task = task
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True
        self._task.cancel()

    def done(self) -> bool:
        return self._task.done()

    async def wait(self) -> None:
        """Wait until the request has resolved or been cancelled."""
        await asyncio.wait({self._task})


class FetchController:
    """
    Owns the request state for the current query.

    Every query change or retry starts a new request generation; results of
    older generations are discarded, so only the latest request can change
    the state. On success the local clock is restarted from the report's
    UTC offset.

    Must be driven from inside a running asyncio event loop.
    """

    def __init__(
        self,
        provider: WeatherProviderBase,
        api_key: Optional[str],
        units: str = METRIC,
        clock: Optional[LocalClock] = None
    ):
        """
        Args:
            provider: Weather provider used to issue requests
            api_key: Configured credential; without it every query fails
                with a configuration error and no request is made
            units: Initial unit system ("metric" or "imperial")
            clock: Local clock to drive (a 1-second clock by default)
        """
        if units not in UNIT_SYSTEMS:
            raise ValueError(f"Unsupported unit system: {units}")
        self.provider = provider
        self.api_key = api_key
        self.units = units
        self.clock = clock or LocalClock()
        self.clock.on_tick = self._on_clock_tick
        self.query = ""
        self._state: RequestState = Idle()
        self._generation = 0
        self._request: Optional[RequestHandle] = None
        self._listeners: List[Listener] = []

    @property
    def state(self) -> RequestState:
        return self._state

    @property
    def local_time(self) -> Optional[datetime]:
        return self.clock.local_time

    @property
    def view_model(self) -> Optional[ViewModel]:
        if isinstance(self._state, Success):
            return build_view_model(self._state.report, self.units)
        return None

    def subscribe(self, listener: Listener) -> None:
        """Call `listener(controller)` after every transition and clock tick."""
        self._listeners.append(listener)

    def set_query(self, query: Optional[str]) -> Optional[RequestHandle]:
        """
        Switch to a new query.

        A blank query returns to Idle. Anything else cancels the previous
        request and starts a new one; the returned handle can be awaited or
        cancelled. Returns None when no request was issued.
        """
        self.query = (query or "").strip()
        self._reset()
        if not self.query:
            logging.info("Query cleared")
            self._transition(Idle())
            return None
        return self._start_fetch()

    def retry(self) -> Optional[RequestHandle]:
        """Re-issue the request for the current query."""
        if not self.query:
            return None
        logging.info(f"Retrying query '{self.query}'")
        self._reset()
        return self._start_fetch()

    def set_units(self, units: str) -> None:
        """Switch unit system; the held report is re-derived, not re-fetched."""
        if units not in UNIT_SYSTEMS:
            raise ValueError(f"Unsupported unit system: {units}")
        if units == self.units:
            return
        logging.info(f"Unit system changed: {self.units} -> {units}")
        self.units = units
        self._notify()

    def toggle_units(self) -> str:
        self.set_units("imperial" if self.units == METRIC else METRIC)
        return self.units

    def close(self) -> None:
        """Tear down: cancel any in-flight request and the clock."""
        self._reset()

    def _reset(self) -> None:
        if self._request is not None and not self._request.done():
            logging.debug(f"Cancelling request {self._request.generation} for '{self._request.query}'")
            self._request.cancel()
        self._request = None
        self.clock.stop()

    def _start_fetch(self) -> Optional[RequestHandle]:
        if not self.api_key:
            error = ConfigurationError()
            logging.error(f"Cannot fetch '{self.query}': {error}")
            self._transition(Error(str(error), error.kind))
            return None

        self._generation += 1
        generation = self._generation
        self._transition(Loading(self.query))
        task = asyncio.get_running_loop().create_task(
            self._fetch(generation, self.query, self.units)
        )
        self._request = RequestHandle(generation, self.query, self.units, task)
        logging.debug(f"Issued request {generation} for '{self.query}' ({self.units})")
        return self._request

    def _is_current(self, generation: int) -> bool:
        request = self._request
        return request is not None and request.generation == generation and not request.cancelled

    async def _fetch(self, generation: int, query: str, units: str) -> None:
        try:
            report = await asyncio.to_thread(self.provider.get_current, query, units)
        except asyncio.CancelledError:
            logging.debug(f"Request {generation} for '{query}' cancelled")
            return
        except WeatherProviderError as err:
            if self._is_current(generation):
                logging.warning(f"Weather fetch for '{query}' failed: {err}")
                self._transition(Error(str(err), err.kind))
            return
        except Exception as exc:
            logging.exception(f"Unexpected error fetching '{query}': {exc}")
            if self._is_current(generation):
                self._transition(Error(f"Unexpected error: {exc}", "service"))
            return

        if not self._is_current(generation):
            logging.debug(f"Discarding stale result of request {generation} for '{query}'")
            return
        self._request = None
        self.clock.start(report.timezone_offset, report.timestamp)
        self._transition(Success(report))

    def _transition(self, state: RequestState) -> None:
        logging.debug(f"State {type(self._state).__name__} -> {type(state).__name__}")
        self._state = state
        self._notify()

    def _on_clock_tick(self, _local_time: datetime) -> None:
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)
