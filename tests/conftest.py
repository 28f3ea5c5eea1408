"""
tests/conftest.py
~~~~~~~~~~~~~~~~~
Global pytest fixtures.

* ``clock`` – a settable UTC clock for the TTL caches.
* ``make_state`` – builds a :class:`FlightState` with sensible defaults.
* ``mock_client`` – wraps a handler in ``httpx.MockTransport`` and records
  every request it sees, for tests that count upstream calls.
"""

from __future__ import annotations

import datetime as dt
from typing import Any, Callable

import httpx
import pytest

from flightglobe.clock import UTC
from flightglobe.models import FlightState

pytest_plugins = ["pytest_asyncio"]


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: dt.datetime | None = None) -> None:
        self.now = start or dt.datetime(2026, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> dt.datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += dt.timedelta(**kwargs)


class RecordingClient:
    """``httpx.AsyncClient`` over a ``MockTransport`` that keeps its requests."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        self.transport = httpx.MockTransport(_record)

    def __call__(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self.transport)

    def hosts(self) -> list[str]:
        return [r.url.host for r in self.requests]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_state() -> Callable[..., FlightState]:
    def _make(icao24: str = "a1b2c3", **overrides: Any) -> FlightState:
        state = FlightState(
            icao24=icao24,
            callsign="DAL1950",
            origin_country="United States",
            lat=40.0,
            lng=-74.0,
            altitude=10_000.0,
            velocity=230.0,
            heading=270.0,
            vertical_rate=0.0,
            on_ground=False,
            last_contact=1_700_000_000,
            category=0,
        )
        state.update(overrides)  # type: ignore[typeddict-item]
        return state

    return _make


@pytest.fixture
def mock_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], RecordingClient]:
    return RecordingClient
