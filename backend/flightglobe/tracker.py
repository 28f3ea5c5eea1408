"""
tracker.py
~~~~~~~~~~
One viewer's tracking session: the live poll, the selection, the smoothed
position of the selected aircraft and its route lookup.

* :meth:`FlightTracker.run` refreshes the feed every ``poll_interval_s``
  seconds, one refresh at a time.  A feed failure keeps the last snapshot
  and sets :attr:`feed_error` until the next good poll.
* :meth:`FlightTracker.select` snaps the interpolator to the aircraft and,
  for a routable callsign, starts **one** route lookup.  Selecting another
  aircraft (or deselecting) cancels the outstanding lookup first; a
  cancelled lookup never touches the cache or the session's route fields.
* :meth:`FlightTracker.apply_snapshot` keeps the rendered position of the
  selected aircraft where the interpolator had it, so a refresh only moves
  the target.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from dataclasses import replace
from typing import Awaitable, Callable, Iterable

from .carriers import is_routable
from .constants import POLL_INTERVAL_S
from .errors import NotFoundError, UpstreamError, ValidationError
from .flight_service import filter_flights, get_live_states, globe_flights
from .interpolator import Pose, RenderRegistry, SelectedFlightInterpolator
from .models import BoundingBox, FlightRoute, FlightState
from .route_resolver import RouteResolver
from .token_service import TokenCache
from .trajectory import Arc, build_route_arc, route_midpoint

LOG = logging.getLogger("tracker")

NO_ROUTE_MESSAGE = "no route data available"

FetchStates = Callable[[BoundingBox | None], Awaitable[list[FlightState]]]


class FlightTracker:
    """Poll loop + selection state for a single consumer."""

    def __init__(
        self,
        resolver: RouteResolver,
        *,
        fetch: FetchStates | None = None,
        token_cache: TokenCache | None = None,
        bbox: BoundingBox | None = None,
        poll_interval_s: float = POLL_INTERVAL_S,
        interpolator: SelectedFlightInterpolator | None = None,
    ) -> None:
        self.resolver = resolver
        self.token_cache = token_cache
        self.bbox = bbox
        self.poll_interval_s = poll_interval_s
        self._fetch = fetch or self._fetch_live

        self.flights: list[FlightState] = []
        self.previous: list[FlightState] = []
        self.registry = RenderRegistry()
        self.interpolator = interpolator or SelectedFlightInterpolator()
        self.selected_icao: str | None = None

        self.route: FlightRoute | None = None
        self.route_error: str | None = None
        self.route_loading = False
        self.feed_error: str | None = None
        self.feed_loading = False

        self._route_task: asyncio.Task | None = None
        self._route_cancel: asyncio.Event | None = None

    async def _fetch_live(self, bbox: BoundingBox | None) -> list[FlightState]:
        return await get_live_states(bbox, token_cache=self.token_cache)

    # ── Live feed ────────────────────────────────────────────────────────

    async def refresh(self) -> bool:
        """Run one poll; ``False`` when the feed failed (snapshot kept)."""
        self.feed_loading = True
        try:
            states = await self._fetch(self.bbox)
        except UpstreamError as exc:
            LOG.warning("[poll] feed unavailable: %s", exc)
            self.feed_error = str(exc)
            return False
        finally:
            self.feed_loading = False
        self.feed_error = None
        self.apply_snapshot(states)
        return True

    def apply_snapshot(self, states: Iterable[FlightState]) -> None:
        states = list(states)
        current = self.interpolator.current
        pose = replace(current) if current is not None else None

        self.previous, self.flights = self.flights, states
        self.registry.apply_snapshot(states, keep=self.selected_icao)

        if self.selected_icao is not None:
            fresh = self._find(self.selected_icao, states)
            if fresh is not None:
                self.interpolator.retarget(fresh)
            self.registry.place(self.selected_icao, pose)

    async def run(self, stop: asyncio.Event | None = None) -> None:
        """Poll until *stop* is set (or the task is cancelled)."""
        stop = stop or asyncio.Event()
        while not stop.is_set():
            try:
                await self.refresh()
            except Exception as exc:  # noqa: BLE001
                LOG.error("[poll] crashed: %s", exc, exc_info=True)
                self.feed_error = str(exc)
            with contextlib.suppress(asyncio.TimeoutError):
                await asyncio.wait_for(stop.wait(), timeout=self.poll_interval_s)

    # ── Selection ────────────────────────────────────────────────────────

    @property
    def selected(self) -> FlightState | None:
        if self.selected_icao is None:
            return None
        return self._find(self.selected_icao, self.flights) or self._find(
            self.selected_icao, self.previous
        )

    def select(self, icao24: str) -> bool:
        """
        Select an aircraft from the current snapshot.

        Must be called from a running event loop when the callsign is
        routable, since the route lookup is scheduled as a task.
        """
        state = self._find(icao24, self.flights)
        if state is None:
            LOG.debug("[select] %s not in snapshot", icao24)
            return False

        same = icao24 == self.selected_icao
        self.interpolator.select(state)
        self.selected_icao = icao24
        if not same:
            self.registry.place(icao24, self.interpolator.current)
            self._start_route_lookup(state.get("callsign", ""))
        return True

    def deselect(self) -> None:
        self._cancel_route_lookup()
        self.interpolator.deselect()
        self.selected_icao = None
        self.route = None
        self.route_error = None
        self.route_loading = False

    def tick(self) -> Pose | None:
        """One animation frame for the selected aircraft."""
        pose = self.interpolator.tick()
        self.registry.place(self.selected_icao, pose)
        return pose

    def visible(self, text: str = "", country: str | None = None) -> list[FlightState]:
        """Aircraft to draw: the filtered list plus the selection."""
        matches = filter_flights(self.flights, text, country)
        return globe_flights(
            matches, bool(text.strip() or country), self.selected_icao, self.previous
        )

    @property
    def route_arc(self) -> Arc | None:
        return build_route_arc(self.route) if self.route else None

    @property
    def focus(self) -> tuple[float, float] | None:
        return route_midpoint(self.route) if self.route else None

    # ── Route lookup ─────────────────────────────────────────────────────

    def _start_route_lookup(self, callsign: str) -> None:
        self._cancel_route_lookup()
        self.route = None
        self.route_error = None
        if not is_routable(callsign):
            self.route_loading = False
            return

        cancel = asyncio.Event()
        self._route_cancel = cancel
        self.route_loading = True
        self._route_task = asyncio.get_running_loop().create_task(
            self._lookup(callsign, cancel)
        )

    def _cancel_route_lookup(self) -> None:
        if self._route_cancel is not None:
            self._route_cancel.set()
        if self._route_task is not None and not self._route_task.done():
            self._route_task.cancel()
        self._route_cancel = None
        self._route_task = None

    async def _lookup(self, callsign: str, cancel: asyncio.Event) -> None:
        try:
            route = await self.resolver.resolve_route(callsign, cancel=cancel)
        except (NotFoundError, ValidationError) as exc:
            if not cancel.is_set():
                LOG.info("[select] %s", exc)
                self.route_error = NO_ROUTE_MESSAGE
        except Exception as exc:  # noqa: BLE001
            if not cancel.is_set():
                LOG.error("[select] route lookup failed: %s", exc, exc_info=True)
                self.route_error = NO_ROUTE_MESSAGE
        else:
            if not cancel.is_set():
                self.route = route
        finally:
            if not cancel.is_set():
                self.route_loading = False

    async def wait_for_route(self) -> None:
        """Await the outstanding lookup, if any (tests and shutdown)."""
        task = self._route_task
        if task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def close(self) -> None:
        task = self._route_task
        self._cancel_route_lookup()
        if task is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    @staticmethod
    def _find(icao24: str, states: Iterable[FlightState]) -> FlightState | None:
        return next((s for s in states if s.get("icao24") == icao24), None)


__all__ = ["FlightTracker", "NO_ROUTE_MESSAGE"]
