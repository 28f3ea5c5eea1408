"""
interpolator.py
~~~~~~~~~~~~~~~
Smooth the 15-second position jumps of the *selected* aircraft into
continuous motion, and keep one render handle per aircraft across refreshes.

State machine
-------------
* **inactive** – nothing selected; every call except :meth:`select` is a no-op.
* **active**   – tracking one ``icao24``.

  - first selection snaps ``current`` to the aircraft's position (no motion
    on the first frame);
  - re-selecting the same aircraft only moves ``target``;
  - each animation tick moves ``current`` 6 % of the way to ``target`` on
    lat, lng and heading independently – converging, never overshooting;
  - :meth:`deselect` drops everything.

The :class:`RenderRegistry` is keyed by ``icao24`` and updates handles in
place, so the renderer keeps the same visual instance for an aircraft from
one poll to the next.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Final, Iterable, Iterator

from .models import FlightState
from .trajectory import Arc, build_trajectory

LOG = logging.getLogger("interpolator")

SMOOTHING_FACTOR: Final[float] = 0.06


@dataclass
class Pose:
    lat: float
    lng: float
    heading: float

    @classmethod
    def of(cls, state: FlightState) -> "Pose":
        return cls(state["lat"], state["lng"], state.get("heading", 0.0))


class SelectedFlightInterpolator:
    """Per-selection exponential smoothing toward the latest known position."""

    def __init__(self, factor: float = SMOOTHING_FACTOR) -> None:
        if not 0.0 < factor <= 1.0:
            raise ValueError("factor must be in (0, 1]")
        self.factor = factor
        self.icao24: str | None = None
        self.current: Pose | None = None
        self.target: Pose | None = None
        self.altitude: float = 0.0

    @property
    def active(self) -> bool:
        return self.icao24 is not None

    def select(self, state: FlightState) -> None:
        if self.active and state.get("icao24") == self.icao24:
            self.retarget(state)
            return
        self.icao24 = state.get("icao24")
        self.current = Pose.of(state)
        self.target = Pose.of(state)
        self.altitude = state.get("altitude", 0.0)
        LOG.debug("[interp] tracking %s", self.icao24)

    def deselect(self) -> None:
        self.icao24 = None
        self.current = None
        self.target = None
        self.altitude = 0.0

    def retarget(self, state: FlightState) -> bool:
        """Point ``target`` at a fresh snapshot; ``current`` is untouched."""
        if not self.active or state.get("icao24") != self.icao24:
            return False
        self.target = Pose.of(state)
        self.altitude = state.get("altitude", 0.0)
        return True

    def tick(self) -> Pose | None:
        """Advance one animation frame and return the new ``current``."""
        if self.current is None or self.target is None:
            return None
        k = self.factor
        cur, tgt = self.current, self.target
        cur.lat += (tgt.lat - cur.lat) * k
        cur.lng += (tgt.lng - cur.lng) * k
        cur.heading += (tgt.heading - cur.heading) * k
        return cur


@dataclass
class RenderHandle:
    """What the scene draws for one aircraft; mutated in place by key."""

    icao24: str
    state: FlightState
    lat: float
    lng: float
    heading: float
    altitude: float
    trajectory: Arc | None = field(default=None, repr=False)

    def update(self, state: FlightState) -> None:
        self.state = state
        self.lat = state["lat"]
        self.lng = state["lng"]
        self.heading = state.get("heading", 0.0)
        self.altitude = state.get("altitude", 0.0)
        self.trajectory = build_trajectory(state)

    def place(self, pose: Pose) -> None:
        self.lat, self.lng, self.heading = pose.lat, pose.lng, pose.heading


class RenderRegistry:
    """``icao24`` → :class:`RenderHandle`, reconciled on every poll."""

    def __init__(self) -> None:
        self._handles: dict[str, RenderHandle] = {}

    def apply_snapshot(
        self, states: Iterable[FlightState], keep: str | None = None
    ) -> None:
        """
        Update existing handles in place, add new ones, and drop aircraft
        absent from *states* – except *keep* (the selection).
        """
        seen: set[str] = set()
        for state in states:
            key = state.get("icao24")
            if not key:
                continue
            seen.add(key)
            handle = self._handles.get(key)
            if handle is None:
                handle = RenderHandle(key, state, 0.0, 0.0, 0.0, 0.0)
                self._handles[key] = handle
            handle.update(state)
        for key in [k for k in self._handles if k not in seen and k != keep]:
            del self._handles[key]

    def place(self, icao24: str | None, pose: Pose | None) -> None:
        if icao24 is None or pose is None:
            return
        handle = self._handles.get(icao24)
        if handle is not None:
            handle.place(pose)

    def get(self, icao24: str) -> RenderHandle | None:
        return self._handles.get(icao24)

    def __contains__(self, icao24: object) -> bool:
        return icao24 in self._handles

    def __iter__(self) -> Iterator[RenderHandle]:
        return iter(list(self._handles.values()))

    def __len__(self) -> int:
        return len(self._handles)


__all__ = [
    "Pose",
    "RenderHandle",
    "RenderRegistry",
    "SMOOTHING_FACTOR",
    "SelectedFlightInterpolator",
]
