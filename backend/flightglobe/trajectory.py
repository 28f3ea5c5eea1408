"""
trajectory.py
~~~~~~~~~~~~~
Trajectory Projector – pure spherical geometry for the globe overlays.

Two shapes share one code path (:func:`build_arc`):

* **Predictive heading arc** – where the aircraft will be ~20 min from now
  if it holds ground speed and track.  Skipped for slow (< 30 m/s) or
  grounded aircraft and for projections shorter than 10 km.
* **Route arc** – departure → arrival, lifted above the sphere by a sine
  bump that peaks at the midpoint.

Arc samples are linear interpolations between the two unit vectors,
re-normalised onto the sphere.  That is not a true slerp, but at these
segment counts the difference is invisible.  Projections are a visual
approximation, not flight planning.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Final, NamedTuple

from geopy.distance import great_circle

from .constants import EARTH_RADIUS_KM, GLOBE_RADIUS
from .models import FlightRoute, FlightState

#: Seconds of flight projected ahead of the aircraft.
PROJECTION_WINDOW_S: Final[int] = 1_200
MAX_PROJECTION_KM: Final[float] = 2_500.0
MIN_PROJECTION_KM: Final[float] = 10.0
MIN_PROJECTION_SPEED_MS: Final[float] = 30.0

BUMP_FACTOR: Final[float] = 0.15


class Vec3(NamedTuple):
    x: float
    y: float
    z: float


@dataclass(frozen=True)
class ArcStyle:
    radius: float
    segments: int
    tube_radius: float
    color: str
    bump_cap: float | None = None  # None ⇒ no altitude bump


TRAJECTORY_STYLE: Final = ArcStyle(
    radius=GLOBE_RADIUS + 0.8, segments=32, tube_radius=0.12, color="#fbbf24"
)
ROUTE_STYLE: Final = ArcStyle(
    radius=GLOBE_RADIUS + 0.5, segments=64, tube_radius=0.25, color="#38bdf8",
    bump_cap=12.0,
)


@dataclass(frozen=True)
class Arc:
    points: list[Vec3]
    style: ArcStyle
    start: tuple[float, float]
    end: tuple[float, float]


# ── Spherical helpers ────────────────────────────────────────────────────


def forward_project(
    lat: float, lng: float, heading_deg: float, distance_km: float
) -> tuple[float, float]:
    """
    Destination point after *distance_km* along initial bearing *heading_deg*
    on a sphere of mean Earth radius (6371 km).
    """
    dest = great_circle(kilometers=distance_km, radius=EARTH_RADIUS_KM).destination(
        (lat, lng), bearing=heading_deg
    )
    return dest.latitude, dest.longitude


def projection_distance_km(velocity_ms: float, window_s: float = PROJECTION_WINDOW_S) -> float:
    return min(velocity_ms * window_s / 1000.0, MAX_PROJECTION_KM)


def is_resolved(lat: float | None, lng: float | None) -> bool:
    """``(0, 0)``, ``None`` and non-finite coordinates mean *unresolved*."""
    if lat is None or lng is None:
        return False
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return False
    return not (lat == 0 and lng == 0)


def to_cartesian(lat: float, lng: float, radius: float = 1.0) -> Vec3:
    """Globe scene coordinates (y up, same convention as three-globe)."""
    phi = math.radians(90.0 - lat)
    theta = math.radians(90.0 - lng)
    return Vec3(
        radius * math.sin(phi) * math.cos(theta),
        radius * math.cos(phi),
        radius * math.sin(phi) * math.sin(theta),
    )


def _scale(v: Vec3, k: float) -> Vec3:
    return Vec3(v.x * k, v.y * k, v.z * k)


def _norm(v: Vec3) -> float:
    return math.sqrt(v.x * v.x + v.y * v.y + v.z * v.z)


# ── Arc tessellation ─────────────────────────────────────────────────────


def build_arc(
    start_lat: float,
    start_lng: float,
    end_lat: float,
    end_lng: float,
    altitude_radius: float,
    segment_count: int,
    *,
    bump_cap: float | None = None,
) -> list[Vec3]:
    """
    Return ``segment_count + 1`` points from start to end at *altitude_radius*.

    With *bump_cap* set, each sample is pushed outward by
    ``sin(t·π) · min(chord · 0.15, bump_cap)`` where *chord* is the straight
    distance between the endpoints in scene units.
    """
    if segment_count < 1:
        raise ValueError("segment_count must be >= 1")

    a = to_cartesian(start_lat, start_lng)
    b = to_cartesian(end_lat, end_lng)
    lift = 0.0
    if bump_cap is not None:
        chord = _norm(Vec3(b.x - a.x, b.y - a.y, b.z - a.z)) * altitude_radius
        lift = min(chord * BUMP_FACTOR, bump_cap)

    points: list[Vec3] = []
    prev_unit = a
    for i in range(segment_count + 1):
        t = i / segment_count
        v = Vec3(
            a.x + (b.x - a.x) * t,
            a.y + (b.y - a.y) * t,
            a.z + (b.z - a.z) * t,
        )
        length = _norm(v)
        # antipodal endpoints pass through the centre at t=0.5
        unit = prev_unit if length < 1e-9 else _scale(v, 1.0 / length)
        prev_unit = unit
        r = altitude_radius + math.sin(t * math.pi) * lift
        points.append(_scale(unit, r))
    return points


def build_trajectory(
    state: FlightState, style: ArcStyle = TRAJECTORY_STYLE
) -> Arc | None:
    """Predictive heading arc for one aircraft, or ``None`` when not drawn."""
    if state.get("on_ground"):
        return None
    velocity = state.get("velocity") or 0.0
    if velocity < MIN_PROJECTION_SPEED_MS:
        return None
    distance = projection_distance_km(velocity)
    if distance < MIN_PROJECTION_KM:
        return None

    lat, lng = state["lat"], state["lng"]
    end = forward_project(lat, lng, state.get("heading") or 0.0, distance)
    points = build_arc(lat, lng, end[0], end[1], style.radius, style.segments)
    return Arc(points=points, style=style, start=(lat, lng), end=end)


def build_route_arc(route: FlightRoute, style: ArcStyle = ROUTE_STYLE) -> Arc | None:
    """Departure → arrival arc, or ``None`` if either endpoint is unresolved."""
    start = (route.get("departure_lat"), route.get("departure_lng"))
    end = (route.get("arrival_lat"), route.get("arrival_lng"))
    if not (is_resolved(*start) and is_resolved(*end)):
        return None
    points = build_arc(
        start[0], start[1], end[0], end[1], style.radius, style.segments,
        bump_cap=style.bump_cap,
    )
    return Arc(points=points, style=style, start=start, end=end)  # type: ignore[arg-type]


def route_midpoint(route: FlightRoute) -> tuple[float, float] | None:
    """Arithmetic midpoint used as the camera focus for a resolved route."""
    dep = (route.get("departure_lat"), route.get("departure_lng"))
    arr = (route.get("arrival_lat"), route.get("arrival_lng"))
    if not (is_resolved(*dep) and is_resolved(*arr)):
        return None
    return (dep[0] + arr[0]) / 2, (dep[1] + arr[1]) / 2  # type: ignore[operator]


def route_distance_km(route: FlightRoute) -> float | None:
    dep = (route.get("departure_lat"), route.get("departure_lng"))
    arr = (route.get("arrival_lat"), route.get("arrival_lng"))
    if not (is_resolved(*dep) and is_resolved(*arr)):
        return None
    return great_circle(dep, arr, radius=EARTH_RADIUS_KM).km


__all__ = [
    "Arc",
    "ArcStyle",
    "ROUTE_STYLE",
    "TRAJECTORY_STYLE",
    "Vec3",
    "build_arc",
    "build_route_arc",
    "build_trajectory",
    "forward_project",
    "is_resolved",
    "projection_distance_km",
    "route_distance_km",
    "route_midpoint",
    "to_cartesian",
]
