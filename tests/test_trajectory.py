"""
tests/test_trajectory.py
~~~~~~~~~~~~~~~~~~~~~~~~
Trajectory Projector: forward projection, arc tessellation, route arcs.
"""

from __future__ import annotations

import math

import pytest

from flightglobe.models import FlightRoute
from flightglobe.trajectory import (
    ROUTE_STYLE,
    TRAJECTORY_STYLE,
    build_arc,
    build_route_arc,
    build_trajectory,
    forward_project,
    is_resolved,
    projection_distance_km,
    route_distance_km,
    route_midpoint,
    to_cartesian,
)


def _length(v) -> float:
    return math.sqrt(v.x ** 2 + v.y ** 2 + v.z ** 2)


def _route(**overrides) -> FlightRoute:
    route = FlightRoute(
        callsign="DAL1950",
        departure_airport="JFK",
        departure_lat=40.6413,
        departure_lng=-73.7781,
        arrival_airport="LAX",
        arrival_lat=33.9416,
        arrival_lng=-118.4085,
    )
    route.update(overrides)  # type: ignore[typeddict-item]
    return route


# ── Forward projection ───────────────────────────────────────────────────


def test_one_degree_east_along_equator() -> None:
    lat, lng = forward_project(0.0, 0.0, 90.0, 111.2)

    assert lat == pytest.approx(0.0, abs=1e-6)
    assert lng == pytest.approx(1.0, abs=0.01)


def test_due_north() -> None:
    lat, lng = forward_project(10.0, 20.0, 0.0, 111.2)

    assert lat == pytest.approx(11.0, abs=0.01)
    assert lng == pytest.approx(20.0, abs=1e-6)


def test_projection_distance_is_capped() -> None:
    assert projection_distance_km(200.0) == pytest.approx(240.0)
    assert projection_distance_km(3_000.0) == 2_500.0


# ── Heading arc ──────────────────────────────────────────────────────────


def test_heading_arc_for_cruising_aircraft(make_state) -> None:
    state = make_state(lat=0.0, lng=0.0, heading=90.0, velocity=200.0)

    arc = build_trajectory(state)

    assert arc is not None
    assert arc.end[0] == pytest.approx(0.0, abs=1e-6)
    assert arc.end[1] == pytest.approx(2.16, abs=0.01)
    assert len(arc.points) == TRAJECTORY_STYLE.segments + 1
    for p in arc.points:
        assert _length(p) == pytest.approx(TRAJECTORY_STYLE.radius)


@pytest.mark.parametrize(
    "overrides",
    [
        {"velocity": 29.9},
        {"velocity": 0.0},
        {"on_ground": True},
    ],
)
def test_no_heading_arc_when_slow_or_grounded(make_state, overrides) -> None:
    assert build_trajectory(make_state(**overrides)) is None


# ── Arc tessellation ─────────────────────────────────────────────────────


def test_arc_endpoints_match_inputs() -> None:
    points = build_arc(40.0, -74.0, 34.0, -118.0, 1.0, 16)

    assert len(points) == 17
    for got, want in ((points[0], to_cartesian(40.0, -74.0)), (points[-1], to_cartesian(34.0, -118.0))):
        assert got.x == pytest.approx(want.x)
        assert got.y == pytest.approx(want.y)
        assert got.z == pytest.approx(want.z)


def test_bump_peaks_at_midpoint_and_is_capped() -> None:
    radius = 100.5
    points = build_arc(0.0, 0.0, 0.0, 170.0, radius, 64, bump_cap=12.0)
    heights = [_length(p) - radius for p in points]

    assert heights[0] == pytest.approx(0.0, abs=1e-9)
    assert heights[-1] == pytest.approx(0.0, abs=1e-9)
    assert max(heights) == pytest.approx(heights[32])
    assert heights[32] == pytest.approx(12.0)


def test_small_bump_scales_with_chord() -> None:
    radius = 100.5
    points = build_arc(0.0, 0.0, 0.0, 10.0, radius, 2, bump_cap=12.0)
    chord = 2 * radius * math.sin(math.radians(10.0) / 2)

    assert _length(points[1]) - radius == pytest.approx(chord * 0.15)


def test_antipodal_arc_stays_finite() -> None:
    points = build_arc(0.0, 0.0, 0.0, 180.0, 1.0, 2)
    assert all(math.isfinite(c) for p in points for c in p)


def test_segment_count_must_be_positive() -> None:
    with pytest.raises(ValueError):
        build_arc(0.0, 0.0, 1.0, 1.0, 1.0, 0)


# ── Route arc ────────────────────────────────────────────────────────────


def test_route_arc_for_resolved_endpoints() -> None:
    arc = build_route_arc(_route())

    assert arc is not None
    assert len(arc.points) == ROUTE_STYLE.segments + 1
    assert arc.style.color == "#38bdf8"


@pytest.mark.parametrize(
    "overrides",
    [
        {"departure_lat": 0.0, "departure_lng": 0.0},
        {"arrival_lat": None},
        {"arrival_lng": float("nan")},
    ],
)
def test_unresolved_endpoint_draws_nothing(overrides) -> None:
    route = _route(**overrides)

    assert build_route_arc(route) is None
    assert route_midpoint(route) is None
    assert route_distance_km(route) is None


def test_is_resolved() -> None:
    assert is_resolved(0.0, 1.0)
    assert not is_resolved(0.0, 0.0)
    assert not is_resolved(None, 5.0)


def test_route_midpoint_and_distance() -> None:
    route = _route()

    mid = route_midpoint(route)
    assert mid == pytest.approx(((40.6413 + 33.9416) / 2, (-73.7781 - 118.4085) / 2))
    assert route_distance_km(route) == pytest.approx(3_975, rel=0.01)
