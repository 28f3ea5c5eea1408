"""
tests/test_route_cache.py
~~~~~~~~~~~~~~~~~~~~~~~~~
Resolution Cache: TTL expiry on read, copies out, no ``cached`` flag stored.
"""

from __future__ import annotations

from flightglobe.models import FlightRoute
from flightglobe.route_cache import RouteCache


def _route() -> FlightRoute:
    return FlightRoute(
        callsign="DAL1950",
        departure_airport="JFK",
        arrival_airport="LAX",
        departure_lat=40.6413,
        departure_lng=-73.7781,
        arrival_lat=33.9416,
        arrival_lng=-118.4085,
        cached=False,
    )


def test_hit_before_ttl(clock) -> None:
    cache = RouteCache(ttl_s=6 * 3600, clock=clock)
    cache.put("DAL1950", _route())

    clock.advance(hours=5, minutes=59)
    hit = cache.get("DAL1950")

    assert hit is not None
    assert hit["arrival_airport"] == "LAX"
    assert "cached" not in hit


def test_expired_entry_is_a_miss_and_dropped(clock) -> None:
    cache = RouteCache(ttl_s=6 * 3600, clock=clock)
    cache.put("DAL1950", _route())

    clock.advance(hours=6)

    assert cache.get("DAL1950") is None
    assert len(cache) == 0


def test_get_returns_a_copy(clock) -> None:
    cache = RouteCache(clock=clock)
    cache.put("DAL1950", _route())

    first = cache.get("DAL1950")
    first["arrival_airport"] = "SFO"  # type: ignore[index]

    assert cache.get("DAL1950")["arrival_airport"] == "LAX"  # type: ignore[index]


def test_put_overwrites_and_restarts_ttl(clock) -> None:
    cache = RouteCache(ttl_s=60, clock=clock)
    cache.put("DAL1950", _route())
    clock.advance(seconds=50)
    cache.put("DAL1950", _route())
    clock.advance(seconds=50)

    assert "DAL1950" in cache
    assert "UAL1" not in cache


def test_clear(clock) -> None:
    cache = RouteCache(clock=clock)
    cache.put("DAL1950", _route())
    cache.clear()
    assert cache.get("DAL1950") is None
