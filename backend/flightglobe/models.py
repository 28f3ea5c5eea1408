"""
models.py
~~~~~~~~~
Homogeneous record shapes passed between the feed, the resolver and the
presentation layer.  Plain ``TypedDict``s so they serialise to JSON as-is.
"""

from __future__ import annotations

from typing import TypedDict


class FlightState(TypedDict, total=False):
    """One aircraft's snapshot from a single poll; never built without lat/lng."""

    icao24: str
    callsign: str
    origin_country: str
    lat: float
    lng: float
    altitude: float  # metres, barometric (geometric fallback)
    velocity: float  # m/s ground speed
    heading: float  # degrees clockwise from north
    vertical_rate: float  # m/s
    on_ground: bool
    last_contact: int  # unix seconds
    squawk: str
    category: int


class PartialRoute(TypedDict, total=False):
    """What one route strategy managed to extract."""

    departure_code: str
    arrival_code: str
    departure_city: str
    arrival_city: str
    airline: str
    flight_number: str
    departure_time: str
    arrival_time: str
    status: str


class FlightRoute(TypedDict, total=False):
    """
    Resolved departure → arrival record.

    ``(0, 0)`` endpoint coordinates mean *unresolved*, never the Gulf of
    Guinea; ``cached`` is only ever set on a cache hit.
    """

    callsign: str
    airline: str | None
    flight_number: str | None
    departure_airport: str
    departure_city: str | None
    departure_lat: float
    departure_lng: float
    arrival_airport: str
    arrival_city: str | None
    arrival_lat: float
    arrival_lng: float
    departure_time: str | None
    arrival_time: str | None
    status: str | None
    cached: bool


class BoundingBox(TypedDict, total=False):
    """Optional feed filter; any subset of the four keys may be given."""

    lamin: float
    lamax: float
    lomin: float
    lomax: float


__all__ = ["BoundingBox", "FlightRoute", "FlightState", "PartialRoute"]
