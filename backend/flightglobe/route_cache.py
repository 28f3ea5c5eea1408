"""
route_cache.py
~~~~~~~~~~~~~~
Resolution Cache: normalised callsign → :class:`FlightRoute`, time-boxed.

* Entries expire ``ttl_s`` after they are written (6 h by default).
* Expiry is checked on read only: an expired entry behaves exactly like a
  missing one and is dropped at that moment.  There is no size bound.
* Only successful resolutions are stored; there is no negative caching.
* The clock is injectable so tests can jump past the TTL.

Process-local and unsynchronised – each worker keeps its own copy.
"""

from __future__ import annotations

import datetime as dt
import logging

from .clock import Clock, utcnow
from .constants import ROUTE_CACHE_TTL_S
from .models import FlightRoute

LOG = logging.getLogger("route_cache")


class RouteCache:
    """TTL-bounded in-memory store of resolved routes."""

    def __init__(self, ttl_s: int = ROUTE_CACHE_TTL_S, clock: Clock = utcnow) -> None:
        self.ttl = dt.timedelta(seconds=ttl_s)
        self._clock = clock
        self._entries: dict[str, tuple[FlightRoute, dt.datetime]] = {}

    def get(self, key: str) -> FlightRoute | None:
        """Return a *copy* of the stored route, or ``None`` on miss/expiry."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        route, expires_at = entry
        if not self._clock() < expires_at:
            LOG.debug("[route_cache] %s expired at %s", key, expires_at.isoformat())
            del self._entries[key]
            return None
        return FlightRoute(**route)

    def put(self, key: str, route: FlightRoute) -> None:
        expires_at = self._clock() + self.ttl
        stored = FlightRoute(**route)
        stored.pop("cached", None)
        self._entries[key] = (stored, expires_at)
        LOG.info("[route_cache] stored %s until %s", key, expires_at.isoformat())

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        self._entries.clear()


__all__ = ["RouteCache"]
