"""
route_resolver.py
~~~~~~~~~~~~~~~~~
Flight Route Resolver: callsign → :class:`FlightRoute`.

Flow for one lookup::

    normalise ─► cache hit? ──yes──► copy with cached=True
                    │no
                    ▼
         A search-structured ─► B search-organic ─► C flight-page
                    │ first registry-valid pair
                    ▼
         build record (registry coords / cities, carrier fallbacks)
                    │
                    ▼
         cache.put (unless the lookup was cancelled) ─► return

A strategy that raises :class:`UpstreamError` or :class:`ParseError` is
logged and skipped; only :class:`NotFoundError` leaves this module.
Cancellation (``asyncio.Task.cancel`` or the optional *cancel* event) is
never swallowed and never writes to the cache.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Sequence

import httpx

from .airports import get_airport
from .carriers import (
    ICAO_TO_NAME,
    Callsign,
    iata_flight_number,
    normalize_callsign,
    parse_callsign,
)
from .config import Settings
from .constants import USER_AGENT
from .errors import NotFoundError, ParseError, UpstreamError, ValidationError
from .models import FlightRoute, PartialRoute
from .route_cache import RouteCache
from .route_strategies import (
    DEFAULT_STRATEGIES,
    ResolveContext,
    RouteStrategy,
    build_search_queries,
)

LOG = logging.getLogger("route_resolver")

ClientFactory = Callable[[], httpx.AsyncClient]


def build_route(cs: Callsign, partial: PartialRoute) -> FlightRoute:
    """
    Merge a strategy's partial result with the registry and carrier table.

    The two codes in *partial* have already been validated against the
    registry; a missing coordinate would still fall back to ``0.0``.
    """
    dep_code = partial["departure_code"]
    arr_code = partial["arrival_code"]
    dep = get_airport(dep_code) or {}
    arr = get_airport(arr_code) or {}

    flight_number = partial.get("flight_number") or iata_flight_number(cs.clean)
    return FlightRoute(
        callsign=cs.clean,
        airline=partial.get("airline") or ICAO_TO_NAME.get(cs.icao_prefix),
        flight_number=flight_number,
        departure_airport=dep_code,
        departure_city=partial.get("departure_city") or dep.get("city"),
        departure_lat=dep.get("lat", 0.0),
        departure_lng=dep.get("lng", 0.0),
        arrival_airport=arr_code,
        arrival_city=partial.get("arrival_city") or arr.get("city"),
        arrival_lat=arr.get("lat", 0.0),
        arrival_lng=arr.get("lng", 0.0),
        departure_time=partial.get("departure_time"),
        arrival_time=partial.get("arrival_time"),
        status=partial.get("status"),
        cached=False,
    )


def _check_cancel(cancel: asyncio.Event | None, key: str) -> None:
    if cancel is not None and cancel.is_set():
        LOG.debug("[route] lookup for %s cancelled", key)
        raise asyncio.CancelledError(f"route lookup for {key} cancelled")


class RouteResolver:
    """Strategy chain in front of a :class:`RouteCache`."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        cache: RouteCache | None = None,
        strategies: Sequence[RouteStrategy] = DEFAULT_STRATEGIES,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.cache = (
            cache if cache is not None else RouteCache(ttl_s=self.settings.route_cache_ttl_s)
        )
        self.strategies = tuple(strategies)
        self._client_factory = client_factory or self._default_client

    def _default_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.settings.http_timeout_s,
            headers={"User-Agent": USER_AGENT},
            follow_redirects=True,
        )

    async def resolve_route(
        self, callsign: str | None, *, cancel: asyncio.Event | None = None
    ) -> FlightRoute:
        """
        Resolve *callsign* to a route record.

        Raises
        ------
        ValidationError
            Callsign empty after whitespace removal.
        NotFoundError
            No strategy produced a registry-valid airport pair.
        asyncio.CancelledError
            The lookup was cancelled; nothing was cached.
        """
        key = normalize_callsign(callsign)
        if not key:
            raise ValidationError("callsign is required")

        hit = self.cache.get(key)
        if hit is not None:
            LOG.info("[route] %s cache hit", key)
            hit["cached"] = True
            return hit

        cs = parse_callsign(key)
        async with self._client_factory() as client:
            partial = await self._run_chain(cs, client, cancel)

        if partial is None:
            LOG.info("[route] %s not found by any strategy", key)
            raise NotFoundError(key)

        _check_cancel(cancel, key)
        route = build_route(cs, partial)
        self.cache.put(key, route)
        return route

    async def _run_chain(
        self,
        cs: Callsign,
        client: httpx.AsyncClient,
        cancel: asyncio.Event | None,
    ) -> PartialRoute | None:
        ctx = ResolveContext(
            client=client,
            api_key=self.settings.serpapi_api_key.strip(),
            search_timeout=self.settings.http_timeout_s,
            page_timeout=self.settings.page_timeout_s,
            queries=build_search_queries(cs),
        )
        for strategy in self.strategies:
            _check_cancel(cancel, cs.clean)
            try:
                partial = await strategy.try_resolve(cs, ctx)
            except UpstreamError as exc:
                LOG.warning("[route] %s %s: %s", cs.clean, strategy.name, exc)
                continue
            except ParseError as exc:
                LOG.info("[route] %s", exc)
                continue
            if partial is None:
                LOG.debug("[route] %s skipped for %s", strategy.name, cs.clean)
                continue
            LOG.info(
                "[route] %s %s → %s via %s",
                cs.clean,
                partial["departure_code"],
                partial["arrival_code"],
                strategy.name,
            )
            return partial
        return None


__all__ = ["RouteResolver", "build_route"]
