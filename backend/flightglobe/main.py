"""
main.py – FastAPI entry point
=============================

Two public operations, one health probe:

* ``GET /flights.json``        – live aircraft, optionally inside a bounding
  box (``lamin``/``lamax``/``lomin``/``lomax``).
* ``GET /flights/route.json``  – departure/arrival for ``?callsign=``,
  served from the 6 h resolution cache when possible.  Rate limited per
  client address (``ROUTE_RATE_LIMIT``) because each miss may cost a
  search credit.
* ``GET /healthz``             – ``ok``.

The resolver (with its cache) and the feed token cache are created once in
the lifespan and shared by every request of this process.
"""

from __future__ import annotations

# ─── Std-lib / third-party ────────────────────────────────────────────
import logging
import sys
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, PlainTextResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

# ─── Project modules ──────────────────────────────────────────────────
from .config import load_settings
from .errors import NotFoundError, UpstreamError, ValidationError
from .flight_service import get_live_snapshot
from .route_resolver import RouteResolver
from .token_service import TokenCache
from .trajectory import route_distance_km, route_midpoint

# ---------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------
SETTINGS = load_settings()

# ─── Logging ──────────────────────────────────────────────────────────
LOG = logging.getLogger("flightglobe")

_SERVICE_LOGGERS = (
    "flightglobe",
    "extapi",
    "flight_service",
    "token_service",
    "route_resolver",
    "route_strategies",
    "route_cache",
    "tracker",
    "interpolator",
)

_handler = logging.StreamHandler(sys.stdout)
_handler.setFormatter(logging.Formatter("%(levelname)s:     %(name)s - %(message)s"))
for _name in _SERVICE_LOGGERS:
    _logger = logging.getLogger(_name)
    _logger.addHandler(_handler)
    _logger.setLevel(SETTINGS.log_level.upper())

limiter = Limiter(key_func=get_remote_address)


# ---------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):  # noqa: N802 – FastAPI naming style
    app.state.token_cache = TokenCache(
        SETTINGS.opensky_client_id, SETTINGS.opensky_client_secret
    )
    app.state.resolver = RouteResolver(SETTINGS)
    if not SETTINGS.has_search_credential:
        LOG.warning("[init] SERPAPI_API_KEY not set – route lookups use the flight page only")
    if not SETTINGS.has_feed_credentials:
        LOG.info("[init] OpenSky credentials not set – polling anonymously")

    yield  # ⇢ application runs here

    app.state.resolver.cache.clear()


# ---------------------------------------------------------------------
# FastAPI instance & error mapping
# ---------------------------------------------------------------------
app = FastAPI(title="Flight Globe", lifespan=lifespan)
app.state.limiter = limiter


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    """Return 429 when rate limit is exceeded."""
    return JSONResponse(
        status_code=429,
        content={"detail": "Rate limit exceeded. Try again later."},
    )


@app.exception_handler(ValidationError)
async def validation_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"error": str(exc)})


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(
        status_code=404,
        content={"error": "Could not determine flight route", "callsign": exc.callsign},
    )


@app.exception_handler(UpstreamError)
async def upstream_handler(request: Request, exc: UpstreamError):
    what = f"{exc.source} responded {exc.status}" if exc.status else f"Failed to fetch {exc.source} data"
    return JSONResponse(status_code=502, content={"error": what, "detail": exc.detail or str(exc)})


# Health probe --------------------------------------------------------
@app.get("/healthz", response_class=PlainTextResponse)
async def healthz() -> PlainTextResponse:
    """Return HTTP 200 with body “ok” if the app is up."""
    return PlainTextResponse("ok", status_code=200)


# ---------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------
@app.get("/flights.json")
async def flights(
    request: Request,
    lamin: float | None = Query(None),
    lamax: float | None = Query(None),
    lomin: float | None = Query(None),
    lomax: float | None = Query(None),
) -> JSONResponse:
    """
    Live aircraft with a position: ``{"time", "count", "flights"}``.

    Only the bounding-box keys actually supplied are forwarded to OpenSky.
    """
    bbox = {
        key: value
        for key, value in (("lamin", lamin), ("lamax", lamax), ("lomin", lomin), ("lomax", lomax))
        if value is not None
    }
    snapshot = await get_live_snapshot(
        bbox,
        token_cache=request.app.state.token_cache,
        timeout=SETTINGS.http_timeout_s,
    )
    return JSONResponse(content=jsonable_encoder(snapshot))


@app.get("/flights/route.json")
@limiter.limit(SETTINGS.route_rate_limit)
async def flight_route(
    request: Request, callsign: str | None = Query(None)
) -> dict[str, Any]:
    """
    ``{"route": {...}, "distance_km": …, "focus": [lat, lng]}`` for *callsign*.

    400 without a callsign, 404 when every strategy came up empty.
    """
    if not callsign or not callsign.strip():
        raise ValidationError("callsign is required")

    route = await request.app.state.resolver.resolve_route(callsign)
    return {
        "route": route,
        "distance_km": route_distance_km(route),
        "focus": route_midpoint(route),
    }
