"""flight_service.py
~~~~~~~~~~~~~~~~~~~~
Poll the **OpenSky** ``/states/all`` feed and turn its positional arrays into
a stable list of :class:`FlightState` records.

* Feed credentials are optional.  With them we attach an OAuth2 bearer token
  (see :pyfile:`token_service.py`); without them – or when the token exchange
  fails – we poll anonymously (rate-limited but functional).
* A malformed envelope yields an empty list; only transport failures and
  non-2xx answers surface, as :class:`UpstreamError`.
* The list helpers at the bottom (filter, sort, country tally, globe set)
  feed the flight panel and keep the selected aircraft on screen.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from typing import Any, Final, Iterable, Literal, Sequence, TypedDict

import httpx

from .api_logging import logged_request_async
from .carriers import category_label, short_airline
from .constants import HTTP_TIMEOUT_S, OPENSKY_STATES_URL, USER_AGENT
from .errors import AuthError, ValidationError
from .models import BoundingBox, FlightState
from .token_service import TokenCache

LOG = logging.getLogger("flight_service")

# OpenSky state vector layout (18 elements with extended=1):
# [0]=icao24, [1]=callsign, [2]=origin_country, [3]=time_position,
# [4]=last_contact, [5]=longitude, [6]=latitude, [7]=baro_altitude,
# [8]=on_ground, [9]=velocity, [10]=true_track, [11]=vertical_rate,
# [12]=sensors, [13]=geo_altitude, [14]=squawk, [15]=spi,
# [16]=position_source, [17]=category
ICAO24, CALLSIGN, COUNTRY, TIME_POSITION, LAST_CONTACT = range(5)
LNG, LAT, BARO_ALT, ON_GROUND, VELOCITY, HEADING, VERTICAL_RATE = range(5, 12)
GEO_ALT, SQUAWK, CATEGORY = 13, 14, 17

BBOX_KEYS: Final = ("lamin", "lamax", "lomin", "lomax")

#: Countries pinned to the top of the quick-filter list.
PINNED_COUNTRIES: Final = (
    "United States", "China", "United Kingdom", "Germany", "France",
    "Japan", "Canada", "Australia", "Brazil", "India",
)


class LiveSnapshot(TypedDict):
    time: int | None
    count: int
    flights: list[FlightState]


# ── Normalizer ───────────────────────────────────────────────────────────


def _at(vector: Sequence[Any], index: int) -> Any:
    return vector[index] if index < len(vector) else None


def _first(*values: Any) -> Any:
    """First value that is not ``None`` (``0`` and ``False`` count)."""
    return next((v for v in values if v is not None), None)


def normalize_state(vector: Any) -> FlightState | None:
    """Map one positional array to a :class:`FlightState`, or ``None``."""
    if not isinstance(vector, (list, tuple)):
        return None

    lat = _at(vector, LAT)
    lng = _at(vector, LNG)
    if lat is None or lng is None:
        return None  # no position → never materialised

    state = FlightState(
        icao24=_at(vector, ICAO24) or "",
        callsign=(_at(vector, CALLSIGN) or "").strip(),
        origin_country=_at(vector, COUNTRY) or "",
        lat=float(lat),
        lng=float(lng),
        altitude=float(_first(_at(vector, BARO_ALT), _at(vector, GEO_ALT), 0)),
        velocity=float(_first(_at(vector, VELOCITY), 0)),
        heading=float(_first(_at(vector, HEADING), 0)),
        vertical_rate=float(_first(_at(vector, VERTICAL_RATE), 0)),
        on_ground=bool(_at(vector, ON_GROUND)),
        last_contact=int(_first(_at(vector, LAST_CONTACT), 0)),
        category=int(_first(_at(vector, CATEGORY), 0)),
    )
    squawk = _at(vector, SQUAWK)
    if squawk is not None:
        state["squawk"] = str(squawk)
    return state


def normalize_states(states: Any) -> list[FlightState]:
    """
    Pure transform of the feed's ``states`` array.

    Records without latitude or longitude are dropped; every other record is
    kept, in feed order.  Anything that is not an array yields ``[]``.
    """
    if not isinstance(states, list):
        return []
    out: list[FlightState] = []
    for vector in states:
        state = normalize_state(vector)
        if state is not None:
            out.append(state)
    return out


# ── Feed client ──────────────────────────────────────────────────────────


def bbox_params(bbox: BoundingBox | dict[str, Any] | None) -> dict[str, str]:
    """Keep only the bounding-box keys actually provided, validated."""
    if not bbox:
        return {}
    params: dict[str, str] = {}
    for key in BBOX_KEYS:
        raw = bbox.get(key)
        if raw is None or raw == "":
            continue
        try:
            value = float(raw)
        except (TypeError, ValueError) as exc:
            raise ValidationError(f"{key} must be numeric, got {raw!r}") from exc
        limit = 90.0 if key.startswith("la") else 180.0
        if not math.isfinite(value) or abs(value) > limit:
            raise ValidationError(f"{key} out of range: {value}")
        params[key] = raw.strip() if isinstance(raw, str) else repr(raw)
    return params


async def get_live_snapshot(
    bbox: BoundingBox | dict[str, Any] | None = None,
    *,
    token_cache: TokenCache | None = None,
    client: httpx.AsyncClient | None = None,
    timeout: float = HTTP_TIMEOUT_S,
) -> LiveSnapshot:
    """
    One poll of the feed: ``{"time", "count", "flights"}``.

    Raises
    ------
    ValidationError
        Bounding-box value not numeric / out of range.
    UpstreamError
        Transport failure or non-2xx answer from OpenSky.
    """
    params = bbox_params(bbox)

    if client is None:
        async with httpx.AsyncClient(
            timeout=timeout, headers={"User-Agent": USER_AGENT}
        ) as cli:
            return await get_live_snapshot(params, token_cache=token_cache, client=cli)

    headers = {"Accept": "application/json"}
    if token_cache is not None and token_cache.configured:
        try:
            headers["Authorization"] = f"Bearer {await token_cache.get_token(client)}"
        except AuthError as exc:
            LOG.warning("[feed] %s – polling anonymously", exc)

    resp = await logged_request_async(
        client,
        "get",
        OPENSKY_STATES_URL,
        params=params or None,
        headers=headers,
        source="OpenSky",
        expect_ok=True,
    )

    try:
        data = resp.json()
    except ValueError as exc:
        LOG.warning("[feed] body is not JSON: %s", exc)
        data = None

    if not isinstance(data, dict):
        return LiveSnapshot(time=None, count=0, flights=[])

    flights = normalize_states(data.get("states"))
    LOG.debug("[feed] %d aircraft with position", len(flights))
    return LiveSnapshot(time=data.get("time"), count=len(flights), flights=flights)


async def get_live_states(
    bbox: BoundingBox | dict[str, Any] | None = None, **kwargs: Any
) -> list[FlightState]:
    """Normalised aircraft list for the optional bounding box."""
    return (await get_live_snapshot(bbox, **kwargs))["flights"]


# ── List helpers ─────────────────────────────────────────────────────────


def type_label(state: FlightState) -> str | None:
    """Emitter category label first, airline short name from callsign second."""
    return category_label(state.get("category")) or short_airline(state.get("callsign"))


def filter_flights(
    flights: Iterable[FlightState], text: str = "", country: str | None = None
) -> list[FlightState]:
    """Case-insensitive match on callsign, icao24, country or type label."""
    q = text.strip().lower()
    out = []
    for f in flights:
        if country and f.get("origin_country") != country:
            continue
        if q and not any(
            q in (field or "").lower()
            for field in (
                f.get("callsign"),
                f.get("icao24"),
                f.get("origin_country"),
                type_label(f),
            )
        ):
            continue
        out.append(f)
    return out


Order = Literal["none", "asc", "desc"]


def sort_flights(
    flights: Iterable[FlightState],
    selected_icao: str | None = None,
    altitude: Order = "none",
    speed: Order = "none",
) -> list[FlightState]:
    """Selected aircraft first, then altitude, then speed, then callsign."""

    def key(f: FlightState) -> tuple:
        alt = f.get("altitude", 0.0)
        vel = f.get("velocity", 0.0)
        return (
            f.get("icao24") != selected_icao,
            {"asc": alt, "desc": -alt}.get(altitude, 0.0),
            {"asc": vel, "desc": -vel}.get(speed, 0.0),
            f.get("callsign", ""),
        )

    return sorted(flights, key=key)


def country_counts(
    flights: Iterable[FlightState], top: int = 15
) -> list[tuple[str, int]]:
    """Pinned countries present in the data first, then the *top* others."""
    counts = Counter(f["origin_country"] for f in flights if f.get("origin_country"))
    pinned = sorted(
        ((c, counts[c]) for c in PINNED_COUNTRIES if c in counts),
        key=lambda item: -item[1],
    )
    rest = [(c, n) for c, n in counts.most_common() if c not in PINNED_COUNTRIES]
    return pinned + rest[:top]


def globe_flights(
    visible: Sequence[FlightState],
    has_filter: bool,
    selected_icao: str | None,
    previous: Sequence[FlightState] = (),
) -> list[FlightState]:
    """
    Aircraft to draw on the globe: the filtered set (nothing when no filter
    is active), plus the selected aircraft so a refresh never hides it.
    """
    base = list(visible) if has_filter else []
    if selected_icao and not any(f.get("icao24") == selected_icao for f in base):
        fresh = next(
            (f for f in (*visible, *previous) if f.get("icao24") == selected_icao),
            None,
        )
        if fresh is not None:
            base.append(fresh)
    return base


__all__ = [
    "LiveSnapshot",
    "bbox_params",
    "country_counts",
    "filter_flights",
    "get_live_snapshot",
    "get_live_states",
    "globe_flights",
    "normalize_state",
    "normalize_states",
    "sort_flights",
    "type_label",
]
