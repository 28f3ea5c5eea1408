"""
route_strategies.py
~~~~~~~~~~~~~~~~~~~
The three ways we learn where a flight is going, cheapest-useful first.

=====  ==========================  ==========================================
Order  Strategy                    Source
=====  ==========================  ==========================================
A      ``SearchStructured``        SerpAPI Google result – flights block,
                                   knowledge panel or answer box
B      ``SearchOrganic``           *same* SerpAPI payload – titles, snippets
                                   and links of the first 8 organic results
C      ``FlightPage``              FlightAware live-flight HTML page
=====  ==========================  ==========================================

Every strategy implements ``try_resolve(callsign, ctx)`` and returns a
:class:`PartialRoute` whose two airport codes are both in the registry, or
``None`` when it does not apply (e.g. no search credential).  A strategy
that ran but found nothing raises :class:`ParseError`; an upstream that
failed raises :class:`UpstreamError`.  The resolver logs both and moves on.

Only the **first** search query is ever sent: B re-reads A's payload and
then C takes over, which keeps SerpAPI spend at one credit per lookup.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Final, Iterable, Mapping

import httpx
from bs4 import BeautifulSoup

from .airports import is_known, valid_pair
from .api_logging import logged_request_async
from .carriers import Callsign
from .constants import (
    BROWSER_USER_AGENT,
    FLIGHTAWARE_URL,
    HTTP_TIMEOUT_S,
    PAGE_TIMEOUT_S,
    SERPAPI_URL,
)
from .errors import ParseError
from .models import PartialRoute

LOG = logging.getLogger("route_strategies")

MAX_ORGANIC_RESULTS: Final[int] = 8

# ── Organic-result patterns ──────────────────────────────────────────────
ARROW_RE: Final = re.compile(
    r"\b([A-Z]{3})\s*(?:→|->|➝|›|–|—|-|to|/)\s*([A-Z]{3})\b"
)
FROM_TO_RE: Final = re.compile(
    r"(?:from|departing|origin)\s+([A-Z]{3}).*?"
    r"(?:to|arriving|destination|→)\s+([A-Z]{3})",
    re.I,
)
ICAO_PAIR_RE: Final = re.compile(r"\(K([A-Z]{3})\s*[-–—/]\s*K([A-Z]{3})\)")
HISTORY_URL_RE: Final = re.compile(
    r"flightaware\.com/live/flight/[^/]+/history/[^/]+/[^/]+/K([A-Z]{3})/K([A-Z]{3})"
)
CODE3_RE: Final = re.compile(r"\b([A-Z]{3})\b")

# ── Page patterns ────────────────────────────────────────────────────────
TITLE_PAIR_RE: Final = re.compile(r"\(([A-Z]{3,4})\s*[-–—/]\s*([A-Z]{3,4})\)")
ORIGIN_KV_RE: Final = re.compile(
    r'"origin"\s*:\s*\{\s*"(?:icao|iata)"\s*:\s*"K?([A-Z]{3})"'
)
DEST_KV_RE: Final = re.compile(
    r'"destination"\s*:\s*\{\s*"(?:icao|iata)"\s*:\s*"K?([A-Z]{3})"'
)
JSON_BLOB_RE: Final = re.compile(
    r'"origin"\s*:\s*\{[^}]*?"iata"\s*:\s*"([A-Z]{3})"[^}]*\}[\s\S]*?'
    r'"destination"\s*:\s*\{[^}]*?"iata"\s*:\s*"([A-Z]{3})"'
)
ICAO4_RE: Final = re.compile(r"\bK([A-Z]{3})\b")


def _strip_k(code: str) -> str:
    """``KJFK`` → ``JFK``; anything else unchanged."""
    return code[1:] if len(code) == 4 and code.startswith("K") else code


def _pair(dep: Any, arr: Any) -> PartialRoute | None:
    """Registry-validated pair, upper-cased, or ``None``."""
    if not isinstance(dep, str) or not isinstance(arr, str):
        return None
    dep, arr = dep.strip().upper(), arr.strip().upper()
    if valid_pair(dep, arr):
        return PartialRoute(departure_code=dep, arrival_code=arr)
    return None


def _first_two_known(codes: Iterable[str]) -> PartialRoute | None:
    known = [c for c in dict.fromkeys(codes) if is_known(c)]
    return _pair(known[0], known[1]) if len(known) >= 2 else None


# ── Shared context ───────────────────────────────────────────────────────


def build_search_queries(cs: Callsign) -> list[str]:
    """Queries ordered from most to least likely to trigger the flight widget."""
    queries = []
    if cs.iata_code:
        queries.append(f"{cs.iata_code} {cs.flight_num} flight status")
        queries.append(f"{cs.iata_code}{cs.flight_num} flight tracker")
    queries.append(f"flight {cs.clean}")
    return queries


@dataclass
class ResolveContext:
    """Per-lookup state shared by the strategies of one chain run."""

    client: httpx.AsyncClient
    api_key: str = ""
    search_timeout: float = HTTP_TIMEOUT_S
    page_timeout: float = PAGE_TIMEOUT_S
    queries: list[str] = field(default_factory=list)
    _searched: bool = field(default=False, repr=False)
    _payload: dict[str, Any] | None = field(default=None, repr=False)

    async def search_payload(self) -> dict[str, Any] | None:
        """
        Run the first prepared query at most once per lookup.

        Returns ``None`` without a credential, and on any later call after
        the single attempt failed.
        """
        if not self.api_key or not self.queries:
            return None
        if self._searched:
            return self._payload
        self._searched = True

        query = self.queries[0]
        resp = await logged_request_async(
            self.client,
            "get",
            SERPAPI_URL,
            params={
                "api_key": self.api_key,
                "engine": "google",
                "q": query,
                "hl": "en",
                "gl": "us",
            },
            timeout=self.search_timeout,
            source="SerpAPI",
            expect_ok=True,
        )
        try:
            data = resp.json()
        except ValueError:
            LOG.warning("[search] non-JSON body for %r", query)
            return None
        self._payload = data if isinstance(data, dict) else None
        return self._payload


class RouteStrategy:
    """Common interface of every strategy in the chain."""

    name: str = "strategy"

    async def try_resolve(self, cs: Callsign, ctx: ResolveContext) -> PartialRoute | None:
        raise NotImplementedError


# ── Strategy A ───────────────────────────────────────────────────────────


def _pick(block: Mapping[str, Any], *keys: str) -> Any:
    return next((block[k] for k in keys if block.get(k)), None)


def parse_structured(data: Mapping[str, Any]) -> PartialRoute:
    """
    Pull codes and metadata out of whichever structured block is present:
    ``flights_results`` (or ``flights``), ``knowledge_graph``, ``answer_box``.
    Codes are returned as found; the caller validates them.
    """
    out = PartialRoute()

    flights = data.get("flights_results") or data.get("flights")
    info = flights[0] if isinstance(flights, list) and flights else flights
    if isinstance(info, dict):
        dep = info.get("departure_airport") or {}
        arr = info.get("arrival_airport") or {}
        dep = dep if isinstance(dep, dict) else {}
        arr = arr if isinstance(arr, dict) else {}
        out.update({
            "departure_code": _pick(dep, "code", "iata"),
            "arrival_code": _pick(arr, "code", "iata"),
            "departure_city": _pick(dep, "city", "name"),
            "arrival_city": _pick(arr, "city", "name"),
            "airline": info.get("airline"),
            "flight_number": info.get("flight_number"),
            "departure_time": dep.get("time") or info.get("departure_time"),
            "arrival_time": arr.get("time") or info.get("arrival_time"),
            "status": info.get("status"),
        })

    kg = data.get("knowledge_graph")
    if not out.get("departure_code") and isinstance(kg, dict):
        out.update({
            "departure_code": _pick(kg, "departure_airport_code", "from_airport"),
            "arrival_code": _pick(kg, "arrival_airport_code", "to_airport"),
            "departure_city": _pick(kg, "departure_city", "from"),
            "arrival_city": _pick(kg, "arrival_city", "to"),
            "airline": _pick(kg, "airline", "carrier"),
            "flight_number": _pick(kg, "flight_number", "title"),
            "status": kg.get("status"),
        })

    ab = data.get("answer_box")
    if not out.get("departure_code") and isinstance(ab, dict):
        out.update({
            "departure_code": _pick(ab, "departure_airport", "origin"),
            "arrival_code": _pick(ab, "arrival_airport", "destination"),
            "departure_city": ab.get("departure_city"),
            "arrival_city": ab.get("arrival_city"),
            "airline": ab.get("airline"),
            "flight_number": _pick(ab, "flight_number", "title"),
            "status": _pick(ab, "status", "flight_status"),
        })

    return PartialRoute(**{k: v for k, v in out.items() if v})  # type: ignore[typeddict-item]


class SearchStructured(RouteStrategy):
    name = "search-structured"

    async def try_resolve(self, cs: Callsign, ctx: ResolveContext) -> PartialRoute | None:
        data = await ctx.search_payload()
        if data is None:
            return None
        found = parse_structured(data)
        pair = _pair(found.get("departure_code"), found.get("arrival_code"))
        if pair is None:
            raise ParseError(self.name, cs.clean)
        return PartialRoute(**{**found, **pair})


# ── Strategy B ───────────────────────────────────────────────────────────


def parse_organic(data: Mapping[str, Any]) -> PartialRoute | None:
    """Scan the first organic results' text and links for an airport pair."""
    results = data.get("organic_results") or []
    if not isinstance(results, list):
        return None

    for result in results[:MAX_ORGANIC_RESULTS]:
        if not isinstance(result, dict):
            continue
        text = f"{result.get('title') or ''} {result.get('snippet') or ''}"

        for pattern in (ARROW_RE, FROM_TO_RE, ICAO_PAIR_RE):
            m = pattern.search(text)
            if m and (pair := _pair(*m.groups())):
                return pair

        m = HISTORY_URL_RE.search(result.get("link") or "")
        if m and (pair := _pair(*m.groups())):
            return pair

        if pair := _first_two_known(CODE3_RE.findall(text)):
            return pair

    return None


class SearchOrganic(RouteStrategy):
    name = "search-organic"

    async def try_resolve(self, cs: Callsign, ctx: ResolveContext) -> PartialRoute | None:
        data = await ctx.search_payload()
        if data is None:
            return None
        pair = parse_organic(data)
        if pair is None:
            raise ParseError(self.name, cs.clean)
        return pair


# ── Strategy C ───────────────────────────────────────────────────────────


def parse_flight_page(html: str) -> PartialRoute | None:
    """Apply the five page patterns in order; first registry-valid pair wins."""
    soup = BeautifulSoup(html, "html.parser")

    # (i) "DAL1950 (DL1950) … (KJFK - KLAX) … FlightAware"
    title = soup.title.get_text(" ", strip=True) if soup.title else ""
    m = TITLE_PAIR_RE.search(title)
    if m and (pair := _pair(_strip_k(m.group(1)), _strip_k(m.group(2)))):
        return pair

    # (ii) data-origin / data-destination attributes or "origin": {"icao": …}
    origin_tag = soup.find(attrs={"data-origin": True})
    dest_tag = soup.find(attrs={"data-destination": True})
    if origin_tag is not None and dest_tag is not None:
        dep = _strip_k(str(origin_tag["data-origin"]).strip().upper())
        arr = _strip_k(str(dest_tag["data-destination"]).strip().upper())
        if pair := _pair(dep, arr):
            return pair
    m_dep, m_arr = ORIGIN_KV_RE.search(html), DEST_KV_RE.search(html)
    if m_dep and m_arr and (pair := _pair(m_dep.group(1), m_arr.group(1))):
        return pair

    # (iii) embedded track JSON with iata fields
    m = JSON_BLOB_RE.search(html)
    if m and (pair := _pair(*m.groups())):
        return pair

    # (iv) every K-prefixed ICAO code, (v) every 3-letter code
    return _first_two_known(ICAO4_RE.findall(html)) or _first_two_known(
        CODE3_RE.findall(html)
    )


class FlightPage(RouteStrategy):
    name = "flight-page"

    async def try_resolve(self, cs: Callsign, ctx: ResolveContext) -> PartialRoute | None:
        url = FLIGHTAWARE_URL.format(callsign=cs.clean)
        resp = await logged_request_async(
            ctx.client,
            "get",
            url,
            headers={
                "User-Agent": BROWSER_USER_AGENT,
                "Accept": "text/html,application/xhtml+xml",
            },
            timeout=ctx.page_timeout,
            source="FlightAware",
            expect_ok=True,
        )
        pair = parse_flight_page(resp.text)
        if pair is None:
            raise ParseError(self.name, cs.clean)
        return pair


DEFAULT_STRATEGIES: Final[tuple[RouteStrategy, ...]] = (
    SearchStructured(),
    SearchOrganic(),
    FlightPage(),
)


__all__ = [
    "DEFAULT_STRATEGIES",
    "FlightPage",
    "ResolveContext",
    "RouteStrategy",
    "SearchOrganic",
    "SearchStructured",
    "build_search_queries",
    "parse_flight_page",
    "parse_organic",
    "parse_structured",
]
