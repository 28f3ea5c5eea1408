"""
tests/test_flight_service.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Live State Normalizer, the OpenSky poll and the flight-list helpers.

Network traffic is served either by ``pytest_httpx`` or by an
``httpx.MockTransport`` client from ``conftest.mock_client``.
"""

from __future__ import annotations

import re

import httpx
import pytest

from flightglobe.constants import OPENSKY_STATES_URL, OPENSKY_TOKEN_URL
from flightglobe.errors import UpstreamError, ValidationError
from flightglobe.flight_service import (
    bbox_params,
    country_counts,
    filter_flights,
    get_live_snapshot,
    get_live_states,
    globe_flights,
    normalize_state,
    normalize_states,
    sort_flights,
    type_label,
)
from flightglobe.token_service import TokenCache

STATES_RE = re.compile(re.escape(OPENSKY_STATES_URL) + r"(\?.*)?$")


def _vector(**overrides):
    """An 18-element OpenSky state vector (extended=1 layout)."""
    v = [
        "a1b2c3", "DAL1950 ", "United States", 1_700_000_000, 1_700_000_001,
        -73.9, 40.7, 10_000.0, False, 230.0, 270.0, -1.5,
        None, 10_050.0, "1200", False, 0, 4,
    ]
    index = {"icao24": 0, "callsign": 1, "lng": 5, "lat": 6, "baro": 7,
             "on_ground": 8, "velocity": 9, "heading": 10, "geo": 13,
             "squawk": 14, "category": 17}
    for key, value in overrides.items():
        v[index[key]] = value
    return v


# ── Normalizer ───────────────────────────────────────────────────────────


def test_normalize_full_vector() -> None:
    state = normalize_state(_vector())

    assert state == {
        "icao24": "a1b2c3",
        "callsign": "DAL1950",
        "origin_country": "United States",
        "lat": 40.7,
        "lng": -73.9,
        "altitude": 10_000.0,
        "velocity": 230.0,
        "heading": 270.0,
        "vertical_rate": -1.5,
        "on_ground": False,
        "last_contact": 1_700_000_001,
        "category": 4,
        "squawk": "1200",
    }


def test_records_without_position_are_dropped() -> None:
    states = normalize_states([
        _vector(icao24="aaa111"),
        _vector(icao24="bbb222", lat=None),
        _vector(icao24="ccc333", lng=None),
        _vector(icao24="ddd444", lat=0.0, lng=0.0),
    ])

    assert [s["icao24"] for s in states] == ["aaa111", "ddd444"]


def test_missing_fields_take_defaults() -> None:
    state = normalize_state(
        _vector(callsign=None, baro=None, geo=None, velocity=None, heading=None, squawk=None)
    )

    assert state["callsign"] == ""
    assert state["altitude"] == 0.0
    assert state["velocity"] == 0.0
    assert state["heading"] == 0.0
    assert "squawk" not in state


def test_geometric_altitude_fallback() -> None:
    assert normalize_state(_vector(baro=None, geo=9_876.0))["altitude"] == 9_876.0


def test_short_vector_without_category() -> None:
    state = normalize_state(_vector()[:17])
    assert state["category"] == 0


@pytest.mark.parametrize("payload", [None, {}, "states", 42])
def test_non_array_payload_yields_empty(payload) -> None:
    assert normalize_states(payload) == []


# ── Bounding box ─────────────────────────────────────────────────────────


def test_bbox_only_provided_keys() -> None:
    assert bbox_params({"lamin": 45, "lomax": "-70.5"}) == {"lamin": "45", "lomax": "-70.5"}
    assert bbox_params(None) == {}
    assert bbox_params({"lamin": None, "lamax": ""}) == {}


def test_bbox_keeps_full_precision() -> None:
    assert bbox_params({"lomin": -122.41941, "lomax": -122.3890123})["lomin"] == "-122.41941"
    assert bbox_params({"lomax": -122.3890123})["lomax"] == "-122.3890123"
    assert bbox_params({"lamin": " 37.7749295 "}) == {"lamin": "37.7749295"}


@pytest.mark.parametrize("bbox", [{"lamin": "north"}, {"lamax": 91}, {"lomin": -180.5}])
def test_bbox_rejects_bad_values(bbox) -> None:
    with pytest.raises(ValidationError):
        bbox_params(bbox)


# ── Poll ─────────────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_snapshot_envelope(httpx_mock) -> None:
    httpx_mock.add_response(
        url=STATES_RE,
        json={"time": 1_700_000_100, "states": [_vector(), _vector(icao24="x", lat=None)]},
    )

    snap = await get_live_snapshot()

    assert snap["time"] == 1_700_000_100
    assert snap["count"] == 1
    assert snap["flights"][0]["callsign"] == "DAL1950"


@pytest.mark.asyncio
async def test_bbox_forwarded_as_query(mock_client) -> None:
    rec = mock_client(lambda req: httpx.Response(200, json={"time": 1, "states": []}))

    async with rec() as client:
        await get_live_states({"lamin": 45.8389, "lamax": 47.8229}, client=client)

    params = rec.requests[0].url.params
    assert params["lamin"] == "45.8389"
    assert params["lamax"] == "47.8229"
    assert "lomin" not in params


@pytest.mark.asyncio
async def test_null_states_is_empty_list(httpx_mock) -> None:
    httpx_mock.add_response(url=STATES_RE, json={"time": 5, "states": None})
    assert await get_live_states() == []


@pytest.mark.asyncio
async def test_non_json_body_is_empty(httpx_mock) -> None:
    httpx_mock.add_response(url=STATES_RE, text="<html>maintenance</html>")
    assert await get_live_states() == []


@pytest.mark.asyncio
async def test_feed_error_status_raises_upstream(httpx_mock) -> None:
    httpx_mock.add_response(url=STATES_RE, status_code=429, text="Too many requests")

    with pytest.raises(UpstreamError) as info:
        await get_live_states()

    assert info.value.status == 429


@pytest.mark.asyncio
async def test_feed_timeout_raises_upstream(httpx_mock) -> None:
    httpx_mock.add_exception(httpx.ReadTimeout("slow"), url=STATES_RE)

    with pytest.raises(UpstreamError):
        await get_live_states()


@pytest.mark.asyncio
async def test_bearer_token_attached(mock_client, clock) -> None:
    def handler(req: httpx.Request) -> httpx.Response:
        if str(req.url) == OPENSKY_TOKEN_URL:
            return httpx.Response(200, json={"access_token": "abc", "expires_in": 1800})
        return httpx.Response(200, json={"time": 1, "states": [_vector()]})

    rec = mock_client(handler)
    tokens = TokenCache("id", "secret", clock=clock)

    async with rec() as client:
        await get_live_states(token_cache=tokens, client=client)
        await get_live_states(token_cache=tokens, client=client)

    feed = [r for r in rec.requests if r.url.path.endswith("/states/all")]
    assert [r.headers["Authorization"] for r in feed] == ["Bearer abc", "Bearer abc"]
    assert len(rec.requests) == 3  # one token exchange, two polls


@pytest.mark.asyncio
async def test_auth_failure_falls_back_to_anonymous(mock_client, clock) -> None:
    def handler(req: httpx.Request) -> httpx.Response:
        if str(req.url) == OPENSKY_TOKEN_URL:
            return httpx.Response(500, text="auth down")
        return httpx.Response(200, json={"time": 1, "states": [_vector()]})

    rec = mock_client(handler)
    tokens = TokenCache("id", "secret", clock=clock)

    async with rec() as client:
        flights = await get_live_states(token_cache=tokens, client=client)

    assert len(flights) == 1
    assert "Authorization" not in rec.requests[-1].headers


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body", [[], {"access_token": "abc", "expires_in": "soon"}]
)
async def test_malformed_token_body_falls_back_to_anonymous(mock_client, clock, body) -> None:
    def handler(req: httpx.Request) -> httpx.Response:
        if str(req.url) == OPENSKY_TOKEN_URL:
            return httpx.Response(200, json=body)
        return httpx.Response(200, json={"time": 1, "states": [_vector()]})

    rec = mock_client(handler)
    tokens = TokenCache("id", "secret", clock=clock)

    async with rec() as client:
        flights = await get_live_states(token_cache=tokens, client=client)

    assert len(flights) == 1
    assert "Authorization" not in rec.requests[-1].headers


# ── List helpers ─────────────────────────────────────────────────────────


def test_type_label_prefers_category(make_state) -> None:
    assert type_label(make_state(category=6)) == "Heavy"
    assert type_label(make_state(category=0, callsign="BAW117")) == "British Airways"
    assert type_label(make_state(category=1, callsign="N123AB")) is None


def test_filter_flights(make_state) -> None:
    flights = [
        make_state("aaa111", callsign="DAL1950", origin_country="United States"),
        make_state("bbb222", callsign="BAW117", origin_country="United Kingdom"),
        make_state("ccc333", callsign="", origin_country="Germany", category=8),
    ]

    assert [f["icao24"] for f in filter_flights(flights, "baw")] == ["bbb222"]
    assert [f["icao24"] for f in filter_flights(flights, "rotor")] == ["ccc333"]
    assert [f["icao24"] for f in filter_flights(flights, "", "Germany")] == ["ccc333"]
    assert [f["icao24"] for f in filter_flights(flights, "delta")] == ["aaa111"]
    assert len(filter_flights(flights)) == 3


def test_sort_selected_first_then_altitude(make_state) -> None:
    flights = [
        make_state("low", altitude=1_000.0, callsign="A1"),
        make_state("high", altitude=11_000.0, callsign="B1"),
        make_state("sel", altitude=5_000.0, callsign="C1"),
    ]

    ordered = sort_flights(flights, selected_icao="sel", altitude="desc")

    assert [f["icao24"] for f in ordered] == ["sel", "high", "low"]
    assert [f["icao24"] for f in sort_flights(flights)] == ["low", "high", "sel"]


def test_country_counts_pins_major_countries(make_state) -> None:
    flights = (
        [make_state(str(i), origin_country="Ireland") for i in range(5)]
        + [make_state(f"u{i}", origin_country="United States") for i in range(2)]
        + [make_state("c1", origin_country="Canada")]
    )

    assert country_counts(flights) == [
        ("United States", 2),
        ("Canada", 1),
        ("Ireland", 5),
    ]


def test_globe_keeps_selection_through_filter(make_state) -> None:
    sel = make_state("sel", callsign="DAL1950")
    other = make_state("oth", callsign="BAW117")

    assert globe_flights([other], True, "sel", previous=[sel]) == [other, sel]
    assert globe_flights([], False, None) == []
    assert globe_flights([other, sel], False, "sel") == [sel]
