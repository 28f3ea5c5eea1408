"""
tests/test_airports.py
~~~~~~~~~~~~~~~~~~~~~~
Airport Registry lookups and pair validation.
"""

from __future__ import annotations

import math

import pytest

from flightglobe.airports import AIRPORTS, get_airport, is_known, valid_pair


def test_registry_is_read_only() -> None:
    with pytest.raises(TypeError):
        AIRPORTS["ZZZ"] = {"lat": 0.0, "lng": 0.0, "city": "", "country": ""}  # type: ignore[index]


def test_every_record_is_well_formed() -> None:
    for code, rec in AIRPORTS.items():
        assert len(code) == 3 and code.isalnum() and code.isupper(), code
        assert -90 <= rec["lat"] <= 90 and -180 <= rec["lng"] <= 180, code
        assert math.isfinite(rec["lat"]) and math.isfinite(rec["lng"])
        assert rec["city"] and rec["country"], code


def test_lookup_is_case_and_space_insensitive() -> None:
    jfk = get_airport(" jfk ")
    assert jfk is not None
    assert jfk["city"] == "New York"
    assert get_airport("") is None
    assert get_airport(None) is None


def test_dallas_love_field_is_not_listed() -> None:
    # would otherwise match the Delta callsign prefix on every tracking page
    assert not is_known("DAL")


@pytest.mark.parametrize(
    "dep, arr, ok",
    [
        ("JFK", "LAX", True),
        ("jfk", "LHR", True),
        ("JFK", "JFK", False),
        ("JFK", "XYZ", False),
        ("XYZ", "LAX", False),
        (None, "LAX", False),
    ],
)
def test_valid_pair(dep: str | None, arr: str | None, ok: bool) -> None:
    assert valid_pair(dep, arr) is ok
