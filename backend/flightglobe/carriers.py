"""
carriers.py
~~~~~~~~~~~
Carrier Code Table: 3-letter ICAO carrier prefix ⇄ 2-letter IATA code, plus
readable airline names, and the ADS-B emitter-category labels used to
describe an aircraft in the flight list.

Every ICAO prefix maps to a *distinct* IATA code so the reverse table is a
true inverse (``IATA_TO_ICAO[ICAO_TO_IATA[p]] == p``).
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Final, Mapping, NamedTuple

ICAO_TO_IATA: Final[Mapping[str, str]] = MappingProxyType({
    # North America
    "AAL": "AA", "UAL": "UA", "DAL": "DL", "SWA": "WN", "JBU": "B6",
    "ASA": "AS", "NKS": "NK", "FFT": "F9", "ACA": "AC", "WJA": "WS",
    "SKW": "OO", "RPA": "YX", "ENY": "MQ", "PDT": "PT", "JIA": "OH",
    "CPZ": "RP", "TCF": "QQ", "EDV": "9E", "FDX": "FX", "UPS": "5X", "GTI": "8C",
    # Europe
    "BAW": "BA", "DLH": "LH", "AFR": "AF", "KLM": "KL", "EZY": "U2",
    "RYR": "FR", "THY": "TK", "EIN": "EI", "IBE": "IB", "VLG": "VY",
    "SAS": "SK", "FIN": "AY", "LOT": "LO", "TAP": "TP",
    # Middle East & Africa
    "UAE": "EK", "QTR": "QR", "ETH": "ET", "SVA": "SV", "RAM": "AT",
    "MSR": "MS", "MEA": "ME",
    # Asia-Pacific
    "SIA": "SQ", "CPA": "CX", "ANA": "NH", "JAL": "JL", "QFA": "QF",
    "CCA": "CA", "CES": "MU", "CSN": "CZ", "AIC": "AI", "AXB": "IX",
    "IGO": "6E", "VOZ": "VA", "GIA": "GA", "MAS": "MH", "THA": "TG",
    "KAL": "KE", "AAR": "OZ", "EVA": "BR",
    # Latin America
    "TAM": "JJ", "LAN": "LA", "AVA": "AV",
})

IATA_TO_ICAO: Final[Mapping[str, str]] = MappingProxyType(
    {iata: icao for icao, iata in ICAO_TO_IATA.items()}
)

#: Full airline names used on route records.
ICAO_TO_NAME: Final[Mapping[str, str]] = MappingProxyType({
    "AAL": "American Airlines", "UAL": "United Airlines", "DAL": "Delta Air Lines",
    "SWA": "Southwest Airlines", "JBU": "JetBlue", "ASA": "Alaska Airlines",
    "NKS": "Spirit Airlines", "FFT": "Frontier Airlines", "BAW": "British Airways",
    "DLH": "Lufthansa", "AFR": "Air France", "KLM": "KLM", "THY": "Turkish Airlines",
    "UAE": "Emirates", "QTR": "Qatar Airways", "SIA": "Singapore Airlines",
    "CPA": "Cathay Pacific", "ANA": "ANA", "JAL": "Japan Airlines",
    "QFA": "Qantas", "ACA": "Air Canada", "FDX": "FedEx", "UPS": "UPS Airlines",
    "SKW": "SkyWest", "RPA": "Republic Airways", "ENY": "Envoy Air",
    "EDV": "Endeavor Air", "JIA": "PSA Airlines",
})

#: Short operator labels shown in the flight list.
ICAO_TO_SHORT_NAME: Final[Mapping[str, str]] = MappingProxyType({
    "AAL": "American", "UAL": "United", "DAL": "Delta", "SWA": "Southwest",
    "JBU": "JetBlue", "ASA": "Alaska", "NKS": "Spirit", "FFT": "Frontier",
    "BAW": "British Airways", "DLH": "Lufthansa", "AFR": "Air France",
    "KLM": "KLM", "EZY": "easyJet", "RYR": "Ryanair", "THY": "Turkish",
    "UAE": "Emirates", "QTR": "Qatar", "ETH": "Ethiopian", "SIA": "Singapore",
    "CPA": "Cathay", "ANA": "ANA", "JAL": "JAL", "QFA": "Qantas",
    "ACA": "Air Canada", "WJA": "WestJet", "TAM": "LATAM", "LAN": "LATAM",
    "AVA": "Avianca", "CCA": "Air China", "CES": "China Eastern",
    "CSN": "China Southern", "AIC": "Air India", "AXB": "Air India Express",
    "IGO": "IndiGo", "VOZ": "Virgin AU", "EIN": "Aer Lingus", "IBE": "Iberia",
    "VLG": "Vueling", "SAS": "SAS", "FIN": "Finnair", "LOT": "LOT", "TAP": "TAP",
    "SVA": "Saudia", "GIA": "Garuda", "MAS": "Malaysia", "THA": "Thai",
    "KAL": "Korean Air", "AAR": "Asiana", "EVA": "EVA Air",
    "RAM": "Royal Air Maroc", "MSR": "EgyptAir", "MEA": "MEA",
    "FDX": "FedEx", "UPS": "UPS", "GTI": "Atlas Air",
})

#: ADS-B emitter category → label (0, 1 and 13 carry no information).
CATEGORY_LABELS: Final[Mapping[int, str]] = MappingProxyType({
    2: "Light", 3: "Small", 4: "Large", 5: "HiVortex", 6: "Heavy",
    7: "HiPerf", 8: "Rotor", 9: "Glider", 10: "LTA", 11: "Skydiver",
    12: "Ultralight", 14: "UAV", 15: "Space", 16: "Emergency", 17: "Service",
})

_CALLSIGN_RE: Final = re.compile(r"^([A-Z]{3})(\d+)$")
_ROUTABLE_RE: Final = re.compile(r"^[A-Z]{2,3}\d+", re.I)


class Callsign(NamedTuple):
    clean: str
    icao_prefix: str
    flight_num: str
    iata_code: str
    airline_name: str


def normalize_callsign(raw: str | None) -> str:
    """Strip *all* whitespace and upper-case – the cache key form."""
    return re.sub(r"\s+", "", raw or "").upper()


def parse_callsign(raw: str | None) -> Callsign:
    """
    Split ``"DAL1950"`` into prefix ``DAL`` / number ``1950`` and look up
    the IATA code and airline name.  Anything that is not three letters
    followed by digits keeps the whole string as the flight number.
    """
    clean = normalize_callsign(raw)
    m = _CALLSIGN_RE.match(clean)
    if not m:
        return Callsign(clean, "", clean, "", "")
    prefix, num = m.groups()
    return Callsign(
        clean, prefix, num, ICAO_TO_IATA.get(prefix, ""), ICAO_TO_NAME.get(prefix, "")
    )


def iata_flight_number(raw: str | None) -> str | None:
    """``"DAL1950"`` → ``"DL 1950"``; ``None`` when the carrier is unknown."""
    cs = parse_callsign(raw)
    return f"{cs.iata_code} {cs.flight_num}" if cs.iata_code else None


def is_routable(raw: str | None) -> bool:
    """Does the callsign look like a scheduled flight (AAL1234, DL1234)?"""
    return bool(_ROUTABLE_RE.match((raw or "").strip()))


def category_label(category: int | None) -> str | None:
    if category is None:
        return None
    return CATEGORY_LABELS.get(category)


def short_airline(raw: str | None) -> str | None:
    prefix = (raw or "").strip().upper()[:3]
    return ICAO_TO_SHORT_NAME.get(prefix) if len(prefix) == 3 else None


__all__ = [
    "CATEGORY_LABELS",
    "Callsign",
    "IATA_TO_ICAO",
    "ICAO_TO_IATA",
    "ICAO_TO_NAME",
    "ICAO_TO_SHORT_NAME",
    "category_label",
    "iata_flight_number",
    "is_routable",
    "normalize_callsign",
    "parse_callsign",
    "short_airline",
]
