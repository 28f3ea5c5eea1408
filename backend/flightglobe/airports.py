"""
airports.py
~~~~~~~~~~~
Airport Registry: IATA code → ``{lat, lng, city, country}``.

The table is the single source of truth used to *validate* every airport
pair a route strategy extracts; a code missing from it is treated as noise.
It is wrapped in a read-only mapping at import time and never mutated.

``DAL`` (Dallas Love Field) is deliberately absent: it collides with the
Delta callsign prefix that appears on every Delta tracking page.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Final, Mapping, TypedDict


class AirportRecord(TypedDict):
    lat: float
    lng: float
    city: str
    country: str


def _a(lat: float, lng: float, city: str, country: str) -> AirportRecord:
    return {"lat": lat, "lng": lng, "city": city, "country": country}


_US: Final = "United States"

_AIRPORTS: dict[str, AirportRecord] = {
    # ───────────── United States
    "ATL": _a(33.6407, -84.4277, "Atlanta", _US),
    "LAX": _a(33.9416, -118.4085, "Los Angeles", _US),
    "ORD": _a(41.9742, -87.9073, "Chicago", _US),
    "MDW": _a(41.7868, -87.7522, "Chicago", _US),
    "DFW": _a(32.8998, -97.0403, "Dallas", _US),
    "DEN": _a(39.8561, -104.6737, "Denver", _US),
    "JFK": _a(40.6413, -73.7781, "New York", _US),
    "LGA": _a(40.7769, -73.8740, "New York", _US),
    "EWR": _a(40.6895, -74.1745, "Newark", _US),
    "SFO": _a(37.6213, -122.3790, "San Francisco", _US),
    "OAK": _a(37.7126, -122.2197, "Oakland", _US),
    "SJC": _a(37.3639, -121.9289, "San Jose", _US),
    "SEA": _a(47.4502, -122.3088, "Seattle", _US),
    "LAS": _a(36.0840, -115.1537, "Las Vegas", _US),
    "MCO": _a(28.4312, -81.3081, "Orlando", _US),
    "CLT": _a(35.2140, -80.9431, "Charlotte", _US),
    "PHX": _a(33.4342, -112.0116, "Phoenix", _US),
    "IAH": _a(29.9902, -95.3368, "Houston", _US),
    "HOU": _a(29.6454, -95.2789, "Houston", _US),
    "MIA": _a(25.7959, -80.2870, "Miami", _US),
    "FLL": _a(26.0742, -80.1506, "Fort Lauderdale", _US),
    "PBI": _a(26.6832, -80.0956, "West Palm Beach", _US),
    "BOS": _a(42.3656, -71.0096, "Boston", _US),
    "MSP": _a(44.8848, -93.2223, "Minneapolis", _US),
    "DTW": _a(42.2162, -83.3554, "Detroit", _US),
    "PHL": _a(39.8744, -75.2424, "Philadelphia", _US),
    "BWI": _a(39.1774, -76.6684, "Baltimore", _US),
    "IAD": _a(38.9531, -77.4565, "Washington", _US),
    "DCA": _a(38.8512, -77.0402, "Washington", _US),
    "SLC": _a(40.7899, -111.9791, "Salt Lake City", _US),
    "SAN": _a(32.7338, -117.1933, "San Diego", _US),
    "TPA": _a(27.9755, -82.5332, "Tampa", _US),
    "PDX": _a(45.5898, -122.5951, "Portland", _US),
    "HNL": _a(21.3187, -157.9225, "Honolulu", _US),
    "OGG": _a(20.8986, -156.4305, "Kahului", _US),
    "KOA": _a(19.7388, -156.0456, "Kona", _US),
    "LIH": _a(21.9760, -159.3390, "Lihue", _US),
    "ANC": _a(61.1743, -149.9962, "Anchorage", _US),
    "BNA": _a(36.1263, -86.6774, "Nashville", _US),
    "AUS": _a(30.1975, -97.6664, "Austin", _US),
    "SAT": _a(29.5337, -98.4698, "San Antonio", _US),
    "STL": _a(38.7487, -90.3700, "St. Louis", _US),
    "RDU": _a(35.8801, -78.7880, "Raleigh", _US),
    "SMF": _a(38.6951, -121.5908, "Sacramento", _US),
    "MCI": _a(39.2976, -94.7139, "Kansas City", _US),
    "SNA": _a(33.6762, -117.8675, "Santa Ana", _US),
    "BUR": _a(34.1975, -118.3585, "Burbank", _US),
    "ONT": _a(34.0560, -117.6012, "Ontario", _US),
    "CLE": _a(41.4058, -81.8539, "Cleveland", _US),
    "PIT": _a(40.4915, -80.2329, "Pittsburgh", _US),
    "IND": _a(39.7169, -86.2956, "Indianapolis", _US),
    "CMH": _a(39.9980, -82.8919, "Columbus", _US),
    "CVG": _a(39.0489, -84.6678, "Cincinnati", _US),
    "MSY": _a(29.9934, -90.2580, "New Orleans", _US),
    "RSW": _a(26.5362, -81.7552, "Fort Myers", _US),
    "JAX": _a(30.4941, -81.6879, "Jacksonville", _US),
    "ABQ": _a(35.0402, -106.6090, "Albuquerque", _US),
    "MKE": _a(42.9472, -87.8966, "Milwaukee", _US),
    "BDL": _a(41.9389, -72.6832, "Hartford", _US),
    "MEM": _a(35.0424, -89.9767, "Memphis", _US),
    "SDF": _a(38.1744, -85.7360, "Louisville", _US),
    "OKC": _a(35.3931, -97.6007, "Oklahoma City", _US),
    "TUL": _a(36.1984, -95.8881, "Tulsa", _US),
    "ELP": _a(31.8072, -106.3776, "El Paso", _US),
    "BOI": _a(43.5644, -116.2228, "Boise", _US),
    "RNO": _a(39.4991, -119.7681, "Reno", _US),
    "TUS": _a(32.1161, -110.9410, "Tucson", _US),
    "CHS": _a(32.8986, -80.0405, "Charleston", _US),
    "RIC": _a(37.5052, -77.3197, "Richmond", _US),
    "ORF": _a(36.8946, -76.2012, "Norfolk", _US),
    "BUF": _a(42.9405, -78.7322, "Buffalo", _US),
    "ALB": _a(42.7483, -73.8017, "Albany", _US),
    "PVD": _a(41.7240, -71.4282, "Providence", _US),
    "BHM": _a(33.5629, -86.7535, "Birmingham", _US),
    "DSM": _a(41.5340, -93.6631, "Des Moines", _US),
    "OMA": _a(41.3032, -95.8941, "Omaha", _US),
    # ───────────── Canada
    "YYZ": _a(43.6777, -79.6248, "Toronto", "Canada"),
    "YVR": _a(49.1967, -123.1815, "Vancouver", "Canada"),
    "YUL": _a(45.4706, -73.7408, "Montreal", "Canada"),
    "YYC": _a(51.1215, -114.0076, "Calgary", "Canada"),
    "YEG": _a(53.3097, -113.5800, "Edmonton", "Canada"),
    "YOW": _a(45.3225, -75.6692, "Ottawa", "Canada"),
    "YWG": _a(49.9100, -97.2399, "Winnipeg", "Canada"),
    "YHZ": _a(44.8808, -63.5086, "Halifax", "Canada"),
    # ───────────── Mexico, Caribbean, Central & South America
    "MEX": _a(19.4361, -99.0719, "Mexico City", "Mexico"),
    "CUN": _a(21.0365, -86.8771, "Cancún", "Mexico"),
    "GDL": _a(20.5218, -103.3112, "Guadalajara", "Mexico"),
    "MTY": _a(25.7785, -100.1069, "Monterrey", "Mexico"),
    "SJD": _a(23.1518, -109.7215, "San José del Cabo", "Mexico"),
    "PVR": _a(20.6801, -105.2542, "Puerto Vallarta", "Mexico"),
    "SJU": _a(18.4394, -66.0018, "San Juan", "Puerto Rico"),
    "NAS": _a(25.0390, -77.4662, "Nassau", "Bahamas"),
    "MBJ": _a(18.5037, -77.9134, "Montego Bay", "Jamaica"),
    "PUJ": _a(18.5674, -68.3634, "Punta Cana", "Dominican Republic"),
    "HAV": _a(22.9892, -82.4091, "Havana", "Cuba"),
    "PTY": _a(9.0714, -79.3835, "Panama City", "Panama"),
    "SJO": _a(9.9939, -84.2088, "San José", "Costa Rica"),
    "BOG": _a(4.7016, -74.1469, "Bogotá", "Colombia"),
    "MDE": _a(6.1645, -75.4231, "Medellín", "Colombia"),
    "UIO": _a(-0.1292, -78.3575, "Quito", "Ecuador"),
    "GYE": _a(-2.1574, -79.8836, "Guayaquil", "Ecuador"),
    "LIM": _a(-12.0219, -77.1143, "Lima", "Peru"),
    "SCL": _a(-33.3930, -70.7858, "Santiago", "Chile"),
    "EZE": _a(-34.8222, -58.5358, "Buenos Aires", "Argentina"),
    "AEP": _a(-34.5592, -58.4156, "Buenos Aires", "Argentina"),
    "GRU": _a(-23.4356, -46.4731, "São Paulo", "Brazil"),
    "GIG": _a(-22.8100, -43.2506, "Rio de Janeiro", "Brazil"),
    "BSB": _a(-15.8697, -47.9208, "Brasília", "Brazil"),
    "CCS": _a(10.6031, -66.9906, "Caracas", "Venezuela"),
    # ───────────── Europe
    "LHR": _a(51.4700, -0.4543, "London", "United Kingdom"),
    "LGW": _a(51.1537, -0.1821, "London", "United Kingdom"),
    "STN": _a(51.8860, 0.2389, "London", "United Kingdom"),
    "MAN": _a(53.3650, -2.2728, "Manchester", "United Kingdom"),
    "EDI": _a(55.9508, -3.3615, "Edinburgh", "United Kingdom"),
    "DUB": _a(53.4264, -6.2499, "Dublin", "Ireland"),
    "CDG": _a(49.0097, 2.5479, "Paris", "France"),
    "ORY": _a(48.7262, 2.3652, "Paris", "France"),
    "NCE": _a(43.6584, 7.2159, "Nice", "France"),
    "LYS": _a(45.7256, 5.0811, "Lyon", "France"),
    "AMS": _a(52.3105, 4.7683, "Amsterdam", "Netherlands"),
    "BRU": _a(50.9010, 4.4856, "Brussels", "Belgium"),
    "FRA": _a(50.0379, 8.5622, "Frankfurt", "Germany"),
    "MUC": _a(48.3537, 11.7750, "Munich", "Germany"),
    "BER": _a(52.3667, 13.5033, "Berlin", "Germany"),
    "HAM": _a(53.6304, 9.9882, "Hamburg", "Germany"),
    "DUS": _a(51.2895, 6.7668, "Düsseldorf", "Germany"),
    "ZRH": _a(47.4582, 8.5555, "Zurich", "Switzerland"),
    "GVA": _a(46.2370, 6.1092, "Geneva", "Switzerland"),
    "VIE": _a(48.1103, 16.5697, "Vienna", "Austria"),
    "MAD": _a(40.4983, -3.5676, "Madrid", "Spain"),
    "BCN": _a(41.2974, 2.0833, "Barcelona", "Spain"),
    "PMI": _a(39.5517, 2.7388, "Palma de Mallorca", "Spain"),
    "AGP": _a(36.6749, -4.4991, "Málaga", "Spain"),
    "LIS": _a(38.7742, -9.1342, "Lisbon", "Portugal"),
    "OPO": _a(41.2481, -8.6814, "Porto", "Portugal"),
    "FCO": _a(41.8003, 12.2389, "Rome", "Italy"),
    "MXP": _a(45.6306, 8.7281, "Milan", "Italy"),
    "VCE": _a(45.5053, 12.3519, "Venice", "Italy"),
    "NAP": _a(40.8860, 14.2908, "Naples", "Italy"),
    "ATH": _a(37.9364, 23.9445, "Athens", "Greece"),
    "IST": _a(41.2753, 28.7519, "Istanbul", "Turkey"),
    "SAW": _a(40.8986, 29.3092, "Istanbul", "Turkey"),
    "AYT": _a(36.8987, 30.8005, "Antalya", "Turkey"),
    "CPH": _a(55.6180, 12.6508, "Copenhagen", "Denmark"),
    "ARN": _a(59.6498, 17.9238, "Stockholm", "Sweden"),
    "OSL": _a(60.1976, 11.1004, "Oslo", "Norway"),
    "HEL": _a(60.3172, 24.9633, "Helsinki", "Finland"),
    "KEF": _a(63.9850, -22.6056, "Reykjavík", "Iceland"),
    "WAW": _a(52.1657, 20.9671, "Warsaw", "Poland"),
    "KRK": _a(50.0777, 19.7848, "Kraków", "Poland"),
    "PRG": _a(50.1008, 14.2600, "Prague", "Czech Republic"),
    "BUD": _a(47.4298, 19.2611, "Budapest", "Hungary"),
    "OTP": _a(44.5711, 26.0850, "Bucharest", "Romania"),
    "BEG": _a(44.8184, 20.3091, "Belgrade", "Serbia"),
    "ZAG": _a(45.7429, 16.0688, "Zagreb", "Croatia"),
    "RIX": _a(56.9236, 23.9711, "Riga", "Latvia"),
    "SVO": _a(55.9726, 37.4146, "Moscow", "Russia"),
    "LED": _a(59.8003, 30.2625, "Saint Petersburg", "Russia"),
    # ───────────── Middle East & Africa
    "DXB": _a(25.2532, 55.3657, "Dubai", "United Arab Emirates"),
    "AUH": _a(24.4330, 54.6511, "Abu Dhabi", "United Arab Emirates"),
    "DOH": _a(25.2731, 51.6081, "Doha", "Qatar"),
    "BAH": _a(26.2708, 50.6336, "Manama", "Bahrain"),
    "KWI": _a(29.2266, 47.9689, "Kuwait City", "Kuwait"),
    "RUH": _a(24.9576, 46.6988, "Riyadh", "Saudi Arabia"),
    "JED": _a(21.6796, 39.1565, "Jeddah", "Saudi Arabia"),
    "MCT": _a(23.5933, 58.2844, "Muscat", "Oman"),
    "TLV": _a(32.0055, 34.8854, "Tel Aviv", "Israel"),
    "AMM": _a(31.7226, 35.9932, "Amman", "Jordan"),
    "CAI": _a(30.1219, 31.4056, "Cairo", "Egypt"),
    "CMN": _a(33.3675, -7.5898, "Casablanca", "Morocco"),
    "RAK": _a(31.6069, -8.0363, "Marrakesh", "Morocco"),
    "ALG": _a(36.6910, 3.2154, "Algiers", "Algeria"),
    "TUN": _a(36.8510, 10.2272, "Tunis", "Tunisia"),
    "ADD": _a(8.9779, 38.7993, "Addis Ababa", "Ethiopia"),
    "NBO": _a(-1.3192, 36.9278, "Nairobi", "Kenya"),
    "LOS": _a(6.5774, 3.3212, "Lagos", "Nigeria"),
    "ACC": _a(5.6052, -0.1668, "Accra", "Ghana"),
    "DSS": _a(14.6700, -17.0733, "Dakar", "Senegal"),
    "JNB": _a(-26.1392, 28.2460, "Johannesburg", "South Africa"),
    "CPT": _a(-33.9715, 18.6021, "Cape Town", "South Africa"),
    "DAR": _a(-6.8781, 39.2026, "Dar es Salaam", "Tanzania"),
    "KGL": _a(-1.9686, 30.1395, "Kigali", "Rwanda"),
    "MRU": _a(-20.4302, 57.6836, "Port Louis", "Mauritius"),
    # ───────────── Asia
    "HND": _a(35.5494, 139.7798, "Tokyo", "Japan"),
    "NRT": _a(35.7720, 140.3929, "Tokyo", "Japan"),
    "KIX": _a(34.4320, 135.2304, "Osaka", "Japan"),
    "CTS": _a(42.7752, 141.6923, "Sapporo", "Japan"),
    "FUK": _a(33.5859, 130.4511, "Fukuoka", "Japan"),
    "ICN": _a(37.4602, 126.4407, "Seoul", "South Korea"),
    "GMP": _a(37.5583, 126.7906, "Seoul", "South Korea"),
    "PUS": _a(35.1795, 128.9382, "Busan", "South Korea"),
    "PEK": _a(40.0799, 116.6031, "Beijing", "China"),
    "PKX": _a(39.5098, 116.4105, "Beijing", "China"),
    "PVG": _a(31.1443, 121.8083, "Shanghai", "China"),
    "SHA": _a(31.1979, 121.3363, "Shanghai", "China"),
    "CAN": _a(23.3924, 113.2988, "Guangzhou", "China"),
    "SZX": _a(22.6393, 113.8107, "Shenzhen", "China"),
    "CTU": _a(30.5785, 103.9471, "Chengdu", "China"),
    "CKG": _a(29.7192, 106.6417, "Chongqing", "China"),
    "XIY": _a(34.4471, 108.7516, "Xi'an", "China"),
    "KMG": _a(25.1019, 102.9292, "Kunming", "China"),
    "HKG": _a(22.3080, 113.9185, "Hong Kong", "Hong Kong"),
    "MFM": _a(22.1496, 113.5919, "Macau", "Macau"),
    "TPE": _a(25.0797, 121.2342, "Taipei", "Taiwan"),
    "KHH": _a(22.5771, 120.3500, "Kaohsiung", "Taiwan"),
    "MNL": _a(14.5086, 121.0194, "Manila", "Philippines"),
    "CEB": _a(10.3075, 123.9794, "Cebu", "Philippines"),
    "SIN": _a(1.3644, 103.9915, "Singapore", "Singapore"),
    "KUL": _a(2.7456, 101.7099, "Kuala Lumpur", "Malaysia"),
    "BKK": _a(13.6900, 100.7501, "Bangkok", "Thailand"),
    "DMK": _a(13.9126, 100.6067, "Bangkok", "Thailand"),
    "HKT": _a(8.1132, 98.3169, "Phuket", "Thailand"),
    "CGK": _a(-6.1256, 106.6559, "Jakarta", "Indonesia"),
    "DPS": _a(-8.7482, 115.1672, "Denpasar", "Indonesia"),
    "SGN": _a(10.8188, 106.6519, "Ho Chi Minh City", "Vietnam"),
    "HAN": _a(21.2212, 105.8072, "Hanoi", "Vietnam"),
    "DEL": _a(28.5562, 77.1000, "Delhi", "India"),
    "BOM": _a(19.0896, 72.8656, "Mumbai", "India"),
    "BLR": _a(13.1986, 77.7066, "Bengaluru", "India"),
    "MAA": _a(12.9941, 80.1709, "Chennai", "India"),
    "HYD": _a(17.2403, 78.4294, "Hyderabad", "India"),
    "CCU": _a(22.6547, 88.4467, "Kolkata", "India"),
    "COK": _a(10.1520, 76.4019, "Kochi", "India"),
    "CMB": _a(7.1808, 79.8841, "Colombo", "Sri Lanka"),
    "DAC": _a(23.8433, 90.3978, "Dhaka", "Bangladesh"),
    "KTM": _a(27.6966, 85.3591, "Kathmandu", "Nepal"),
    "KHI": _a(24.9065, 67.1608, "Karachi", "Pakistan"),
    "ISB": _a(33.5490, 72.8258, "Islamabad", "Pakistan"),
    "LHE": _a(31.5216, 74.4036, "Lahore", "Pakistan"),
    "ALA": _a(43.3521, 77.0405, "Almaty", "Kazakhstan"),
    "TAS": _a(41.2579, 69.2812, "Tashkent", "Uzbekistan"),
    # ───────────── Oceania
    "SYD": _a(-33.9399, 151.1753, "Sydney", "Australia"),
    "MEL": _a(-37.6690, 144.8410, "Melbourne", "Australia"),
    "BNE": _a(-27.3842, 153.1175, "Brisbane", "Australia"),
    "PER": _a(-31.9385, 115.9672, "Perth", "Australia"),
    "ADL": _a(-34.9450, 138.5306, "Adelaide", "Australia"),
    "OOL": _a(-28.1644, 153.5047, "Gold Coast", "Australia"),
    "CNS": _a(-16.8858, 145.7553, "Cairns", "Australia"),
    "AKL": _a(-37.0082, 174.7850, "Auckland", "New Zealand"),
    "WLG": _a(-41.3272, 174.8053, "Wellington", "New Zealand"),
    "CHC": _a(-43.4894, 172.5320, "Christchurch", "New Zealand"),
    "NAN": _a(-17.7554, 177.4434, "Nadi", "Fiji"),
    "PPT": _a(-17.5537, -149.6070, "Papeete", "French Polynesia"),
    "GUM": _a(13.4834, 144.7960, "Hagåtña", "Guam"),
}

AIRPORTS: Final[Mapping[str, AirportRecord]] = MappingProxyType(_AIRPORTS)


def get_airport(code: str | None) -> AirportRecord | None:
    """Return the registry record for an IATA *code*, or ``None``."""
    if not code:
        return None
    return AIRPORTS.get(code.strip().upper())


def is_known(code: str | None) -> bool:
    return get_airport(code) is not None


def valid_pair(dep: str | None, arr: str | None) -> bool:
    """True when both codes exist in the registry and differ."""
    return is_known(dep) and is_known(arr) and dep.strip().upper() != arr.strip().upper()  # type: ignore[union-attr]


__all__ = ["AIRPORTS", "AirportRecord", "get_airport", "is_known", "valid_pair"]
