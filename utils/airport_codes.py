# utils/airport_codes.py
from __future__ import annotations
import re
from typing import Dict, List, Optional

AIRPORT_CODE_PATTERN = re.compile(r"^[A-Z]{3}$")

# city (lowercase) -> airport codes, primary airport first.
# Lookup order follows this declaration order.
COMMON_AIRPORTS: Dict[str, List[str]] = {
    # North America
    "new york": ["JFK", "LGA", "EWR"],
    "nyc": ["JFK", "LGA", "EWR"],
    "los angeles": ["LAX"],
    "la": ["LAX"],
    "chicago": ["ORD", "MDW"],
    "san francisco": ["SFO"],
    "sf": ["SFO"],
    "miami": ["MIA"],
    "boston": ["BOS"],
    "seattle": ["SEA"],
    "denver": ["DEN"],
    "atlanta": ["ATL"],
    "dallas": ["DFW", "DAL"],
    "washington": ["DCA", "IAD", "BWI"],
    "dc": ["DCA", "IAD", "BWI"],

    # Europe
    "london": ["LHR", "LGW", "STN", "LTN"],
    "paris": ["CDG", "ORY"],
    "amsterdam": ["AMS"],
    "frankfurt": ["FRA"],
    "madrid": ["MAD"],
    "rome": ["FCO", "CIA"],
    "barcelona": ["BCN"],
    "berlin": ["BER"],
    "zurich": ["ZUR"],
    "vienna": ["VIE"],

    # Asia / Middle East / Oceania
    "tokyo": ["NRT", "HND"],
    "beijing": ["PEK", "PKX"],
    "shanghai": ["PVG", "SHA"],
    "hong kong": ["HKG"],
    "singapore": ["SIN"],
    "dubai": ["DXB"],
    "mumbai": ["BOM"],
    "delhi": ["DEL"],
    "bangkok": ["BKK"],
    "seoul": ["ICN", "GMP"],
    "kuala lumpur": ["KUL"],
    "melbourne": ["MEL"],
    "sydney": ["SYD"],
}


def is_airport_code(value: str) -> bool:
    return bool(AIRPORT_CODE_PATTERN.match((value or "").upper()))


def find_airport_code(value: str) -> Optional[str]:
    """
    Map free text to an airport code.
    - "jfk" / "JFK" -> "JFK" (any 3 letters are taken as a code)
    - "New York" -> "JFK" (table key, primary airport)
    - "Tokyo, Japan" -> "NRT" (substring match, either direction)
    Substring ties go to the first city in COMMON_AIRPORTS, so short
    inputs can land on an unrelated city ("ta" -> "atlanta").
    Returns None when nothing matches.
    """
    v = (value or "").strip()
    if not v:
        return None

    if is_airport_code(v):
        return v.upper()

    normalized = v.lower()
    if normalized in COMMON_AIRPORTS:
        return COMMON_AIRPORTS[normalized][0]

    for city, codes in COMMON_AIRPORTS.items():
        if city in normalized or normalized in city:
            return codes[0]

    return None
