"""Static location tables — city → IATA, nearby-city fallbacks, country capitals.

Coverage is intentionally small and curated. Lookups are exact-match only.
"""

from types import MappingProxyType

# Default city when no location or city code is given
DEFAULT_CITY_CODE = "PAR"

# City name → IATA city code for primary searches
CITY_TO_IATA: MappingProxyType[str, str] = MappingProxyType({
    "Patna": "PAT",
    "New Delhi": "DEL",
    "Paris": "PAR",
    "Tokyo": "TYO",
    "Kolkata": "CCU",
    "Mumbai": "BOM",
    "Gaya": "GAY",
    "Varanasi": "VNS",
})

# IATA city code → city name, used when only a code is known
IATA_TO_CITY: MappingProxyType[str, str] = MappingProxyType(
    {code: city for city, code in CITY_TO_IATA.items()}
)

# Cities with little or no upstream coverage → nearby supported city
FALLBACK_CITY_MAP: MappingProxyType[str, dict[str, str]] = MappingProxyType({
    "Patna": {"city": "Kolkata", "code": "CCU"},
    "Patna, India": {"city": "Kolkata", "code": "CCU"},
    "Gaya": {"city": "Varanasi", "code": "VNS"},
    "Gaya, India": {"city": "Varanasi", "code": "VNS"},
})

# Country → capital used when the requested city yields nothing
COUNTRY_CAPITAL_MAP: MappingProxyType[str, dict[str, str]] = MappingProxyType({
    "India": {"city": "New Delhi", "code": "DEL"},
    "France": {"city": "Paris", "code": "PAR"},
    "Japan": {"city": "Tokyo", "code": "TYO"},
})
