"""Fallback resolver — picks the upstream query and substitutes a location when coverage is poor.

Every tier returns one of three outcomes:

    Ok(hotels)                      primary (or default-city) search answered
    FallbackUsed(hotels, city, kind) a substitute location answered
    Err(reason)                     nothing recovered; reason is user-facing

Upstream failures inside a tier are caught and turned into the next tier or
an outcome. AuthenticationError and ConfigurationError are never caught here.
"""

import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from staycompare.data.locations import (
    CITY_TO_IATA,
    COUNTRY_CAPITAL_MAP,
    DEFAULT_CITY_CODE,
    FALLBACK_CITY_MAP,
    IATA_TO_CITY,
)
from staycompare.errors import UpstreamError

logger = logging.getLogger(__name__)

GENERIC_SEARCH_FAILURE = "Hotel search failed"
CAPITAL_SEARCH_FAILURE = "Failed to load hotels for the capital."
NO_CAPITAL_FALLBACK = "No capital fallback for this country. Try another city or country."

FALLBACK_NEARBY = "nearby"
FALLBACK_CAPITAL = "capital"


@dataclass(frozen=True)
class FallbackCity:
    city: str
    code: str


@dataclass(frozen=True)
class ListQuery:
    """One upstream hotel-list query: by geocode or by city code."""

    city_code: str | None = None
    latitude: float | None = None
    longitude: float | None = None

    @property
    def is_geocode(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @classmethod
    def for_city(cls, city_code: str) -> "ListQuery":
        return cls(city_code=city_code.upper())


@dataclass
class Ok:
    hotels: list[dict] = field(default_factory=list)


@dataclass
class FallbackUsed:
    hotels: list[dict]
    city: str
    kind: str = FALLBACK_NEARBY


@dataclass
class Err:
    reason: str


Outcome = Ok | FallbackUsed | Err
FetchList = Callable[[ListQuery], Awaitable[list[dict]]]
FetchCity = Callable[[str], Awaitable[list[dict]]]


# ─── Decisions ───


def select_endpoint(location: Mapping[str, Any] | None, city_code: Any = None) -> ListQuery:
    """Geocode when both coordinates are present, else city code (default PAR)."""
    location = location or {}
    latitude = location.get("latitude")
    longitude = location.get("longitude")
    if latitude is not None and longitude is not None:
        return ListQuery(latitude=float(latitude), longitude=float(longitude))
    if not isinstance(city_code, str) or not city_code.strip():
        city_code = DEFAULT_CITY_CODE
    return ListQuery.for_city(city_code.strip())


def _lookup(table: Mapping[str, dict[str, str]], key: Any) -> FallbackCity | None:
    if not isinstance(key, str):
        return None
    trimmed = key.strip()
    if not trimmed:
        return None
    entry = table.get(trimmed) or table.get(trimmed.split(",")[0].strip())
    if entry is None:
        return None
    return FallbackCity(city=entry["city"], code=entry["code"])


def lookup_fallback(location_name: Any) -> FallbackCity | None:
    """Nearby supported city for a location: full name first, then its city segment."""
    return _lookup(FALLBACK_CITY_MAP, location_name)


def lookup_capital(country: Any) -> FallbackCity | None:
    if not isinstance(country, str):
        return None
    entry = COUNTRY_CAPITAL_MAP.get(country.strip())
    if entry is None:
        return None
    return FallbackCity(city=entry["city"], code=entry["code"])


def resolve_city_code(city: Any) -> str | None:
    if not isinstance(city, str) or not city.strip():
        return None
    trimmed = city.strip()
    return CITY_TO_IATA.get(trimmed) or CITY_TO_IATA.get(trimmed.split(",")[0].strip())


def fallback_key_for(query: ListQuery, location_name: str | None) -> str | None:
    """Key used for nearby-city lookups.

    The location's display name when we have one; for bare city-code searches,
    the city name behind a known IATA code.
    """
    if location_name and location_name.strip():
        return location_name
    if not query.is_geocode and query.city_code:
        return IATA_TO_CITY.get(query.city_code)
    return None


# ─── Tiers ───


async def _search_nearby(fetch: FetchList, fallback: FallbackCity) -> FallbackUsed:
    hotels = await fetch(ListQuery.for_city(fallback.code))
    logger.info(f"Using nearby city {fallback.city} ({fallback.code}): {len(hotels)} hotels")
    return FallbackUsed(hotels=hotels, city=fallback.city, kind=FALLBACK_NEARBY)


async def _recover_from_error(
    fetch: FetchList,
    query: ListQuery,
    fallback_key: str | None,
    error: UpstreamError,
) -> Outcome:
    reason = error.detail or GENERIC_SEARCH_FAILURE
    if not (query.is_geocode and error.is_http_error):
        return Err(reason)

    fallback = lookup_fallback(fallback_key)
    try:
        if fallback:
            return await _search_nearby(fetch, fallback)
        logger.info(f"Geocode search failed ({error.status_code}), retrying {DEFAULT_CITY_CODE}")
        return Ok(await fetch(ListQuery.for_city(DEFAULT_CITY_CODE)))
    except UpstreamError as retry_error:
        logger.warning(f"Fallback search failed: {retry_error.detail}")
        return Err(reason)


async def _recover_from_empty(fetch: FetchList, fallback_key: str | None, outcome: Ok) -> Outcome:
    fallback = lookup_fallback(fallback_key)
    if fallback is None:
        return outcome
    try:
        return await _search_nearby(fetch, fallback)
    except UpstreamError as e:
        logger.warning(f"Nearby-city search for empty result failed: {e.detail}")
        return outcome


async def resolve_listing(
    fetch: FetchList,
    query: ListQuery,
    location_name: str | None = None,
) -> Outcome:
    """Run the primary query, then the error- or empty-result fallback tier."""
    fallback_key = fallback_key_for(query, location_name)
    try:
        outcome: Outcome = Ok(await fetch(query))
    except UpstreamError as e:
        outcome = await _recover_from_error(fetch, query, fallback_key, e)

    if isinstance(outcome, Ok) and not outcome.hotels and fallback_key:
        outcome = await _recover_from_empty(fetch, fallback_key, outcome)
    return outcome


async def resolve_city_country(fetch: FetchCity, city: Any, country: Any) -> Outcome:
    """Requested city first, then the country's capital."""
    city_code = resolve_city_code(city)
    if city_code:
        try:
            hotels = await fetch(city_code)
        except UpstreamError as e:
            logger.warning(f"City search for {city_code} failed: {e.detail}")
        else:
            if hotels:
                return Ok(hotels)

    capital = lookup_capital(country)
    if capital is None:
        return Err(NO_CAPITAL_FALLBACK)

    try:
        hotels = await fetch(capital.code)
    except UpstreamError as e:
        return Err(e.detail or CAPITAL_SEARCH_FAILURE)
    logger.info(f"Using capital {capital.city} ({capital.code}) for {city!r}, {country!r}")
    return FallbackUsed(hotels=hotels, city=capital.city, kind=FALLBACK_CAPITAL)
