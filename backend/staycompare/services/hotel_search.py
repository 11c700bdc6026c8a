"""Hotel search service — one paginated, enriched search with location fallbacks."""

import logging
from datetime import date

from staycompare.errors import SearchError
from staycompare.schemas.hotel import HotelSearchParams
from staycompare.services.amadeus_client import AmadeusClient, amadeus_client
from staycompare.services.fallback_resolver import (
    FALLBACK_CAPITAL,
    Err,
    FallbackUsed,
    ListQuery,
    resolve_city_country,
    resolve_listing,
    select_endpoint,
)
from staycompare.services.hotel_normalizer import normalize_hotels
from staycompare.services.offer_enricher import enrich_with_offers, fill_placeholders

logger = logging.getLogger(__name__)

NEARBY_BANNER = "Limited availability for this city. Showing popular / recommended stays nearby."
CAPITAL_BANNER = "Limited availability for this city. Showing popular stays in the capital."


def _iso(value: date | str | None) -> str | None:
    if value is None or isinstance(value, str):
        return value or None
    return value.isoformat()


def paginate(hotels: list[dict], page: int, page_size: int) -> tuple[list[dict], int | None]:
    """Slice one page out of the full list; next page is None once exhausted."""
    page = max(page, 1)
    offset = (page - 1) * page_size
    sliced = hotels[offset:offset + page_size]
    has_more = offset + len(sliced) < len(hotels)
    return sliced, page + 1 if has_more else None


class HotelSearchService:
    """Composes endpoint selection, fallbacks, pagination and enrichment."""

    def __init__(self, client: AmadeusClient):
        self.client = client

    async def _fetch_list(
        self,
        query: ListQuery,
        check_in_date: str | None,
        check_out_date: str | None,
    ) -> list[dict]:
        if query.is_geocode:
            raw = await self.client.list_hotels_by_geocode(query.latitude, query.longitude)
        else:
            raw = await self.client.list_hotels_by_city(query.city_code)
        return normalize_hotels(raw, check_in_date, check_out_date)

    async def search(self, params: HotelSearchParams) -> dict:
        """
        Execute one hotel search page.

        Returns dict with: data, next_page, total, is_fallback and, when a
        nearby city was substituted, banner_message and fallback_city_name.
        Raises AuthenticationError / ConfigurationError untouched and
        SearchError when every fallback tier failed.
        """
        check_in = _iso(params.check_in_date)
        check_out = _iso(params.check_out_date)
        location = params.location.model_dump() if params.location else None
        location_name = location.get("name") if location else None

        query = select_endpoint(location, params.city_code)

        async def fetch(q: ListQuery) -> list[dict]:
            return await self._fetch_list(q, check_in, check_out)

        outcome = await resolve_listing(fetch, query, location_name)
        if isinstance(outcome, Err):
            raise SearchError(outcome.reason)

        hotels = outcome.hotels
        page, next_page = paginate(hotels, params.page, params.page_size)

        await enrich_with_offers(self.client, page, check_in, check_out, params.adults)
        fill_placeholders(page)

        result = {
            "data": page,
            "next_page": next_page,
            "total": len(hotels),
            "is_fallback": False,
        }
        if isinstance(outcome, FallbackUsed) and outcome.city:
            result["is_fallback"] = True
            result["banner_message"] = NEARBY_BANNER
            result["fallback_city_name"] = outcome.city

        logger.info(
            f"Hotel search {query} page {params.page}: "
            f"{len(page)}/{len(hotels)} hotels, fallback={result['is_fallback']}"
        )
        return result

    async def _fetch_city(
        self,
        city_code: str,
        check_in_date: str | None,
        check_out_date: str | None,
        adults: int,
    ) -> list[dict]:
        hotels = await self._fetch_list(ListQuery.for_city(city_code), check_in_date, check_out_date)
        await enrich_with_offers(self.client, hotels, check_in_date, check_out_date, adults)
        return fill_placeholders(hotels)

    async def search_by_city_country(
        self,
        city: str | None,
        country: str | None,
        check_in_date: date | str | None = None,
        check_out_date: date | str | None = None,
        adults: int = 1,
    ) -> dict:
        """Search a named city, falling back to its country's capital.

        Never raises for upstream failures: the result carries an `error`
        message and no hotels instead.
        """
        check_in = _iso(check_in_date)
        check_out = _iso(check_out_date)
        requested_city = city.strip() if isinstance(city, str) else ""

        async def fetch(city_code: str) -> list[dict]:
            return await self._fetch_city(city_code, check_in, check_out, adults)

        outcome = await resolve_city_country(fetch, requested_city, country)

        if isinstance(outcome, Err):
            return {"hotels": [], "is_fallback": False, "error": outcome.reason}

        if isinstance(outcome, FallbackUsed):
            return {
                "hotels": [
                    {**h, "city": outcome.city, "is_fallback": True} for h in outcome.hotels
                ],
                "is_fallback": True,
                "fallback_type": FALLBACK_CAPITAL,
                "fallback_city": outcome.city,
                "banner_message": CAPITAL_BANNER,
            }

        return {
            "hotels": [
                {**h, "city": requested_city, "is_fallback": False} for h in outcome.hotels
            ],
            "is_fallback": False,
        }


hotel_search_service = HotelSearchService(amadeus_client)
