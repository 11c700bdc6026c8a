"""Hotel router — paginated search, city/country search, scoring and admin ranking."""

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query

from staycompare.config import settings
from staycompare.dependencies import get_hotel_search_service, require_admin
from staycompare.errors import AuthenticationError, ConfigurationError, SearchError
from staycompare.schemas.hotel import (
    CitySearchResult,
    Hotel,
    HotelSearchParams,
    RankRequest,
    ScoredHotel,
    ScoreResponse,
    SearchLocation,
    SearchResultEnvelope,
)
from staycompare.services.hotel_search import HotelSearchService
from staycompare.services.scoring_engine import apply_admin_filters, rank_hotels, score_hotels

logger = logging.getLogger(__name__)

router = APIRouter()


def _check_dates(check_in_date: date | None, check_out_date: date | None) -> None:
    if check_in_date and check_out_date and check_in_date >= check_out_date:
        raise HTTPException(status_code=400, detail="check_in_date must be before check_out_date")


def _upstream_http_error(e: Exception) -> HTTPException:
    if isinstance(e, ConfigurationError):
        return HTTPException(status_code=503, detail=str(e))
    if isinstance(e, SearchError):
        return HTTPException(status_code=502, detail=e.detail)
    return HTTPException(status_code=502, detail=str(e))


@router.get("/search", response_model=SearchResultEnvelope, response_model_exclude_unset=True)
async def search_hotels(
    city_code: str | None = Query(None, min_length=1, max_length=8),
    latitude: float | None = Query(None, ge=-90, le=90),
    longitude: float | None = Query(None, ge=-180, le=180),
    location_name: str | None = None,
    adults: int = Query(1, ge=1),
    check_in_date: date | None = None,
    check_out_date: date | None = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.search_page_size, ge=1, le=50),
    service: HotelSearchService = Depends(get_hotel_search_service),
):
    """Search hotels near a point or in a city, one page at a time."""
    _check_dates(check_in_date, check_out_date)

    location = None
    if latitude is not None or longitude is not None or location_name:
        location = SearchLocation(name=location_name, latitude=latitude, longitude=longitude)

    params = HotelSearchParams(
        location=location,
        city_code=city_code,
        adults=adults,
        check_in_date=check_in_date,
        check_out_date=check_out_date,
        page=page,
        page_size=page_size,
    )

    try:
        return await service.search(params)
    except (ConfigurationError, AuthenticationError, SearchError) as e:
        logger.warning(f"Hotel search failed: {e}")
        raise _upstream_http_error(e)


@router.get("/search/by-city", response_model=CitySearchResult, response_model_exclude_unset=True)
async def search_hotels_by_city(
    city: str = Query("", max_length=120),
    country: str = Query("", max_length=120),
    adults: int = Query(1, ge=1),
    check_in_date: date | None = None,
    check_out_date: date | None = None,
    service: HotelSearchService = Depends(get_hotel_search_service),
):
    """Search a named city, falling back to the country's capital."""
    _check_dates(check_in_date, check_out_date)

    try:
        return await service.search_by_city_country(
            city=city,
            country=country,
            check_in_date=check_in_date,
            check_out_date=check_out_date,
            adults=adults,
        )
    except (ConfigurationError, AuthenticationError) as e:
        logger.warning(f"City search failed: {e}")
        raise _upstream_http_error(e)


@router.post("/score", response_model=ScoreResponse)
async def score(hotels: list[Hotel]):
    """Rank a comparison set and flag the suggested hotel."""
    result = score_hotels([h.model_dump() for h in hotels])
    return {"ranked": result.ranked, "suggested_id": result.suggested_id}


@router.post("/rank", response_model=list[ScoredHotel])
async def rank(req: RankRequest, _role: str = Depends(require_admin)):
    """Admin view: filter a result list, score it and sort it."""
    hotels = apply_admin_filters(
        [h.model_dump() for h in req.hotels],
        req.filters.model_dump(),
    )
    return rank_hotels(hotels, req.sort_by)
