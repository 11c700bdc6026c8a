from datetime import date

from pydantic import BaseModel, Field


class SearchLocation(BaseModel):
    name: str | None = None
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)


class HotelSearchParams(BaseModel):
    location: SearchLocation | None = None
    city_code: str | None = None
    adults: int = Field(default=1, ge=1)
    check_in_date: date | None = None
    check_out_date: date | None = None
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, ge=1, le=50)


class Hotel(BaseModel):
    id: str
    name: str = "Hotel"
    hotel_id: str | None = None
    address: str = ""
    distance: float | None = None
    price: float | None = None
    rating: float | None = None
    check_in_date: str | None = None
    check_out_date: str | None = None
    distance_from_airport: float | None = None
    review_count: int | None = None

    model_config = {"extra": "allow"}


class CityHotel(Hotel):
    city: str | None = None
    is_fallback: bool = False


class ScoredHotel(Hotel):
    score: float
    is_suggested: bool


class SearchResultEnvelope(BaseModel):
    data: list[Hotel]
    next_page: int | None = None
    total: int
    is_fallback: bool = False
    banner_message: str | None = None
    fallback_city_name: str | None = None


class CitySearchResult(BaseModel):
    hotels: list[CityHotel]
    is_fallback: bool = False
    fallback_type: str | None = None
    fallback_city: str | None = None
    banner_message: str | None = None
    error: str | None = None


class ScoreResponse(BaseModel):
    ranked: list[ScoredHotel]
    suggested_id: str | None = None


class AdminFilters(BaseModel):
    min_price: float | None = None
    max_price: float | None = None
    min_rating: float | None = None
    max_distance: float | None = None
    chain: str | None = None


class RankRequest(BaseModel):
    hotels: list[Hotel]
    filters: AdminFilters = AdminFilters()
    sort_by: str = Field(default="best", pattern="^(best|price|rating)$")


class GeocodedPlace(BaseModel):
    name: str
    latitude: float
    longitude: float


class CompareSelectionResponse(BaseModel):
    selected: list[Hotel]
    can_compare: bool
    max_compare: int
