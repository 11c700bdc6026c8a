from __future__ import annotations

from datetime import date

import httpx
import pytest

from conftest import FakeAmadeus, offer, raw_hotels, upstream_error
from staycompare.errors import AuthenticationError, ConfigurationError, SearchError
from staycompare.schemas.hotel import HotelSearchParams, SearchLocation
from staycompare.services.amadeus_client import HOTELS_BY_GEOCODE_PATH, AmadeusClient
from staycompare.services.hotel_search import (
    CAPITAL_BANNER,
    NEARBY_BANNER,
    HotelSearchService,
    paginate,
)

PATNA = SearchLocation(name="Patna, Bihar, India", latitude=25.5941, longitude=85.1376)


def _params(**kwargs) -> HotelSearchParams:
    return HotelSearchParams(**kwargs)


class TestPaginate:
    def test_pages_of_ten_over_twenty_three(self):
        hotels = [{"id": str(i)} for i in range(23)]
        first, next_first = paginate(hotels, 1, 10)
        last, next_last = paginate(hotels, 3, 10)
        assert (len(first), next_first) == (10, 2)
        assert (len(last), next_last) == (3, None)

    def test_page_past_the_end_is_empty(self):
        assert paginate([{"id": "a"}], 4, 10) == ([], None)


@pytest.mark.asyncio
async def test_pagination_scenario(fake_amadeus: FakeAmadeus, search_service: HotelSearchService) -> None:
    fake_amadeus.by_city["PAR"] = raw_hotels(23)

    page1 = await search_service.search(_params(page=1, page_size=10))
    page3 = await search_service.search(_params(page=3, page_size=10))

    assert len(page1["data"]) == 10
    assert page1["next_page"] == 2
    assert page1["total"] == 23
    assert len(page3["data"]) == 3
    assert page3["next_page"] is None
    assert page3["data"][0]["id"] == "PAR00020"
    assert page1["is_fallback"] is False
    assert "banner_message" not in page1


@pytest.mark.asyncio
async def test_every_hotel_has_price_and_rating(fake_amadeus: FakeAmadeus, search_service: HotelSearchService) -> None:
    fake_amadeus.by_city["PAR"] = raw_hotels(12)
    fake_amadeus.offers = [offer("PAR00010", "310.00", rating="5")]

    result = await search_service.search(
        _params(page=2, check_in_date=date(2026, 5, 10), check_out_date=date(2026, 5, 12))
    )

    assert [h["id"] for h in result["data"]] == ["PAR00010", "PAR00011"]
    assert result["data"][0]["price"] == 310.0
    assert result["data"][0]["rating"] == 5.0
    assert result["data"][1]["price"] == 120.0
    assert result["data"][1]["rating"] == 3.8
    assert result["data"][1]["check_in_date"] == "2026-05-10"
    # Only the page slice is enriched
    assert fake_amadeus.offer_hotel_ids() == [["PAR00010", "PAR00011"]]


@pytest.mark.asyncio
async def test_empty_city_code_search_falls_back_to_kolkata(
    fake_amadeus: FakeAmadeus, search_service: HotelSearchService
) -> None:
    fake_amadeus.by_city["PAT"] = []
    fake_amadeus.by_city["CCU"] = raw_hotels(4, prefix="CCU")

    result = await search_service.search(_params(city_code="PAT"))

    assert result["is_fallback"] is True
    assert result["fallback_city_name"] == "Kolkata"
    assert result["banner_message"] == NEARBY_BANNER
    assert result["total"] == 4
    assert fake_amadeus.city_codes_requested() == ["PAT", "CCU"]


@pytest.mark.asyncio
async def test_geocode_error_falls_back_to_mapped_city(
    fake_amadeus: FakeAmadeus, search_service: HotelSearchService
) -> None:
    fake_amadeus.by_geocode = upstream_error(500, "SYSTEM ERROR HAS OCCURRED")
    fake_amadeus.by_city["CCU"] = raw_hotels(2, prefix="CCU")

    result = await search_service.search(_params(location=PATNA))

    assert result["is_fallback"] is True
    assert result["fallback_city_name"] == "Kolkata"
    [geo_request] = fake_amadeus.requests_to(HOTELS_BY_GEOCODE_PATH)
    assert geo_request.url.params["latitude"] == "25.5941"
    assert geo_request.url.params["radius"] == "5"


@pytest.mark.asyncio
async def test_geocode_error_without_mapping_uses_default_city(
    fake_amadeus: FakeAmadeus, search_service: HotelSearchService
) -> None:
    fake_amadeus.by_geocode = upstream_error(400, "INVALID FORMAT")
    fake_amadeus.by_city["PAR"] = raw_hotels(3)

    result = await search_service.search(
        _params(location=SearchLocation(name="Springfield", latitude=39.8, longitude=-89.6))
    )

    assert result["is_fallback"] is False
    assert result["total"] == 3
    assert fake_amadeus.city_codes_requested() == ["PAR"]


@pytest.mark.asyncio
async def test_unrecovered_failure_raises_search_error_with_detail(
    fake_amadeus: FakeAmadeus, search_service: HotelSearchService
) -> None:
    fake_amadeus.by_geocode = upstream_error(400, "INVALID FORMAT")
    fake_amadeus.by_city["PAR"] = upstream_error(500, "SYSTEM ERROR")

    with pytest.raises(SearchError) as exc:
        await search_service.search(_params(location=SearchLocation(latitude=1.0, longitude=2.0)))

    assert exc.value.detail == "INVALID FORMAT"


@pytest.mark.asyncio
async def test_auth_failure_propagates(fake_amadeus: FakeAmadeus, search_service: HotelSearchService) -> None:
    fake_amadeus.by_geocode = (401, {"errors": [{"detail": "Access token expired"}]})

    with pytest.raises(AuthenticationError):
        await search_service.search(_params(location=PATNA))

    assert fake_amadeus.city_codes_requested() == []
    assert not search_service.client.token_cache.is_valid


@pytest.mark.asyncio
async def test_missing_credentials_fail_at_first_search(fake_amadeus: FakeAmadeus) -> None:
    service = HotelSearchService(
        AmadeusClient(client_id="", client_secret="", transport=httpx.MockTransport(fake_amadeus.handler))
    )

    with pytest.raises(ConfigurationError):
        await service.search(_params())


@pytest.mark.asyncio
async def test_city_country_search_uses_requested_city(
    fake_amadeus: FakeAmadeus, search_service: HotelSearchService
) -> None:
    fake_amadeus.by_city["BOM"] = raw_hotels(2, prefix="BOM")

    result = await search_service.search_by_city_country("Mumbai", "India")

    assert result["is_fallback"] is False
    assert [h["city"] for h in result["hotels"]] == ["Mumbai", "Mumbai"]
    assert all(h["price"] is not None and h["rating"] is not None for h in result["hotels"])


@pytest.mark.asyncio
async def test_city_country_search_falls_back_to_capital(
    fake_amadeus: FakeAmadeus, search_service: HotelSearchService
) -> None:
    fake_amadeus.by_city["PAT"] = []
    fake_amadeus.by_city["DEL"] = raw_hotels(6, prefix="DEL")
    fake_amadeus.offers = [offer("DEL00004", "88.50")]

    result = await search_service.search_by_city_country(
        "Patna", "India", check_in_date="2026-06-01", check_out_date="2026-06-04"
    )

    assert result["is_fallback"] is True
    assert result["fallback_type"] == "capital"
    assert result["fallback_city"] == "New Delhi"
    assert result["banner_message"] == CAPITAL_BANNER
    assert {h["city"] for h in result["hotels"]} == {"New Delhi"}
    assert all(h["is_fallback"] for h in result["hotels"])
    assert result["hotels"][4]["price"] == 88.5
    assert result["hotels"][5]["price"] == 80.0
    assert fake_amadeus.offer_hotel_ids() == [["DEL00000", "DEL00001", "DEL00002", "DEL00003", "DEL00004"]]


@pytest.mark.asyncio
async def test_city_country_search_without_capital_mapping(search_service: HotelSearchService) -> None:
    result = await search_service.search_by_city_country("Lilliput", "Atlantis")

    assert result == {
        "hotels": [],
        "is_fallback": False,
        "error": "No capital fallback for this country. Try another city or country.",
    }
