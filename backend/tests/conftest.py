from __future__ import annotations

from typing import Any

import httpx
import pytest

from staycompare.services.amadeus_client import (
    HOTEL_OFFERS_PATH,
    HOTELS_BY_CITY_PATH,
    HOTELS_BY_GEOCODE_PATH,
    AmadeusClient,
)
from staycompare.services.hotel_search import HotelSearchService
from staycompare.services.token_cache import TOKEN_PATH

BASE_URL = "https://test.api.amadeus.com"


def raw_hotels(count: int, prefix: str = "PAR") -> list[dict[str, Any]]:
    return [
        {
            "hotelId": f"{prefix}{i:05d}",
            "name": f"{prefix} Hotel {i}",
            "iataCode": prefix,
            "address": {"lines": [f"{i} Main Street"], "countryCode": "FR"},
            "distance": {"value": 0.5 + i, "unit": "KM"},
        }
        for i in range(count)
    ]


def upstream_error(status: int, detail: str) -> tuple[int, dict[str, Any]]:
    return status, {"errors": [{"status": status, "code": 0, "title": "ERROR", "detail": detail}]}


class FakeAmadeus:
    """Routes MockTransport requests to canned Amadeus responses.

    A response spec is either a list (returned as `data`) or a
    `(status, body)` tuple.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.token_response: Any = (200, {"access_token": "token-1", "expires_in": 1799})
        self.by_city: dict[str, Any] = {}
        self.by_geocode: Any = []
        self.offers: Any = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path == TOKEN_PATH:
            return self._reply(self.token_response)
        if path == HOTELS_BY_CITY_PATH:
            return self._reply(self.by_city.get(request.url.params["cityCode"], []))
        if path == HOTELS_BY_GEOCODE_PATH:
            return self._reply(self.by_geocode)
        if path == HOTEL_OFFERS_PATH:
            return self._reply(self.offers)
        return httpx.Response(404, json={"errors": [{"detail": "not found"}]})

    @staticmethod
    def _reply(spec: Any) -> httpx.Response:
        if isinstance(spec, tuple):
            status, body = spec
            return httpx.Response(status, json=body)
        return httpx.Response(200, json={"data": spec})

    def requests_to(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    def city_codes_requested(self) -> list[str]:
        return [r.url.params["cityCode"] for r in self.requests_to(HOTELS_BY_CITY_PATH)]

    def offer_hotel_ids(self) -> list[list[str]]:
        return [r.url.params["hotelIds"].split(",") for r in self.requests_to(HOTEL_OFFERS_PATH)]


def offer(hotel_id: str, total: Any, rating: Any = None) -> dict[str, Any]:
    room: dict[str, Any] = {"type": "STD"}
    if rating is not None:
        room["description"] = {"text": "Standard room", "rating": rating}
    return {
        "type": "hotel-offers",
        "hotel": {"hotelId": hotel_id},
        "offers": [{"id": f"OFFER-{hotel_id}", "total": total, "room": room}],
    }


@pytest.fixture
def fake_amadeus() -> FakeAmadeus:
    return FakeAmadeus()


@pytest.fixture
def amadeus(fake_amadeus: FakeAmadeus) -> AmadeusClient:
    return AmadeusClient(
        client_id="client-id",
        client_secret="client-secret",
        base_url=BASE_URL,
        transport=httpx.MockTransport(fake_amadeus.handler),
    )


@pytest.fixture
def search_service(amadeus: AmadeusClient) -> HotelSearchService:
    return HotelSearchService(amadeus)
