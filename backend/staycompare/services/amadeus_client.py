"""Amadeus API client — hotel list and hotel offer lookups with OAuth2 bearer auth."""

import asyncio
import logging
from typing import Any

import httpx

from staycompare.config import settings
from staycompare.errors import AuthenticationError, UpstreamError
from staycompare.services.token_cache import TokenCache

logger = logging.getLogger(__name__)

HOTELS_BY_GEOCODE_PATH = "/v1/reference-data/locations/hotels/by-geocode"
HOTELS_BY_CITY_PATH = "/v1/reference-data/locations/hotels/by-city"
HOTEL_OFFERS_PATH = "/v2/shopping/hotel-offers"

SEARCH_RADIUS = 5
SEARCH_RADIUS_UNIT = "KM"
MAX_ADULTS = 9


def _error_detail(resp: httpx.Response) -> str | None:
    """First upstream error detail, if the body carries one."""
    try:
        body = resp.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    errors = body.get("errors")
    if isinstance(errors, list) and errors and isinstance(errors[0], dict):
        return errors[0].get("detail") or errors[0].get("title")
    return None


class AmadeusClient:
    """Adapter for the Amadeus Self-Service hotel endpoints."""

    def __init__(
        self,
        client_id: str | None = None,
        client_secret: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        token_cache: TokenCache | None = None,
    ):
        self._base_url = base_url or settings.amadeus_base_url
        self._timeout = timeout or settings.amadeus_timeout_seconds
        self._transport = transport
        self.token_cache = token_cache or TokenCache(
            client_id if client_id is not None else settings.amadeus_client_id,
            client_secret if client_secret is not None else settings.amadeus_client_secret,
        )
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def get_token(self) -> str:
        client = await self._get_client()
        return await self.token_cache.get_token(client)

    async def _get(self, path: str, params: dict[str, Any]) -> list[dict]:
        """Authenticated GET returning the `data` array of the response."""
        client = await self._get_client()
        token = await self.token_cache.get_token(client)

        for attempt in range(3):
            try:
                resp = await client.get(
                    path,
                    params=params,
                    headers={"Authorization": f"Bearer {token}"},
                )
            except httpx.RequestError as e:
                logger.error(f"Amadeus request error on {path}: {e}")
                raise UpstreamError(str(e) or "Hotel search failed") from e

            if resp.status_code == 429 and attempt < 2:
                await asyncio.sleep(2 ** attempt)
                continue
            if resp.status_code == 401:
                self.token_cache.invalidate()
                raise AuthenticationError("Amadeus authentication failed")
            if resp.status_code >= 400:
                detail = _error_detail(resp) or "Hotel search failed"
                logger.warning(f"Amadeus {path} returned {resp.status_code}: {detail}")
                raise UpstreamError(detail, resp.status_code)

            try:
                body = resp.json()
            except ValueError:
                return []
            data = body.get("data") if isinstance(body, dict) else None
            return data if isinstance(data, list) else []

        raise UpstreamError("Hotel search failed", 429)

    async def list_hotels_by_geocode(self, latitude: float, longitude: float) -> list[dict]:
        return await self._get(
            HOTELS_BY_GEOCODE_PATH,
            {
                "latitude": latitude,
                "longitude": longitude,
                "radius": SEARCH_RADIUS,
                "radiusUnit": SEARCH_RADIUS_UNIT,
            },
        )

    async def list_hotels_by_city(self, city_code: str) -> list[dict]:
        return await self._get(
            HOTELS_BY_CITY_PATH,
            {
                "cityCode": city_code.upper(),
                "radius": SEARCH_RADIUS,
                "radiusUnit": SEARCH_RADIUS_UNIT,
            },
        )

    async def get_hotel_offers(
        self,
        hotel_ids: list[str],
        check_in_date: str,
        check_out_date: str,
        adults: int = 1,
    ) -> list[dict]:
        """Priced offers for up to a handful of hotels in one batched call."""
        return await self._get(
            HOTEL_OFFERS_PATH,
            {
                "hotelIds": ",".join(hotel_ids),
                "adults": min(max(adults, 1), MAX_ADULTS),
                "checkInDate": check_in_date,
                "checkOutDate": check_out_date,
            },
        )

    async def close(self):
        if self._client:
            await self._client.aclose()
            self._client = None


amadeus_client = AmadeusClient()
