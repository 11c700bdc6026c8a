"""Geocoding client — free-text place search via OpenStreetMap Nominatim."""

import logging

import httpx

from staycompare.config import settings

logger = logging.getLogger(__name__)


def _parse_place(item: dict) -> dict | None:
    name = item.get("display_name") or ""
    try:
        latitude = float(item["lat"])
        longitude = float(item["lon"])
    except (KeyError, TypeError, ValueError):
        return None
    if not name:
        return None
    return {"name": name, "latitude": latitude, "longitude": longitude}


class GeocodingClient:
    """Turns user input into {name, latitude, longitude} candidates."""

    def __init__(
        self,
        base_url: str | None = None,
        user_agent: str | None = None,
        limit: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = base_url or settings.geocoder_base_url
        self._user_agent = user_agent or settings.geocoder_user_agent
        self._limit = limit or settings.geocoder_result_limit
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=15.0,
                transport=self._transport,
                headers={"Accept": "application/json", "User-Agent": self._user_agent},
            )
        return self._client

    async def search(self, query: str) -> list[dict]:
        if not query or not query.strip():
            return []

        client = await self._get_client()
        try:
            resp = await client.get(
                "/search",
                params={"q": query.strip(), "format": "json", "limit": self._limit},
            )
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Geocoding error for {query!r}: {e}")
            return []

        if not isinstance(data, list):
            return []
        places = [_parse_place(item) for item in data if isinstance(item, dict)]
        return [p for p in places if p is not None]

    async def close(self):
        if self._client:
            await self._client.aclose()
            self._client = None


geocoding_client = GeocodingClient()
