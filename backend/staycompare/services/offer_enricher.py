"""Offer enrichment — best-effort price/rating lookup plus deterministic placeholders."""

import logging
from typing import Any

from staycompare.errors import AuthenticationError, EnrichmentFailure, UpstreamError
from staycompare.services.amadeus_client import AmadeusClient

logger = logging.getLogger(__name__)

# Upstream batch-size cap for one offers call
OFFER_BATCH_SIZE = 5


def _number(value: Any) -> float | None:
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _first_offer(record: dict) -> dict:
    offers = record.get("offers")
    if isinstance(offers, list) and offers and isinstance(offers[0], dict):
        return offers[0]
    return {}


def _offer_rating(offer: dict) -> float | None:
    room = offer.get("room")
    description = room.get("description") if isinstance(room, dict) else None
    if not isinstance(description, dict):
        return None
    rating = _number(description.get("rating"))
    # Zero or negative means unrated; the placeholder fills it later
    if rating is None or rating <= 0:
        return None
    return min(rating, 5.0)


def apply_offers(hotels: list[dict], offers: list[dict]) -> int:
    """Merge offer price/rating into matching hotels. Returns the match count."""
    by_hotel_id: dict[str, dict] = {}
    for hotel in hotels:
        if hotel.get("hotel_id"):
            by_hotel_id.setdefault(hotel["hotel_id"], hotel)
    matched = 0
    for record in offers:
        if not isinstance(record, dict):
            continue
        hotel_info = record.get("hotel")
        hotel_id = hotel_info.get("hotelId") if isinstance(hotel_info, dict) else None
        hotel = by_hotel_id.get(hotel_id)
        if hotel is None:
            continue
        offer = _first_offer(record)
        hotel["price"] = _number(offer.get("total"))
        hotel["rating"] = _offer_rating(offer)
        matched += 1
    return matched


async def _fetch_offers(
    client: AmadeusClient,
    hotel_ids: list[str],
    check_in_date: str,
    check_out_date: str,
    adults: int,
) -> list[dict]:
    try:
        return await client.get_hotel_offers(hotel_ids, check_in_date, check_out_date, adults)
    except (UpstreamError, AuthenticationError) as e:
        raise EnrichmentFailure(str(e)) from e


async def enrich_with_offers(
    client: AmadeusClient,
    hotels: list[dict],
    check_in_date: str | None,
    check_out_date: str | None,
    adults: int = 1,
) -> list[dict]:
    """Attach live prices to the first few hotels. Failures leave hotels untouched."""
    if not (check_in_date and check_out_date) or not hotels:
        return hotels

    hotel_ids = [h["hotel_id"] for h in hotels[:OFFER_BATCH_SIZE] if h.get("hotel_id")]
    if not hotel_ids:
        return hotels

    try:
        offers = await _fetch_offers(client, hotel_ids, check_in_date, check_out_date, adults)
    except EnrichmentFailure as e:
        logger.warning(f"Offer enrichment skipped for {len(hotel_ids)} hotels: {e}")
        return hotels

    matched = apply_offers(hotels, offers)
    logger.debug(f"Offer enrichment matched {matched}/{len(hotel_ids)} hotels")
    return hotels


def placeholder_price(index: int) -> float:
    return float(80 + (index % 5) * 40)


def placeholder_rating(index: int) -> float:
    return round(3.5 + (index % 5) * 0.3, 1)


def fill_placeholders(hotels: list[dict]) -> list[dict]:
    """Give every hotel a price and rating, keyed on its position in the page."""
    for i, hotel in enumerate(hotels):
        if hotel.get("price") is None:
            hotel["price"] = placeholder_price(i)
        if hotel.get("rating") is None:
            hotel["rating"] = placeholder_rating(i)
    return hotels
