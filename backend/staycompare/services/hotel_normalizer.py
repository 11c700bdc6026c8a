"""Maps raw Amadeus hotel-list records onto our canonical hotel dict.

Field defaults:

    field            source                          default
    ---------------  ------------------------------  ----------------
    id               hotelId, else iataCode          "hotel-<index>"
    name             name                            "Hotel"
    hotel_id         hotelId, else iataCode          None
    address          address.lines joined by ", "    ""
    distance         distance.value or distance      None
    price            (filled by enrichment)          None
    rating           (filled by enrichment)          None
    check_in_date    request                         None
    check_out_date   request                         None
"""

from typing import Any

DEFAULT_HOTEL_NAME = "Hotel"


def _text(value: Any) -> str | None:
    if isinstance(value, str) and value:
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _address(record: dict) -> str:
    address = record.get("address")
    if not isinstance(address, dict):
        return ""
    lines = address.get("lines")
    if not isinstance(lines, list):
        return ""
    return ", ".join(str(line) for line in lines if line)


def _distance(record: dict) -> float | None:
    raw = record.get("distance")
    # Amadeus nests it as {"value": 1.2, "unit": "KM"}
    if isinstance(raw, dict):
        raw = raw.get("value")
    if raw is None or isinstance(raw, bool):
        return None
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    return value if value >= 0 else None


def normalize_hotel(
    record: Any,
    index: int,
    check_in_date: str | None = None,
    check_out_date: str | None = None,
) -> dict:
    if not isinstance(record, dict):
        record = {}
    upstream_id = _text(record.get("hotelId")) or _text(record.get("iataCode"))
    return {
        "id": upstream_id or f"hotel-{index}",
        "name": _text(record.get("name")) or DEFAULT_HOTEL_NAME,
        "hotel_id": upstream_id,
        "address": _address(record),
        "distance": _distance(record),
        "rating": None,
        "price": None,
        "check_in_date": check_in_date,
        "check_out_date": check_out_date,
    }


def normalize_hotels(
    raw: Any,
    check_in_date: str | None = None,
    check_out_date: str | None = None,
) -> list[dict]:
    """Normalize an upstream list; anything that is not a list yields []."""
    if not isinstance(raw, list):
        return []

    hotels = []
    seen: set[str] = set()
    for i, record in enumerate(raw):
        hotel = normalize_hotel(record, i, check_in_date, check_out_date)
        # Upstream occasionally repeats a hotelId; ids must stay unique per list
        candidate, suffix = hotel["id"], 0
        while candidate in seen:
            suffix += 1
            candidate = f"hotel-{i}" if suffix == 1 else f"hotel-{i}-{suffix}"
        hotel["id"] = candidate
        seen.add(hotel["id"])
        hotels.append(hotel)
    return hotels
