"""Comparison selection — a small, ordered set of hotels kept in a local JSON file."""

import json
import logging
from pathlib import Path

from staycompare.config import settings

logger = logging.getLogger(__name__)


class CompareService:
    """Bounded hotel selection, rehydrated at construction and saved on every change.

    Storage failures are logged and ignored; the selection keeps working in
    memory for the rest of the process.
    """

    def __init__(self, storage_path: str | Path, max_hotels: int = 5):
        self._path = Path(storage_path)
        self.max_hotels = max_hotels
        self._selected: list[dict] = self._load()

    def _load(self) -> list[dict]:
        try:
            if not self._path.is_file():
                return []
            parsed = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Compare selection unreadable, starting empty: {e}")
            return []
        if not isinstance(parsed, list):
            return []
        hotels = [h for h in parsed if isinstance(h, dict) and h.get("id")]
        return hotels[: self.max_hotels]

    def _save(self) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(self._selected, default=str), encoding="utf-8")
        except (OSError, TypeError, ValueError) as e:
            logger.warning(f"Compare selection not saved: {e}")

    @property
    def selected(self) -> list[dict]:
        return list(self._selected)

    @property
    def can_compare(self) -> bool:
        return len(self._selected) >= 2

    def is_selected(self, hotel_id: str) -> bool:
        return any(h["id"] == hotel_id for h in self._selected)

    def add(self, hotel: dict) -> list[dict]:
        """Append a hotel unless it has no id, is already selected, or the set is full."""
        hotel_id = hotel.get("id") if isinstance(hotel, dict) else None
        if not hotel_id or self.is_selected(hotel_id):
            return self.selected
        if len(self._selected) >= self.max_hotels:
            return self.selected
        self._selected.append(dict(hotel))
        self._save()
        return self.selected

    def remove(self, hotel_id: str) -> list[dict]:
        remaining = [h for h in self._selected if h["id"] != hotel_id]
        if len(remaining) != len(self._selected):
            self._selected = remaining
            self._save()
        return self.selected

    def toggle(self, hotel: dict) -> list[dict]:
        hotel_id = hotel.get("id") if isinstance(hotel, dict) else None
        if not hotel_id:
            return self.selected
        if self.is_selected(hotel_id):
            return self.remove(hotel_id)
        return self.add(hotel)

    def clear(self) -> list[dict]:
        self._selected = []
        self._save()
        return self.selected


compare_service = CompareService(settings.compare_store_path, settings.compare_max_hotels)
