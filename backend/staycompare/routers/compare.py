"""Comparison router — the user's hotel comparison set."""

from fastapi import APIRouter, Depends

from staycompare.dependencies import get_compare_service
from staycompare.schemas.hotel import CompareSelectionResponse, Hotel, ScoreResponse
from staycompare.services.compare_service import CompareService
from staycompare.services.scoring_engine import score_hotels

router = APIRouter()


def _selection(service: CompareService) -> dict:
    return {
        "selected": service.selected,
        "can_compare": service.can_compare,
        "max_compare": service.max_hotels,
    }


@router.get("", response_model=CompareSelectionResponse)
async def get_selection(service: CompareService = Depends(get_compare_service)):
    return _selection(service)


@router.post("", response_model=CompareSelectionResponse)
async def add_hotel(hotel: Hotel, service: CompareService = Depends(get_compare_service)):
    service.add(hotel.model_dump())
    return _selection(service)


@router.post("/toggle", response_model=CompareSelectionResponse)
async def toggle_hotel(hotel: Hotel, service: CompareService = Depends(get_compare_service)):
    service.toggle(hotel.model_dump())
    return _selection(service)


@router.delete("", response_model=CompareSelectionResponse)
async def clear_selection(service: CompareService = Depends(get_compare_service)):
    service.clear()
    return _selection(service)


@router.delete("/{hotel_id}", response_model=CompareSelectionResponse)
async def remove_hotel(hotel_id: str, service: CompareService = Depends(get_compare_service)):
    service.remove(hotel_id)
    return _selection(service)


@router.get("/scored", response_model=ScoreResponse)
async def scored_selection(service: CompareService = Depends(get_compare_service)):
    """Selected hotels ranked, with the suggested one flagged."""
    result = score_hotels(service.selected)
    return {"ranked": result.ranked, "suggested_id": result.suggested_id}
