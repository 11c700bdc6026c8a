"""Location search router — place autocomplete for geocode searches."""

from fastapi import APIRouter, Depends, Query

from staycompare.dependencies import get_geocoding_client
from staycompare.schemas.hotel import GeocodedPlace
from staycompare.services.geocoding_client import GeocodingClient

router = APIRouter()


@router.get("/search", response_model=list[GeocodedPlace])
async def search_locations(
    q: str = Query(..., min_length=1, max_length=200),
    client: GeocodingClient = Depends(get_geocoding_client),
):
    """Candidate places with name and coordinates."""
    return await client.search(q)
