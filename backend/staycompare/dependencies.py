"""FastAPI dependencies — service singletons and the role gate."""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from staycompare.config import settings
from staycompare.services.compare_service import CompareService, compare_service
from staycompare.services.geocoding_client import GeocodingClient, geocoding_client
from staycompare.services.hotel_search import HotelSearchService, hotel_search_service

DEFAULT_ROLE = "user"
ADMIN_ROLE = "admin"

bearer_scheme = HTTPBearer(auto_error=False)


def get_hotel_search_service() -> HotelSearchService:
    return hotel_search_service


def get_geocoding_client() -> GeocodingClient:
    return geocoding_client


def get_compare_service() -> CompareService:
    return compare_service


def role_from_claims(claims: dict) -> str:
    """Role lives in the identity provider's user metadata; default is 'user'."""
    metadata = claims.get("user_metadata")
    role = metadata.get("role") if isinstance(metadata, dict) else None
    return role if isinstance(role, str) and role else DEFAULT_ROLE


def decode_identity_token(token: str) -> dict:
    options = {}
    audience = settings.auth_jwt_audience or None
    if audience is None:
        options["verify_aud"] = False
    return jwt.decode(
        token,
        settings.auth_jwt_secret,
        algorithms=[settings.auth_jwt_algorithm],
        audience=audience,
        options=options,
    )


async def get_current_role(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    if credentials is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    try:
        claims = decode_identity_token(credentials.credentials)
    except JWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return role_from_claims(claims)


async def require_admin(role: str = Depends(get_current_role)) -> str:
    if role != ADMIN_ROLE:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin role required")
    return role
