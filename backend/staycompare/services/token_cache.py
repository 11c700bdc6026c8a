"""Bearer token cache for the Amadeus OAuth2 client-credentials flow."""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

import httpx

from staycompare.errors import AuthenticationError, ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)

TOKEN_PATH = "/v1/security/oauth2/token"
DEFAULT_EXPIRES_IN = 1799  # seconds, when upstream omits expires_in
SAFETY_MARGIN = timedelta(seconds=60)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenCache:
    """Holds one bearer token and refreshes it shortly before expiry.

    Concurrent callers may each trigger a refresh when the token is close to
    expiry; the last response wins.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        now: Callable[[], datetime] = _utcnow,
    ):
        self._client_id = client_id
        self._client_secret = client_secret
        self._now = now
        self._token: str | None = None
        self._expires_at: datetime | None = None

    @property
    def is_valid(self) -> bool:
        if not self._token or self._expires_at is None:
            return False
        return self._now() < self._expires_at - SAFETY_MARGIN

    def invalidate(self) -> None:
        """Drop the cached token so the next call forces a refresh."""
        self._token = None
        self._expires_at = None

    async def get_token(self, client: httpx.AsyncClient) -> str:
        if self.is_valid:
            return self._token

        if not self._client_id or not self._client_secret:
            raise ConfigurationError("Amadeus API key or secret not configured")

        for attempt in range(3):
            try:
                resp = await client.post(
                    TOKEN_PATH,
                    data={
                        "grant_type": "client_credentials",
                        "client_id": self._client_id,
                        "client_secret": self._client_secret,
                    },
                    headers={"Content-Type": "application/x-www-form-urlencoded"},
                )
                resp.raise_for_status()
                try:
                    data = resp.json()
                    token = data["access_token"]
                    expires_in = float(data.get("expires_in") or DEFAULT_EXPIRES_IN)
                except (ValueError, KeyError, TypeError, AttributeError) as e:
                    raise UpstreamError("Token response malformed", resp.status_code) from e
                if not isinstance(token, str) or not token:
                    raise UpstreamError("Token response malformed", resp.status_code)
                self._token = token
                self._expires_at = self._now() + timedelta(seconds=expires_in)
                logger.info("Amadeus token refreshed")
                return self._token
            except httpx.HTTPStatusError as e:
                status = e.response.status_code
                if status == 429 and attempt < 2:
                    await asyncio.sleep(2 ** attempt)
                    continue
                if status in (400, 401):
                    raise AuthenticationError("Amadeus authentication failed") from e
                raise UpstreamError(f"Token request failed ({status})", status) from e
            except httpx.RequestError as e:
                if attempt < 2:
                    await asyncio.sleep(2 ** attempt)
                    continue
                raise UpstreamError(f"Token request failed: {e}") from e

        raise UpstreamError("Token request failed", 429)
