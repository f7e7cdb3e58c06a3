import asyncio
import logging
import time
from typing import Callable, Optional

import httpx

from dach_flights.core.exceptions import UpstreamAuthError

logger = logging.getLogger(__name__)

# Tokens this close to expiry are treated as expired
EXPIRY_MARGIN_MS = 60_000


class TokenCache:
    """
    Single-slot cache for the Amadeus OAuth bearer token.

    One instance is created per application and shared by every request.
    Refreshes run under a lock, so concurrent requests hitting a cold cache
    share one credential exchange.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        token_url: str,
        client_id: str,
        client_secret: str,
        clock: Callable[[], float] = time.time,
    ):
        self._client = client
        self._token_url = token_url
        self._client_id = client_id
        self._client_secret = client_secret
        self._clock = clock
        self._lock = asyncio.Lock()
        self.token: Optional[str] = None
        self.expires_at_ms: int = 0

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def is_valid(self) -> bool:
        return bool(self.token) and self._now_ms() < self.expires_at_ms - EXPIRY_MARGIN_MS

    def clear(self):
        self.token = None
        self.expires_at_ms = 0

    async def get_token(self) -> str:
        if self.is_valid():
            return self.token

        async with self._lock:
            # Another request may have refreshed while we waited
            if self.is_valid():
                return self.token
            return await self._exchange()

    async def _exchange(self) -> str:
        logger.info("Amadeus token missing/expired. Fetching new one...")
        resp = await self._client.post(
            self._token_url,
            data={
                "grant_type": "client_credentials",
                "client_id": self._client_id,
                "client_secret": self._client_secret,
            },
            headers={"Content-Type": "application/x-www-form-urlencoded"},
        )
        if not resp.is_success:
            logger.warning(f"Amadeus token exchange failed: {resp.status_code}")
            raise UpstreamAuthError(resp.text, upstream_status=resp.status_code)

        data = resp.json()
        token = data.get("access_token") if isinstance(data, dict) else None
        if not token:
            logger.warning("Amadeus token response without access_token")
            raise UpstreamAuthError(resp.text, upstream_status=resp.status_code)
        try:
            expires_at_ms = self._now_ms() + int(data.get("expires_in") or 0) * 1000
        except (TypeError, ValueError):
            logger.warning(f"Amadeus token response with invalid expires_in: {data.get('expires_in')!r}")
            raise UpstreamAuthError(resp.text, upstream_status=resp.status_code)

        # Both fields change together or not at all
        self.token, self.expires_at_ms = token, expires_at_ms
        logger.info("Amadeus token retrieved.")
        return token
