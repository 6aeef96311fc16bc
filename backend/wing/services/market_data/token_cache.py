"""
OAuth access token cache.

Process-wide, read-mostly. A token is handed out until `refresh_margin`
seconds before it expires; the lock makes concurrent callers share one
refresh instead of each requesting a token.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

# Fetcher returns (access_token, expires_in_seconds)
TokenFetcher = Callable[[], Awaitable[tuple[str, int]]]


@dataclass
class AccessToken:
    value: str
    expires_at: float  # clock() seconds


class AccessTokenCache:
    def __init__(
        self,
        refresh_margin: float = 60,
        clock: Callable[[], float] = time.time,
    ):
        self.refresh_margin = refresh_margin
        self._clock = clock
        self._token: Optional[AccessToken] = None
        self._lock = asyncio.Lock()

    @property
    def token(self) -> Optional[AccessToken]:
        return self._token

    def valid_token(self) -> Optional[str]:
        """Cached token if it is not inside the refresh margin."""
        if self._token is None:
            return None
        if self._clock() >= self._token.expires_at - self.refresh_margin:
            return None
        return self._token.value

    async def get_or_refresh(self, fetcher: TokenFetcher) -> str:
        token = self.valid_token()
        if token:
            return token

        async with self._lock:
            # Another caller may have refreshed while we waited
            token = self.valid_token()
            if token:
                return token

            value, expires_in = await fetcher()
            self._token = AccessToken(value=value, expires_at=self._clock() + expires_in)
            logger.info(f"Access token refreshed, valid for {expires_in}s")
            return value

    def invalidate(self) -> None:
        self._token = None
