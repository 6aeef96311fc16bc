"""
Vendor HTTP helper.

One aiohttp session per vendor client with a short total timeout.
Only transient transport failures (connection reset/abort, server
disconnect, timeout) are retried; HTTP error statuses are raised at once.
"""

import asyncio
import logging
from typing import Any, Optional

import aiohttp

from wing.core.config import settings
from wing.services.base import ExternalAPIError

logger = logging.getLogger(__name__)

TRANSIENT_ERRORS = (
    aiohttp.ClientConnectionError,
    aiohttp.ClientPayloadError,
    asyncio.TimeoutError,
)


class VendorHttpClient:
    """JSON (or HTML) over HTTP with limited retry."""

    def __init__(
        self,
        service_name: str,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        retry_backoff: float = 0.3,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.service_name = service_name
        self.timeout = timeout if timeout is not None else settings.http_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.http_max_retries
        self.retry_backoff = retry_backoff
        self._session = session

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure we have an active HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            )
        return self._session

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def get_json(
        self, url: str, params: Optional[dict] = None, headers: Optional[dict] = None
    ) -> Any:
        return await self.request("GET", url, params=params, headers=headers)

    async def post_json(
        self, url: str, body: Optional[dict] = None, headers: Optional[dict] = None
    ) -> Any:
        return await self.request("POST", url, json=body, headers=headers)

    async def get_text(
        self, url: str, params: Optional[dict] = None, headers: Optional[dict] = None
    ) -> str:
        return await self.request("GET", url, as_text=True, params=params, headers=headers)

    async def request(self, method: str, url: str, as_text: bool = False, **kwargs) -> Any:
        session = await self._ensure_session()
        attempt = 0
        while True:
            try:
                async with session.request(method, url, **kwargs) as response:
                    if response.status >= 400:
                        text = await response.text()
                        raise ExternalAPIError(
                            self.service_name,
                            f"{method} {url} returned HTTP {response.status}",
                            {"status": response.status, "body": text[:500]},
                        )
                    if as_text:
                        return await response.text()
                    try:
                        return await response.json(content_type=None)
                    except (aiohttp.ContentTypeError, ValueError) as e:
                        text = await response.text()
                        raise ExternalAPIError(
                            self.service_name,
                            "Malformed JSON response",
                            {"url": url, "body": text[:200]},
                        ) from e
            except TRANSIENT_ERRORS as e:
                if attempt >= self.max_retries:
                    logger.error(
                        f"{self.service_name}: {method} {url} failed after "
                        f"{attempt + 1} attempts: {e!r}"
                    )
                    raise ExternalAPIError(
                        self.service_name,
                        f"{method} {url} failed: {e!r}",
                        {"attempts": attempt + 1},
                    ) from e
                attempt += 1
                logger.warning(
                    f"{self.service_name}: transient error on {method} {url} ({e!r}), "
                    f"retry {attempt}/{self.max_retries}"
                )
                await asyncio.sleep(self.retry_backoff * attempt)
