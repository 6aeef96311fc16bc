"""
Finnhub Adapter

Foreign analyst recommendation trends and company news.
"""

import logging
from datetime import date
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from wing.core.config import settings
from wing.schemas.market import CompanyNewsItem, RecommendationSummary
from wing.services.base import ExternalAPIError
from wing.services.market_data.http import VendorHttpClient
from wing.services.market_data.interface import CompanyNewsVendor, RecommendationVendor

logger = logging.getLogger(__name__)

SERVICE_NAME = "Finnhub"


def _as_list(data: Any, path: str) -> list:
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and data.get("error"):
        raise ExternalAPIError(SERVICE_NAME, f"{path}: {data['error']}")
    return []


class FinnhubClient(RecommendationVendor, CompanyNewsVendor):
    """Finnhub REST client."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        http: Optional[VendorHttpClient] = None,
    ):
        self.api_key = api_key or settings.finnhub_api_key
        self.base_url = (base_url or settings.finnhub_base_url).rstrip("/")
        self.http = http or VendorHttpClient(SERVICE_NAME)

    async def _get(self, path: str, **params) -> Any:
        if not self.api_key:
            raise ExternalAPIError(SERVICE_NAME, "Finnhub API key not configured")
        return await self.http.get_json(
            f"{self.base_url}{path}", params={"token": self.api_key, **params}
        )

    async def fetch_recommendation_trends(self, symbol: str) -> list[RecommendationSummary]:
        rows = _as_list(await self._get("/stock/recommendation", symbol=symbol), "recommendation")
        trends = []
        for row in rows:
            try:
                trends.append(
                    RecommendationSummary(
                        symbol=row.get("symbol") or symbol,
                        period=str(row.get("period", ""))[:10],
                        buy=int(row.get("buy") or 0),
                        hold=int(row.get("hold") or 0),
                        sell=int(row.get("sell") or 0),
                        strong_buy=int(row.get("strongBuy") or 0),
                        strong_sell=int(row.get("strongSell") or 0),
                    )
                )
            except (TypeError, ValueError, PydanticValidationError) as e:
                logger.debug(f"Skipping Finnhub recommendation row {row}: {e}")
        return trends

    async def fetch_company_news(
        self, symbol: str, date_from: date, date_to: date
    ) -> list[CompanyNewsItem]:
        rows = _as_list(
            await self._get(
                "/company-news",
                symbol=symbol,
                **{"from": date_from.isoformat(), "to": date_to.isoformat()},
            ),
            "company-news",
        )
        items = []
        for row in rows:
            try:
                items.append(CompanyNewsItem.model_validate(row))
            except PydanticValidationError as e:
                logger.debug(f"Skipping Finnhub news row: {e}")
        return items

    async def close(self) -> None:
        await self.http.close()
