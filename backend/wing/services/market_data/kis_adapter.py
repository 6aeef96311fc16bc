"""
KIS (Korea Investment & Securities) Open API Adapter

Domestic market data:
- Daily candles (inquire-daily-itemchartprice)
- Per-analyst investment opinions (invest-opinion)
- Instrument name lookup (search-stock-info)

Auth: OAuth client-credentials token from /oauth2/tokenP, cached in an
AccessTokenCache and refreshed one minute before expiry.
KIS reports business errors in-band: rt_cd != "0" with the reason in msg1.
"""

import logging
from datetime import date, datetime
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from wing.core.config import settings
from wing.schemas.market import Candle
from wing.services.base import ExternalAPIError
from wing.services.market_data.http import VendorHttpClient
from wing.services.market_data.interface import (
    CandleSource,
    InvestmentOpinion,
    OpinionSource,
    sort_candles,
)
from wing.services.market_data.token_cache import AccessTokenCache

logger = logging.getLogger(__name__)

SERVICE_NAME = "KIS"

# Transaction IDs
TR_DAILY_CHART = "FHKST03010100"
TR_INVEST_OPINION = "FHKST663300C0"
TR_STOCK_INFO = "CTPF1002R"

QUOTATIONS = "/uapi/domestic-stock/v1/quotations"


def _kis_date(d: date) -> str:
    return d.strftime("%Y%m%d")


def _parse_kis_date(value: str) -> Optional[date]:
    try:
        return datetime.strptime(value, "%Y%m%d").date()
    except (TypeError, ValueError):
        return None


def parse_daily_rows(rows: list[dict[str, Any]]) -> list[Candle]:
    """output2 rows -> ascending candles. Blank or broken rows are skipped."""
    candles = []
    for row in rows or []:
        day = _parse_kis_date(row.get("stck_bsop_date"))
        if day is None:
            continue
        try:
            candles.append(
                Candle(
                    date=day,
                    open=float(row["stck_oprc"]),
                    high=float(row["stck_hgpr"]),
                    low=float(row["stck_lwpr"]),
                    close=float(row["stck_clpr"]),
                    volume=int(float(row.get("acml_vol") or 0)),
                )
            )
        except (KeyError, TypeError, ValueError, PydanticValidationError) as e:
            logger.debug(f"Skipping KIS candle row {row}: {e}")
    return sort_candles(candles)


def parse_opinion_rows(rows: list[dict[str, Any]]) -> list[InvestmentOpinion]:
    opinions = []
    for row in rows or []:
        day = _parse_kis_date(row.get("stck_bsop_date"))
        code = str(row.get("invt_opnn_cls_code") or "").strip()
        if day is None or not code:
            continue
        opinions.append(InvestmentOpinion(date=day, code=code, firm=row.get("mbcr_name")))
    return opinions


class KisClient(CandleSource, OpinionSource):
    """KIS REST client."""

    def __init__(
        self,
        app_key: Optional[str] = None,
        app_secret: Optional[str] = None,
        base_url: Optional[str] = None,
        http: Optional[VendorHttpClient] = None,
        token_cache: Optional[AccessTokenCache] = None,
    ):
        self.app_key = app_key or settings.kis_app_key
        self.app_secret = app_secret or settings.kis_app_secret
        self.base_url = (base_url or settings.kis_base_url).rstrip("/")
        self.http = http or VendorHttpClient(SERVICE_NAME)
        self.tokens = token_cache or AccessTokenCache(
            refresh_margin=settings.kis_token_refresh_margin
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.app_key and self.app_secret)

    # ============ Auth ============

    async def _issue_token(self) -> tuple[str, int]:
        data = await self.http.post_json(
            f"{self.base_url}/oauth2/tokenP",
            body={
                "grant_type": "client_credentials",
                "appkey": self.app_key,
                "appsecret": self.app_secret,
            },
            headers={"content-type": "application/json; charset=utf-8"},
        )
        token = (data or {}).get("access_token")
        if not token:
            raise ExternalAPIError(SERVICE_NAME, "Token issuance failed", {"response": data})
        return token, int(float(data.get("expires_in") or 0))

    async def _get(self, path: str, tr_id: str, params: dict) -> dict:
        if not self.is_configured:
            raise ExternalAPIError(SERVICE_NAME, "KIS credentials not configured")

        token = await self.tokens.get_or_refresh(self._issue_token)
        headers = {
            "authorization": f"Bearer {token}",
            "appkey": self.app_key,
            "appsecret": self.app_secret,
            "tr_id": tr_id,
            "custtype": "P",
        }
        try:
            data = await self.http.get_json(f"{self.base_url}{path}", params=params, headers=headers)
        except ExternalAPIError as e:
            if e.details.get("status") in (401, 403):
                self.tokens.invalidate()
            raise

        if data.get("rt_cd") and data["rt_cd"] != "0":
            raise ExternalAPIError(
                SERVICE_NAME,
                f"{tr_id} failed: {data.get('msg1') or 'unknown error'}",
                {"rt_cd": data.get("rt_cd"), "msg_cd": data.get("msg_cd")},
            )
        return data

    # ============ CandleSource ============

    async def fetch_daily_candles(self, symbol: str, start: date, end: date) -> list[Candle]:
        data = await self._get(
            f"{QUOTATIONS}/inquire-daily-itemchartprice",
            TR_DAILY_CHART,
            {
                "FID_COND_MRKT_DIV_CODE": "J",
                "FID_INPUT_ISCD": symbol,
                "FID_INPUT_DATE_1": _kis_date(start),
                "FID_INPUT_DATE_2": _kis_date(end),
                "FID_PERIOD_DIV_CODE": "D",
                "FID_ORG_ADJ_PRC": "0",
            },
        )
        candles = [c for c in parse_daily_rows(data.get("output2")) if start <= c.date <= end]
        logger.debug(f"KIS {symbol}: {len(candles)} daily candles {start}..{end}")
        return candles

    # ============ OpinionSource ============

    async def fetch_investment_opinions(
        self, symbol: str, date_from: date, date_to: date
    ) -> list[InvestmentOpinion]:
        data = await self._get(
            f"{QUOTATIONS}/invest-opinion",
            TR_INVEST_OPINION,
            {
                "FID_COND_MRKT_DIV_CODE": "J",
                "FID_COND_SCR_DIV_CODE": "16633",
                "FID_INPUT_ISCD": symbol,
                "FID_INPUT_DATE_1": _kis_date(date_from),
                "FID_INPUT_DATE_2": _kis_date(date_to),
            },
        )
        return parse_opinion_rows(data.get("output"))

    async def lookup_stock_name(self, symbol: str) -> Optional[str]:
        data = await self._get(
            f"{QUOTATIONS}/search-stock-info",
            TR_STOCK_INFO,
            {"PRDT_TYPE_CD": "300", "PDNO": symbol},
        )
        output = data.get("output") or {}
        name = (output.get("prdt_abrv_name") or output.get("prdt_name") or "").strip()
        return name or None

    async def close(self) -> None:
        await self.http.close()
