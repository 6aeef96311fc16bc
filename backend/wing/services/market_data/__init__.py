"""
Market Data Adapters

CONTRACT:
    Input:  symbol + date range
    Output: Candles / vendor indicator points / opinions / recommendations / news

RESPONSIBILITIES:
    - KIS: domestic daily candles, analyst opinions, instrument names
    - AlphaVantage: foreign daily candles, RSI, MOM
    - Finnhub: foreign recommendation trends, company news
    - Vendor payloads are validated and sorted right after fetch
    - Short timeouts, retry only on transient transport errors
"""

from wing.services.market_data.alpha_vantage_adapter import AlphaVantageClient
from wing.services.market_data.finnhub_adapter import FinnhubClient
from wing.services.market_data.interface import (
    CandleSource,
    CompanyNewsVendor,
    IndicatorVendor,
    InvestmentOpinion,
    OpinionSource,
    RecommendationVendor,
)
from wing.services.market_data.kis_adapter import KisClient
from wing.services.market_data.token_cache import AccessToken, AccessTokenCache

__all__ = [
    "AlphaVantageClient",
    "FinnhubClient",
    "KisClient",
    "CandleSource",
    "CompanyNewsVendor",
    "IndicatorVendor",
    "InvestmentOpinion",
    "OpinionSource",
    "RecommendationVendor",
    "AccessToken",
    "AccessTokenCache",
]
