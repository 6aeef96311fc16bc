"""
Application Configuration

All settings loaded from environment variables.
"""

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Application
    app_name: str = "WING Insight Backend"
    app_version: str = "0.1.0"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Database (SQLite by default, any async SQLAlchemy URL works)
    database_url: Optional[str] = None  # Defaults to sqlite+aiosqlite:///./data/wing.db

    # Redis
    redis_url: str = "redis://localhost:6379"
    indicator_cache_ttl: int = 300  # seconds

    # CORS (Frontend URL)
    allowed_origins: list[str] = ["http://localhost:3000"]

    # KIS (Korea Investment & Securities) - domestic market data
    kis_app_key: Optional[str] = None
    kis_app_secret: Optional[str] = None
    kis_base_url: str = "https://openapi.koreainvestment.com:9443"
    kis_token_refresh_margin: int = 60  # seconds before expiry

    # AlphaVantage - foreign candles and indicators
    alpha_vantage_api_key: Optional[str] = None
    alpha_vantage_base_url: str = "https://www.alphavantage.co/query"
    alpha_vantage_rsi_interval: str = "weekly"
    alpha_vantage_momentum_interval: str = "daily"

    # Finnhub - foreign recommendations and company news
    finnhub_api_key: Optional[str] = None
    finnhub_base_url: str = "https://finnhub.io/api/v1"

    # Vendor HTTP
    http_timeout_seconds: float = 5.0
    http_max_retries: int = 2

    # LLM Providers (symbol inference)
    openai_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None
    llm_primary_provider: str = "openai"  # Options: openai, anthropic
    llm_openai_model: str = "gpt-4o-mini"
    llm_anthropic_model: str = "claude-3-5-haiku-latest"

    # Indicator windows (calendar days)
    indicator_lookback_days: int = 120
    indicator_display_days: int = 30
    foreign_indicator_points: int = 10
    foreign_price_points: int = 30
    default_rsi_period: int = 14
    default_momentum_period: int = 10

    # Company news
    company_news_days: int = 30
    company_news_limit: int = 20

    # WING-Score
    wing_edge_scale: float = 2.5
    wing_volume_exponent: float = 2.0
    wing_min_confidence: float = 0.15
    wing_news_per_node: int = 100

    # Article enrichment
    enrich_concurrency: Optional[int] = None  # 12 in production, 16 otherwise

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def effective_enrich_concurrency(self) -> int:
        if self.enrich_concurrency:
            return self.enrich_concurrency
        return 12 if self.is_production else 16


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
