"""
WING Insight Backend - FastAPI Application

Main entry point for the backend API.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from wing.core.config import settings
from wing.core.logging_config import setup_logging
from wing.api.v1 import router as api_v1_router
from wing.error_handlers import register_error_handlers

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    setup_logging(settings.log_level)
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"Environment: {settings.environment}")

    from wing.db.database import init_db, close_db
    await init_db()

    from wing.services.cache.redis_client import init_redis, close_redis
    redis_client = await init_redis()
    if redis_client is None:
        logger.info("Redis unavailable - using in-memory cache")

    yield

    # Shutdown
    logger.info("Shutting down...")
    from wing.services.router import close_indicator_router
    await close_indicator_router()
    from wing.services.news import close_article_enricher
    await close_article_enricher()
    from wing.services.llm import close_llm_client
    await close_llm_client()
    await close_redis()
    await close_db()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="""
    WING Insight API

    ## Architecture
    - **Graph Store**: owner-scoped keyword graphs, edges and attributed news
    - **WING-Score**: confidence-weighted sentiment aggregate of a graph
    - **Symbol Resolution**: LLM-backed keyword graph to ticker mapping
    - **Indicator Router**: KIS candles + local indicators for domestic symbols,
      AlphaVantage / Finnhub for foreign symbols
    - **Article Enrichment**: cached, bounded-concurrency body fetch
    """,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware - allow the local frontend
cors_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
if settings.allowed_origins:
    cors_origins.extend([o for o in settings.allowed_origins if o not in cors_origins])

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Include API routes
app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "WING Insight Backend API",
        "docs": "/docs",
        "health": "/health",
    }
