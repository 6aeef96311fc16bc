"""
API v1 Router

All API endpoints for the frontend.
"""

from fastapi import APIRouter

from wing.api.v1.endpoints import analysis, graphs, keywords, news

router = APIRouter()

# Include all endpoint routers
router.include_router(graphs.router, prefix="/graphs", tags=["Graphs"])
router.include_router(analysis.router, prefix="/analysis", tags=["Analysis"])
router.include_router(news.router, prefix="/news", tags=["News"])
router.include_router(keywords.router, prefix="/keywords", tags=["Keywords"])
