"""
News API Endpoints

Attaches publisher-page body text to search-API hits.
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from wing.services.news import ArticleEnricher, SearchItem, get_article_enricher

logger = logging.getLogger(__name__)

router = APIRouter()


class SearchHit(BaseModel):
    """One search-API hit; description holds the snippet before enrichment."""

    model_config = ConfigDict(populate_by_name=True)

    link: str
    title: str = ""
    description: str = ""
    pub_date: Optional[datetime] = Field(default=None, alias="pubDate")


class EnrichRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    items: list[SearchHit] = Field(default_factory=list)
    use_cache: bool = Field(default=True, alias="useCache")


class EnrichResponse(BaseModel):
    items: list[SearchHit]
    requested: int
    enriched: int


@router.post("/enrich", response_model=EnrichResponse)
async def enrich_articles(
    request: EnrichRequest,
    enricher: ArticleEnricher = Depends(get_article_enricher),
):
    """
    Replace each hit's snippet with the article body.

    Hits whose page cannot be fetched or parsed are left out; the rest keep
    their request order.
    """
    bodies = await enricher.enrich(
        [
            SearchItem(
                link=hit.link,
                title=hit.title,
                description=hit.description,
                pub_date=hit.pub_date,
            )
            for hit in request.items
        ],
        use_cache=request.use_cache,
    )
    return EnrichResponse(
        items=[
            SearchHit(
                link=b.link,
                title=b.title,
                description=b.description,
                pub_date=b.pub_date,
            )
            for b in bodies
        ],
        requested=len(request.items),
        enriched=len(bodies),
    )
