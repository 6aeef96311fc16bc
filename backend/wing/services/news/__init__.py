"""
Article Enrichment Service

CONTRACT:
    Input:  list of SearchItem (link, title, pubDate, snippet)
    Output: list of ArticleBody in input order, failed fetches omitted

RESPONSIBILITIES:
    - Link normalization
    - Body cache lookup / write-back (news_body_cache table)
    - Bounded-concurrency page fetch with per-item failure isolation
    - Body extraction with BeautifulSoup
"""

from wing.services.news.body_cache import SqlBodyCache, get_body_cache
from wing.services.news.enrichment import (
    ArticleEnricher,
    HtmlArticleFetcher,
    close_article_enricher,
    extract_body,
    get_article_enricher,
    normalize_link,
)
from wing.services.news.interface import ArticleBody, FetchOutcome, SearchItem

__all__ = [
    "ArticleBody",
    "ArticleEnricher",
    "FetchOutcome",
    "HtmlArticleFetcher",
    "SearchItem",
    "SqlBodyCache",
    "close_article_enricher",
    "extract_body",
    "get_article_enricher",
    "get_body_cache",
    "normalize_link",
]
