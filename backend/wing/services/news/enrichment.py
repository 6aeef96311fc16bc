"""
Article Enrichment Pipeline

Attaches publisher-page body text to search hits.

    1. normalize links, drop empty ones
    2. split into cache hits / misses
    3. fetch misses with bounded concurrency; failed items are dropped
    4. write new bodies to the cache, return results in input order
"""

import asyncio
import logging
import re
from datetime import datetime
from typing import Optional
from urllib.parse import urlsplit, urlunsplit

from bs4 import BeautifulSoup

from wing.core.config import settings
from wing.services.base import ExternalAPIError
from wing.services.market_data.http import VendorHttpClient
from wing.services.news.interface import (
    ArticleBody,
    ArticleFetcher,
    BodyCache,
    FetchOutcome,
    SearchItem,
)

logger = logging.getLogger(__name__)

SERVICE_NAME = "ArticleEnricher"

BODY_SELECTORS = [
    "#dic_area",
    "#newsct_article",
    "#articleBody, #articeBody, .newsct_article, .article_body",
]
NOISE_SELECTORS = (
    "script, style, noscript, iframe, figure, .ad, .promotion, "
    ".end_photo_org, .byline, .source, .copyright"
)
BROWSER_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
    "Accept-Language": "ko-KR,ko;q=0.9,en;q=0.8",
}


def normalize_link(link: Optional[str]) -> str:
    """Trimmed link with lower-cased scheme/host and no fragment."""
    link = (link or "").strip()
    if not link:
        return ""
    parts = urlsplit(link)
    if not parts.scheme or not parts.netloc:
        return link
    return urlunsplit((parts.scheme.lower(), parts.netloc.lower(), parts.path, parts.query, ""))


def clean_text(text: str) -> str:
    text = text.replace("\u00a0", " ")
    text = re.sub(r"[ \t]+\n", "\n", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def extract_body(html: str) -> tuple[str, Optional[datetime]]:
    """Body text and the page's published time, if any."""
    soup = BeautifulSoup(html, "html.parser")

    body = None
    for selector in BODY_SELECTORS:
        body = soup.select_one(selector)
        if body is not None:
            break

    text = ""
    if body is not None:
        for noise in body.select(NOISE_SELECTORS):
            noise.decompose()
        for br in body.find_all("br"):
            br.replace_with("\n")
        text = clean_text(body.get_text())

    published = None
    meta = soup.find("meta", attrs={"property": "article:published_time"})
    if meta and meta.get("content"):
        try:
            published = datetime.fromisoformat(meta["content"].strip())
        except ValueError:
            published = None
    return text, published


class HtmlArticleFetcher(ArticleFetcher):
    """GET the article page and parse the body with BeautifulSoup."""

    def __init__(self, http: Optional[VendorHttpClient] = None):
        self.http = http or VendorHttpClient(SERVICE_NAME)

    async def fetch(self, item: SearchItem) -> ArticleBody:
        html = await self.http.get_text(item.link, headers=BROWSER_HEADERS)
        text, published = extract_body(html)
        if not text:
            raise ExternalAPIError(SERVICE_NAME, "Article body not found", {"link": item.link})
        return ArticleBody(
            link=item.link,
            title=item.title,
            description=text,
            pub_date=item.pub_date or published,
        )

    async def close(self) -> None:
        await self.http.close()


class ArticleEnricher:
    """Two-phase cache/fetch enrichment."""

    def __init__(
        self,
        fetcher: ArticleFetcher,
        cache: Optional[BodyCache] = None,
        concurrency: Optional[int] = None,
    ):
        self.fetcher = fetcher
        self.cache = cache
        self.concurrency = concurrency or settings.effective_enrich_concurrency

    async def enrich(self, items: list[SearchItem], use_cache: bool = True) -> list[ArticleBody]:
        normalized = []
        for item in items:
            link = normalize_link(item.link)
            if link:
                normalized.append(
                    SearchItem(
                        link=link,
                        title=item.title,
                        description=item.description,
                        pub_date=item.pub_date,
                    )
                )
        if not normalized:
            return []

        by_link: dict[str, ArticleBody] = {}
        misses = normalized

        if use_cache and self.cache is not None:
            try:
                by_link.update(await self.cache.get_many(i.link for i in normalized))
            except Exception as e:
                logger.warning(f"Body cache read failed, fetching everything: {e}")
            misses = [i for i in normalized if i.link not in by_link]
            total = len(normalized)
            hits = total - len(misses)
            logger.info(
                f"Body cache: total={total} hit={hits} miss={len(misses)} "
                f"hitRate={hits / total * 100:.1f}%"
            )

        fetched = await self.fetch_all(self._unique(misses))
        by_link.update({b.link: b for b in fetched})

        if use_cache and self.cache is not None and fetched:
            try:
                written = await self.cache.put_many(fetched)
                logger.debug(f"Body cache: stored {written} new bodies")
            except Exception as e:
                logger.warning(f"Body cache write failed, results not cached: {e}")

        return [by_link[i.link] for i in normalized if i.link in by_link]

    @staticmethod
    def _unique(items: list[SearchItem]) -> list[SearchItem]:
        seen = {}
        for item in items:
            seen.setdefault(item.link, item)
        return list(seen.values())

    async def fetch_all(self, items: list[SearchItem]) -> list[ArticleBody]:
        """Fetch with at most `concurrency` requests in flight; failures are dropped."""
        if not items:
            return []
        semaphore = asyncio.Semaphore(self.concurrency)

        async def run(index: int, item: SearchItem) -> FetchOutcome:
            async with semaphore:
                try:
                    return FetchOutcome(index=index, body=await self.fetcher.fetch(item))
                except Exception as e:
                    return FetchOutcome(index=index, error=e)

        outcomes = await asyncio.gather(*(run(i, item) for i, item in enumerate(items)))

        bodies = []
        for outcome in outcomes:
            if outcome.ok:
                bodies.append(outcome.body)
            else:
                logger.warning(
                    f"Article body fetch failed (skipped): {items[outcome.index].link}: {outcome.error}"
                )
        return bodies


# Singleton instance
_article_enricher: Optional[ArticleEnricher] = None


def get_article_enricher() -> ArticleEnricher:
    """Get or create the enricher wired to the page fetcher and SQL body cache."""
    global _article_enricher
    if _article_enricher is None:
        from wing.services.news.body_cache import get_body_cache

        _article_enricher = ArticleEnricher(HtmlArticleFetcher(), get_body_cache())
    return _article_enricher


async def close_article_enricher() -> None:
    """Close the page fetcher's HTTP session. Called on application shutdown."""
    global _article_enricher
    if _article_enricher is None:
        return
    close = getattr(_article_enricher.fetcher, "close", None)
    if close is not None:
        await close()
    _article_enricher = None
