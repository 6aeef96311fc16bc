"""
Article Enrichment Interfaces
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional


@dataclass
class SearchItem:
    """Search-API hit before enrichment."""

    link: str
    title: str = ""
    description: str = ""
    pub_date: Optional[datetime] = None


@dataclass
class ArticleBody:
    """Search hit with the publisher page's body text as description."""

    link: str
    title: str
    description: str
    pub_date: Optional[datetime] = None


@dataclass
class FetchOutcome:
    """Result of one fetch. Exactly one of `body` / `error` is set."""

    index: int
    body: Optional[ArticleBody] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.body is not None


class BodyCache(ABC):
    @abstractmethod
    async def get_many(self, links: Iterable[str]) -> dict[str, ArticleBody]:
        pass

    @abstractmethod
    async def put_many(self, bodies: Iterable[ArticleBody]) -> int:
        """Store bodies, skipping links that are already cached."""
        pass


class ArticleFetcher(ABC):
    @abstractmethod
    async def fetch(self, item: SearchItem) -> ArticleBody:
        pass
