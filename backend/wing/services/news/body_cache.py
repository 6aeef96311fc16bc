"""
Article body cache backed by the news_body_cache table.
"""

import logging
from typing import Iterable, Optional

from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from wing.db.models import NewsBodyCache
from wing.services.news.interface import ArticleBody, BodyCache

logger = logging.getLogger(__name__)

# Links already cached are left untouched, including ones written concurrently.
INSERTS_BY_DIALECT = {
    "sqlite": sqlite_insert,
    "postgresql": postgresql_insert,
}


class SqlBodyCache(BodyCache):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def get_many(self, links: Iterable[str]) -> dict[str, ArticleBody]:
        links = list(dict.fromkeys(links))
        if not links:
            return {}
        async with self._session_factory() as session:
            result = await session.execute(
                select(NewsBodyCache).where(NewsBodyCache.link.in_(links))
            )
            return {
                row.link: ArticleBody(
                    link=row.link,
                    title=row.title,
                    description=row.description,
                    pub_date=row.pub_date,
                )
                for row in result.scalars()
            }

    async def put_many(self, bodies: Iterable[ArticleBody]) -> int:
        """Insert bodies whose link is not cached yet. Returns rows written."""
        pending = {b.link: b for b in bodies}
        if not pending:
            return 0
        rows = [
            {
                "link": b.link,
                "title": b.title,
                "description": b.description,
                "pub_date": b.pub_date,
            }
            for b in pending.values()
        ]
        async with self._session_factory() as session:
            async with session.begin():
                insert = INSERTS_BY_DIALECT[session.get_bind().dialect.name]
                result = await session.execute(
                    insert(NewsBodyCache).values(rows).on_conflict_do_nothing(
                        index_elements=[NewsBodyCache.link]
                    )
                )
                written = max(result.rowcount or 0, 0)
        return written


# Singleton instance
_body_cache: Optional[SqlBodyCache] = None


def get_body_cache() -> SqlBodyCache:
    global _body_cache
    if _body_cache is None:
        from wing.db.database import AsyncSessionLocal

        _body_cache = SqlBodyCache(AsyncSessionLocal)
    return _body_cache
