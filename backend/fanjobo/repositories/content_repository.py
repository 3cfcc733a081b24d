"""Read access to published contents.

ContentRepository implements the menu's ContentCatalog: the newest
published items of a university section, of industry opportunities and of
roadmaps, each filtered to the actor's track where it applies.
"""

from typing import Any

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.sql import Select

from fanjobo.models import Content

UNIVERSITY_TYPE = "university"
INDUSTRY_TYPE = "industry"
ROADMAP_KIND = "roadmap"

_LISTED_COLUMNS = (
    Content.id,
    Content.title,
    Content.kind,
    Content.major,
    Content.term,
    Content.created_at,
)


def _published() -> Select:
    return select(*_LISTED_COLUMNS).where(Content.is_published.is_(True))


def _newest(stmt: Select, limit: int) -> Select:
    return stmt.order_by(Content.created_at.desc(), Content.id.desc()).limit(limit)


class ContentRepository:
    """ContentCatalog backed by the contents table."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def list_university(
        self,
        kind: str,
        major: str | None,
        term: str | None,
        limit: int,
    ) -> list[dict[str, Any]]:
        """Newest published items of one university section.

        Args:
            kind: Section (course, professor, note, book, resource, exam-tip).
            major: Actor's major; items without a major always match.
            term: Actor's term; items without a term always match.
            limit: Maximum number of items.

        Returns:
            Rows with id, title, kind, major, term and created_at.
        """
        stmt = _published().where(
            Content.type == UNIVERSITY_TYPE,
            Content.kind == kind,
            or_(Content.major == major, Content.major.is_(None)),
            or_(Content.term == term, Content.term.is_(None)),
        )
        return await self._fetch_all(_newest(stmt, limit))

    async def list_industry(self, limit: int) -> list[dict[str, Any]]:
        """Newest published industry opportunities of any kind."""
        stmt = _published().where(Content.type == INDUSTRY_TYPE)
        return await self._fetch_all(_newest(stmt, limit))

    async def list_roadmaps(self, major: str | None, limit: int) -> list[dict[str, Any]]:
        """Newest published roadmaps for a major."""
        stmt = _published().where(
            Content.kind == ROADMAP_KIND,
            or_(Content.major == major, Content.major.is_(None)),
        )
        return await self._fetch_all(_newest(stmt, limit))

    async def _fetch_all(self, stmt: Select) -> list[dict[str, Any]]:
        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return [dict(row) for row in result.mappings().all()]
