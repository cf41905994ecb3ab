"""
Conduit Backend — Tag Service
===============================

What:  Tag normalization, get-or-create, and the public tag list.
How:   Names are trimmed and lower-cased before every lookup and insert, so
       "Python ", "python" and "PYTHON" are one tag. Tag rows are never
       deleted, even when no article references them any more.
"""

from typing import Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from conduit.models.tag import Tag
from conduit.schemas.tag import TagsResponse


def normalize_tag(name: Optional[str]) -> str:
    return (name or "").strip().lower()


class TagService:

    async def get_or_create_tags(
        self, db: AsyncSession, names: Iterable[str]
    ) -> List[Tag]:
        """
        Resolves names to Tag rows, creating the missing ones.

        Blank names are skipped and duplicates collapse, preserving the
        first-seen order.
        """
        wanted: List[str] = []
        for raw in names:
            name = normalize_tag(raw)
            if name and name not in wanted:
                wanted.append(name)
        if not wanted:
            return []

        result = await db.execute(select(Tag).where(Tag.name.in_(wanted)))
        existing = {tag.name: tag for tag in result.scalars().all()}

        created = False
        tags: List[Tag] = []
        for name in wanted:
            tag = existing.get(name)
            if tag is None:
                tag = Tag(name=name)
                db.add(tag)
                created = True
            tags.append(tag)
        if created:
            await db.flush()
        return tags

    async def list_tags(self, db: AsyncSession) -> TagsResponse:
        """All tag names, alphabetically. No counts, no pagination."""
        result = await db.execute(select(Tag.name).order_by(Tag.name.asc()))
        return TagsResponse(tags=list(result.scalars().all()))


# Module-level singleton
tag_service = TagService()
