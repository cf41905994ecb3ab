"""
Conduit Backend — Article SQLAlchemy Model
============================================

What:  ORM model representing the `articles` table.
Who:   Used by ArticleService (CRUD, favorites, feed) and CommentService
       (slug lookup before touching comments).

Table Design:
    - slug: unique, derived once from the title plus a creation-time suffix.
      It is NOT regenerated when the title changes, so links stay stable.
    - author_id: FK to users; every article has exactly one author.
    - tags: many-to-many through `article_tags`.

Relationships use lazy="raise_on_sql": under AsyncSession an implicit lazy
load would fail at runtime, so every query states its eager loads
(selectinload) explicitly and a forgotten one raises immediately.

Index on created_at DESC:
    Every list query orders newest first.
"""

from typing import TYPE_CHECKING, List

from sqlalchemy import ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from conduit.database import Base
from conduit.models.mixins import TimestampMixin
from conduit.models.tag import Tag, article_tags

if TYPE_CHECKING:
    from conduit.models.user import User


class Article(TimestampMixin, Base):
    """
    A published article.

    Lifecycle:
        1. Created by its author (slug fixed at this point)
        2. Updated only by its author; a supplied tag list replaces all links
        3. Deleted only by its author, together with its comments,
           favorite rows and tag links (tag rows themselves remain)
    """

    __tablename__ = "articles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False)

    author_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    author: Mapped["User"] = relationship(
        lazy="raise_on_sql",
    )
    tags: Mapped[List[Tag]] = relationship(
        secondary=article_tags,
        order_by=Tag.name,
        lazy="raise_on_sql",
    )

    __table_args__ = (
        Index("idx_articles_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Article(id={self.id}, slug='{self.slug}')>"
