"""
Conduit Backend — Favorite Model
==================================

What:  `article_favorites` join table: one row per (user, article) pair.
How:   The composite primary key makes a duplicate favorite impossible at the
       store level; the service checks first so repeated calls are no-ops.
"""

from sqlalchemy import ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column

from conduit.database import Base
from conduit.models.mixins import TimestampMixin


class Favorite(TimestampMixin, Base):
    __tablename__ = "article_favorites"

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    article_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("articles.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Favorite(user_id={self.user_id}, article_id={self.article_id})>"
