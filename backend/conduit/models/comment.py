"""
Conduit Backend — Comment SQLAlchemy Model
============================================

What:  ORM model representing the `comments` table.
How:   Belongs to one article and one author. Removed together with its
       article (explicit delete in ArticleService, FK cascade as backstop).
"""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from conduit.database import Base
from conduit.models.mixins import TimestampMixin

if TYPE_CHECKING:
    from conduit.models.user import User


class Comment(TimestampMixin, Base):
    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    body: Mapped[str] = mapped_column(Text, nullable=False)

    article_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("articles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    author_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    author: Mapped["User"] = relationship(lazy="raise_on_sql")

    def __repr__(self) -> str:
        return f"<Comment(id={self.id}, article_id={self.article_id})>"
