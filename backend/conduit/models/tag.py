"""
Conduit Backend — Tag Model and Article/Tag Association
=========================================================

What:  `tags` table plus the `article_tags` many-to-many link table.
How:   Tag names are stored trimmed and lower-cased; rows are get-or-create
       and are never deleted, even when no article references them.
"""

from sqlalchemy import Column, ForeignKey, Integer, String, Table
from sqlalchemy.orm import Mapped, mapped_column

from conduit.database import Base
from conduit.models.mixins import TimestampMixin

# Association rows only; the composite primary key forbids duplicate links
article_tags = Table(
    "article_tags",
    Base.metadata,
    Column(
        "article_id",
        Integer,
        ForeignKey("articles.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "tag_id",
        Integer,
        ForeignKey("tags.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Tag(TimestampMixin, Base):
    __tablename__ = "tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, name='{self.name}')>"
