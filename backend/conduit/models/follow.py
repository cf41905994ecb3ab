"""
Conduit Backend — Follow Model
================================

What:  `user_follows` join table: follower_id follows followed_id.
How:   Composite primary key (follower, followed). Self-follow is rejected in
       ProfileService before any row is written.
"""

from sqlalchemy import ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column

from conduit.database import Base
from conduit.models.mixins import TimestampMixin


class Follow(TimestampMixin, Base):
    __tablename__ = "user_follows"

    follower_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    followed_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Follow(follower_id={self.follower_id}, followed_id={self.followed_id})>"
