"""
Conduit Backend — User SQLAlchemy Model
=========================================

What:  ORM model representing the `users` table.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for migrations.
Who:   Used by the user, profile, article and comment services.

Table Design:
    - username / email: unique indexes; uniqueness is also checked in the
      service so the client gets a field-level message before the constraint fires
    - password: bcrypt hash only, never serialized
    - bio / image: nullable; serialized as "" when unset
"""

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from conduit.database import Base
from conduit.models.mixins import TimestampMixin


class User(TimestampMixin, Base):
    """
    A registered account. Users are never deleted through the API.

    Query Patterns:
        - Login:        WHERE email = :email      → unique index
        - Profile:      WHERE username = :name    → unique index
        - Auth lookup:  WHERE id = :token_id      → primary key
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    username: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    # bcrypt hash; raw passwords never reach this column
    password: Mapped[str] = mapped_column(String(255), nullable=False)

    bio: Mapped[str | None] = mapped_column(Text, nullable=True, default=None)
    image: Mapped[str | None] = mapped_column(String(2048), nullable=True, default=None)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}')>"
