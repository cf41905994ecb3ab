"""
Conduit Backend — Shared Column Mixins
========================================

What:  created_at / updated_at columns shared by every entity table.
How:   Python-side defaults (UTC, timezone-aware) so the values are known
       right after flush without a refresh round trip.
"""

from datetime import datetime, timezone

from sqlalchemy import TIMESTAMP, text
from sqlalchemy.orm import Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    """Adds created_at and updated_at, both stored in UTC."""

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    # onupdate is Python-side: the new value is set on the instance during
    # flush, so async code never needs to reload it
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )
