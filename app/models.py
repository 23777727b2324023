"""SQLAlchemy ORM models.

This module defines the "favorites" table which stores the movies a user
saved. Keeping it isolated here makes future Alembic migrations simpler.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class Favorite(Base):
    """A movie saved to favorites, keyed by its IMDb identifier."""

    __tablename__ = "favorites"

    imdb_id: Mapped[str] = mapped_column("imdbID", String(32), primary_key=True)
    title: Mapped[str] = mapped_column(Text)
    year: Mapped[str] = mapped_column(String(32))
    poster: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Python-side default keeps sub-second precision so rapid inserts still
    # order deterministically; the server default covers raw SQL inserts.
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=_utcnow,
        server_default=func.now(),
        index=True,
        nullable=False,
    )

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"Favorite(imdb_id={self.imdb_id}, title={self.title}, year={self.year})"
