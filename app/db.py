"""Database session management and repositories."""

from __future__ import annotations

import logging
from typing import Iterator

from sqlalchemy import Engine, create_engine, delete, insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import Settings, get_settings
from app.models import Base, Favorite
from app.services.models import Failure, FavoriteFailure, MovieData, Success

logger = logging.getLogger(__name__)


def build_engine(settings: Settings) -> Engine:
    """Create the SQLAlchemy engine for ``settings.database_url``."""

    connect_args = {}
    if settings.database_url.startswith("sqlite"):
        # FastAPI runs sync endpoints in a threadpool.
        connect_args["check_same_thread"] = False
    return create_engine(settings.database_url, future=True, connect_args=connect_args)


engine = build_engine(get_settings())
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


def init_models(bind: Engine | None = None) -> None:
    """Create tables if they do not exist (handy for local dev)."""
    Base.metadata.create_all(bind=bind or engine)


def get_session() -> Iterator[Session]:
    """FastAPI-friendly dependency that manages commits/rollbacks."""

    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def _is_unique_violation(exc: IntegrityError) -> bool:
    # sqlite: "UNIQUE constraint failed", postgres: "duplicate key ... unique constraint"
    return "unique" in str(exc.orig).lower()


class FavoriteRepository:
    """High level data access helpers for favorited movies."""

    def list_all(self, session: Session) -> list[MovieData]:
        query = select(Favorite).order_by(Favorite.created_at.desc())
        return [_to_movie(row) for row in session.execute(query).scalars()]

    def add(self, session: Session, movie: MovieData) -> Success[MovieData] | Failure:
        """Insert ``movie``; an existing ``imdb_id`` is reported, never overwritten."""

        statement = insert(Favorite).values(
            imdb_id=movie.imdb_id,
            title=movie.title,
            year=movie.year,
            poster=movie.poster,
        )
        try:
            session.execute(statement)
        except IntegrityError as exc:
            session.rollback()
            if not _is_unique_violation(exc):
                raise
            logger.info("Favorite %s already stored", movie.imdb_id)
            return Failure(FavoriteFailure.ALREADY_FAVORITED)
        return Success(movie)

    def remove(self, session: Session, imdb_id: str) -> Success[None] | Failure:
        result = session.execute(delete(Favorite).where(Favorite.imdb_id == imdb_id))
        if result.rowcount == 0:
            logger.info("Favorite %s not found for removal", imdb_id)
            return Failure(FavoriteFailure.NOT_IN_FAVORITES)
        return Success(None)

    def exists(self, session: Session, imdb_id: str) -> bool:
        query = select(Favorite.imdb_id).where(Favorite.imdb_id == imdb_id).limit(1)
        return session.execute(query).first() is not None


def _to_movie(row: Favorite) -> MovieData:
    return MovieData(imdb_id=row.imdb_id, title=row.title, year=row.year, poster=row.poster)
