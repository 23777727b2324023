"""FastAPI entrypoint wiring the OMDb search gateway and favorites repository."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, Response, status
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.logging_config import configure_logging
from app.db import FavoriteRepository, get_session, init_models
from app.schemas import Movie
from app.services.models import SearchResult
from app.services.omdb import OMDbClient

logger = logging.getLogger(__name__)

QUERY_REQUIRED_MESSAGE = "Query parameter is required"


@asynccontextmanager
async def lifespan(_: FastAPI):
    """Configure logging + ensure database tables before serving."""

    configure_logging()
    init_models()
    yield


app = FastAPI(title="Movie Favorites API", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
repo = FavoriteRepository()


def get_omdb_client() -> OMDbClient:
    return OMDbClient(get_settings())


def _parse_page(raw: str | None) -> int:
    try:
        page = int(raw) if raw is not None else 1
    except ValueError:
        return 1
    return page if page >= 1 else 1


@app.get("/health")
def health() -> dict[str, bool]:
    return {"ok": True}


@app.get("/movies/search")
def search_movies(
    q: str | None = None,
    page: str | None = None,
    omdb: OMDbClient = Depends(get_omdb_client),
) -> dict[str, Any]:
    """Search OMDb; a missing query short-circuits without calling upstream."""

    current_page = _parse_page(page)
    if not q or not q.strip():
        return SearchResult.empty(page=current_page, error=QUERY_REQUIRED_MESSAGE).to_payload()
    return omdb.search(q, current_page).to_payload()


@app.get("/favorites")
def list_favorites(session: Session = Depends(get_session)) -> list[dict[str, Any]]:
    return [movie.to_payload() for movie in repo.list_all(session)]


@app.post("/favorites", status_code=status.HTTP_201_CREATED)
def add_favorite(
    payload: Movie,
    session: Session = Depends(get_session),
) -> dict[str, Any]:
    """Store a favorite; duplicates come back as ``{"error": ...}``."""

    outcome = repo.add(session, payload.to_movie_data())
    if not outcome.ok:
        return {"error": outcome.message}
    logger.info("Added favorite %s", payload.imdb_id)
    return outcome.value.to_payload()


@app.delete("/favorites/{imdb_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_favorite(imdb_id: str, session: Session = Depends(get_session)) -> Response:
    outcome = repo.remove(session, imdb_id)
    if outcome.ok:
        logger.info("Removed favorite %s", imdb_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
