"""FastAPI frontend rendering the search and favorites pages."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Depends, FastAPI, HTTPException, Request, Response, status
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from app.core.config import get_settings
from app.core.logging_config import configure_logging
from app.schemas import Movie
from app.web.api_client import ApiError, MovieApiClient
from app.web.pages import (
    FAVORITES_KEY,
    load_favorites_view,
    load_search_view,
    search_key,
    should_load_more,
)
from app.web.query_cache import QueryCache

logger = logging.getLogger(__name__)

WEB_ROOT = Path(__file__).parent
templates = Jinja2Templates(directory=str(WEB_ROOT / "templates"))
query_cache = QueryCache()


@asynccontextmanager
async def lifespan(_: FastAPI):
    configure_logging()
    yield


app = FastAPI(title="Movie Favorites", lifespan=lifespan)
app.mount("/static", StaticFiles(directory=str(WEB_ROOT / "static")), name="static")


def get_api_client() -> MovieApiClient:
    return MovieApiClient(get_settings())


def get_query_cache() -> QueryCache:
    return query_cache


@app.get("/", response_class=HTMLResponse)
def search_page(
    request: Request,
    q: str = "",
    api: MovieApiClient = Depends(get_api_client),
    cache: QueryCache = Depends(get_query_cache),
):
    view = load_search_view(api, cache, q)
    return templates.TemplateResponse(request, "search.html", {"view": view})


@app.get("/search/results", response_class=HTMLResponse)
def search_results(
    request: Request,
    q: str,
    page: int,
    scroll_top: float = 0,
    viewport_height: float = 0,
    document_height: float = 0,
    api: MovieApiClient = Depends(get_api_client),
    cache: QueryCache = Depends(get_query_cache),
):
    """Render the cards a further page adds, or 204 when no load is due."""

    previous = load_search_view(api, cache, q, through_page=page - 1)
    if previous.feed.next_page != page or not should_load_more(
        scroll_top=scroll_top,
        viewport_height=viewport_height,
        document_height=document_height,
        has_next_page=previous.feed.has_next_page,
        is_fetching=cache.is_fetching(search_key(previous.query, page)),
    ):
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    view = load_search_view(api, cache, q, through_page=page)
    return templates.TemplateResponse(request, "_results.html", {"view": view})


@app.get("/favorites", response_class=HTMLResponse)
def favorites_page(
    request: Request,
    api: MovieApiClient = Depends(get_api_client),
    cache: QueryCache = Depends(get_query_cache),
):
    view = load_favorites_view(api, cache)
    return templates.TemplateResponse(request, "favorites.html", {"view": view})


@app.post("/actions/favorites")
def add_favorite(
    payload: Movie,
    api: MovieApiClient = Depends(get_api_client),
    cache: QueryCache = Depends(get_query_cache),
) -> dict:
    try:
        result = cache.mutate(api.add_favorite, payload.to_movie_data(), invalidates=[FAVORITES_KEY])
    except ApiError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to add favorite",
        ) from exc
    logger.info("Favorite toggle on for %s (error=%s)", payload.imdb_id, result.error)
    if result.error:
        return {"imdbID": payload.imdb_id, "favorite": True, "error": result.error}
    return {"imdbID": payload.imdb_id, "favorite": True}


@app.delete("/actions/favorites/{imdb_id}")
def remove_favorite(
    imdb_id: str,
    api: MovieApiClient = Depends(get_api_client),
    cache: QueryCache = Depends(get_query_cache),
) -> dict:
    try:
        cache.mutate(api.remove_favorite, imdb_id, invalidates=[FAVORITES_KEY])
    except ApiError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to remove favorite",
        ) from exc
    logger.info("Favorite toggle off for %s", imdb_id)
    return {"imdbID": imdb_id, "favorite": False}
