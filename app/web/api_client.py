"""Typed HTTP client for the movie favorites REST API."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import httpx

from app.core.config import Settings
from app.services.models import MovieData, SearchResult

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Raised when the backend cannot be reached or answers with a non-2xx status."""


@dataclass(slots=True)
class FavoriteAddResult:
    movie: MovieData | None = None
    error: str | None = None


class MovieApiClient:
    """Wraps each backend route; structured ``error`` bodies pass through untouched."""

    def __init__(
        self,
        settings: Settings,
        *,
        transport: httpx.BaseTransport | None = None,
        timeout: float | None = 10.0,
    ) -> None:
        self.base_url = settings.api_base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        url = f"{self.base_url}{path}"
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.request(method, url, **kwargs)
                response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise ApiError(str(exc)) from exc
        return response

    def search_movies(self, query: str, page: int = 1) -> SearchResult:
        data = self._request("GET", "/movies/search", params={"q": query, "page": page}).json()
        return SearchResult(
            movies=[MovieData.from_payload(item) for item in data.get("movies", [])],
            total_results=data.get("totalResults", 0),
            current_page=data.get("currentPage", page),
            total_pages=data.get("totalPages", 0),
            error=data.get("error"),
        )

    def get_favorites(self) -> list[MovieData]:
        data = self._request("GET", "/favorites").json()
        return [MovieData.from_payload(item) for item in data]

    def add_favorite(self, movie: MovieData) -> FavoriteAddResult:
        data = self._request("POST", "/favorites", json=movie.to_payload()).json()
        if "error" in data:
            return FavoriteAddResult(error=data["error"])
        return FavoriteAddResult(movie=MovieData.from_payload(data))

    def remove_favorite(self, imdb_id: str) -> None:
        self._request("DELETE", f"/favorites/{quote(imdb_id, safe='')}")
