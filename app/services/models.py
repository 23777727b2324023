"""Shared dataclasses for service layer."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

T = TypeVar("T")

POSTER_MISSING = "N/A"


@dataclass(slots=True)
class MovieData:
    """A movie as shown in search results and favorites."""

    imdb_id: str
    title: str
    year: str
    poster: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "MovieData":
        """Build from the upstream/wire field names (``imdbID``, ``Title``...)."""

        poster = payload.get("Poster")
        return cls(
            imdb_id=payload["imdbID"],
            title=payload["Title"],
            year=payload["Year"],
            poster=None if poster == POSTER_MISSING else poster,
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "imdbID": self.imdb_id,
            "Title": self.title,
            "Year": self.year,
            "Poster": self.poster,
        }


@dataclass(slots=True)
class SearchResult:
    """One page of search results plus pagination metadata."""

    movies: list[MovieData] = field(default_factory=list)
    total_results: int = 0
    current_page: int = 1
    total_pages: int = 0
    error: str | None = None

    @classmethod
    def empty(cls, *, page: int = 1, error: str | None = None) -> "SearchResult":
        return cls(current_page=page, error=error)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "movies": [movie.to_payload() for movie in self.movies],
            "totalResults": self.total_results,
            "currentPage": self.current_page,
            "totalPages": self.total_pages,
        }
        if self.error is not None:
            payload["error"] = self.error
        return payload


class FavoriteFailure(str, Enum):
    """Expected, recoverable outcomes of favorites mutations."""

    ALREADY_FAVORITED = "Movie already in favorites"
    NOT_IN_FAVORITES = "Movie not found in favorites"

    @property
    def message(self) -> str:
        return self.value


@dataclass(slots=True)
class Success(Generic[T]):
    value: T

    ok = True


@dataclass(slots=True)
class Failure:
    reason: FavoriteFailure

    ok = False

    @property
    def message(self) -> str:
        return self.reason.message
