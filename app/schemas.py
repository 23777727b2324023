"""Pydantic request/response models for the public REST API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from app.services.models import MovieData


class Movie(BaseModel):
    """Movie in the wire format shared with OMDb (``imdbID``, ``Title``...)."""

    model_config = ConfigDict(populate_by_name=True)

    imdb_id: str = Field(..., alias="imdbID", min_length=1)
    title: str = Field(..., alias="Title")
    year: str = Field(..., alias="Year")
    poster: str | None = Field(default=None, alias="Poster")

    def to_movie_data(self) -> MovieData:
        return MovieData(
            imdb_id=self.imdb_id,
            title=self.title,
            year=self.year,
            poster=self.poster,
        )
