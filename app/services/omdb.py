"""Thin wrapper around the OMDb API to search movies by title."""

from __future__ import annotations

import logging
import math
from typing import Any

import httpx

from app.core.config import Settings
from app.services.models import MovieData, SearchResult

logger = logging.getLogger(__name__)

# OMDb always returns ten results per search page.
PAGE_SIZE = 10
RESULT_TYPE = "movie"
NOT_FOUND_MESSAGE = "Movie not found!"
FETCH_FAILED_MESSAGE = "Failed to fetch movies"


class OMDbError(Exception):
    """Raised when OMDb cannot be reached or returns an unusable response."""


class OMDbClient:
    """Simple OMDb HTTP client using API key auth."""

    def __init__(self, settings: Settings, *, transport: httpx.BaseTransport | None = None) -> None:
        self.api_key = settings.omdb_api_key
        self.base_url = settings.omdb_base_url
        self.timeout = settings.omdb_timeout
        self._transport = transport

    def _request(self, params: dict[str, Any]) -> dict[str, Any]:
        if not self.api_key:
            raise OMDbError("OMDB_API_KEY is not configured")
        query = {"apikey": self.api_key, **params}
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.get(self.base_url, params=query)
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPError as exc:
            raise OMDbError(str(exc)) from exc
        except ValueError as exc:
            raise OMDbError(f"OMDb returned invalid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise OMDbError("OMDb returned an unexpected payload")
        return payload

    def search(self, query: str, page: int = 1) -> SearchResult:
        """Search OMDb for movies matching ``query`` and return one page.

        Upstream errors are reported through ``SearchResult.error``; this
        method never raises for network or API failures.
        """

        try:
            payload = self._request({"s": query, "type": RESULT_TYPE, "page": page})
        except OMDbError as exc:
            logger.error("OMDb search for %r failed: %s", query, exc)
            return SearchResult.empty(page=page, error=FETCH_FAILED_MESSAGE)
        logger.debug("OMDb search payload: %s", payload)

        if payload.get("Response") == "False":
            message = payload.get("Error") or FETCH_FAILED_MESSAGE
            if message == NOT_FOUND_MESSAGE:
                return SearchResult.empty(page=page)
            logger.warning("OMDb rejected search for %r: %s", query, message)
            return SearchResult.empty(page=page, error=message)

        total_results = self._parse_total(payload.get("totalResults"))
        try:
            movies = [MovieData.from_payload(item) for item in payload.get("Search") or []]
        except (KeyError, TypeError) as exc:
            logger.error("OMDb returned a malformed search item: %s", exc)
            return SearchResult.empty(page=page, error=FETCH_FAILED_MESSAGE)
        return SearchResult(
            movies=movies,
            total_results=total_results,
            current_page=page,
            total_pages=math.ceil(total_results / PAGE_SIZE),
        )

    @staticmethod
    def _parse_total(raw: Any) -> int:
        try:
            return int(raw)
        except (TypeError, ValueError):
            return 0
