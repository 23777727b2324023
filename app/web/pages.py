"""View state for the search and favorites pages."""

from __future__ import annotations

from dataclasses import dataclass, field

from app.services.models import MovieData, SearchResult
from app.web.api_client import MovieApiClient
from app.web.query_cache import QueryCache

# Start loading the next page this close to the bottom of the document.
SCROLL_THRESHOLD_PX = 1000

FAVORITES_KEY = ("favorites",)


def search_key(query: str, page: int) -> tuple[str, str, int]:
    return ("search", query, page)


class SearchFeed:
    """Search result pages merged into one ordered, de-duplicated movie list."""

    def __init__(self) -> None:
        self._movies: dict[str, MovieData] = {}
        self._pages: dict[int, SearchResult] = {}

    def add_page(self, result: SearchResult) -> list[MovieData]:
        """Append ``result`` and return the movies it contributed.

        Adding the same page twice is a no-op; movies already seen on an
        earlier page keep their original position.
        """

        if result.current_page in self._pages:
            return []
        self._pages[result.current_page] = result
        added = []
        for movie in result.movies:
            if movie.imdb_id not in self._movies:
                self._movies[movie.imdb_id] = movie
                added.append(movie)
        return added

    @property
    def movies(self) -> list[MovieData]:
        return list(self._movies.values())

    @property
    def first_page(self) -> SearchResult | None:
        return self._pages[min(self._pages)] if self._pages else None

    @property
    def last_page(self) -> SearchResult | None:
        return self._pages[max(self._pages)] if self._pages else None

    @property
    def has_next_page(self) -> bool:
        last = self.last_page
        return last is not None and last.current_page < last.total_pages

    @property
    def next_page(self) -> int | None:
        if not self.has_next_page:
            return None
        return self.last_page.current_page + 1

    @property
    def total_results(self) -> int:
        first = self.first_page
        return first.total_results if first else 0

    @property
    def error(self) -> str | None:
        first = self.first_page
        return first.error if first else None

    def __len__(self) -> int:
        return len(self._movies)


def should_load_more(
    *,
    scroll_top: float,
    viewport_height: float,
    document_height: float,
    has_next_page: bool,
    is_fetching: bool,
    threshold: float = SCROLL_THRESHOLD_PX,
) -> bool:
    near_bottom = viewport_height + scroll_top >= document_height - threshold
    return near_bottom and has_next_page and not is_fetching


def is_favorite(favorites: list[MovieData], imdb_id: str) -> bool:
    return any(movie.imdb_id == imdb_id for movie in favorites)


@dataclass
class SearchView:
    query: str
    feed: SearchFeed = field(default_factory=SearchFeed)
    favorites: list[MovieData] = field(default_factory=list)
    failed: bool = False
    # Movies contributed by the most recently requested page only.
    page_movies: list[MovieData] = field(default_factory=list)

    @property
    def upstream_error(self) -> str | None:
        return self.feed.error

    @property
    def is_empty(self) -> bool:
        return bool(self.query) and not self.failed and not self.feed.error and not self.feed.movies

    def is_favorite(self, imdb_id: str) -> bool:
        return is_favorite(self.favorites, imdb_id)


@dataclass
class FavoritesView:
    favorites: list[MovieData] = field(default_factory=list)
    failed: bool = False


def load_favorites(api: MovieApiClient, cache: QueryCache) -> tuple[list[MovieData], bool]:
    """Fetch the favorites list; every page render asks the backend again."""

    state = cache.fetch(FAVORITES_KEY, api.get_favorites, refetch=True)
    return (state.data or []), state.is_error


def load_search_view(
    api: MovieApiClient,
    cache: QueryCache,
    query: str,
    *,
    through_page: int = 1,
) -> SearchView:
    """Build the search page state from cached pages ``1..through_page``."""

    query = query.strip()
    view = SearchView(query=query)
    page: int | None = 1
    while page is not None and page <= through_page:
        state = cache.fetch(
            search_key(query, page),
            lambda page=page: api.search_movies(query, page),
            enabled=bool(query),
        )
        if state.is_error:
            view.failed = True
            break
        if not state.is_success:
            break
        if state.data.error:
            # Upstream errors (outages, "Too many results.") are not worth
            # reusing; the next render asks again.
            cache.invalidate(search_key(query, page))
        added = view.feed.add_page(state.data)
        if page == through_page:
            view.page_movies = added
        page = view.feed.next_page
    view.favorites, _ = load_favorites(api, cache)
    return view


def load_favorites_view(api: MovieApiClient, cache: QueryCache) -> FavoritesView:
    favorites, failed = load_favorites(api, cache)
    return FavoritesView(favorites=favorites, failed=failed)
