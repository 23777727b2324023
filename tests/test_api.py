import httpx
import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.db import get_session
from app.main import app, get_omdb_client
from app.services.omdb import OMDbClient

SEARCH_PAYLOAD = {
    "Response": "True",
    "Search": [
        {"imdbID": "tt0372784", "Title": "Batman Begins", "Year": "2005", "Poster": "N/A"},
    ],
    "totalResults": "503",
}


@pytest.fixture
def omdb_requests():
    return []


@pytest.fixture
def omdb_response():
    return {"body": SEARCH_PAYLOAD}


@pytest.fixture
def client(session_factory, omdb_requests, omdb_response):
    def _session():
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def handler(request: httpx.Request) -> httpx.Response:
        omdb_requests.append(request)
        return httpx.Response(200, json=omdb_response["body"])

    settings = Settings(OMDB_API_KEY="test-key", OMDB_BASE_URL="https://omdb.test/")
    app.dependency_overrides[get_session] = _session
    app.dependency_overrides[get_omdb_client] = lambda: OMDbClient(
        settings, transport=httpx.MockTransport(handler)
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


def _movie(imdb_id="tt0372784", title="Batman Begins", year="2005", poster=None):
    return {"imdbID": imdb_id, "Title": title, "Year": year, "Poster": poster}


def test_health(client):
    assert client.get("/health").json() == {"ok": True}


def test_search_delegates_and_reports_pagination(client, omdb_requests):
    resp = client.get("/movies/search", params={"q": "batman"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["totalResults"] == 503
    assert body["totalPages"] == 51
    assert body["currentPage"] == 1
    assert body["movies"] == [_movie()]
    assert "error" not in body
    assert omdb_requests[0].url.params["page"] == "1"


def test_search_forwards_page(client, omdb_requests):
    body = client.get("/movies/search", params={"q": "batman", "page": "2"}).json()

    assert body["currentPage"] == 2
    assert body["totalPages"] == 51
    assert omdb_requests[0].url.params["page"] == "2"


@pytest.mark.parametrize("page", ["abc", "0", "-4", ""])
def test_search_invalid_page_defaults_to_first(client, omdb_requests, page):
    body = client.get("/movies/search", params={"q": "batman", "page": page}).json()

    assert body["currentPage"] == 1
    assert omdb_requests[0].url.params["page"] == "1"


@pytest.mark.parametrize("params", [{}, {"q": ""}, {"q": "   "}])
def test_search_requires_query(client, omdb_requests, params):
    resp = client.get("/movies/search", params=params)

    assert resp.status_code == 200
    body = resp.json()
    assert body["movies"] == []
    assert body["totalResults"] == 0
    assert body["error"] == "Query parameter is required"
    assert omdb_requests == []


def test_search_forwards_query_unchanged(client, omdb_requests):
    client.get("/movies/search", params={"q": "  batman "})

    assert len(omdb_requests) == 1
    assert omdb_requests[0].url.params["s"] == "  batman "


def test_search_surfaces_upstream_error(client, omdb_response):
    omdb_response["body"] = {"Response": "False", "Error": "Too many results."}

    body = client.get("/movies/search", params={"q": "a"}).json()

    assert body["movies"] == []
    assert body["error"] == "Too many results."


def test_add_then_list_favorites(client):
    resp = client.post("/favorites", json=_movie())
    assert resp.status_code == 201
    assert resp.json() == _movie()

    client.post("/favorites", json=_movie("tt0468569", "The Dark Knight", "2008", "https://x/p.jpg"))

    listed = client.get("/favorites").json()
    assert [movie["imdbID"] for movie in listed] == ["tt0468569", "tt0372784"]
    assert listed[0]["Poster"] == "https://x/p.jpg"


def test_add_duplicate_returns_structured_error(client):
    client.post("/favorites", json=_movie())

    resp = client.post("/favorites", json=_movie(title="Renamed"))

    assert resp.status_code == 201
    assert resp.json() == {"error": "Movie already in favorites"}
    assert client.get("/favorites").json() == [_movie()]


def test_add_requires_movie_fields(client):
    resp = client.post("/favorites", json={"imdbID": "tt1"})

    assert resp.status_code == 422


def test_remove_favorite_is_no_content(client):
    client.post("/favorites", json=_movie())

    resp = client.delete("/favorites/tt0372784")

    assert resp.status_code == 204
    assert resp.content == b""
    assert client.get("/favorites").json() == []


def test_remove_missing_favorite_still_no_content(client):
    client.post("/favorites", json=_movie())

    resp = client.delete("/favorites/tt9999999")

    assert resp.status_code == 204
    assert len(client.get("/favorites").json()) == 1
