from datetime import datetime, timedelta, timezone

from sqlalchemy import select

from app.db import FavoriteRepository
from app.models import Favorite
from app.services.models import FavoriteFailure, MovieData

repo = FavoriteRepository()


def test_add_then_list_returns_movie(session, batman):
    outcome = repo.add(session, batman)
    session.commit()

    assert outcome.ok
    assert outcome.value == batman
    assert repo.list_all(session) == [batman]


def test_list_orders_by_most_recent_first(session):
    base = datetime(2026, 1, 1, tzinfo=timezone.utc)
    for offset, imdb_id in enumerate(["tt1", "tt2", "tt3"]):
        session.add(
            Favorite(
                imdb_id=imdb_id,
                title=f"Movie {imdb_id}",
                year="2000",
                created_at=base + timedelta(minutes=offset),
            )
        )
    session.commit()

    assert [movie.imdb_id for movie in repo.list_all(session)] == ["tt3", "tt2", "tt1"]


def test_recently_added_movie_is_listed_first(session, batman, dark_knight):
    repo.add(session, batman)
    repo.add(session, dark_knight)
    session.commit()

    assert [movie.imdb_id for movie in repo.list_all(session)] == [
        dark_knight.imdb_id,
        batman.imdb_id,
    ]


def test_duplicate_add_is_rejected_without_touching_existing_row(session, batman):
    repo.add(session, batman)
    session.commit()

    impostor = MovieData(imdb_id=batman.imdb_id, title="Something Else", year="1999", poster=None)
    outcome = repo.add(session, impostor)
    session.commit()

    assert not outcome.ok
    assert outcome.reason is FavoriteFailure.ALREADY_FAVORITED
    assert outcome.message == "Movie already in favorites"
    assert repo.list_all(session) == [batman]


def test_session_stays_usable_after_duplicate(session, batman, dark_knight):
    repo.add(session, batman)
    session.commit()
    repo.add(session, batman)

    assert repo.add(session, dark_knight).ok
    session.commit()
    assert len(repo.list_all(session)) == 2


def test_remove_existing_favorite(session, batman):
    repo.add(session, batman)
    session.commit()

    outcome = repo.remove(session, batman.imdb_id)
    session.commit()

    assert outcome.ok
    assert repo.list_all(session) == []


def test_remove_missing_favorite_reports_not_found(session, batman):
    repo.add(session, batman)
    session.commit()

    outcome = repo.remove(session, "tt0000000")

    assert not outcome.ok
    assert outcome.reason is FavoriteFailure.NOT_IN_FAVORITES
    assert outcome.message == "Movie not found in favorites"
    assert repo.list_all(session) == [batman]


def test_exists(session, batman):
    assert repo.exists(session, batman.imdb_id) is False
    repo.add(session, batman)
    session.commit()
    assert repo.exists(session, batman.imdb_id) is True


def test_created_at_is_assigned_on_insert(session, batman):
    repo.add(session, batman)
    session.commit()

    created_at = session.execute(select(Favorite.created_at)).scalar_one()
    assert created_at is not None
