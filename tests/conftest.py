import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db import init_models
from app.services.models import MovieData


@pytest.fixture
def engine():
    # One shared in-memory connection so every session sees the same tables.
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    init_models(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@pytest.fixture
def session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def batman():
    return MovieData(
        imdb_id="tt0372784",
        title="Batman Begins",
        year="2005",
        poster="https://example.com/batman-begins.jpg",
    )


@pytest.fixture
def dark_knight():
    return MovieData(imdb_id="tt0468569", title="The Dark Knight", year="2008", poster=None)
