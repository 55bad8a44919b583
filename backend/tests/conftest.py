"""
Test configuration and fixtures for pytest.
"""

import os

# Must be set before the application modules build their engine
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from app.core.security import create_access_token
from app.db.base import Base
from app.db.models import Playlist, PlaylistTrack, User
from app.dependencies import db_dependency
from app.main import app


@pytest.fixture(scope="function")
def test_engine():
    """Create a fresh in-memory database for each test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(test_engine):
    """Create a new database session for a test."""
    session_factory = sessionmaker(bind=test_engine, autoflush=False)
    session = session_factory()

    yield session

    session.close()


@pytest.fixture
def client(db_session):
    """Create a test client with a session override."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[db_dependency] = override_get_db

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def test_user(db_session):
    """Create a test user."""
    user = User(email="test@example.com", display_name="Test User", is_active=True)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def other_user(db_session):
    """Create a second user who owns nothing of test_user's."""
    user = User(email="other@example.com", is_active=True)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def auth_headers(test_user):
    """Authorization header for test_user."""
    token = create_access_token({"sub": str(test_user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def playlist(db_session, test_user):
    """Create an empty playlist owned by test_user."""
    playlist = Playlist(owner_id=test_user.id, name="Road Trip")
    db_session.add(playlist)
    db_session.commit()
    db_session.refresh(playlist)
    return playlist


@pytest.fixture
def seed_tracks(db_session):
    """Insert tracks directly, bypassing the service layer.

    Usage: seed_tracks(playlist, [(position, uri), ...], deleted={positions})
    """

    def _seed(playlist, entries, deleted=()):
        for position, uri in entries:
            db_session.add(
                PlaylistTrack(
                    playlist_id=playlist.id,
                    position=position,
                    track_uri=uri,
                    artist=f"Artist {uri}",
                    title=f"Title {uri}",
                    album=f"Album {uri}",
                    is_deleted=position in deleted,
                )
            )
        db_session.commit()

    return _seed


@pytest.fixture
def make_track():
    """Build the request body entry for a track URI."""

    def _make(uri):
        return {
            "trackUri": uri,
            "artist": f"Artist {uri}",
            "title": f"Title {uri}",
            "album": f"Album {uri}",
        }

    return _make
