"""
Pytest configuration and fixtures for bjjlib tests.

Every test gets its own SQLite file so that SAVEPOINTs, foreign keys and
multiple connections behave as they do against a real server.
"""

import itertools
import os
from datetime import datetime, timedelta

# Must be set before bjjlib.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REDIS_URL"] = ""
os.environ["ADMIN_PASSWORD"] = "test-admin-password"
os.environ["YOUTUBE_API_KEY"] = ""
os.environ["AUTO_CREATE_TABLES"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from bjjlib.database import create_db_engine, get_db, init_db
from bjjlib.main import app
from bjjlib.models import Tag, TagCategory, Video, VideoTag

ADMIN_PASSWORD = "test-admin-password"
BASE_TIME = datetime(2024, 1, 1, 12, 0, 0)


@pytest.fixture
def engine(tmp_path):
    """Fresh database file with the full schema."""
    engine = create_db_engine(f"sqlite:///{tmp_path / 'library.db'}")
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    """Session for service-level tests."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


def insert_video(session, title, tags=(), created_at=None, url=None, sequence=0):
    """Insert a video and link it to tags (created by name if missing)."""
    video = Video(
        title=title,
        url=url or f"https://www.youtube.com/watch?v=vid{sequence:05d}",
        created_at=created_at or BASE_TIME + timedelta(minutes=sequence),
    )
    session.add(video)
    session.flush()
    for name in tags:
        tag = session.query(Tag).filter(Tag.name == name).one_or_none()
        if tag is None:
            tag = Tag(name=name)
            session.add(tag)
            session.flush()
        session.add(VideoTag(video_id=video.id, tag_id=tag.id))
    session.commit()
    return video


@pytest.fixture
def add_video(db):
    """Insert videos through the test session; each is one minute newer."""
    counter = itertools.count()

    def _add(title, tags=(), created_at=None, url=None):
        return insert_video(
            db, title, tags, created_at=created_at, url=url, sequence=next(counter)
        )

    return _add


@pytest.fixture
def seed_video(session_factory):
    """
    Insert a video in a short-lived session and return its ID.

    API tests seed this way so that no test session holds a read snapshot
    while the app writes through its own connection.
    """
    counter = itertools.count()

    def _seed(title, tags=(), created_at=None, url=None):
        with session_factory() as session:
            video = insert_video(
                session, title, tags, created_at=created_at, url=url, sequence=next(counter)
            )
            return video.id

    return _seed


@pytest.fixture
def tag_ids(session_factory):
    """Look up tag IDs by name."""

    def _lookup(*names):
        with session_factory() as session:
            rows = dict(session.query(Tag.name, Tag.id).filter(Tag.name.in_(names)).all())
        return [rows[name] for name in names]

    return _lookup


@pytest.fixture
def seed_category(session_factory):
    def _seed(name, display_order=0, tags=()):
        with session_factory() as session:
            category = TagCategory(name=name, display_order=display_order)
            session.add(category)
            session.flush()
            for tag_name in tags:
                session.add(Tag(name=tag_name, category_id=category.id))
            session.commit()
            return category.id

    return _seed


@pytest.fixture
def client(session_factory):
    """TestClient whose requests each get a session on the test database."""

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_client(client):
    """Client carrying a valid admin session cookie."""
    response = client.post("/api/admin/login", json={"password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return client
