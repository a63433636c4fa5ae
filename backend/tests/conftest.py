# backend/tests/conftest.py
"""
Shared pytest fixtures.

Every test gets its own file-backed SQLite store under ``tmp_path``; a file
(not ``:memory:``) so that concurrent sessions really contend for locks.
"""

from pathlib import Path
from typing import Callable, Generator

from fastapi import FastAPI
from fastapi.testclient import TestClient
import pytest
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.database import Database
from app.main import create_app
from app.models.lesson import Lesson

LessonFactory = Callable[..., Lesson]


@pytest.fixture
def images_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "images"
    directory.mkdir()
    (directory / "math.png").write_bytes(b"\x89PNG\r\n\x1a\nfake")
    return directory


@pytest.fixture
def test_settings(tmp_path: Path, images_dir: Path) -> Settings:
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'lessons.db'}",
        images_dir=images_dir,
        spaces_update_max_attempts=5,
    )


@pytest.fixture
def database(test_settings: Settings) -> Generator[Database, None, None]:
    store = Database(test_settings).connect()
    yield store
    store.dispose()


@pytest.fixture
def db(database: Database) -> Generator[Session, None, None]:
    session = database.new_session()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def lesson_factory(database: Database) -> LessonFactory:
    """Insert and commit a lesson; keyword arguments override the defaults."""

    def _create(**overrides) -> Lesson:
        values = {
            "subject": "Math",
            "location": "Room1",
            "description": "",
            "price": 20,
            "spaces": 5,
        }
        values.update(overrides)
        with database.session() as session:
            lesson = Lesson(**values)
            session.add(lesson)
            session.flush()
        return lesson

    return _create


@pytest.fixture
def read_spaces(database: Database) -> Callable[[str], int]:
    """Read a lesson's committed spaces through a fresh session."""

    def _read(lesson_id: str) -> int:
        with database.session() as session:
            return session.get(Lesson, lesson_id).spaces

    return _read


@pytest.fixture
def app(test_settings: Settings, database: Database) -> FastAPI:
    return create_app(test_settings, database=database)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """Client with the lifespan running, so the store is attached."""
    with TestClient(app) as test_client:
        yield test_client
