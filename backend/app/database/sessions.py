"""Process-wide store handle: engine plus session factory."""

from __future__ import annotations

from contextlib import contextmanager
import logging
from typing import Generator, Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import Settings

from .base import Base
from .engines import create_store_engine

logger = logging.getLogger(__name__)


class Database:
    """
    Shared connection to the catalog/order store.

    Created once at startup, handed to request handlers through dependency
    injection, and disposed once at shutdown. Nothing else in the process
    holds a reference to the engine.
    """

    def __init__(self, settings: Settings, engine: Optional[Engine] = None) -> None:
        self.settings = settings
        self._engine = engine
        self._session_factory: Optional[sessionmaker] = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise RuntimeError("Database is not connected")
        return self._engine

    @property
    def is_connected(self) -> bool:
        return self._session_factory is not None

    def connect(self) -> "Database":
        """Create the engine, verify connectivity and (optionally) create tables."""
        if self._engine is None:
            self._engine = create_store_engine(self.settings)
        self.ping()
        if self.settings.db_create_tables:
            # Register model tables on Base.metadata before create_all.
            from app import models  # noqa: F401

            Base.metadata.create_all(bind=self._engine)
        self._session_factory = sessionmaker(
            bind=self._engine, autocommit=False, autoflush=False, expire_on_commit=False
        )
        logger.info("Connected to store %s", self._engine.url.render_as_string(hide_password=True))
        return self

    def ping(self) -> None:
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    def new_session(self) -> Session:
        if self._session_factory is None:
            raise RuntimeError("Database is not connected")
        return self._session_factory()

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """Context manager for short-lived DB operations."""
        db = self.new_session()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def dispose(self) -> None:
        self._session_factory = None
        if self._engine is not None:
            self._engine.dispose()
            logger.info("Store connection pool disposed")


__all__ = ["Database"]
