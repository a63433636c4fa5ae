"""Engine factory for the catalog/order store."""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import QueuePool

from app.core.config import Settings

logger = logging.getLogger(__name__)

_SQLITE_BUSY_TIMEOUT_SECONDS = 30


def _build_connect_args(settings: Settings) -> dict[str, Any]:
    if settings.is_sqlite:
        # Requests are served from a worker thread pool; writers wait on the
        # database lock instead of failing immediately.
        return {"check_same_thread": False, "timeout": _SQLITE_BUSY_TIMEOUT_SECONDS}
    args: dict[str, Any] = {
        "connect_timeout": 5,
        "application_name": "lessonhub_api",
    }
    if settings.db_statement_timeout_ms:
        args["options"] = f"-c statement_timeout={settings.db_statement_timeout_ms}"
    return args


def _build_engine_kwargs(settings: Settings) -> dict[str, Any]:
    kwargs: dict[str, Any] = {
        "future": True,
        "pool_pre_ping": True,
        "connect_args": _build_connect_args(settings),
    }
    if not settings.is_sqlite:
        kwargs.update(
            poolclass=QueuePool,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_timeout=settings.db_pool_timeout,
            pool_recycle=1800,
            pool_use_lifo=True,
        )
    return kwargs


def _add_pool_events(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _on_connect(_dbapi_connection: Any, _connection_record: Any) -> None:
        logger.debug("Database connection established")

    @event.listens_for(engine, "checkout")
    def _on_checkout(
        _dbapi_connection: Any, _connection_record: Any, _connection_proxy: Any
    ) -> None:
        logger.debug("Connection checked out from pool")

    @event.listens_for(engine, "checkin")
    def _on_checkin(_dbapi_connection: Any, _connection_record: Any) -> None:
        logger.debug("Connection returned to pool")

    @event.listens_for(engine, "invalidate")
    def _on_invalidate(_dbapi_connection: Any, _connection_record: Any, exception: Any) -> None:
        logger.warning(
            "Connection invalidated",
            extra={
                "event": "db_connection_invalidated",
                "exception": str(exception) if exception else "unknown",
            },
        )


def _unicode_lower(value: Any) -> Any:
    return value.lower() if isinstance(value, str) else value


def _add_sqlite_functions(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _on_sqlite_connect(dbapi_connection: Any, _connection_record: Any) -> None:
        # SQLite's built-in lower() only folds ASCII; ILIKE compiles to lower() LIKE lower().
        dbapi_connection.create_function("lower", 1, _unicode_lower, deterministic=True)


def create_store_engine(settings: Settings) -> Engine:
    """Create the process-wide engine for the configured store."""
    engine = create_engine(settings.get_database_url(), **_build_engine_kwargs(settings))
    _add_pool_events(engine)
    if settings.is_sqlite:
        _add_sqlite_functions(engine)
    return engine


__all__ = ["create_store_engine"]
