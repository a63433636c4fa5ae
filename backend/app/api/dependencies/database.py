# backend/app/api/dependencies/database.py
"""
Database-related dependencies.

The store handle lives on ``app.state.database``; it is created by the
application lifespan and is absent (or disconnected) before startup
finishes and after shutdown begins.
"""

import logging
from typing import Generator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from ...core.exceptions import StoreUnavailableException
from ...database import Database

logger = logging.getLogger(__name__)


def get_database(request: Request) -> Database:
    """
    Return the process-wide store handle.

    Raises:
        StoreUnavailableException: If the store is not connected yet
    """
    database = getattr(request.app.state, "database", None)
    if database is None or not database.is_connected:
        logger.warning("Rejecting %s %s: store not connected", request.method, request.url.path)
        raise StoreUnavailableException()
    return database


def get_db(database: Database = Depends(get_database)) -> Generator[Session, None, None]:
    """
    Get database session dependency.

    Yields:
        Database session that will be rolled back on error and closed after use
    """
    db = database.new_session()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
