# backend/app/repositories/base_repository.py
"""
Base Repository Pattern for LessonHub

Provides the foundation for all repository classes with:
- Common read/create operations
- Type safety with generics
- Transaction support (managed by services)
- Store-failure translation

Repositories never commit. Services own the unit of work.
"""

from abc import ABC, abstractmethod
import logging
from typing import Any, Generic, List, NoReturn, Optional, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import (
    DBAPIError,
    DisconnectionError,
    IntegrityError,
    OperationalError,
    SQLAlchemyError,
    TimeoutError as PoolTimeoutError,
)
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from ..core.exceptions import RepositoryException, StoreUnavailableException

T = TypeVar("T")

logger = logging.getLogger(__name__)


def is_store_unavailable(exc: SQLAlchemyError) -> bool:
    """True when the error means the store itself is unreachable or timed out."""
    if isinstance(exc, (OperationalError, DisconnectionError, PoolTimeoutError)):
        return True
    return isinstance(exc, DBAPIError) and bool(exc.connection_invalidated)


class IRepository(ABC, Generic[T]):
    """
    Abstract repository interface defining core data access methods.
    """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """
        Retrieve an entity by its primary key.

        Args:
            id: The primary key value

        Returns:
            The entity if found, None otherwise
        """

    @abstractmethod
    def get_all(self) -> List[T]:
        """Retrieve every entity in insertion order."""

    @abstractmethod
    def create(self, **kwargs) -> T:
        """
        Create a new entity.

        Raises:
            RepositoryException: If creation fails
        """

    @abstractmethod
    def count(self, **kwargs) -> int:
        """Count entities matching given criteria."""


class BaseRepository(IRepository[T]):
    """
    Concrete base repository implementation with common data access patterns.

    Attributes:
        db: SQLAlchemy session
        model: SQLAlchemy model class
    """

    def __init__(self, db: Session, model: Type[T]):
        self.db = db
        self.model = model
        self.logger = logging.getLogger(f"{__name__}.{model.__name__}")

    def get_by_id(self, id: str, *, fresh: bool = False) -> Optional[T]:
        """
        Retrieve an entity by its primary key.

        ``fresh`` forces a round-trip and overwrites any identity-map copy,
        which matters after a bulk UPDATE issued in the same session.
        """
        stmt = select(self.model).where(self.model.id == id)
        if fresh:
            stmt = stmt.execution_options(populate_existing=True)
        try:
            return self.db.execute(stmt).scalars().first()
        except SQLAlchemyError as e:
            self._raise_store_error(e, f"retrieve {self.model.__name__} {id}")

    def get_all(self) -> List[T]:
        try:
            return list(self.db.execute(self._ordered(select(self.model))).scalars().all())
        except SQLAlchemyError as e:
            self._raise_store_error(e, f"list {self.model.__name__}")

    def find(self, criteria: Optional[ColumnElement[bool]] = None) -> List[T]:
        """
        Return entities matching a SQL predicate (all entities when None).

        Args:
            criteria: A boolean SQL expression over the model's columns

        Returns:
            Matching entities in insertion order
        """
        stmt = select(self.model)
        if criteria is not None:
            stmt = stmt.where(criteria)
        try:
            return list(self.db.execute(self._ordered(stmt)).scalars().all())
        except SQLAlchemyError as e:
            self._raise_store_error(e, f"find {self.model.__name__}")

    def create(self, **kwargs) -> T:
        """
        Create a new entity.

        Note: Does NOT commit - transaction management is handled by service layer.
        """
        try:
            entity = self.model(**kwargs)
            self.db.add(entity)
            self.db.flush()  # Get ID without committing
            return entity
        except IntegrityError as exc:
            self.logger.error(
                "Integrity error creating %s: %s", self.model.__name__, exc, exc_info=True
            )
            self.db.rollback()
            raise RepositoryException(f"Integrity constraint violated: {exc}") from exc
        except SQLAlchemyError as e:
            self.db.rollback()
            self._raise_store_error(e, f"create {self.model.__name__}")

    def count(self, **kwargs) -> int:
        """Count entities matching given criteria."""
        stmt = select(func.count()).select_from(self.model).where(
            *(getattr(self.model, key) == value for key, value in kwargs.items())
        )
        try:
            return int(self.db.execute(stmt).scalar_one())
        except SQLAlchemyError as e:
            self._raise_store_error(e, "count records")

    # Protected helper methods for use by subclasses

    def _ordered(self, stmt: Any) -> Any:
        """ULID primary keys sort by creation time."""
        return stmt.order_by(self.model.id)

    def _raise_store_error(self, exc: SQLAlchemyError, action: str) -> NoReturn:
        if is_store_unavailable(exc):
            self.logger.warning("Store unavailable while trying to %s: %s", action, exc)
            raise StoreUnavailableException("Database unavailable, please retry") from exc
        self.logger.error(f"Failed to {action}: {str(exc)}")
        raise RepositoryException(f"Failed to {action}: {str(exc)}") from exc
