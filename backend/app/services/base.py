# backend/app/services/base.py
"""
Base service for LessonHub.

Services own the unit of work: repositories flush, services commit. Store
failures are translated here so routes only ever see domain exceptions.
"""

from contextlib import contextmanager
from functools import wraps
import inspect
import logging
import time
from typing import Any, Callable, Iterator, Optional, TypeVar, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import ServiceException, StoreUnavailableException
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.base_repository import is_store_unavailable

F = TypeVar("F", bound=Callable[..., Any])

SLOW_OPERATION_SECONDS = 1.0


class BaseService:
    """Shared session handling, logging and timing for catalog services."""

    def __init__(self, db: Session):
        self.db = db
        self.logger = logging.getLogger(self.__class__.__name__)

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """
        Run a block as one transaction: commit on exit, roll back on any error.

        Usage:
            with self.transaction():
                self.repository.insert(...)
        """
        try:
            yield self.db
            self.db.commit()
        except SQLAlchemyError as e:
            self.logger.error(f"Transaction failed: {e}")
            self.db.rollback()
            if is_store_unavailable(e):
                raise StoreUnavailableException("Database unavailable, please retry") from e
            raise ServiceException(f"Database operation failed: {e}") from e
        except Exception:
            self.db.rollback()
            raise

    @staticmethod
    def measure_operation(operation_name: str) -> Callable[[F], F]:
        """
        Time a service method and report it to Prometheus.

        Failures are counted by exception class; the exception itself always
        propagates unchanged.
        """

        def decorator(func: F) -> F:
            if inspect.iscoroutinefunction(func):
                raise TypeError("measure_operation supports synchronous service methods only")

            @wraps(func)
            def wrapper(self, *args, **kwargs):
                started = time.perf_counter()
                error_type: Optional[str] = None
                try:
                    return func(self, *args, **kwargs)
                except Exception as e:
                    error_type = type(e).__name__
                    raise
                finally:
                    elapsed = time.perf_counter() - started
                    if elapsed > SLOW_OPERATION_SECONDS:
                        self.logger.warning(
                            f"Slow operation detected: {operation_name} took {elapsed:.2f}s"
                        )
                    prometheus_metrics.record_service_operation(
                        service=self.__class__.__name__,
                        operation=operation_name,
                        duration=elapsed,
                        status="error" if error_type else "success",
                        error_type=error_type,
                    )

            return cast(F, wrapper)

        return decorator

    def log_operation(self, operation: str, **context: Any) -> None:
        self.logger.info(f"Operation: {operation}", extra={"operation": operation, **context})
