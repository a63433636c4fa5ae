# backend/app/core/exceptions.py
"""
Domain-specific exceptions for the lesson catalog API.

These exceptions provide clear, business-focused error messages
that can be caught and handled appropriately at the API layer.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        """Default conversion to HTTPException (override status_code in subclasses)."""
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationException(DomainException):
    """Raised when caller-supplied data is malformed or missing."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND


class ServiceException(DomainException):
    """Raised when a service operation fails."""

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message or "An error occurred processing your request",
                "code": self.code,
                "details": self.details if self.details else {},
            },
        )


class StoreUnavailableException(ServiceException):
    """Raised when the catalog store is not connected or stopped answering."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(
            message=message or "Database not connected yet",
            code="STORE_UNAVAILABLE",
        )

    def to_http_exception(self) -> HTTPException:
        exc = super().to_http_exception()
        exc.headers = {"Retry-After": "2"}
        return exc


# Specific business exceptions


class InvalidSearchQueryException(ValidationException):
    """Raised when the search token is missing or blank."""

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(
            message=message or "Missing search query 'q'",
            code="INVALID_SEARCH_QUERY",
        )


class InvalidSpacesDeltaException(ValidationException):
    """Raised when spacesDelta is not a finite integer."""

    def __init__(self, value: Any, message: Optional[str] = None) -> None:
        super().__init__(
            message=message or "spacesDelta must be an integer",
            code="INVALID_SPACES_DELTA",
            details={"spacesDelta": repr(value)},
        )


class InsufficientSpacesException(ValidationException):
    """Raised when a delta would drive a lesson's spaces below zero."""

    def __init__(self, lesson_id: str, available: int, delta: int) -> None:
        super().__init__(
            message=f"Insufficient spaces: {available} available, delta {delta}",
            code="INSUFFICIENT_SPACES",
            details={"lesson_id": lesson_id, "available": available, "delta": delta},
        )


class LessonNotFoundException(NotFoundException):
    """Raised when no lesson has the requested id."""

    def __init__(self, lesson_id: str) -> None:
        super().__init__(
            message="Lesson not found",
            code="LESSON_NOT_FOUND",
            details={"lesson_id": lesson_id},
        )


class InvalidOrderException(ValidationException):
    """Raised when an order payload is missing items, name or phone."""

    def __init__(self, errors: Optional[list[Dict[str, Any]]] = None) -> None:
        super().__init__(
            message="Invalid order payload",
            code="INVALID_ORDER",
            details={"errors": errors or []},
        )


class SpacesUpdateConflictException(ServiceException):
    """
    Raised when the conditional spaces update keeps losing races.

    This is a server-side retry-budget failure, not a client mistake.
    """

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self, lesson_id: str, attempts: int) -> None:
        super().__init__(
            message="Could not update spaces due to concurrent updates, please retry",
            code="SPACES_UPDATE_CONFLICT",
            details={"lesson_id": lesson_id, "attempts": attempts},
        )


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    This exception is used when data access operations fail,
    such as query failures or constraint violations.
    """
