# backend/app/repositories/__init__.py
"""
Repository Pattern Implementation for LessonHub

This package provides the repository layer for data access,
separating business logic from database queries.

Key Components:
- BaseRepository: Foundation for all repositories with common read/create operations
- IRepository: Interface defining required methods for all repositories
- LessonRepository: Catalog reads and the conditional spaces update
- OrderRepository: Append-only order persistence

Usage:
    from app.repositories import LessonRepository

    repo = LessonRepository(db)
    lesson = repo.conditional_update_spaces(lesson_id, -1)
"""

from .base_repository import BaseRepository, IRepository
from .lesson_repository import LessonRepository
from .order_repository import OrderRepository

__all__ = [
    "IRepository",
    "BaseRepository",
    "LessonRepository",
    "OrderRepository",
]
