# backend/app/services/catalog_service.py
"""
Catalog Service for LessonHub

Read-only access to the lesson catalog: the full listing and free-text
search through the query translator.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from ..models.lesson import Lesson
from ..repositories.lesson_repository import LessonRepository
from .base import BaseService
from .search_query import translate


class CatalogService(BaseService):
    """Service for browsing and searching lessons."""

    def __init__(self, db: Session, lesson_repository: Optional[LessonRepository] = None):
        super().__init__(db)
        self.lesson_repository = lesson_repository or LessonRepository(db)

    @BaseService.measure_operation("list_lessons")
    def list_lessons(self) -> List[Lesson]:
        return self.lesson_repository.list_all()

    @BaseService.measure_operation("search_lessons")
    def search_lessons(self, raw_query: Optional[str]) -> List[Lesson]:
        """
        Search lessons with a single token.

        Numeric tokens match price or spaces exactly; anything else is a
        case-insensitive substring match on subject, location and description.

        Raises:
            InvalidSearchQueryException: If the token is missing or blank
        """
        lesson_filter = translate(raw_query)
        self.log_operation("search_lessons", kind=lesson_filter.kind.value, token=lesson_filter.token)
        return self.lesson_repository.find(lesson_filter.to_clause())
