# backend/app/services/inventory_service.py
"""
Inventory Service for LessonHub

Owns every change to a lesson's ``spaces``. A change is a single
conditional UPDATE; when it matches no row the lesson is re-read to tell a
missing lesson from insufficient capacity from a lost race, and lost races
are retried within a small attempt budget.
"""

from decimal import Decimal
import math
import re
from typing import Any, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.constants import MAX_SPACES_DELTA
from ..core.exceptions import (
    InsufficientSpacesException,
    InvalidSpacesDeltaException,
    LessonNotFoundException,
    SpacesUpdateConflictException,
)
from ..models.lesson import Lesson
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.lesson_repository import LessonRepository
from .base import BaseService

_INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")


def parse_spaces_delta(value: Any) -> int:
    """
    Coerce a caller-supplied ``spacesDelta`` to an int.

    Accepts ints, integral floats/decimals and integer strings. Booleans,
    None, fractions, NaN/inf and anything unparsable are rejected.

    Raises:
        InvalidSpacesDeltaException: If the value is not a finite integer
    """
    if value is None or isinstance(value, bool):
        raise InvalidSpacesDeltaException(value)

    if isinstance(value, int):
        delta = value
    elif isinstance(value, (float, Decimal)):
        if not math.isfinite(value) or value != int(value):
            raise InvalidSpacesDeltaException(value)
        delta = int(value)
    elif isinstance(value, str):
        text = value.strip()
        if not _INTEGER_PATTERN.match(text):
            raise InvalidSpacesDeltaException(value)
        delta = int(text)
    else:
        raise InvalidSpacesDeltaException(value)

    if abs(delta) > MAX_SPACES_DELTA:
        raise InvalidSpacesDeltaException(value)
    return delta


class InventoryService(BaseService):
    """
    Service for atomically adjusting lesson capacity.

    Never clamps and never pre-rejects a negative delta: the store decides,
    so the check and the write cannot be separated by another writer.
    """

    def __init__(
        self,
        db: Session,
        lesson_repository: Optional[LessonRepository] = None,
        max_attempts: Optional[int] = None,
    ):
        super().__init__(db)
        self.lesson_repository = lesson_repository or LessonRepository(db)
        self.max_attempts = max_attempts or settings.spaces_update_max_attempts

    @BaseService.measure_operation("adjust_spaces")
    def adjust_spaces(self, lesson_id: str, raw_delta: Any) -> Lesson:
        """
        Add ``raw_delta`` to the lesson's spaces if the result stays >= 0.

        Args:
            lesson_id: Lesson primary key
            raw_delta: Signed change; validated with ``parse_spaces_delta``

        Returns:
            The lesson as stored after the change

        Raises:
            InvalidSpacesDeltaException: Delta is not a finite integer
            LessonNotFoundException: No lesson has this id
            InsufficientSpacesException: The change would go below zero
            SpacesUpdateConflictException: Attempt budget exhausted
        """
        delta = parse_spaces_delta(raw_delta)
        self.log_operation("adjust_spaces", lesson_id=lesson_id, delta=delta)

        for attempt in range(1, self.max_attempts + 1):
            current: Optional[Lesson] = None
            with self.transaction():
                updated = self.lesson_repository.conditional_update_spaces(lesson_id, delta)
                if updated is None:
                    current = self.lesson_repository.get_by_id(lesson_id, fresh=True)

            if updated is not None:
                prometheus_metrics.record_spaces_adjustment("success", retries=attempt - 1)
                self.logger.info(
                    "Lesson %s spaces now %s (delta %s)", lesson_id, updated.spaces, delta
                )
                return updated

            if current is None:
                prometheus_metrics.record_spaces_adjustment("not_found", retries=attempt - 1)
                raise LessonNotFoundException(lesson_id)

            if current.spaces + delta < 0:
                prometheus_metrics.record_spaces_adjustment("insufficient", retries=attempt - 1)
                raise InsufficientSpacesException(lesson_id, current.spaces, delta)

            # The row changed between the guarded write and the diagnostic read.
            self.logger.info(
                "Spaces update on lesson %s lost a race (attempt %d/%d)",
                lesson_id,
                attempt,
                self.max_attempts,
            )

        prometheus_metrics.record_spaces_adjustment("conflict", retries=self.max_attempts - 1)
        self.logger.warning(
            "Giving up on spaces update for lesson %s after %d attempts",
            lesson_id,
            self.max_attempts,
        )
        raise SpacesUpdateConflictException(lesson_id, self.max_attempts)
