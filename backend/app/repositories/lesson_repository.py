"""
Lesson Repository for LessonHub

Data access for the lesson catalog, including the single-statement
conditional capacity update that keeps ``spaces`` non-negative under
concurrent writers.
"""

from typing import List, Optional

from sqlalchemy import func, update
from sqlalchemy.exc import DataError, IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import InvalidSpacesDeltaException
from ..models.lesson import Lesson
from .base_repository import BaseRepository


class LessonRepository(BaseRepository[Lesson]):
    """Repository for catalog reads and capacity writes."""

    def __init__(self, db: Session):
        super().__init__(db, Lesson)

    def list_all(self) -> List[Lesson]:
        return self.get_all()

    def conditional_update_spaces(self, lesson_id: str, delta: int) -> Optional[Lesson]:
        """
        Apply ``spaces += delta`` only if the result stays non-negative.

        The guard and the write happen in one UPDATE statement, so two
        writers can never both observe the same pre-image.

        Args:
            lesson_id: Lesson primary key
            delta: Signed change in capacity

        Returns:
            The lesson re-read after the write, or None when no row matched
            (missing lesson or guard rejected). The caller diagnoses which.
        """
        stmt = (
            update(Lesson)
            .where(Lesson.id == lesson_id, Lesson.spaces + delta >= 0)
            .values(
                spaces=Lesson.spaces + delta,
                version=Lesson.version + 1,
                updated_at=func.now(),
            )
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.db.execute(stmt)
        except IntegrityError as exc:
            # CHECK constraint fired: the guard lost to a concurrent writer.
            self.logger.info("Spaces CHECK rejected delta %s on %s: %s", delta, lesson_id, exc)
            self.db.rollback()
            return None
        except DataError as exc:
            # The sum does not fit the spaces column (e.g. PostgreSQL int4 overflow).
            self.db.rollback()
            raise InvalidSpacesDeltaException(
                delta, message="spacesDelta would overflow the lesson's spaces"
            ) from exc
        except SQLAlchemyError as e:
            self.db.rollback()
            self._raise_store_error(e, f"update spaces on lesson {lesson_id}")

        if result.rowcount != 1:
            return None
        return self.get_by_id(lesson_id, fresh=True)
