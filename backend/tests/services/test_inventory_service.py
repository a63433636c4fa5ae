# backend/tests/services/test_inventory_service.py
"""
Tests for InventoryService: delta parsing, the guarded update, failure
diagnosis, the retry budget, and behaviour under concurrent writers.
"""

from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal
import threading
from types import SimpleNamespace
from unittest.mock import Mock

import pytest
from sqlalchemy.orm import Session

from app.core.exceptions import (
    InsufficientSpacesException,
    InvalidSpacesDeltaException,
    LessonNotFoundException,
    SpacesUpdateConflictException,
)
from app.repositories.lesson_repository import LessonRepository
from app.services.inventory_service import InventoryService, parse_spaces_delta


class TestParseSpacesDelta:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            (-1, -1),
            (0, 0),
            (3, 3),
            (2.0, 2),
            (-5.0, -5),
            (Decimal("4"), 4),
            ("7", 7),
            (" -2 ", -2),
            ("+3", 3),
        ],
    )
    def test_accepts_integers(self, raw, expected):
        assert parse_spaces_delta(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        [
            None,
            True,
            False,
            1.5,
            float("nan"),
            float("inf"),
            "",
            "abc",
            "1.5",
            "1e2",
            [1],
            {"n": 1},
            2**40,
        ],
    )
    def test_rejects_everything_else(self, raw):
        with pytest.raises(InvalidSpacesDeltaException) as exc_info:
            parse_spaces_delta(raw)

        assert exc_info.value.to_http_exception().status_code == 400


class TestAdjustSpaces:
    def test_success_returns_post_update_state(self, db, lesson_factory, read_spaces):
        lesson = lesson_factory(spaces=5)

        updated = InventoryService(db).adjust_spaces(lesson.id, -2)

        assert updated.id == lesson.id
        assert updated.spaces == 3
        assert read_spaces(lesson.id) == 3

    def test_positive_delta_releases_spaces(self, db, lesson_factory):
        lesson = lesson_factory(spaces=0)

        assert InventoryService(db).adjust_spaces(lesson.id, "4").spaces == 4

    def test_zero_delta_returns_current_state_and_bumps_version(self, db, lesson_factory):
        lesson = lesson_factory(spaces=2)

        updated = InventoryService(db).adjust_spaces(lesson.id, 0)

        assert updated.spaces == 2
        assert updated.version == 2

    def test_insufficient_spaces_leaves_row_untouched(self, db, lesson_factory, read_spaces):
        lesson = lesson_factory(spaces=2)

        with pytest.raises(InsufficientSpacesException) as exc_info:
            InventoryService(db).adjust_spaces(lesson.id, -3)

        assert exc_info.value.details == {"lesson_id": lesson.id, "available": 2, "delta": -3}
        assert read_spaces(lesson.id) == 2

    def test_unknown_lesson(self, db):
        with pytest.raises(LessonNotFoundException):
            InventoryService(db).adjust_spaces("01ARZ3NDEKTSV4RRFFQ69G5FAV", -1)

    def test_invalid_delta_never_reaches_the_store(self):
        repo = Mock(spec=LessonRepository)
        service = InventoryService(Mock(spec=Session), lesson_repository=repo)

        with pytest.raises(InvalidSpacesDeltaException):
            service.adjust_spaces("lesson", "lots")

        repo.conditional_update_spaces.assert_not_called()

    @pytest.mark.parametrize("start, delta", [(0, 0), (3, -3), (1, 10), (10, -7)])
    def test_valid_delta_lands_exactly(self, db, lesson_factory, read_spaces, start, delta):
        lesson = lesson_factory(spaces=start)

        InventoryService(db).adjust_spaces(lesson.id, delta)

        assert read_spaces(lesson.id) == start + delta


class TestRetryBudget:
    def _service(self, repo: Mock, attempts: int = 3) -> InventoryService:
        return InventoryService(Mock(spec=Session), lesson_repository=repo, max_attempts=attempts)

    def test_lost_race_is_retried(self):
        repo = Mock(spec=LessonRepository)
        winner = SimpleNamespace(id="lesson", spaces=4)
        repo.conditional_update_spaces.side_effect = [None, winner]
        repo.get_by_id.return_value = SimpleNamespace(id="lesson", spaces=5)

        assert self._service(repo).adjust_spaces("lesson", -1) is winner
        assert repo.conditional_update_spaces.call_count == 2

    def test_exhausted_budget_raises_conflict(self):
        repo = Mock(spec=LessonRepository)
        repo.conditional_update_spaces.return_value = None
        # Enough spaces on every re-read, yet the guarded write keeps missing.
        repo.get_by_id.return_value = SimpleNamespace(id="lesson", spaces=10)

        with pytest.raises(SpacesUpdateConflictException) as exc_info:
            self._service(repo, attempts=3).adjust_spaces("lesson", -1)

        assert repo.conditional_update_spaces.call_count == 3
        http_exc = exc_info.value.to_http_exception()
        assert http_exc.status_code == 503
        assert exc_info.value.details["attempts"] == 3

    def test_overflow_is_reported_without_retrying(self):
        repo = Mock(spec=LessonRepository)
        repo.conditional_update_spaces.side_effect = InvalidSpacesDeltaException(
            2_000_000_000, message="spacesDelta would overflow the lesson's spaces"
        )

        with pytest.raises(InvalidSpacesDeltaException):
            self._service(repo).adjust_spaces("lesson", 2_000_000_000)

        assert repo.conditional_update_spaces.call_count == 1

    def test_default_budget_comes_from_settings(self, db):
        from app.core.config import settings

        assert InventoryService(db).max_attempts == settings.spaces_update_max_attempts


class TestConcurrency:
    @pytest.mark.parametrize("initial, workers", [(5, 20), (0, 4), (8, 8)])
    def test_concurrent_decrements_never_oversell(
        self, database, lesson_factory, read_spaces, initial, workers
    ):
        lesson = lesson_factory(spaces=initial)
        barrier = threading.Barrier(workers)

        def _worker() -> str:
            session = database.new_session()
            try:
                service = InventoryService(session, max_attempts=5)
                try:
                    barrier.wait(timeout=10)
                except threading.BrokenBarrierError:
                    pass
                try:
                    service.adjust_spaces(lesson.id, -1)
                    return "ok"
                except InsufficientSpacesException:
                    return "insufficient"
            finally:
                session.close()

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = [executor.submit(_worker) for _ in range(workers)]
            outcomes = [future.result(timeout=60) for future in futures]

        succeeded = min(initial, workers)
        assert outcomes.count("ok") == succeeded
        assert outcomes.count("insufficient") == workers - succeeded
        assert read_spaces(lesson.id) == initial - succeeded
