# backend/tests/services/test_order_service.py
"""Tests for order intake validation and persistence."""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select

from app.core.exceptions import InvalidOrderException
from app.models.order import Order
from app.services.order_service import OrderService, validate_order_payload

VALID_ORDER = {
    "items": [{"lessonId": "01ARZ3NDEKTSV4RRFFQ69G5FAV", "qty": 1}],
    "name": "Ada Lovelace",
    "phone": "07123456789",
}


def _order_count(db) -> int:
    return db.execute(select(func.count()).select_from(Order)).scalar_one()


class TestValidateOrderPayload:
    def test_trims_name_and_phone(self):
        order = validate_order_payload({**VALID_ORDER, "name": "  Ada ", "phone": " 0123 "})

        assert order.name == "Ada"
        assert order.phone == "0123"

    @pytest.mark.parametrize(
        "payload",
        [
            {**VALID_ORDER, "items": []},
            {**VALID_ORDER, "items": "lesson"},
            {**VALID_ORDER, "items": None},
            {**VALID_ORDER, "name": ""},
            {**VALID_ORDER, "name": "   "},
            {**VALID_ORDER, "name": 42},
            {**VALID_ORDER, "phone": ""},
            {**VALID_ORDER, "phone": " \t"},
            {"name": "Ada", "phone": "0123"},
            {"items": [1], "phone": "0123"},
            {"items": [1], "name": "Ada"},
            [],
            "order",
            None,
        ],
    )
    def test_rejects_invalid_payloads(self, payload):
        with pytest.raises(InvalidOrderException) as exc_info:
            validate_order_payload(payload)

        assert exc_info.value.message == "Invalid order payload"
        assert exc_info.value.details["errors"]


class TestCreateOrder:
    def test_persists_order_and_returns_id(self, db):
        order_id = OrderService(db).create_order(VALID_ORDER)

        stored = db.get(Order, order_id)
        assert stored.items == VALID_ORDER["items"]
        assert stored.name == "Ada Lovelace"
        assert stored.phone == "07123456789"
        assert stored.extra == {}

    def test_client_timestamp_is_ignored(self, db):
        before = datetime.now(timezone.utc)
        payload = {**VALID_ORDER, "createdAt": "1999-01-01T00:00:00Z", "created_at": "1999"}

        order_id = OrderService(db).create_order(payload)

        stored = db.get(Order, order_id)
        created_at = stored.created_at
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        assert created_at >= before - timedelta(seconds=1)
        assert "createdAt" not in stored.extra
        assert "created_at" not in stored.extra

    def test_long_name_and_phone_are_accepted(self, db):
        payload = {**VALID_ORDER, "name": "A" * 500, "phone": "+44 " + "7" * 200}

        order_id = OrderService(db).create_order(payload)

        stored = db.get(Order, order_id)
        assert stored.name == "A" * 500
        assert stored.phone == payload["phone"]

    def test_extra_fields_are_kept(self, db):
        order_id = OrderService(db).create_order({**VALID_ORDER, "email": "ada@example.com"})

        assert db.get(Order, order_id).extra == {"email": "ada@example.com"}

    @pytest.mark.parametrize(
        "payload",
        [{**VALID_ORDER, "items": []}, {**VALID_ORDER, "name": " "}, {**VALID_ORDER, "phone": ""}],
    )
    def test_invalid_order_persists_nothing(self, db, payload):
        with pytest.raises(InvalidOrderException):
            OrderService(db).create_order(payload)

        assert _order_count(db) == 0

    def test_order_does_not_touch_lesson_spaces(self, db, lesson_factory, read_spaces):
        lesson = lesson_factory(spaces=5)

        OrderService(db).create_order({**VALID_ORDER, "items": [{"lessonId": lesson.id}]})

        assert read_spaces(lesson.id) == 5
