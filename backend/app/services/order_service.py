# backend/app/services/order_service.py
"""
Order Service for LessonHub

Validates and records customer orders. Recording an order does not touch
lesson capacity: clients call PUT /lessons/{id} for each booked lesson.
"""

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session

from ..core.exceptions import InvalidOrderException
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.order_repository import OrderRepository
from ..schemas.order import CLIENT_TIMESTAMP_FIELDS, OrderCreate
from .base import BaseService


def validate_order_payload(payload: Any) -> OrderCreate:
    """
    Validate a raw order payload.

    Raises:
        InvalidOrderException: If the payload is not an object, or items is
            empty, or name/phone is blank
    """
    if not isinstance(payload, Mapping):
        raise InvalidOrderException([{"loc": [], "msg": "Order payload must be a JSON object"}])
    try:
        return OrderCreate.model_validate(dict(payload))
    except ValidationError as exc:
        errors = [
            {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
            for err in exc.errors(include_url=False)
        ]
        raise InvalidOrderException(errors) from exc


class OrderService(BaseService):
    """Service for order intake."""

    def __init__(self, db: Session, order_repository: Optional[OrderRepository] = None):
        super().__init__(db)
        self.order_repository = order_repository or OrderRepository(db)

    @BaseService.measure_operation("create_order")
    def create_order(self, payload: Any) -> str:
        """
        Validate and persist an order.

        Args:
            payload: Decoded JSON body

        Returns:
            The new order's id

        Raises:
            InvalidOrderException: Nothing is persisted
        """
        order_in = validate_order_payload(payload)
        extra = {
            key: value
            for key, value in (order_in.model_extra or {}).items()
            if key not in CLIENT_TIMESTAMP_FIELDS
        }

        with self.transaction():
            order = self.order_repository.insert(
                items=order_in.items,
                name=order_in.name,
                phone=order_in.phone,
                created_at=datetime.now(timezone.utc),
                extra=extra,
            )
            order_id = order.id

        prometheus_metrics.record_order_created()
        self.log_operation("create_order", order_id=order_id, item_count=len(order_in.items))
        return order_id
