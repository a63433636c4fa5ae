"""Order Repository for LessonHub. Orders are append-only."""

from datetime import datetime
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from ..models.order import Order
from .base_repository import BaseRepository


class OrderRepository(BaseRepository[Order]):
    def __init__(self, db: Session):
        super().__init__(db, Order)

    def insert(
        self,
        *,
        items: List[Any],
        name: str,
        phone: str,
        created_at: datetime,
        extra: Dict[str, Any],
    ) -> Order:
        """Persist a new order and return it with its generated id."""
        return self.create(items=items, name=name, phone=phone, created_at=created_at, extra=extra)
