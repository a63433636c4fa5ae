# backend/app/models/order.py
"""Order persistence model. Orders are written once and never updated."""

from __future__ import annotations

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.types import JSON
import ulid

from ..database import Base


class Order(Base):
    """A customer's request to consume one or more catalog lessons."""

    __tablename__ = "orders"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    # Caller-supplied line items; not checked against the catalog.
    items = Column(JSON, nullable=False)
    name = Column(Text, nullable=False)
    phone = Column(Text, nullable=False)
    extra = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return f"<Order {self.id} items={len(self.items or [])}>"
