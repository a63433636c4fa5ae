"""Order request/response schemas."""

from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field

from ._strict_base import StrictModel

# Creation time is always server-assigned.
CLIENT_TIMESTAMP_FIELDS = frozenset({"createdAt", "created_at"})


class OrderCreate(BaseModel):
    """
    Incoming order.

    ``items`` are opaque line items and are not checked against the catalog.
    Unknown fields are accepted and kept alongside the order.
    """

    model_config = ConfigDict(extra="allow", str_strip_whitespace=True)

    items: List[Any] = Field(..., min_length=1, description="Ordered line items")
    name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)


class OrderCreatedResponse(StrictModel):
    ok: bool = True
    order_id: str = Field(serialization_alias="orderId", description="ULID of the new order")
