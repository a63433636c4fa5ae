# backend/app/routes/orders.py
"""
Order intake routes.

Placing an order does not reserve spaces; clients adjust each lesson
through PUT /lessons/{lesson_id}.
"""

import asyncio
from typing import Any

from fastapi import APIRouter, Body, Depends

from ..api.dependencies.services import get_order_service
from ..schemas.order import OrderCreatedResponse
from ..services.order_service import OrderService

router = APIRouter(tags=["orders"])


@router.post(
    "/orders",
    response_model=OrderCreatedResponse,
    responses={400: {"description": "Invalid order payload"}},
)
async def create_order(
    payload: Any = Body(
        None,
        examples=[{"items": [{"lessonId": "01J...", "qty": 1}], "name": "Ada", "phone": "0123"}],
    ),
    order_service: OrderService = Depends(get_order_service),
) -> OrderCreatedResponse:
    """Record an order. Requires a non-empty ``items`` list and non-blank ``name`` and ``phone``."""
    order_id = await asyncio.to_thread(order_service.create_order, payload)
    return OrderCreatedResponse(order_id=order_id)
