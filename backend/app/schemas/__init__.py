# backend/app/schemas/__init__.py
"""
Pydantic schemas for the LessonHub API.

Request and response DTOs only. Persistence models live in app.models.
"""

from ._strict_base import StrictModel
from .lesson import LessonResponse, SpacesAdjustRequest
from .main_responses import HealthResponse, ReadyProbeResponse, RootResponse
from .order import OrderCreate, OrderCreatedResponse

__all__ = [
    "StrictModel",
    "LessonResponse",
    "SpacesAdjustRequest",
    "OrderCreate",
    "OrderCreatedResponse",
    "HealthResponse",
    "ReadyProbeResponse",
    "RootResponse",
]
