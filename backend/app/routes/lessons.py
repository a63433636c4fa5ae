# backend/app/routes/lessons.py
"""
Lesson catalog routes.

Endpoints:
    GET /lessons                → Full catalog
    PUT /lessons/{lesson_id}    → Atomically adjust a lesson's spaces
"""

import asyncio
from typing import List

from fastapi import APIRouter, Body, Depends

from ..api.dependencies.services import get_catalog_service, get_inventory_service
from ..schemas.lesson import LessonResponse, SpacesAdjustRequest
from ..services.catalog_service import CatalogService
from ..services.inventory_service import InventoryService

router = APIRouter(tags=["lessons"])


@router.get("/lessons", response_model=List[LessonResponse])
async def list_lessons(
    catalog_service: CatalogService = Depends(get_catalog_service),
) -> List[LessonResponse]:
    """Return every lesson in the catalog."""
    lessons = await asyncio.to_thread(catalog_service.list_lessons)
    return [LessonResponse.model_validate(lesson) for lesson in lessons]


@router.put(
    "/lessons/{lesson_id}",
    response_model=LessonResponse,
    responses={
        400: {"description": "spacesDelta is not an integer, or too few spaces remain"},
        404: {"description": "Lesson not found"},
        503: {"description": "Store unavailable or too many concurrent updates"},
    },
)
async def adjust_lesson_spaces(
    lesson_id: str,
    body: SpacesAdjustRequest = Body(...),
    inventory_service: InventoryService = Depends(get_inventory_service),
) -> LessonResponse:
    """
    Add ``spacesDelta`` to the lesson's spaces.

    Negative deltas book spaces, positive deltas release them. The change
    is applied only if spaces stays non-negative; the updated lesson is
    returned.
    """
    lesson = await asyncio.to_thread(
        inventory_service.adjust_spaces, lesson_id, body.spaces_delta
    )
    return LessonResponse.model_validate(lesson)
