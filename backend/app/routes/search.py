# backend/app/routes/search.py
"""Free-text lesson search."""

import asyncio
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from ..api.dependencies.services import get_catalog_service
from ..schemas.lesson import LessonResponse
from ..services.catalog_service import CatalogService

router = APIRouter(tags=["lessons"])


@router.get("/search", response_model=List[LessonResponse])
async def search_lessons(
    q: Optional[str] = Query(
        None,
        description="A number matches price or spaces exactly; text matches subject, "
        "location or description (case-insensitive substring)",
    ),
    catalog_service: CatalogService = Depends(get_catalog_service),
) -> List[LessonResponse]:
    lessons = await asyncio.to_thread(catalog_service.search_lessons, q)
    return [LessonResponse.model_validate(lesson) for lesson in lessons]
