# backend/app/routes/health.py
"""
Health check endpoints for the application.

/health is a liveness check that never touches the store; /ready reports
whether the store answers.
"""

import asyncio
from datetime import datetime, timezone
import logging

from fastapi import APIRouter, Request, Response, status
from sqlalchemy.exc import SQLAlchemyError

from ..core.config import settings
from ..core.constants import API_TITLE, API_VERSION
from ..schemas.main_responses import HealthResponse, ReadyProbeResponse

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
def health_check(response: Response) -> HealthResponse:
    response.headers["Cache-Control"] = "no-store"
    return HealthResponse(
        status="healthy",
        service=API_TITLE,
        version=API_VERSION,
        environment=settings.environment,
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    )


@router.get("/ready", response_model=ReadyProbeResponse)
async def ready_probe(request: Request, response_obj: Response) -> ReadyProbeResponse:
    database = getattr(request.app.state, "database", None)
    if database is None or not database.is_connected:
        response_obj.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return ReadyProbeResponse(status="db_not_ready")

    try:
        await asyncio.to_thread(database.ping)
    except SQLAlchemyError as exc:
        logger.warning("Readiness ping failed: %s", exc)
        response_obj.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        return ReadyProbeResponse(status="db_not_ready")

    return ReadyProbeResponse(status="ok")
