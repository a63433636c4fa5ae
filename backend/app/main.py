# backend/app/main.py
"""
LessonHub API application.

Builds the FastAPI app: logging, the store lifespan, middleware, error
handlers and routers. ``app`` at module level is what uvicorn serves.
"""

import asyncio
from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import Settings, is_running_tests, settings
from .core.constants import API_DESCRIPTION, API_TITLE, API_VERSION, BRAND_NAME
from .database import Database
from .errors import register_error_handlers
from .middleware.timing_asgi import TimingMiddlewareASGI
from .routes import health, lessons, orders, prometheus, search
from .routes.images import mount_images
from .schemas.main_responses import RootResponse

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(
    app_settings: Optional[Settings] = None, database: Optional[Database] = None
) -> FastAPI:
    """
    Build the application.

    Args:
        app_settings: Settings to run with (defaults to the process settings)
        database: Pre-built store handle; one is created from settings if omitted.
            Either way the lifespan owns connecting and disposing it.
    """
    runtime_settings = app_settings or settings

    @asynccontextmanager
    async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Connect the store on startup and dispose it on shutdown."""
        logger.info(f"{BRAND_NAME} API starting up...")
        logger.info(f"Environment: {runtime_settings.environment}")
        if is_running_tests():
            logger.info("Running under pytest (test mode active)")

        store = database or Database(runtime_settings)
        if not store.is_connected:
            # A store that cannot be reached is fatal; the process should not serve.
            await asyncio.to_thread(store.connect)
        app.state.database = store
        logger.info(f"Allowed origins: {runtime_settings.allowed_origins}")

        yield

        logger.info(f"{BRAND_NAME} API shutting down...")
        app.state.database = None
        await asyncio.to_thread(store.dispose)

    app = FastAPI(
        title=API_TITLE,
        description=API_DESCRIPTION,
        version=API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=app_lifespan,
    )
    app.state.database = None
    app.state.settings = runtime_settings

    register_error_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=runtime_settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "HEAD", "OPTIONS", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
    )
    # Outermost, so the access line carries the final status code.
    app.add_middleware(TimingMiddlewareASGI)

    app.include_router(lessons.router)
    app.include_router(search.router)
    app.include_router(orders.router)
    app.include_router(health.router)
    app.include_router(prometheus.router)
    mount_images(app, runtime_settings.images_dir)

    @app.get("/", response_model=RootResponse, include_in_schema=False)
    def read_root() -> RootResponse:
        return RootResponse(
            message=f"Welcome to the {API_TITLE}",
            version=API_VERSION,
            docs="/docs",
            environment=runtime_settings.environment,
        )

    return app


app = create_app()
