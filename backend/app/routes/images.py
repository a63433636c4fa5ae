# backend/app/routes/images.py
"""
Lesson images served from ``settings.images_dir``.

Missing files (or a missing directory) answer 404 "Image not found".
"""

import logging
from pathlib import Path

from fastapi import APIRouter, FastAPI, HTTPException, status
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response
from starlette.staticfiles import StaticFiles
from starlette.types import Scope

logger = logging.getLogger(__name__)

IMAGES_PATH = "/images"
IMAGE_NOT_FOUND = "Image not found"

fallback_router = APIRouter(tags=["images"])


class ImageFiles(StaticFiles):
    """StaticFiles that reports misses with the catalog's own message."""

    async def get_response(self, path: str, scope: Scope) -> Response:
        try:
            return await super().get_response(path, scope)
        except StarletteHTTPException as exc:
            if exc.status_code == status.HTTP_404_NOT_FOUND:
                raise StarletteHTTPException(status_code=404, detail=IMAGE_NOT_FOUND) from exc
            raise


@fallback_router.get("/images/{file_path:path}", include_in_schema=False)
async def image_not_found(file_path: str) -> None:
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=IMAGE_NOT_FOUND)


def mount_images(app: FastAPI, images_dir: Path) -> None:
    """Serve ``images_dir`` under /images, or answer 404 for every image if it is absent."""
    if images_dir.is_dir():
        app.mount(IMAGES_PATH, ImageFiles(directory=images_dir), name="images")
        logger.info("Serving images from %s", images_dir)
    else:
        logger.warning("Images directory %s not found; /images will answer 404", images_dir)
        app.include_router(fallback_router)
