"""Application-wide constants for the lesson catalog API."""

from __future__ import annotations

import os

BRAND_NAME = "LessonHub"
API_TITLE = f"{BRAND_NAME} API"
API_VERSION = "1.0.0"
API_DESCRIPTION = "Lesson catalog, availability and order intake API"

# Spaces adjustment
DEFAULT_SPACES_UPDATE_MAX_ATTEMPTS = 5
MAX_SPACES_UPDATE_MAX_ATTEMPTS = 50
# Largest |spacesDelta| accepted; keeps the value inside a 32-bit INTEGER column
MAX_SPACES_DELTA = 2_147_483_647

# Text constraints
MAX_SUBJECT_LENGTH = 120
MAX_LOCATION_LENGTH = 120

# Frontend URLs
DEFAULT_DEV_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://localhost:8080",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
    "http://127.0.0.1:8080",
]


def _split_env(name: str) -> list[str]:
    value = os.getenv(name, "")
    return [origin.strip() for origin in value.split(",") if origin.strip()]


ALLOWED_ORIGINS = (
    _split_env("ALLOWED_ORIGINS") or _split_env("CORS_ALLOW_ORIGINS") or DEFAULT_DEV_ORIGINS
)
