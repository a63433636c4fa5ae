# backend/app/core/config.py
import logging
import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import (
    ALLOWED_ORIGINS,
    DEFAULT_SPACES_UPDATE_MAX_ATTEMPTS,
    MAX_SPACES_UPDATE_MAX_ATTEMPTS,
)


def is_running_tests() -> bool:
    """
    Detect if code is running under pytest.

    PYTEST_CURRENT_TEST is set automatically by pytest during test runs, and is
    not expected to be present in production environments.
    """
    return os.getenv("PYTEST_CURRENT_TEST") is not None


_BACKEND_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_IMAGES_DIR = _BACKEND_ROOT / "public" / "images"

logger = logging.getLogger(__name__)

# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = _BACKEND_ROOT / ".env"
    logger.info(f"[CONFIG] Looking for .env at: {env_path}")
    load_dotenv(env_path)


PROD_SITE_MODES = {"prod", "production", "live"}


def _classify_environment(raw_site_mode: str | None) -> str:
    normalized = (raw_site_mode or "").strip().lower()
    return "production" if normalized in PROD_SITE_MODES else "development"


class Settings(BaseSettings):
    # Database
    database_url: str = Field(
        default="sqlite:///./lessons.db",
        description="SQLAlchemy URL of the catalog/order store",
    )
    db_pool_size: int = Field(default=5, ge=1)
    db_max_overflow: int = Field(default=10, ge=0)
    db_pool_timeout: int = Field(default=10, ge=1, description="Seconds to wait for a connection")
    db_statement_timeout_ms: int = Field(
        default=15000, ge=0, description="PostgreSQL statement_timeout (0 disables)"
    )
    db_create_tables: bool = Field(
        default=True, description="Create missing tables at startup (no migrations)"
    )

    # Inventory
    spaces_update_max_attempts: int = Field(
        default=DEFAULT_SPACES_UPDATE_MAX_ATTEMPTS,
        description="Attempt budget for the conditional spaces update",
    )

    # HTTP
    port: int = 3000
    cors_allow_origins: str = Field(default="", description="Comma-separated CORS allowlist")
    images_dir: Path = Field(default=DEFAULT_IMAGES_DIR)

    # Environment (derived from SITE_MODE)
    environment: str = _classify_environment(os.getenv("SITE_MODE", "local"))
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("spaces_update_max_attempts")
    @classmethod
    def _validate_attempts(cls, value: int) -> int:
        if value < 1 or value > MAX_SPACES_UPDATE_MAX_ATTEMPTS:
            raise ValueError(
                f"SPACES_UPDATE_MAX_ATTEMPTS must be between 1 and {MAX_SPACES_UPDATE_MAX_ATTEMPTS}"
            )
        return value

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = (value or "INFO").strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown LOG_LEVEL: {value}")
        return level

    @property
    def allowed_origins(self) -> List[str]:
        configured = [o.strip() for o in self.cors_allow_origins.split(",") if o.strip()]
        return configured or list(ALLOWED_ORIGINS)

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    def get_database_url(self) -> str:
        """Return the configured store URL (normalizes legacy postgres:// scheme)."""
        url = self.database_url.strip()
        if url.startswith("postgres://"):
            url = "postgresql://" + url[len("postgres://") :]
        return url


settings = Settings()
