"""Strict response base: responses never leak fields they did not declare."""

from pydantic import BaseModel, ConfigDict


class StrictModel(BaseModel):
    """Base for API responses built explicitly (health, readiness, order receipts)."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True, populate_by_name=True)
