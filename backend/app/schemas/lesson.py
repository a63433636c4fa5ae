"""Lesson catalog schemas."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field


class LessonResponse(BaseModel):
    """A catalog entry as rendered to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    subject: str
    location: str
    description: str = ""
    price: float
    spaces: int
    image: Optional[str] = None

    @computed_field(alias="_id")  # type: ignore[prop-decorator]
    @property
    def legacy_id(self) -> str:
        """Same value as ``id``; kept for clients written against ``_id``."""
        return self.id


class SpacesAdjustRequest(BaseModel):
    """Body of PUT /lessons/{id}. The delta is validated by the inventory service."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    spaces_delta: Any = Field(
        default=None,
        alias="spacesDelta",
        description="Signed integer change to apply to the lesson's spaces",
        examples=[-1],
    )
