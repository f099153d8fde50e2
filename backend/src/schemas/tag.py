"""Pydantic schemas for tag endpoints."""
from pydantic import BaseModel, Field, field_validator

from core.config import get_settings
from schemas.validators import validate_hex_color, validate_tag_name


class Tag(BaseModel):
    """
    Canonical tag view-model.

    Tags are identified by name (case-sensitive); ``id`` is the store's record id.
    """

    id: int | None = None
    name: str
    color: str
    usage_count: int = 0


class TagCreate(BaseModel):
    """Schema for explicitly creating a tag."""

    name: str
    color: str = Field(default_factory=lambda: get_settings().default_color)

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        """Validate the tag name."""
        return validate_tag_name(v)

    @field_validator("color")
    @classmethod
    def check_color(cls, v: str) -> str:
        """Validate the tag color."""
        return validate_hex_color(v)


class TagListResponse(BaseModel):
    """Schema for the tags list response."""

    tags: list[Tag]


class TagReconcileResponse(BaseModel):
    """Summary of a tag usage reconciliation."""

    created: list[str]
    updated: list[str]
    removed: list[str]
