"""Pydantic schemas for bookmark endpoints."""
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from schemas.folder import FolderCreate
from schemas.validators import (
    context_settings,
    parse_tag_list,
    validate_absolute_url,
    validate_description_length,
    validate_tag_name,
    validate_title,
)


def _normalize_tags(v: Any) -> list[str]:
    """Accept a list or a comma-separated string; validate each name."""
    return [validate_tag_name(name) for name in parse_tag_list(v)]


def _empty_to_none(v: Any) -> Any:
    """Forms submit an empty string when no folder is selected."""
    if v == "":
        return None
    return v


class Bookmark(BaseModel):
    """
    Canonical bookmark view-model.

    Produced by the entity normalizer from raw store records. Optional fields
    are always present, defaulting to falsy values.
    """

    id: int
    url: str
    title: str
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    favicon_url: str | None = None
    folder_id: int | None = None
    date_added: datetime | None = None
    date_modified: datetime | None = None
    is_pinned: bool = False
    is_archived: bool = False


class BookmarkCreate(BaseModel):
    """
    Schema for creating a new bookmark.

    ``new_folder`` requests inline folder creation: the folder is created first
    and the bookmark is filed into it. Timestamps are always assigned by the
    service; caller-supplied values are ignored.
    """

    url: str
    title: str
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    folder_id: int | None = None
    is_pinned: bool = False
    is_archived: bool = False
    new_folder: FolderCreate | None = None

    @field_validator("url")
    @classmethod
    def check_url(cls, v: str) -> str:
        """Validate the URL is absolute."""
        return validate_absolute_url(v)

    @field_validator("title")
    @classmethod
    def check_title(cls, v: str, info: ValidationInfo) -> str:
        """Validate the title is present and within length."""
        return validate_title(v, context_settings(info))

    @field_validator("description", mode="before")
    @classmethod
    def check_description_length(cls, v: str | None, info: ValidationInfo) -> str:
        """Validate description length."""
        return validate_description_length(v, context_settings(info))

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tags(cls, v: Any) -> list[str]:
        """Normalize and validate tags."""
        return _normalize_tags(v)

    @field_validator("folder_id", mode="before")
    @classmethod
    def blank_folder_id(cls, v: Any) -> Any:
        """Treat an empty folder selection as no folder."""
        return _empty_to_none(v)


class BookmarkUpdate(BaseModel):
    """
    Schema for updating an existing bookmark.

    Omitted fields are left unchanged. ``folder_id`` may be set to null to
    remove the bookmark from its folder.
    """

    url: str | None = None
    title: str | None = None
    description: str | None = None
    tags: list[str] | None = None
    folder_id: int | None = None
    is_pinned: bool | None = None
    is_archived: bool | None = None
    new_folder: FolderCreate | None = None

    @field_validator("url")
    @classmethod
    def check_url(cls, v: str | None) -> str | None:
        """Validate the URL if provided."""
        if v is None:
            return None
        return validate_absolute_url(v)

    @field_validator("title")
    @classmethod
    def check_title(cls, v: str | None, info: ValidationInfo) -> str | None:
        """Validate the title if provided."""
        if v is None:
            return None
        return validate_title(v, context_settings(info))

    @field_validator("description", mode="before")
    @classmethod
    def check_description_length(cls, v: str | None, info: ValidationInfo) -> str | None:
        """Validate description length if provided."""
        if v is None:
            return None
        return validate_description_length(v, context_settings(info))

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tags(cls, v: Any) -> list[str] | None:
        """Normalize and validate tags if provided."""
        if v is None:
            return None
        return _normalize_tags(v)

    @field_validator("folder_id", mode="before")
    @classmethod
    def blank_folder_id(cls, v: Any) -> Any:
        """Treat an empty folder selection as no folder."""
        return _empty_to_none(v)


class BookmarkListResponse(BaseModel):
    """Schema for bookmark list responses."""

    items: list[Bookmark]
    total: int


class BookmarkCounts(BaseModel):
    """Derived bookmark counts shown in the sidebar."""

    total: int
    recent: int
    pinned: int
    archived: int


class TitleSuggestion(BaseModel):
    """Suggested title derived from a URL."""

    url: str
    title: str


class DescriptionRequest(BaseModel):
    """Schema for requesting a generated description."""

    title: str


class GeneratedDescription(BaseModel):
    """Description generated from a bookmark title."""

    title: str
    description: str
