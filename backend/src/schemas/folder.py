"""Pydantic schemas for folder and folder-sharing endpoints."""
from enum import StrEnum

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from core.config import get_settings
from schemas.validators import (
    context_settings,
    normalize_recipients,
    validate_folder_name,
    validate_hex_color,
)


class SharePermission(StrEnum):
    """Access level granted to recipients of a shared folder."""

    VIEW = "view"
    EDIT = "edit"


def _default_color() -> str:
    return get_settings().default_color


class Folder(BaseModel):
    """
    Canonical folder view-model.

    ``bookmark_count`` is a cached value and is not authoritative; use the
    aggregate helpers to derive it from the bookmark list.
    """

    id: int
    name: str
    color: str
    parent_id: int | None = None
    bookmark_count: int = 0
    is_shared: bool = False
    shared_with: list[str] = Field(default_factory=list)
    share_permissions: SharePermission = SharePermission.VIEW


class FolderCreate(BaseModel):
    """Schema for creating a folder. Any caller-supplied bookmark count is ignored."""

    name: str
    color: str = Field(default_factory=_default_color)
    parent_id: int | None = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str, info: ValidationInfo) -> str:
        """Validate the folder name."""
        return validate_folder_name(v, context_settings(info))

    @field_validator("color", mode="before")
    @classmethod
    def check_color(cls, v: str | None) -> str:
        """Fall back to the default color when omitted; validate otherwise."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return _default_color()
        return validate_hex_color(v)


class FolderUpdate(BaseModel):
    """
    Schema for updating a folder.

    Omit ``parent_id`` to leave it unchanged; set it to null to move the folder
    to the top level.
    """

    name: str | None = None
    color: str | None = None
    parent_id: int | None = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str | None, info: ValidationInfo) -> str | None:
        """Validate the folder name if provided."""
        if v is None:
            return None
        return validate_folder_name(v, context_settings(info))

    @field_validator("color")
    @classmethod
    def check_color(cls, v: str | None) -> str | None:
        """Validate the color if provided."""
        if v is None:
            return None
        return validate_hex_color(v)


class FolderListResponse(BaseModel):
    """Schema for folder list responses."""

    items: list[Folder]


class ShareFolderRequest(BaseModel):
    """Schema for sharing a folder with one or more recipients."""

    recipients: list[str]
    permissions: SharePermission = SharePermission.VIEW

    @field_validator("recipients")
    @classmethod
    def check_recipients(cls, v: list[str]) -> list[str]:
        """Normalize recipient emails and require at least one."""
        normalized = normalize_recipients(v)
        if not normalized:
            raise ValueError("At least one recipient is required")
        return normalized


class SharePermissionsUpdate(BaseModel):
    """Schema for changing the permission level of a shared folder."""

    permissions: SharePermission


class ShareLinkResponse(BaseModel):
    """Shareable link for a folder."""

    folder_id: int
    token: str
    url: str
