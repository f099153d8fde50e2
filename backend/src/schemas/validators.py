"""
Shared validation functions for Pydantic schemas.

This module contains validators used across the bookmark, folder, tag and
sharing schemas. Each validator raises ``ValueError`` with a user-facing
message; the service layer turns those into field-level validation errors.
"""
import re
from urllib.parse import urlparse

from pydantic import ValidationInfo

from core.config import Settings, get_settings

# Hex color: #rgb or #rrggbb
HEX_COLOR_PATTERN = re.compile(r"^#(?:[0-9a-fA-F]{3}){1,2}$")

# Deliberately loose: something@something.tld with no whitespace
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def context_settings(info: ValidationInfo) -> Settings | None:
    """
    Settings passed as validation context, if any.

    Services validate with ``context={"settings": ...}`` so that length limits
    follow the injected settings; without a context the cached application
    settings apply.
    """
    context = info.context
    if isinstance(context, dict):
        return context.get("settings")
    return None


def parse_tag_list(value: str | list[str] | None) -> list[str]:
    """
    Parse a tag list from a comma-separated string or a list of names.

    Segments are trimmed, empty segments are discarded and duplicates are
    removed (preserving first occurrence order). Case is preserved: tag
    identity is case-sensitive.
    """
    if value is None:
        return []
    segments = value.split(",") if isinstance(value, str) else value
    tags: list[str] = []
    seen: set[str] = set()
    for segment in segments:
        if not isinstance(segment, str):
            raise ValueError("Tag names must be strings")
        name = segment.strip()
        if name and name not in seen:
            seen.add(name)
            tags.append(name)
    return tags


def serialize_tag_list(tags: list[str]) -> str:
    """Join tag names into the comma-separated storage form."""
    return ",".join(tags)


def validate_absolute_url(url: str) -> str:
    """
    Validate that a URL is absolute (has a scheme and a host).

    Returns:
        The trimmed URL, otherwise unchanged.

    Raises:
        ValueError: If the URL is empty or not absolute.
    """
    trimmed = url.strip()
    if not trimmed:
        raise ValueError("URL is required")
    try:
        parsed = urlparse(trimmed)
    except ValueError as e:
        raise ValueError("Please enter a valid URL") from e
    if not parsed.scheme or not parsed.netloc:
        raise ValueError("Please enter a valid URL")
    return trimmed


def validate_title(title: str, settings: Settings | None = None) -> str:
    """Validate that a title is non-empty and within the length limit."""
    trimmed = title.strip()
    if not trimmed:
        raise ValueError("Title is required")
    settings = settings or get_settings()
    if len(trimmed) > settings.max_title_length:
        raise ValueError(
            f"Title exceeds maximum length of {settings.max_title_length:,} characters "
            f"(got {len(trimmed):,} characters).",
        )
    return trimmed


def validate_description_length(
    description: str | None, settings: Settings | None = None,
) -> str:
    """Validate that description doesn't exceed maximum length; None becomes ''."""
    if description is None:
        return ""
    settings = settings or get_settings()
    trimmed = description.strip()
    if len(trimmed) > settings.max_description_length:
        max_len = settings.max_description_length
        raise ValueError(
            f"Description exceeds maximum length of {max_len:,} characters "
            f"(got {len(trimmed):,} characters).",
        )
    return trimmed


def validate_folder_name(name: str, settings: Settings | None = None) -> str:
    """Validate that a folder name is non-empty and within the length limit."""
    trimmed = name.strip()
    if not trimmed:
        raise ValueError("Folder name is required")
    settings = settings or get_settings()
    if len(trimmed) > settings.max_folder_name_length:
        raise ValueError(
            f"Folder name exceeds maximum length of {settings.max_folder_name_length} characters "
            f"(got {len(trimmed)} characters).",
        )
    return trimmed


def validate_tag_name(name: str) -> str:
    """Validate a single tag name (trimmed, non-empty, no commas)."""
    trimmed = name.strip()
    if not trimmed:
        raise ValueError("Tag name cannot be empty")
    if "," in trimmed:
        raise ValueError(f"Invalid tag name: '{trimmed}'. Tag names cannot contain commas.")
    return trimmed


def validate_hex_color(color: str) -> str:
    """Validate a #rgb / #rrggbb color string."""
    trimmed = color.strip()
    if not HEX_COLOR_PATTERN.match(trimmed):
        raise ValueError(f"Invalid color: '{trimmed}'. Use a hex color such as '#2563eb'.")
    return trimmed


def normalize_recipients(recipients: list[str]) -> list[str]:
    """
    Normalize and validate a list of recipient email addresses.

    Addresses are trimmed and lowercased; blanks are skipped and duplicates
    removed (preserving first occurrence order).

    Raises:
        ValueError: If any address is malformed.
    """
    normalized: list[str] = []
    seen: set[str] = set()
    for recipient in recipients:
        email = recipient.strip().lower()
        if not email:
            continue
        if not EMAIL_PATTERN.match(email):
            raise ValueError(f"Invalid email address: '{email}'")
        if email not in seen:
            seen.add(email)
            normalized.append(email)
    return normalized
