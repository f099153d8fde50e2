"""
Entity normalizer.

Maps raw record store records (suffixed field names such as ``title_c``) to
the canonical view-models used throughout the application, and maps
view-model values back to record fields for writes.

Normalization never raises on missing or malformed optional data: absent
fields default to falsy values (False, "", empty list, None for references).
"""
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any
from urllib.parse import urlparse

from schemas.analytics import UsageEvent
from schemas.bookmark import Bookmark
from schemas.folder import Folder, SharePermission
from schemas.tag import Tag
from schemas.validators import parse_tag_list, serialize_tag_list

DEFAULT_COLOR = "#2563eb"
DEFAULT_FAVICON_SERVICE_URL = "https://www.google.com/s2/favicons?sz=32"

# view-model attribute -> record field
BOOKMARK_FIELDS = {
    "title": "title_c",
    "url": "url_c",
    "description": "description_c",
    "tags": "tags_c",
    "favicon_url": "favicon_c",
    "folder_id": "folder_id_c",
    "date_added": "date_added_c",
    "date_modified": "date_modified_c",
    "is_pinned": "is_pinned_c",
    "is_archived": "is_archived_c",
}

FOLDER_FIELDS = {
    "name": "name_c",
    "color": "color_c",
    "parent_id": "parent_id_c",
    "bookmark_count": "bookmark_count_c",
    "is_shared": "shared_c",
    "shared_with": "shared_with_c",
    "share_permissions": "share_permissions_c",
}

TAG_FIELDS = {
    "name": "name_c",
    "color": "color_c",
    "usage_count": "usage_count_c",
}

USAGE_EVENT_FIELDS = {
    "bookmark_id": "bookmark_id_c",
    "timestamp": "timestamp_c",
    "usage_type": "usage_type_c",
}


# --- Field coercion helpers ---


def unwrap_reference(value: Any) -> int | None:
    """
    Unwrap a reference field to a bare integer id.

    The store returns lookups either as a bare id or as an object such as
    ``{"Id": 3, "Name": "Research"}``.
    """
    if isinstance(value, Mapping):
        value = value.get("Id", value.get("id"))
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC. Invalid values give None."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def format_timestamp(value: datetime) -> str:
    """Format a timestamp as ISO-8601 in UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat()


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"true", "1", "yes"}
    return bool(value)


def _as_str(value: Any) -> str:
    return "" if value is None else str(value)


def _as_count(value: Any) -> int:
    try:
        return max(int(value), 0)
    except (TypeError, ValueError):
        return 0


def _host(url: str) -> str | None:
    try:
        return urlparse(url).hostname
    except ValueError:
        return None


def favicon_url_for(url: str, service_url: str = DEFAULT_FAVICON_SERVICE_URL) -> str | None:
    """
    Derive a favicon URL from the host of ``url``.

    Returns None when the URL has no parseable host.
    """
    host = _host(url)
    if not host:
        return None
    separator = "&" if "?" in service_url else "?"
    return f"{service_url}{separator}domain={host}"


def suggest_title(url: str) -> str | None:
    """Suggest a placeholder title from the URL's host."""
    host = _host(url)
    if not host:
        return None
    return f"Bookmark from {host}"


# --- Record -> view-model ---


def normalize_bookmark(
    record: Mapping[str, Any],
    favicon_service_url: str = DEFAULT_FAVICON_SERVICE_URL,
) -> Bookmark:
    """Normalize a raw bookmark record."""
    url = _as_str(record.get("url_c"))
    favicon = record.get("favicon_c") or favicon_url_for(url, favicon_service_url)
    return Bookmark(
        id=int(record["Id"]),
        url=url,
        title=_as_str(record.get("title_c") or record.get("Name")),
        description=_as_str(record.get("description_c")),
        tags=parse_tag_list(record.get("tags_c")),
        favicon_url=favicon,
        folder_id=unwrap_reference(record.get("folder_id_c")),
        date_added=parse_timestamp(record.get("date_added_c")),
        date_modified=parse_timestamp(record.get("date_modified_c")),
        is_pinned=_as_bool(record.get("is_pinned_c")),
        is_archived=_as_bool(record.get("is_archived_c")),
    )


def normalize_folder(record: Mapping[str, Any]) -> Folder:
    """Normalize a raw folder record."""
    permissions = record.get("share_permissions_c")
    return Folder(
        id=int(record["Id"]),
        name=_as_str(record.get("name_c") or record.get("Name")),
        color=_as_str(record.get("color_c")) or DEFAULT_COLOR,
        parent_id=unwrap_reference(record.get("parent_id_c")),
        bookmark_count=_as_count(record.get("bookmark_count_c")),
        is_shared=_as_bool(record.get("shared_c")),
        shared_with=parse_tag_list(record.get("shared_with_c")),
        share_permissions=(
            SharePermission.EDIT if permissions == SharePermission.EDIT else SharePermission.VIEW
        ),
    )


def normalize_tag(record: Mapping[str, Any]) -> Tag:
    """Normalize a raw tag record."""
    record_id = record.get("Id")
    return Tag(
        id=int(record_id) if record_id is not None else None,
        name=_as_str(record.get("name_c") or record.get("Name")),
        color=_as_str(record.get("color_c")) or DEFAULT_COLOR,
        usage_count=_as_count(record.get("usage_count_c")),
    )


# --- view-model values -> record ---


def _to_record_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, list):
        return serialize_tag_list(value)
    if isinstance(value, SharePermission):
        return value.value
    return value


def _to_record(values: Mapping[str, Any], fields: Mapping[str, str]) -> dict[str, Any]:
    """Translate the attributes present in ``values``; unknown keys are ignored."""
    record: dict[str, Any] = {}
    for attribute, value in values.items():
        if attribute == "id":
            record["Id"] = value
        elif attribute in fields:
            record[fields[attribute]] = _to_record_value(value)
    return record


def to_bookmark_record(values: Mapping[str, Any]) -> dict[str, Any]:
    """Build a (partial) bookmark record; ``Name`` mirrors the title."""
    record = _to_record(values, BOOKMARK_FIELDS)
    if "title" in values:
        record["Name"] = values["title"]
    return record


def to_folder_record(values: Mapping[str, Any]) -> dict[str, Any]:
    """Build a (partial) folder record; ``Name`` mirrors the folder name."""
    record = _to_record(values, FOLDER_FIELDS)
    if "name" in values:
        record["Name"] = values["name"]
    return record


def to_tag_record(values: Mapping[str, Any]) -> dict[str, Any]:
    """Build a (partial) tag record; ``Name`` mirrors the tag name."""
    record = _to_record(values, TAG_FIELDS)
    if "name" in values:
        record["Name"] = values["name"]
    return record


def normalize_usage_event(record: Mapping[str, Any]) -> UsageEvent:
    """
    Normalize a raw analytics record.

    Raises:
        ValueError: If the bookmark reference or timestamp is missing.
    """
    timestamp = parse_timestamp(record.get("timestamp_c"))
    bookmark_id = unwrap_reference(record.get("bookmark_id_c"))
    if timestamp is None or bookmark_id is None:
        raise ValueError(f"Usage event {record.get('Id')} is missing its bookmark or timestamp")
    return UsageEvent(
        id=int(record["Id"]),
        bookmark_id=bookmark_id,
        timestamp=timestamp,
        usage_type=_as_str(record.get("usage_type_c")) or "click",
    )


def to_usage_event_record(values: Mapping[str, Any]) -> dict[str, Any]:
    """Build an analytics record."""
    return _to_record(values, USAGE_EVENT_FIELDS)
