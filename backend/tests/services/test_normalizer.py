"""Tests for mapping raw store records to view-models and back."""
from datetime import UTC, datetime

import pytest

from schemas.folder import SharePermission
from services.normalizer import (
    favicon_url_for,
    normalize_bookmark,
    normalize_folder,
    normalize_tag,
    normalize_usage_event,
    parse_timestamp,
    suggest_title,
    to_bookmark_record,
    to_folder_record,
    unwrap_reference,
)

# =============================================================================
# Field helpers
# =============================================================================


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (3, 3),
        ("7", 7),
        ({"Id": 3, "Name": "Research"}, 3),
        ({"Name": "no id"}, None),
        (None, None),
        ("", None),
        ("abc", None),
        (True, None),
    ],
)
def test__unwrap_reference(raw: object, expected: int | None) -> None:
    assert unwrap_reference(raw) == expected


def test__parse_timestamp__naive_is_utc() -> None:
    assert parse_timestamp("2024-01-15T10:30:00") == datetime(2024, 1, 15, 10, 30, tzinfo=UTC)


def test__parse_timestamp__zulu_and_invalid() -> None:
    assert parse_timestamp("2024-01-15T10:30:00Z") == datetime(2024, 1, 15, 10, 30, tzinfo=UTC)
    assert parse_timestamp("yesterday") is None
    assert parse_timestamp(None) is None


def test__favicon_url_for__derives_from_host() -> None:
    assert favicon_url_for("https://news.example.com/a?b=1") == (
        "https://www.google.com/s2/favicons?sz=32&domain=news.example.com"
    )
    assert favicon_url_for("https://example.com", "https://icons.test/") == (
        "https://icons.test/?domain=example.com"
    )


@pytest.mark.parametrize("url", ["", "not a url", "http://[::1"])
def test__favicon_url_for__unparseable_is_none(url: str) -> None:
    assert favicon_url_for(url) is None


def test__suggest_title() -> None:
    assert suggest_title("https://docs.python.org/3/") == "Bookmark from docs.python.org"
    assert suggest_title("nonsense") is None


# =============================================================================
# Record -> view-model
# =============================================================================


def test__normalize_bookmark__full_record() -> None:
    bookmark = normalize_bookmark({
        "Id": 4,
        "Name": "Example",
        "title_c": "Example",
        "url_c": "https://example.com",
        "description_c": "desc",
        "tags_c": "ai, news",
        "favicon_c": "https://icons.test/e.png",
        "folder_id_c": {"Id": 2, "Name": "Research"},
        "date_added_c": "2024-01-15T10:30:00Z",
        "date_modified_c": "2024-01-16T10:30:00Z",
        "is_pinned_c": True,
        "is_archived_c": False,
    })

    assert bookmark.id == 4
    assert bookmark.tags == ["ai", "news"]
    assert bookmark.folder_id == 2
    assert bookmark.favicon_url == "https://icons.test/e.png"
    assert bookmark.date_added == datetime(2024, 1, 15, 10, 30, tzinfo=UTC)
    assert bookmark.is_pinned is True


def test__normalize_bookmark__missing_optional_fields_default_falsy() -> None:
    bookmark = normalize_bookmark({"Id": 1, "url_c": "https://example.com"})

    assert bookmark.title == ""
    assert bookmark.description == ""
    assert bookmark.tags == []
    assert bookmark.folder_id is None
    assert bookmark.date_added is None
    assert bookmark.is_pinned is False
    assert bookmark.is_archived is False
    assert bookmark.favicon_url is not None


def test__normalize_bookmark__title_falls_back_to_name() -> None:
    assert normalize_bookmark({"Id": 1, "Name": "From Name"}).title == "From Name"


def test__normalize_bookmark__bad_url_gives_no_favicon() -> None:
    bookmark = normalize_bookmark({"Id": 1, "url_c": "garbage"})
    assert bookmark.favicon_url is None


def test__normalize_bookmark__string_flags() -> None:
    bookmark = normalize_bookmark({"Id": 1, "is_pinned_c": "true", "is_archived_c": "false"})
    assert bookmark.is_pinned is True
    assert bookmark.is_archived is False


def test__normalize_folder__defaults() -> None:
    folder = normalize_folder({"Id": 2, "Name": "Research"})

    assert folder.name == "Research"
    assert folder.color == "#2563eb"
    assert folder.parent_id is None
    assert folder.bookmark_count == 0
    assert folder.is_shared is False
    assert folder.shared_with == []
    assert folder.share_permissions == SharePermission.VIEW


def test__normalize_folder__sharing_fields() -> None:
    folder = normalize_folder({
        "Id": 2,
        "name_c": "Research",
        "shared_c": True,
        "shared_with_c": "a@example.com,b@example.com",
        "share_permissions_c": "edit",
        "bookmark_count_c": "3",
    })

    assert folder.is_shared is True
    assert folder.shared_with == ["a@example.com", "b@example.com"]
    assert folder.share_permissions == SharePermission.EDIT
    assert folder.bookmark_count == 3


def test__normalize_tag__negative_count_clamped() -> None:
    tag = normalize_tag({"Id": 1, "name_c": "ai", "usage_count_c": -2})
    assert tag.usage_count == 0


def test__normalize_usage_event__requires_timestamp() -> None:
    with pytest.raises(ValueError):
        normalize_usage_event({"Id": 1, "bookmark_id_c": 2, "timestamp_c": "never"})


# =============================================================================
# view-model -> record
# =============================================================================


def test__to_bookmark_record__only_present_keys() -> None:
    record = to_bookmark_record({"is_pinned": True})
    assert record == {"is_pinned_c": True}


def test__to_bookmark_record__serializes_values() -> None:
    record = to_bookmark_record({
        "id": 3,
        "title": "Example",
        "tags": ["ai", "news"],
        "date_added": datetime(2024, 1, 15, 10, 30, tzinfo=UTC),
        "unknown": "ignored",
    })

    assert record == {
        "Id": 3,
        "Name": "Example",
        "title_c": "Example",
        "tags_c": "ai,news",
        "date_added_c": "2024-01-15T10:30:00+00:00",
    }


def test__to_folder_record__permission_enum_to_value() -> None:
    record = to_folder_record({"share_permissions": SharePermission.EDIT, "shared_with": []})
    assert record == {"share_permissions_c": "edit", "shared_with_c": ""}


def test__bookmark__normalize_round_trip_through_record() -> None:
    original = normalize_bookmark({
        "Id": 9,
        "title_c": "Example",
        "url_c": "https://example.com",
        "tags_c": "ai,news",
        "folder_id_c": 2,
        "date_added_c": "2024-01-15T10:30:00+00:00",
    })
    again = normalize_bookmark(to_bookmark_record(original.model_dump()))
    assert again == original
