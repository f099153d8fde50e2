"""Tests for tag service layer functionality."""
import pytest

from records.local_client import LocalRecordClient
from schemas.bookmark import Bookmark
from services.exceptions import NotFoundError, ValidationError
from services.tag_service import TagService


async def _names(tag_service: TagService) -> dict[str, int]:
    return {tag.name: tag.usage_count for tag in await tag_service.get_all()}


# =============================================================================
# credit / debit
# =============================================================================


async def test__credit__creates_unknown_tag_at_one(tag_service: TagService) -> None:
    tag = await tag_service.credit("ai")

    assert tag.id is not None
    assert tag.usage_count == 1
    assert tag.color == "#2563eb"


async def test__credit__increments_existing(tag_service: TagService) -> None:
    await tag_service.credit("ai")
    tag = await tag_service.credit("ai")

    assert tag.usage_count == 2
    assert await _names(tag_service) == {"ai": 2}


async def test__debit__removes_tag_at_zero(tag_service: TagService) -> None:
    await tag_service.credit("ai")
    await tag_service.credit("ai")

    assert (await tag_service.debit("ai")).usage_count == 1
    assert await tag_service.debit("ai") is None
    assert await tag_service.get_by_name("ai") is None


async def test__debit__unknown_tag_is_ignored(tag_service: TagService) -> None:
    assert await tag_service.debit("ghost") is None


async def test__tags__names_are_case_sensitive(tag_service: TagService) -> None:
    await tag_service.credit("AI")
    await tag_service.credit("ai")

    assert await _names(tag_service) == {"AI": 1, "ai": 1}


# =============================================================================
# apply_tag_changes
# =============================================================================


async def test__apply_tag_changes__credits_added_and_debits_removed(
    tag_service: TagService,
) -> None:
    await tag_service.apply_tag_changes([], ["ai", "news"])
    await tag_service.apply_tag_changes([], ["news"])

    await tag_service.apply_tag_changes(["ai", "news"], ["news", "python"])

    assert await _names(tag_service) == {"news": 2, "python": 1}


async def test__apply_tag_changes__unchanged_set_is_noop(tag_service: TagService) -> None:
    await tag_service.apply_tag_changes([], ["ai"])
    await tag_service.apply_tag_changes(["ai"], ["ai"])

    assert await _names(tag_service) == {"ai": 1}


# =============================================================================
# Listing, create, delete
# =============================================================================


async def test__get_all__sorted_by_usage_then_name(tag_service: TagService) -> None:
    for name in ["zeta", "beta", "alpha", "beta", "zeta", "zeta"]:
        await tag_service.credit(name)

    tags = await tag_service.get_all()

    assert [(t.name, t.usage_count) for t in tags] == [("zeta", 3), ("beta", 2), ("alpha", 1)]


async def test__create__returns_existing_tag(tag_service: TagService) -> None:
    created = await tag_service.create({"name": "ai", "color": "#ff0000"})
    again = await tag_service.create({"name": "ai", "color": "#00ff00"})

    assert again.id == created.id
    assert again.color == "#ff0000"


async def test__create__invalid_name(tag_service: TagService) -> None:
    with pytest.raises(ValidationError) as exc_info:
        await tag_service.create({"name": "a,b"})
    assert exc_info.value.field == "name"


async def test__delete__missing_tag_raises(tag_service: TagService) -> None:
    with pytest.raises(NotFoundError):
        await tag_service.delete("ghost")


async def test__delete__removes_tag(tag_service: TagService) -> None:
    await tag_service.credit("ai")
    await tag_service.delete("ai")
    assert await tag_service.get_all() == []


# =============================================================================
# reconcile_usage
# =============================================================================


async def test__reconcile_usage__rewrites_counts_from_bookmarks(
    record_client: LocalRecordClient, tag_service: TagService,
) -> None:
    await record_client.create_record("tag_c", [
        {"Name": "ai", "name_c": "ai", "usage_count_c": 5},
        {"Name": "stale", "name_c": "stale", "usage_count_c": 2},
        {"Name": "news", "name_c": "news", "usage_count_c": 1},
    ])
    bookmarks = [
        Bookmark(id=1, url="https://a.test", title="a", tags=["ai", "news"]),
        Bookmark(id=2, url="https://b.test", title="b", tags=["ai", "python"]),
    ]

    summary = await tag_service.reconcile_usage(bookmarks)

    assert summary.created == ["python"]
    assert summary.updated == ["ai"]
    assert summary.removed == ["stale"]
    assert await _names(tag_service) == {"ai": 2, "news": 1, "python": 1}
