"""Tests for the local JSON-file record store."""
import json
from pathlib import Path

import pytest

from records.base import FetchParams, OrderBy, PagingInfo, RecordStoreError, WhereCondition
from records.local_client import LocalRecordClient


@pytest.fixture
def store(tmp_path: Path) -> LocalRecordClient:
    return LocalRecordClient(
        tmp_path,
        seed={
            "bookmark_c": [
                {"Id": 1, "title_c": "Python docs", "tags_c": "python,reference", "folder_id_c": 2},
                {
                    "Id": 2,
                    "title_c": "MDN",
                    "tags_c": "javascript",
                    "folder_id_c": {"Id": 3, "Name": "Web"},
                },
                {"Id": 3, "title_c": "asyncio", "tags_c": "python", "folder_id_c": None},
            ],
        },
    )


async def test__create_record__assigns_max_plus_one(store: LocalRecordClient) -> None:
    response = await store.create_record("bookmark_c", [{"title_c": "A"}, {"title_c": "B"}])

    assert response.success is True
    assert [r.data["Id"] for r in response.results] == [4, 5]


async def test__create_record__empty_table_starts_at_one(store: LocalRecordClient) -> None:
    response = await store.create_record("tag_c", [{"name_c": "python"}])
    assert response.results[0].data["Id"] == 1


async def test__mutations__persist_to_table_file(tmp_path: Path, store: LocalRecordClient) -> None:
    await store.create_record("tag_c", [{"name_c": "python", "usage_count_c": 1}])

    on_disk = json.loads((tmp_path / "tag_c.json").read_text())
    assert on_disk == [{"name_c": "python", "usage_count_c": 1, "Id": 1}]

    reloaded = LocalRecordClient(tmp_path)
    response = await reloaded.get_record_by_id("tag_c", 1)
    assert response.data["name_c"] == "python"


async def test__seed__not_applied_when_table_file_exists(tmp_path: Path) -> None:
    (tmp_path / "tag_c.json").write_text(json.dumps([{"Id": 7, "name_c": "kept"}]))

    store = LocalRecordClient(tmp_path, seed={"tag_c": [{"Id": 1, "name_c": "seeded"}]})
    response = await store.fetch_records("tag_c")

    assert [r["name_c"] for r in response.data] == ["kept"]


async def test__init__corrupt_table_file_raises(tmp_path: Path) -> None:
    (tmp_path / "tag_c.json").write_text("{not json")
    with pytest.raises(RecordStoreError):
        LocalRecordClient(tmp_path)


async def test__fetch_records__equal_to_matches_lookup_references(store: LocalRecordClient) -> None:
    params = FetchParams(where=[WhereCondition(field_name="folder_id_c", values=[3])])
    response = await store.fetch_records("bookmark_c", params)
    assert [r["Id"] for r in response.data] == [2]


async def test__fetch_records__contains_is_case_insensitive(store: LocalRecordClient) -> None:
    params = FetchParams(
        where=[WhereCondition(field_name="tags_c", operator="Contains", values=["PYTHON"])],
    )
    response = await store.fetch_records("bookmark_c", params)
    assert [r["Id"] for r in response.data] == [1, 3]


async def test__fetch_records__not_equal_to(store: LocalRecordClient) -> None:
    params = FetchParams(
        where=[WhereCondition(field_name="folder_id_c", operator="NotEqualTo", values=[None])],
    )
    response = await store.fetch_records("bookmark_c", params)
    assert [r["Id"] for r in response.data] == [1, 2]


async def test__fetch_records__order_and_paging(store: LocalRecordClient) -> None:
    params = FetchParams(
        order_by=[OrderBy(field_name="title_c", sort_type="ASC")],
        paging_info=PagingInfo(limit=2, offset=0),
    )
    response = await store.fetch_records("bookmark_c", params)
    assert [r["title_c"] for r in response.data] == ["asyncio", "MDN"]


async def test__fetch_records__projects_requested_fields(store: LocalRecordClient) -> None:
    params = FetchParams(fields=["title_c"])
    response = await store.fetch_records("bookmark_c", params)
    assert response.data[0] == {"Id": 1, "title_c": "Python docs"}


async def test__get_record_by_id__missing_returns_no_data(store: LocalRecordClient) -> None:
    response = await store.get_record_by_id("bookmark_c", 99)
    assert response.success is True
    assert response.data is None


async def test__update_record__merges_fields(store: LocalRecordClient) -> None:
    response = await store.update_record("bookmark_c", [{"Id": 1, "is_pinned_c": True}])

    assert response.results[0].success is True
    assert response.results[0].data["title_c"] == "Python docs"
    assert response.results[0].data["is_pinned_c"] is True


async def test__update_record__unknown_id_fails_per_record(store: LocalRecordClient) -> None:
    response = await store.update_record(
        "bookmark_c", [{"Id": 1, "title_c": "ok"}, {"Id": 42, "title_c": "missing"}],
    )

    assert response.success is True
    assert [r.success for r in response.results] == [True, False]
    assert response.results[1].message == "Record 42 not found"


async def test__delete_record__removes_and_reports_unknown(store: LocalRecordClient) -> None:
    response = await store.delete_record("bookmark_c", [3, 99])

    assert [r.success for r in response.results] == [True, False]
    remaining = await store.fetch_records("bookmark_c")
    assert [r["Id"] for r in remaining.data] == [1, 2]
