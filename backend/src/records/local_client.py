"""
Local fallback record store.

Used when no remote record store is configured. Each table is persisted as a
single JSON blob (``<data_dir>/<table>.json``) that is loaded once when the
client is constructed and rewritten wholesale after every mutation.
"""
import copy
import json
import logging
from pathlib import Path
from typing import Any

from records.base import (
    FetchParams,
    RecordClient,
    RecordResponse,
    RecordResult,
    RecordStoreError,
    WhereCondition,
)

logger = logging.getLogger(__name__)


def _matches(record: dict[str, Any], condition: WhereCondition) -> bool:
    """Check whether a record satisfies a single where-condition."""
    value = record.get(condition.field_name)
    if isinstance(value, dict):
        # lookup fields compare by the referenced id
        value = value.get("Id")
    if condition.operator == "EqualTo":
        return any(value == expected for expected in condition.values)
    if condition.operator == "NotEqualTo":
        return all(value != expected for expected in condition.values)
    # Contains: case-insensitive substring match against any of the values
    haystack = "" if value is None else str(value).lower()
    return any(str(expected).lower() in haystack for expected in condition.values)


def _sort_key(field_name: str):  # noqa: ANN202
    """Build a sort key placing missing values last and comparing strings case-insensitively."""
    def key(record: dict[str, Any]) -> tuple:
        value = record.get(field_name)
        if value is None:
            return (1, "")
        if isinstance(value, str):
            return (0, value.lower())
        return (0, value)
    return key


class LocalRecordClient(RecordClient):
    """Record client persisting each table as a JSON file."""

    def __init__(
        self,
        data_dir: Path,
        seed: dict[str, list[dict[str, Any]]] | None = None,
    ) -> None:
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self._tables: dict[str, list[dict[str, Any]]] = {}

        for path in sorted(self.data_dir.glob("*.json")):
            self._tables[path.stem] = self._read(path)
        for table, records in (seed or {}).items():
            if table not in self._tables:
                self._tables[table] = copy.deepcopy(records)
                self._save(table)

    def _path(self, table: str) -> Path:
        return self.data_dir / f"{table}.json"

    @staticmethod
    def _read(path: Path) -> list[dict[str, Any]]:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise RecordStoreError(f"Could not load local table '{path.stem}': {e}") from e
        if not isinstance(data, list):
            raise RecordStoreError(f"Local table '{path.stem}' is not a list of records")
        return data

    def _save(self, table: str) -> None:
        """Rewrite the table's blob; the previous file is replaced atomically."""
        path = self._path(table)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            tmp_path.write_text(json.dumps(self._tables[table], indent=2), encoding="utf-8")
            tmp_path.replace(path)
        except OSError as e:
            raise RecordStoreError(f"Could not persist local table '{table}': {e}") from e

    def _records(self, table: str) -> list[dict[str, Any]]:
        return self._tables.setdefault(table, [])

    def _find(self, table: str, record_id: Any) -> dict[str, Any] | None:
        for record in self._records(table):
            if record.get("Id") == record_id:
                return record
        return None

    async def fetch_records(
        self, table: str, params: FetchParams | None = None,
    ) -> RecordResponse:
        """Filter, sort and page the table in memory."""
        params = params or FetchParams()
        records = [
            record for record in self._records(table)
            if all(_matches(record, condition) for condition in params.where)
        ]
        # Apply sort keys from least to most significant (stable sort)
        for order in reversed(params.order_by):
            records.sort(key=_sort_key(order.field_name), reverse=order.sort_type == "DESC")

        start = params.paging_info.offset
        page = records[start:start + params.paging_info.limit]
        return RecordResponse(
            success=True,
            data=[self._project(record, params.fields) for record in page],
        )

    @staticmethod
    def _project(record: dict[str, Any], fields: list[str]) -> dict[str, Any]:
        if not fields:
            return copy.deepcopy(record)
        projected = {"Id": record.get("Id")}
        for name in fields:
            if name in record:
                projected[name] = copy.deepcopy(record[name])
        return projected

    async def get_record_by_id(
        self, table: str, record_id: int, fields: list[str] | None = None,
    ) -> RecordResponse:
        """Return the record, or ``data=None`` when it does not exist."""
        record = self._find(table, record_id)
        if record is None:
            return RecordResponse(success=True, data=None)
        return RecordResponse(success=True, data=self._project(record, fields or []))

    async def create_record(
        self, table: str, records: list[dict[str, Any]],
    ) -> RecordResponse:
        """Append records, assigning ``Id = max(Id) + 1``."""
        existing = self._records(table)
        next_id = max((r.get("Id", 0) for r in existing), default=0) + 1
        results = []
        for record in records:
            stored = {**copy.deepcopy(record), "Id": next_id}
            next_id += 1
            existing.append(stored)
            results.append(RecordResult(success=True, data=copy.deepcopy(stored)))
        self._save(table)
        logger.debug("Created %d record(s) in %s", len(results), table)
        return RecordResponse(success=True, results=results)

    async def update_record(
        self, table: str, records: list[dict[str, Any]],
    ) -> RecordResponse:
        """Merge fields into existing records; unknown ids fail individually."""
        results = []
        for record in records:
            record_id = record.get("Id")
            stored = self._find(table, record_id)
            if stored is None:
                results.append(
                    RecordResult(success=False, message=f"Record {record_id} not found"),
                )
                continue
            stored.update(copy.deepcopy(record))
            results.append(RecordResult(success=True, data=copy.deepcopy(stored)))
        self._save(table)
        return RecordResponse(success=True, results=results)

    async def delete_record(self, table: str, record_ids: list[int]) -> RecordResponse:
        """Remove records; unknown ids fail individually."""
        existing = self._records(table)
        results = []
        for record_id in record_ids:
            stored = self._find(table, record_id)
            if stored is None:
                results.append(
                    RecordResult(success=False, message=f"Record {record_id} not found"),
                )
                continue
            existing.remove(stored)
            results.append(RecordResult(success=True, data={"Id": record_id}))
        self._save(table)
        return RecordResponse(success=True, results=results)
