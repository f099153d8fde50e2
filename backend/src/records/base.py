"""
Record store interface shared by the remote and local clients.

The record store is a table-oriented CRUD API. Every call returns a
``RecordResponse`` envelope; batch writes additionally carry one
``RecordResult`` per submitted record so that partial failures can be reported
record by record.
"""
from abc import ABC, abstractmethod
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

BOOKMARK_TABLE = "bookmark_c"
FOLDER_TABLE = "folder_c"
TAG_TABLE = "tag_c"
ANALYTICS_TABLE = "analytics_c"

WhereOperator = Literal["EqualTo", "NotEqualTo", "Contains"]


class RecordStoreError(Exception):
    """Raised when the record store cannot be reached or rejects a request."""

    def __init__(self, message: str, category: str = "internal") -> None:
        self.message = message
        self.category = category
        super().__init__(message)


class _WireModel(BaseModel):
    """Base for models serialized with the record store's field names."""

    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        """Serialize using the record store's field names."""
        return self.model_dump(by_alias=True, exclude_none=True)


class WhereCondition(_WireModel):
    """A single filter condition; conditions in a query are combined with AND."""

    field_name: str = Field(alias="FieldName")
    operator: WhereOperator = Field(default="EqualTo", alias="Operator")
    values: list[Any] = Field(alias="Values")


class OrderBy(_WireModel):
    """Sort instruction for a fetch query."""

    field_name: str = Field(alias="fieldName")
    sort_type: Literal["ASC", "DESC"] = Field(default="ASC", alias="sorttype")


class PagingInfo(_WireModel):
    """Page window for a fetch query."""

    limit: int = 100
    offset: int = 0


class FetchParams(_WireModel):
    """Parameters for ``fetch_records``."""

    fields: list[str] = Field(default_factory=list)
    where: list[WhereCondition] = Field(default_factory=list)
    order_by: list[OrderBy] = Field(default_factory=list, alias="orderBy")
    paging_info: PagingInfo = Field(default_factory=PagingInfo, alias="pagingInfo")

    def to_wire(self) -> dict[str, Any]:
        """Serialize, wrapping field names the way the store expects them."""
        payload = super().to_wire()
        payload["fields"] = [{"field": {"Name": name}} for name in self.fields]
        return payload


class RecordResult(BaseModel):
    """Outcome for one record of a batch write."""

    model_config = ConfigDict(extra="allow")

    success: bool
    data: dict[str, Any] | None = None
    message: str | None = None
    errors: list[dict[str, Any]] = Field(default_factory=list)


class RecordResponse(BaseModel):
    """Envelope returned by every record store call."""

    model_config = ConfigDict(extra="allow")

    success: bool
    data: Any = None
    results: list[RecordResult] | None = None
    message: str | None = None


class RecordClient(ABC):
    """
    Abstract record store client.

    Implementations are constructed once at application startup and passed to
    the services that need them.
    """

    @abstractmethod
    async def fetch_records(
        self, table: str, params: FetchParams | None = None,
    ) -> RecordResponse:
        """Fetch records matching ``params``; ``data`` is a list of raw records."""
        ...

    @abstractmethod
    async def get_record_by_id(
        self, table: str, record_id: int, fields: list[str] | None = None,
    ) -> RecordResponse:
        """Fetch one record; ``data`` is the raw record or None when absent."""
        ...

    @abstractmethod
    async def create_record(
        self, table: str, records: list[dict[str, Any]],
    ) -> RecordResponse:
        """Create records; each result's ``data`` carries the stored record."""
        ...

    @abstractmethod
    async def update_record(
        self, table: str, records: list[dict[str, Any]],
    ) -> RecordResponse:
        """Update records identified by their ``Id`` field."""
        ...

    @abstractmethod
    async def delete_record(self, table: str, record_ids: list[int]) -> RecordResponse:
        """Permanently delete records by id."""
        ...

    async def close(self) -> None:  # noqa: B027
        """Release any held resources."""
