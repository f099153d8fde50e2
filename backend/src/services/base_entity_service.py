"""
Base service class for record-backed entities.

Provides the shared read and write plumbing for the Bookmark, Folder, Tag and
usage-event services. Entity-specific behavior is defined via abstract methods
and class attributes.

Error handling follows one rule: read paths degrade (empty list / None) when
the record store fails, write paths raise ``RemoteFailureError``.
"""
import logging
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Mapping
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

from core.config import Settings, get_settings
from records.base import (
    FetchParams,
    OrderBy,
    PagingInfo,
    RecordClient,
    RecordResponse,
    RecordStoreError,
    WhereCondition,
)
from services.exceptions import NotFoundError, RemoteFailureError
from services.utils import unwrap_write

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class BaseEntityService(ABC, Generic[T]):
    """
    Abstract base class for entity services.

    Subclasses must define:
    - table: The record store table name (e.g., "bookmark_c")
    - entity_name: Human-readable name for error messages (e.g., "Bookmark")
    - fields: Record fields requested on reads

    Subclasses must implement:
    - _normalize(): Raw record -> view-model
    - _to_record(): View-model attributes -> (partial) raw record

    Every remote operation is a single request; there are no retries, locks
    or compare-and-swap. Read-modify-write sequences built on top of these
    helpers assume a single writer.
    """

    table: str
    entity_name: str
    fields: list[str]

    def __init__(self, client: RecordClient, settings: Settings | None = None) -> None:
        self.client = client
        self.settings = settings or get_settings()

    # --- Abstract Methods (entity-specific) ---

    @abstractmethod
    def _normalize(self, record: Mapping[str, Any]) -> T:
        """Convert a raw record into the entity's view-model."""
        ...

    @abstractmethod
    def _to_record(self, values: Mapping[str, Any]) -> dict[str, Any]:
        """Convert view-model attributes (all or a subset) into record fields."""
        ...

    # --- Helper Methods ---

    def _params(
        self,
        where: list[WhereCondition] | None = None,
        order_by: list[OrderBy] | None = None,
    ) -> FetchParams:
        """Build fetch params with the fixed first-page window."""
        return FetchParams(
            fields=self.fields,
            where=where or [],
            order_by=order_by or [],
            paging_info=PagingInfo(limit=self.settings.page_size, offset=0),
        )

    def _normalize_all(self, records: list[Mapping[str, Any]]) -> list[T]:
        entities = []
        for record in records:
            try:
                entities.append(self._normalize(record))
            except (KeyError, TypeError, ValueError):
                logger.warning(
                    "Skipping malformed %s record: %r", self.entity_name.lower(), record,
                )
        return entities

    async def _call_write(
        self, call: Awaitable[RecordResponse], action: str,
    ) -> RecordResponse:
        """Await a store call on a write path, translating transport failures."""
        try:
            return await call
        except RecordStoreError as e:
            logger.warning("Failed to %s: %s", action, e.message)
            raise RemoteFailureError(f"Failed to {action}: {e.message}") from e

    # --- Reads (degrade on failure) ---

    async def _fetch(self, params: FetchParams | None = None) -> list[T]:
        """Fetch and normalize records; any failure yields an empty list."""
        try:
            response = await self.client.fetch_records(self.table, params or self._params())
        except RecordStoreError as e:
            logger.warning("Failed to fetch %s records: %s", self.entity_name.lower(), e.message)
            return []
        if not response.success or not isinstance(response.data, list):
            logger.warning(
                "Failed to fetch %s records: %s",
                self.entity_name.lower(),
                response.message or "no data returned",
            )
            return []
        return self._normalize_all(response.data)

    async def get_by_id(self, entity_id: int) -> T | None:
        """
        Get an entity by ID.

        Returns:
            The entity, or None if it does not exist or the store failed.
        """
        try:
            response = await self.client.get_record_by_id(self.table, entity_id, self.fields)
        except RecordStoreError as e:
            logger.warning(
                "Failed to fetch %s %s: %s", self.entity_name.lower(), entity_id, e.message,
            )
            return None
        if not response.success or not response.data:
            return None
        return self._normalize(response.data)

    # --- Writes (raise on failure) ---

    async def _fetch_strict(self, params: FetchParams, action: str) -> list[T]:
        """Fetch records on a write path; failures raise instead of degrading."""
        response = await self._call_write(self.client.fetch_records(self.table, params), action)
        if not response.success or not isinstance(response.data, list):
            logger.warning("Failed to %s: %s", action, response.message or "no data returned")
            raise RemoteFailureError(response.message or f"Failed to {action}")
        return self._normalize_all(response.data)

    async def _require(self, entity_id: int) -> T:
        """
        Read an entity on a write path.

        Raises:
            NotFoundError: If the entity does not exist.
            RemoteFailureError: If the store call failed.
        """
        action = f"load {self.entity_name.lower()} {entity_id}"
        try:
            response = await self.client.get_record_by_id(self.table, entity_id, self.fields)
        except RecordStoreError as e:
            if e.category == "not_found":
                raise NotFoundError(self.entity_name, entity_id) from e
            logger.warning("Failed to %s: %s", action, e.message)
            raise RemoteFailureError(f"Failed to {action}: {e.message}") from e
        if not response.success:
            raise RemoteFailureError(
                response.message or f"Failed to load {self.entity_name.lower()} {entity_id}",
            )
        if not response.data:
            raise NotFoundError(self.entity_name, entity_id)
        return self._normalize(response.data)

    async def _create(self, values: Mapping[str, Any]) -> T:
        """Create one record from view-model attributes and return the stored entity."""
        action = f"create {self.entity_name.lower()}"
        record = self._to_record(values)
        response = await self._call_write(self.client.create_record(self.table, [record]), action)
        stored = unwrap_write(response, action)
        if not stored or "Id" not in stored[0]:
            raise RemoteFailureError(f"Failed to {action}: the store returned no record")
        return self._normalize({**record, **stored[0]})

    async def _update(self, current: T, changes: Mapping[str, Any]) -> T:
        """
        Write only ``changes`` and return the updated view-model.

        The result overlays the store's returned fields on ``current`` so that
        stores answering with partial records still yield a complete entity.
        """
        entity_id = current.id  # type: ignore[attr-defined]
        action = f"update {self.entity_name.lower()} {entity_id}"
        record = {**self._to_record(changes), "Id": entity_id}
        response = await self._call_write(self.client.update_record(self.table, [record]), action)
        stored = unwrap_write(response, action)
        returned = stored[0] if stored else {}
        return self._normalize({**self._to_record(current.model_dump()), **record, **returned})

    async def _delete(self, entity_id: int) -> None:
        action = f"delete {self.entity_name.lower()} {entity_id}"
        response = await self._call_write(
            self.client.delete_record(self.table, [entity_id]), action,
        )
        unwrap_write(response, action)
