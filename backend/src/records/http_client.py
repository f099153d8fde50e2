"""HTTP client for the remote record store."""
import logging
from typing import Any

import httpx

from records.base import FetchParams, RecordClient, RecordResponse, RecordStoreError
from records.errors import parse_http_error

logger = logging.getLogger(__name__)


class HttpRecordClient(RecordClient):
    """
    Record store client backed by ``httpx.AsyncClient``.

    No retries or backoff: a failed call raises ``RecordStoreError`` immediately.
    """

    def __init__(
        self,
        base_url: str,
        project_id: str = "",
        public_key: str = "",
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.project_id = project_id
        self.public_key = public_key
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    def _get_headers(self) -> dict[str, str]:
        """Get common headers for record store requests."""
        return {
            "Authorization": f"Bearer {self.public_key}",
            "X-Project-Id": self.project_id,
        }

    async def _send(
        self,
        method: str,
        path: str,
        table: str,
        json: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
    ) -> RecordResponse:
        """Send a request and parse the response envelope."""
        try:
            response = await self._client.request(
                method, path, json=json, params=params, headers=self._get_headers(),
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            error = parse_http_error(e, table=table)
            logger.warning("Record store %s %s failed: %s", method, path, error.message)
            raise error from e
        except httpx.RequestError as e:
            logger.warning("Record store %s %s unreachable: %s", method, path, e)
            raise RecordStoreError(f"Record store unreachable: {e}", "unavailable") from e

        try:
            return RecordResponse.model_validate(response.json())
        except ValueError as e:
            raise RecordStoreError("Record store returned an invalid response") from e

    async def fetch_records(
        self, table: str, params: FetchParams | None = None,
    ) -> RecordResponse:
        """Fetch records matching ``params``."""
        params = params or FetchParams()
        return await self._send(
            "POST", f"/tables/{table}/records/query", table, json=params.to_wire(),
        )

    async def get_record_by_id(
        self, table: str, record_id: int, fields: list[str] | None = None,
    ) -> RecordResponse:
        """Fetch a single record by id."""
        params = {"fields": ",".join(fields)} if fields else None
        return await self._send(
            "GET", f"/tables/{table}/records/{record_id}", table, params=params,
        )

    async def create_record(
        self, table: str, records: list[dict[str, Any]],
    ) -> RecordResponse:
        """Create records in a batch."""
        return await self._send(
            "POST", f"/tables/{table}/records", table, json={"records": records},
        )

    async def update_record(
        self, table: str, records: list[dict[str, Any]],
    ) -> RecordResponse:
        """Update records in a batch."""
        return await self._send(
            "PATCH", f"/tables/{table}/records", table, json={"records": records},
        )

    async def delete_record(self, table: str, record_ids: list[int]) -> RecordResponse:
        """Delete records in a batch."""
        return await self._send(
            "DELETE", f"/tables/{table}/records", table, json={"RecordIds": record_ids},
        )

    async def close(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()
