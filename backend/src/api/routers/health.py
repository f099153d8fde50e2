"""Health check endpoints."""
import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from api.dependencies import get_record_client
from records.base import BOOKMARK_TABLE, FetchParams, PagingInfo, RecordClient

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    record_store: str


@router.get("/health", response_model=HealthResponse)
async def health_check(
    client: RecordClient = Depends(get_record_client),
) -> HealthResponse:
    """Check application and record store health."""
    store_status = "healthy"
    try:
        response = await client.fetch_records(
            BOOKMARK_TABLE,
            FetchParams(fields=["Name"], paging_info=PagingInfo(limit=1, offset=0)),
        )
        if not response.success:
            logger.warning("Record store health check failed: %s", response.message)
            store_status = "unhealthy"
    except Exception:
        logger.exception("Record store health check failed")
        store_status = "unhealthy"

    return HealthResponse(
        status="healthy" if store_status == "healthy" else "degraded",
        record_store=store_status,
    )
