"""Record store clients."""
from records.base import (
    ANALYTICS_TABLE,
    BOOKMARK_TABLE,
    FOLDER_TABLE,
    TAG_TABLE,
    FetchParams,
    OrderBy,
    PagingInfo,
    RecordClient,
    RecordResponse,
    RecordResult,
    RecordStoreError,
    WhereCondition,
)
from records.factory import create_record_client
from records.http_client import HttpRecordClient
from records.local_client import LocalRecordClient

__all__ = [
    "ANALYTICS_TABLE",
    "BOOKMARK_TABLE",
    "FOLDER_TABLE",
    "TAG_TABLE",
    "FetchParams",
    "HttpRecordClient",
    "LocalRecordClient",
    "OrderBy",
    "PagingInfo",
    "RecordClient",
    "RecordResponse",
    "RecordResult",
    "RecordStoreError",
    "WhereCondition",
    "create_record_client",
]
