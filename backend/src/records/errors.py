"""
Error parsing for the remote record store.

Turns HTTP failures from the store into ``RecordStoreError`` instances with a
semantic category and a readable message.
"""
from typing import Any, Literal

import httpx

from records.base import RecordStoreError

ErrorCategory = Literal[
    "auth",         # 401 - Invalid or expired credentials
    "forbidden",    # 403 - Access denied
    "not_found",    # 404 - Table or record not found
    "validation",   # 400/422 - Store rejected the payload
    "unavailable",  # Transport error, store unreachable
    "internal",     # 5xx or unexpected errors
]


def parse_http_error(e: httpx.HTTPStatusError, table: str = "") -> RecordStoreError:
    """
    Parse an HTTP error from the record store into a RecordStoreError.

    Args:
        e: The HTTP status error from httpx
        table: Table name the request targeted, used in error messages

    Returns:
        RecordStoreError with category and message
    """
    status = e.response.status_code

    if status == 401:
        return RecordStoreError("Invalid or expired record store credentials", "auth")

    if status == 403:
        return RecordStoreError("Access denied", "forbidden")

    if status == 404:
        msg = f"Table '{table}' or record not found" if table else "Not found"
        return RecordStoreError(msg, "not_found")

    if status in (400, 422):
        return RecordStoreError(_extract_validation_message(e), "validation")

    message = _safe_get_message(e)
    if message:
        return RecordStoreError(f"Record store error {status}: {message}")
    return RecordStoreError(f"Record store error {status}")


def _safe_get_body(e: httpx.HTTPStatusError) -> dict[str, Any]:
    """Safely extract the JSON object body from an error response."""
    try:
        body = e.response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _safe_get_message(e: httpx.HTTPStatusError) -> str:
    """Extract the store's ``message`` field, if any."""
    message = _safe_get_body(e).get("message")
    return message if isinstance(message, str) else ""


def _extract_validation_message(e: httpx.HTTPStatusError) -> str:
    """Extract a validation error message from a 400/422 response."""
    body = _safe_get_body(e)
    if not body:
        return "Validation error"
    message = body.get("message")
    if isinstance(message, str) and message:
        return message
    errors = body.get("errors")
    if isinstance(errors, list):
        messages = []
        for err in errors:
            if isinstance(err, dict):
                field = err.get("fieldLabel", "unknown")
                msg = err.get("message", "invalid")
                messages.append(f"{field}: {msg}")
        if messages:
            return "; ".join(messages)
    return "Validation error"
