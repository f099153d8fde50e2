"""Shared utility functions for service layer."""
import logging
from collections.abc import Mapping
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from core.config import Settings
from records.base import RecordResponse
from services.exceptions import RemoteFailureError, ValidationError

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def coerce_payload(
    schema: type[SchemaT],
    data: SchemaT | Mapping[str, Any],
    settings: Settings | None = None,
) -> SchemaT:
    """
    Validate ``data`` against ``schema``.

    Accepts an already-validated schema instance or a plain mapping. When
    ``settings`` is given it is passed as validation context, so length limits
    follow it instead of the cached application settings; instances are then
    re-validated against it.

    Raises:
        ValidationError: Naming the first offending field.
    """
    if isinstance(data, schema) and settings is None:
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump(exclude_unset=True)
    context = {"settings": settings} if settings is not None else None
    try:
        return schema.model_validate(data, context=context)
    except PydanticValidationError as e:
        raise to_validation_error(e) from e


def to_validation_error(e: PydanticValidationError) -> ValidationError:
    """Convert the first pydantic error into a field-level ValidationError."""
    first = e.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ())) or "__root__"
    message = first.get("msg", "Invalid value")
    # pydantic prefixes messages raised from validators
    message = message.removeprefix("Value error, ")
    return ValidationError(field, message)


def describe_failures(response: RecordResponse) -> list[str]:
    """Enumerate per-record messages and field-level errors of failed batch results."""
    messages: list[str] = []
    for result in response.results or []:
        if result.success:
            continue
        if result.message:
            messages.append(result.message)
        for error in result.errors:
            field = error.get("fieldLabel") or error.get("field") or "record"
            messages.append(f"{field}: {error.get('message', 'invalid')}")
        if not result.message and not result.errors:
            messages.append("Record was rejected by the store")
    return messages


def unwrap_write(response: RecordResponse, action: str) -> list[dict[str, Any]]:
    """
    Extract the stored records from a batch write response.

    Args:
        response: The store's response envelope.
        action: Human-readable action for error messages (e.g. "create bookmark").

    Returns:
        The ``data`` payloads of the successful results, in submission order.

    Raises:
        RemoteFailureError: If the call failed or any record in the batch failed.
    """
    if not response.success:
        message = response.message or f"Failed to {action}"
        logger.warning("Record store rejected %s: %s", action, message)
        raise RemoteFailureError(message)

    failures = describe_failures(response)
    if failures:
        logger.warning("Failed to %s: %s", action, "; ".join(failures))
        raise RemoteFailureError(f"Failed to {action}", errors=failures)

    return [result.data or {} for result in response.results or []]
