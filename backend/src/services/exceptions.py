"""Shared exceptions for service layer operations."""


class ValidationError(Exception):
    """
    Raised when input fails validation.

    Always raised before any write is issued. ``field`` names the offending
    input field (dotted for nested fields, e.g. ``new_folder.name``).
    """

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class NotFoundError(Exception):
    """Raised when an entity to read, mutate or delete does not exist."""

    def __init__(self, entity_name: str, identifier: str | int) -> None:
        self.entity_name = entity_name
        self.identifier = identifier
        super().__init__(f"{entity_name} '{identifier}' not found")


class RemoteFailureError(Exception):
    """
    Raised when a record store write or another upstream call fails.

    ``errors`` enumerates every per-record message and field-level error of a
    partially failed batch.
    """

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        self.message = message
        self.errors = errors or []
        super().__init__(message)


class ServiceUnavailableError(Exception):
    """Raised when an optional feature is used but its upstream is not configured."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)
