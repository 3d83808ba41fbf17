"""
Service-level errors.

These are the only failures expected to abort an operation; the API turns
them into HTTP responses carrying `message` as the detail.
"""


class ServiceError(Exception):
    """Base class for errors surfaced to the caller."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(ServiceError):
    """Input is well-formed but violates a business rule."""

    status_code = 400


class PermissionDenied(ServiceError):
    """The acting user may not perform the operation."""

    status_code = 403


class NotFound(ServiceError):
    """The referenced record does not exist or is not visible."""

    status_code = 404


class Conflict(ServiceError):
    """The operation clashes with existing data (duplicates, references)."""

    status_code = 409
