"""
Custom Exceptions

This module defines the exception hierarchy raised by the service layer.
Every exception knows the HTTP status it maps to and renders its own
JSON envelope, so the API layer only needs a single handler.

Envelopes:
- {"error": "<message>"} for single-cause failures
- {"errors": {"<field>": "<message>"}} for field validation failures
"""

from typing import Any, Optional

from fastapi import status


class ShortyError(Exception):
    """Base exception for the URL shortener service."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "internal server error"

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_payload(self) -> dict[str, Any]:
        return {"error": self.message}


class InvalidRequestError(ShortyError):
    """Raised when the request cannot be parsed (bad JSON, bad id, bad range)."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "invalid request"


class FieldValidationError(ShortyError):
    """Raised when one or more fields fail validation."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    message = "validation failed"

    def __init__(self, errors: dict[str, str]):
        self.errors = dict(errors)
        super().__init__("; ".join(f"{field}: {msg}" for field, msg in self.errors.items()))

    def to_payload(self) -> dict[str, Any]:
        return {"errors": self.errors}


class NotFoundError(ShortyError):
    """Raised when a link id or short code does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    message = "not found"


class ShortNameConflictError(ShortyError):
    """Raised when a short_name is already taken by another link."""

    status_code = status.HTTP_409_CONFLICT
    message = "short_name already exists"

    def __init__(self, short_name: str):
        self.short_name = short_name
        super().__init__()

    def as_field_error(self) -> FieldValidationError:
        return FieldValidationError({"short_name": "short name already in use"})


class ShortCodeExhaustedError(ShortyError):
    """Raised when every generated short code collided with an existing one."""

    message = "failed to generate unique short_name"

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__()


class DatabaseError(ShortyError):
    """Raised when database operations fail."""

    message = "db error"

    def __init__(self, reason: str, original_error: Optional[Exception] = None):
        self.reason = reason
        self.original_error = original_error
        super().__init__()
