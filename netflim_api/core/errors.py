"""Domain errors raised by services and mapped to HTTP by the api layer."""

from __future__ import annotations

from http import HTTPStatus
from typing import Any, Optional


class AppError(Exception):
    """Base class: carries an error code, a message and an HTTP status."""

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR
    code: str = "internal_error"

    def __init__(
            self,
            message: str = "",
            details: Optional[list[dict[str, Any]]] = None) -> None:
        super().__init__(message or self.code)
        self.message = message or self.code
        self.details = details


class ValidationFailed(AppError):
    status_code = HTTPStatus.BAD_REQUEST
    code = "validation_error"

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationFailed":
        return cls(message, details=[{"field": field, "message": message}])


class NotFoundError(AppError):
    status_code = HTTPStatus.NOT_FOUND
    code = "not_found"

