"""Domain error taxonomy and normalization of arbitrary exceptions for HTTP responses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class DomainError(Exception):
    """Base for errors raised by use cases and services. Subclasses carry their HTTP status."""

    status_code = 400
    code = "domain_error"

    def __init__(self, message: str, errors: list[Any] | None = None):
        super().__init__(message)
        self.message = message
        self.errors = errors


class NotFoundError(DomainError):
    status_code = 404
    code = "not_found"


class UnauthenticatedError(DomainError):
    status_code = 401
    code = "unauthenticated"


class ForbiddenError(DomainError):
    status_code = 403
    code = "forbidden"


class ValidationError(DomainError):
    status_code = 400
    code = "validation_error"


@dataclass
class TypedError:
    message: str
    name: str | None = None
    code: str | int | None = None
    errors: list[Any] | None = None


def handle_error(error: object) -> TypedError:
    """Turn any raised value into a TypedError with a usable message."""
    if isinstance(error, DomainError):
        return TypedError(
            message=error.message,
            name=type(error).__name__,
            code=error.code,
            errors=error.errors,
        )
    if isinstance(error, BaseException):
        return TypedError(
            message=str(error) or "Unknown error",
            name=type(error).__name__,
            code=getattr(error, "code", None),
            errors=getattr(error, "errors", None) if isinstance(getattr(error, "errors", None), list) else None,
        )
    if isinstance(error, str):
        return TypedError(message=error)
    if isinstance(error, dict):
        return TypedError(
            message=error.get("message") or "Unknown error",
            name=error.get("name"),
            code=error.get("code"),
            errors=error.get("errors"),
        )
    return TypedError(message="Unknown error")


def status_for(error: BaseException) -> int:
    """HTTP status for an error; anything outside the taxonomy is internal."""
    if isinstance(error, DomainError):
        return error.status_code
    return 500
