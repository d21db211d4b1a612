"""Response envelope shared by every endpoint."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Uniform body: {success, data?, message?}."""

    success: bool
    data: T | None = None
    message: str | None = None


def ok(data: Any = None, message: str | None = None) -> dict:
    """Success envelope as a plain dict (routes declare response_model=ApiResponse[...])."""
    body: dict[str, Any] = {"success": True, "data": data}
    if message is not None:
        body["message"] = message
    return body


def fail(message: str) -> dict:
    return {"success": False, "message": message}
