"""Response envelope and shared pagination schemas."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


class ApiResponse(BaseModel, Generic[T]):
    """Uniform envelope: {success, data?, message?, errors?}."""

    success: bool = Field(default=True, description="False only for error responses")
    data: T | None = Field(default=None, description="Payload for successful responses")
    message: str | None = Field(default=None, description="Human-readable status message")
    errors: list[dict[str, Any]] | None = Field(
        default=None, description="Per-field validation errors"
    )


class MessageResponse(BaseModel):
    """Envelope without a payload (deletes, logout)."""

    success: bool = True
    message: str


class Pagination(BaseModel):
    total: int
    page: int
    limit: int
    pages: int
