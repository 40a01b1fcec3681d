"""Shared Pydantic schemas: timestamps and the JSON response envelopes."""

from datetime import UTC, datetime
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


def utc_timestamp() -> str:
    """ISO-8601 timestamp stamped on every response envelope."""
    return datetime.now(UTC).isoformat()


class TimestampSchema(BaseModel):
    """Creation and last-mutation times of a stored record."""

    created_at: datetime
    updated_at: datetime


class Envelope(BaseModel):
    timestamp: str = Field(default_factory=utc_timestamp, description="ISO-8601 response time")


class DataResponse(Envelope, Generic[T]):
    """Envelope around a single resource."""

    data: T
    message: Optional[str] = None


class PaginationMeta(BaseModel):
    """Pagination block of a list response."""

    model_config = ConfigDict(populate_by_name=True)

    page: int
    limit: int
    total: int
    total_pages: int = Field(alias="totalPages")
    has_next: bool = Field(alias="hasNext")
    has_prev: bool = Field(alias="hasPrev")


class ListMeta(BaseModel):
    pagination: PaginationMeta


class ListResponse(Envelope, Generic[T]):
    """Envelope around a page of resources."""

    data: List[T]
    meta: ListMeta


class ErrorDetail(BaseModel):
    """One itemised field violation."""

    field: str
    location: str
    message: str
    value: Any = None


class ErrorResponse(Envelope):
    """Body of every failed request."""

    error: str
    message: Optional[str] = None
    details: Optional[List[ErrorDetail]] = None
    stack: Optional[List[str]] = None
