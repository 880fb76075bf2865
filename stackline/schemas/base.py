"""Base schema configuration."""

from datetime import datetime
from typing import Generic, Literal, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict

DataT = TypeVar("DataT")


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,  # Enable ORM mode
        str_strip_whitespace=True,
        validate_assignment=True,
        populate_by_name=True,
    )


class TimestampMixin(BaseModel):
    """Mixin for created_at/updated_at timestamps."""

    created_at: datetime
    updated_at: datetime


class IDMixin(BaseModel):
    """Mixin for UUID primary key."""

    id: UUID


class AuthorMixin(BaseModel):
    """Display fields of the user who created a row."""

    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None


class ApiResponse(BaseModel, Generic[DataT]):
    """Success envelope wrapped around every response body."""

    status: Literal["success"] = "success"
    data: DataT | None = None
    message: str | None = None


class ErrorResponse(BaseModel):
    """Error envelope. 'fail' for client errors, 'error' for server errors."""

    status: Literal["fail", "error"]
    message: str
