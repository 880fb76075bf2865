"""Tag schemas."""

from uuid import UUID

from pydantic import Field

from stackline.schemas.base import BaseSchema, IDMixin, TimestampMixin


class TagCreate(BaseSchema):
    """Schema for creating a tag. color1 defaults to #007AFF."""

    name: str = Field(..., max_length=100)
    color1: str | None = None
    color2: str | None = None


class TagUpdate(BaseSchema):
    """Schema for updating a tag. All fields optional."""

    name: str | None = Field(None, max_length=100)
    color1: str | None = None
    color2: str | None = None


class TagRead(IDMixin, TimestampMixin, BaseSchema):
    """Schema for reading tag data."""

    project_id: UUID
    name: str
    color1: str
    color2: str | None
    created_by: UUID
