"""Research stack schemas."""

from uuid import UUID

from pydantic import Field

from stackline.schemas.base import BaseSchema, IDMixin, TimestampMixin
from stackline.schemas.insights import InsightRead


class StackCreate(BaseSchema):
    """Schema for creating a stack."""

    topic: str = Field(..., max_length=255)


class StackRead(IDMixin, TimestampMixin, BaseSchema):
    """Schema for reading stack data."""

    project_id: UUID
    topic: str
    created_by: UUID


class StackDetail(StackRead):
    """Stack with its insights, oldest first."""

    insights: list[InsightRead] = Field(default_factory=list)
