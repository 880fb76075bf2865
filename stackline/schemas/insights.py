"""Insight schemas."""

from uuid import UUID

from pydantic import Field

from stackline.schemas.base import AuthorMixin, BaseSchema, IDMixin, TimestampMixin
from stackline.schemas.documents import DocumentRead
from stackline.schemas.tags import TagRead


class InsightCreate(BaseSchema):
    """Schema for creating an insight."""

    content: str


class InsightUpdate(BaseSchema):
    """Schema for updating an insight."""

    content: str


class InsightRead(AuthorMixin, IDMixin, TimestampMixin, BaseSchema):
    """Schema for reading insight data, with author, tags and linked document."""

    stack_id: UUID
    content: str
    created_by: UUID
    tags: list[TagRead] = Field(default_factory=list)
    documents: list[DocumentRead] = Field(default_factory=list)
