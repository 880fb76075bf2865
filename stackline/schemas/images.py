"""Image schemas."""

from uuid import UUID

from pydantic import Field

from stackline.schemas.base import AuthorMixin, BaseSchema, IDMixin, TimestampMixin
from stackline.schemas.tags import TagRead


class ImageRead(AuthorMixin, IDMixin, TimestampMixin, BaseSchema):
    """Schema for reading image data, with uploader and tags."""

    project_id: UUID
    stack_id: UUID
    name: str
    file_path: str
    thumbnail_path: str | None
    mime_type: str | None
    file_size: int | None
    created_by: UUID
    tags: list[TagRead] = Field(default_factory=list)
