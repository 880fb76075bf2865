"""Document and document reference schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import AliasChoices, Field

from stackline.schemas.base import AuthorMixin, BaseSchema, IDMixin, TimestampMixin
from stackline.schemas.tags import TagRead


class DocumentRead(AuthorMixin, IDMixin, TimestampMixin, BaseSchema):
    """
    Schema for reading document data.

    is_referenced is True when the document shows up in a project listing
    only through a reference, not because it lives there.
    """

    project_id: UUID
    stack_id: UUID | None
    name: str
    description: str | None
    file_path: str
    mime_type: str | None
    file_size: int | None
    created_by: UUID
    tags: list[TagRead] = Field(default_factory=list)
    is_referenced: bool = False


class DocumentUpdate(BaseSchema):
    """Schema for updating a document. All fields optional."""

    name: str | None = Field(None, max_length=255)
    description: str | None = None


class DocumentReferenceCreate(BaseSchema):
    """Target of a cross-reference. Also the body of reference removal."""

    project_id: UUID = Field(..., validation_alias=AliasChoices("project_id", "projectId"))
    stack_id: UUID | None = Field(None, validation_alias=AliasChoices("stack_id", "stackId"))


class DocumentReferenceRead(IDMixin, BaseSchema):
    """A reference with the target project's name and stack topic."""

    document_id: UUID
    project_id: UUID
    stack_id: UUID | None
    added_by: UUID
    created_at: datetime
    project_name: str | None = None
    stack_topic: str | None = None
