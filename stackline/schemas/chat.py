"""Chat schemas."""

from typing import Any, Literal
from uuid import UUID

from pydantic import AliasChoices, Field

from stackline.schemas.base import BaseSchema, IDMixin, TimestampMixin


class ChatMessageCreate(BaseSchema):
    """A chat message; slash commands are recognised from the text."""

    message: str = Field(..., min_length=1)
    stack_id: UUID | None = Field(None, validation_alias=AliasChoices("stack_id", "stackId"))


class ChatMessageRead(IDMixin, TimestampMixin, BaseSchema):
    """Chat message with sender display fields (None for system messages)."""

    project_id: UUID
    stack_id: UUID | None
    user_id: UUID | None
    message: str
    message_type: str
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None


class ImageUploadRequest(BaseSchema):
    """Returned for /image: the client should upload into this stack."""

    stack_id: UUID
    name: str


class ChatResult(BaseSchema):
    """Outcome of sending a message."""

    type: Literal["message", "stack_created", "insight_created", "image_upload_requested"]
    data: Any
