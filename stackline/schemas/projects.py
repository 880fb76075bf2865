"""Project and collaborator schemas."""

from datetime import date, datetime
from uuid import UUID

from pydantic import EmailStr, Field

from stackline.db.models import CollaboratorRole
from stackline.schemas.base import BaseSchema, IDMixin, TimestampMixin
from stackline.schemas.user import UserSummary


class ProjectCreate(BaseSchema):
    """Schema for creating a project."""

    name: str = Field(..., max_length=255)
    client: str | None = Field(None, max_length=255)
    deadline: date | None = None


class ProjectUpdate(BaseSchema):
    """Schema for updating a project. Only provided fields change."""

    name: str | None = Field(None, max_length=255)
    client: str | None = Field(None, max_length=255)
    deadline: date | None = None


class ProjectRead(IDMixin, TimestampMixin, BaseSchema):
    """Schema for reading project data."""

    name: str
    client: str | None
    deadline: date | None
    owner_id: UUID


class CollaboratorCreate(BaseSchema):
    """Invite a user to a project by email."""

    email: EmailStr
    role: str = CollaboratorRole.COLLABORATOR.value


class CollaboratorRead(BaseSchema):
    """A collaborator: the user's public fields plus the membership row."""

    id: UUID
    email: str
    username: str
    first_name: str | None
    last_name: str | None
    role: str
    invited_by: UUID | None
    created_at: datetime


class ProjectDetail(ProjectRead):
    """Project with its owner and collaborators."""

    owner: UserSummary | None = None
    collaborators: list[CollaboratorRead] = Field(default_factory=list)
