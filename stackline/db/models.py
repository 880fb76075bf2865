"""
SQLAlchemy 2.0 Models for Stackline.

Uses modern declarative syntax with Mapped[] type annotations.
All models use UUID primary keys. Column types are the portable SQLAlchemy
ones so the same models run on PostgreSQL (production) and SQLite (tests).

Ownership: every child row hangs off a project and is removed by
ON DELETE CASCADE when the project goes away.
"""

from datetime import date, datetime, timezone
from enum import Enum as PyEnum
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stackline.db.base import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# ENUMS
# =============================================================================


class CollaboratorRole(str, PyEnum):
    """Role of a collaborator. Informational only; access is owner vs. member."""

    COLLABORATOR = "collaborator"
    VIEWER = "viewer"


class MessageType(str, PyEnum):
    """Kind of chat message."""

    USER = "user"
    SYSTEM = "system"
    COMMAND = "command"


# =============================================================================
# MIXINS
# =============================================================================


class TimestampMixin:
    """created_at/updated_at maintained on every write."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
        nullable=False,
    )


# =============================================================================
# MODELS
# =============================================================================


class User(TimestampMixin, Base):
    """Registered account. Never hard-deleted through the API."""

    __tablename__ = "users"

    id: Mapped[UUID] = mapped_column(Uuid(), primary_key=True, default=uuid4)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    username: Mapped[str] = mapped_column(String(50), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # Relationships
    owned_projects: Mapped[list["Project"]] = relationship(
        "Project", back_populates="owner", passive_deletes=True
    )


class Project(TimestampMixin, Base):
    """
    Top-level collaboration space.

    Exactly one owner. The owner is implicitly a full member and never
    appears in project_collaborators.
    """

    __tablename__ = "projects"

    id: Mapped[UUID] = mapped_column(Uuid(), primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    client: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    deadline: Mapped[Optional[date]] = mapped_column(nullable=True)
    owner_id: Mapped[UUID] = mapped_column(
        Uuid(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Relationships
    owner: Mapped["User"] = relationship("User", back_populates="owned_projects")
    collaborators: Mapped[list["ProjectCollaborator"]] = relationship(
        "ProjectCollaborator", back_populates="project", cascade="all, delete-orphan", passive_deletes=True
    )
    stacks: Mapped[list["ResearchStack"]] = relationship(
        "ResearchStack", back_populates="project", cascade="all, delete-orphan", passive_deletes=True
    )
    tags: Mapped[list["Tag"]] = relationship(
        "Tag", back_populates="project", cascade="all, delete-orphan", passive_deletes=True
    )


class ProjectCollaborator(TimestampMixin, Base):
    """Membership of a non-owner user in a project."""

    __tablename__ = "project_collaborators"
    __table_args__ = (
        UniqueConstraint("project_id", "user_id", name="unique_project_collaborator"),
        CheckConstraint("role IN ('collaborator', 'viewer')", name="valid_role"),
    )

    id: Mapped[UUID] = mapped_column(Uuid(), primary_key=True, default=uuid4)
    project_id: Mapped[UUID] = mapped_column(
        Uuid(), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id: Mapped[UUID] = mapped_column(
        Uuid(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default=CollaboratorRole.COLLABORATOR.value
    )
    invited_by: Mapped[Optional[UUID]] = mapped_column(
        Uuid(), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    # Relationships
    project: Mapped["Project"] = relationship("Project", back_populates="collaborators")
    user: Mapped["User"] = relationship("User", foreign_keys=[user_id])


class ResearchStack(TimestampMixin, Base):
    """Research topic inside a project. Topic is unique per project (case-sensitive)."""

    __tablename__ = "research_stacks"
    __table_args__ = (
        UniqueConstraint("project_id", "topic", name="unique_project_stack_topic"),
    )

    id: Mapped[UUID] = mapped_column(Uuid(), primary_key=True, default=uuid4)
    project_id: Mapped[UUID] = mapped_column(
        Uuid(), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    topic: Mapped[str] = mapped_column(String(255), nullable=False)
    created_by: Mapped[UUID] = mapped_column(
        Uuid(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    # Relationships
    project: Mapped["Project"] = relationship("Project", back_populates="stacks")
    insights: Mapped[list["Insight"]] = relationship(
        "Insight", back_populates="stack", cascade="all, delete-orphan", passive_deletes=True
    )


class Insight(TimestampMixin, Base):
    """
    Free-text finding in a stack.

    Linked to at most one document; the service layer enforces this on top
    of the insight_documents join table.
    """

    __tablename__ = "insights"
    __table_args__ = (Index("idx_insights_stack_created", "stack_id", "created_at"),)

    id: Mapped[UUID] = mapped_column(Uuid(), primary_key=True, default=uuid4)
    stack_id: Mapped[UUID] = mapped_column(
        Uuid(), ForeignKey("research_stacks.id", ondelete="CASCADE"), nullable=False
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_by: Mapped[UUID] = mapped_column(
        Uuid(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    # Relationships
    stack: Mapped["ResearchStack"] = relationship("ResearchStack", back_populates="insights")


class Image(TimestampMixin, Base):
    """Uploaded image. Always belongs to a stack."""

    __tablename__ = "images"
    __table_args__ = (Index("idx_images_stack_created", "stack_id", "created_at"),)

    id: Mapped[UUID] = mapped_column(Uuid(), primary_key=True, default=uuid4)
    project_id: Mapped[UUID] = mapped_column(
        Uuid(), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    stack_id: Mapped[UUID] = mapped_column(
        Uuid(), ForeignKey("research_stacks.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_path: Mapped[str] = mapped_column(String(500), nullable=False)
    thumbnail_path: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    mime_type: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    file_size: Mapped[Optional[int]] = mapped_column(nullable=True)
    created_by: Mapped[UUID] = mapped_column(
        Uuid(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )


class Document(TimestampMixin, Base):
    """
    Uploaded document (PDF).

    Lives in one home project and optionally a stack of it; can be
    referenced into other projects/stacks via document_references.
    """

    __tablename__ = "documents"
    __table_args__ = (
        Index("idx_documents_project_created", "project_id", "created_at"),
        Index("idx_documents_stack_id", "stack_id"),
    )

    id: Mapped[UUID] = mapped_column(Uuid(), primary_key=True, default=uuid4)
    project_id: Mapped[UUID] = mapped_column(
        Uuid(), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    stack_id: Mapped[Optional[UUID]] = mapped_column(
        Uuid(), ForeignKey("research_stacks.id", ondelete="CASCADE"), nullable=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    file_path: Mapped[str] = mapped_column(String(500), nullable=False)
    mime_type: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    file_size: Mapped[Optional[int]] = mapped_column(nullable=True)
    created_by: Mapped[UUID] = mapped_column(
        Uuid(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )


class DocumentReference(TimestampMixin, Base):
    """
    Cross-reference of a document into another project (and optionally a stack).

    The unique constraint does not catch duplicates with a NULL stack_id;
    DocumentService checks for those explicitly.
    """

    __tablename__ = "document_references"
    __table_args__ = (
        UniqueConstraint("document_id", "project_id", "stack_id", name="unique_document_reference"),
        Index("idx_document_references_project", "project_id"),
    )

    id: Mapped[UUID] = mapped_column(Uuid(), primary_key=True, default=uuid4)
    document_id: Mapped[UUID] = mapped_column(
        Uuid(), ForeignKey("documents.id", ondelete="CASCADE"), nullable=False
    )
    project_id: Mapped[UUID] = mapped_column(
        Uuid(), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    stack_id: Mapped[Optional[UUID]] = mapped_column(
        Uuid(), ForeignKey("research_stacks.id", ondelete="CASCADE"), nullable=True
    )
    added_by: Mapped[UUID] = mapped_column(
        Uuid(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )


class Tag(TimestampMixin, Base):
    """Project-scoped label. Name unique per project."""

    __tablename__ = "tags"
    __table_args__ = (
        UniqueConstraint("project_id", "name", name="unique_project_tag_name"),
    )

    id: Mapped[UUID] = mapped_column(Uuid(), primary_key=True, default=uuid4)
    project_id: Mapped[UUID] = mapped_column(
        Uuid(), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    color1: Mapped[str] = mapped_column(String(7), nullable=False, default="#007AFF")
    color2: Mapped[Optional[str]] = mapped_column(String(7), nullable=True)
    created_by: Mapped[UUID] = mapped_column(
        Uuid(), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    # Relationships
    project: Mapped["Project"] = relationship("Project", back_populates="tags")


class InsightTag(Base):
    """Tag attached to an insight."""

    __tablename__ = "insight_tags"

    insight_id: Mapped[UUID] = mapped_column(
        Uuid(), ForeignKey("insights.id", ondelete="CASCADE"), primary_key=True
    )
    tag_id: Mapped[UUID] = mapped_column(
        Uuid(), ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )


class ImageTag(Base):
    """Tag attached to an image."""

    __tablename__ = "image_tags"

    image_id: Mapped[UUID] = mapped_column(
        Uuid(), ForeignKey("images.id", ondelete="CASCADE"), primary_key=True
    )
    tag_id: Mapped[UUID] = mapped_column(
        Uuid(), ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )


class DocumentTag(Base):
    """Tag attached to a document."""

    __tablename__ = "document_tags"

    document_id: Mapped[UUID] = mapped_column(
        Uuid(), ForeignKey("documents.id", ondelete="CASCADE"), primary_key=True
    )
    tag_id: Mapped[UUID] = mapped_column(
        Uuid(), ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )


class InsightDocument(Base):
    """Document linked to an insight."""

    __tablename__ = "insight_documents"

    insight_id: Mapped[UUID] = mapped_column(
        Uuid(), ForeignKey("insights.id", ondelete="CASCADE"), primary_key=True
    )
    document_id: Mapped[UUID] = mapped_column(
        Uuid(), ForeignKey("documents.id", ondelete="CASCADE"), primary_key=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False
    )


class ChatMessage(TimestampMixin, Base):
    """
    Project chat message.

    user_id is NULL for system-generated messages. stack_id scopes the
    message to a stack's chat.
    """

    __tablename__ = "chat_messages"
    __table_args__ = (
        Index("idx_chat_messages_project_created", "project_id", "created_at"),
        CheckConstraint("message_type IN ('user', 'system', 'command')", name="valid_message_type"),
    )

    id: Mapped[UUID] = mapped_column(Uuid(), primary_key=True, default=uuid4)
    project_id: Mapped[UUID] = mapped_column(
        Uuid(), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    stack_id: Mapped[Optional[UUID]] = mapped_column(
        Uuid(), ForeignKey("research_stacks.id", ondelete="CASCADE"), nullable=True, index=True
    )
    user_id: Mapped[Optional[UUID]] = mapped_column(
        Uuid(), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    message: Mapped[str] = mapped_column(Text, nullable=False)
    message_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default=MessageType.USER.value
    )
