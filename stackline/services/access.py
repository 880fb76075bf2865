"""
Project access evaluation.

A user can see a project when they own it or have a collaborator row for
it. Everything else (stacks, insights, images, documents, tags, chat) is
visible exactly when its project is.

Lookups that fail because the caller cannot see the row raise the same
NotFoundError as lookups of rows that do not exist, so clients cannot
probe for ids. ForbiddenError is reserved for rows the caller can see but
may not change.
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from stackline.db.models import Document, Image, Insight, Project, ResearchStack, Tag
from stackline.errors import ForbiddenError, NotFoundError
from stackline.repositories import (
    DocumentRepository,
    ImageRepository,
    InsightRepository,
    ProjectRepository,
    StackRepository,
    TagRepository,
)


class AccessControl:
    """Access checks bound to one session."""

    def __init__(self, session: AsyncSession):
        self.projects = ProjectRepository(session)
        self.stacks = StackRepository(session)
        self.insights = InsightRepository(session)
        self.images = ImageRepository(session)
        self.documents = DocumentRepository(session)
        self.tags = TagRepository(session)

    async def is_owner(self, project_id: UUID, user_id: UUID) -> bool:
        project = await self.projects.find_by_id(project_id)
        return project is not None and project.owner_id == user_id

    async def has_access(self, project_id: UUID, user_id: UUID) -> bool:
        """Owner or collaborator. False for unknown projects and users."""
        if await self.is_owner(project_id, user_id):
            return True
        return await self.projects.is_collaborator(project_id, user_id)

    async def require_access(self, project_id: UUID, user_id: UUID) -> Project:
        project = await self.projects.find_by_id(project_id)
        if project is None:
            raise NotFoundError("Project not found")
        if project.owner_id != user_id and not await self.projects.is_collaborator(project_id, user_id):
            raise NotFoundError("Project not found")
        return project

    async def require_owner(self, project_id: UUID, user_id: UUID, message: str) -> Project:
        project = await self.require_access(project_id, user_id)
        if project.owner_id != user_id:
            raise ForbiddenError(message)
        return project

    async def require_stack(self, stack_id: UUID, user_id: UUID) -> ResearchStack:
        stack = await self.stacks.find_by_id(stack_id)
        if stack is None or not await self.has_access(stack.project_id, user_id):
            raise NotFoundError("Stack not found")
        return stack

    async def require_insight(self, insight_id: UUID, user_id: UUID) -> tuple[Insight, Project]:
        """The insight and the project it belongs to (through its stack)."""
        insight = await self.insights.find_by_id(insight_id)
        if insight is None:
            raise NotFoundError("Insight not found")
        stack = await self.stacks.find_by_id(insight.stack_id)
        project = await self.projects.find_by_id(stack.project_id) if stack else None
        if project is None or not await self.has_access(project.id, user_id):
            raise NotFoundError("Insight not found")
        return insight, project

    async def require_image(self, image_id: UUID, user_id: UUID) -> Image:
        image = await self.images.find_by_id(image_id)
        if image is None or not await self.has_access(image.project_id, user_id):
            raise NotFoundError("Image not found")
        return image

    async def can_view_document(self, document: Document, user_id: UUID) -> bool:
        """Home project access, or access to any project it is referenced into."""
        if await self.has_access(document.project_id, user_id):
            return True
        for project_id in await self.documents.referenced_project_ids(document.id):
            if await self.has_access(project_id, user_id):
                return True
        return False

    async def require_document(self, document_id: UUID, user_id: UUID) -> Document:
        document = await self.documents.find_by_id(document_id)
        if document is None or not await self.can_view_document(document, user_id):
            raise NotFoundError("Document not found")
        return document

    async def require_tag(self, tag_id: UUID, user_id: UUID) -> Tag:
        tag = await self.tags.find_by_id(tag_id)
        if tag is None or not await self.has_access(tag.project_id, user_id):
            raise NotFoundError("Tag not found")
        return tag
