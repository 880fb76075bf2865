"""Projects and collaborator management."""

import logging
from uuid import UUID

from stackline.db.models import CollaboratorRole, Project
from stackline.db.session import transaction
from stackline.errors import (
    ConflictError,
    DuplicateRecordError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from stackline.repositories import UserRepository
from stackline.schemas.projects import (
    CollaboratorRead,
    ProjectCreate,
    ProjectDetail,
    ProjectRead,
    ProjectUpdate,
)
from stackline.schemas.user import UserSummary
from stackline.services.base import BaseService, require_text

logger = logging.getLogger(__name__)

VALID_ROLES = {role.value for role in CollaboratorRole}


class ProjectService(BaseService):
    def __init__(self, session):
        super().__init__(session)
        self.projects = self.access.projects
        self.users = UserRepository(session)

    async def create_project(self, data: ProjectCreate, owner_id: UUID) -> Project:
        name = require_text(data.name, "Project name is required")
        async with transaction(self.session):
            project = await self.projects.insert(
                name=name,
                client=data.client or None,
                deadline=data.deadline,
                owner_id=owner_id,
            )
        logger.info("Created project %s for user %s", project.id, owner_id)
        return project

    async def list_projects(self, user_id: UUID) -> list[Project]:
        """Owned and collaborating projects, newest first."""
        return await self.projects.find_for_user(user_id)

    async def get_project(self, project_id: UUID, user_id: UUID) -> ProjectDetail:
        project = await self.access.require_access(project_id, user_id)
        owner = await self.users.find_by_id(project.owner_id)
        return ProjectDetail(
            **ProjectRead.model_validate(project).model_dump(),
            owner=UserSummary.model_validate(owner) if owner else None,
            collaborators=await self._collaborators(project_id),
        )

    async def update_project(self, project_id: UUID, user_id: UUID, data: ProjectUpdate) -> Project:
        project = await self.access.require_owner(
            project_id, user_id, "Only the project owner can update project details"
        )
        patch = data.model_dump(exclude_unset=True)
        if "name" in patch:
            patch["name"] = require_text(patch["name"], "Project name is required")

        async with transaction(self.session):
            project = await self.projects.update(project, **patch)
        logger.info("Updated project %s", project_id)
        return project

    async def delete_project(self, project_id: UUID, user_id: UUID) -> None:
        await self.access.require_owner(
            project_id, user_id, "Only the project owner can delete the project"
        )
        async with transaction(self.session):
            await self.projects.delete(project_id)
        logger.info("Deleted project %s", project_id)

    # -------------------------------------------------------------------------
    # Collaborators
    # -------------------------------------------------------------------------

    async def add_collaborator(
        self,
        project_id: UUID,
        user_id: UUID,
        email: str,
        role: str = CollaboratorRole.COLLABORATOR.value,
    ) -> CollaboratorRead:
        await self.access.require_owner(
            project_id, user_id, "Only the project owner can add collaborators"
        )
        if role not in VALID_ROLES:
            raise ValidationError("Role must be one of: " + ", ".join(sorted(VALID_ROLES)))

        invitee = await self.users.find_by_email(email)
        if invitee is None:
            raise NotFoundError("User with this email not found")
        if invitee.id == user_id:
            raise ValidationError("You cannot add yourself as a collaborator")

        conflict = "User is already a collaborator on this project"
        if await self.projects.is_collaborator(project_id, invitee.id):
            raise ConflictError(conflict)

        async with transaction(self.session):
            try:
                collaborator = await self.projects.add_collaborator(
                    project_id, invitee.id, invited_by=user_id, role=role
                )
            except DuplicateRecordError as exc:
                raise ConflictError(conflict) from exc
        logger.info("Added user %s to project %s as %s", invitee.id, project_id, role)

        return CollaboratorRead(
            id=invitee.id,
            email=invitee.email,
            username=invitee.username,
            first_name=invitee.first_name,
            last_name=invitee.last_name,
            role=collaborator.role,
            invited_by=collaborator.invited_by,
            created_at=collaborator.created_at,
        )

    async def remove_collaborator(self, project_id: UUID, user_id: UUID, collaborator_id: UUID) -> None:
        """
        Owners remove anyone but themselves; collaborators can only leave.
        """
        project = await self.access.require_access(project_id, user_id)
        is_owner = project.owner_id == user_id

        if not is_owner and collaborator_id != user_id:
            raise ForbiddenError("You can only remove yourself or be the project owner")
        if is_owner and collaborator_id == user_id:
            raise ValidationError("Project owner cannot remove themselves")

        async with transaction(self.session):
            removed = await self.projects.remove_collaborator(project_id, collaborator_id)
        if not removed:
            raise NotFoundError("User is not a collaborator on this project")
        logger.info("Removed user %s from project %s", collaborator_id, project_id)

    async def get_collaborators(self, project_id: UUID, user_id: UUID) -> list[CollaboratorRead]:
        await self.access.require_access(project_id, user_id)
        return await self._collaborators(project_id)

    async def _collaborators(self, project_id: UUID) -> list[CollaboratorRead]:
        rows = await self.projects.get_collaborators(project_id)
        return [
            CollaboratorRead(
                id=user.id,
                email=user.email,
                username=user.username,
                first_name=user.first_name,
                last_name=user.last_name,
                role=collaborator.role,
                invited_by=collaborator.invited_by,
                created_at=collaborator.created_at,
            )
            for collaborator, user in rows
        ]
