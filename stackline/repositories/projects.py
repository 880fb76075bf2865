"""Projects and their collaborator rows."""

from uuid import UUID

from sqlalchemy import delete, or_, select

from stackline.db.models import Project, ProjectCollaborator, User
from stackline.repositories.base import BaseRepository


class ProjectRepository(BaseRepository[Project]):
    model = Project

    async def find_for_user(self, user_id: UUID) -> list[Project]:
        """Projects the user owns or collaborates on, newest first."""
        collaborating = select(ProjectCollaborator.project_id).where(
            ProjectCollaborator.user_id == user_id
        )
        return await self.find(
            or_(Project.owner_id == user_id, Project.id.in_(collaborating)),
            order_by=Project.created_at.desc(),
        )

    async def project_ids_for_user(self, user_id: UUID) -> list[UUID]:
        projects = await self.find_for_user(user_id)
        return [project.id for project in projects]

    async def is_collaborator(self, project_id: UUID, user_id: UUID) -> bool:
        result = await self.session.execute(
            select(ProjectCollaborator.id).where(
                ProjectCollaborator.project_id == project_id,
                ProjectCollaborator.user_id == user_id,
            )
        )
        return result.first() is not None

    async def get_collaborators(self, project_id: UUID) -> list[tuple[ProjectCollaborator, User]]:
        result = await self.session.execute(
            select(ProjectCollaborator, User)
            .join(User, User.id == ProjectCollaborator.user_id)
            .where(ProjectCollaborator.project_id == project_id)
            .order_by(ProjectCollaborator.created_at)
        )
        return [(row[0], row[1]) for row in result.all()]

    async def add_collaborator(
        self, project_id: UUID, user_id: UUID, invited_by: UUID, role: str
    ) -> ProjectCollaborator:
        collaborator = ProjectCollaborator(
            project_id=project_id, user_id=user_id, invited_by=invited_by, role=role
        )
        self.session.add(collaborator)
        await self._flush()
        return collaborator

    async def remove_collaborator(self, project_id: UUID, user_id: UUID) -> int:
        result = await self.session.execute(
            delete(ProjectCollaborator).where(
                ProjectCollaborator.project_id == project_id,
                ProjectCollaborator.user_id == user_id,
            )
        )
        return result.rowcount
