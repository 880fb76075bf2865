"""Project and collaborator routes."""

from uuid import UUID

from fastapi import APIRouter, status

from stackline.api.deps import CurrentUser, Projects
from stackline.api.responses import success
from stackline.schemas.base import ApiResponse
from stackline.schemas.projects import (
    CollaboratorCreate,
    CollaboratorRead,
    ProjectCreate,
    ProjectDetail,
    ProjectRead,
    ProjectUpdate,
)

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get("", response_model=ApiResponse[list[ProjectRead]])
async def list_projects(current_user: CurrentUser, projects: Projects):
    """Projects the current user owns or collaborates on, newest first."""
    items = await projects.list_projects(current_user.id)
    return success([ProjectRead.model_validate(p) for p in items])


@router.post("", response_model=ApiResponse[ProjectRead], status_code=status.HTTP_201_CREATED)
async def create_project(data: ProjectCreate, current_user: CurrentUser, projects: Projects):
    project = await projects.create_project(data, current_user.id)
    return success(ProjectRead.model_validate(project), "Project created successfully")


@router.get("/{project_id}", response_model=ApiResponse[ProjectDetail])
async def get_project(project_id: UUID, current_user: CurrentUser, projects: Projects):
    """Project with owner and collaborators."""
    return success(await projects.get_project(project_id, current_user.id))


@router.put("/{project_id}", response_model=ApiResponse[ProjectRead])
async def update_project(
    project_id: UUID,
    data: ProjectUpdate,
    current_user: CurrentUser,
    projects: Projects,
):
    """Owner only. Fields left out of the body are not changed."""
    project = await projects.update_project(project_id, current_user.id, data)
    return success(ProjectRead.model_validate(project), "Project updated successfully")


@router.delete("/{project_id}", response_model=ApiResponse[None])
async def delete_project(project_id: UUID, current_user: CurrentUser, projects: Projects):
    """Owner only. Everything in the project goes with it."""
    await projects.delete_project(project_id, current_user.id)
    return success(message="Project deleted successfully")


# =============================================================================
# COLLABORATORS
# =============================================================================


@router.get("/{project_id}/collaborators", response_model=ApiResponse[list[CollaboratorRead]])
async def get_collaborators(project_id: UUID, current_user: CurrentUser, projects: Projects):
    return success(await projects.get_collaborators(project_id, current_user.id))


@router.post(
    "/{project_id}/collaborators",
    response_model=ApiResponse[CollaboratorRead],
    status_code=status.HTTP_201_CREATED,
)
async def add_collaborator(
    project_id: UUID,
    data: CollaboratorCreate,
    current_user: CurrentUser,
    projects: Projects,
):
    """Invite an existing user by email. Owner only."""
    collaborator = await projects.add_collaborator(project_id, current_user.id, data.email, data.role)
    return success(collaborator, "Collaborator added successfully")


@router.delete("/{project_id}/collaborators/{user_id}", response_model=ApiResponse[None])
async def remove_collaborator(
    project_id: UUID,
    user_id: UUID,
    current_user: CurrentUser,
    projects: Projects,
):
    """The owner can remove anyone else; a collaborator can remove only themself."""
    await projects.remove_collaborator(project_id, current_user.id, user_id)
    return success(message="Collaborator removed successfully")
