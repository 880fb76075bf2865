"""Research stack routes."""

from uuid import UUID

from fastapi import APIRouter, status

from stackline.api.deps import CurrentUser, Stacks
from stackline.api.responses import success
from stackline.schemas.base import ApiResponse
from stackline.schemas.stacks import StackCreate, StackDetail, StackRead

router = APIRouter(prefix="/stacks", tags=["stacks"])


@router.get("/project/{project_id}", response_model=ApiResponse[list[StackRead]])
async def list_stacks(project_id: UUID, current_user: CurrentUser, stacks: Stacks):
    items = await stacks.list_stacks(project_id, current_user.id)
    return success([StackRead.model_validate(s) for s in items])


@router.post(
    "/project/{project_id}",
    response_model=ApiResponse[StackRead],
    status_code=status.HTTP_201_CREATED,
)
async def create_stack(
    project_id: UUID,
    data: StackCreate,
    current_user: CurrentUser,
    stacks: Stacks,
):
    stack = await stacks.create_stack(project_id, current_user.id, data.topic)
    return success(StackRead.model_validate(stack), "Research stack created successfully")


@router.get("/{stack_id}", response_model=ApiResponse[StackDetail])
async def get_stack(stack_id: UUID, current_user: CurrentUser, stacks: Stacks):
    """Stack with its insights, oldest first."""
    return success(await stacks.get_stack_with_insights(stack_id, current_user.id))
