"""Tag routes and insight tagging."""

from uuid import UUID

from fastapi import APIRouter, status

from stackline.api.deps import CurrentUser, Tags
from stackline.api.responses import success
from stackline.schemas.base import ApiResponse
from stackline.schemas.tags import TagCreate, TagRead, TagUpdate

router = APIRouter(prefix="/tags", tags=["tags"])


@router.get("/project/{project_id}", response_model=ApiResponse[list[TagRead]])
async def list_tags(project_id: UUID, current_user: CurrentUser, tags: Tags):
    items = await tags.list_tags(project_id, current_user.id)
    return success([TagRead.model_validate(t) for t in items])


@router.post(
    "/project/{project_id}",
    response_model=ApiResponse[TagRead],
    status_code=status.HTTP_201_CREATED,
)
async def create_tag(
    project_id: UUID,
    data: TagCreate,
    current_user: CurrentUser,
    tags: Tags,
):
    """Names are unique per project. Colors are #RRGGBB; color1 defaults to #007AFF."""
    tag = await tags.create_tag(project_id, current_user.id, data)
    return success(TagRead.model_validate(tag), "Tag created successfully")


@router.put("/{tag_id}", response_model=ApiResponse[TagRead])
async def update_tag(tag_id: UUID, data: TagUpdate, current_user: CurrentUser, tags: Tags):
    tag = await tags.update_tag(tag_id, current_user.id, data)
    return success(TagRead.model_validate(tag), "Tag updated successfully")


@router.delete("/{tag_id}", response_model=ApiResponse[None])
async def delete_tag(tag_id: UUID, current_user: CurrentUser, tags: Tags):
    """Project owner only."""
    await tags.delete_tag(tag_id, current_user.id)
    return success(message="Tag deleted successfully")


@router.post("/insight/{insight_id}/tag/{tag_id}", response_model=ApiResponse[None])
async def add_tag_to_insight(
    insight_id: UUID,
    tag_id: UUID,
    current_user: CurrentUser,
    tags: Tags,
):
    await tags.add_tag_to_insight(insight_id, tag_id, current_user.id)
    return success(message="Tag added to insight successfully")


@router.delete("/insight/{insight_id}/tag/{tag_id}", response_model=ApiResponse[None])
async def remove_tag_from_insight(
    insight_id: UUID,
    tag_id: UUID,
    current_user: CurrentUser,
    tags: Tags,
):
    await tags.remove_tag_from_insight(insight_id, tag_id, current_user.id)
    return success(message="Tag removed from insight successfully")
