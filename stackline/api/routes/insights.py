"""Insight routes, including the insight's linked document."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from stackline.api.deps import CurrentUser, Insights
from stackline.api.responses import success
from stackline.schemas.base import ApiResponse
from stackline.schemas.documents import DocumentRead
from stackline.schemas.insights import InsightCreate, InsightRead, InsightUpdate

router = APIRouter(prefix="/insights", tags=["insights"])


@router.get("/stack/{stack_id}", response_model=ApiResponse[list[InsightRead]])
async def list_insights(
    stack_id: UUID,
    current_user: CurrentUser,
    insights: Insights,
    tag_ids: Annotated[list[UUID] | None, Query(alias="tagIds")] = None,
    search: str | None = None,
):
    """
    List insights of a stack, oldest first.

    Filters:
    - tagIds: insights carrying any of these tags (repeat the parameter)
    - search: case-insensitive match in the content
    """
    items = await insights.list_insights(stack_id, current_user.id, tag_ids=tag_ids or [], search=search)
    return success(items)


@router.post(
    "/stack/{stack_id}",
    response_model=ApiResponse[InsightRead],
    status_code=status.HTTP_201_CREATED,
)
async def create_insight(
    stack_id: UUID,
    data: InsightCreate,
    current_user: CurrentUser,
    insights: Insights,
):
    insight = await insights.create_insight(stack_id, current_user.id, data.content)
    return success(InsightRead.model_validate(insight), "Insight created successfully")


@router.get("/stack/{stack_id}/search", response_model=ApiResponse[list[InsightRead]])
async def search_insights(
    stack_id: UUID,
    current_user: CurrentUser,
    insights: Insights,
    q: str = "",
):
    return success(await insights.search_insights(stack_id, current_user.id, q))


@router.put("/{insight_id}", response_model=ApiResponse[InsightRead])
async def update_insight(
    insight_id: UUID,
    data: InsightUpdate,
    current_user: CurrentUser,
    insights: Insights,
):
    """Creator or project owner only."""
    insight = await insights.update_insight(insight_id, current_user.id, data.content)
    return success(InsightRead.model_validate(insight), "Insight updated successfully")


@router.delete("/{insight_id}", response_model=ApiResponse[None])
async def delete_insight(insight_id: UUID, current_user: CurrentUser, insights: Insights):
    """Creator or project owner only."""
    await insights.delete_insight(insight_id, current_user.id)
    return success(message="Insight deleted successfully")


# =============================================================================
# LINKED DOCUMENT
# =============================================================================


@router.get("/{insight_id}/documents", response_model=ApiResponse[list[DocumentRead]])
async def get_documents(insight_id: UUID, current_user: CurrentUser, insights: Insights):
    documents = await insights.get_documents(insight_id, current_user.id)
    return success([DocumentRead.model_validate(d) for d in documents])


@router.post("/{insight_id}/documents/{document_id}", response_model=ApiResponse[None])
async def add_document(
    insight_id: UUID,
    document_id: UUID,
    current_user: CurrentUser,
    insights: Insights,
):
    """Link a document. Any previously linked document is unlinked."""
    await insights.add_document(insight_id, document_id, current_user.id)
    return success(message="Document linked to insight successfully")


@router.delete("/{insight_id}/documents/{document_id}", response_model=ApiResponse[None])
async def remove_document(
    insight_id: UUID,
    document_id: UUID,
    current_user: CurrentUser,
    insights: Insights,
):
    await insights.remove_document(insight_id, document_id, current_user.id)
    return success(message="Document unlinked from insight successfully")
