"""
Project chat routes.

Messages starting with /stack, /insight or /image are commands; see
stackline.services.commands.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from stackline.api.deps import Chat, CurrentUser
from stackline.api.responses import success
from stackline.schemas.base import ApiResponse
from stackline.schemas.chat import ChatMessageCreate, ChatMessageRead, ChatResult

router = APIRouter(prefix="/chat", tags=["chat"])


@router.get("/project/{project_id}", response_model=ApiResponse[list[ChatMessageRead]])
async def get_messages(
    project_id: UUID,
    current_user: CurrentUser,
    chat: Chat,
    stack_id: Annotated[UUID | None, Query(alias="stackId")] = None,
):
    """Project messages oldest first; with stackId only that stack's chat."""
    return success(await chat.get_messages(project_id, stack_id, current_user.id))


@router.post(
    "/project/{project_id}",
    response_model=ApiResponse[ChatResult],
    status_code=status.HTTP_201_CREATED,
)
async def send_message(
    project_id: UUID,
    data: ChatMessageCreate,
    current_user: CurrentUser,
    chat: Chat,
):
    """
    Send a message.

    The result type tells the client what happened: message,
    stack_created, insight_created or image_upload_requested.
    """
    result = await chat.send_message(project_id, data.stack_id, current_user.id, data.message)
    return success(result)
