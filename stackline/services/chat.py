"""
Project chat with slash commands.

Every call re-checks project access, and that the stack (when given)
belongs to the project, before the message is even parsed. A command's
side effect and the system message announcing it commit together.
"""

import logging
from uuid import UUID

from stackline.db.models import MessageType, ResearchStack
from stackline.db.session import transaction
from stackline.errors import NotFoundError, ValidationError
from stackline.repositories import ChatMessageRepository, UserRepository
from stackline.schemas.chat import ChatMessageRead, ChatResult, ImageUploadRequest
from stackline.schemas.insights import InsightRead
from stackline.schemas.stacks import StackRead
from stackline.services.base import BaseService, author_fields
from stackline.services.commands import (
    ImageCommand,
    InsightCommand,
    PlainMessage,
    StackCommand,
    parse_command,
)
from stackline.services.insights import InsightService
from stackline.services.stacks import StackService

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 50


def insight_preview(content: str) -> str:
    """First 50 characters, with an ellipsis only when something was cut."""
    if len(content) > PREVIEW_LENGTH:
        return content[:PREVIEW_LENGTH] + "..."
    return content


class ChatService(BaseService):
    def __init__(self, session):
        super().__init__(session)
        self.messages = ChatMessageRepository(session)
        self.users = UserRepository(session)
        self.stack_service = StackService(session)
        self.insight_service = InsightService(session)

    async def send_message(
        self, project_id: UUID, stack_id: UUID | None, user_id: UUID, text: str
    ) -> ChatResult:
        await self._check_scope(project_id, stack_id, user_id)
        command = parse_command(text)
        if not isinstance(command, PlainMessage):
            logger.info("%s from user %s in project %s", type(command).__name__, user_id, project_id)

        async with transaction(self.session):
            if isinstance(command, StackCommand):
                stack = await self.stack_service.create_stack(project_id, user_id, command.topic)
                await self.messages.create_system_message(
                    project_id, stack.id, f'Research stack "{stack.topic}" created'
                )
                return ChatResult(type="stack_created", data=StackRead.model_validate(stack))

            if isinstance(command, InsightCommand):
                if stack_id is None:
                    raise ValidationError("You must be in a stack chat to add insights")
                insight = await self.insight_service.create_insight(stack_id, user_id, command.content)
                await self.messages.create_system_message(
                    project_id, stack_id, f'Insight added: "{insight_preview(insight.content)}"'
                )
                return ChatResult(type="insight_created", data=InsightRead.model_validate(insight))

            if isinstance(command, ImageCommand):
                if stack_id is None:
                    raise ValidationError("You must be in a stack chat to add images")
                return ChatResult(
                    type="image_upload_requested",
                    data=ImageUploadRequest(stack_id=stack_id, name=command.name),
                )

            if isinstance(command, PlainMessage):
                message = await self.messages.create_message(
                    project_id, stack_id, user_id, command.text, MessageType.USER
                )
                sender = await self.users.find_by_id(user_id)
                return ChatResult(
                    type="message",
                    data=ChatMessageRead.model_validate(message).model_copy(update=author_fields(sender)),
                )

        raise TypeError(f"Unhandled chat command: {command!r}")

    async def get_messages(
        self, project_id: UUID, stack_id: UUID | None, user_id: UUID
    ) -> list[ChatMessageRead]:
        """Oldest first, with sender display fields (None for system messages)."""
        await self._check_scope(project_id, stack_id, user_id)
        rows = await self.messages.find_by_project(project_id, stack_id)
        return [
            ChatMessageRead.model_validate(message).model_copy(update=author_fields(sender))
            for message, sender in rows
        ]

    async def _check_scope(
        self, project_id: UUID, stack_id: UUID | None, user_id: UUID
    ) -> ResearchStack | None:
        await self.access.require_access(project_id, user_id)
        if stack_id is None:
            return None
        stack = await self.access.stacks.find_by_id(stack_id)
        if stack is None or stack.project_id != project_id:
            raise NotFoundError("Stack not found in this project")
        return stack
