"""Chat message log."""

from uuid import UUID

from sqlalchemy import select

from stackline.db.models import ChatMessage, MessageType, User
from stackline.repositories.base import BaseRepository


class ChatMessageRepository(BaseRepository[ChatMessage]):
    model = ChatMessage

    async def find_by_project(
        self, project_id: UUID, stack_id: UUID | None = None
    ) -> list[tuple[ChatMessage, User | None]]:
        """
        Messages oldest first, left-joined with the sender.

        System messages come back with a None sender. With a stack id only
        that stack's messages are returned.
        """
        query = (
            select(ChatMessage, User)
            .outerjoin(User, User.id == ChatMessage.user_id)
            .where(ChatMessage.project_id == project_id)
        )
        if stack_id is not None:
            query = query.where(ChatMessage.stack_id == stack_id)
        query = query.order_by(ChatMessage.created_at)

        result = await self.session.execute(query)
        return [(row[0], row[1]) for row in result.all()]

    async def create_message(
        self,
        project_id: UUID,
        stack_id: UUID | None,
        user_id: UUID | None,
        message: str,
        message_type: MessageType = MessageType.USER,
    ) -> ChatMessage:
        return await self.insert(
            project_id=project_id,
            stack_id=stack_id,
            user_id=user_id,
            message=message,
            message_type=message_type.value,
        )

    async def create_system_message(
        self, project_id: UUID, stack_id: UUID | None, message: str
    ) -> ChatMessage:
        return await self.create_message(project_id, stack_id, None, message, MessageType.SYSTEM)
