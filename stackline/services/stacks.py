"""Research stacks."""

import logging
from uuid import UUID

from stackline.db.models import ResearchStack
from stackline.db.session import transaction
from stackline.errors import ConflictError, DuplicateRecordError
from stackline.schemas.insights import InsightRead
from stackline.schemas.stacks import StackDetail, StackRead
from stackline.services.base import BaseService, author_fields, require_text

logger = logging.getLogger(__name__)


class StackService(BaseService):
    def __init__(self, session):
        super().__init__(session)
        self.stacks = self.access.stacks
        self.insights = self.access.insights

    async def create_stack(self, project_id: UUID, user_id: UUID, topic: str) -> ResearchStack:
        """Topics are unique per project, compared case-sensitively after trimming."""
        topic = require_text(topic, "Stack topic is required")
        await self.access.require_access(project_id, user_id)

        conflict = "A stack with this topic already exists"
        if await self.stacks.find_by_topic(project_id, topic):
            raise ConflictError(conflict)

        async with transaction(self.session):
            try:
                stack = await self.stacks.insert(project_id=project_id, topic=topic, created_by=user_id)
            except DuplicateRecordError as exc:
                raise ConflictError(conflict) from exc
        logger.info("Created stack %s in project %s", stack.id, project_id)
        return stack

    async def list_stacks(self, project_id: UUID, user_id: UUID) -> list[ResearchStack]:
        await self.access.require_access(project_id, user_id)
        return await self.stacks.find_by_project(project_id)

    async def get_stack_with_insights(self, stack_id: UUID, user_id: UUID) -> StackDetail:
        stack = await self.access.require_stack(stack_id, user_id)
        rows = await self.insights.find_by_stack(stack_id)
        return StackDetail(
            **StackRead.model_validate(stack).model_dump(),
            insights=[
                InsightRead.model_validate(insight).model_copy(update=author_fields(author))
                for insight, author in rows
            ],
        )
