"""Research stacks."""

from uuid import UUID

from stackline.db.models import ResearchStack
from stackline.repositories.base import BaseRepository


class StackRepository(BaseRepository[ResearchStack]):
    model = ResearchStack

    async def find_by_project(self, project_id: UUID) -> list[ResearchStack]:
        return await self.find(
            ResearchStack.project_id == project_id, order_by=ResearchStack.created_at
        )

    async def find_by_topic(self, project_id: UUID, topic: str) -> ResearchStack | None:
        return await self.find_one(
            ResearchStack.project_id == project_id, ResearchStack.topic == topic
        )
