"""Project tags."""

from uuid import UUID

from stackline.db.models import Tag
from stackline.repositories.base import BaseRepository


class TagRepository(BaseRepository[Tag]):
    model = Tag

    async def find_by_project(self, project_id: UUID) -> list[Tag]:
        return await self.find(Tag.project_id == project_id, order_by=Tag.name)

    async def find_by_name(self, project_id: UUID, name: str) -> Tag | None:
        return await self.find_one(Tag.project_id == project_id, Tag.name == name)
