"""Project tags and tagging of insights."""

import logging
from uuid import UUID

from stackline.db.models import Tag
from stackline.db.session import transaction
from stackline.errors import ConflictError, DuplicateRecordError, ValidationError
from stackline.schemas.tags import TagCreate, TagUpdate
from stackline.services.base import HEX_COLOR, BaseService, require_text

logger = logging.getLogger(__name__)

DEFAULT_COLOR = "#007AFF"
DUPLICATE_NAME = "A tag with this name already exists in this project"


def validate_color(value: str | None, field: str) -> str | None:
    if value is None:
        return None
    if not HEX_COLOR.match(value):
        raise ValidationError(f"{field} must be a hex color like #RRGGBB")
    return value


class TagService(BaseService):
    def __init__(self, session):
        super().__init__(session)
        self.insights = self.access.insights

    async def create_tag(self, project_id: UUID, user_id: UUID, data: TagCreate) -> Tag:
        name = require_text(data.name, "Tag name is required")
        color1 = validate_color(data.color1 or DEFAULT_COLOR, "color1")
        color2 = validate_color(data.color2 or None, "color2")
        await self.access.require_access(project_id, user_id)

        if await self.tags.find_by_name(project_id, name):
            raise ConflictError(DUPLICATE_NAME)

        async with transaction(self.session):
            try:
                tag = await self.tags.insert(
                    project_id=project_id,
                    name=name,
                    color1=color1,
                    color2=color2,
                    created_by=user_id,
                )
            except DuplicateRecordError as exc:
                raise ConflictError(DUPLICATE_NAME) from exc
        logger.info("Created tag %s in project %s", tag.id, project_id)
        return tag

    async def list_tags(self, project_id: UUID, user_id: UUID) -> list[Tag]:
        await self.access.require_access(project_id, user_id)
        return await self.tags.find_by_project(project_id)

    async def update_tag(self, tag_id: UUID, user_id: UUID, data: TagUpdate) -> Tag:
        tag = await self.access.require_tag(tag_id, user_id)
        patch = data.model_dump(exclude_unset=True)

        if "name" in patch:
            patch["name"] = require_text(patch["name"], "Tag name is required")
            if patch["name"] != tag.name and await self.tags.find_by_name(tag.project_id, patch["name"]):
                raise ConflictError(DUPLICATE_NAME)
        if "color1" in patch:
            patch["color1"] = validate_color(patch["color1"] or DEFAULT_COLOR, "color1")
        if "color2" in patch:
            patch["color2"] = validate_color(patch["color2"] or None, "color2")

        async with transaction(self.session):
            try:
                tag = await self.tags.update(tag, **patch)
            except DuplicateRecordError as exc:
                raise ConflictError(DUPLICATE_NAME) from exc
        logger.info("Updated tag %s", tag_id)
        return tag

    async def delete_tag(self, tag_id: UUID, user_id: UUID) -> None:
        tag = await self.access.require_tag(tag_id, user_id)
        await self.access.require_owner(tag.project_id, user_id, "Only the project owner can delete tags")

        async with transaction(self.session):
            await self.tags.delete(tag_id)
        logger.info("Deleted tag %s", tag_id)

    async def add_tag_to_insight(self, insight_id: UUID, tag_id: UUID, user_id: UUID) -> None:
        _, project = await self.access.require_insight(insight_id, user_id)
        await self._attach_tag(self.insights, insight_id, project.id, tag_id, "insight")

    async def remove_tag_from_insight(self, insight_id: UUID, tag_id: UUID, user_id: UUID) -> None:
        await self.access.require_insight(insight_id, user_id)
        await self._detach_tag(self.insights, insight_id, tag_id, "insight")
