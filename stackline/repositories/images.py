"""Images and their tags."""

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import select

from stackline.db.models import Image, ImageTag, User
from stackline.repositories.base import BaseRepository, TaggedRepositoryMixin


class ImageRepository(TaggedRepositoryMixin, BaseRepository[Image]):
    model = Image
    tag_link_model = ImageTag
    tag_link_key = "image_id"

    async def find_by_stack(
        self, stack_id: UUID, tag_ids: Sequence[UUID] = ()
    ) -> list[tuple[Image, User]]:
        """Images of a stack with their uploaders, newest first."""
        query = (
            select(Image, User)
            .join(User, User.id == Image.created_by)
            .where(Image.stack_id == stack_id)
        )
        if tag_ids:
            query = query.where(Image.id.in_(self.tagged_with(tag_ids)))
        query = query.order_by(Image.created_at.desc())

        result = await self.session.execute(query)
        return [(row[0], row[1]) for row in result.all()]
