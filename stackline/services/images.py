"""Stack images."""

import logging
from collections.abc import Sequence
from uuid import UUID

from stackline.db.models import Image
from stackline.db.session import transaction
from stackline.schemas.images import ImageRead
from stackline.schemas.tags import TagRead
from stackline.services.base import BaseService, FileUpload, author_fields, require_text

logger = logging.getLogger(__name__)


class ImageService(BaseService):
    def __init__(self, session):
        super().__init__(session)
        self.images = self.access.images

    async def create_image(self, stack_id: UUID, user_id: UUID, upload: FileUpload) -> Image:
        name = require_text(upload.name, "Image name is required")
        file_path = require_text(upload.file_path, "File path is required")
        stack = await self.access.require_stack(stack_id, user_id)

        async with transaction(self.session):
            image = await self.images.insert(
                project_id=stack.project_id,
                stack_id=stack_id,
                name=name,
                file_path=file_path,
                thumbnail_path=upload.thumbnail_path,
                mime_type=upload.mime_type,
                file_size=upload.file_size,
                created_by=user_id,
            )
        logger.info("Stored image %s in stack %s", image.id, stack_id)
        return image

    async def list_images(
        self, stack_id: UUID, user_id: UUID, tag_ids: Sequence[UUID] = ()
    ) -> list[ImageRead]:
        """Newest first, each with uploader and tags."""
        await self.access.require_stack(stack_id, user_id)
        rows = await self.images.find_by_stack(stack_id, tag_ids=tag_ids)
        tags = await self.images.tags_for(image.id for image, _ in rows)
        return [
            ImageRead.model_validate(image).model_copy(
                update={
                    **author_fields(uploader),
                    "tags": [TagRead.model_validate(tag) for tag in tags.get(image.id, [])],
                }
            )
            for image, uploader in rows
        ]

    async def delete_image(self, image_id: UUID, user_id: UUID) -> Image:
        """Delete the row and hand it back so the caller can remove the files."""
        image = await self.access.require_image(image_id, user_id)
        async with transaction(self.session):
            await self.images.delete(image_id)
        logger.info("Deleted image %s", image_id)
        return image

    async def add_tag(self, image_id: UUID, tag_id: UUID, user_id: UUID) -> None:
        image = await self.access.require_image(image_id, user_id)
        await self._attach_tag(self.images, image.id, image.project_id, tag_id, "image")

    async def remove_tag(self, image_id: UUID, tag_id: UUID, user_id: UUID) -> None:
        await self.access.require_image(image_id, user_id)
        await self._detach_tag(self.images, image_id, tag_id, "image")
