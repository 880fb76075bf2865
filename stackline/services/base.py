"""Shared service plumbing: session wiring, field checks and tag attachment."""

import logging
import re
from dataclasses import dataclass
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from stackline.db.models import User
from stackline.db.session import transaction
from stackline.errors import ConflictError, DuplicateRecordError, NotFoundError, ValidationError
from stackline.repositories import TagRepository
from stackline.repositories.base import TaggedRepositoryMixin
from stackline.services.access import AccessControl

logger = logging.getLogger(__name__)

HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


@dataclass(frozen=True)
class FileUpload:
    """A file already written to disk by the API layer."""

    name: str
    file_path: str
    mime_type: str | None
    file_size: int | None
    thumbnail_path: str | None = None


def require_text(value: str | None, message: str) -> str:
    """Trimmed value, or ValidationError when it is missing or blank."""
    if value is None or not value.strip():
        raise ValidationError(message)
    return value.strip()


def author_fields(user: User | None) -> dict[str, Any]:
    if user is None:
        return {"username": None, "first_name": None, "last_name": None}
    return {"username": user.username, "first_name": user.first_name, "last_name": user.last_name}


class BaseService:
    """Holds the request session, the access evaluator and the tag repository."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.access = AccessControl(session)
        self.tags = TagRepository(session)

    async def _attach_tag(
        self,
        repository: TaggedRepositoryMixin,
        item_id: UUID,
        project_id: UUID,
        tag_id: UUID,
        label: str,
    ) -> None:
        """
        Attach a tag to an already-authorized item.

        The tag must belong to the item's project. A second attachment of
        the same tag is a ConflictError, whether caught by the pre-check or
        by the join table's primary key.
        """
        tag = await self.tags.find_by_id(tag_id)
        if tag is None:
            raise NotFoundError("Tag not found")
        if tag.project_id != project_id:
            raise NotFoundError("Tag not found in this project")

        conflict = f"Tag is already assigned to this {label}"
        if await repository.has_tag(item_id, tag_id):
            raise ConflictError(conflict)

        async with transaction(self.session):
            try:
                await repository.add_tag(item_id, tag_id)
            except DuplicateRecordError as exc:
                raise ConflictError(conflict) from exc
        logger.info("Tag %s attached to %s %s", tag_id, label, item_id)

    async def _detach_tag(
        self, repository: TaggedRepositoryMixin, item_id: UUID, tag_id: UUID, label: str
    ) -> None:
        """Detach a tag. Detaching a tag that is not attached is a no-op."""
        async with transaction(self.session):
            removed = await repository.remove_tag(item_id, tag_id)
        if removed:
            logger.info("Tag %s detached from %s %s", tag_id, label, item_id)
