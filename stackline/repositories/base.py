"""
Generic repository over one SQLAlchemy model.

Repositories only talk to the session: they never commit (see
stackline.db.session.transaction) and never check access. A unique
constraint violation on flush surfaces as DuplicateRecordError so services
can turn it into a Conflict.
"""

import logging
from collections import defaultdict
from collections.abc import Iterable, Sequence
from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import ColumnElement, delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from stackline.db.base import Base
from stackline.db.models import Tag
from stackline.errors import DuplicateRecordError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


def is_unique_violation(exc: IntegrityError) -> bool:
    """True for unique/primary key violations on PostgreSQL and SQLite."""
    text = str(exc.orig).lower()
    return "unique" in text or "duplicate" in text


class BaseRepository(Generic[ModelT]):
    """CRUD over a single table."""

    model: type[ModelT]

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_by_id(self, id: UUID) -> ModelT | None:
        return await self.session.get(self.model, id)

    async def find(self, *conditions: ColumnElement[bool], order_by: Any = None) -> list[ModelT]:
        query = select(self.model).where(*conditions)
        if order_by is not None:
            query = query.order_by(order_by)
        result = await self.session.execute(query)
        return list(result.scalars())

    async def find_one(self, *conditions: ColumnElement[bool]) -> ModelT | None:
        result = await self.session.execute(select(self.model).where(*conditions).limit(1))
        return result.scalars().first()

    async def exists(self, *conditions: ColumnElement[bool]) -> bool:
        return await self.find_one(*conditions) is not None

    async def insert(self, **values: Any) -> ModelT:
        instance = self.model(**values)
        self.session.add(instance)
        await self._flush()
        return instance

    async def update(self, instance: ModelT, **patch: Any) -> ModelT:
        for key, value in patch.items():
            setattr(instance, key, value)
        await self._flush()
        return instance

    async def delete(self, id: UUID) -> int:
        return await self.delete_where(self.model.id == id)

    async def delete_where(self, *conditions: ColumnElement[bool]) -> int:
        result = await self.session.execute(delete(self.model).where(*conditions))
        return result.rowcount

    async def _flush(self) -> None:
        try:
            await self.session.flush()
        except IntegrityError as exc:
            if is_unique_violation(exc):
                logger.info("Unique constraint rejected write to %s", self.model.__tablename__)
                raise DuplicateRecordError() from exc
            raise


class TaggedRepositoryMixin:
    """
    Tag join-table helpers for a taggable aggregate.

    Mixed into a BaseRepository subclass that names the join model and its
    item foreign key, e.g. tag_link_model = InsightTag, tag_link_key = "insight_id".
    """

    session: AsyncSession
    tag_link_model: type[Base]
    tag_link_key: str

    @property
    def _item_column(self):
        return getattr(self.tag_link_model, self.tag_link_key)

    def tagged_with(self, tag_ids: Sequence[UUID]):
        """Subquery of item ids carrying any of the given tags."""
        return select(self._item_column).where(self.tag_link_model.tag_id.in_(tag_ids))

    async def has_tag(self, item_id: UUID, tag_id: UUID) -> bool:
        result = await self.session.execute(
            select(self.tag_link_model).where(
                self._item_column == item_id,
                self.tag_link_model.tag_id == tag_id,
            )
        )
        return result.first() is not None

    async def add_tag(self, item_id: UUID, tag_id: UUID) -> None:
        self.session.add(self.tag_link_model(**{self.tag_link_key: item_id, "tag_id": tag_id}))
        await self._flush()

    async def remove_tag(self, item_id: UUID, tag_id: UUID) -> int:
        result = await self.session.execute(
            delete(self.tag_link_model).where(
                self._item_column == item_id,
                self.tag_link_model.tag_id == tag_id,
            )
        )
        return result.rowcount

    async def tags_for(self, item_ids: Iterable[UUID]) -> dict[UUID, list[Tag]]:
        """Tags grouped by item id, alphabetical within each item."""
        ids = list(item_ids)
        grouped: dict[UUID, list[Tag]] = defaultdict(list)
        if not ids:
            return grouped
        result = await self.session.execute(
            select(self._item_column, Tag)
            .select_from(self.tag_link_model)
            .join(Tag, Tag.id == self.tag_link_model.tag_id)
            .where(self._item_column.in_(ids))
            .order_by(Tag.name)
        )
        for item_id, tag in result.all():
            grouped[item_id].append(tag)
        return grouped
