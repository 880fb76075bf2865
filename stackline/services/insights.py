"""Insights inside research stacks."""

import logging
from collections.abc import Sequence
from uuid import UUID

from stackline.db.models import Document, Insight, User
from stackline.db.session import transaction
from stackline.errors import ForbiddenError
from stackline.schemas.documents import DocumentRead
from stackline.schemas.insights import InsightRead
from stackline.schemas.tags import TagRead
from stackline.services.base import BaseService, author_fields, require_text

logger = logging.getLogger(__name__)


class InsightService(BaseService):
    def __init__(self, session):
        super().__init__(session)
        self.insights = self.access.insights

    async def create_insight(self, stack_id: UUID, user_id: UUID, content: str) -> Insight:
        content = require_text(content, "Insight content is required")
        await self.access.require_stack(stack_id, user_id)

        async with transaction(self.session):
            insight = await self.insights.insert(stack_id=stack_id, content=content, created_by=user_id)
        logger.info("Created insight %s in stack %s", insight.id, stack_id)
        return insight

    async def list_insights(
        self,
        stack_id: UUID,
        user_id: UUID,
        tag_ids: Sequence[UUID] = (),
        search: str | None = None,
    ) -> list[InsightRead]:
        """
        Insights of a stack, oldest first, each with author, tags and
        linked documents.

        tag_ids matches insights carrying any of the tags. search is a
        case-insensitive substring match on the content.
        """
        await self.access.require_stack(stack_id, user_id)
        rows = await self.insights.find_by_stack(stack_id, tag_ids=tag_ids, search=search)
        return await self.enrich(rows)

    async def search_insights(self, stack_id: UUID, user_id: UUID, query: str) -> list[InsightRead]:
        return await self.list_insights(stack_id, user_id, search=query)

    async def update_insight(self, insight_id: UUID, user_id: UUID, content: str) -> Insight:
        content = require_text(content, "Insight content is required")
        insight, project = await self.access.require_insight(insight_id, user_id)
        if insight.created_by != user_id and project.owner_id != user_id:
            raise ForbiddenError("You can only edit your own insights or be the project owner")

        async with transaction(self.session):
            insight = await self.insights.update(insight, content=content)
        logger.info("Updated insight %s", insight_id)
        return insight

    async def delete_insight(self, insight_id: UUID, user_id: UUID) -> None:
        insight, project = await self.access.require_insight(insight_id, user_id)
        if insight.created_by != user_id and project.owner_id != user_id:
            raise ForbiddenError("You can only delete your own insights or be the project owner")

        async with transaction(self.session):
            await self.insights.delete(insight_id)
        logger.info("Deleted insight %s", insight_id)

    # -------------------------------------------------------------------------
    # Linked document (at most one per insight)
    # -------------------------------------------------------------------------

    async def add_document(self, insight_id: UUID, document_id: UUID, user_id: UUID) -> None:
        """Link a document, replacing whatever the insight linked before."""
        await self.access.require_insight(insight_id, user_id)
        await self.access.require_document(document_id, user_id)

        async with transaction(self.session):
            await self.insights.unlink_documents(insight_id)
            await self.insights.link_document(insight_id, document_id)
        logger.info("Linked document %s to insight %s", document_id, insight_id)

    async def remove_document(self, insight_id: UUID, document_id: UUID, user_id: UUID) -> None:
        await self.access.require_insight(insight_id, user_id)
        async with transaction(self.session):
            await self.insights.unlink_documents(insight_id, document_id)

    async def get_documents(self, insight_id: UUID, user_id: UUID) -> list[Document]:
        await self.access.require_insight(insight_id, user_id)
        documents = await self.insights.documents_for([insight_id])
        return documents.get(insight_id, [])

    async def enrich(self, rows: list[tuple[Insight, User]]) -> list[InsightRead]:
        """Read models with author, tags and linked documents filled in."""
        ids = [insight.id for insight, _ in rows]
        tags = await self.insights.tags_for(ids)
        documents = await self.insights.documents_for(ids)
        return [
            InsightRead.model_validate(insight).model_copy(
                update={
                    **author_fields(author),
                    "tags": [TagRead.model_validate(tag) for tag in tags.get(insight.id, [])],
                    "documents": [
                        DocumentRead.model_validate(document)
                        for document in documents.get(insight.id, [])
                    ],
                }
            )
            for insight, author in rows
        ]
