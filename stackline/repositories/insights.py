"""Insights, their tags and their linked documents."""

from collections import defaultdict
from collections.abc import Iterable, Sequence
from uuid import UUID

from sqlalchemy import delete, select

from stackline.db.models import Document, Insight, InsightDocument, InsightTag, ResearchStack, User
from stackline.repositories.base import BaseRepository, TaggedRepositoryMixin


class InsightRepository(TaggedRepositoryMixin, BaseRepository[Insight]):
    model = Insight
    tag_link_model = InsightTag
    tag_link_key = "insight_id"

    async def find_by_stack(
        self,
        stack_id: UUID,
        tag_ids: Sequence[UUID] = (),
        search: str | None = None,
    ) -> list[tuple[Insight, User]]:
        """
        Insights of a stack with their authors, oldest first.

        tag_ids is an any-of filter; search is a case-insensitive substring
        match on the content, with % and _ taken literally.
        """
        query = (
            select(Insight, User)
            .join(User, User.id == Insight.created_by)
            .where(Insight.stack_id == stack_id)
        )
        if tag_ids:
            query = query.where(Insight.id.in_(self.tagged_with(tag_ids)))
        if search and search.strip():
            term = search.strip().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
            query = query.where(Insight.content.ilike(f"%{term}%", escape="\\"))
        query = query.order_by(Insight.created_at)

        result = await self.session.execute(query)
        return [(row[0], row[1]) for row in result.all()]

    async def find_by_document(
        self, document_id: UUID, project_ids: Sequence[UUID]
    ) -> list[tuple[Insight, User]]:
        """Insights that link the given document, limited to stacks of the given projects."""
        if not project_ids:
            return []
        result = await self.session.execute(
            select(Insight, User)
            .join(InsightDocument, InsightDocument.insight_id == Insight.id)
            .join(ResearchStack, ResearchStack.id == Insight.stack_id)
            .join(User, User.id == Insight.created_by)
            .where(
                InsightDocument.document_id == document_id,
                ResearchStack.project_id.in_(project_ids),
            )
            .order_by(Insight.created_at)
        )
        return [(row[0], row[1]) for row in result.all()]

    async def documents_for(self, insight_ids: Iterable[UUID]) -> dict[UUID, list[Document]]:
        ids = list(insight_ids)
        grouped: dict[UUID, list[Document]] = defaultdict(list)
        if not ids:
            return grouped
        result = await self.session.execute(
            select(InsightDocument.insight_id, Document)
            .select_from(InsightDocument)
            .join(Document, Document.id == InsightDocument.document_id)
            .where(InsightDocument.insight_id.in_(ids))
        )
        for insight_id, document in result.all():
            grouped[insight_id].append(document)
        return grouped

    async def link_document(self, insight_id: UUID, document_id: UUID) -> None:
        self.session.add(InsightDocument(insight_id=insight_id, document_id=document_id))
        await self._flush()

    async def unlink_documents(self, insight_id: UUID, document_id: UUID | None = None) -> int:
        """Remove one link, or every link of the insight when document_id is None."""
        query = delete(InsightDocument).where(InsightDocument.insight_id == insight_id)
        if document_id is not None:
            query = query.where(InsightDocument.document_id == document_id)
        result = await self.session.execute(query)
        return result.rowcount
