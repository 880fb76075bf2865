"""Documents, their tags and their cross-project references."""

from collections.abc import Sequence
from uuid import UUID

from sqlalchemy import delete, select

from stackline.db.models import (
    Document,
    DocumentReference,
    DocumentTag,
    Project,
    ResearchStack,
    User,
)
from stackline.repositories.base import BaseRepository, TaggedRepositoryMixin


class DocumentRepository(TaggedRepositoryMixin, BaseRepository[Document]):
    model = Document
    tag_link_model = DocumentTag
    tag_link_key = "document_id"

    def _with_uploader(self, tag_ids: Sequence[UUID]):
        query = select(Document, User).join(User, User.id == Document.created_by)
        if tag_ids:
            query = query.where(Document.id.in_(self.tagged_with(tag_ids)))
        return query

    async def find_by_stack(
        self, stack_id: UUID, tag_ids: Sequence[UUID] = ()
    ) -> list[tuple[Document, User]]:
        """Documents homed in a stack, newest first."""
        query = (
            self._with_uploader(tag_ids)
            .where(Document.stack_id == stack_id)
            .order_by(Document.created_at.desc())
        )
        result = await self.session.execute(query)
        return [(row[0], row[1]) for row in result.all()]

    async def find_by_project(
        self, project_id: UUID, tag_ids: Sequence[UUID] = ()
    ) -> list[tuple[Document, User, bool]]:
        """
        Documents visible in a project: its own documents first, then those
        referenced into it. Deduplicated by document id; the flag is True for
        documents that are only there by reference.
        """
        home = await self.session.execute(
            self._with_uploader(tag_ids)
            .where(Document.project_id == project_id)
            .order_by(Document.created_at.desc())
        )
        referenced = await self.session.execute(
            self._with_uploader(tag_ids)
            .join(DocumentReference, DocumentReference.document_id == Document.id)
            .where(DocumentReference.project_id == project_id)
            .order_by(DocumentReference.created_at.desc())
        )

        seen: set[UUID] = set()
        documents: list[tuple[Document, User, bool]] = []
        for rows, is_referenced in ((home.all(), False), (referenced.all(), True)):
            for document, user in rows:
                if document.id in seen:
                    continue
                seen.add(document.id)
                documents.append((document, user, is_referenced))
        return documents

    async def find_by_projects(
        self, project_ids: Sequence[UUID], tag_ids: Sequence[UUID] = ()
    ) -> list[tuple[Document, User]]:
        """Documents homed in any of the given projects, newest first."""
        if not project_ids:
            return []
        query = (
            self._with_uploader(tag_ids)
            .where(Document.project_id.in_(project_ids))
            .order_by(Document.created_at.desc())
        )
        result = await self.session.execute(query)
        return [(row[0], row[1]) for row in result.all()]

    async def find_with_uploader(self, document_id: UUID) -> tuple[Document, User] | None:
        result = await self.session.execute(
            self._with_uploader(()).where(Document.id == document_id)
        )
        row = result.first()
        return (row[0], row[1]) if row else None

    # -------------------------------------------------------------------------
    # References
    # -------------------------------------------------------------------------

    async def referenced_project_ids(self, document_id: UUID) -> list[UUID]:
        result = await self.session.execute(
            select(DocumentReference.project_id)
            .where(DocumentReference.document_id == document_id)
            .distinct()
        )
        return list(result.scalars())

    async def has_reference(
        self, document_id: UUID, project_id: UUID, stack_id: UUID | None
    ) -> bool:
        # NULL never equals NULL in SQL, so the null stack needs IS NULL
        stack_condition = (
            DocumentReference.stack_id.is_(None)
            if stack_id is None
            else DocumentReference.stack_id == stack_id
        )
        result = await self.session.execute(
            select(DocumentReference.id).where(
                DocumentReference.document_id == document_id,
                DocumentReference.project_id == project_id,
                stack_condition,
            )
        )
        return result.first() is not None

    async def add_reference(
        self, document_id: UUID, project_id: UUID, stack_id: UUID | None, added_by: UUID
    ) -> DocumentReference:
        reference = DocumentReference(
            document_id=document_id, project_id=project_id, stack_id=stack_id, added_by=added_by
        )
        self.session.add(reference)
        await self._flush()
        return reference

    async def remove_references(
        self, document_id: UUID, project_id: UUID, stack_id: UUID | None = None
    ) -> int:
        """Without a stack id every reference of the document in the project goes."""
        query = delete(DocumentReference).where(
            DocumentReference.document_id == document_id,
            DocumentReference.project_id == project_id,
        )
        if stack_id is not None:
            query = query.where(DocumentReference.stack_id == stack_id)
        result = await self.session.execute(query)
        return result.rowcount

    async def get_references(
        self, document_id: UUID
    ) -> list[tuple[DocumentReference, str, str | None]]:
        """References with the target project's name and the stack topic (if any)."""
        result = await self.session.execute(
            select(DocumentReference, Project.name, ResearchStack.topic)
            .join(Project, Project.id == DocumentReference.project_id)
            .outerjoin(ResearchStack, ResearchStack.id == DocumentReference.stack_id)
            .where(DocumentReference.document_id == document_id)
            .order_by(DocumentReference.created_at)
        )
        return [(row[0], row[1], row[2]) for row in result.all()]
