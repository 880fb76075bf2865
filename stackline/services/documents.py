"""
Documents and cross-project document references.

A document has one home project (and optionally a stack in it) and can be
referenced into any number of other projects or stacks. Anyone who can see
the home project or one of the referencing projects can see the document.
"""

import logging
from collections.abc import Sequence
from uuid import UUID

from stackline.db.models import Document, DocumentReference, User
from stackline.db.session import transaction
from stackline.errors import (
    ConflictError,
    DuplicateRecordError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from stackline.schemas.documents import DocumentRead, DocumentReferenceRead, DocumentUpdate
from stackline.schemas.insights import InsightRead
from stackline.schemas.tags import TagRead
from stackline.services.base import BaseService, FileUpload, author_fields, require_text
from stackline.services.insights import InsightService

logger = logging.getLogger(__name__)


class DocumentService(BaseService):
    def __init__(self, session):
        super().__init__(session)
        self.documents = self.access.documents
        self.stacks = self.access.stacks
        self.projects = self.access.projects

    async def create_document(
        self,
        user_id: UUID,
        upload: FileUpload,
        description: str | None = None,
        stack_id: UUID | None = None,
        project_id: UUID | None = None,
    ) -> Document:
        """
        Store a document in a stack or directly in a project.

        With a stack the home project is the stack's project.
        """
        name = require_text(upload.name, "Document name is required")
        file_path = require_text(upload.file_path, "File path is required")

        if stack_id is not None:
            stack = await self.access.require_stack(stack_id, user_id)
            project_id = stack.project_id
        elif project_id is not None:
            await self.access.require_access(project_id, user_id)
        else:
            raise ValidationError("A stack or project is required")

        async with transaction(self.session):
            document = await self.documents.insert(
                project_id=project_id,
                stack_id=stack_id,
                name=name,
                description=(description or "").strip() or None,
                file_path=file_path,
                mime_type=upload.mime_type,
                file_size=upload.file_size,
                created_by=user_id,
            )
        logger.info("Stored document %s in project %s", document.id, project_id)
        return document

    async def list_documents_for_stack(
        self, stack_id: UUID, user_id: UUID, tag_ids: Sequence[UUID] = ()
    ) -> list[DocumentRead]:
        await self.access.require_stack(stack_id, user_id)
        rows = await self.documents.find_by_stack(stack_id, tag_ids=tag_ids)
        return await self._enrich([(document, uploader, False) for document, uploader in rows])

    async def list_documents_for_project(
        self, project_id: UUID, user_id: UUID, tag_ids: Sequence[UUID] = ()
    ) -> list[DocumentRead]:
        """Home documents followed by referenced ones, deduplicated."""
        await self.access.require_access(project_id, user_id)
        rows = await self.documents.find_by_project(project_id, tag_ids=tag_ids)
        return await self._enrich(rows)

    async def list_documents_for_user(
        self, user_id: UUID, tag_ids: Sequence[UUID] = ()
    ) -> list[DocumentRead]:
        """Every document homed in a project the user can access."""
        project_ids = await self.projects.project_ids_for_user(user_id)
        rows = await self.documents.find_by_projects(project_ids, tag_ids=tag_ids)
        return await self._enrich([(document, uploader, False) for document, uploader in rows])

    async def get_document(self, document_id: UUID, user_id: UUID) -> DocumentRead:
        await self.access.require_document(document_id, user_id)
        document, uploader = await self.documents.find_with_uploader(document_id)
        [read] = await self._enrich([(document, uploader, False)])
        return read

    async def update_document(self, document_id: UUID, user_id: UUID, data: DocumentUpdate) -> Document:
        document = await self.access.require_document(document_id, user_id)
        if document.created_by != user_id:
            raise ForbiddenError("Only the document creator can update this document")

        patch = data.model_dump(exclude_unset=True)
        if "name" in patch:
            patch["name"] = require_text(patch["name"], "Document name is required")
        if "description" in patch:
            patch["description"] = patch["description"] or None

        async with transaction(self.session):
            document = await self.documents.update(document, **patch)
        logger.info("Updated document %s", document_id)
        return document

    async def delete_document(self, document_id: UUID, user_id: UUID) -> Document:
        """Delete the row and hand it back so the caller can remove the file."""
        document = await self.access.require_document(document_id, user_id)
        if document.created_by != user_id:
            raise ForbiddenError("Only the document creator can delete this document")

        async with transaction(self.session):
            await self.documents.delete(document_id)
        logger.info("Deleted document %s", document_id)
        return document

    # -------------------------------------------------------------------------
    # References
    # -------------------------------------------------------------------------

    async def add_reference(
        self, document_id: UUID, project_id: UUID, stack_id: UUID | None, user_id: UUID
    ) -> DocumentReference:
        """
        Reference a visible document into a project the user can access,
        optionally into one of that project's stacks.
        """
        await self.access.require_document(document_id, user_id)
        await self.access.require_access(project_id, user_id)
        if stack_id is not None:
            stack = await self.stacks.find_by_id(stack_id)
            if stack is None or stack.project_id != project_id:
                raise NotFoundError("Stack not found in this project")

        conflict = "This document is already referenced in this project/stack"
        if await self.documents.has_reference(document_id, project_id, stack_id):
            raise ConflictError(conflict)

        async with transaction(self.session):
            try:
                reference = await self.documents.add_reference(
                    document_id, project_id, stack_id, added_by=user_id
                )
            except DuplicateRecordError as exc:
                raise ConflictError(conflict) from exc
        logger.info("Referenced document %s into project %s", document_id, project_id)
        return reference

    async def remove_reference(
        self, document_id: UUID, project_id: UUID, stack_id: UUID | None, user_id: UUID
    ) -> int:
        """
        Remove a reference. Without a stack id every reference of the
        document in the project is removed. Removing nothing is not an error.
        """
        if await self.documents.find_by_id(document_id) is None:
            raise NotFoundError("Document not found")
        await self.access.require_access(project_id, user_id)

        async with transaction(self.session):
            removed = await self.documents.remove_references(document_id, project_id, stack_id)
        logger.info("Removed %s reference(s) of document %s from project %s", removed, document_id, project_id)
        return removed

    async def get_references(self, document_id: UUID, user_id: UUID) -> list[DocumentReferenceRead]:
        await self.access.require_document(document_id, user_id)
        rows = await self.documents.get_references(document_id)
        return [
            DocumentReferenceRead.model_validate(reference).model_copy(
                update={"project_name": project_name, "stack_topic": stack_topic}
            )
            for reference, project_name, stack_topic in rows
        ]

    async def get_insights(self, document_id: UUID, user_id: UUID) -> list[InsightRead]:
        """Insights linking the document, in projects the user can see."""
        await self.access.require_document(document_id, user_id)
        project_ids = await self.projects.project_ids_for_user(user_id)
        insights = InsightService(self.session)
        rows = await insights.insights.find_by_document(document_id, project_ids)
        return await insights.enrich(rows)

    # -------------------------------------------------------------------------
    # Tags
    # -------------------------------------------------------------------------

    async def add_tag(self, document_id: UUID, tag_id: UUID, user_id: UUID) -> None:
        document = await self.access.require_document(document_id, user_id)
        await self._attach_tag(self.documents, document.id, document.project_id, tag_id, "document")

    async def remove_tag(self, document_id: UUID, tag_id: UUID, user_id: UUID) -> None:
        await self.access.require_document(document_id, user_id)
        await self._detach_tag(self.documents, document_id, tag_id, "document")

    async def _enrich(self, rows: list[tuple[Document, User, bool]]) -> list[DocumentRead]:
        tags = await self.documents.tags_for(document.id for document, _, _ in rows)
        return [
            DocumentRead.model_validate(document).model_copy(
                update={
                    **author_fields(uploader),
                    "tags": [TagRead.model_validate(tag) for tag in tags.get(document.id, [])],
                    "is_referenced": is_referenced,
                }
            )
            for document, uploader, is_referenced in rows
        ]
