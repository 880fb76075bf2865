"""
Document routes.

PDFs are written under <upload_dir>/documents, then registered with the
service. Documents can be referenced into other projects and stacks
without moving them.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, File, Form, Query, UploadFile, status

from stackline.api.deps import CurrentUser, Documents
from stackline.api.responses import success
from stackline.config import get_settings
from stackline.db.models import Document
from stackline.errors import ValidationError
from stackline.schemas.base import ApiResponse
from stackline.schemas.documents import (
    DocumentRead,
    DocumentReferenceCreate,
    DocumentReferenceRead,
    DocumentUpdate,
)
from stackline.schemas.insights import InsightRead
from stackline.services import DocumentService, FileUpload
from stackline.utils.files import delete_file, get_relative_path, save_upload_file

router = APIRouter(prefix="/documents", tags=["documents"])

TagIdsQuery = Annotated[list[UUID] | None, Query(alias="tagIds")]


async def _store_document(
    documents: DocumentService,
    user_id: UUID,
    upload: UploadFile,
    name: str | None,
    description: str | None,
    *,
    stack_id: UUID | None = None,
    project_id: UUID | None = None,
) -> Document:
    settings = get_settings()
    filename = upload.filename or ""
    if upload.content_type != "application/pdf" or not filename.lower().endswith(".pdf"):
        raise ValidationError("Only PDF documents are allowed")
    if stack_id is not None:
        await documents.access.require_stack(stack_id, user_id)
    else:
        await documents.access.require_access(project_id, user_id)

    upload_root = settings.upload_dir
    path, size = await save_upload_file(upload, upload_root / "documents", settings.max_document_size_bytes)
    try:
        return await documents.create_document(
            user_id,
            FileUpload(
                name=(name or "").strip() or filename,
                file_path=get_relative_path(path, upload_root),
                mime_type=upload.content_type,
                file_size=size,
            ),
            description=description,
            stack_id=stack_id,
            project_id=project_id,
        )
    except Exception:
        await delete_file(path)
        raise


# =============================================================================
# UPLOAD
# =============================================================================


@router.post(
    "/stack/{stack_id}",
    response_model=ApiResponse[DocumentRead],
    status_code=status.HTTP_201_CREATED,
)
async def upload_to_stack(
    stack_id: UUID,
    current_user: CurrentUser,
    documents: Documents,
    document: Annotated[UploadFile, File()],
    name: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
):
    """Upload a PDF (multipart field 'document') into a stack."""
    record = await _store_document(
        documents, current_user.id, document, name, description, stack_id=stack_id
    )
    return success(DocumentRead.model_validate(record), "Document uploaded successfully")


@router.post(
    "/project/{project_id}",
    response_model=ApiResponse[DocumentRead],
    status_code=status.HTTP_201_CREATED,
)
async def upload_to_project(
    project_id: UUID,
    current_user: CurrentUser,
    documents: Documents,
    document: Annotated[UploadFile, File()],
    name: Annotated[str | None, Form()] = None,
    description: Annotated[str | None, Form()] = None,
):
    """Upload a PDF directly into a project, outside any stack."""
    record = await _store_document(
        documents, current_user.id, document, name, description, project_id=project_id
    )
    return success(DocumentRead.model_validate(record), "Document uploaded successfully")


# =============================================================================
# LISTING
# =============================================================================


@router.get("/stack/{stack_id}", response_model=ApiResponse[list[DocumentRead]])
async def list_for_stack(
    stack_id: UUID,
    current_user: CurrentUser,
    documents: Documents,
    tag_ids: TagIdsQuery = None,
):
    return success(
        await documents.list_documents_for_stack(stack_id, current_user.id, tag_ids=tag_ids or [])
    )


@router.get("/project/{project_id}", response_model=ApiResponse[list[DocumentRead]])
async def list_for_project(
    project_id: UUID,
    current_user: CurrentUser,
    documents: Documents,
    tag_ids: TagIdsQuery = None,
):
    """The project's own documents followed by documents referenced into it."""
    return success(
        await documents.list_documents_for_project(project_id, current_user.id, tag_ids=tag_ids or [])
    )


@router.get("/all", response_model=ApiResponse[list[DocumentRead]])
async def list_all(current_user: CurrentUser, documents: Documents, tag_ids: TagIdsQuery = None):
    """Every document homed in a project the current user can access."""
    return success(await documents.list_documents_for_user(current_user.id, tag_ids=tag_ids or []))


# =============================================================================
# SINGLE DOCUMENT
# =============================================================================


@router.get("/{document_id}", response_model=ApiResponse[DocumentRead])
async def get_document(document_id: UUID, current_user: CurrentUser, documents: Documents):
    return success(await documents.get_document(document_id, current_user.id))


@router.put("/{document_id}", response_model=ApiResponse[DocumentRead])
async def update_document(
    document_id: UUID,
    data: DocumentUpdate,
    current_user: CurrentUser,
    documents: Documents,
):
    """Creator only. Name and description."""
    document = await documents.update_document(document_id, current_user.id, data)
    return success(DocumentRead.model_validate(document), "Document updated successfully")


@router.delete("/{document_id}", response_model=ApiResponse[None])
async def delete_document(document_id: UUID, current_user: CurrentUser, documents: Documents):
    """Creator only."""
    document = await documents.delete_document(document_id, current_user.id)
    await delete_file(get_settings().upload_dir / document.file_path)
    return success(message="Document deleted successfully")


# =============================================================================
# REFERENCES
# =============================================================================


@router.get("/{document_id}/references", response_model=ApiResponse[list[DocumentReferenceRead]])
async def get_references(document_id: UUID, current_user: CurrentUser, documents: Documents):
    return success(await documents.get_references(document_id, current_user.id))


@router.post(
    "/{document_id}/references",
    response_model=ApiResponse[DocumentReferenceRead],
    status_code=status.HTTP_201_CREATED,
)
async def add_reference(
    document_id: UUID,
    data: DocumentReferenceCreate,
    current_user: CurrentUser,
    documents: Documents,
):
    """Reference the document into another project, optionally into one of its stacks."""
    reference = await documents.add_reference(
        document_id, data.project_id, data.stack_id, current_user.id
    )
    return success(
        DocumentReferenceRead.model_validate(reference), "Document reference added successfully"
    )


@router.delete("/{document_id}/references", response_model=ApiResponse[None])
async def remove_reference(
    document_id: UUID,
    data: DocumentReferenceCreate,
    current_user: CurrentUser,
    documents: Documents,
):
    """Without stackId every reference in the project is removed."""
    await documents.remove_reference(document_id, data.project_id, data.stack_id, current_user.id)
    return success(message="Document reference removed successfully")


# =============================================================================
# INSIGHTS & TAGS
# =============================================================================


@router.get("/{document_id}/insights", response_model=ApiResponse[list[InsightRead]])
async def get_insights(document_id: UUID, current_user: CurrentUser, documents: Documents):
    return success(await documents.get_insights(document_id, current_user.id))


@router.post("/{document_id}/tags/{tag_id}", response_model=ApiResponse[None])
async def add_tag(document_id: UUID, tag_id: UUID, current_user: CurrentUser, documents: Documents):
    await documents.add_tag(document_id, tag_id, current_user.id)
    return success(message="Tag added to document successfully")


@router.delete("/{document_id}/tags/{tag_id}", response_model=ApiResponse[None])
async def remove_tag(document_id: UUID, tag_id: UUID, current_user: CurrentUser, documents: Documents):
    await documents.remove_tag(document_id, tag_id, current_user.id)
    return success(message="Tag removed from document successfully")
