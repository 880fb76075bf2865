"""
Image routes.

Uploads are written under <upload_dir>/images with a Pillow thumbnail next
to them once the caller is known to have access to the stack, then
registered with the service. Files are removed again if the service
rejects the upload or when the image is deleted.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, File, Form, Query, UploadFile, status

from stackline.api.deps import CurrentUser, Images
from stackline.api.responses import success
from stackline.config import get_settings
from stackline.errors import ValidationError
from stackline.schemas.base import ApiResponse
from stackline.schemas.images import ImageRead
from stackline.services import FileUpload
from stackline.utils.files import create_thumbnail, delete_file, get_relative_path, save_upload_file

router = APIRouter(prefix="/images", tags=["images"])


@router.post(
    "/stack/{stack_id}",
    response_model=ApiResponse[ImageRead],
    status_code=status.HTTP_201_CREATED,
)
async def upload_image(
    stack_id: UUID,
    current_user: CurrentUser,
    images: Images,
    image: Annotated[UploadFile, File()],
    name: Annotated[str | None, Form()] = None,
):
    """Upload an image (multipart field 'image') into a stack."""
    settings = get_settings()
    if not (image.content_type or "").startswith("image/"):
        raise ValidationError("Only image files are allowed")
    await images.access.require_stack(stack_id, current_user.id)

    upload_root = settings.upload_dir
    path, size = await save_upload_file(image, upload_root / "images", settings.max_image_size_bytes)
    thumbnail = None
    try:
        thumbnail = await create_thumbnail(path, settings.thumbnail_size)
        record = await images.create_image(
            stack_id,
            current_user.id,
            FileUpload(
                name=(name or "").strip() or image.filename or path.name,
                file_path=get_relative_path(path, upload_root),
                mime_type=image.content_type,
                file_size=size,
                thumbnail_path=get_relative_path(thumbnail, upload_root),
            ),
        )
    except Exception:
        await delete_file(path)
        if thumbnail is not None:
            await delete_file(thumbnail)
        raise

    return success(ImageRead.model_validate(record), "Image uploaded successfully")


@router.get("/stack/{stack_id}", response_model=ApiResponse[list[ImageRead]])
async def list_images(
    stack_id: UUID,
    current_user: CurrentUser,
    images: Images,
    tag_ids: Annotated[list[UUID] | None, Query(alias="tagIds")] = None,
):
    """Images of a stack, newest first. tagIds matches any of the tags."""
    return success(await images.list_images(stack_id, current_user.id, tag_ids=tag_ids or []))


@router.delete("/{image_id}", response_model=ApiResponse[None])
async def delete_image(image_id: UUID, current_user: CurrentUser, images: Images):
    image = await images.delete_image(image_id, current_user.id)

    upload_root = get_settings().upload_dir
    await delete_file(upload_root / image.file_path)
    if image.thumbnail_path:
        await delete_file(upload_root / image.thumbnail_path)
    return success(message="Image deleted successfully")


@router.post("/{image_id}/tags/{tag_id}", response_model=ApiResponse[None])
async def add_tag(image_id: UUID, tag_id: UUID, current_user: CurrentUser, images: Images):
    await images.add_tag(image_id, tag_id, current_user.id)
    return success(message="Tag added to image successfully")


@router.delete("/{image_id}/tags/{tag_id}", response_model=ApiResponse[None])
async def remove_tag(image_id: UUID, tag_id: UUID, current_user: CurrentUser, images: Images):
    await images.remove_tag(image_id, tag_id, current_user.id)
    return success(message="Tag removed from image successfully")
