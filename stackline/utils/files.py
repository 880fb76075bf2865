"""Local-disk storage for uploaded images and documents."""

import asyncio
import logging
from pathlib import Path
from uuid import uuid4

from fastapi import UploadFile
from PIL import Image, UnidentifiedImageError

from stackline.errors import ValidationError

logger = logging.getLogger(__name__)


async def save_upload_file(upload_file: UploadFile, directory: Path, max_bytes: int) -> tuple[Path, int]:
    """Save an uploaded file with a unique name and return the path and size."""
    content = await upload_file.read()
    if not content:
        raise ValidationError("Uploaded file is empty")
    if len(content) > max_bytes:
        raise ValidationError(f"File exceeds the maximum size of {max_bytes // (1024 * 1024)}MB")

    directory.mkdir(parents=True, exist_ok=True)
    file_extension = Path(upload_file.filename or "").suffix.lower()
    file_path = directory / f"{uuid4()}{file_extension}"
    await asyncio.to_thread(file_path.write_bytes, content)
    return file_path, len(content)


async def delete_file(file_path: Path) -> None:
    """Delete a file if it exists. Failures are logged, not raised."""
    try:
        file_path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Error deleting file %s: %s", file_path, e)


def get_relative_path(absolute_path: Path, base_path: Path) -> str:
    """Path relative to the upload root, as stored in the database and served under /uploads."""
    return Path(absolute_path).absolute().relative_to(Path(base_path).absolute()).as_posix()


def _write_thumbnail(source: Path, size: int) -> Path:
    with Image.open(source) as image:
        image.thumbnail((size, size))
        if image.mode in ("RGBA", "LA", "P"):
            target = source.with_name(f"{source.stem}_thumb.png")
            image.save(target, "PNG")
        else:
            target = source.with_name(f"{source.stem}_thumb.jpg")
            image.convert("RGB").save(target, "JPEG", quality=85)
    return target


async def create_thumbnail(source: Path, size: int) -> Path:
    """
    Write a thumbnail next to the source image, fitting a size x size box.

    Raises ValidationError when Pillow cannot read the image or it exceeds
    the decompression bomb pixel limit.
    """
    try:
        return await asyncio.to_thread(_write_thumbnail, source, size)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        logger.info("Rejected unreadable image %s: %s", source.name, e)
        raise ValidationError("Uploaded file is not a valid image") from e
