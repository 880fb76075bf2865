"""Image uploads, thumbnails and image tags."""

import io
from uuid import uuid4

from httpx import AsyncClient
from PIL import Image

from stackline.config import get_settings
from tests.conftest import create_tag


def png_bytes(size: tuple[int, int] = (800, 600)) -> io.BytesIO:
    buffer = io.BytesIO()
    Image.new("RGB", size, color=(255, 59, 48)).save(buffer, "PNG")
    buffer.seek(0)
    return buffer


async def upload_image(client: AsyncClient, stack_id: str, user: dict, name: str | None = None):
    data = {"name": name} if name else {}
    return await client.post(
        f"/images/stack/{stack_id}",
        files={"image": ("photo.png", png_bytes(), "image/png")},
        data=data,
        headers=user["headers"],
    )


async def test_upload_image_creates_thumbnail(client: AsyncClient, stack: dict, collaborator: dict):
    response = await upload_image(client, stack["id"], collaborator, "Storefront")
    assert response.status_code == 201
    image = response.json()["data"]
    assert image["name"] == "Storefront"
    assert image["project_id"] == stack["project_id"]
    assert image["mime_type"] == "image/png"
    assert image["file_path"].startswith("images/")

    upload_dir = get_settings().upload_dir
    assert (upload_dir / image["file_path"]).exists()
    with Image.open(upload_dir / image["thumbnail_path"]) as thumbnail:
        assert max(thumbnail.size) <= get_settings().thumbnail_size


async def test_upload_defaults_name_to_filename(client: AsyncClient, stack: dict, owner: dict):
    response = await upload_image(client, stack["id"], owner)
    assert response.json()["data"]["name"] == "photo.png"


async def test_upload_rejects_non_images(client: AsyncClient, stack: dict, owner: dict):
    response = await client.post(
        f"/images/stack/{stack['id']}",
        files={"image": ("notes.txt", io.BytesIO(b"hello"), "text/plain")},
        headers=owner["headers"],
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Only image files are allowed"

    response = await client.post(
        f"/images/stack/{stack['id']}",
        files={"image": ("broken.png", io.BytesIO(b"not really a png"), "image/png")},
        headers=owner["headers"],
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Uploaded file is not a valid image"


async def test_outsider_upload_leaves_no_file(client: AsyncClient, stack: dict, outsider: dict):
    images_dir = get_settings().upload_dir / "images"
    before = set(images_dir.iterdir()) if images_dir.exists() else set()

    response = await upload_image(client, stack["id"], outsider)
    assert response.status_code == 404

    after = set(images_dir.iterdir()) if images_dir.exists() else set()
    assert after == before


async def test_stack_access_is_checked_before_decoding(client: AsyncClient, stack: dict, outsider: dict):
    # An unreadable file would be a 400 if it got as far as Pillow
    response = await client.post(
        f"/images/stack/{stack['id']}",
        files={"image": ("broken.png", io.BytesIO(b"not really a png"), "image/png")},
        headers=outsider["headers"],
    )
    assert response.status_code == 404
    assert response.json()["message"] == "Stack not found"

    response = await upload_image(client, str(uuid4()), outsider)
    assert response.status_code == 404
    assert response.json()["message"] == "Stack not found"


async def test_upload_rejects_oversized_dimensions(client: AsyncClient, stack: dict, owner: dict, monkeypatch):
    # 800x600 is more than twice this limit, which Pillow refuses to open
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)
    images_dir = get_settings().upload_dir / "images"
    before = set(images_dir.iterdir()) if images_dir.exists() else set()

    response = await upload_image(client, stack["id"], owner)
    assert response.status_code == 400
    assert response.json()["message"] == "Uploaded file is not a valid image"

    after = set(images_dir.iterdir()) if images_dir.exists() else set()
    assert after == before


async def test_list_images_newest_first(client: AsyncClient, project: dict, stack: dict, owner: dict):
    await upload_image(client, stack["id"], owner, "first")
    await upload_image(client, stack["id"], owner, "second")

    response = await client.get(f"/images/stack/{stack['id']}", headers=owner["headers"])
    data = response.json()["data"]
    assert [i["name"] for i in data] == ["second", "first"]
    assert data[0]["username"] == "alice"


async def test_image_tags(client: AsyncClient, project: dict, stack: dict, owner: dict):
    response = await upload_image(client, stack["id"], owner, "tagged")
    tagged = response.json()["data"]
    await upload_image(client, stack["id"], owner, "plain")
    tag = await create_tag(client, project["id"], owner, "logo")
    url = f"/images/{tagged['id']}/tags/{tag['id']}"

    response = await client.post(url, headers=owner["headers"])
    assert response.status_code == 200
    response = await client.post(url, headers=owner["headers"])
    assert response.status_code == 409
    assert response.json()["message"] == "Tag is already assigned to this image"

    response = await client.get(
        f"/images/stack/{stack['id']}", params={"tagIds": tag["id"]}, headers=owner["headers"]
    )
    data = response.json()["data"]
    assert [i["name"] for i in data] == ["tagged"]
    assert [t["name"] for t in data[0]["tags"]] == ["logo"]

    response = await client.delete(url, headers=owner["headers"])
    assert response.status_code == 200
    response = await client.delete(url, headers=owner["headers"])
    assert response.status_code == 200


async def test_delete_image_removes_files(client: AsyncClient, stack: dict, owner: dict, outsider: dict):
    response = await upload_image(client, stack["id"], owner, "doomed")
    image = response.json()["data"]
    upload_dir = get_settings().upload_dir

    response = await client.delete(f"/images/{image['id']}", headers=outsider["headers"])
    assert response.status_code == 404
    assert response.json()["message"] == "Image not found"

    response = await client.delete(f"/images/{image['id']}", headers=owner["headers"])
    assert response.status_code == 200
    assert not (upload_dir / image["file_path"]).exists()
    assert not (upload_dir / image["thumbnail_path"]).exists()

    response = await client.get(f"/images/stack/{stack['id']}", headers=owner["headers"])
    assert response.json()["data"] == []
