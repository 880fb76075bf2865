"""Pytest configuration and fixtures."""

import os
import tempfile

# Settings are read on first use, so the environment has to be in place
# before anything from stackline is imported.
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="stackline-uploads-"))
os.environ["DATABASE_URL_OVERRIDE"] = "sqlite+aiosqlite:///:memory:"

import pytest  # noqa: E402
from collections.abc import AsyncGenerator  # noqa: E402
from uuid import UUID  # noqa: E402

from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from stackline.api.deps import create_access_token  # noqa: E402
from stackline.db.session import Database  # noqa: E402
from stackline.main import create_app  # noqa: E402

PASSWORD = "password123"


@pytest.fixture
async def database(tmp_path) -> AsyncGenerator[Database, None]:
    """A fresh SQLite database per test, schema created from the models."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'stackline.db'}")
    await db.create_all()
    yield db
    await db.dispose()


@pytest.fixture
async def session(database: Database) -> AsyncGenerator[AsyncSession, None]:
    async with database.session() as s:
        yield s


@pytest.fixture
async def client(database: Database) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing FastAPI endpoints."""
    app = create_app(database)
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


def auth_headers(user_id: str | UUID) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(UUID(str(user_id)))}"}


async def register_user(client: AsyncClient, username: str, **extra) -> dict:
    """Register through the API; returns the user payload plus auth headers."""
    response = await client.post(
        "/users/register",
        json={
            "email": f"{username}@example.com",
            "username": username,
            "password": PASSWORD,
            **extra,
        },
    )
    assert response.status_code == 201, response.text
    user = response.json()["data"]
    return {**user, "headers": auth_headers(user["id"])}


@pytest.fixture
async def owner(client: AsyncClient) -> dict:
    return await register_user(client, "alice", firstName="Alice", lastName="Owner")


@pytest.fixture
async def collaborator(client: AsyncClient) -> dict:
    return await register_user(client, "bob", firstName="Bob")


@pytest.fixture
async def outsider(client: AsyncClient) -> dict:
    return await register_user(client, "mallory")


@pytest.fixture
async def project(client: AsyncClient, owner: dict, collaborator: dict) -> dict:
    """'Launch', owned by alice, with bob invited as a collaborator."""
    response = await client.post("/projects", json={"name": "Launch"}, headers=owner["headers"])
    assert response.status_code == 201, response.text
    data = response.json()["data"]

    response = await client.post(
        f"/projects/{data['id']}/collaborators",
        json={"email": collaborator["email"]},
        headers=owner["headers"],
    )
    assert response.status_code == 201, response.text
    return data


@pytest.fixture
async def stack(client: AsyncClient, owner: dict, project: dict) -> dict:
    response = await client.post(
        f"/stacks/project/{project['id']}",
        json={"topic": "Competitors"},
        headers=owner["headers"],
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def create_insight(client: AsyncClient, stack_id: str, user: dict, content: str) -> dict:
    response = await client.post(
        f"/insights/stack/{stack_id}", json={"content": content}, headers=user["headers"]
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def create_tag(client: AsyncClient, project_id: str, user: dict, name: str, **colors) -> dict:
    response = await client.post(
        f"/tags/project/{project_id}", json={"name": name, **colors}, headers=user["headers"]
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]
