"""Research stacks."""

from httpx import AsyncClient

from tests.conftest import create_insight


async def test_create_and_list_stacks(client: AsyncClient, project: dict, owner: dict, collaborator: dict):
    url = f"/stacks/project/{project['id']}"
    response = await client.post(url, json={"topic": "  Market  "}, headers=owner["headers"])
    assert response.status_code == 201
    assert response.json()["data"]["topic"] == "Market"

    response = await client.post(url, json={"topic": "Pricing"}, headers=collaborator["headers"])
    assert response.status_code == 201

    response = await client.get(url, headers=collaborator["headers"])
    assert [s["topic"] for s in response.json()["data"]] == ["Market", "Pricing"]


async def test_duplicate_topic_conflicts_only_within_project(client: AsyncClient, project: dict, owner: dict):
    url = f"/stacks/project/{project['id']}"
    await client.post(url, json={"topic": "Competitors"}, headers=owner["headers"])

    response = await client.post(url, json={"topic": "Competitors"}, headers=owner["headers"])
    assert response.status_code == 409
    assert response.json()["message"] == "A stack with this topic already exists"

    # Topics are case-sensitive
    response = await client.post(url, json={"topic": "competitors"}, headers=owner["headers"])
    assert response.status_code == 201

    response = await client.post("/projects", json={"name": "Other"}, headers=owner["headers"])
    other = response.json()["data"]
    response = await client.post(
        f"/stacks/project/{other['id']}", json={"topic": "Competitors"}, headers=owner["headers"]
    )
    assert response.status_code == 201


async def test_empty_topic_rejected(client: AsyncClient, project: dict, owner: dict):
    response = await client.post(
        f"/stacks/project/{project['id']}", json={"topic": "   "}, headers=owner["headers"]
    )
    assert response.status_code == 400


async def test_outsider_cannot_use_stacks(client: AsyncClient, project: dict, stack: dict, outsider: dict):
    response = await client.post(
        f"/stacks/project/{project['id']}", json={"topic": "Sneaky"}, headers=outsider["headers"]
    )
    assert response.status_code == 404
    assert response.json()["message"] == "Project not found"

    response = await client.get(f"/stacks/project/{project['id']}", headers=outsider["headers"])
    assert response.status_code == 404

    response = await client.get(f"/stacks/{stack['id']}", headers=outsider["headers"])
    assert response.status_code == 404
    assert response.json()["message"] == "Stack not found"


async def test_get_stack_with_insights(client: AsyncClient, stack: dict, owner: dict, collaborator: dict):
    await create_insight(client, stack["id"], owner, "First")
    await create_insight(client, stack["id"], collaborator, "Second")

    response = await client.get(f"/stacks/{stack['id']}", headers=owner["headers"])
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["topic"] == "Competitors"
    assert [i["content"] for i in data["insights"]] == ["First", "Second"]
    assert [i["username"] for i in data["insights"]] == ["alice", "bob"]
    assert data["insights"][1]["first_name"] == "Bob"
