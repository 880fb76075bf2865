"""Project chat and slash commands."""

from uuid import uuid4

from httpx import AsyncClient


async def send(client: AsyncClient, project_id: str, user: dict, message: str, stack_id: str | None = None):
    body = {"message": message}
    if stack_id is not None:
        body["stackId"] = stack_id
    return await client.post(f"/chat/project/{project_id}", json=body, headers=user["headers"])


async def test_plain_message(client: AsyncClient, project: dict, collaborator: dict):
    response = await send(client, project["id"], collaborator, "hello team")
    assert response.status_code == 201
    result = response.json()["data"]
    assert result["type"] == "message"
    assert result["data"]["message"] == "hello team"
    assert result["data"]["message_type"] == "user"
    assert result["data"]["username"] == "bob"

    response = await client.get(f"/chat/project/{project['id']}", headers=collaborator["headers"])
    messages = response.json()["data"]
    assert [m["message"] for m in messages] == ["hello team"]


async def test_multiline_command_is_a_plain_message(client: AsyncClient, project: dict, owner: dict):
    response = await send(client, project["id"], owner, "/stack Competitors\nand some notes")
    assert response.status_code == 201
    result = response.json()["data"]
    assert result["type"] == "message"
    assert result["data"]["message"] == "/stack Competitors\nand some notes"

    response = await client.get(f"/stacks/project/{project['id']}", headers=owner["headers"])
    assert response.json()["data"] == []


async def test_stack_command_creates_stack_and_system_message(client: AsyncClient, project: dict, collaborator: dict):
    response = await send(client, project["id"], collaborator, "/STACK   Competitors  ")
    assert response.status_code == 201
    result = response.json()["data"]
    assert result["type"] == "stack_created"
    stack = result["data"]
    assert stack["topic"] == "Competitors"
    assert stack["created_by"] == collaborator["id"]

    response = await client.get(
        f"/chat/project/{project['id']}", params={"stackId": stack["id"]}, headers=collaborator["headers"]
    )
    messages = response.json()["data"]
    assert len(messages) == 1
    assert messages[0]["message"] == 'Research stack "Competitors" created'
    assert messages[0]["message_type"] == "system"
    assert messages[0]["user_id"] is None
    assert messages[0]["username"] is None


async def test_duplicate_stack_command_conflicts_without_side_effects(client: AsyncClient, project: dict, owner: dict, stack: dict):
    response = await send(client, project["id"], owner, "/stack Competitors")
    assert response.status_code == 409

    response = await client.get(f"/chat/project/{project['id']}", headers=owner["headers"])
    assert response.json()["data"] == []


async def test_insight_command_requires_stack(client: AsyncClient, project: dict, owner: dict):
    response = await send(client, project["id"], owner, "/insight hello")
    assert response.status_code == 400
    assert response.json()["message"] == "You must be in a stack chat to add insights"


async def test_insight_command_in_stack(client: AsyncClient, project: dict, owner: dict, stack: dict):
    response = await send(client, project["id"], owner, "/insight hello", stack_id=stack["id"])
    assert response.status_code == 201
    result = response.json()["data"]
    assert result["type"] == "insight_created"
    assert result["data"]["content"] == "hello"

    response = await client.get(f"/insights/stack/{stack['id']}", headers=owner["headers"])
    assert [i["content"] for i in response.json()["data"]] == ["hello"]

    response = await client.get(
        f"/chat/project/{project['id']}", params={"stackId": stack["id"]}, headers=owner["headers"]
    )
    messages = response.json()["data"]
    assert len(messages) == 1
    assert 'Insight added: "hello"' in messages[0]["message"]


async def test_insight_preview_is_truncated(client: AsyncClient, project: dict, owner: dict, stack: dict):
    content = "x" * 60
    await send(client, project["id"], owner, f"/insight {content}", stack_id=stack["id"])

    response = await client.get(
        f"/chat/project/{project['id']}", params={"stackId": stack["id"]}, headers=owner["headers"]
    )
    assert response.json()["data"][0]["message"] == f'Insight added: "{"x" * 50}..."'


async def test_image_command(client: AsyncClient, project: dict, owner: dict, stack: dict):
    response = await send(client, project["id"], owner, "/image logo")
    assert response.status_code == 400
    assert response.json()["message"] == "You must be in a stack chat to add images"

    response = await send(client, project["id"], owner, "/image  Logo draft ", stack_id=stack["id"])
    assert response.status_code == 201
    result = response.json()["data"]
    assert result == {
        "type": "image_upload_requested",
        "data": {"stack_id": stack["id"], "name": "Logo draft"},
    }

    # Nothing is persisted for an upload request
    response = await client.get(f"/chat/project/{project['id']}", headers=owner["headers"])
    assert response.json()["data"] == []


async def test_messages_filtered_by_stack(client: AsyncClient, project: dict, owner: dict, stack: dict):
    await send(client, project["id"], owner, "project wide")
    await send(client, project["id"], owner, "in the stack", stack_id=stack["id"])

    response = await client.get(f"/chat/project/{project['id']}", headers=owner["headers"])
    assert [m["message"] for m in response.json()["data"]] == ["project wide", "in the stack"]

    response = await client.get(
        f"/chat/project/{project['id']}", params={"stackId": stack["id"]}, headers=owner["headers"]
    )
    assert [m["message"] for m in response.json()["data"]] == ["in the stack"]


async def test_stack_from_other_project_rejected(client: AsyncClient, project: dict, owner: dict, stack: dict):
    response = await client.post("/projects", json={"name": "Other"}, headers=owner["headers"])
    other = response.json()["data"]

    response = await send(client, other["id"], owner, "/insight misplaced", stack_id=stack["id"])
    assert response.status_code == 404
    assert response.json()["message"] == "Stack not found in this project"

    response = await send(client, project["id"], owner, "hello", stack_id=str(uuid4()))
    assert response.status_code == 404


async def test_outsider_cannot_chat(client: AsyncClient, project: dict, outsider: dict):
    response = await send(client, project["id"], outsider, "/stack Sneaky")
    assert response.status_code == 404
    assert response.json()["message"] == "Project not found"

    response = await client.get(f"/chat/project/{project['id']}", headers=outsider["headers"])
    assert response.status_code == 404


async def test_empty_message_rejected(client: AsyncClient, project: dict, owner: dict):
    response = await send(client, project["id"], owner, "")
    assert response.status_code == 400
