"""Insights: listing, filters, permissions and the linked document."""

import io

from httpx import AsyncClient

from tests.conftest import create_insight, create_tag


async def upload_pdf(client: AsyncClient, stack_id: str, user: dict, name: str) -> dict:
    response = await client.post(
        f"/documents/stack/{stack_id}",
        files={"document": (f"{name}.pdf", io.BytesIO(b"%PDF-1.4 test"), "application/pdf")},
        data={"name": name},
        headers=user["headers"],
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def test_create_insight(client: AsyncClient, stack: dict, collaborator: dict):
    insight = await create_insight(client, stack["id"], collaborator, "  Competitor X raised $2M  ")
    assert insight["content"] == "Competitor X raised $2M"
    assert insight["created_by"] == collaborator["id"]
    assert insight["tags"] == []


async def test_create_insight_requires_content(client: AsyncClient, stack: dict, owner: dict):
    response = await client.post(
        f"/insights/stack/{stack['id']}", json={"content": "   "}, headers=owner["headers"]
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Insight content is required"


async def test_list_insights_oldest_first_with_authors(client: AsyncClient, stack: dict, owner: dict, collaborator: dict):
    await create_insight(client, stack["id"], owner, "one")
    await create_insight(client, stack["id"], collaborator, "two")

    response = await client.get(f"/insights/stack/{stack['id']}", headers=owner["headers"])
    data = response.json()["data"]
    assert [i["content"] for i in data] == ["one", "two"]
    assert [i["username"] for i in data] == ["alice", "bob"]


async def test_search_is_case_insensitive(client: AsyncClient, stack: dict, owner: dict):
    await create_insight(client, stack["id"], owner, "Pricing is aggressive")
    await create_insight(client, stack["id"], owner, "Strong brand")

    response = await client.get(
        f"/insights/stack/{stack['id']}", params={"search": "PRICING"}, headers=owner["headers"]
    )
    assert [i["content"] for i in response.json()["data"]] == ["Pricing is aggressive"]

    response = await client.get(
        f"/insights/stack/{stack['id']}/search", params={"q": "brand"}, headers=owner["headers"]
    )
    assert [i["content"] for i in response.json()["data"]] == ["Strong brand"]


async def test_search_treats_wildcards_literally(client: AsyncClient, stack: dict, owner: dict):
    await create_insight(client, stack["id"], owner, "100% growth")
    await create_insight(client, stack["id"], owner, "snake_case naming")
    await create_insight(client, stack["id"], owner, "plain")

    url = f"/insights/stack/{stack['id']}"
    response = await client.get(url, params={"search": "%"}, headers=owner["headers"])
    assert [i["content"] for i in response.json()["data"]] == ["100% growth"]

    response = await client.get(url, params={"search": "_"}, headers=owner["headers"])
    assert [i["content"] for i in response.json()["data"]] == ["snake_case naming"]

    response = await client.get(url, params={"search": "\\"}, headers=owner["headers"])
    assert response.json()["data"] == []


async def test_filter_by_any_tag(client: AsyncClient, project: dict, stack: dict, owner: dict):
    first = await create_insight(client, stack["id"], owner, "first")
    second = await create_insight(client, stack["id"], owner, "second")
    await create_insight(client, stack["id"], owner, "untagged")
    red = await create_tag(client, project["id"], owner, "red")
    blue = await create_tag(client, project["id"], owner, "blue")

    await client.post(f"/tags/insight/{first['id']}/tag/{red['id']}", headers=owner["headers"])
    await client.post(f"/tags/insight/{second['id']}/tag/{blue['id']}", headers=owner["headers"])
    await client.post(f"/tags/insight/{second['id']}/tag/{red['id']}", headers=owner["headers"])

    response = await client.get(
        f"/insights/stack/{stack['id']}", params={"tagIds": [red["id"], blue["id"]]}, headers=owner["headers"]
    )
    data = response.json()["data"]
    assert [i["content"] for i in data] == ["first", "second"]
    assert [t["name"] for t in data[1]["tags"]] == ["blue", "red"]

    response = await client.get(
        f"/insights/stack/{stack['id']}", params={"tagIds": blue["id"]}, headers=owner["headers"]
    )
    assert [i["content"] for i in response.json()["data"]] == ["second"]


async def test_update_and_delete_permissions(client: AsyncClient, stack: dict, owner: dict, collaborator: dict):
    own = await create_insight(client, stack["id"], owner, "owner's")
    theirs = await create_insight(client, stack["id"], collaborator, "bob's")

    response = await client.put(
        f"/insights/{own['id']}", json={"content": "edited"}, headers=collaborator["headers"]
    )
    assert response.status_code == 403

    response = await client.put(
        f"/insights/{theirs['id']}", json={"content": "edited by bob"}, headers=collaborator["headers"]
    )
    assert response.status_code == 200
    assert response.json()["data"]["content"] == "edited by bob"

    # The project owner may edit and delete anyone's insight
    response = await client.put(
        f"/insights/{theirs['id']}", json={"content": "edited by alice"}, headers=owner["headers"]
    )
    assert response.status_code == 200

    response = await client.delete(f"/insights/{own['id']}", headers=collaborator["headers"])
    assert response.status_code == 403
    response = await client.delete(f"/insights/{theirs['id']}", headers=owner["headers"])
    assert response.status_code == 200

    response = await client.get(f"/insights/stack/{stack['id']}", headers=owner["headers"])
    assert [i["content"] for i in response.json()["data"]] == ["owner's"]


async def test_outsider_cannot_see_insights(client: AsyncClient, stack: dict, owner: dict, outsider: dict):
    insight = await create_insight(client, stack["id"], owner, "secret")

    response = await client.get(f"/insights/stack/{stack['id']}", headers=outsider["headers"])
    assert response.status_code == 404

    response = await client.delete(f"/insights/{insight['id']}", headers=outsider["headers"])
    assert response.status_code == 404
    assert response.json()["message"] == "Insight not found"


async def test_linking_a_document_replaces_the_previous_one(client: AsyncClient, stack: dict, owner: dict):
    insight = await create_insight(client, stack["id"], owner, "backed by a report")
    d1 = await upload_pdf(client, stack["id"], owner, "report-1")
    d2 = await upload_pdf(client, stack["id"], owner, "report-2")

    response = await client.post(f"/insights/{insight['id']}/documents/{d1['id']}", headers=owner["headers"])
    assert response.status_code == 200
    response = await client.post(f"/insights/{insight['id']}/documents/{d2['id']}", headers=owner["headers"])
    assert response.status_code == 200

    response = await client.get(f"/insights/{insight['id']}/documents", headers=owner["headers"])
    assert [d["id"] for d in response.json()["data"]] == [d2["id"]]

    response = await client.get(f"/insights/stack/{stack['id']}", headers=owner["headers"])
    assert [d["name"] for d in response.json()["data"][0]["documents"]] == ["report-2"]

    response = await client.get(f"/documents/{d2['id']}/insights", headers=owner["headers"])
    assert [i["id"] for i in response.json()["data"]] == [insight["id"]]


async def test_unlinking_a_document(client: AsyncClient, stack: dict, owner: dict):
    insight = await create_insight(client, stack["id"], owner, "backed by a report")
    document = await upload_pdf(client, stack["id"], owner, "report")
    url = f"/insights/{insight['id']}/documents/{document['id']}"

    await client.post(url, headers=owner["headers"])
    response = await client.delete(url, headers=owner["headers"])
    assert response.status_code == 200

    # Unlinking again is not an error
    response = await client.delete(url, headers=owner["headers"])
    assert response.status_code == 200

    response = await client.get(f"/insights/{insight['id']}/documents", headers=owner["headers"])
    assert response.json()["data"] == []
