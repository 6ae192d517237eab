import pytest
from httpx import AsyncClient

from tests.utils.api import EXEC_PATH


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["success"] is True


@pytest.mark.asyncio
async def test_ping_over_get(client: AsyncClient):
    response = await client.get(EXEC_PATH, params={"action": "ping"})

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["message"] == "pong"
    assert "timestamp" in data
    assert data["meta"]["timestamp"] == data["timestamp"]


@pytest.mark.asyncio
async def test_unknown_action(client: AsyncClient):
    response = await client.post(EXEC_PATH, json={"action": "drop_everything"})

    assert response.status_code == 400
    data = response.json()
    assert data["success"] is False
    assert data["code"] == "INVALID_ACTION"
    assert data["status"] == 400


@pytest.mark.asyncio
async def test_missing_action(client: AsyncClient):
    response = await client.get(EXEC_PATH)

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_ACTION"


@pytest.mark.asyncio
async def test_malformed_json(client: AsyncClient):
    response = await client.post(
        EXEC_PATH, content=b'{"action": "ping"', headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_JSON"


@pytest.mark.asyncio
async def test_json_body_must_be_object(client: AsyncClient):
    response = await client.post(EXEC_PATH, json=["ping"])

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_JSON"


@pytest.mark.asyncio
async def test_form_encoded_body(client: AsyncClient, create_account):
    await create_account("sam@raffle.org", "secret123")

    response = await client.post(
        EXEC_PATH,
        data={"action": "login", "email": "sam@raffle.org", "password": "secret123"},
    )

    assert response.status_code == 200
    assert response.json()["token"]


@pytest.mark.asyncio
async def test_query_and_body_are_merged(client: AsyncClient, create_account):
    await create_account("sam@raffle.org", "secret123")

    response = await client.post(
        EXEC_PATH,
        params={"action": "login"},
        json={"email": "sam@raffle.org", "password": "secret123"},
    )

    assert response.status_code == 200
