import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_login_with_pin(client: AsyncClient):
    response = await client.post("/api/v1/auth/login", json={"pin": "2468"})
    assert response.status_code == 200
    data = response.json()
    assert data["access_token"]
    assert data["refresh_token"]
    assert data["token_type"] == "bearer"


@pytest.mark.asyncio
async def test_login_wrong_pin(client: AsyncClient):
    response = await client.post("/api/v1/auth/login", json={"pin": "0000"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid admin pin"


@pytest.mark.asyncio
async def test_refresh_token(client: AsyncClient):
    login = await client.post("/api/v1/auth/login", json={"pin": "2468"})
    response = await client.post(
        "/api/v1/auth/refresh", json={"refresh_token": login.json()["refresh_token"]}
    )
    assert response.status_code == 200
    assert response.json()["access_token"]


@pytest.mark.asyncio
async def test_refresh_rejects_access_token(client: AsyncClient):
    login = await client.post("/api/v1/auth/login", json={"pin": "2468"})
    response = await client.post(
        "/api/v1/auth/refresh", json={"refresh_token": login.json()["access_token"]}
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_admin_routes_require_token(client: AsyncClient):
    for path in ("/api/v1/students", "/api/v1/campaigns", "/api/v1/tours?date=2025-06-10"):
        response = await client.get(path)
        assert response.status_code == 401


@pytest.mark.asyncio
async def test_admin_routes_reject_garbage_token(client: AsyncClient):
    response = await client.get("/api/v1/students", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_admin_open_without_pin(client: AsyncClient, monkeypatch):
    from salon_recruit.config import settings

    monkeypatch.setattr(settings, "ADMIN_PIN", "")
    response = await client.get("/api/v1/campaigns")
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
    assert "x-request-id" in response.headers
