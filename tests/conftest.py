import os

# Must be set before the settings singleton is imported
os.environ.setdefault("ADMIN_PIN", "2468")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from salon_recruit.config import settings
from salon_recruit.database import get_db
from salon_recruit.dependencies import public_rate_limiter
from salon_recruit.main import create_app
from salon_recruit.models.base import Base
from salon_recruit.outreach.sms import SmsDeliveryError, get_sms_sender

engine = create_async_engine(settings.TEST_DATABASE_URL, echo=False, poolclass=NullPool)
session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class FakeSmsSender:
    """Records every send; numbers listed in ``failing`` are rejected."""

    def __init__(self):
        self.sent: list[tuple[str, str]] = []
        self.failing: dict[str, str] = {}

    async def send(self, to: str, body: str) -> str | None:
        if to in self.failing:
            raise SmsDeliveryError(self.failing[to])
        self.sent.append((to, body))
        return f"SM{len(self.sent):032d}"


@pytest_asyncio.fixture(autouse=True)
async def setup_database():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    public_rate_limiter.reset()
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def override_get_db():
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def db():
    async with session_factory() as session:
        yield session


@pytest.fixture
def sms_sender() -> FakeSmsSender:
    return FakeSmsSender()


@pytest.fixture
def app(sms_sender: FakeSmsSender):
    app = create_app()
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_sms_sender] = lambda: sms_sender
    return app


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


@pytest_asyncio.fixture
async def auth_headers(client: AsyncClient):
    response = await client.post("/api/v1/auth/login", json={"pin": settings.ADMIN_PIN})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest_asyncio.fixture
async def school(client: AsyncClient, auth_headers: dict):
    response = await client.post(
        "/api/v1/schools",
        json={"name": "Lincoln High School", "city": "Phoenix", "state": "AZ"},
        headers=auth_headers,
    )
    assert response.status_code == 201
    return response.json()


@pytest_asyncio.fixture
async def active_campaign(client: AsyncClient, auth_headers: dict):
    response = await client.post(
        "/api/v1/campaigns", json={"name": "Spring 2026 Beauty Recruitment"}, headers=auth_headers
    )
    assert response.status_code == 201
    campaign_id = response.json()["id"]
    response = await client.post(f"/api/v1/campaigns/{campaign_id}/activate", headers=auth_headers)
    assert response.status_code == 200
    return response.json()


@pytest_asyncio.fixture
async def make_student(client: AsyncClient, school: dict, active_campaign: dict):
    """Submit a student through the public kiosk endpoint."""

    async def _make(first_name: str = "Emily", last_name: str = "Garcia", **fields) -> dict:
        payload = {"firstName": first_name, "lastName": last_name, "schoolId": school["id"], "consent": True}
        payload.update(fields)
        response = await client.post("/api/v1/students", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _make


@pytest_asyncio.fixture
async def student(make_student):
    return await make_student(email="emily@example.com", phone="(602) 555-1111")
