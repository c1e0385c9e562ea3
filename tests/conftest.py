# tests/conftest.py
import asyncio
import os
from uuid import uuid4

import pytest
from httpx import AsyncClient, ASGITransport

# ---- 測試期環境變數（先於 app 載入）----
os.environ.setdefault("ENV", "test")

from app.main import app  # noqa: E402
from app.db.session import engine  # noqa: E402
from app.models.base import Base  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def create_test_db():
    """測試前重建資料表，測試後 drop_all（用 asyncio.run 避免事件圈衝突）。"""
    async def init_models():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)

    async def drop_models():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        await engine.dispose()

    asyncio.run(init_models())
    yield
    asyncio.run(drop_models())


@pytest.fixture(scope="session")
def anyio_backend():
    """讓 pytest 使用 asyncio event loop。"""
    return "asyncio"


@pytest.fixture
async def client():
    """使用 ASGITransport 直接掛載 app，不需啟動伺服器。"""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


# --- Helpers ---
def new_signup_payload(**overrides):
    """每次產生不重複的 email / phone，測試之間互不干擾"""
    n = uuid4().int
    payload = {
        "name": "Kevin",
        "email": f"user{n % 10**12}@example.com",
        "phone": f"+1{n % 10**10:010d}",
        "password": "MyStrongPass",
    }
    payload.update(overrides)
    return payload


async def signup(client: AsyncClient, **overrides):
    payload = new_signup_payload(**overrides)
    r = await client.post("/auth/signup", json=payload)
    assert r.status_code == 201, r.text
    return payload, r.json()["user"]


async def login(client: AsyncClient, email: str, password: str) -> str:
    r = await client.post("/auth/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    return r.json()["token"]


async def signup_and_login(client: AsyncClient, **overrides):
    """回傳 (user dict, Authorization headers)"""
    payload, user = await signup(client, **overrides)
    token = await login(client, payload["email"], payload["password"])
    return user, {"Authorization": f"Bearer {token}"}
