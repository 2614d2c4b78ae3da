"""Shared fixtures: in-memory SQLite per test, the real app over ASGI."""

import os

# must be set before quickslot.core.config is imported
os.environ["SQL_DSN"] = "sqlite+aiosqlite:///:memory:"
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import timedelta  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from quickslot.core import times  # noqa: E402
from quickslot.db import sql  # noqa: E402


@pytest_asyncio.fixture
async def engine():
    """Fresh schema for every test."""
    eng = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await sql.init_db(eng)
    yield eng
    await eng.dispose()


@pytest.fixture
def sessionmaker(engine):
    return sql.make_sessionmaker(engine)


@pytest_asyncio.fixture
async def session(sessionmaker):
    async with sessionmaker() as s:
        yield s


@pytest_asyncio.fixture
async def client(sessionmaker, monkeypatch):
    """HTTP client against the app; get_session hands out sessions on the test engine."""
    from quickslot.main import app

    monkeypatch.setattr(sql, "AsyncSessionLocal", sessionmaker)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def today():
    return times.today()


@pytest.fixture
def tomorrow(today):
    return today + timedelta(days=1)


async def register_and_login(
    client: AsyncClient,
    *,
    username: str = "dr-smith",
    email: str = "smith@example.com",
    password: str = "secret123",
) -> dict:
    """Register a doctor and return Authorization headers."""
    resp = await client.post(
        "/api/auth/register",
        json={"email": email, "password": password, "username": username},
    )
    assert resp.status_code == 201, resp.text
    resp = await client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


async def complete_profile(client: AsyncClient, headers: dict) -> dict:
    resp = await client.put(
        "/api/doctors/me",
        json={
            "full_name": "Dr. Jane Smith",
            "specialty": "Dermatology",
            "phone": "+1 555 123 4567",
            "bio": "Skin things.",
        },
        headers=headers,
    )
    assert resp.status_code == 200, resp.text
    return resp.json()


@pytest_asyncio.fixture
async def auth_headers(client):
    return await register_and_login(client)


async def make_doctor(session, *, username: str = "dr-who", email: str = "who@example.com"):
    """Insert a principal and its doctor profile directly, then commit."""
    from quickslot.modules.accounts import repository as users_repo
    from quickslot.modules.doctors import repository as doctors_repo

    user = await users_repo.create_user(session, email=email, password_hash="not-a-real-hash")
    doctor = await doctors_repo.create_doctor(
        session, doctor_id=user.id, email=user.email, username=username
    )
    await session.commit()
    return doctor


@pytest_asyncio.fixture
async def doctor(session):
    return await make_doctor(session)
