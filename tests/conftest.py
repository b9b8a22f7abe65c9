import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ADMIN_PASSWORD", "test-admin-password")
os.environ["LOGIN_RATE_LIMIT_ENABLED"] = "false"

from typing import AsyncGenerator, Dict

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.auth.services import ensure_admin_user
from app.core.config import settings
from app.db.session import Base, enable_sqlite_foreign_keys, get_db
from app.main import app


@pytest.fixture()
async def session_factory(tmp_path) -> AsyncGenerator[async_sessionmaker, None]:
    """Fresh SQLite file per test; every request gets its own session, like production."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield factory
    app.dependency_overrides.clear()
    await engine.dispose()


@pytest.fixture()
async def db_session(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncSession, None]:
    """Session for seeding and inspecting rows directly."""
    async with session_factory() as session:
        yield session


@pytest.fixture()
async def client(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the FastAPI app."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture()
async def auth_headers(client: AsyncClient, db_session: AsyncSession) -> Dict[str, str]:
    await ensure_admin_user(db_session, settings.admin_username, settings.admin_password)
    response = await client.post(
        "/api/auth/login",
        json={"username": settings.admin_username, "password": settings.admin_password},
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['sessionId']}"}


@pytest.fixture()
async def student(client: AsyncClient, auth_headers: Dict[str, str]) -> dict:
    response = await client.post(
        "/api/students",
        json={
            "firstName": "Ada",
            "lastName": "Lovelace",
            "email": "ada@example.com",
            "defaultSubject": "Maths",
            "defaultRate": "30.00",
            "defaultLink": "https://meet.example.com/ada",
        },
        headers=auth_headers,
    )
    assert response.status_code == 201
    return response.json()


async def create_lesson(client: AsyncClient, headers: Dict[str, str], student_id: str, **overrides) -> dict:
    payload = {
        "subject": "Maths",
        "dateTime": "2030-01-08T14:00:00Z",
        "studentId": student_id,
        "pricePerHour": "30.00",
        "duration": 60,
    }
    payload.update(overrides)
    response = await client.post("/api/lessons", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()
