"""Shared fixtures: a throwaway SQLite database, sessions and an API client."""
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./ecogest_test.db")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-testing-only")
os.environ.setdefault("CACHE_ENABLED", "false")
os.environ.setdefault("AUTH_EMAIL_DOMAIN", "ecogest.app")

import httpx  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402

from ecogest.core.database import get_db  # noqa: E402
from ecogest.main import app  # noqa: E402
from ecogest.models import Base, School  # noqa: E402


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'ecogest.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
async def school(db):
    school = School(
        name="Ecole Best",
        email="contact@ecolebest.sn",
        school_suffix="ecole_best",
        academic_year="2024/2025",
    )
    db.add(school)
    await db.commit()
    await db.refresh(school)
    return school


@pytest.fixture
def registration():
    return {
        "school": {
            "name": "Ecole Best",
            "email": "contact@ecolebest.sn",
            "school_suffix": "ecole_best",
        },
        "admin": {
            "email": "Directeur@EcoleBest.sn",
            "password": "admin-password",
            "first_name": "Awa",
            "last_name": "Diop",
        },
    }


@pytest.fixture
async def admin(client, registration):
    """Register a school through the API and log its administrator in."""
    response = await client.post("/api/v1/schools/register", json=registration)
    assert response.status_code == 201
    login = await client.post("/api/v1/auth/login", json={
        "identifier": registration["admin"]["email"],
        "password": registration["admin"]["password"],
    })
    assert login.status_code == 200
    return {
        "headers": {"Authorization": f"Bearer {login.json()['access_token']}"},
        "school_id": response.json()["school"]["id"],
        "admin_id": response.json()["admin_id"],
    }
