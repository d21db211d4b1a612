"""Pytest configuration and shared fixtures for API and repository tests."""

import os
import tempfile

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import delete

# Set test DB before app imports so config/engine use it
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///" + os.path.join(tempfile.gettempdir(), "constru_test.db"),
)
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("RATE_LIMIT_DEFAULT", "10000/minute")

from constru.core.auth import create_access_token, hash_password
from constru.db.base import Base
from constru.db.session import async_session_maker, engine, init_db
from constru.main import app
from constru.models.calculation_template import CalculationTemplate
from constru.models.user import User


async def _clear_all():
    """Delete all rows in reverse dependency order so tests start clean."""
    async with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            await conn.execute(delete(table))


@pytest_asyncio.fixture
async def ensure_db():
    """Create tables (idempotent; lifespan is not run by ASGITransport)."""
    await init_db()
    yield


@pytest_asyncio.fixture
async def clean_db(ensure_db):
    await _clear_all()
    yield


@pytest_asyncio.fixture
async def client(ensure_db):
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest_asyncio.fixture
async def db_session(clean_db):
    """Session for repository-level tests; committed data is visible to the API."""
    async with async_session_maker() as session:
        yield session
        await session.rollback()


async def _create_user(email: str, password: str = "password123", role: str = "client") -> User:
    async with async_session_maker() as session:
        user = User(email=email, password_hash=hash_password(password), role=role)
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user


async def _create_template(name: str = "Concrete slab volume") -> CalculationTemplate:
    async with async_session_maker() as session:
        template = CalculationTemplate(
            name=name,
            description="Volume of a rectangular slab",
            formula="length * width * thickness",
            nec_reference="NEC-SE-HM",
        )
        session.add(template)
        await session.commit()
        await session.refresh(template)
        return template


@pytest_asyncio.fixture
async def test_user(clean_db, client):
    """Create a user via DB (committed) and return (user_id, email, access_token)."""
    user = await _create_user("test@test.com")
    token = create_access_token(user.id, user.email, user.role)
    return user.id, user.email, token


@pytest_asyncio.fixture
def auth_headers(test_user):
    _, __, token = test_user
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def admin_headers(clean_db):
    admin = await _create_user("admin@test.com", role="admin")
    return {"Authorization": f"Bearer {create_access_token(admin.id, admin.email, admin.role)}"}


@pytest.fixture
def make_user(clean_db):
    """Factory: await make_user(email, password="password123", role="client") -> User (committed)."""
    return _create_user


@pytest.fixture
def make_template(clean_db):
    """Factory: await make_template(name) -> CalculationTemplate (committed)."""
    return _create_template


def bearer(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.email, user.role)}"}


@pytest.fixture
def headers_for():
    return bearer
