"""Tests for auth endpoints: register, login, me, refresh rotation, logout."""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient

from constru.core.auth import create_refresh_token, hash_refresh_token
from constru.db.session import async_session_maker
from constru.repositories.refresh_token import SqlAlchemyRefreshTokenRepository
from constru.schemas.auth import CreateRefreshToken


async def _login(client: AsyncClient, email="test@test.com", password="password123") -> dict:
    resp = await client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200
    return resp.json()["data"]


@pytest.mark.asyncio
async def test_register(client: AsyncClient, clean_db):
    resp = await client.post(
        "/api/v1/auth/register",
        json={"email": "NewUser@test.com", "password": "securepass123", "first_name": "Ana"},
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["success"] is True
    assert body["data"]["user"]["email"] == "newuser@test.com"
    assert body["data"]["user"]["first_name"] == "Ana"
    assert body["data"]["user"]["role"] == "client"
    assert body["data"]["token_type"] == "bearer"
    assert body["data"]["refresh_token"]


@pytest.mark.asyncio
async def test_register_duplicate_email(client: AsyncClient, make_user):
    await make_user("dup@test.com")
    resp = await client.post(
        "/api/v1/auth/register",
        json={"email": "dup@test.com", "password": "other"},
    )
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "message": "Email already registered"}


@pytest.mark.asyncio
async def test_register_missing_password_is_validation_error(client: AsyncClient, clean_db):
    resp = await client.post("/api/v1/auth/register", json={"email": "a@test.com", "password": ""})
    assert resp.status_code == 400
    assert resp.json()["success"] is False


@pytest.mark.asyncio
async def test_login(client: AsyncClient, auth_headers: dict):
    data = await _login(client)
    assert data["user"]["email"] == "test@test.com"
    assert data["access_token"]
    assert data["expires_in"] > 0


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, auth_headers: dict):
    resp = await client.post(
        "/api/v1/auth/login",
        json={"email": "test@test.com", "password": "wrong"},
    )
    assert resp.status_code == 401
    assert resp.json()["success"] is False


@pytest.mark.asyncio
async def test_me(client: AsyncClient, auth_headers: dict):
    resp = await client.get("/api/v1/auth/me", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["data"]["email"] == "test@test.com"


@pytest.mark.asyncio
async def test_me_unauthorized(client: AsyncClient):
    resp = await client.get("/api/v1/auth/me")
    assert resp.status_code == 401
    assert resp.json()["success"] is False
    assert resp.json()["message"] == "Not authenticated"


@pytest.mark.asyncio
async def test_me_garbage_token(client: AsyncClient):
    resp = await client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_refresh_rotates_token(client: AsyncClient, auth_headers: dict):
    first = await _login(client)
    resp = await client.post("/api/v1/auth/refresh", json={"refresh_token": first["refresh_token"]})
    assert resp.status_code == 200
    second = resp.json()["data"]
    assert second["refresh_token"] != first["refresh_token"]

    # The presented token was revoked by the rotation
    reuse = await client.post("/api/v1/auth/refresh", json={"refresh_token": first["refresh_token"]})
    assert reuse.status_code == 401

    again = await client.post("/api/v1/auth/refresh", json={"refresh_token": second["refresh_token"]})
    assert again.status_code == 200


@pytest.mark.asyncio
async def test_refresh_unknown_token(client: AsyncClient, clean_db):
    resp = await client.post("/api/v1/auth/refresh", json={"refresh_token": "never-issued"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_refresh_empty_token(client: AsyncClient, clean_db):
    resp = await client.post("/api/v1/auth/refresh", json={"refresh_token": "  "})
    assert resp.status_code == 401
    assert resp.json()["message"] == "Refresh token required"


@pytest.mark.asyncio
async def test_refresh_expired_token(client: AsyncClient, test_user):
    user_id, _, _ = test_user
    plain = create_refresh_token()
    async with async_session_maker() as session:
        await SqlAlchemyRefreshTokenRepository(session).create(
            CreateRefreshToken(
                token=hash_refresh_token(plain),
                user_id=user_id,
                expires_at=datetime.now(timezone.utc) - timedelta(minutes=1),
            )
        )
        await session.commit()
    resp = await client.post("/api/v1/auth/refresh", json={"refresh_token": plain})
    assert resp.status_code == 401
    assert resp.json()["message"] == "Refresh token expired"


@pytest.mark.asyncio
async def test_logout_revokes_refresh_token(client: AsyncClient, auth_headers: dict):
    data = await _login(client)
    resp = await client.post("/api/v1/auth/logout", json={"refresh_token": data["refresh_token"]})
    assert resp.status_code == 200
    assert resp.json()["data"] == {"revoked": True}

    again = await client.post("/api/v1/auth/logout", json={"refresh_token": data["refresh_token"]})
    assert again.json()["data"] == {"revoked": False}

    refresh = await client.post("/api/v1/auth/refresh", json={"refresh_token": data["refresh_token"]})
    assert refresh.status_code == 401


@pytest.mark.asyncio
async def test_logout_all_revokes_every_session(client: AsyncClient, auth_headers: dict):
    phone = await _login(client)
    laptop = await _login(client)

    resp = await client.post("/api/v1/auth/logout-all", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["data"] == {"revoked": True}

    for session in (phone, laptop):
        refresh = await client.post("/api/v1/auth/refresh", json={"refresh_token": session["refresh_token"]})
        assert refresh.status_code == 401

    again = await client.post("/api/v1/auth/logout-all", headers=auth_headers)
    assert again.json()["data"] == {"revoked": False}


@pytest.mark.asyncio
async def test_logout_all_requires_auth(client: AsyncClient, clean_db):
    resp = await client.post("/api/v1/auth/logout-all")
    assert resp.status_code == 401
