"""Auth: register, login, refresh (rotation), logout, logout everywhere, me."""

import logging
from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from constru.api.deps import CurrentUser, DbSession, get_refresh_token_repository
from constru.config import settings
from constru.core.auth import (
    create_access_token,
    create_refresh_token,
    hash_password,
    hash_refresh_token,
    refresh_token_expiry,
    verify_password,
)
from constru.core.errors import UnauthenticatedError, ValidationError
from constru.domain.ports import RefreshTokenRepository
from constru.models.user import User
from constru.schemas.auth import (
    CreateRefreshToken,
    LoginBody,
    RefreshBody,
    RegisterBody,
    TokenResponse,
    UserOut,
)
from constru.schemas.common import ApiResponse, ok

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])

ACCESS_TOKEN_EXPIRE_SECONDS = settings.access_token_expire_minutes * 60

Tokens = Annotated[RefreshTokenRepository, Depends(get_refresh_token_repository)]


async def _issue_tokens(tokens: RefreshTokenRepository, user: User) -> TokenResponse:
    """New access token plus a refresh token whose hash is stored as a session row."""
    refresh_plain = create_refresh_token()
    await tokens.create(
        CreateRefreshToken(
            token=hash_refresh_token(refresh_plain),
            user_id=user.id,
            expires_at=refresh_token_expiry(),
        )
    )
    return TokenResponse(
        access_token=create_access_token(user.id, user.email, user.role),
        refresh_token=refresh_plain,
        expires_in=ACCESS_TOKEN_EXPIRE_SECONDS,
        user=UserOut.model_validate(user),
    )


@router.post(
    "/register",
    response_model=ApiResponse[TokenResponse],
    status_code=201,
    summary="Register a new user",
    responses={400: {"description": "Email and password required or email already registered"}},
)
async def register(session: DbSession, tokens: Tokens, body: RegisterBody):
    email = (body.email or "").strip().lower()
    if not email or not body.password:
        raise ValidationError("Email and password required")
    r = await session.execute(select(User).where(User.email == email))
    if r.scalar_one_or_none() is not None:
        raise ValidationError("Email already registered")
    user = User(
        email=email,
        password_hash=hash_password(body.password),
        first_name=body.first_name.strip(),
        last_name=body.last_name.strip(),
    )
    try:
        session.add(user)
        await session.flush()
        await session.refresh(user)
    except IntegrityError as e:
        logger.warning("Register IntegrityError: %s", e)
        raise ValidationError("Email already registered") from e
    return ok(await _issue_tokens(tokens, user), "User registered")


@router.post(
    "/login",
    response_model=ApiResponse[TokenResponse],
    summary="Login with email and password",
    responses={401: {"description": "Invalid email or password"}},
)
async def login(session: DbSession, tokens: Tokens, body: LoginBody):
    email = (body.email or "").strip().lower()
    if not email or not body.password:
        raise UnauthenticatedError("Email and password required")
    r = await session.execute(select(User).where(User.email == email))
    user = r.scalar_one_or_none()
    if not user or not user.password_hash or not verify_password(body.password, user.password_hash):
        raise UnauthenticatedError("Invalid email or password")
    if not user.is_active:
        raise UnauthenticatedError("User is deactivated")
    return ok(await _issue_tokens(tokens, user))


@router.post(
    "/refresh",
    response_model=ApiResponse[TokenResponse],
    summary="Exchange refresh token for new access and refresh tokens",
    responses={401: {"description": "Refresh token required, revoked, unknown or expired"}},
)
async def refresh_tokens(session: DbSession, tokens: Tokens, body: RefreshBody):
    """Rotation: the presented token is revoked and a new pair is issued."""
    plain = (body.refresh_token or "").strip()
    if not plain:
        raise UnauthenticatedError("Refresh token required")
    token_hash = hash_refresh_token(plain)
    if await tokens.is_token_revoked(token_hash):
        raise UnauthenticatedError("Invalid or revoked refresh token")
    if await tokens.is_token_expired(token_hash, datetime.now(timezone.utc)):
        raise UnauthenticatedError("Refresh token expired")
    record = await tokens.find_by_token(token_hash)
    if record is None or not await tokens.revoke_by_token(token_hash):
        # Another request rotated the same token first
        raise UnauthenticatedError("Invalid or revoked refresh token")
    user = await session.get(User, record.user_id)
    if not user or not user.is_active:
        raise UnauthenticatedError("User not found")
    return ok(await _issue_tokens(tokens, user))


@router.post(
    "/logout",
    response_model=ApiResponse[dict],
    summary="Revoke one refresh token",
)
async def logout(tokens: Tokens, body: RefreshBody):
    revoked = await tokens.revoke_by_token(hash_refresh_token((body.refresh_token or "").strip()))
    return ok({"revoked": revoked}, "Logged out")


@router.post(
    "/logout-all",
    response_model=ApiResponse[dict],
    summary="Revoke every refresh token of the current user",
    responses={401: {"description": "Not authenticated"}},
)
async def logout_all(user: CurrentUser, tokens: Tokens):
    revoked = await tokens.revoke_by_user_id(user.id)
    logger.info("User %s logged out everywhere (revoked=%s)", user.id, revoked)
    return ok({"revoked": revoked}, "Logged out from all sessions")


@router.get(
    "/me",
    response_model=ApiResponse[UserOut],
    summary="Get current authenticated user",
    responses={401: {"description": "Not authenticated or invalid token"}},
)
async def me(user: CurrentUser):
    return ok(UserOut.model_validate(user))
