"""Password hashing, access-token JWTs and opaque refresh tokens."""

import hashlib
import secrets
from datetime import datetime, timezone, timedelta
from typing import Any

import bcrypt
from jose import JWTError, jwt

from constru.config import settings

ACCESS_TOKEN_TYPE = "access"


def hash_password(password: str) -> str:
    """Hash password with bcrypt. Bytes truncated to 72 (bcrypt limit)."""
    pwd_bytes = password.encode("utf-8")[:72]
    return bcrypt.hashpw(pwd_bytes, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    plain_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.checkpw(plain_bytes, password_hash.encode("utf-8"))


def _signing_key_and_algorithm() -> tuple[str, str]:
    if settings.use_rs256:
        return settings.jwt_private_key.strip(), "RS256"
    return settings.secret_key, settings.jwt_algorithm


def _verification_key_and_algorithms() -> tuple[str, list[str]]:
    if settings.use_rs256:
        return settings.jwt_public_key.strip(), ["RS256"]
    return settings.secret_key, [settings.jwt_algorithm]


def create_access_token(user_id: str, email: str, role: str = "client") -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)
    payload = {"sub": str(user_id), "email": email, "role": role, "type": ACCESS_TOKEN_TYPE, "exp": expire}
    key, algorithm = _signing_key_and_algorithm()
    result = jwt.encode(payload, key, algorithm=algorithm)
    return result if isinstance(result, str) else result.decode("utf-8")


def decode_token(token: str) -> dict[str, Any]:
    """Verify signature and expiry. Raises JWTError, also for tokens that are not access tokens."""
    key, algorithms = _verification_key_and_algorithms()
    payload = jwt.decode(token, key, algorithms=algorithms)
    if payload.get("type", ACCESS_TOKEN_TYPE) != ACCESS_TOKEN_TYPE:
        raise JWTError("Not an access token")
    return payload


def create_refresh_token() -> str:
    """New opaque refresh token (plain string; caller stores only its hash)."""
    return secrets.token_urlsafe(32)


def hash_refresh_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def refresh_token_expiry(now: datetime | None = None) -> datetime:
    now = now or datetime.now(timezone.utc)
    return now + timedelta(days=settings.refresh_token_expire_days)
