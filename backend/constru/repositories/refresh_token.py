"""SQLAlchemy adapter for RefreshTokenRepository."""

from datetime import datetime, timezone

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from constru.domain.ports import RefreshTokenRepository
from constru.models.refresh_token import RefreshToken
from constru.schemas.auth import CreateRefreshToken, RefreshTokenRecord


def as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; everything stored is UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SqlAlchemyRefreshTokenRepository(RefreshTokenRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get_row(self, token: str) -> RefreshToken | None:
        r = await self.session.execute(select(RefreshToken).where(RefreshToken.token == token))
        return r.scalar_one_or_none()

    async def find_by_token(self, token: str) -> RefreshTokenRecord | None:
        row = await self._get_row(token)
        return RefreshTokenRecord.model_validate(row) if row else None

    async def create(self, refresh_token: CreateRefreshToken) -> RefreshTokenRecord:
        row = RefreshToken(
            token=refresh_token.token,
            user_id=refresh_token.user_id,
            expires_at=refresh_token.expires_at,
            revoked=refresh_token.revoked,
        )
        self.session.add(row)
        await self.session.flush()
        await self.session.refresh(row)
        return RefreshTokenRecord.model_validate(row)

    async def revoke_by_user_id(self, user_id: str) -> bool:
        result = await self.session.execute(
            update(RefreshToken)
            .where(RefreshToken.user_id == user_id, RefreshToken.revoked.is_(False))
            .values(revoked=True)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount > 0

    async def revoke_by_token(self, token: str) -> bool:
        result = await self.session.execute(
            update(RefreshToken)
            .where(RefreshToken.token == token, RefreshToken.revoked.is_(False))
            .values(revoked=True)
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount > 0

    async def is_token_revoked(self, token: str) -> bool:
        row = await self._get_row(token)
        return row is None or row.revoked

    async def is_token_expired(self, token: str, now: datetime | None = None) -> bool:
        row = await self._get_row(token)
        if row is None:
            return True
        now = now or datetime.now(timezone.utc)
        return as_utc(row.expires_at) <= now
