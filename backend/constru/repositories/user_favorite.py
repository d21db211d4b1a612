"""SQLAlchemy adapter for UserFavoriteRepository."""

from sqlalchemy import delete, func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from constru.domain.ports import UserFavoriteRepository
from constru.models.user_favorite import UserFavorite


class SqlAlchemyUserFavoriteRepository(UserFavoriteRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    def _insert_ignoring_duplicate(self, user_id: str, template_id: str):
        """INSERT ... ON CONFLICT DO NOTHING for the session's dialect."""
        dialect = self.session.get_bind().dialect.name
        insert = sqlite.insert if dialect == "sqlite" else postgresql.insert
        return (
            insert(UserFavorite)
            .values(user_id=user_id, template_id=template_id)
            .on_conflict_do_nothing(index_elements=["user_id", "template_id"])
        )

    async def find_by_user_id(self, user_id: str) -> list[str]:
        r = await self.session.execute(
            select(UserFavorite.template_id)
            .where(UserFavorite.user_id == user_id)
            .order_by(UserFavorite.created_at, UserFavorite.template_id)
        )
        return list(r.scalars().all())

    async def add_favorite(self, user_id: str, template_id: str) -> None:
        await self.session.execute(self._insert_ignoring_duplicate(user_id, template_id))

    async def remove_favorite(self, user_id: str, template_id: str) -> None:
        await self.session.execute(
            delete(UserFavorite).where(
                UserFavorite.user_id == user_id,
                UserFavorite.template_id == template_id,
            )
        )

    async def is_favorite(self, user_id: str, template_id: str) -> bool:
        r = await self.session.execute(
            select(func.count()).select_from(UserFavorite).where(
                UserFavorite.user_id == user_id,
                UserFavorite.template_id == template_id,
            )
        )
        return r.scalar_one() > 0

    async def get_favorite_count(self, template_id: str) -> int:
        r = await self.session.execute(
            select(func.count()).select_from(UserFavorite).where(UserFavorite.template_id == template_id)
        )
        return int(r.scalar_one())

    async def toggle_favorite(self, user_id: str, template_id: str) -> bool:
        deleted = await self.session.execute(
            delete(UserFavorite).where(
                UserFavorite.user_id == user_id,
                UserFavorite.template_id == template_id,
            )
        )
        if deleted.rowcount > 0:
            return False
        # Losing a concurrent insert race still leaves the pair favorited
        await self.session.execute(self._insert_ignoring_duplicate(user_id, template_id))
        return True
