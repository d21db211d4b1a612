"""FastAPI dependencies: current user from JWT, role checks, and use case / service wiring."""

from typing import Annotated, Callable

from fastapi import Depends, Request
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from constru.core.auth import decode_token
from constru.core.errors import ForbiddenError, UnauthenticatedError
from constru.db.session import get_db
from constru.models.user import User
from constru.repositories.calculation_template import SqlAlchemyCalculationTemplateRepository
from constru.repositories.refresh_token import SqlAlchemyRefreshTokenRepository
from constru.repositories.user_favorite import SqlAlchemyUserFavoriteRepository
from constru.repositories.user_recommendation import SqlAlchemyUserRecommendationRepository
from constru.services.user_recommendation import UserRecommendationService
from constru.use_cases.favorites import FavoriteTemplateUseCase, GetUserFavoritesUseCase

DbSession = Annotated[AsyncSession, Depends(get_db)]


def _bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return None
    return auth_header[7:].strip() or None


async def get_current_user(request: Request, session: DbSession) -> User:
    token = _bearer_token(request)
    if not token:
        raise UnauthenticatedError("Not authenticated")
    try:
        payload = decode_token(token)
    except JWTError:
        raise UnauthenticatedError("Invalid or expired token") from None
    user_id = payload.get("sub")
    if not user_id:
        raise UnauthenticatedError("Invalid token")
    r = await session.execute(select(User).where(User.id == str(user_id)))
    user = r.scalar_one_or_none()
    if not user:
        raise UnauthenticatedError("User not found")
    if not user.is_active:
        raise UnauthenticatedError("User is deactivated")
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


def require_role(*roles: str) -> Callable:
    """Dependency factory: 403 unless the current user has one of `roles`."""

    async def checker(user: CurrentUser) -> User:
        if user.role not in roles:
            raise ForbiddenError("You do not have permission to access this resource")
        return user

    return checker


def get_refresh_token_repository(session: DbSession) -> SqlAlchemyRefreshTokenRepository:
    return SqlAlchemyRefreshTokenRepository(session)


def get_template_repository(session: DbSession) -> SqlAlchemyCalculationTemplateRepository:
    return SqlAlchemyCalculationTemplateRepository(session)


def get_favorite_repository(session: DbSession) -> SqlAlchemyUserFavoriteRepository:
    return SqlAlchemyUserFavoriteRepository(session)


def get_favorite_template_use_case(
    templates: Annotated[SqlAlchemyCalculationTemplateRepository, Depends(get_template_repository)],
    favorites: Annotated[SqlAlchemyUserFavoriteRepository, Depends(get_favorite_repository)],
) -> FavoriteTemplateUseCase:
    return FavoriteTemplateUseCase(templates, favorites)


def get_user_favorites_use_case(
    templates: Annotated[SqlAlchemyCalculationTemplateRepository, Depends(get_template_repository)],
    favorites: Annotated[SqlAlchemyUserFavoriteRepository, Depends(get_favorite_repository)],
) -> GetUserFavoritesUseCase:
    return GetUserFavoritesUseCase(templates, favorites)


def get_recommendation_service(session: DbSession) -> UserRecommendationService:
    return UserRecommendationService(SqlAlchemyUserRecommendationRepository(session))
