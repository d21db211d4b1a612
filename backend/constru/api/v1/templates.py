"""Calculation templates and the current user's favorites."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from constru.api.deps import (
    CurrentUser,
    get_favorite_repository,
    get_favorite_template_use_case,
    get_template_repository,
    get_user_favorites_use_case,
    require_role,
)
from constru.core.errors import NotFoundError
from constru.domain.ports import CalculationTemplateRepository, UserFavoriteRepository
from constru.models.user import User
from constru.schemas.common import ApiResponse, ok
from constru.schemas.template import (
    CalculationTemplateOut,
    FavoriteCount,
    FavoriteToggleResult,
    TemplateCreate,
)
from constru.use_cases.favorites import FavoriteTemplateUseCase, GetUserFavoritesUseCase

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/templates", tags=["templates"])

Templates = Annotated[CalculationTemplateRepository, Depends(get_template_repository)]


@router.post(
    "/{template_id}/favorite",
    response_model=ApiResponse[FavoriteToggleResult],
    summary="Toggle a template in the current user's favorites",
    responses={401: {"description": "Not authenticated"}, 404: {"description": "Template not found"}},
)
async def toggle_favorite(
    template_id: str,
    user: CurrentUser,
    use_case: Annotated[FavoriteTemplateUseCase, Depends(get_favorite_template_use_case)],
):
    result = await use_case.execute(user.id, template_id)
    return ok(result, "Added to favorites" if result.is_favorite else "Removed from favorites")


@router.get(
    "/favorites",
    response_model=ApiResponse[list[CalculationTemplateOut]],
    summary="List the current user's favorite templates",
    responses={401: {"description": "Not authenticated"}},
)
async def list_favorites(
    user: CurrentUser,
    use_case: Annotated[GetUserFavoritesUseCase, Depends(get_user_favorites_use_case)],
):
    return ok(await use_case.execute(user.id))


@router.post(
    "",
    response_model=ApiResponse[CalculationTemplateOut],
    status_code=201,
    summary="Create a calculation template (admin)",
    responses={401: {"description": "Not authenticated"}, 403: {"description": "Admin role required"}},
)
async def create_template(
    body: TemplateCreate,
    templates: Templates,
    admin: Annotated[User, Depends(require_role("admin"))],
):
    template = await templates.create(body, created_by=admin.id)
    logger.info("Template %s created by %s", template.id, admin.id)
    return ok(template, "Template created")


@router.get(
    "/{template_id}",
    response_model=ApiResponse[CalculationTemplateOut],
    summary="Get one template",
    responses={404: {"description": "Template not found"}},
)
async def get_template(template_id: str, templates: Templates):
    template = await templates.find_by_id(template_id)
    if template is None:
        raise NotFoundError("Template not found")
    return ok(template)


@router.get(
    "/{template_id}/favorites/count",
    response_model=ApiResponse[FavoriteCount],
    summary="Number of users who favorited a template",
)
async def favorite_count(
    template_id: str,
    favorites: Annotated[UserFavoriteRepository, Depends(get_favorite_repository)],
):
    count = await favorites.get_favorite_count(template_id)
    return ok(FavoriteCount(template_id=template_id, count=count))
