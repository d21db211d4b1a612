"""Favorite calculation templates: toggle and list."""

import logging

from constru.core.errors import NotFoundError
from constru.domain.ports import CalculationTemplateRepository, UserFavoriteRepository
from constru.schemas.template import CalculationTemplateOut, FavoriteToggleResult

logger = logging.getLogger(__name__)


class FavoriteTemplateUseCase:
    """Toggle a template in the user's favorites. Not a setter: the caller cannot force a state."""

    def __init__(self, templates: CalculationTemplateRepository, favorites: UserFavoriteRepository):
        self.templates = templates
        self.favorites = favorites

    async def execute(self, user_id: str, template_id: str) -> FavoriteToggleResult:
        template = await self.templates.find_by_id(template_id)
        if template is None:
            raise NotFoundError("Template not found")
        is_favorite = await self.favorites.toggle_favorite(user_id, template_id)
        logger.debug("User %s favorite %s -> %s", user_id, template_id, is_favorite)
        return FavoriteToggleResult(is_favorite=is_favorite)


class GetUserFavoritesUseCase:
    def __init__(self, templates: CalculationTemplateRepository, favorites: UserFavoriteRepository):
        self.templates = templates
        self.favorites = favorites

    async def execute(self, user_id: str) -> list[CalculationTemplateOut]:
        """Favorited templates in favorite order; ids whose template was deleted are skipped."""
        template_ids = await self.favorites.find_by_user_id(user_id)
        resolved = await self.templates.find_by_ids(template_ids)
        return [resolved[tid] for tid in template_ids if tid in resolved]
