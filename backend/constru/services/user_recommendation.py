"""Personalized recommendations: listing, status lifecycle, behavior patterns, similar users."""

from __future__ import annotations

import logging

from constru.config import settings
from constru.core.errors import NotFoundError, ValidationError
from constru.domain.ports import UserRecommendationRepository
from constru.schemas.recommendation import (
    RecommendationInteractionType,
    RecommendationStatus,
    SimilarUser,
    UserBehaviorPattern,
    UserRecommendationOut,
)

logger = logging.getLogger(__name__)

S = RecommendationStatus

# Allowed moves; converted and dismissed are terminal
STATUS_TRANSITIONS: dict[RecommendationStatus, frozenset[RecommendationStatus]] = {
    S.PENDING: frozenset({S.VIEWED, S.CLICKED, S.CONVERTED, S.DISMISSED}),
    S.VIEWED: frozenset({S.CLICKED, S.CONVERTED, S.DISMISSED}),
    S.CLICKED: frozenset({S.CONVERTED, S.DISMISSED}),
    S.CONVERTED: frozenset(),
    S.DISMISSED: frozenset(),
}


def parse_status(value: str) -> RecommendationStatus:
    try:
        return RecommendationStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in RecommendationStatus)
        raise ValidationError(f"Invalid recommendation status '{value}'. Allowed: {allowed}") from None


def can_transition(current: RecommendationStatus, target: RecommendationStatus) -> bool:
    return current == target or target in STATUS_TRANSITIONS[current]


class UserRecommendationService:
    def __init__(self, repository: UserRecommendationRepository):
        self.repository = repository

    async def get_user_behavior_pattern(self, user_id: str, time_range: int | None = None) -> UserBehaviorPattern:
        """Analyze the last `time_range` days (default settings.behavior_pattern_default_days)."""
        days = time_range if time_range is not None else settings.behavior_pattern_default_days
        if days <= 0:
            raise ValidationError("Time range must be a positive number of days")
        return await self.repository.get_user_behavior_pattern(user_id, days)

    async def get_user_recommendations(
        self, user_id: str, status: str | None = None, limit: int | None = None
    ) -> list[UserRecommendationOut]:
        if status is not None:
            status = parse_status(status).value
        if limit is not None and limit <= 0:
            raise ValidationError("Limit must be positive")
        return await self.repository.get_user_recommendations(user_id, status, limit)

    async def get_recommendation(self, recommendation_id: str) -> UserRecommendationOut:
        recommendation = await self.repository.get_recommendation(recommendation_id)
        if recommendation is None:
            raise NotFoundError("Recommendation not found")
        return recommendation

    async def update_recommendation_status(self, recommendation_id: str, status: str) -> UserRecommendationOut:
        """Move a recommendation to `status` if STATUS_TRANSITIONS allows it; same status is a no-op."""
        target = parse_status(status)
        current = await self.get_recommendation(recommendation_id)
        current_status = parse_status(current.status)
        if current_status == target:
            return current
        if not can_transition(current_status, target):
            raise ValidationError(
                f"Cannot change recommendation status from '{current_status.value}' to '{target.value}'"
            )
        logger.info("Recommendation %s: %s -> %s", recommendation_id, current_status.value, target.value)
        return await self.repository.update_recommendation_status(recommendation_id, target.value)

    async def find_similar_users(self, user_id: str, limit: int | None = None) -> list[SimilarUser]:
        limit = limit if limit is not None else settings.similar_users_default_limit
        if limit <= 0:
            raise ValidationError("Limit must be positive")
        return await self.repository.find_similar_users(user_id, limit, settings.behavior_pattern_default_days)

    async def log_recommendation_interaction(
        self, user_id: str, recommendation_id: str, interaction_type: str
    ) -> None:
        try:
            kind = RecommendationInteractionType(interaction_type)
        except ValueError:
            allowed = ", ".join(t.value for t in RecommendationInteractionType)
            raise ValidationError(f"Invalid interaction type '{interaction_type}'. Allowed: {allowed}") from None
        await self.repository.log_recommendation_interaction(user_id, recommendation_id, kind.value)
