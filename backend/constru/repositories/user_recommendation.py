"""SQLAlchemy adapter for UserRecommendationRepository (recommendations, interactions, patterns)."""

import logging
from collections import defaultdict
from datetime import datetime, timedelta, timezone

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from constru.core.errors import NotFoundError
from constru.domain.ports import UserRecommendationRepository
from constru.models.user_interaction import UserInteraction
from constru.models.user_recommendation import RecommendationInteraction, UserRecommendation
from constru.schemas.recommendation import SimilarUser, UserBehaviorPattern, UserRecommendationOut
from constru.services.behavior_pattern import analyze_user_patterns, rank_similar_users

logger = logging.getLogger(__name__)


class SqlAlchemyUserRecommendationRepository(UserRecommendationRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_user_behavior_pattern(self, user_id: str, time_range: int) -> UserBehaviorPattern:
        end = datetime.now(timezone.utc)
        start = end - timedelta(days=time_range)
        r = await self.session.execute(
            select(UserInteraction)
            .where(UserInteraction.user_id == user_id, UserInteraction.created_at >= start)
            .order_by(UserInteraction.created_at)
        )
        return analyze_user_patterns(user_id, r.scalars().all(), (start, end))

    async def get_user_recommendations(
        self, user_id: str, status: str | None = None, limit: int | None = None
    ) -> list[UserRecommendationOut]:
        now = datetime.now(timezone.utc)
        q = select(UserRecommendation).where(
            UserRecommendation.user_id == user_id,
            or_(UserRecommendation.expires_at.is_(None), UserRecommendation.expires_at > now),
        )
        if status:
            q = q.where(UserRecommendation.status == status)
        q = q.order_by(UserRecommendation.score.desc(), UserRecommendation.created_at.desc())
        if limit:
            q = q.limit(limit)
        r = await self.session.execute(q)
        return [UserRecommendationOut.model_validate(row) for row in r.scalars().all()]

    async def get_recommendation(self, recommendation_id: str) -> UserRecommendationOut | None:
        row = await self.session.get(UserRecommendation, recommendation_id)
        return UserRecommendationOut.model_validate(row) if row else None

    async def update_recommendation_status(self, recommendation_id: str, status: str) -> UserRecommendationOut:
        row = await self.session.get(UserRecommendation, recommendation_id)
        if row is None:
            raise NotFoundError("Recommendation not found")
        row.status = status
        await self.session.flush()
        await self.session.refresh(row)
        return UserRecommendationOut.model_validate(row)

    async def find_similar_users(self, user_id: str, limit: int, time_range: int) -> list[SimilarUser]:
        end = datetime.now(timezone.utc)
        start = end - timedelta(days=time_range)
        r = await self.session.execute(
            select(UserInteraction)
            .where(UserInteraction.created_at >= start)
            .order_by(UserInteraction.user_id, UserInteraction.created_at)
        )
        by_user: dict[str, list[UserInteraction]] = defaultdict(list)
        for row in r.scalars().all():
            by_user[row.user_id].append(row)
        if user_id not in by_user:
            return []
        patterns = [analyze_user_patterns(uid, rows, (start, end)) for uid, rows in by_user.items()]
        logger.debug("Similar users: compared %s patterns for user %s", len(patterns), user_id)
        return rank_similar_users(user_id, patterns, limit)

    async def log_recommendation_interaction(
        self, user_id: str, recommendation_id: str, interaction_type: str
    ) -> None:
        self.session.add(
            RecommendationInteraction(
                user_id=user_id,
                recommendation_id=recommendation_id,
                interaction_type=interaction_type,
            )
        )
        await self.session.flush()
