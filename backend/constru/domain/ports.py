"""
Repository ports: the only storage operations use cases and services may perform.
Implementations: constru/repositories/*.py (SQLAlchemy async).
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from constru.schemas.auth import CreateRefreshToken, RefreshTokenRecord
from constru.schemas.recommendation import SimilarUser, UserBehaviorPattern, UserRecommendationOut
from constru.schemas.template import CalculationTemplateOut, TemplateCreate


class RefreshTokenRepository(ABC):
    @abstractmethod
    async def find_by_token(self, token: str) -> Optional[RefreshTokenRecord]: ...

    @abstractmethod
    async def create(self, refresh_token: CreateRefreshToken) -> RefreshTokenRecord: ...

    @abstractmethod
    async def revoke_by_user_id(self, user_id: str) -> bool:
        """Revoke every active token of the user. True if at least one changed."""

    @abstractmethod
    async def revoke_by_token(self, token: str) -> bool:
        """Revoke one token. False, not an error, when unknown or already revoked."""

    @abstractmethod
    async def is_token_revoked(self, token: str) -> bool:
        """True for revoked tokens and for tokens that were never issued."""

    @abstractmethod
    async def is_token_expired(self, token: str, now: Optional[datetime] = None) -> bool:
        """True for expired tokens and for tokens that were never issued."""


class UserFavoriteRepository(ABC):
    @abstractmethod
    async def find_by_user_id(self, user_id: str) -> list[str]: ...

    @abstractmethod
    async def add_favorite(self, user_id: str, template_id: str) -> None: ...

    @abstractmethod
    async def remove_favorite(self, user_id: str, template_id: str) -> None: ...

    @abstractmethod
    async def is_favorite(self, user_id: str, template_id: str) -> bool: ...

    @abstractmethod
    async def get_favorite_count(self, template_id: str) -> int: ...

    @abstractmethod
    async def toggle_favorite(self, user_id: str, template_id: str) -> bool:
        """Flip the tag in one conditional statement per intent; return the new state."""


class CalculationTemplateRepository(ABC):
    @abstractmethod
    async def find_by_id(self, template_id: str) -> Optional[CalculationTemplateOut]: ...

    @abstractmethod
    async def find_by_ids(self, template_ids: list[str]) -> dict[str, CalculationTemplateOut]:
        """Resolve many ids in one round trip; missing ids are absent from the result."""

    @abstractmethod
    async def create(self, data: TemplateCreate, created_by: Optional[str] = None) -> CalculationTemplateOut: ...


class UserRecommendationRepository(ABC):
    @abstractmethod
    async def get_user_behavior_pattern(self, user_id: str, time_range: int) -> UserBehaviorPattern:
        """Analyze the user's interactions of the last `time_range` days."""

    @abstractmethod
    async def get_user_recommendations(
        self, user_id: str, status: Optional[str] = None, limit: Optional[int] = None
    ) -> list[UserRecommendationOut]: ...

    @abstractmethod
    async def get_recommendation(self, recommendation_id: str) -> Optional[UserRecommendationOut]: ...

    @abstractmethod
    async def update_recommendation_status(self, recommendation_id: str, status: str) -> UserRecommendationOut: ...

    @abstractmethod
    async def find_similar_users(self, user_id: str, limit: int, time_range: int) -> list[SimilarUser]: ...

    @abstractmethod
    async def log_recommendation_interaction(
        self, user_id: str, recommendation_id: str, interaction_type: str
    ) -> None: ...
