from constru.models.user import User
from constru.models.refresh_token import RefreshToken
from constru.models.calculation_template import CalculationTemplate
from constru.models.user_favorite import UserFavorite
from constru.models.user_interaction import UserInteraction
from constru.models.user_recommendation import RecommendationInteraction, UserRecommendation

__all__ = [
    "User",
    "RefreshToken",
    "CalculationTemplate",
    "UserFavorite",
    "UserInteraction",
    "UserRecommendation",
    "RecommendationInteraction",
]
