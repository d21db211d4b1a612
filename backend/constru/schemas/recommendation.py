"""Pydantic schemas for recommendations and behavior patterns."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class RecommendationType(str, Enum):
    MATERIAL = "material"
    CATEGORY = "category"
    PROJECT_TYPE = "project_type"
    SUPPLIER = "supplier"


class RecommendationStatus(str, Enum):
    PENDING = "pending"
    VIEWED = "viewed"
    CLICKED = "clicked"
    CONVERTED = "converted"
    DISMISSED = "dismissed"


class RecommendationInteractionType(str, Enum):
    VIEW = "view"
    CLICK = "click"
    CONVERT = "convert"
    DISMISS = "dismiss"


class UserRecommendationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    type: str
    material_id: str | None = None
    category_id: str | None = None
    project_type: str | None = None
    supplier_id: str | None = None
    score: float
    reason: str | None = None
    status: str
    expires_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class MaterialFrequency(BaseModel):
    material_id: str
    frequency: int


class CategoryFrequency(BaseModel):
    category_id: str
    frequency: int


class SearchTermFrequency(BaseModel):
    term: str
    frequency: int


class CalculationTypeFrequency(BaseModel):
    type: str
    frequency: int


class SessionMetrics(BaseModel):
    average_duration: float = 0.0  # minutes
    average_actions_per_session: float = 0.0
    most_active_time_of_day: str = "morning"


class BudgetRange(BaseModel):
    min: float = 0.0
    max: float = 0.0


class ProjectPreferences(BaseModel):
    preferred_project_types: list[str] = Field(default_factory=list)
    average_project_duration: float = 0.0
    average_budget_range: BudgetRange = Field(default_factory=BudgetRange)


class UserBehaviorPattern(BaseModel):
    """Derived summary of a user's actions in a time window; never stored."""

    user_id: str
    frequent_materials: list[MaterialFrequency] = Field(default_factory=list)
    frequent_categories: list[CategoryFrequency] = Field(default_factory=list)
    search_patterns: list[SearchTermFrequency] = Field(default_factory=list)
    preferred_calculation_types: list[CalculationTypeFrequency] = Field(default_factory=list)
    session_metrics: SessionMetrics = Field(default_factory=SessionMetrics)
    project_preferences: ProjectPreferences = Field(default_factory=ProjectPreferences)


class SimilarUser(BaseModel):
    user_id: str
    similarity_score: float


class StatusUpdateBody(BaseModel):
    status: str


class InteractionBody(BaseModel):
    interaction_type: str
