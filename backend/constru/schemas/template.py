"""Pydantic schemas for calculation templates and favorites."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CalculationTemplateOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str
    type: str
    target_profession: str
    formula: str
    nec_reference: str | None = None
    is_active: bool
    is_verified: bool
    created_by: str | None = None
    tags: list[str] | None = None
    created_at: datetime
    updated_at: datetime


class TemplateCreate(BaseModel):
    """Body for creating a calculation template (admin)."""

    name: str = Field(min_length=1, max_length=255)
    description: str = ""
    type: str = Field("area_volume", max_length=50)
    target_profession: str = Field("architect", max_length=50)
    formula: str = ""
    nec_reference: str | None = Field(None, max_length=100)
    tags: list[str] | None = None


class FavoriteToggleResult(BaseModel):
    is_favorite: bool


class FavoriteCount(BaseModel):
    template_id: str
    count: int
