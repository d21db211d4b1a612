"""Recommendations for the current user: list, status changes, interactions, behavior pattern, similar users."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from constru.api.deps import CurrentUser, get_recommendation_service
from constru.core.errors import ForbiddenError
from constru.schemas.common import ApiResponse, ok
from constru.schemas.recommendation import (
    InteractionBody,
    SimilarUser,
    StatusUpdateBody,
    UserBehaviorPattern,
    UserRecommendationOut,
)
from constru.services.user_recommendation import UserRecommendationService

router = APIRouter(prefix="/recommendations", tags=["recommendations"])

Service = Annotated[UserRecommendationService, Depends(get_recommendation_service)]


async def _owned(service: UserRecommendationService, recommendation_id: str, user_id: str) -> UserRecommendationOut:
    recommendation = await service.get_recommendation(recommendation_id)
    if recommendation.user_id != user_id:
        raise ForbiddenError("This recommendation belongs to another user")
    return recommendation


@router.get(
    "",
    response_model=ApiResponse[list[UserRecommendationOut]],
    summary="List the current user's recommendations",
    responses={400: {"description": "Unknown status"}, 401: {"description": "Not authenticated"}},
)
async def list_recommendations(
    user: CurrentUser,
    service: Service,
    status: str | None = None,
    limit: Annotated[int | None, Query(ge=1, le=200)] = None,
):
    return ok(await service.get_user_recommendations(user.id, status, limit))


@router.get(
    "/behavior-pattern",
    response_model=ApiResponse[UserBehaviorPattern],
    summary="Behavior pattern of the current user over the last N days",
)
async def behavior_pattern(
    user: CurrentUser,
    service: Service,
    days: Annotated[int | None, Query(ge=1, le=365)] = None,
):
    return ok(await service.get_user_behavior_pattern(user.id, days))


@router.get(
    "/similar-users",
    response_model=ApiResponse[list[SimilarUser]],
    summary="Users whose behavior resembles the current user's",
)
async def similar_users(
    user: CurrentUser,
    service: Service,
    limit: Annotated[int | None, Query(ge=1, le=100)] = None,
):
    return ok(await service.find_similar_users(user.id, limit))


@router.patch(
    "/{recommendation_id}/status",
    response_model=ApiResponse[UserRecommendationOut],
    summary="Change the lifecycle status of a recommendation",
    responses={
        400: {"description": "Unknown status or transition not allowed"},
        403: {"description": "Recommendation belongs to another user"},
        404: {"description": "Recommendation not found"},
    },
)
async def update_status(recommendation_id: str, body: StatusUpdateBody, user: CurrentUser, service: Service):
    await _owned(service, recommendation_id, user.id)
    updated = await service.update_recommendation_status(recommendation_id, body.status)
    return ok(updated, "Recommendation updated")


@router.post(
    "/{recommendation_id}/interactions",
    response_model=ApiResponse[None],
    status_code=201,
    summary="Record a view, click, convert or dismiss on a recommendation",
    responses={400: {"description": "Unknown interaction type"}, 404: {"description": "Recommendation not found"}},
)
async def log_interaction(recommendation_id: str, body: InteractionBody, user: CurrentUser, service: Service):
    await _owned(service, recommendation_id, user.id)
    await service.log_recommendation_interaction(user.id, recommendation_id, body.interaction_type)
    return ok(message="Interaction recorded")
