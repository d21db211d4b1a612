"""
Behavior pattern analysis over raw user interactions, and collaborative similarity between patterns.
Pure functions: callers load interactions; nothing here touches the database.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from datetime import datetime, timezone
from typing import Any, Iterable

from constru.schemas.recommendation import (
    BudgetRange,
    CalculationTypeFrequency,
    CategoryFrequency,
    MaterialFrequency,
    ProjectPreferences,
    SearchTermFrequency,
    SessionMetrics,
    SimilarUser,
    UserBehaviorPattern,
)

TOP_MATERIALS = 10
TOP_CATEGORIES = 5
TOP_SEARCH_TERMS = 10
TOP_CALCULATION_TYPES = 5
TOP_PROJECT_TYPES = 3

# Order matters: ties resolve to the earlier bucket
TIME_OF_DAY_BUCKETS = ("morning", "afternoon", "evening", "night")

# Similarity weights; they sum to 1.0
MATERIAL_WEIGHT = 0.4
CATEGORY_WEIGHT = 0.3
SEARCH_WEIGHT = 0.2
TIME_OF_DAY_WEIGHT = 0.1


def _utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def time_of_day(moment: datetime) -> str:
    """morning 06-12, afternoon 12-18, evening 18-22, night 22-06 (UTC hours)."""
    hour = _utc(moment).hour
    if 6 <= hour < 12:
        return "morning"
    if 12 <= hour < 18:
        return "afternoon"
    if 18 <= hour < 22:
        return "evening"
    return "night"


def _top(counter: Counter, n: int) -> list[tuple[Any, int]]:
    # Counter.most_common keeps first-seen order among equal counts
    return counter.most_common(n)


def _metadata(interaction: Any) -> dict:
    return getattr(interaction, "metadata_", None) or {}


def analyze_user_patterns(
    user_id: str,
    interactions: Iterable[Any],
    time_range: tuple[datetime, datetime] | None = None,
) -> UserBehaviorPattern:
    """
    Build a UserBehaviorPattern from interaction rows (anything with the UserInteraction attributes).
    Interactions outside `time_range` (inclusive bounds) are ignored.
    """
    pattern = UserBehaviorPattern(user_id=user_id)

    materials: Counter = Counter()
    categories: Counter = Counter()
    search_terms: Counter = Counter()
    calculation_types: Counter = Counter()
    project_types: Counter = Counter()
    project_durations: list[float] = []
    budgets: list[float] = []
    activity = {bucket: 0 for bucket in TIME_OF_DAY_BUCKETS}
    sessions: dict[str, list[datetime]] = defaultdict(list)
    bounds = (_utc(time_range[0]), _utc(time_range[1])) if time_range is not None else None
    seen = 0

    for interaction in interactions:
        created = _utc(interaction.created_at)
        if bounds is not None and not bounds[0] <= created <= bounds[1]:
            continue
        seen += 1

        if interaction.session_id:
            sessions[interaction.session_id].append(created)
        if interaction.material_id:
            materials[interaction.material_id] += 1
        if interaction.category_id:
            categories[interaction.category_id] += 1
        if interaction.type == "search" and interaction.search_query:
            search_terms[interaction.search_query] += 1

        meta = _metadata(interaction)
        if meta.get("calculation_type"):
            calculation_types[meta["calculation_type"]] += 1
        if meta.get("project_type"):
            project_types[meta["project_type"]] += 1
        if isinstance(meta.get("project_duration_days"), (int, float)):
            project_durations.append(float(meta["project_duration_days"]))
        if isinstance(meta.get("budget"), (int, float)):
            budgets.append(float(meta["budget"]))

        activity[time_of_day(created)] += 1

    if not seen:
        return pattern

    durations = []
    for timestamps in sessions.values():
        timestamps.sort()
        durations.append((timestamps[-1] - timestamps[0]).total_seconds() / 60)
    actions = [len(timestamps) for timestamps in sessions.values()]

    most_active = TIME_OF_DAY_BUCKETS[0]
    for bucket in TIME_OF_DAY_BUCKETS:
        if activity[bucket] > activity[most_active]:
            most_active = bucket

    pattern.frequent_materials = [
        MaterialFrequency(material_id=k, frequency=v) for k, v in _top(materials, TOP_MATERIALS)
    ]
    pattern.frequent_categories = [
        CategoryFrequency(category_id=k, frequency=v) for k, v in _top(categories, TOP_CATEGORIES)
    ]
    pattern.search_patterns = [
        SearchTermFrequency(term=k, frequency=v) for k, v in _top(search_terms, TOP_SEARCH_TERMS)
    ]
    pattern.preferred_calculation_types = [
        CalculationTypeFrequency(type=k, frequency=v) for k, v in _top(calculation_types, TOP_CALCULATION_TYPES)
    ]
    pattern.session_metrics = SessionMetrics(
        average_duration=sum(durations) / len(durations) if durations else 0.0,
        average_actions_per_session=sum(actions) / len(actions) if actions else 0.0,
        most_active_time_of_day=most_active,
    )
    pattern.project_preferences = ProjectPreferences(
        preferred_project_types=[k for k, _ in _top(project_types, TOP_PROJECT_TYPES)],
        average_project_duration=sum(project_durations) / len(project_durations) if project_durations else 0.0,
        average_budget_range=BudgetRange(min=min(budgets), max=max(budgets)) if budgets else BudgetRange(),
    )
    return pattern


def _overlap(mine: set, other: set) -> float:
    return len(mine & other) / max(len(mine), 1)


def similarity_score(mine: UserBehaviorPattern, other: UserBehaviorPattern) -> float:
    score = MATERIAL_WEIGHT * _overlap(
        {m.material_id for m in mine.frequent_materials},
        {m.material_id for m in other.frequent_materials},
    )
    score += CATEGORY_WEIGHT * _overlap(
        {c.category_id for c in mine.frequent_categories},
        {c.category_id for c in other.frequent_categories},
    )
    score += SEARCH_WEIGHT * _overlap(
        {s.term for s in mine.search_patterns},
        {s.term for s in other.search_patterns},
    )
    if mine.session_metrics.most_active_time_of_day == other.session_metrics.most_active_time_of_day:
        score += TIME_OF_DAY_WEIGHT
    return round(score, 4)


def rank_similar_users(user_id: str, patterns: list[UserBehaviorPattern], limit: int | None = None) -> list[SimilarUser]:
    """Score every other pattern against `user_id`'s pattern, best first."""
    mine = next((p for p in patterns if p.user_id == user_id), None)
    if mine is None or len(patterns) <= 1:
        return []
    ranked = sorted(
        (
            SimilarUser(user_id=p.user_id, similarity_score=similarity_score(mine, p))
            for p in patterns
            if p.user_id != user_id
        ),
        key=lambda s: s.similarity_score,
        reverse=True,
    )
    return ranked[:limit] if limit is not None else ranked
