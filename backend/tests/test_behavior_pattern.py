"""Behavior pattern analysis and similarity scoring (pure functions, no DB)."""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from constru.schemas.recommendation import (
    CategoryFrequency,
    MaterialFrequency,
    SearchTermFrequency,
    SessionMetrics,
    UserBehaviorPattern,
)
from constru.services.behavior_pattern import (
    analyze_user_patterns,
    rank_similar_users,
    similarity_score,
    time_of_day,
)

BASE = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


def interaction(
    minutes: int = 0,
    type: str = "view",
    material_id: str | None = None,
    category_id: str | None = None,
    search_query: str | None = None,
    session_id: str | None = None,
    metadata: dict | None = None,
    at: datetime | None = None,
):
    return SimpleNamespace(
        created_at=at or BASE + timedelta(minutes=minutes),
        type=type,
        material_id=material_id,
        category_id=category_id,
        search_query=search_query,
        session_id=session_id,
        metadata_=metadata,
    )


def pattern(user_id, materials=(), categories=(), terms=(), time="morning"):
    return UserBehaviorPattern(
        user_id=user_id,
        frequent_materials=[MaterialFrequency(material_id=m, frequency=1) for m in materials],
        frequent_categories=[CategoryFrequency(category_id=c, frequency=1) for c in categories],
        search_patterns=[SearchTermFrequency(term=t, frequency=1) for t in terms],
        session_metrics=SessionMetrics(most_active_time_of_day=time),
    )


@pytest.mark.parametrize(
    "hour,expected",
    [(6, "morning"), (11, "morning"), (12, "afternoon"), (17, "afternoon"), (18, "evening"), (21, "evening"), (22, "night"), (0, "night"), (5, "night")],
)
def test_time_of_day_buckets(hour, expected):
    assert time_of_day(datetime(2026, 1, 1, hour, 30, tzinfo=timezone.utc)) == expected


def test_time_of_day_converts_to_utc():
    # 08:00 at UTC-5 is 13:00 UTC
    local = datetime(2026, 1, 1, 8, 0, tzinfo=timezone(timedelta(hours=-5)))
    assert time_of_day(local) == "afternoon"


def test_empty_interactions_give_default_pattern():
    result = analyze_user_patterns("u1", [])
    assert result.user_id == "u1"
    assert result.frequent_materials == []
    assert result.session_metrics.average_duration == 0.0
    assert result.session_metrics.most_active_time_of_day == "morning"
    assert result.project_preferences.average_budget_range.min == 0.0


def test_frequencies_are_counted_and_sorted():
    rows = [
        interaction(0, material_id="cement", category_id="binders"),
        interaction(1, material_id="rebar", category_id="steel"),
        interaction(2, material_id="cement", category_id="binders"),
        interaction(3, type="search", search_query="ladrillo"),
        interaction(4, type="search", search_query="ladrillo"),
        interaction(5, type="view", search_query="ignored for non-search"),
    ]
    result = analyze_user_patterns("u1", rows)

    assert [(m.material_id, m.frequency) for m in result.frequent_materials] == [("cement", 2), ("rebar", 1)]
    assert [(c.category_id, c.frequency) for c in result.frequent_categories] == [("binders", 2), ("steel", 1)]
    assert [(s.term, s.frequency) for s in result.search_patterns] == [("ladrillo", 2)]


def test_top_lists_are_capped():
    rows = [interaction(i, material_id=f"m{i}", category_id=f"c{i}") for i in range(15)]
    result = analyze_user_patterns("u1", rows)
    assert len(result.frequent_materials) == 10
    assert len(result.frequent_categories) == 5


def test_sessions_and_most_active_time():
    rows = [
        interaction(0, session_id="s1"),
        interaction(30, session_id="s1"),
        interaction(10, session_id="s1"),
        interaction(0, session_id="s2", at=datetime(2026, 3, 2, 19, 0, tzinfo=timezone.utc)),
    ]
    result = analyze_user_patterns("u1", rows)
    metrics = result.session_metrics
    # s1 spans 30 minutes with 3 actions, s2 is a single action
    assert metrics.average_duration == pytest.approx(15.0)
    assert metrics.average_actions_per_session == pytest.approx(2.0)
    assert metrics.most_active_time_of_day == "morning"


def test_most_active_time_tie_prefers_earlier_bucket():
    rows = [
        interaction(at=datetime(2026, 3, 2, 23, 0, tzinfo=timezone.utc)),
        interaction(at=datetime(2026, 3, 2, 19, 0, tzinfo=timezone.utc)),
    ]
    assert analyze_user_patterns("u1", rows).session_metrics.most_active_time_of_day == "evening"


def test_metadata_preferences():
    rows = [
        interaction(0, metadata={"calculation_type": "area_volume", "project_type": "residential", "budget": 5000}),
        interaction(1, metadata={"calculation_type": "area_volume", "project_duration_days": 90, "budget": 20000}),
        interaction(2, metadata={"calculation_type": "structural", "project_type": "residential", "project_duration_days": 30}),
        interaction(3, metadata={"budget": "not a number"}),
        interaction(4),
    ]
    result = analyze_user_patterns("u1", rows)

    assert [(t.type, t.frequency) for t in result.preferred_calculation_types] == [("area_volume", 2), ("structural", 1)]
    prefs = result.project_preferences
    assert prefs.preferred_project_types == ["residential"]
    assert prefs.average_project_duration == pytest.approx(60.0)
    assert prefs.average_budget_range.min == 5000
    assert prefs.average_budget_range.max == 20000


def test_time_range_filters_interactions():
    rows = [
        interaction(material_id="old", at=BASE - timedelta(days=40)),
        interaction(material_id="recent", at=BASE - timedelta(days=1)),
    ]
    result = analyze_user_patterns("u1", rows, (BASE - timedelta(days=30), BASE))
    assert [m.material_id for m in result.frequent_materials] == ["recent"]


def test_naive_timestamps_are_treated_as_utc():
    rows = [interaction(at=datetime(2026, 3, 2, 20, 0))]
    assert analyze_user_patterns("u1", rows).session_metrics.most_active_time_of_day == "evening"


def test_similarity_identical_patterns_is_one():
    a = pattern("a", materials=["m1", "m2"], categories=["c1"], terms=["t1"])
    b = pattern("b", materials=["m1", "m2"], categories=["c1"], terms=["t1"])
    assert similarity_score(a, b) == pytest.approx(1.0)


def test_similarity_weights():
    mine = pattern("a", materials=["m1", "m2"], categories=["c1", "c2"], terms=["t1"], time="morning")
    other = pattern("b", materials=["m1"], categories=[], terms=["t1", "t2"], time="night")
    # 0.4 * 1/2 + 0.3 * 0 + 0.2 * 1/1 + 0
    assert similarity_score(mine, other) == pytest.approx(0.4)


def test_similarity_with_empty_pattern_only_counts_time_of_day():
    assert similarity_score(pattern("a"), pattern("b", materials=["m1"])) == pytest.approx(0.1)
    assert similarity_score(pattern("a"), pattern("b", time="night")) == 0.0


def test_rank_similar_users_orders_and_limits():
    patterns = [
        pattern("me", materials=["m1", "m2"], categories=["c1"], time="night"),
        pattern("close", materials=["m1", "m2"], categories=["c1"], time="night"),
        pattern("partial", materials=["m1"], time="morning"),
        pattern("far", materials=["x"], time="morning"),
    ]
    ranked = rank_similar_users("me", patterns)
    assert [s.user_id for s in ranked] == ["close", "partial", "far"]
    assert ranked[0].similarity_score == pytest.approx(0.8)
    assert all(s.user_id != "me" for s in ranked)

    assert [s.user_id for s in rank_similar_users("me", patterns, limit=1)] == ["close"]


def test_rank_similar_users_without_own_pattern():
    assert rank_similar_users("ghost", [pattern("a"), pattern("b")]) == []
    assert rank_similar_users("a", [pattern("a")]) == []
