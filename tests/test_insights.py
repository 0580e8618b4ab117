"""Tests for deterministic dashboard insights."""

from datetime import date, timedelta

from anchor_ai.core.insights import build_insights, emotional_trend, recommendations, streak_health
from anchor_ai.domain.context import UserContext
from anchor_ai.domain.enums import DecisionAction, EmotionState, StreakState
from anchor_ai.domain.records import (
    DecisionLog,
    EmotionCheckin,
    Habit,
    HabitCompletion,
    Streak,
    UserAnalytics,
    UserProfile,
)

TODAY = date(2026, 3, 10)


def _trend_rows(*emotions: EmotionState | None) -> list[UserAnalytics]:
    """Rows newest first, as the store returns them."""
    return [
        UserAnalytics(user_id="u1", date=TODAY - timedelta(days=i), emotion_state=e)
        for i, e in enumerate(emotions)
    ]


def _context(**kw) -> UserContext:
    base = dict(profile=UserProfile(id="u1", email="ada@example.com"), as_of=TODAY)
    base.update(kw)
    return UserContext(**base)


class TestEmotionalTrend:
    def test_too_few_rows(self) -> None:
        assert emotional_trend(_trend_rows(EmotionState.LOW, EmotionState.LOW)) == "unknown"

    def test_improving(self) -> None:
        rows = _trend_rows(
            EmotionState.ENERGIZED, EmotionState.ENERGIZED, EmotionState.OKAY,
            EmotionState.LOW, EmotionState.LOW, EmotionState.OVERWHELMED,
        )
        assert emotional_trend(rows) == "improving"

    def test_declining(self) -> None:
        rows = _trend_rows(
            EmotionState.OVERWHELMED, EmotionState.LOW, EmotionState.LOW,
            EmotionState.OKAY, EmotionState.ENERGIZED, EmotionState.ENERGIZED,
        )
        assert emotional_trend(rows) == "declining"

    def test_stable_with_missing_states(self) -> None:
        rows = _trend_rows(EmotionState.OKAY, None, EmotionState.OKAY, EmotionState.OKAY)
        assert emotional_trend(rows) == "stable"


class TestStreakHealth:
    def test_none(self) -> None:
        assert streak_health([]) == "none"

    def test_excellent(self) -> None:
        assert streak_health([Streak(user_id="u1", title="A", current_count=10)]) == "excellent"

    def test_recovery_lowers_health(self) -> None:
        streaks = [
            Streak(user_id="u1", title="A", current_count=10, state=StreakState.RECOVERY),
            Streak(user_id="u1", title="B", current_count=8),
        ]
        assert streak_health(streaks) == "good"

    def test_needs_attention(self) -> None:
        assert streak_health([Streak(user_id="u1", title="A", current_count=1)]) == "needs_attention"


class TestRecommendations:
    def test_capped_at_three(self) -> None:
        context = _context(
            emotion=EmotionCheckin(user_id="u1", emotion=EmotionState.OVERWHELMED, date=TODAY),
            streaks=[Streak(user_id="u1", title="A", current_count=0)],
        )
        recs = recommendations(context)
        assert len(recs) == 3
        assert recs[0] == "Consider switching to recovery mode for easier habits"

    def test_none_when_on_track(self) -> None:
        context = _context(
            emotion=EmotionCheckin(user_id="u1", emotion=EmotionState.OKAY, date=TODAY),
            streaks=[Streak(user_id="u1", title="A", current_count=4)],
            completions=[HabitCompletion(user_id="u1", habit_id="h1", streak_id="s1", date=TODAY)],
        )
        assert recommendations(context) == []


class TestBuildInsights:
    def test_full_payload(self) -> None:
        completions = [
            HabitCompletion(user_id="u1", habit_id="h1", streak_id="s1", date=TODAY - timedelta(days=d))
            for d in (0, 1, 4)
        ]
        log = DecisionLog(
            user_id="u1",
            decision_type=DecisionAction.NO_ACTION,
            prompt_version="core_v1.0",
            model_used="gemini-1.5-flash",
        )
        context = _context(
            emotion=EmotionCheckin(user_id="u1", emotion=EmotionState.OKAY, date=TODAY),
            habits=[Habit(user_id="u1", streak_id="s1", title="Stretch")],
            completions=completions,
        )
        insights = build_insights(context, log)
        assert insights["consistency"] == 42.9
        assert insights["streak_health"] == "none"
        assert insights["last_decision"]["id"] == log.id
        assert insights["next_suggested_action"].startswith("Great progress today!")

    def test_suggests_easiest_habit(self) -> None:
        context = _context(
            emotion=EmotionCheckin(user_id="u1", emotion=EmotionState.LOW, date=TODAY),
            habits=[
                Habit(user_id="u1", streak_id="s1", title="Run", difficulty_level=4),
                Habit(user_id="u1", streak_id="s1", title="Walk", difficulty_level=1),
            ],
        )
        assert build_insights(context)["next_suggested_action"] == 'Start with your easiest habit: "Walk"'

    def test_no_habits_yet(self) -> None:
        context = _context(emotion=EmotionCheckin(user_id="u1", emotion=EmotionState.OKAY, date=TODAY))
        assert build_insights(context)["next_suggested_action"] == (
            "Create your first habit to begin building consistency"
        )
