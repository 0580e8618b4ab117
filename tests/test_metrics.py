"""Tests for derived context metrics."""

from __future__ import annotations

from datetime import date, timedelta

from anchor_ai.core.metrics import (
    compute_metrics,
    consistency_score,
    missed_yesterday,
    recent_emotion_labels,
    today_completion_count,
)
from anchor_ai.domain.context import UserContext
from anchor_ai.domain.enums import EmotionState
from anchor_ai.domain.records import HabitCompletion, Streak, UserAnalytics, UserProfile

TODAY = date(2026, 3, 10)


def _completion(day: date, streak_id: str = "s1") -> HabitCompletion:
    return HabitCompletion(user_id="u1", habit_id="h1", streak_id=streak_id, date=day)


class TestConsistencyScore:
    def test_three_distinct_days_is_three_sevenths(self) -> None:
        completions = [
            _completion(TODAY),
            _completion(TODAY),  # same day twice counts once
            _completion(TODAY - timedelta(days=2)),
            _completion(TODAY - timedelta(days=6)),
            _completion(TODAY - timedelta(days=6)),
        ]
        assert consistency_score(completions, TODAY, 7) == 3 / 7

    def test_completions_outside_window_ignored(self) -> None:
        completions = [_completion(TODAY - timedelta(days=7)), _completion(TODAY - timedelta(days=13))]
        assert consistency_score(completions, TODAY, 7) == 0.0

    def test_future_completions_ignored(self) -> None:
        assert consistency_score([_completion(TODAY + timedelta(days=1))], TODAY, 7) == 0.0

    def test_every_day_is_one(self) -> None:
        completions = [_completion(TODAY - timedelta(days=i)) for i in range(7)]
        assert consistency_score(completions, TODAY, 7) == 1.0

    def test_zero_days_is_zero(self) -> None:
        assert consistency_score([_completion(TODAY)], TODAY, 0) == 0.0


class TestMissedYesterday:
    def test_no_streak_means_not_missed(self) -> None:
        assert missed_yesterday([], [], TODAY) is False

    def test_missed_without_completion(self) -> None:
        streak = Streak(id="s1", user_id="u1", title="Runner")
        assert missed_yesterday([streak], [], TODAY) is True

    def test_completion_yesterday_for_that_streak(self) -> None:
        streak = Streak(id="s1", user_id="u1", title="Runner")
        completions = [_completion(TODAY - timedelta(days=1), streak_id="s1")]
        assert missed_yesterday([streak], completions, TODAY) is False

    def test_completion_for_other_streak_does_not_count(self) -> None:
        streak = Streak(id="s1", user_id="u1", title="Runner")
        completions = [_completion(TODAY - timedelta(days=1), streak_id="s2")]
        assert missed_yesterday([streak], completions, TODAY) is True

    def test_only_first_active_streak_is_checked(self) -> None:
        inactive = Streak(id="s0", user_id="u1", title="Old", is_active=False)
        first = Streak(id="s1", user_id="u1", title="Runner")
        second = Streak(id="s2", user_id="u1", title="Reader")
        completions = [_completion(TODAY - timedelta(days=1), streak_id="s2")]
        assert missed_yesterday([inactive, first, second], completions, TODAY) is True


class TestSimpleCounts:
    def test_today_completion_count(self) -> None:
        completions = [_completion(TODAY), _completion(TODAY), _completion(TODAY - timedelta(days=1))]
        assert today_completion_count(completions, TODAY) == 2

    def test_recent_emotions_skip_missing_and_cap_at_seven(self) -> None:
        rows = [UserAnalytics(user_id="u1", emotion_state=EmotionState.LOW) for _ in range(8)]
        rows.insert(1, UserAnalytics(user_id="u1"))
        labels = recent_emotion_labels(rows)
        assert labels == ["low"] * 6


def test_compute_metrics_uses_context_date() -> None:
    context = UserContext(
        profile=UserProfile(id="u1", email="ada@example.com"),
        streaks=[Streak(id="s1", user_id="u1", title="Runner")],
        completions=[_completion(TODAY), _completion(TODAY - timedelta(days=1))],
        as_of=TODAY,
    )
    metrics = compute_metrics(context)
    assert metrics.today_completions == 1
    assert metrics.missed_yesterday is False
    assert metrics.consistency_score == 2 / 7
    assert metrics.recent_emotions == []
