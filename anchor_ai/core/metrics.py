"""Derived metrics: deterministic scalars computed from a UserContext.

Pure functions: no I/O, no clock access.  Every "today" is the context's
``as_of`` date so results are reproducible.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Sequence

from anchor_ai.domain.context import UserContext
from anchor_ai.domain.records import HabitCompletion, Streak, UserAnalytics

RECENT_EMOTION_ROWS = 7


@dataclass(frozen=True)
class ContextMetrics:
    """Scalars embedded in the decision prompt."""

    today_completions: int
    recent_emotions: list[str]
    missed_yesterday: bool
    consistency_score: float


def today_completion_count(completions: Iterable[HabitCompletion], today: date) -> int:
    return sum(1 for c in completions if c.date == today)


def recent_emotion_labels(analytics: Sequence[UserAnalytics], rows: int = RECENT_EMOTION_ROWS) -> list[str]:
    """Emotion labels from the first *rows* analytics rows (newest first)."""
    return [a.emotion_state.value for a in analytics[:rows] if a.emotion_state is not None]


def missed_yesterday(
    streaks: Sequence[Streak],
    completions: Iterable[HabitCompletion],
    today: date,
) -> bool:
    """True unless the first active streak has a completion dated yesterday.

    False when the user has no active streak at all.
    """
    active = next((s for s in streaks if s.is_active), None)
    if active is None:
        return False
    yesterday = today - timedelta(days=1)
    return not any(c.streak_id == active.id and c.date == yesterday for c in completions)


def consistency_score(completions: Iterable[HabitCompletion], today: date, days: int = 7) -> float:
    """Share of the trailing *days* (today included) with at least one completion."""
    if days <= 0:
        return 0.0
    window_start = today - timedelta(days=days - 1)
    dates = {c.date for c in completions if window_start <= c.date <= today}
    return len(dates) / days


def compute_metrics(context: UserContext, consistency_days: int = 7) -> ContextMetrics:
    today = context.as_of
    return ContextMetrics(
        today_completions=today_completion_count(context.completions, today),
        recent_emotions=recent_emotion_labels(context.analytics),
        missed_yesterday=missed_yesterday(context.streaks, context.completions, today),
        consistency_score=consistency_score(context.completions, today, consistency_days),
    )
