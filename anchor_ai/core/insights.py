"""Deterministic insights for the user dashboard.

No model calls.  Everything is derived from a UserContext plus the most
recent decision log.
"""

from __future__ import annotations

from typing import Any

from anchor_ai.core.metrics import consistency_score, today_completion_count
from anchor_ai.domain.context import UserContext
from anchor_ai.domain.enums import EmotionState, StreakState
from anchor_ai.domain.records import DecisionLog, Streak, UserAnalytics

MAX_RECOMMENDATIONS = 3

_EMOTION_SCORES: dict[EmotionState, int] = {
    EmotionState.ENERGIZED: 4,
    EmotionState.OKAY: 3,
    EmotionState.LOW: 2,
    EmotionState.OVERWHELMED: 1,
}
_NEUTRAL_SCORE = 3


def emotional_trend(analytics: list[UserAnalytics]) -> str:
    """improving / stable / declining / unknown over up to seven rows.

    Rows arrive newest first.  The last three scores (most recent) are
    compared with the first three (oldest).
    """
    if len(analytics) < 3:
        return "unknown"
    scores = [
        _EMOTION_SCORES.get(row.emotion_state, _NEUTRAL_SCORE)
        for row in analytics[:7]
    ]
    scores.reverse()
    delta = sum(scores[-3:]) - sum(scores[:3])
    if delta > 1:
        return "improving"
    if delta < -1:
        return "declining"
    return "stable"


def streak_health(streaks: list[Streak]) -> str:
    if not streaks:
        return "none"
    average = sum(s.current_count for s in streaks) / len(streaks)
    in_recovery = sum(1 for s in streaks if s.state == StreakState.RECOVERY)
    if average >= 7 and in_recovery == 0:
        return "excellent"
    if average >= 3 and in_recovery <= 1:
        return "good"
    return "needs_attention"


def recommendations(context: UserContext) -> list[str]:
    recs: list[str] = []
    if context.emotion is not None and context.emotion.emotion == EmotionState.OVERWHELMED:
        recs.append("Consider switching to recovery mode for easier habits")
        recs.append("Focus on just showing up today, even if briefly")
    if any(s.current_count == 0 for s in context.streaks):
        recs.append("Restart a streak with the smallest possible version")
    if today_completion_count(context.completions, context.as_of) == 0:
        recs.append("Complete at least one small habit today to maintain momentum")
    return recs[:MAX_RECOMMENDATIONS]


def next_suggested_action(context: UserContext) -> str:
    if context.emotion is None:
        return "Complete your daily emotion check-in for personalized guidance"

    if today_completion_count(context.completions, context.as_of) == 0:
        active = [h for h in context.habits if h.is_active]
        if active:
            easiest = min(active, key=lambda h: h.difficulty_level)
            return f'Start with your easiest habit: "{easiest.title}"'
        return "Create your first habit to begin building consistency"

    return "Great progress today! Consider completing another habit if you have energy"


def build_insights(
    context: UserContext,
    last_decision: DecisionLog | None = None,
    consistency_days: int = 7,
) -> dict[str, Any]:
    score = consistency_score(context.completions, context.as_of, consistency_days)
    return {
        "consistency": round(score * 100, 1),
        "emotional_trend": emotional_trend(context.analytics),
        "streak_health": streak_health(context.streaks),
        "recommendations": recommendations(context),
        "last_decision": last_decision.summary() if last_decision else None,
        "next_suggested_action": next_suggested_action(context),
    }
