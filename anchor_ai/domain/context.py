"""UserContext — the request-scoped aggregate the decision engine reads.

Built fresh by the ContextAggregator for every decision, never persisted
as its own record (a JSON dump of it is stored inside the DecisionLog).
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field

from anchor_ai.domain.records import (
    EmotionCheckin,
    Habit,
    HabitCompletion,
    Streak,
    Task,
    UserAnalytics,
    UserProfile,
)


class UserContext(BaseModel):
    """Everything the engine knows about a user at decision time.

    Fields:
        profile: The user's profile (mandatory).
        emotion: Today's emotion check-in, if the user has done one.
        streaks: Active streaks, newest first.
        habits: Active habits, newest first.
        tasks: Open tasks due today or undated.
        completions: Habit completions in the trailing completion window,
                     newest first.
        analytics: Analytics rows in the trailing analytics window,
                   newest first.
        as_of: The UTC date the context was gathered for.
    """

    profile: UserProfile
    emotion: EmotionCheckin | None = None
    streaks: list[Streak] = Field(default_factory=list)
    habits: list[Habit] = Field(default_factory=list)
    tasks: list[Task] = Field(default_factory=list)
    completions: list[HabitCompletion] = Field(default_factory=list)
    analytics: list[UserAnalytics] = Field(default_factory=list)
    as_of: date

    model_config = {"frozen": True}

    @property
    def user_id(self) -> str:
        return self.profile.id
