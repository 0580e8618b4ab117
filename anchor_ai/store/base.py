"""HabitStore — the storage port the decision service depends on.

The service never talks to a concrete backend.  It receives any object
satisfying this protocol, chosen at the composition root (``main.py``).
Every method is a coroutine so hosted backends fit behind it unchanged.

Mutation methods are scoped to a user: an ID that belongs to another
user is treated exactly like an unknown ID.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Protocol, Sequence

from anchor_ai.domain.enums import DecisionAction, StreakState
from anchor_ai.domain.records import (
    DecisionLog,
    DecisionOutcome,
    EmotionCheckin,
    Habit,
    HabitCompletion,
    Notification,
    Streak,
    Task,
    UserAnalytics,
    UserProfile,
)


class StoreError(Exception):
    """Base class for storage failures."""


class ProfileNotFoundError(StoreError):
    """Raised when a user profile does not exist."""

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__(f"User profile {user_id} not found")


class DecisionLogNotFoundError(StoreError):
    """Raised when a decision log ID is unknown."""

    def __init__(self, log_id: str) -> None:
        self.log_id = log_id
        super().__init__(f"Decision log {log_id} not found")


class OutcomeAlreadyRecordedError(StoreError):
    """Raised on a second attempt to attach an outcome to a decision log."""

    def __init__(self, log_id: str) -> None:
        self.log_id = log_id
        super().__init__(f"Decision log {log_id} already has an outcome")


class HabitStore(Protocol):
    # ── Reads ────────────────────────────────────────────────────────────

    async def get_profile(self, user_id: str) -> UserProfile:
        """Return the profile or raise ProfileNotFoundError."""
        ...

    async def get_emotion_checkin(self, user_id: str, on: date) -> EmotionCheckin | None:
        ...

    async def list_active_streaks(self, user_id: str) -> list[Streak]:
        """Active streaks, newest first."""
        ...

    async def list_active_habits(self, user_id: str) -> list[Habit]:
        """Active habits, newest first."""
        ...

    async def list_open_tasks(self, user_id: str, due_on: date) -> list[Task]:
        """Uncompleted tasks due on *due_on* or with no due date."""
        ...

    async def list_completions_since(self, user_id: str, since: date) -> list[HabitCompletion]:
        """Completions dated on or after *since*, newest first."""
        ...

    async def list_analytics_since(self, user_id: str, since: date) -> list[UserAnalytics]:
        """Analytics rows dated on or after *since*, newest first."""
        ...

    # ── Mutations ────────────────────────────────────────────────────────

    async def set_habit_difficulty(
        self,
        user_id: str,
        difficulty: int,
        habit_ids: Sequence[str] | None = None,
    ) -> int:
        """Assign difficulty to active habits; return how many changed."""
        ...

    async def set_streak_state(
        self,
        user_id: str,
        state: StreakState,
        streak_ids: Sequence[str] | None = None,
    ) -> int:
        """Assign state to active streaks; return how many changed."""
        ...

    async def set_task_effort(self, user_id: str, task_id: str, effort: int) -> bool:
        """Assign effort to one of the user's tasks; False if not found."""
        ...

    async def create_notification(self, notification: Notification) -> Notification:
        ...

    # ── Decision log ─────────────────────────────────────────────────────

    async def create_decision_log(self, log: DecisionLog) -> DecisionLog:
        ...

    async def attach_decision_outcome(
        self,
        log_id: str,
        executed_at: datetime,
        outcome: DecisionOutcome,
    ) -> DecisionLog:
        """Attach the outcome once; raise OutcomeAlreadyRecordedError after."""
        ...

    async def list_decision_logs(
        self,
        user_id: str,
        limit: int = 10,
        decision_type: DecisionAction | None = None,
    ) -> list[DecisionLog]:
        """Most recent first."""
        ...
