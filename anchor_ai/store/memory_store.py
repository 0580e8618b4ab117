"""In-memory HabitStore with async-safe access.

Design notes:
    - An asyncio.Lock guards all reads and mutations so concurrent request
      handlers never observe a half-applied update.
    - Records are frozen pydantic models.  Updates replace a record with
      ``model_copy(update=...)``; callers only ever hold snapshots.
    - Every mutation is scoped to a user.  A habit, streak or task owned
      by someone else is invisible to the caller.
    - A decision log accepts its outcome exactly once.
    - The ``add_*`` / ``record_*`` methods are the seeding surface used by
      fixtures and local runs; they are not part of the HabitStore port.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime
from typing import Sequence

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
from anchor_ai.store.base import (
    DecisionLogNotFoundError,
    OutcomeAlreadyRecordedError,
    ProfileNotFoundError,
)

logger = logging.getLogger(__name__)


class StoreSummary:
    """Record counts for the health endpoint.

    This is an observability object, not a control mechanism.
    """

    __slots__ = (
        "users",
        "streaks",
        "habits",
        "tasks",
        "decision_logs",
        "notifications",
    )

    def __init__(
        self,
        users: int = 0,
        streaks: int = 0,
        habits: int = 0,
        tasks: int = 0,
        decision_logs: int = 0,
        notifications: int = 0,
    ) -> None:
        self.users = users
        self.streaks = streaks
        self.habits = habits
        self.tasks = tasks
        self.decision_logs = decision_logs
        self.notifications = notifications

    def to_dict(self) -> dict:
        return {
            "users": self.users,
            "streaks": self.streaks,
            "habits": self.habits,
            "tasks": self.tasks,
            "decision_logs": self.decision_logs,
            "notifications": self.notifications,
        }


class InMemoryHabitStore:
    """Async-safe, in-memory implementation of the HabitStore port."""

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._profiles: dict[str, UserProfile] = {}
        self._checkins: dict[tuple[str, date], EmotionCheckin] = {}
        self._streaks: dict[str, Streak] = {}
        self._habits: dict[str, Habit] = {}
        self._tasks: dict[str, Task] = {}
        self._completions: list[HabitCompletion] = []
        self._analytics: list[UserAnalytics] = []
        self._notifications: list[Notification] = []
        self._decision_logs: dict[str, DecisionLog] = {}

    # ── Seeding ──────────────────────────────────────────────────────────

    async def add_profile(self, profile: UserProfile) -> UserProfile:
        async with self._lock:
            self._profiles[profile.id] = profile
            return profile

    async def record_emotion_checkin(self, checkin: EmotionCheckin) -> EmotionCheckin:
        """Insert or replace the user's check-in for ``checkin.date``."""
        async with self._lock:
            self._checkins[(checkin.user_id, checkin.date)] = checkin
            return checkin

    async def add_streak(self, streak: Streak) -> Streak:
        async with self._lock:
            self._streaks[streak.id] = streak
            return streak

    async def add_habit(self, habit: Habit) -> Habit:
        async with self._lock:
            self._habits[habit.id] = habit
            return habit

    async def add_task(self, task: Task) -> Task:
        async with self._lock:
            self._tasks[task.id] = task
            return task

    async def add_completion(self, completion: HabitCompletion) -> HabitCompletion:
        async with self._lock:
            self._completions.append(completion)
            return completion

    async def add_analytics(self, row: UserAnalytics) -> UserAnalytics:
        async with self._lock:
            self._analytics.append(row)
            return row

    # ── Reads ────────────────────────────────────────────────────────────

    async def get_profile(self, user_id: str) -> UserProfile:
        async with self._lock:
            profile = self._profiles.get(user_id)
            if profile is None:
                raise ProfileNotFoundError(user_id)
            return profile

    async def get_emotion_checkin(self, user_id: str, on: date) -> EmotionCheckin | None:
        async with self._lock:
            return self._checkins.get((user_id, on))

    async def list_active_streaks(self, user_id: str) -> list[Streak]:
        async with self._lock:
            rows = [s for s in self._streaks.values() if s.user_id == user_id and s.is_active]
            return sorted(rows, key=lambda s: s.created_at, reverse=True)

    async def list_active_habits(self, user_id: str) -> list[Habit]:
        async with self._lock:
            rows = [h for h in self._habits.values() if h.user_id == user_id and h.is_active]
            return sorted(rows, key=lambda h: h.created_at, reverse=True)

    async def list_open_tasks(self, user_id: str, due_on: date) -> list[Task]:
        async with self._lock:
            return [
                t for t in self._tasks.values()
                if t.user_id == user_id
                and not t.is_completed
                and (t.due_date is None or t.due_date == due_on)
            ]

    async def list_completions_since(self, user_id: str, since: date) -> list[HabitCompletion]:
        async with self._lock:
            rows = [c for c in self._completions if c.user_id == user_id and c.date >= since]
            return sorted(rows, key=lambda c: c.date, reverse=True)

    async def list_analytics_since(self, user_id: str, since: date) -> list[UserAnalytics]:
        async with self._lock:
            rows = [a for a in self._analytics if a.user_id == user_id and a.date >= since]
            return sorted(rows, key=lambda a: a.date, reverse=True)

    async def list_notifications(self, user_id: str) -> list[Notification]:
        async with self._lock:
            return [n for n in self._notifications if n.user_id == user_id]

    async def get_task(self, task_id: str) -> Task | None:
        async with self._lock:
            return self._tasks.get(task_id)

    # ── Mutations ────────────────────────────────────────────────────────

    async def set_habit_difficulty(
        self,
        user_id: str,
        difficulty: int,
        habit_ids: Sequence[str] | None = None,
    ) -> int:
        async with self._lock:
            targets = self._select(self._habits, user_id, habit_ids)
            for habit in targets:
                self._habits[habit.id] = habit.model_copy(update={"difficulty_level": difficulty})
            logger.debug("Set difficulty=%d on %d habit(s) for user %s", difficulty, len(targets), user_id)
            return len(targets)

    async def set_streak_state(
        self,
        user_id: str,
        state: StreakState,
        streak_ids: Sequence[str] | None = None,
    ) -> int:
        async with self._lock:
            targets = self._select(self._streaks, user_id, streak_ids)
            for streak in targets:
                self._streaks[streak.id] = streak.model_copy(update={"state": StreakState(state)})
            logger.debug("Set state=%s on %d streak(s) for user %s", state, len(targets), user_id)
            return len(targets)

    async def set_task_effort(self, user_id: str, task_id: str, effort: int) -> bool:
        async with self._lock:
            task = self._tasks.get(task_id)
            if task is None or task.user_id != user_id:
                return False
            self._tasks[task_id] = task.model_copy(update={"estimated_effort": effort})
            return True

    async def create_notification(self, notification: Notification) -> Notification:
        async with self._lock:
            self._notifications.append(notification)
            return notification

    # ── Decision log ─────────────────────────────────────────────────────

    async def create_decision_log(self, log: DecisionLog) -> DecisionLog:
        async with self._lock:
            self._decision_logs[log.id] = log
            return log

    async def get_decision_log(self, log_id: str) -> DecisionLog:
        async with self._lock:
            log = self._decision_logs.get(log_id)
            if log is None:
                raise DecisionLogNotFoundError(log_id)
            return log

    async def attach_decision_outcome(
        self,
        log_id: str,
        executed_at: datetime,
        outcome: DecisionOutcome,
    ) -> DecisionLog:
        async with self._lock:
            log = self._decision_logs.get(log_id)
            if log is None:
                raise DecisionLogNotFoundError(log_id)
            if log.is_executed:
                raise OutcomeAlreadyRecordedError(log_id)
            updated = log.model_copy(update={"executed_at": executed_at, "outcome": outcome})
            self._decision_logs[log_id] = updated
            return updated

    async def list_decision_logs(
        self,
        user_id: str,
        limit: int = 10,
        decision_type: DecisionAction | None = None,
    ) -> list[DecisionLog]:
        async with self._lock:
            rows = [
                log for log in self._decision_logs.values()
                if log.user_id == user_id
                and (decision_type is None or log.decision_type == decision_type)
            ]
            rows.sort(key=lambda log: log.created_at, reverse=True)
            return rows[:limit]

    # ── Observability ────────────────────────────────────────────────────

    async def summary(self) -> StoreSummary:
        async with self._lock:
            return StoreSummary(
                users=len(self._profiles),
                streaks=len(self._streaks),
                habits=len(self._habits),
                tasks=len(self._tasks),
                decision_logs=len(self._decision_logs),
                notifications=len(self._notifications),
            )

    # ── Internals ────────────────────────────────────────────────────────

    @staticmethod
    def _select(table: dict, user_id: str, ids: Sequence[str] | None) -> list:
        """Active rows of *user_id*, optionally narrowed to *ids*.

        Must be called while holding self._lock.
        """
        wanted = set(ids) if ids is not None else None
        return [
            row for row in table.values()
            if row.user_id == user_id
            and row.is_active
            and (wanted is None or row.id in wanted)
        ]
