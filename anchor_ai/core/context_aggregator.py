"""ContextAggregator — fan-out/fan-in reads that build a UserContext.

All seven reads are issued concurrently.  The profile is mandatory: its
failure propagates.  Every other read degrades to an empty value when it
fails, with a warning in the log.  No retries.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date, timedelta
from typing import Any

from anchor_ai.domain.context import UserContext
from anchor_ai.foundation.clock import utc_today
from anchor_ai.store.base import HabitStore

logger = logging.getLogger(__name__)


class ContextAggregator:
    """Reads a user's state from a HabitStore into one UserContext.

    Args:
        store: Any HabitStore implementation.
        completion_window_days: Trailing window for habit completions.
        analytics_window_days: Trailing window for analytics rows.
    """

    def __init__(
        self,
        store: HabitStore,
        completion_window_days: int = 14,
        analytics_window_days: int = 7,
    ) -> None:
        self._store = store
        self._completion_window = timedelta(days=completion_window_days)
        self._analytics_window = timedelta(days=analytics_window_days)

    async def gather(self, user_id: str, today: date | None = None) -> UserContext:
        today = today or utc_today()
        store = self._store

        results = await asyncio.gather(
            store.get_profile(user_id),
            store.get_emotion_checkin(user_id, today),
            store.list_active_streaks(user_id),
            store.list_active_habits(user_id),
            store.list_open_tasks(user_id, today),
            store.list_completions_since(user_id, today - self._completion_window),
            store.list_analytics_since(user_id, today - self._analytics_window),
            return_exceptions=True,
        )
        profile, emotion, streaks, habits, tasks, completions, analytics = results

        if isinstance(profile, BaseException):
            raise profile

        context = UserContext(
            profile=profile,
            emotion=self._optional(emotion, "emotion_checkin", user_id, None),
            streaks=self._optional(streaks, "streaks", user_id, []),
            habits=self._optional(habits, "habits", user_id, []),
            tasks=self._optional(tasks, "tasks", user_id, []),
            completions=self._optional(completions, "completions", user_id, []),
            analytics=self._optional(analytics, "analytics", user_id, []),
            as_of=today,
        )
        logger.debug(
            "Gathered context for user %s: streaks=%d habits=%d tasks=%d completions=%d analytics=%d",
            user_id, len(context.streaks), len(context.habits), len(context.tasks),
            len(context.completions), len(context.analytics),
        )
        return context

    @staticmethod
    def _optional(value: Any, name: str, user_id: str, empty: Any) -> Any:
        if isinstance(value, BaseException) and not isinstance(value, Exception):
            raise value
        if isinstance(value, Exception):
            logger.warning("Optional read '%s' failed for user %s: %s", name, user_id, value)
            return empty
        if value is None:
            return empty
        return value
