"""Persisted records: the rows the decision service reads and writes.

Field names follow the hosted schema of the Anchor app so that records
serialise straight into the decision-log context column.  Records are
frozen: the store hands out snapshots and applies updates by replacing
a record with a modified copy.
"""

from __future__ import annotations

import datetime as dt
from typing import Any

from pydantic import BaseModel, Field

from anchor_ai.domain.enums import DecisionAction, EmotionState, StreakState
from anchor_ai.foundation.clock import utc_now, utc_today
from anchor_ai.foundation.identifiers import new_id


_FROZEN = {"frozen": True}


class UserProfile(BaseModel):
    id: str = Field(default_factory=new_id)
    email: str = Field(..., min_length=3, max_length=320)
    full_name: str | None = None
    timezone: str = Field(default="UTC", description="IANA timezone name")
    created_at: dt.datetime = Field(default_factory=utc_now)
    last_seen_at: dt.datetime = Field(default_factory=utc_now)

    model_config = _FROZEN


class EmotionCheckin(BaseModel):
    """A daily emotion check-in.  At most one per user per date."""

    id: str = Field(default_factory=new_id)
    user_id: str
    emotion: EmotionState
    notes: str | None = Field(default=None, max_length=2000)
    date: dt.date = Field(default_factory=utc_today)
    created_at: dt.datetime = Field(default_factory=utc_now)

    model_config = _FROZEN


class Streak(BaseModel):
    """An identity-based streak grouping one or more habits."""

    id: str = Field(default_factory=new_id)
    user_id: str
    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    current_count: int = Field(default=0, ge=0)
    longest_count: int = Field(default=0, ge=0)
    state: StreakState = StreakState.NORMAL
    is_active: bool = True
    created_at: dt.datetime = Field(default_factory=utc_now)
    last_completed_at: dt.datetime | None = None

    model_config = _FROZEN


class Habit(BaseModel):
    id: str = Field(default_factory=new_id)
    user_id: str
    streak_id: str
    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    difficulty_level: int = Field(default=3, ge=1, le=5)
    estimated_minutes: int = Field(default=10, ge=0)
    is_active: bool = True
    created_at: dt.datetime = Field(default_factory=utc_now)

    model_config = _FROZEN


class Task(BaseModel):
    id: str = Field(default_factory=new_id)
    user_id: str
    habit_id: str | None = None
    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    estimated_effort: int = Field(default=3, ge=1, le=5)
    due_date: dt.date | None = None
    is_completed: bool = False
    created_at: dt.datetime = Field(default_factory=utc_now)

    model_config = _FROZEN


class HabitCompletion(BaseModel):
    id: str = Field(default_factory=new_id)
    user_id: str
    habit_id: str
    streak_id: str
    date: dt.date = Field(default_factory=utc_today)
    completed_at: dt.datetime = Field(default_factory=utc_now)
    difficulty_completed: int = Field(default=3, ge=1, le=5)
    notes: str | None = None

    model_config = _FROZEN


class UserAnalytics(BaseModel):
    """One per-user daily analytics roll-up row."""

    id: str = Field(default_factory=new_id)
    user_id: str
    date: dt.date = Field(default_factory=utc_today)
    total_habits_completed: int = Field(default=0, ge=0)
    total_tasks_completed: int = Field(default=0, ge=0)
    emotion_state: EmotionState | None = None
    streak_recovery_days: int = Field(default=0, ge=0)
    ai_interventions_count: int = Field(default=0, ge=0)

    model_config = _FROZEN


class Notification(BaseModel):
    """A supportive message produced by a decision.  Never mutated."""

    id: str = Field(default_factory=new_id)
    user_id: str
    ai_decision_id: str | None = None
    type: str = Field(..., min_length=1, max_length=100)
    subject: str
    content: str
    sent_at: dt.datetime = Field(default_factory=utc_now)
    delivery_status: str = "pending"

    model_config = _FROZEN


class DecisionOutcome(BaseModel):
    """What the executor did with a decision."""

    success: bool
    actions: list[str] = Field(default_factory=list)
    error: str | None = None

    model_config = _FROZEN


class DecisionLog(BaseModel):
    """Durable record of one decision and, once executed, its outcome.

    ``executed_at`` and ``outcome`` are attached exactly once by the
    store's ``attach_decision_outcome``.
    """

    id: str = Field(default_factory=new_id)
    user_id: str
    decision_type: DecisionAction
    context: dict[str, Any] = Field(default_factory=dict)
    decision: dict[str, Any] = Field(default_factory=dict)
    prompt_version: str
    model_used: str
    execution_time_ms: int | None = Field(default=None, ge=0)
    created_at: dt.datetime = Field(default_factory=utc_now)
    executed_at: dt.datetime | None = None
    outcome: DecisionOutcome | None = None

    model_config = _FROZEN

    @property
    def is_executed(self) -> bool:
        return self.executed_at is not None

    def summary(self) -> dict[str, Any]:
        """Compact view for history listings (context omitted)."""
        return {
            "id": self.id,
            "decision_type": self.decision_type.value,
            "decision": self.decision,
            "prompt_version": self.prompt_version,
            "model_used": self.model_used,
            "execution_time_ms": self.execution_time_ms,
            "created_at": self.created_at.isoformat(),
            "executed_at": self.executed_at.isoformat() if self.executed_at else None,
            "outcome": self.outcome.model_dump() if self.outcome else None,
        }
