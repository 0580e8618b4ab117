"""Decision — the single value object the engine produces per invocation.

A Decision is created once (from the model reply or the fallback rule
table) and never mutated.  Its parameters carry only fields that passed
validation; an empty parameter set is represented as ``None``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from anchor_ai.domain.enums import DecisionAction, NotificationTone, StreakState


class TaskModification(BaseModel):
    """Set one task's effort estimate."""

    task_id: str = Field(..., min_length=1)
    new_effort: int = Field(..., ge=1, le=5)

    model_config = {"frozen": True}


class DecisionParameters(BaseModel):
    """Action-specific parameters.

    ``habit_ids`` / ``streak_ids`` narrow a pressure adjustment or streak
    state change to named entities.  When absent, the mutation applies to
    every active habit / streak of the user.
    """

    new_difficulty: int | None = Field(default=None, ge=1, le=5)
    new_streak_state: StreakState | None = None
    notification_type: str | None = None
    notification_tone: NotificationTone | None = None
    task_modifications: list[TaskModification] | None = None
    habit_ids: list[str] | None = None
    streak_ids: list[str] | None = None

    model_config = {"frozen": True}


class Decision(BaseModel):
    action: DecisionAction
    reasoning: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    parameters: DecisionParameters | None = None

    model_config = {"frozen": True}

    def to_log_dict(self) -> dict[str, Any]:
        """JSON-ready dict with unset parameter fields omitted."""
        data: dict[str, Any] = {
            "action": self.action.value,
            "reasoning": self.reasoning,
            "confidence": self.confidence,
        }
        if self.parameters is not None:
            data["parameters"] = self.parameters.model_dump(mode="json", exclude_none=True)
        return data


class DecisionResult(BaseModel):
    """What the DecisionEngine returns: the decision plus provenance."""

    decision: Decision
    latency_ms: int = Field(..., ge=0)
    model_identifier: str
    used_fallback: bool = False

    model_config = {"frozen": True}
