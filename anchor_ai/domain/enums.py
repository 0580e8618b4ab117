"""Controlled enumerations for the anchor-ai domain.

Every categorical field in the domain MUST reference an enum defined here.
Free-form strings are not acceptable for classification fields.
"""

from __future__ import annotations

from enum import Enum


class EmotionState(str, Enum):
    """Labels a user may pick in the daily emotion check-in."""

    ENERGIZED = "energized"
    OKAY = "okay"
    LOW = "low"
    OVERWHELMED = "overwhelmed"


class StreakState(str, Enum):
    """Pressure mode of an identity streak."""

    NORMAL = "normal"
    RECOVERY = "recovery"
    PROTECTED = "protected"


class DecisionAction(str, Enum):
    """The closed set of actions the decision engine may choose."""

    PRESSURE_ADJUSTMENT = "pressure_adjustment"
    NOTIFICATION = "notification"
    STREAK_STATE_CHANGE = "streak_state_change"
    TASK_MODIFICATION = "task_modification"
    NO_ACTION = "no_action"


class NotificationTone(str, Enum):
    """Tone keys of the static notification copy table."""

    SUPPORTIVE = "supportive"
    ENCOURAGING = "encouraging"
    GENTLE = "gentle"
