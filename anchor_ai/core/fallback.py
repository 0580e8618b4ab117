"""Rule-based fallback decision.

Used whenever the model path fails (invocation error, timeout, unparseable
reply).  Never raises: it is the availability guarantee of the engine.
"""

from __future__ import annotations

from anchor_ai.domain.context import UserContext
from anchor_ai.domain.decision import Decision, DecisionParameters
from anchor_ai.domain.enums import DecisionAction, EmotionState, StreakState

FALLBACK_MODEL_IDENTIFIER = "rule_based_fallback"


def fallback_decision(context: UserContext | None) -> Decision:
    emotion = context.emotion.emotion if context is not None and context.emotion else None

    if emotion == EmotionState.OVERWHELMED:
        return Decision(
            action=DecisionAction.STREAK_STATE_CHANGE,
            reasoning="User is overwhelmed, switching to recovery mode for reduced pressure",
            confidence=0.8,
            parameters=DecisionParameters(new_streak_state=StreakState.RECOVERY),
        )

    if emotion == EmotionState.LOW:
        return Decision(
            action=DecisionAction.PRESSURE_ADJUSTMENT,
            reasoning="User is feeling low, reducing difficulty to maintain engagement",
            confidence=0.7,
            parameters=DecisionParameters(new_difficulty=2),
        )

    return Decision(
        action=DecisionAction.NO_ACTION,
        reasoning="Maintaining current approach - no changes needed",
        confidence=0.6,
    )
