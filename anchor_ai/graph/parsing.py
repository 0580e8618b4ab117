"""Model reply extraction and validation.

The model answers in free text that should contain one JSON object.  This
module is the only place that knows how to dig it out:

    1. ``extract_json_object`` decodes the JSON value that starts at the
       first ``{`` of the reply, ignoring prose before and after it.
    2. ``validate_decision`` turns the raw dict into a Decision, checking
       each field independently.  Invalid parameter fields are dropped;
       they never sink the whole decision.

Structural failures raise DecisionParseError, which the graph routes to
the rule-based fallback.
"""

from __future__ import annotations

import json
import logging
import math
from typing import Any

from anchor_ai.domain.decision import Decision, DecisionParameters, TaskModification
from anchor_ai.domain.enums import DecisionAction, NotificationTone, StreakState

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 0.5
DEFAULT_REASONING = "No reasoning provided by the model"

_decoder = json.JSONDecoder()


class DecisionParseError(ValueError):
    """Raised when a model reply holds no usable JSON object."""


# ── Extraction ───────────────────────────────────────────────────────────────

def extract_json_object(text: str) -> dict[str, Any]:
    """Decode the first brace-delimited JSON object in *text*.

    Raises:
        DecisionParseError: No ``{`` in the text, the JSON starting there is
            malformed or truncated, or it does not decode to an object.
    """
    start = text.find("{")
    if start < 0:
        raise DecisionParseError("No JSON object found in model reply")
    try:
        value, _end = _decoder.raw_decode(text, start)
    except json.JSONDecodeError as exc:
        raise DecisionParseError(f"Malformed JSON in model reply: {exc}") from exc
    if not isinstance(value, dict):
        raise DecisionParseError("Model reply JSON is not an object")
    return value


# ── Validation ───────────────────────────────────────────────────────────────

def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


def _round_clamp(value: float, low: int = 1, high: int = 5) -> int:
    # Round half up, then clamp to [low, high]
    if not isinstance(value, int):
        value = math.floor(value + 0.5)
    return max(low, min(high, value))


def _coerce_action(raw: Any) -> DecisionAction:
    try:
        return DecisionAction(raw)
    except (ValueError, TypeError):
        return DecisionAction.NO_ACTION


def _coerce_confidence(raw: Any) -> float:
    if not _is_number(raw):
        return DEFAULT_CONFIDENCE
    return float(max(0, min(1, raw)))


def _id_list(raw: Any) -> list[str] | None:
    if not isinstance(raw, list):
        return None
    ids = [str(item) for item in raw if isinstance(item, (str, int)) and not isinstance(item, bool) and str(item)]
    return ids or None


def _task_modifications(raw: Any) -> list[TaskModification] | None:
    if not isinstance(raw, list):
        return None
    mods = []
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        task_id = entry.get("task_id")
        effort = entry.get("new_effort")
        if not task_id or not isinstance(task_id, (str, int)) or not _is_number(effort):
            continue
        mods.append(TaskModification(task_id=str(task_id), new_effort=_round_clamp(effort)))
    return mods or None


def validate_parameters(raw: Any) -> DecisionParameters | None:
    """Keep the parameter fields that pass their own check; drop the rest."""
    if not isinstance(raw, dict):
        return None

    fields: dict[str, Any] = {}

    difficulty = raw.get("new_difficulty")
    if _is_number(difficulty):
        fields["new_difficulty"] = _round_clamp(difficulty)

    state = raw.get("new_streak_state")
    if isinstance(state, str) and state in [s.value for s in StreakState]:
        fields["new_streak_state"] = StreakState(state)

    ntype = raw.get("notification_type")
    if isinstance(ntype, str) and ntype.strip():
        fields["notification_type"] = ntype.strip()[:100]

    tone = raw.get("notification_tone")
    if isinstance(tone, str) and tone in [t.value for t in NotificationTone]:
        fields["notification_tone"] = NotificationTone(tone)

    mods = _task_modifications(raw.get("task_modifications"))
    if mods:
        fields["task_modifications"] = mods

    habit_ids = _id_list(raw.get("habit_ids"))
    if habit_ids:
        fields["habit_ids"] = habit_ids

    streak_ids = _id_list(raw.get("streak_ids"))
    if streak_ids:
        fields["streak_ids"] = streak_ids

    if not fields:
        return None
    return DecisionParameters(**fields)


def validate_decision(raw: dict[str, Any]) -> Decision:
    reasoning = raw.get("reasoning")
    if not isinstance(reasoning, str) or not reasoning.strip():
        reasoning = DEFAULT_REASONING

    return Decision(
        action=_coerce_action(raw.get("action")),
        reasoning=reasoning.strip(),
        confidence=_coerce_confidence(raw.get("confidence")),
        parameters=validate_parameters(raw.get("parameters")),
    )


def parse_decision(text: str) -> Decision:
    """Extract and validate a Decision from a raw model reply."""
    raw = extract_json_object(text)
    decision = validate_decision(raw)
    logger.debug("Parsed model decision: action=%s confidence=%.2f", decision.action.value, decision.confidence)
    return decision
