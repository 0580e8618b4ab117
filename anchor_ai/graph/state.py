"""DecisionState — the sole state object that LangGraph nodes read and write.

Every node receives the full state and returns a partial update.  No node
touches the store; the only I/O in the graph is the model call.
"""

from __future__ import annotations

from typing import TypedDict

from anchor_ai.domain.context import UserContext
from anchor_ai.domain.decision import Decision


class DecisionState(TypedDict, total=False):
    """LangGraph state for one decision.

    Fields:
        context: The UserContext the decision is computed from.
        prompt: Rendered decision prompt.
        raw_reply: Text returned by the model, if the call succeeded.
        error: Why the model path failed (set before routing to fallback).
        decision: The final validated or fallback Decision.
        used_fallback: True when the rule table produced the decision.
    """

    context: UserContext
    prompt: str
    raw_reply: str | None
    error: str | None
    decision: Decision
    used_fallback: bool
