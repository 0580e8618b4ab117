"""DecisionEngine — turns a UserContext into one Decision.

Design principles:
    1. Total: ``make_decision`` always returns a valid DecisionResult and
       never raises.  Every failure on the model path ends in the
       rule-based fallback.
    2. No store access, no mutation.  The engine decides; the executor acts.
    3. The model path is a compiled LangGraph pipeline built once per
       engine (render prompt, call model, parse reply, fallback).
    4. Latency covers the whole pipeline, fallback included.

Provenance:
    ``model_identifier`` is the configured Gemini model when the decision
    came from the model, and ``rule_based_fallback`` when it came from the
    rule table.
"""

from __future__ import annotations

import logging
import time

from anchor_ai.core.fallback import FALLBACK_MODEL_IDENTIFIER, fallback_decision
from anchor_ai.domain.context import UserContext
from anchor_ai.domain.decision import DecisionResult
from anchor_ai.graph.builder import build_decision_graph
from anchor_ai.graph.nodes import LLMFactory

logger = logging.getLogger(__name__)


class DecisionEngine:
    """Emotion-aware decision maker backed by Gemini with a rule fallback.

    Args:
        llm_factory: Callable returning a langchain chat model.
        model_identifier: Name recorded in the decision log for model decisions.
        prompt_version: Prompt template version recorded in the decision log.
        timeout_seconds: Upper bound on the model call.
        consistency_days: Window of the consistency score in the prompt.
    """

    def __init__(
        self,
        llm_factory: LLMFactory,
        model_identifier: str,
        prompt_version: str = "core_v1.0",
        timeout_seconds: float = 20.0,
        consistency_days: int = 7,
    ) -> None:
        self._model_identifier = model_identifier
        self._prompt_version = prompt_version
        self._graph = build_decision_graph(
            llm_factory,
            timeout_seconds=timeout_seconds,
            consistency_days=consistency_days,
        )

    @property
    def prompt_version(self) -> str:
        return self._prompt_version

    @property
    def model_identifier(self) -> str:
        return self._model_identifier

    async def make_decision(self, context: UserContext) -> DecisionResult:
        started = time.perf_counter()
        try:
            final_state = await self._graph.ainvoke({"context": context})
            decision = final_state["decision"]
            used_fallback = bool(final_state.get("used_fallback", False))
        except Exception as exc:
            # Last resort: the graph itself broke
            logger.exception("Decision graph failed for user %s: %s", context.user_id, exc)
            decision = fallback_decision(context)
            used_fallback = True

        latency_ms = int((time.perf_counter() - started) * 1000)
        logger.info(
            "Decision for user %s: action=%s confidence=%.2f fallback=%s latency=%dms",
            context.user_id, decision.action.value, decision.confidence, used_fallback, latency_ms,
        )
        return DecisionResult(
            decision=decision,
            latency_ms=latency_ms,
            model_identifier=FALLBACK_MODEL_IDENTIFIER if used_fallback else self._model_identifier,
            used_fallback=used_fallback,
        )
