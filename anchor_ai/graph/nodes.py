"""LangGraph nodes: small functions that transform DecisionState.

Each node:
    - Receives the full DecisionState
    - Returns a partial dict update
    - Has no side effects beyond the model call in call_model

LLM usage:
    call_model uses Google Gemini via langchain-google-genai, built by an
    injected factory and awaited under a timeout.  Any failure, the
    timeout included, is recorded in ``error`` and routed to the fallback.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

from anchor_ai.core.fallback import fallback_decision
from anchor_ai.core.metrics import compute_metrics
from anchor_ai.graph.parsing import DecisionParseError, parse_decision
from anchor_ai.graph.prompt import build_prompt
from anchor_ai.graph.state import DecisionState

logger = logging.getLogger(__name__)

# ── Type alias for LLM factory ──────────────────────────────────────────────

LLMFactory = Callable[[], Any]  # Returns a langchain BaseChatModel


# ── 1. render_prompt ────────────────────────────────────────────────────────

def make_render_prompt(consistency_days: int = 7):
    """Create the render_prompt node for a given consistency window."""

    def render_prompt(state: DecisionState) -> dict:
        context = state["context"]
        prompt = build_prompt(context, compute_metrics(context, consistency_days))
        logger.debug("Rendered decision prompt for user %s (%d chars)", context.user_id, len(prompt))
        return {"prompt": prompt}

    return render_prompt


# ── 2. call_model ───────────────────────────────────────────────────────────

def _reply_text(response: Any) -> str:
    content = response.content if hasattr(response, "content") else response
    if isinstance(content, list):
        # Multi-part messages: keep the text parts in order
        parts = [p.get("text", "") if isinstance(p, dict) else str(p) for p in content]
        return "".join(parts)
    return str(content)


def make_call_model(llm_factory: LLMFactory, timeout_seconds: float):
    """Create the call_model node with an injected LLM factory."""

    async def call_model(state: DecisionState) -> dict:
        try:
            llm = llm_factory()
            response = await asyncio.wait_for(llm.ainvoke(state["prompt"]), timeout=timeout_seconds)
            text = _reply_text(response)
            logger.info("Gemini decision response length: %d chars", len(text))
            return {"raw_reply": text, "error": None}
        except asyncio.TimeoutError:
            logger.error("LLM invocation timed out after %.1fs; using fallback decision", timeout_seconds)
            return {"raw_reply": None, "error": f"model call timed out after {timeout_seconds}s"}
        except Exception as exc:
            logger.error("LLM invocation failed: %s; using fallback decision", exc)
            return {"raw_reply": None, "error": f"model call failed: {exc}"}

    return call_model


def route_after_model(state: DecisionState) -> str:
    return "fallback" if state.get("error") else "parse"


# ── 3. parse_reply ──────────────────────────────────────────────────────────

def parse_reply(state: DecisionState) -> dict:
    """Extract and validate the Decision from the raw model reply."""
    try:
        decision = parse_decision(state.get("raw_reply") or "")
    except DecisionParseError as exc:
        logger.warning("Failed to parse model decision: %s; using fallback", exc)
        return {"error": str(exc)}
    return {"decision": decision, "used_fallback": False}


def route_after_parse(state: DecisionState) -> str:
    return "fallback" if state.get("error") else "end"


# ── 4. apply_fallback ───────────────────────────────────────────────────────

def apply_fallback(state: DecisionState) -> dict:
    """Deterministic rule-table decision.  Never raises."""
    decision = fallback_decision(state.get("context"))
    logger.info("Fallback decision: action=%s (reason: %s)", decision.action.value, state.get("error"))
    return {"decision": decision, "used_fallback": True}
