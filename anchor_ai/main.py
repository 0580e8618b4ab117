"""anchor-ai: emotion-aware decision service for the Anchor habit tracker.

This is the application entry point.  It wires the HabitStore,
ContextAggregator, DecisionEngine, DecisionExecutor and REST endpoints
together.  The concrete store backend is chosen here and nowhere else.

The store wired below is an empty InMemoryHabitStore, and this service
exposes no endpoints that create profiles, streaks, habits or tasks.  As
shipped, every decision or insights request therefore answers 404.  A
real deployment replaces it with a HabitStore backed by the app's
database.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI

from anchor_ai.api.decisions import create_decision_router
from anchor_ai.api.insights import create_insights_router
from anchor_ai.config import settings
from anchor_ai.core.context_aggregator import ContextAggregator
from anchor_ai.core.decision_engine import DecisionEngine
from anchor_ai.core.executor import DecisionExecutor
from anchor_ai.graph.llm import default_llm_factory
from anchor_ai.services.decision_service import DecisionService
from anchor_ai.store.memory_store import InMemoryHabitStore

# ── Logging ──────────────────────────────────────────────────────────────────

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)

# ── State ────────────────────────────────────────────────────────────────────

store = InMemoryHabitStore()

# ── Decision pipeline ────────────────────────────────────────────────────────

decision_engine = DecisionEngine(
    llm_factory=default_llm_factory,
    model_identifier=settings.gemini_model,
    prompt_version=settings.prompt_version,
    timeout_seconds=settings.llm_timeout_seconds,
    consistency_days=settings.consistency_window_days,
)

decision_service = DecisionService(
    store=store,
    aggregator=ContextAggregator(
        store,
        completion_window_days=settings.completion_window_days,
        analytics_window_days=settings.analytics_window_days,
    ),
    engine=decision_engine,
    executor=DecisionExecutor(store),
    consistency_days=settings.consistency_window_days,
)

# ── App ──────────────────────────────────────────────────────────────────────

app = FastAPI(
    title=settings.app_name,
    description="Emotion-aware habit decisions with a rule-based fallback",
    version="0.1.0",
)

# ── Routes ───────────────────────────────────────────────────────────────────

app.include_router(create_decision_router(
    decision_service,
    default_limit=settings.decision_history_default_limit,
    max_limit=settings.decision_history_max_limit,
))
app.include_router(create_insights_router(decision_service))


# ── Health ───────────────────────────────────────────────────────────────────

@app.get("/health")
async def health() -> dict:
    summary = await store.summary()
    return {
        "status": "ok",
        "model": decision_engine.model_identifier,
        "prompt_version": decision_engine.prompt_version,
        "store": summary.to_dict(),
    }
