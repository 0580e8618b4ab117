"""REST endpoints for AI decisions.

Paths:
    POST /api/users/{user_id}/decisions   run one decision cycle
    GET  /api/users/{user_id}/decisions   decision history, newest first

The model path never produces an error response: when Gemini is down or
replies with garbage, the rule-based fallback decides instead.  Only a
missing profile (404) or a hard storage failure (500) surfaces as an error.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query

from anchor_ai.domain.enums import DecisionAction
from anchor_ai.models.decision import (
    DecisionHistoryResponse,
    DecisionLogSummary,
    ProcessDecisionResponse,
    ProcessedDecisionData,
)
from anchor_ai.services.decision_service import DecisionService
from anchor_ai.store.base import ProfileNotFoundError, StoreError

logger = logging.getLogger(__name__)


def create_decision_router(
    service: DecisionService,
    default_limit: int = 10,
    max_limit: int = 100,
) -> APIRouter:
    """Factory that wires the decision endpoints to a DecisionService."""

    router = APIRouter(prefix="/api/users/{user_id}", tags=["decisions"])

    @router.post("/decisions", response_model=ProcessDecisionResponse)
    async def process_decision(user_id: str) -> ProcessDecisionResponse:
        """Gather context, decide, log and execute for one user."""
        try:
            processed = await service.process(user_id)
        except ProfileNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except StoreError as exc:
            logger.error("Decision processing failed for user %s: %s", user_id, exc)
            raise HTTPException(status_code=500, detail="Failed to process AI decision") from exc

        decision = processed.decision
        return ProcessDecisionResponse(
            data=ProcessedDecisionData(
                action=decision.action,
                reasoning=decision.reasoning,
                confidence=decision.confidence,
                executed=processed.executed,
                decision_log_id=processed.decision_log_id,
            )
        )

    @router.get("/decisions", response_model=DecisionHistoryResponse)
    async def list_decisions(
        user_id: str,
        limit: int = Query(default=default_limit, ge=1, le=max_limit),
        decision_type: DecisionAction | None = Query(default=None, alias="type", description="Filter by action"),
    ) -> DecisionHistoryResponse:
        """Past decisions for a user, most recent first."""
        try:
            logs = await service.history(user_id, limit=limit, decision_type=decision_type)
        except StoreError as exc:
            logger.error("Decision history failed for user %s: %s", user_id, exc)
            raise HTTPException(status_code=500, detail="Failed to load AI decisions") from exc

        items = [DecisionLogSummary.model_validate(log.summary()) for log in logs]
        return DecisionHistoryResponse(data=items, count=len(items))

    return router
