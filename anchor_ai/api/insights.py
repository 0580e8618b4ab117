"""REST endpoint for deterministic user insights.

Path: GET /api/users/{user_id}/insights
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException

from anchor_ai.services.decision_service import DecisionService
from anchor_ai.store.base import ProfileNotFoundError, StoreError

logger = logging.getLogger(__name__)


def create_insights_router(service: DecisionService) -> APIRouter:
    router = APIRouter(prefix="/api/users/{user_id}", tags=["insights"])

    @router.get("/insights")
    async def get_insights(user_id: str) -> dict[str, Any]:
        try:
            insights = await service.insights(user_id)
        except ProfileNotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except StoreError as exc:
            logger.error("Insights failed for user %s: %s", user_id, exc)
            raise HTTPException(status_code=500, detail="Failed to load AI insights") from exc
        return {"data": insights}

    return router
