"""Pydantic response models for the decision endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from anchor_ai.domain.enums import DecisionAction


class ProcessedDecisionData(BaseModel):
    """Payload returned after a decision has been made and executed."""

    action: DecisionAction = Field(..., description="Chosen action")
    reasoning: str = Field(..., description="Why the action was chosen")
    confidence: float = Field(..., ge=0.0, le=1.0)
    executed: bool = Field(..., description="Whether the side effect was applied")
    decision_log_id: str


class ProcessDecisionResponse(BaseModel):
    message: str = "AI decision processed"
    data: ProcessedDecisionData


class DecisionLogSummary(BaseModel):
    id: str
    decision_type: DecisionAction
    decision: dict[str, Any] = Field(default_factory=dict)
    prompt_version: str
    model_used: str
    execution_time_ms: int | None = None
    created_at: datetime
    executed_at: datetime | None = None
    outcome: dict[str, Any] | None = None


class DecisionHistoryResponse(BaseModel):
    data: list[DecisionLogSummary]
    count: int
