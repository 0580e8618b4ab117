from anchor_ai.models.decision import (
    DecisionHistoryResponse,
    DecisionLogSummary,
    ProcessDecisionResponse,
    ProcessedDecisionData,
)

__all__ = [
    "DecisionHistoryResponse",
    "DecisionLogSummary",
    "ProcessDecisionResponse",
    "ProcessedDecisionData",
]
