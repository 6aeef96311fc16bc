"""
Graph Sentiment Aggregator (WING-Score)

CONTRACT:
    Input:  WingScoreRequest (owner id, graph id)
    Output: WingScoreResult {graphId, wingScore in [-100, 100]}

RESPONSIBILITIES:
    - Signed, evidence-weighted edge sentiment sum
    - Confidence shrinkage by keyword informativeness and article volume
    - Neutral result (0) for graphs without edges or articles

Deterministic. Constants come from settings (WING_* variables).
"""

from wing.services.scoring.wing_score import (
    WingScoreBreakdown,
    WingScoreParameters,
    compute_wing_score,
)
from wing.services.scoring.service import (
    WingScoreRequest,
    WingScoreService,
    get_wing_score_service,
)

__all__ = [
    "WingScoreBreakdown",
    "WingScoreParameters",
    "compute_wing_score",
    "WingScoreRequest",
    "WingScoreService",
    "get_wing_score_service",
]
