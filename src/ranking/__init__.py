"""Ranking engine for ordering catalog values.

Splits the catalog into a ranked list (positions 1..K) and an unranked
pool, and provides the only operations allowed to change positions:
move, promote, demote, reset and normalize.
"""

from src.ranking.engine import RankingEngine
from src.ranking.metrics import RankingMetrics
from src.ranking.models import RankingState, ValueEntity
from src.ranking.views import (
    InvariantViolation,
    ViolationKind,
    check_invariants,
    is_contiguous,
    ranking_view,
    unranked_pool,
)


__all__ = [
    "InvariantViolation",
    "RankingEngine",
    "RankingMetrics",
    "RankingState",
    "ValueEntity",
    "ViolationKind",
    "check_invariants",
    "is_contiguous",
    "ranking_view",
    "unranked_pool",
]
