"""Derived views over a ranking state.

Views are recomputed from ``position`` on every call and never cached.
"""

from dataclasses import dataclass
from enum import Enum

from src.ranking.models import RankingState, ValueEntity


class ViolationKind(str, Enum):
    """Kinds of position invariant violations."""

    DUPLICATE = "duplicate"
    GAP = "gap"


@dataclass(frozen=True)
class InvariantViolation:
    """A single breach of the contiguous 1..K position rule.

    Attributes:
        kind: What went wrong.
        position: The offending (duplicated or missing) position.
        value_ids: Values holding a duplicated position; empty for gaps.
    """

    kind: ViolationKind
    position: int
    value_ids: tuple[str, ...] = ()


def ranking_view(state: RankingState) -> list[ValueEntity]:
    """Ranked values in ascending position order.

    Ties (only possible in an unnormalized imported state) keep catalog order.
    """
    ranked = [value for value in state.values if value.position is not None]
    return sorted(ranked, key=lambda value: value.position or 0)


def unranked_pool(state: RankingState) -> list[ValueEntity]:
    """Unranked values in catalog order."""
    return [value for value in state.values if value.position is None]


def check_invariants(state: RankingState) -> list[InvariantViolation]:
    """Report every way the ranked positions differ from 1..K.

    Returns:
        Violations; empty when positions are exactly 1..K.
    """
    by_position: dict[int, list[str]] = {}
    for value in state.values:
        if value.position is not None:
            by_position.setdefault(value.position, []).append(value.id)

    ranked_count = sum(len(ids) for ids in by_position.values())
    violations = [
        InvariantViolation(ViolationKind.DUPLICATE, position, tuple(ids))
        for position, ids in sorted(by_position.items())
        if len(ids) > 1
    ]
    violations.extend(
        InvariantViolation(ViolationKind.GAP, position)
        for position in range(1, ranked_count + 1)
        if position not in by_position
    )
    return violations


def is_contiguous(state: RankingState) -> bool:
    """Whether ranked positions are exactly 1..K."""
    return not check_invariants(state)
