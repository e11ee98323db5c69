"""Metrics collection for the ranking engine."""

from dataclasses import dataclass
from typing import ClassVar


@dataclass
class RankingMetrics:
    """Counters for ranking engine operations.

    Attributes:
        moves_total: Reorders that changed the ranking.
        promotions_total: Values added to the end of the ranking.
        demotions_total: Values removed from the ranking.
        resets_total: Resets to the catalog default.
        normalizations_total: Renumberings that repaired gaps or duplicates.
        noops_total: Operations rejected as no-ops.
        invariant_violations_total: States found breaking the 1..K rule.
    """

    moves_total: int = 0
    promotions_total: int = 0
    demotions_total: int = 0
    resets_total: int = 0
    normalizations_total: int = 0
    noops_total: int = 0
    invariant_violations_total: int = 0

    _instance: ClassVar["RankingMetrics | None"] = None

    @classmethod
    def get_instance(cls) -> "RankingMetrics":
        """Get singleton metrics instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset metrics (primarily for testing)."""
        cls._instance = None

    def record_move(self) -> None:
        """Record a successful move."""
        self.moves_total += 1

    def record_promotion(self) -> None:
        """Record a promotion."""
        self.promotions_total += 1

    def record_demotion(self) -> None:
        """Record a demotion."""
        self.demotions_total += 1

    def record_reset(self) -> None:
        """Record a reset."""
        self.resets_total += 1

    def record_normalization(self) -> None:
        """Record a renumbering."""
        self.normalizations_total += 1

    def record_noop(self) -> None:
        """Record an operation that left the state unchanged."""
        self.noops_total += 1

    def record_invariant_violation(self) -> None:
        """Record a state that broke the position invariant."""
        self.invariant_violations_total += 1

    def to_dict(self) -> dict[str, int]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        return {
            "moves_total": self.moves_total,
            "promotions_total": self.promotions_total,
            "demotions_total": self.demotions_total,
            "resets_total": self.resets_total,
            "normalizations_total": self.normalizations_total,
            "noops_total": self.noops_total,
            "invariant_violations_total": self.invariant_violations_total,
        }
