"""Ranking engine: the only code that changes value positions."""

import structlog

from src.catalog.constants import COMPONENT_RANKING
from src.catalog.schemas import CatalogConfig
from src.ranking.metrics import RankingMetrics
from src.ranking.models import RankingState
from src.ranking.views import ViolationKind, check_invariants, ranking_view


logger = structlog.get_logger()


class RankingEngine:
    """Applies rank mutations to a ranking state.

    The engine holds no ranking of its own. Every operation takes the
    current state and returns the next one; an operation whose
    preconditions do not hold returns the input state unchanged (the same
    object), so callers can detect no-ops with ``is``.

    After every change the ranked positions are exactly 1..K.
    """

    def __init__(
        self,
        catalog: CatalogConfig,
        metrics: RankingMetrics | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            catalog: Catalog supplying the reset state.
            metrics: Optional metrics instance.
        """
        self._catalog = catalog
        self._metrics = metrics or RankingMetrics.get_instance()
        self._log = logger.bind(component=COMPONENT_RANKING)

    @property
    def catalog(self) -> CatalogConfig:
        """Get the catalog backing this engine."""
        return self._catalog

    def default_state(self) -> RankingState:
        """Catalog default state with every value unranked."""
        return RankingState.from_catalog(self._catalog)

    def move_within_ranking(
        self, state: RankingState, from_index: int, to_index: int
    ) -> RankingState:
        """Move a ranked value to another slot.

        Splice semantics: the value is removed at ``from_index`` and then
        inserted at ``to_index`` of the shortened sequence. All ranked
        values are renumbered to index + 1.

        Args:
            state: Current state.
            from_index: Zero-based index into the ranking view.
            to_index: Zero-based target index into the ranking view.

        Returns:
            The new state, or ``state`` itself when the indices are equal
            or out of range.
        """
        ranked = ranking_view(state)
        count = len(ranked)
        if not (0 <= from_index < count and 0 <= to_index < count):
            return self._noop(
                state,
                "move_within_ranking",
                reason="index_out_of_range",
                from_index=from_index,
                to_index=to_index,
                ranked_count=count,
            )
        if from_index == to_index:
            return self._noop(
                state, "move_within_ranking", reason="same_index", from_index=from_index
            )

        moved = ranked.pop(from_index)
        ranked.insert(to_index, moved)
        new_state = state.with_positions(
            {value.id: index + 1 for index, value in enumerate(ranked)}
        )

        self._metrics.record_move()
        self._log.info(
            "value_moved",
            value_id=moved.id,
            from_position=from_index + 1,
            to_position=to_index + 1,
        )
        return self._verified(new_state, "move_within_ranking")

    def promote(self, state: RankingState, value_id: str) -> RankingState:
        """Append an unranked value to the end of the ranking.

        Args:
            state: Current state.
            value_id: Value to promote.

        Returns:
            The new state, or ``state`` when the value is unknown or
            already ranked.
        """
        value = state.get(value_id)
        if value is None:
            return self._noop(state, "promote", reason="unknown_value", value_id=value_id)
        if value.position is not None:
            return self._noop(state, "promote", reason="already_ranked", value_id=value_id)

        position = len(ranking_view(state)) + 1
        new_state = state.with_positions({value_id: position})

        self._metrics.record_promotion()
        self._log.info("value_promoted", value_id=value_id, position=position)
        return self._verified(new_state, "promote")

    def demote(self, state: RankingState, value_id: str) -> RankingState:
        """Remove a value from the ranking and close the gap it leaves.

        Args:
            state: Current state.
            value_id: Value to demote.

        Returns:
            The new state, or ``state`` when the value is unknown or
            already unranked.
        """
        value = state.get(value_id)
        if value is None:
            return self._noop(state, "demote", reason="unknown_value", value_id=value_id)
        if value.position is None:
            return self._noop(state, "demote", reason="not_ranked", value_id=value_id)

        removed_position = value.position
        positions: dict[str, int | None] = {value_id: None}
        for other in state.values:
            if other.position is not None and other.position > removed_position:
                positions[other.id] = other.position - 1
        new_state = state.with_positions(positions)

        self._metrics.record_demotion()
        self._log.info(
            "value_demoted",
            value_id=value_id,
            removed_position=removed_position,
            shifted_count=len(positions) - 1,
        )
        return self._verified(new_state, "demote")

    def reset(self, state: RankingState) -> RankingState:
        """Discard the ranking and return to the catalog default."""
        self._metrics.record_reset()
        self._log.info("ranking_reset", ranked_before=len(ranking_view(state)))
        return self.default_state()

    def normalize(self, state: RankingState) -> RankingState:
        """Renumber ranked values to 1..K keeping their relative order.

        Values sharing a position keep catalog order. Returns ``state``
        unchanged when it already satisfies the invariant.
        """
        violations = check_invariants(state)
        if not violations:
            return state

        ranked = ranking_view(state)
        new_state = state.with_positions(
            {value.id: index + 1 for index, value in enumerate(ranked)}
        )

        self._metrics.record_normalization()
        self._log.warning(
            "ranking_renumbered",
            ranked_count=len(ranked),
            gaps=sum(1 for v in violations if v.kind is ViolationKind.GAP),
            duplicates=sum(1 for v in violations if v.kind is ViolationKind.DUPLICATE),
        )
        return new_state

    def _noop(self, state: RankingState, operation: str, **details: object) -> RankingState:
        """Log and count an operation that left the state untouched."""
        self._metrics.record_noop()
        self._log.debug("operation_noop", op=operation, **details)
        return state

    def _verified(self, state: RankingState, operation: str) -> RankingState:
        """Log invariant violations left behind by an operation."""
        violations = check_invariants(state)
        if violations:
            self._metrics.record_invariant_violation()
            self._log.error(
                "invariant_violation",
                error_type="non_contiguous_positions",
                op=operation,
                violations=[(v.kind.value, v.position) for v in violations],
            )
        return state
