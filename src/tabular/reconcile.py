"""Name-based reconciliation of imported rows with the catalog."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

import structlog

from src.catalog.constants import COMPONENT_TABULAR
from src.catalog.schemas import normalize_name
from src.ranking.models import RankingState, ValueEntity
from src.ranking.views import InvariantViolation, check_invariants
from src.tabular.metrics import TabularMetrics
from src.tabular.models import MatchOutcome, RowOutcome, TabularRow


logger = structlog.get_logger()


@dataclass(frozen=True)
class NameMatch:
    """Result of looking a name up in a NameIndex.

    Attributes:
        outcome: Whether the name resolved to one, none or several values.
        value_id: The matched value ID when MATCHED.
        candidates: All value IDs carrying the name (several when AMBIGUOUS).
    """

    outcome: MatchOutcome
    value_id: str | None = None
    candidates: tuple[str, ...] = ()


class NameIndex:
    """Case-insensitive lookup from value name to value ID.

    Built once from the catalog values. Names are compared after trimming
    and case folding.
    """

    def __init__(self, values: Iterable[ValueEntity]) -> None:
        """Build the index.

        Args:
            values: Values whose names are indexed.
        """
        self._ids_by_name: dict[str, list[str]] = {}
        for value in values:
            self._ids_by_name.setdefault(normalize_name(value.name), []).append(value.id)

    def __len__(self) -> int:
        """Number of distinct normalized names."""
        return len(self._ids_by_name)

    @property
    def ambiguous_names(self) -> list[str]:
        """Normalized names shared by more than one value."""
        return sorted(name for name, ids in self._ids_by_name.items() if len(ids) > 1)

    def lookup(self, name: str) -> NameMatch:
        """Resolve a name to a value.

        Args:
            name: Name as written in the imported file.

        Returns:
            NameMatch describing the outcome.
        """
        ids = self._ids_by_name.get(normalize_name(name), [])
        if not ids:
            return NameMatch(MatchOutcome.UNMATCHED)
        if len(ids) > 1:
            return NameMatch(MatchOutcome.AMBIGUOUS, candidates=tuple(ids))
        return NameMatch(MatchOutcome.MATCHED, value_id=ids[0], candidates=(ids[0],))


@dataclass
class ReconcileResult:
    """Outcome of merging imported rows into the catalog default.

    Attributes:
        state: Rebuilt ranking state, imported ranks applied verbatim.
        outcomes: Per-row results, in input order.
        violations: Position invariant breaches present in ``state``.
        reordered: True when some imported number was not a rank and the
            matched values were ranked by sort order instead.
    """

    state: RankingState
    outcomes: list[RowOutcome] = field(default_factory=list)
    violations: list[InvariantViolation] = field(default_factory=list)
    reordered: bool = False

    def _count(self, outcome: MatchOutcome) -> int:
        return sum(1 for row in self.outcomes if row.outcome is outcome)

    @property
    def matched_count(self) -> int:
        """Rows applied to a catalog value."""
        return self._count(MatchOutcome.MATCHED)

    @property
    def unmatched_count(self) -> int:
        """Rows ignored because no value carries the name."""
        return self._count(MatchOutcome.UNMATCHED)

    @property
    def ambiguous_count(self) -> int:
        """Rows ignored because several values carry the name."""
        return self._count(MatchOutcome.AMBIGUOUS)

    @property
    def is_contiguous(self) -> bool:
        """Whether the imported positions are exactly 1..K."""
        return not self.violations


def reconcile(
    rows: Sequence[TabularRow],
    default_state: RankingState,
    index: NameIndex | None = None,
) -> ReconcileResult:
    """Rebuild a ranking from imported rows.

    Starts from ``default_state`` (normally every value unranked) and sets
    the position of each matched value to the row's position verbatim. When
    several rows name the same value the last one wins. Unmatched and
    ambiguous rows are ignored. Positions are not renumbered here; callers
    decide what to do with ``violations``.

    When a matched row carries a number that cannot be a rank (fractional,
    zero or negative), the matched values are ranked 1..K in ascending order
    of their numbers instead, ties in catalog order.

    Args:
        rows: Validated rows from ``deserialize``.
        default_state: State to start from.
        index: Name lookup; built from ``default_state`` when omitted.

    Returns:
        ReconcileResult with the rebuilt state and per-row outcomes.
    """
    index = index or NameIndex(default_state.values)
    applied: dict[str, TabularRow] = {}
    outcomes: list[RowOutcome] = []

    for row in rows:
        match = index.lookup(row.name)
        if match.outcome is MatchOutcome.MATCHED and match.value_id is not None:
            applied[match.value_id] = row
        else:
            logger.info(
                "csv_row_not_applied",
                component=COMPONENT_TABULAR,
                name=row.name,
                outcome=match.outcome.value,
            )
        outcomes.append(RowOutcome(row=row, outcome=match.outcome, value_id=match.value_id))

    reordered = not all(row.is_rank for row in applied.values())
    positions: dict[str, int | None]
    if reordered:
        catalog_order = {value_id: i for i, value_id in enumerate(default_state.ids)}
        ordered = sorted(
            applied,
            key=lambda value_id: (applied[value_id].position, catalog_order[value_id]),
        )
        positions = {value_id: rank for rank, value_id in enumerate(ordered, start=1)}
        logger.warning(
            "csv_positions_reordered",
            component=COMPONENT_TABULAR,
            matched=len(ordered),
        )
    else:
        positions = {value_id: int(row.position) for value_id, row in applied.items()}

    state = default_state.with_positions(positions)
    result = ReconcileResult(
        state=state,
        outcomes=outcomes,
        violations=check_invariants(state),
        reordered=reordered,
    )

    TabularMetrics.get_instance().record_matches(
        matched=result.matched_count,
        unmatched=result.unmatched_count,
        ambiguous=result.ambiguous_count,
    )
    logger.info(
        "csv_rows_reconciled",
        component=COMPONENT_TABULAR,
        rows_in=len(rows),
        matched=result.matched_count,
        unmatched=result.unmatched_count,
        ambiguous=result.ambiguous_count,
        contiguous=result.is_contiguous,
    )
    return result
