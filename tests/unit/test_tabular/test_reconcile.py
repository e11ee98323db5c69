"""Unit tests for name-based reconciliation."""

from collections.abc import Generator

import pytest

from src.ranking.engine import RankingEngine
from src.ranking.models import RankingState, ValueEntity
from src.ranking.views import ranking_view, unranked_pool
from src.tabular.codec import serialize
from src.tabular.metrics import TabularMetrics
from src.tabular.models import MatchOutcome, TabularRow
from src.tabular.reconcile import NameIndex, reconcile
from tests.helpers.catalog import four_value_catalog, make_catalog, ranked_pairs, state_with


@pytest.fixture(autouse=True)
def fresh_metrics() -> Generator[None]:
    """Reset tabular metrics around each test."""
    TabularMetrics.reset()
    yield
    TabularMetrics.reset()


@pytest.fixture
def default_state() -> RankingState:
    """Default state of catalog [A, B, C, D]."""
    return RankingState.from_catalog(four_value_catalog())


class TestNameIndex:
    """Tests for NameIndex."""

    @pytest.mark.unit
    def test_case_insensitive_match(self) -> None:
        """Test lookups ignore case and surrounding spaces."""
        index = NameIndex(RankingState.from_catalog(make_catalog("Inner Peace")).values)
        match = index.lookup("  inner PEACE ")
        assert match.outcome is MatchOutcome.MATCHED
        assert match.value_id == "inner-peace"

    @pytest.mark.unit
    def test_unknown_name(self, default_state: RankingState) -> None:
        """Test an unknown name does not match."""
        match = NameIndex(default_state.values).lookup("zz")
        assert match.outcome is MatchOutcome.UNMATCHED
        assert match.value_id is None

    @pytest.mark.unit
    def test_shared_name_is_ambiguous(self) -> None:
        """Test a name carried by two values is refused."""
        index = NameIndex(
            [ValueEntity(id="one", name="Love"), ValueEntity(id="two", name="LOVE")]
        )
        match = index.lookup("love")
        assert match.outcome is MatchOutcome.AMBIGUOUS
        assert match.value_id is None
        assert match.candidates == ("one", "two")
        assert index.ambiguous_names == ["love"]
        assert len(index) == 1


class TestReconcile:
    """Tests for reconcile."""

    @pytest.mark.unit
    def test_positions_applied_verbatim(self, default_state: RankingState) -> None:
        """Test [{c,5},{zz,1}] ranks only C, at position 5."""
        rows = [TabularRow(name="c", position=5), TabularRow(name="zz", position=1)]
        result = reconcile(rows, default_state)

        assert ranked_pairs(result.state) == [("c", 5)]
        assert [value.id for value in unranked_pool(result.state)] == ["a", "b", "d"]
        assert result.matched_count == 1
        assert result.unmatched_count == 1
        assert not result.is_contiguous

    @pytest.mark.unit
    def test_non_rank_numbers_order_the_ranking(self, default_state: RankingState) -> None:
        """Test fractional and zero positions rank values by their numbers."""
        rows = [
            TabularRow(name="A", position=1),
            TabularRow(name="B", position=2),
            TabularRow(name="C", position=1.5),
            TabularRow(name="D", position=0),
        ]
        result = reconcile(rows, default_state)

        assert result.reordered
        assert result.is_contiguous
        assert ranked_pairs(result.state) == [("d", 1), ("a", 2), ("c", 3), ("b", 4)]

    @pytest.mark.unit
    def test_reordered_ties_keep_catalog_order(self, default_state: RankingState) -> None:
        """Test equal sort keys fall back to catalog order."""
        rows = [TabularRow(name="C", position=-1), TabularRow(name="A", position=-1)]
        result = reconcile(rows, default_state)
        assert ranked_pairs(result.state) == [("a", 1), ("c", 2)]

    @pytest.mark.unit
    def test_whole_ranks_not_reordered(self, default_state: RankingState) -> None:
        """Test rows holding ranks only are applied as written."""
        result = reconcile([TabularRow(name="B", position=3)], default_state)
        assert not result.reordered
        assert ranked_pairs(result.state) == [("b", 3)]

    @pytest.mark.unit
    def test_existing_ranking_discarded(self) -> None:
        """Test reconcile starts from the given default, not the current ranking."""
        catalog = four_value_catalog()
        default = RankingState.from_catalog(catalog)
        current = state_with(catalog, {"a": 1, "b": 2})

        result = reconcile([TabularRow(name="D", position=1)], default)
        assert ranked_pairs(result.state) == [("d", 1)]
        assert ranked_pairs(current) == [("a", 1), ("b", 2)]

    @pytest.mark.unit
    def test_last_duplicate_row_wins(self, default_state: RankingState) -> None:
        """Test a value named twice takes the later position."""
        rows = [
            TabularRow(name="A", position=1),
            TabularRow(name="B", position=2),
            TabularRow(name="a", position=3),
        ]
        result = reconcile(rows, default_state)
        assert ranked_pairs(result.state) == [("b", 2), ("a", 3)]

    @pytest.mark.unit
    def test_empty_rows_give_default(self, default_state: RankingState) -> None:
        """Test no rows means nothing ranked."""
        result = reconcile([], default_state)
        assert ranking_view(result.state) == []
        assert result.is_contiguous

    @pytest.mark.unit
    def test_outcomes_in_input_order(self, default_state: RankingState) -> None:
        """Test per-row outcomes line up with the input."""
        rows = [TabularRow(name="zz", position=1), TabularRow(name="B", position=1)]
        result = reconcile(rows, default_state)
        assert [row.outcome for row in result.outcomes] == [
            MatchOutcome.UNMATCHED,
            MatchOutcome.MATCHED,
        ]
        assert result.outcomes[1].value_id == "b"

    @pytest.mark.unit
    def test_metrics_recorded(self, default_state: RankingState) -> None:
        """Test match counts land in metrics."""
        reconcile(
            [TabularRow(name="A", position=1), TabularRow(name="nope", position=2)],
            default_state,
        )
        metrics = TabularMetrics.get_instance()
        assert metrics.rows_matched_total == 1
        assert metrics.rows_unmatched_total == 1


class TestRoundTrip:
    """Exporting then importing a ranking."""

    @pytest.mark.unit
    def test_export_then_import_reproduces_ranking(self) -> None:
        """Test serialize followed by reconcile gives the same ranking."""
        engine = RankingEngine(four_value_catalog())
        state = engine.default_state()
        for value_id in ("d", "b", "a"):
            state = engine.promote(state, value_id)

        result = reconcile(serialize(ranking_view(state)), engine.default_state())
        assert ranked_pairs(result.state) == ranked_pairs(state)
        assert result.is_contiguous
