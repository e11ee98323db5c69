"""Unit tests for the focus cursor."""

import pytest

from src.navigation.state_machine import FocusCursor, FocusState, FocusStateError


class TestFocusCursor:
    """Tests for FocusCursor."""

    @pytest.mark.unit
    def test_starts_idle(self) -> None:
        """Test a new cursor is IDLE."""
        cursor = FocusCursor()
        assert cursor.state == FocusState.IDLE
        assert cursor.index is None
        assert cursor.is_idle()

    @pytest.mark.unit
    def test_focus_and_clear(self) -> None:
        """Test IDLE -> FOCUSED -> IDLE."""
        cursor = FocusCursor()
        cursor.focus(2, 3)
        assert cursor.state == FocusState.FOCUSED
        assert cursor.index == 2

        cursor.clear()
        assert cursor.is_idle()

    @pytest.mark.unit
    @pytest.mark.parametrize(("index", "count"), [(3, 3), (-1, 3), (0, 0)])
    def test_out_of_range_rejected(self, index: int, count: int) -> None:
        """Test focusing outside the ranking raises and keeps the state."""
        cursor = FocusCursor()
        with pytest.raises(FocusStateError) as exc_info:
            cursor.focus(index, count)

        assert exc_info.value.index == index
        assert exc_info.value.ranked_count == count
        assert cursor.is_idle()

    @pytest.mark.unit
    def test_clamp_pulls_back_onto_last(self) -> None:
        """Test clamping after the ranking shrank."""
        cursor = FocusCursor()
        cursor.focus(4, 5)
        cursor.clamp(3)
        assert cursor.index == 2

    @pytest.mark.unit
    def test_clamp_to_empty_goes_idle(self) -> None:
        """Test clamping to an empty ranking."""
        cursor = FocusCursor()
        cursor.focus(0, 1)
        cursor.clamp(0)
        assert cursor.is_idle()

    @pytest.mark.unit
    def test_clamp_idle_stays_idle(self) -> None:
        """Test clamping never focuses an IDLE cursor."""
        cursor = FocusCursor()
        cursor.clamp(5)
        assert cursor.is_idle()
