"""
Unit tests for Board class.

Tests configuration, mine placement, adjacency counts, flood fill,
flagging, win/lose conditions and rendering.
"""
import random

import numpy as np
import pytest

from minefield.game import Board, BoardConfig, CellState, GameState
from conftest import LAYOUT_CLOSED, LAYOUT_MINES


def brute_force_count(board: Board, x: int, y: int) -> int:
    size = board.get_board_size()
    count = 0
    for other_y in range(max(0, y - 1), min(size, y + 2)):
        for other_x in range(max(0, x - 1), min(size, x + 2)):
            if (other_x, other_y) != (x, y) and board.get_cell(other_x, other_y).is_mine:
                count += 1
    return count


# ============================================================================
# Board Configuration Tests
# ============================================================================

class TestBoardConfig:
    """Test board configuration validation."""

    def test_defaults(self) -> None:
        """Default board is 7x7 with ~20% mines."""
        config = BoardConfig()
        assert config.size == 7
        assert config.num_mines == 9

    def test_zero_size_raises_error(self) -> None:
        with pytest.raises(ValueError, match="size must be positive"):
            BoardConfig(0, 0)

    def test_negative_mines_raises_error(self) -> None:
        with pytest.raises(ValueError, match="cannot be negative"):
            BoardConfig(7, -1)

    def test_too_many_mines_raises_error(self) -> None:
        with pytest.raises(ValueError, match="Too many mines"):
            BoardConfig(3, 9)  # Max is 8 (9 cells - 1)

    def test_config_is_immutable(self) -> None:
        config = BoardConfig(7, 5)
        with pytest.raises(AttributeError):
            config.size = 9


# ============================================================================
# Mine Placement Tests
# ============================================================================

class TestMinePlacement:
    """Test random and fixed mine layouts."""

    @pytest.mark.parametrize("seed", range(20))
    def test_exact_mine_count(self, seed: int) -> None:
        """Every board holds exactly the configured number of distinct mines."""
        board = Board(BoardConfig(7, 9), rng=random.Random(seed))
        mines = board.mine_positions()
        assert len(mines) == 9
        assert len(set(mines)) == 9

    def test_new_board_all_cells_hidden(self, default_board: Board) -> None:
        assert default_board.count_cells(CellState.HIDDEN) == 49
        assert default_board.is_playing is True

    def test_any_cell_can_hold_a_mine(self) -> None:
        """No cell is excluded from placement."""
        seen = set()
        for seed in range(200):
            seen.update(Board(BoardConfig(3, 1), rng=random.Random(seed)).mine_positions())
        assert len(seen) == 9

    def test_fixed_layout_is_used(self, layout_board: Board) -> None:
        assert sorted(layout_board.mine_positions()) == sorted(LAYOUT_MINES)

    def test_fixed_layout_rejects_duplicates(self) -> None:
        with pytest.raises(ValueError, match="Duplicate"):
            Board(BoardConfig(3, 2), mines=[(0, 0), (0, 0)])

    def test_fixed_layout_rejects_wrong_count(self) -> None:
        with pytest.raises(ValueError, match="Expected 2 mines"):
            Board(BoardConfig(3, 2), mines=[(0, 0)])

    def test_fixed_layout_rejects_outside_positions(self) -> None:
        with pytest.raises(ValueError, match="out of range"):
            Board(BoardConfig(3, 1), mines=[(3, 0)])

    def test_fixed_layout_accepts_any_iterable(self) -> None:
        board = Board(BoardConfig(3, 2), mines=((x, 0) for x in range(2)))
        assert sorted(board.mine_positions()) == [(0, 0), (1, 0)]
        assert board.get_cell(2, 1).adjacent_mines == 1

    def test_fixed_layout_is_the_only_constructor(self) -> None:
        assert not hasattr(Board, "from_mines")


# ============================================================================
# Adjacency Tests
# ============================================================================

class TestAdjacency:
    """Test adjacent mine counts."""

    @pytest.mark.parametrize("seed", range(10))
    def test_counts_match_neighbourhood(self, seed: int) -> None:
        """Counts equal the mines in the clipped 8-neighbourhood, mines included."""
        board = Board(BoardConfig(7, 12), rng=random.Random(seed))
        for y in range(7):
            for x in range(7):
                assert board.get_cell(x, y).adjacent_mines == brute_force_count(board, x, y)

    def test_corner_and_centre(self, single_mine_board: Board) -> None:
        for x, y in [(0, 0), (2, 0), (0, 2), (2, 2), (1, 0)]:
            assert single_mine_board.get_cell(x, y).adjacent_mines == 1
        assert single_mine_board.get_cell(1, 1).adjacent_mines == 0


# ============================================================================
# Reveal Tests
# ============================================================================

class TestReveal:
    """Test cell revealing and flood fill."""

    def test_flood_fill_opens_region_and_border(self, layout_board: Board) -> None:
        """Revealing (0, 0) opens every cell except mines and closed numbered cells."""
        assert layout_board.reveal_cell(0, 0) is True

        for y in range(7):
            for x in range(7):
                cell = layout_board.get_cell(x, y)
                if (x, y) in LAYOUT_MINES or (x, y) in LAYOUT_CLOSED:
                    assert cell.is_hidden, (x, y)
                else:
                    assert cell.is_revealed, (x, y)
        assert layout_board.is_playing is True

    def test_numbered_cell_reveals_only_itself(self, layout_board: Board) -> None:
        layout_board.reveal_cell(6, 0)
        assert layout_board.get_cell(6, 0).adjacent_mines == 1
        assert layout_board.count_cells(CellState.REVEALED) == 1

    def test_repeat_reveal_is_noop(self, layout_board: Board) -> None:
        layout_board.reveal_cell(0, 0)
        before = layout_board.get_observation()
        assert layout_board.reveal_cell(0, 0) is False
        assert layout_board.reveal_cell(3, 3) is False
        assert np.array_equal(before, layout_board.get_observation())

    def test_flood_fill_on_mine_free_board(self, empty_board: Board) -> None:
        """A board without mines is opened and won by one reveal."""
        empty_board.reveal_cell(2, 2)
        assert empty_board.count_cells(CellState.REVEALED) == 25
        assert empty_board.is_win() is True

    def test_flood_fill_on_large_board(self) -> None:
        """The worklist handles boards far deeper than the recursion limit."""
        board = Board(BoardConfig(120, 0))
        board.reveal_cell(0, 0)
        assert board.count_cells(CellState.REVEALED) == 120 * 120

    def test_flood_fill_skips_flagged_cells(self, layout_board: Board) -> None:
        layout_board.flag_cell(2, 2)
        layout_board.reveal_cell(0, 0)
        assert layout_board.get_cell(2, 2).is_flagged is True

    def test_reveal_flagged_cell_is_ignored(self, layout_board: Board) -> None:
        """TRY on a flagged cell leaves the whole board unchanged."""
        layout_board.flag_cell(0, 0)
        assert layout_board.reveal_cell(0, 0) is False
        assert layout_board.get_cell(0, 0).is_flagged is True
        assert layout_board.count_cells(CellState.REVEALED) == 0

    def test_reveal_outside_board_raises(self, layout_board: Board) -> None:
        with pytest.raises(IndexError):
            layout_board.reveal_cell(7, 0)
        with pytest.raises(IndexError):
            layout_board.flag_cell(0, -1)


# ============================================================================
# Flag Tests
# ============================================================================

class TestFlag:
    """Test flagging behavior."""

    def test_flag_toggles(self, layout_board: Board) -> None:
        assert layout_board.flag_cell(3, 3) is True
        assert layout_board.get_cell(3, 3).state == CellState.FLAGGED
        assert layout_board.flag_cell(3, 3) is True
        assert layout_board.get_cell(3, 3).state == CellState.HIDDEN

    def test_flag_revealed_cell_is_noop(self, layout_board: Board) -> None:
        layout_board.reveal_cell(6, 0)
        assert layout_board.flag_cell(6, 0) is False
        assert layout_board.get_cell(6, 0).is_revealed is True


# ============================================================================
# Win/Lose Condition Tests
# ============================================================================

class TestGameEndConditions:
    """Test win and lose conditions."""

    def test_reveal_mine_loses_game(self, layout_board: Board) -> None:
        layout_board.reveal_cell(5, 1)
        assert layout_board.is_lose() is True
        assert layout_board.is_win() is False
        assert layout_board.game_state == GameState.LOST

    def test_reveal_all_safe_cells_wins(self, layout_board: Board) -> None:
        layout_board.reveal_cell(0, 0)
        for x, y in LAYOUT_CLOSED:
            assert layout_board.is_win() is False
            layout_board.reveal_cell(x, y)
        assert layout_board.is_win() is True
        assert layout_board.is_lose() is False
        assert layout_board.game_state == GameState.WON

    def test_flags_do_not_count_towards_win(self, single_mine_board: Board) -> None:
        single_mine_board.flag_cell(1, 1)
        assert single_mine_board.is_win() is False

    def test_no_moves_after_game_over(self, layout_board: Board) -> None:
        layout_board.reveal_cell(5, 1)
        assert layout_board.reveal_cell(0, 0) is False
        assert layout_board.flag_cell(0, 0) is False

    def test_fresh_board_neither_won_nor_lost(self, default_board: Board) -> None:
        assert default_board.is_win() is False
        assert default_board.is_lose() is False


# ============================================================================
# Rendering Tests
# ============================================================================

class TestRendering:
    """Test wire rendering of the board."""

    def test_fresh_board_is_all_hidden(self, layout_board: Board) -> None:
        text = layout_board.convert_grid_to_protocol(False)
        assert text == "\r\n".join(["# # # # # # #"] * 7) + "\r\n"

    def test_rendering_after_flood_fill(self, layout_board: Board) -> None:
        layout_board.flag_cell(6, 6)
        layout_board.reveal_cell(0, 0)
        rows = layout_board.convert_grid_to_protocol(False).split("\r\n")
        assert rows[0] == "0 0 0 0 1 # #"
        assert rows[2] == "0 0 0 0 1 1 1"
        assert rows[3] == "0 0 0 0 0 0 0"
        assert rows[5] == "# # 1 0 1 # #"
        assert rows[6] == "# # 1 0 1 # F"
        assert rows[7] == ""

    def test_won_board_has_marker(self, layout_board: Board) -> None:
        layout_board.reveal_cell(0, 0)
        for x, y in LAYOUT_CLOSED:
            layout_board.reveal_cell(x, y)
        assert layout_board.convert_grid_to_protocol(False).endswith("GAME WON\r\n")

    def test_lost_board_shows_mine_and_marker(self, layout_board: Board) -> None:
        layout_board.reveal_cell(5, 1)
        rows = layout_board.convert_grid_to_protocol(False).split("\r\n")
        assert rows[1] == "# # # # # * #"
        assert rows[7] == "GAME LOST"

    def test_cheat_view_does_not_mutate(self, layout_board: Board) -> None:
        """Cheat view shows every mine but leaves every cell hidden."""
        text = layout_board.reveal_all_cells()
        rows = text.split("\r\n")
        assert rows[1] == "0 0 0 0 1 * 1"
        assert rows[5] == "1 * 1 0 1 * 1"
        assert layout_board.count_cells(CellState.HIDDEN) == 49
        assert "GAME" not in text
