"""
Pytest configuration and shared fixtures.
"""
import random
import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minefield.game import Board, BoardConfig, Cell
from minefield.net import ServerConfig, Session


# Mines at (x, y). (0, 0) has no adjacent mines and a TRY there opens
# everything except the mines and the numbered cells in LAYOUT_CLOSED.
LAYOUT_MINES = [(5, 1), (1, 5), (5, 5)]
LAYOUT_CLOSED = [
    (5, 0), (6, 0), (6, 1),
    (0, 5), (0, 6), (1, 6),
    (6, 5), (5, 6), (6, 6),
]


# ============================================================================
# Board Fixtures
# ============================================================================

@pytest.fixture
def layout_config() -> BoardConfig:
    """7x7 configuration matching LAYOUT_MINES."""
    return BoardConfig(7, len(LAYOUT_MINES))


@pytest.fixture
def layout_board(layout_config: BoardConfig) -> Board:
    """7x7 board with a known mine layout."""
    return Board(layout_config, mines=LAYOUT_MINES)


@pytest.fixture
def default_board() -> Board:
    """Default 7x7 board with a seeded random layout."""
    return Board(rng=random.Random(1234))


@pytest.fixture
def empty_board() -> Board:
    """Board with no mines for cascade testing."""
    return Board(BoardConfig(5, 0))


@pytest.fixture
def single_mine_board() -> Board:
    """3x3 board with its only mine in the centre."""
    return Board(BoardConfig(3, 1), mines=[(1, 1)])


# ============================================================================
# Cell Fixtures
# ============================================================================

@pytest.fixture
def hidden_cell() -> Cell:
    """Create a hidden cell."""
    return Cell()


@pytest.fixture
def mine_cell() -> Cell:
    """Create a hidden cell containing a mine."""
    return Cell(is_mine=True, adjacent_mines=2)


# ============================================================================
# Session Fixtures
# ============================================================================

@pytest.fixture
def server_config() -> ServerConfig:
    """Configuration matching the layout board."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,
        board_size=7,
        num_mines=len(LAYOUT_MINES),
        inactivity_timeout=5.0,
    )


@pytest.fixture
def session(server_config: ServerConfig, layout_board: Board) -> Session:
    """Session playing on the layout board."""
    return Session(server_config, board=layout_board, name="test")
