"""
Board module for the minefield game.

Implements the grid engine: mine placement, adjacency counting,
flood-fill revealing, flagging and win/lose detection. Coordinates follow
the wire protocol: ``x`` is the column and ``y`` is the row.
"""
import random
from collections import deque
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterable, List, Optional, Tuple

import numpy as np

from .cell import Cell, CellState
from .render import GAME_LOST, GAME_WON, encode_board


# ============================================================================
# Constants
# ============================================================================

class GameState(Enum):
    """Possible states of the game."""

    PLAYING = auto()
    WON = auto()
    LOST = auto()


_GAME_OVER_MARKERS = {GameState.WON: GAME_WON, GameState.LOST: GAME_LOST}


DEFAULT_SIZE = 7
DEFAULT_MINE_DENSITY = 0.2


@dataclass(frozen=True)
class BoardConfig:
    """
    Configuration for a square board.

    Attributes:
        size: Number of rows and columns.
        num_mines: Total mines to place (default: ~20% of cells).
    """

    size: int = DEFAULT_SIZE
    num_mines: Optional[int] = None

    def __post_init__(self) -> None:
        """Fill in the default mine count and validate."""
        if self.num_mines is None:
            default = int(self.size * self.size * DEFAULT_MINE_DENSITY)
            object.__setattr__(self, "num_mines", default)
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        if self.size < 1:
            raise ValueError("Board size must be positive")
        if self.num_mines < 0:
            raise ValueError("Number of mines cannot be negative")
        max_mines = self.size * self.size - 1
        if self.num_mines > max_mines:
            raise ValueError(f"Too many mines (max {max_mines})")

    @property
    def total_cells(self) -> int:
        return self.size * self.size


# ============================================================================
# Board Class
# ============================================================================

class Board:
    """
    Minefield game board.

    Owns the grid of cells for a single session. Mines are placed once at
    construction; any cell may hold a mine, including the first one tried.
    """

    def __init__(
        self,
        config: Optional[BoardConfig] = None,
        rng: Optional[random.Random] = None,
        mines: Optional[Iterable[Tuple[int, int]]] = None,
    ) -> None:
        """
        Build a board and lay out its mines.

        Args:
            config: Board configuration (default: 7x7 with 9 mines).
            rng: Random source for mine placement.
            mines: Fixed (x, y) mine coordinates instead of a random layout.
        """
        self.config = config or BoardConfig()
        self._rng = rng or random.Random()
        self._init_grid()
        if mines is None:
            positions = self._random_mine_positions()
        else:
            positions = self._check_mine_positions(mines)
        self._place_mines(positions)
        self._calculate_adjacent_mines()

    # ========================================================================
    # Grid Initialization (Low-level)
    # ========================================================================

    def _init_grid(self) -> None:
        """Create empty grid of cells, indexed [y][x]."""
        size = self.config.size
        self._grid: List[List[Cell]] = [
            [Cell() for _ in range(size)] for _ in range(size)
        ]
        self._game_state = GameState.PLAYING
        self._safe_revealed = 0

    def _random_mine_positions(self) -> List[Tuple[int, int]]:
        """Pick distinct mine coordinates over the whole board."""
        size = self.config.size
        positions = [(x, y) for y in range(size) for x in range(size)]
        return self._rng.sample(positions, self.config.num_mines)

    def _check_mine_positions(
        self, mines: Iterable[Tuple[int, int]]
    ) -> List[Tuple[int, int]]:
        """Validate a fixed mine layout against the configuration."""
        positions = list(mines)
        if len(set(positions)) != len(positions):
            raise ValueError("Duplicate mine positions")
        if len(positions) != self.config.num_mines:
            raise ValueError(
                f"Expected {self.config.num_mines} mines, got {len(positions)}"
            )
        for x, y in positions:
            if not self._is_valid_position(x, y):
                raise ValueError(f"Mine position out of range: ({x}, {y})")
        return positions

    def _place_mines(self, positions: Iterable[Tuple[int, int]]) -> None:
        for x, y in positions:
            self._grid[y][x].is_mine = True

    def _calculate_adjacent_mines(self) -> None:
        """Calculate adjacent mine counts for all cells, mines included."""
        for y in range(self.config.size):
            for x in range(self.config.size):
                self._grid[y][x].adjacent_mines = self._count_adjacent_mines(
                    x, y
                )

    def _count_adjacent_mines(self, x: int, y: int) -> int:
        """Count mines adjacent to a specific cell."""
        count = 0
        for neighbor_x, neighbor_y in self._get_neighbors(x, y):
            if self._grid[neighbor_y][neighbor_x].is_mine:
                count += 1
        return count

    # ========================================================================
    # Neighbor Utilities (Low-level)
    # ========================================================================

    def _get_neighbors(self, x: int, y: int) -> List[Tuple[int, int]]:
        """
        Get valid neighboring cell positions.

        Args:
            x: Column of center cell.
            y: Row of center cell.

        Returns:
            List of (x, y) tuples for neighbors inside the board.
        """
        neighbors = []
        for delta_y in (-1, 0, 1):
            for delta_x in (-1, 0, 1):
                if delta_x == 0 and delta_y == 0:
                    continue
                new_x = x + delta_x
                new_y = y + delta_y
                if self._is_valid_position(new_x, new_y):
                    neighbors.append((new_x, new_y))
        return neighbors

    def _is_valid_position(self, x: int, y: int) -> bool:
        """Check if position is within board bounds."""
        return 0 <= x < self.config.size and 0 <= y < self.config.size

    def _require_position(self, x: int, y: int) -> None:
        if not self._is_valid_position(x, y):
            raise IndexError(
                f"({x}, {y}) is outside a {self.config.size}x"
                f"{self.config.size} board"
            )

    # ========================================================================
    # Game Actions (Mid-level)
    # ========================================================================

    def reveal_cell(self, x: int, y: int) -> bool:
        """
        Reveal the cell at the given position.

        A mine loses the game. A cell with no adjacent mines opens its whole
        connected empty region and that region's numbered border. Flagged
        and already revealed cells are left untouched.

        Args:
            x: Column to reveal.
            y: Row to reveal.

        Returns:
            True if at least one cell was revealed, False otherwise.

        Raises:
            IndexError: If the position is outside the board.
        """
        self._require_position(x, y)
        if self._game_state != GameState.PLAYING:
            return False

        cell = self._grid[y][x]
        if not cell.reveal():
            return False

        if cell.is_mine:
            self._game_state = GameState.LOST
            return True

        self._safe_revealed += 1
        if cell.adjacent_mines == 0:
            self._flood_fill(x, y)

        self._check_win_condition()
        return True

    def _flood_fill(self, x: int, y: int) -> None:
        """Reveal every hidden cell reachable through empty cells."""
        queue = deque([(x, y)])
        while queue:
            current_x, current_y = queue.popleft()
            for neighbor_x, neighbor_y in self._get_neighbors(
                current_x, current_y
            ):
                neighbor = self._grid[neighbor_y][neighbor_x]
                if neighbor.is_mine or not neighbor.reveal():
                    continue
                self._safe_revealed += 1
                if neighbor.adjacent_mines == 0:
                    queue.append((neighbor_x, neighbor_y))

    def _check_win_condition(self) -> None:
        """Check if all non-mine cells are revealed."""
        safe_cells = self.config.total_cells - self.config.num_mines
        if self._safe_revealed >= safe_cells:
            self._game_state = GameState.WON

    def flag_cell(self, x: int, y: int) -> bool:
        """
        Toggle the flag on a cell.

        Args:
            x: Column.
            y: Row.

        Returns:
            True if the flag was toggled, False for a revealed cell or a
            finished game.

        Raises:
            IndexError: If the position is outside the board.
        """
        self._require_position(x, y)
        if self._game_state != GameState.PLAYING:
            return False
        return self._grid[y][x].toggle_flag()

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    @property
    def game_state(self) -> GameState:
        """Get current game state."""
        return self._game_state

    @property
    def is_playing(self) -> bool:
        """Check if game is still in progress."""
        return self._game_state == GameState.PLAYING

    def is_win(self) -> bool:
        """True iff every non-mine cell is revealed."""
        return all(
            cell.is_revealed
            for row in self._grid
            for cell in row
            if not cell.is_mine
        )

    def is_lose(self) -> bool:
        """True iff any mine cell is revealed."""
        return any(
            cell.is_revealed
            for row in self._grid
            for cell in row
            if cell.is_mine
        )

    def get_board_size(self) -> int:
        return self.config.size

    def get_cell(self, x: int, y: int) -> Optional[Cell]:
        """Get cell at position, or None if invalid."""
        if not self._is_valid_position(x, y):
            return None
        return self._grid[y][x]

    def mine_positions(self) -> List[Tuple[int, int]]:
        """List the (x, y) coordinates of every mine."""
        return [
            (x, y)
            for y in range(self.config.size)
            for x in range(self.config.size)
            if self._grid[y][x].is_mine
        ]

    def count_cells(self, state: CellState) -> int:
        """Count the cells currently in the given state."""
        return sum(1 for row in self._grid for cell in row if cell.state == state)

    def get_observation(self, cheat_view: bool = False) -> np.ndarray:
        """
        Get board state as a numpy array indexed [y, x].

        Args:
            cheat_view: Expose every cell's true content.

        Returns:
            2D int8 array where:
                -1 = hidden
                -2 = flagged
                0-8 = revealed with adjacent count
                9 = revealed mine
        """
        size = self.config.size
        obs = np.zeros((size, size), dtype=np.int8)
        for y in range(size):
            for x in range(size):
                obs[y, x] = self._grid[y][x].to_observation(cheat_view)
        return obs

    # ========================================================================
    # Wire Rendering
    # ========================================================================

    def convert_grid_to_protocol(self, cheat_view: bool = False) -> str:
        """
        Render the board in the wire format.

        Args:
            cheat_view: Show true content of every cell.

        Returns:
            Board rows separated by CRLF, with a GAME WON / GAME LOST line
            once the game has ended, terminated by CRLF.
        """
        footer = _GAME_OVER_MARKERS.get(self._game_state)
        return encode_board(self.get_observation(cheat_view), footer)

    def reveal_all_cells(self) -> str:
        """Render the cheat view without changing any cell state."""
        return self.convert_grid_to_protocol(cheat_view=True)
