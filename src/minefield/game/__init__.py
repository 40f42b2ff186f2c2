"""
Minefield game module.

Provides the grid engine: board management, cell state and wire rendering.
"""
from .cell import Cell, CellState
from .board import Board, BoardConfig, GameState
from .render import encode_board, decode_board, is_terminal_reply

__all__ = [
    "Cell",
    "CellState",
    "Board",
    "BoardConfig",
    "GameState",
    "encode_board",
    "decode_board",
    "is_terminal_reply",
]
