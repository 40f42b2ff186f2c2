"""
Minefield: a single-player minesweeper game served over TCP.
"""
__version__ = "0.1.0"
