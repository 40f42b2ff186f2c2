"""
Wire rendering for minefield boards.

Converts observation arrays into the text sent to clients and back.
One line per board row, one marker per cell separated by spaces:

    # = hidden
    F = flagged
    0-8 = revealed with adjacent mine count
    * = mine
"""
from typing import Optional

import numpy as np

from .cell import FLAGGED_CODE, HIDDEN_CODE, MINE_CODE


CRLF = "\r\n"
GAME_WON = "GAME WON"
GAME_LOST = "GAME LOST"
GOODBYE = "GOODBYE"

HIDDEN_MARK = "#"
FLAG_MARK = "F"
MINE_MARK = "*"

_MARKS = {HIDDEN_CODE: HIDDEN_MARK, FLAGGED_CODE: FLAG_MARK, MINE_CODE: MINE_MARK}
_CODES = {mark: code for code, mark in _MARKS.items()}


def encode_board(obs: np.ndarray, footer: Optional[str] = None) -> str:
    """
    Render an observation array as wire text.

    Args:
        obs: 2D observation array indexed [y, x].
        footer: Extra final line, e.g. GAME WON.

    Returns:
        CRLF separated rows, terminated by CRLF.
    """
    lines = []
    for row in obs:
        lines.append(" ".join(_MARKS.get(int(val), str(int(val))) for val in row))
    if footer:
        lines.append(footer)
    return CRLF.join(lines) + CRLF


def decode_board(text: str) -> np.ndarray:
    """
    Parse wire text back into an observation array.

    Terminal marker lines and blank lines are ignored.

    Raises:
        ValueError: If the text holds no rows, rows differ in length or a
            marker is unknown.
    """
    rows = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line in (GAME_WON, GAME_LOST):
            continue
        row = []
        for mark in line.split():
            if mark in _CODES:
                row.append(_CODES[mark])
            elif mark.isdigit() and len(mark) == 1 and mark != "9":
                row.append(int(mark))
            else:
                raise ValueError(f"Unknown cell marker: {mark!r}")
        rows.append(row)

    if not rows:
        raise ValueError("No board rows in text")
    if any(len(row) != len(rows[0]) for row in rows):
        raise ValueError("Board rows have different lengths")
    return np.array(rows, dtype=np.int8)


def is_terminal_reply(text: str) -> bool:
    """Check whether a server reply ends the session."""
    return GAME_LOST in text or GAME_WON in text or GOODBYE in text
