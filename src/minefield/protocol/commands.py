"""
Client command parsing.

Turns a framed message into one of the command variants consumed by the
session state machine. Coordinates are only checked for shape here; the
session checks them against the board size.
"""
import re
from dataclasses import dataclass
from typing import Union


QUIT_COMMAND = "QUIT"
CHEAT_COMMAND = "CHEAT"
FLAG_COMMAND = "FLAG"
TRY_COMMAND = "TRY"

_NUMBER = re.compile(r"[0-9]+")


# ============================================================================
# Command Variants
# ============================================================================

@dataclass(frozen=True)
class Quit:
    """End the session."""


@dataclass(frozen=True)
class Cheat:
    """Show the true content of every cell."""


@dataclass(frozen=True)
class Flag:
    """Toggle the flag at (x, y)."""

    x: int
    y: int


@dataclass(frozen=True)
class Try:
    """Reveal the cell at (x, y)."""

    x: int
    y: int


@dataclass(frozen=True)
class InvalidArguments:
    """A FLAG or TRY command with malformed coordinates."""

    verb: str


@dataclass(frozen=True)
class Unknown:
    """Anything that is not a recognised command."""

    text: str


Command = Union[Quit, Cheat, Flag, Try, InvalidArguments, Unknown]


# ============================================================================
# Parsing
# ============================================================================

def parse_command(message: str) -> Command:
    """
    Parse a complete client message.

    Args:
        message: Framed message with surrounding whitespace removed.

    Returns:
        The matching command variant.
    """
    if message == QUIT_COMMAND:
        return Quit()
    if message == CHEAT_COMMAND:
        return Cheat()
    if message.startswith(FLAG_COMMAND):
        return _parse_coordinates(message, FLAG_COMMAND, Flag)
    if message.startswith(TRY_COMMAND):
        return _parse_coordinates(message, TRY_COMMAND, Try)
    return Unknown(message)


def _parse_coordinates(message: str, verb: str, variant) -> Command:
    """Parse ``VERB x y`` into ``variant(x, y)``."""
    parts = message.split()
    if len(parts) != 3:
        return InvalidArguments(verb)
    _, x, y = parts
    if not _NUMBER.fullmatch(x) or not _NUMBER.fullmatch(y):
        return InvalidArguments(verb)
    return variant(int(x), int(y))
