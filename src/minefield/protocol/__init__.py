"""
Minefield wire protocol module.

Provides message framing and command parsing.
"""
from .framing import (
    DELIMITER,
    MessageFramer,
    ProtocolError,
    FrameTooLargeError,
)
from .commands import (
    Command,
    Quit,
    Cheat,
    Flag,
    Try,
    InvalidArguments,
    Unknown,
    parse_command,
)

__all__ = [
    "DELIMITER",
    "MessageFramer",
    "ProtocolError",
    "FrameTooLargeError",
    "Command",
    "Quit",
    "Cheat",
    "Flag",
    "Try",
    "InvalidArguments",
    "Unknown",
    "parse_command",
]
