"""
Per-connection session state machine.

A session owns one board and one framer. It turns framed messages into
replies and decides when the connection has to be closed. It performs no
I/O itself, so the server and the tests drive it the same way.
"""
import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional

from ..game.board import Board
from ..game.render import CRLF, GOODBYE
from ..protocol.commands import (
    Cheat,
    Command,
    Flag,
    InvalidArguments,
    Quit,
    Try,
    Unknown,
    parse_command,
)
from ..protocol.framing import MessageFramer
from .config import ServerConfig


logger = logging.getLogger(__name__)

WRONG = "WRONG"
INVALID_RANGE = "INVALID RANGE"


class SessionState(Enum):
    """Lifecycle of a session."""

    ACTIVE = auto()
    TERMINATED = auto()


@dataclass(frozen=True)
class Reply:
    """Text to send back, and whether to close the connection after it."""

    text: str
    close: bool = False

    def encode(self) -> bytes:
        return self.text.encode("utf-8")


class Session:
    """
    Protocol state machine for one client connection.

    States go ACTIVE -> TERMINATED exactly once, through QUIT, a won or lost
    game, or an external reason such as a timeout or a dropped transport.
    """

    def __init__(
        self,
        config: Optional[ServerConfig] = None,
        board: Optional[Board] = None,
        name: str = "client",
    ) -> None:
        """
        Args:
            config: Server configuration (default settings if omitted).
            board: Board to play on; a fresh random one if omitted.
            name: Label used in log messages.
        """
        self.config = config or ServerConfig()
        self.board = board or Board(self.config.board_config())
        self.framer = MessageFramer(self.config.max_message_size)
        self.name = name
        self._state = SessionState.ACTIVE
        self._termination_reason: Optional[str] = None

    # ========================================================================
    # State
    # ========================================================================

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state == SessionState.ACTIVE

    @property
    def termination_reason(self) -> Optional[str]:
        return self._termination_reason

    def terminate(self, reason: str) -> None:
        """Move to TERMINATED; later calls keep the first reason."""
        if self._state == SessionState.TERMINATED:
            return
        self._state = SessionState.TERMINATED
        self._termination_reason = reason
        logger.debug("Session %s terminated: %s", self.name, reason)

    # ========================================================================
    # Input
    # ========================================================================

    def feed(self, chunk: bytes) -> List[Reply]:
        """
        Process raw bytes from the transport.

        Complete messages are handled in order. Messages after the one that
        terminates the session are discarded.

        Raises:
            ProtocolError: If the framer rejects the stream.
        """
        replies = []
        for message in self.framer.feed(chunk):
            if not self.is_active:
                break
            replies.append(self.handle_message(message))
        return replies

    def handle_message(self, message: str) -> Reply:
        """Handle one complete, stripped message."""
        if not self.is_active:
            raise RuntimeError(f"Session {self.name} is terminated")
        return self.dispatch(parse_command(message))

    def dispatch(self, command: Command) -> Reply:
        """Execute a parsed command against the board."""
        if isinstance(command, Quit):
            logger.info("Client %s disconnected.", self.name)
            self.terminate("quit")
            return Reply(GOODBYE + CRLF, close=True)

        if isinstance(command, Cheat):
            return Reply(self.board.reveal_all_cells())

        if isinstance(command, (Flag, Try)):
            if not self._in_range(command.x, command.y):
                return Reply(INVALID_RANGE + CRLF)
            if isinstance(command, Flag):
                return self._flag(command)
            return self._try(command)

        if isinstance(command, InvalidArguments):
            return Reply(INVALID_RANGE + CRLF)

        if isinstance(command, Unknown):
            logger.info("Client %s sent an invalid command.", self.name)
            return Reply(WRONG + CRLF)

        raise TypeError(f"Unsupported command: {command!r}")

    # ========================================================================
    # Command Handlers
    # ========================================================================

    def _in_range(self, x: int, y: int) -> bool:
        size = self.board.get_board_size()
        return 0 <= x < size and 0 <= y < size

    def _flag(self, command: Flag) -> Reply:
        self.board.flag_cell(command.x, command.y)
        return Reply(self.board.convert_grid_to_protocol(False))

    def _try(self, command: Try) -> Reply:
        self.board.reveal_cell(command.x, command.y)
        text = self.board.convert_grid_to_protocol(False)
        if self.board.is_win() or self.board.is_lose():
            outcome = "won" if self.board.is_win() else "lost"
            logger.info("Game over for client %s (%s) => disconnecting.", self.name, outcome)
            self.terminate(outcome)
            return Reply(text, close=True)
        return Reply(text)
