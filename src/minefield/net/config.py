"""
Server configuration.

Every tunable of the server lives in one immutable object that is handed
to the listener and to each session at construction.
"""
import os
from dataclasses import dataclass
from typing import Callable, Mapping, Optional

from ..game.board import BoardConfig, DEFAULT_SIZE
from ..protocol.framing import DEFAULT_MAX_SIZE


DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 2377
DEFAULT_TIMEOUT = 60.0


@dataclass(frozen=True)
class ServerConfig:
    """
    Configuration for the minefield server.

    Attributes:
        host: Interface to listen on.
        port: TCP port (0 picks a free port).
        board_size: Rows and columns of each session's board.
        num_mines: Mines per board (None: ~20% of cells).
        max_message_size: Ceiling for a pending client message, in bytes.
        inactivity_timeout: Seconds a session may go without a complete
            message before it is closed.
    """

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    board_size: int = DEFAULT_SIZE
    num_mines: Optional[int] = None
    max_message_size: int = DEFAULT_MAX_SIZE
    inactivity_timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not 0 <= self.port <= 65535:
            raise ValueError(f"Port out of range: {self.port}")
        if self.inactivity_timeout <= 0:
            raise ValueError("Inactivity timeout must be positive")
        if self.max_message_size < 4:
            raise ValueError("Message size limit is too small")
        # Fails early on a bad board size or mine count
        self.board_config()

    def board_config(self) -> BoardConfig:
        """Board configuration for a new session."""
        return BoardConfig(size=self.board_size, num_mines=self.num_mines)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ServerConfig":
        """
        Build a configuration from MINEFIELD_* environment variables.

        Unset variables keep their defaults.
        """
        env = os.environ if environ is None else environ
        mines = env.get("MINEFIELD_MINES")
        return cls(
            host=env.get("MINEFIELD_HOST", DEFAULT_HOST),
            port=_number(env, "MINEFIELD_PORT", DEFAULT_PORT, int),
            board_size=_number(env, "MINEFIELD_BOARD_SIZE", DEFAULT_SIZE, int),
            num_mines=_number(env, "MINEFIELD_MINES", None, int) if mines else None,
            inactivity_timeout=_number(
                env, "MINEFIELD_TIMEOUT", DEFAULT_TIMEOUT, float
            ),
        )


def _number(env: Mapping[str, str], key: str, default, kind: Callable):
    raw = env.get(key)
    if raw is None:
        return default
    try:
        return kind(raw)
    except ValueError:
        raise ValueError(f"{key} is not a valid number: {raw!r}") from None
