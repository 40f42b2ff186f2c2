"""
Minefield networking module.

Provides the session state machine, the asyncio server and the terminal
client.
"""
from .config import ServerConfig
from .session import Session, SessionState, Reply
from .server import MinesweeperServer, run_server
from .client import play

__all__ = [
    "ServerConfig",
    "Session",
    "SessionState",
    "Reply",
    "MinesweeperServer",
    "run_server",
    "play",
]
