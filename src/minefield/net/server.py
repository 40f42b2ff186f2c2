"""
Asyncio TCP server for the minefield game.

The event loop accepts connections one after another and runs each one as
its own task with a private session and board. Sessions share nothing, so
no locking is needed between them.
"""
import asyncio
import logging
from typing import Callable, Optional, Set

from ..game.board import Board, BoardConfig
from ..protocol.framing import ProtocolError
from .config import ServerConfig
from .session import Session


logger = logging.getLogger(__name__)


class MinesweeperServer:
    """Listens for clients and serves one game per connection."""

    def __init__(
        self,
        config: Optional[ServerConfig] = None,
        board_factory: Optional[Callable[[BoardConfig], Board]] = None,
    ) -> None:
        """
        Args:
            config: Server configuration.
            board_factory: Builds the board for each new session (default:
                a random layout).
        """
        self.config = config or ServerConfig()
        self.board_factory = board_factory or Board
        self._server: Optional[asyncio.AbstractServer] = None
        self._tasks: Set[asyncio.Task] = set()
        self._stopped = asyncio.Event()

    @property
    def port(self) -> int:
        """Port actually bound; differs from the config when it asked for 0."""
        if self._server is None or not self._server.sockets:
            raise RuntimeError("Server is not started")
        return self._server.sockets[0].getsockname()[1]

    @property
    def active_sessions(self) -> int:
        return len(self._tasks)

    async def start(self) -> None:
        """Bind the listening socket."""
        self._server = await asyncio.start_server(
            self._on_connect, self.config.host, self.config.port
        )
        logger.info("New server socket started on port %d", self.port)

    async def serve_forever(self) -> None:
        """Start if needed and serve until close() is called."""
        if self._server is None:
            await self.start()
        await self._stopped.wait()

    async def close(self) -> None:
        """Stop accepting and cancel running sessions."""
        self._stopped.set()
        if self._server is None:
            return
        self._server.close()
        # Server.wait_closed() blocks while connections are open
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        await self._server.wait_closed()

    def _on_connect(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        task = asyncio.ensure_future(self.handle_client(reader, writer))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    # ========================================================================
    # Connection Handling
    # ========================================================================

    async def handle_client(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        """Run one session until it terminates or the transport fails."""
        peer = writer.get_extra_info("peername")
        name = str(peer[1]) if peer else "unknown"
        logger.info("Client %s connected.", name)

        session: Optional[Session] = None
        try:
            board = self.board_factory(self.config.board_config())
            session = Session(self.config, board=board, name=name)
            await self._run_session(session, reader, writer)
        except asyncio.TimeoutError:
            logger.info("Client %s timed out.", name)
            _terminate(session, "timeout")
        except ProtocolError as error:
            logger.warning("Client %s broke the protocol: %s", name, error)
            _terminate(session, "protocol error")
        except (ConnectionError, OSError) as error:
            logger.warning("Connection to client %s failed: %s", name, error)
            _terminate(session, "transport error")
        except asyncio.CancelledError:
            _terminate(session, "server shutdown")
            raise
        except Exception:
            logger.exception("Unexpected error in session %s", name)
            _terminate(session, "internal error")
        finally:
            await self._close_writer(writer)

    async def _run_session(
        self,
        session: Session,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
    ) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.config.inactivity_timeout

        while session.is_active:
            remaining = deadline - loop.time()
            if remaining <= 0:
                raise asyncio.TimeoutError()
            data = await asyncio.wait_for(
                reader.read(self.config.max_message_size), timeout=remaining
            )
            if not data:
                logger.info("Client %s closed the connection.", session.name)
                session.terminate("end of stream")
                return

            replies = session.feed(data)
            for reply in replies:
                writer.write(reply.encode())
                await writer.drain()
            if replies:
                deadline = loop.time() + self.config.inactivity_timeout

    @staticmethod
    async def _close_writer(writer: asyncio.StreamWriter) -> None:
        writer.close()
        try:
            await writer.wait_closed()
        except (ConnectionError, OSError) as error:
            logger.debug("Error while closing connection: %s", error)


def _terminate(session: Optional[Session], reason: str) -> None:
    # No session exists when building the board failed
    if session is not None:
        session.terminate(reason)


async def run_server(config: ServerConfig) -> None:
    """Serve until the process is interrupted."""
    server = MinesweeperServer(config)
    try:
        await server.serve_forever()
    finally:
        await server.close()
