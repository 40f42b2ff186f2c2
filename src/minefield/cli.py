"""
Command line interface.

Usage:
    minefield serve [--host HOST] [--port N] [--size N] [--mines N] [--timeout S]
    minefield play [--host HOST] [--port N]
"""
import argparse
import asyncio
import logging
import sys
from typing import List, Mapping, Optional

from .net.client import play
from .net.config import DEFAULT_PORT, ServerConfig
from .net.server import run_server


logger = logging.getLogger(__name__)


def build_config(
    args: argparse.Namespace, environ: Optional[Mapping[str, str]] = None
) -> ServerConfig:
    """
    Merge command line options over MINEFIELD_* environment values.

    Raises:
        ValueError: If an environment value or an option is invalid.
    """
    defaults = ServerConfig.from_env(environ)

    def pick(value, default):
        return default if value is None else value

    return ServerConfig(
        host=pick(args.host, defaults.host),
        port=pick(args.port, defaults.port),
        board_size=pick(args.size, defaults.board_size),
        num_mines=pick(args.mines, defaults.num_mines),
        inactivity_timeout=pick(args.timeout, defaults.inactivity_timeout),
    )


def serve(args: argparse.Namespace, environ: Optional[Mapping[str, str]] = None) -> int:
    """Run the game server."""
    try:
        config = build_config(args, environ)
    except ValueError as error:
        print(f"Invalid configuration: {error}")
        return 2

    try:
        asyncio.run(run_server(config))
    except KeyboardInterrupt:
        logger.info("Server stopped")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Minefield - Minesweeper over a text protocol"
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the game server")
    serve_parser.add_argument("--host", default=None, help="Interface to bind")
    serve_parser.add_argument("--port", type=int, default=None, help="TCP port")
    serve_parser.add_argument(
        "--size", type=int, default=None, help="Board size (NxN)"
    )
    serve_parser.add_argument(
        "--mines", type=int, default=None,
        help="Number of mines (default: ~20%% of cells)",
    )
    serve_parser.add_argument(
        "--timeout", type=float, default=None,
        help="Seconds of inactivity before a client is dropped",
    )

    # Play command
    play_parser = subparsers.add_parser("play", help="Connect to a server")
    play_parser.add_argument("--host", default="localhost", help="Server host")
    play_parser.add_argument(
        "--port", type=int, default=DEFAULT_PORT, help="Server port"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Parse arguments and run the appropriate command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve":
        sys.exit(serve(args))
    elif args.command == "play":
        sys.exit(play(args.host, args.port))
    else:
        parser.print_help()
