"""
Terminal client for the minefield server.

Forwards each typed line to the server with the message delimiter and
prints the reply, until the game ends or the user quits.
"""
import socket
import sys
from typing import Callable, Optional, TextIO

from ..game.render import is_terminal_reply
from ..protocol.framing import DELIMITER
from .config import DEFAULT_PORT


RECV_SIZE = 1024


def command_help() -> str:
    """List of commands shown after connecting."""
    return (
        "\nList Of Commands: \n"
        "- FLAG x y\n"
        "- TRY x y\n"
        "- CHEAT\n"
        "- QUIT\n"
    )


def receive_reply(sock: socket.socket) -> Optional[str]:
    """
    Read one reply from the server.

    Returns:
        The reply text stripped of surrounding whitespace, or None once the
        server has closed the connection.
    """
    data = sock.recv(RECV_SIZE)
    if not data:
        return None
    # A rendered board can be split across several segments
    sock.settimeout(0.05)
    try:
        while True:
            more = sock.recv(RECV_SIZE)
            if not more:
                break
            data += more
    except socket.timeout:
        pass
    finally:
        sock.settimeout(None)
    return data.decode("utf-8", errors="replace").strip()


def play(
    host: str = "localhost",
    port: int = DEFAULT_PORT,
    read_line: Callable[[], str] = input,
    out: TextIO = sys.stdout,
) -> int:
    """
    Run an interactive session.

    Args:
        host: Server host name.
        port: Server port.
        read_line: Source of user commands.
        out: Where to print server replies.

    Returns:
        Process exit code.
    """
    try:
        with socket.create_connection((host, port)) as sock:
            print("Connected to server.", file=out)
            print(command_help(), file=out)

            while True:
                try:
                    line = read_line()
                except EOFError:
                    line = "QUIT"
                sock.sendall(line.encode("utf-8") + DELIMITER)

                reply = receive_reply(sock)
                if reply is None:
                    print("Server closed the connection.", file=out)
                    return 1
                if is_terminal_reply(reply):
                    print(reply, file=out)
                    return 0
                print(reply + "\n", file=out)
    except socket.gaierror:
        print("Unknown host.", file=out)
        return 1
    except OSError:
        print("I/O error. Probably timeout and/or disconnected.", file=out)
        return 1
