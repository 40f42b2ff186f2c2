"""
Message framing for the minefield protocol.

Client messages are terminated by an empty line, i.e. the byte sequence
CR LF CR LF. The framer accumulates raw chunks from the transport and hands
back complete messages.
"""
from typing import List


DELIMITER = b"\r\n\r\n"
DEFAULT_MAX_SIZE = 1024


class ProtocolError(Exception):
    """Raised when a client violates the wire protocol."""


class FrameTooLargeError(ProtocolError):
    """Raised when an unterminated message outgrows the buffer ceiling."""


class MessageFramer:
    """
    Splits a byte stream into delimiter-terminated messages.

    Several messages arriving in one chunk are returned in order. An
    incomplete trailing message stays buffered until its delimiter arrives.
    """

    def __init__(self, max_size: int = DEFAULT_MAX_SIZE) -> None:
        """
        Args:
            max_size: Largest number of bytes a pending message may hold.
        """
        if max_size < len(DELIMITER):
            raise ValueError(f"max_size must be at least {len(DELIMITER)}")
        self.max_size = max_size
        self._buffer = bytearray()

    @property
    def pending(self) -> int:
        """Number of buffered bytes not yet part of a complete message."""
        return len(self._buffer)

    def feed(self, chunk: bytes) -> List[str]:
        """
        Add a chunk from the transport.

        Args:
            chunk: Raw bytes as read from the socket.

        Returns:
            Complete messages, decoded and stripped, in arrival order.

        Raises:
            FrameTooLargeError: If the pending message exceeds ``max_size``.
        """
        self._buffer.extend(chunk)

        messages = []
        while True:
            end = self._buffer.find(DELIMITER)
            if end < 0:
                break
            raw = bytes(self._buffer[:end])
            del self._buffer[:end + len(DELIMITER)]
            messages.append(raw.decode("utf-8", errors="replace").strip())

        if len(self._buffer) > self.max_size:
            size = len(self._buffer)
            self._buffer.clear()
            raise FrameTooLargeError(
                f"Message of {size} bytes exceeds limit of {self.max_size}"
            )
        return messages

    def reset(self) -> None:
        """Drop any partially received message."""
        self._buffer.clear()
