"""
=============================================================================
BUFFERED BYTE STREAM
=============================================================================

TCP is a byte stream, not a message protocol. A single recv() can return
half a status line, or the end of the headers glued to the first bytes
of the body:

    recv() → b"HTTP/1.1 200 O"
    recv() → b"K\\r\\nContent-Length: 5\\r\\n\\r\\nhel"
    recv() → b"lo"

The response parser never touches recv() directly. It asks this module
for exactly what the grammar needs next:

    read_line()     the next CRLF-terminated line (status line, header,
                    chunk-size line)
    read_exact(n)   exactly n bytes (Content-Length body, chunk data)

A stream that ends between lines is a clean end (read_line returns None);
one that ends in the middle of a line or of an exact read raises
ConnectionLost.

Leftover bytes stay in the buffer between calls, so the same stream can
carry several responses on one keep-alive connection.

=============================================================================
LINE DECODING
=============================================================================

Lines are decoded as ISO-8859-1. Every byte 0x00-0xFF maps to the code
point with the same value, so obs-text (%x80-FF) survives and the grammar
predicates can check the exact octets the server sent.

=============================================================================
"""

import logging
from typing import Callable, Optional

from ..http.errors import ConnectionLost, ResourceExhausted


logger = logging.getLogger(__name__)

Recv = Callable[[int], bytes]

LINE_ENCODING = "iso-8859-1"


class BufferedStream:
    """
    Line and exact-length reads over any recv(n) -> bytes callable.

    An empty result from recv means end-of-stream.
    """

    def __init__(self, recv: Recv, buffer_size: int = 8192, max_line_length: int = 8192):
        self._recv = recv
        self.buffer_size = buffer_size
        self.max_line_length = max_line_length
        self._buffer = bytearray()
        self._eof = False

    @classmethod
    def from_bytes(cls, data: bytes, chunk_size: Optional[int] = None,
                   max_line_length: int = 8192) -> "BufferedStream":
        """
        In-memory stream over fixed data.

        With chunk_size set, every recv returns at most that many bytes,
        which exercises the same short-read paths as a slow socket.
        """
        view = memoryview(bytes(data))
        offset = 0

        def recv(n: int) -> bytes:
            nonlocal offset
            if chunk_size is not None:
                n = min(n, chunk_size)
            piece = view[offset:offset + n].tobytes()
            offset += len(piece)
            return piece

        return cls(recv, buffer_size=chunk_size or 8192, max_line_length=max_line_length)

    @property
    def at_eof(self) -> bool:
        """True once the peer has closed and the buffer is drained."""
        return self._eof and not self._buffer

    def _fill(self) -> bool:
        """Pull one more recv into the buffer. False at end-of-stream."""
        if self._eof:
            return False
        try:
            data = self._recv(self.buffer_size)
        except OSError as e:
            raise ConnectionLost(f"Connection lost: {e}") from e
        if not data:
            self._eof = True
            return False
        self._buffer.extend(data)
        return True

    def read_line(self) -> Optional[str]:
        """
        Read one line and strip its terminator.

        Returns:
            The line without CRLF (or bare LF), None if the stream ended
            cleanly before any byte of a new line.

        Raises:
            ResourceExhausted: The line exceeds max_line_length.
            ConnectionLost: recv failed, or the stream ended inside a line.
        """
        searched = 0
        while True:
            newline = self._buffer.find(b"\n", searched)
            if newline != -1:
                break
            searched = len(self._buffer)
            if searched > self.max_line_length:
                raise ResourceExhausted(
                    f"Line exceeds {self.max_line_length} bytes"
                )
            if not self._fill():
                if not self._buffer:
                    return None
                logger.debug(f"Stream ended inside a line after {len(self._buffer)} bytes")
                raise ConnectionLost(
                    f"Connection lost after {len(self._buffer)} bytes of an unterminated line"
                )

        if newline > self.max_line_length:
            raise ResourceExhausted(f"Line exceeds {self.max_line_length} bytes")

        line = bytes(self._buffer[:newline])
        del self._buffer[:newline + 1]
        if line.endswith(b"\r"):
            line = line[:-1]
        return line.decode(LINE_ENCODING)

    def read_exact(self, n: int) -> bytes:
        """
        Read exactly n bytes, retrying short reads.

        Raises:
            ConnectionLost: The stream ended (or recv failed) first.
        """
        while len(self._buffer) < n:
            if not self._fill():
                raise ConnectionLost(
                    f"Connection lost after {len(self._buffer)} of {n} bytes"
                )
        data = bytes(self._buffer[:n])
        del self._buffer[:n]
        return data
