"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps the client side of one TCP (optionally TLS) connection to the
server under test.

=============================================================================
OPENING A CONNECTION
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      Connection.open()                              │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                     │
    │  1. TCP       socket.create_connection((host, port), timeout)       │
    │               └── DNS lookup + three-way handshake                  │
    │                                                                     │
    │  2. TLS       ssl.SSLContext.wrap_socket(sock, server_hostname=...) │
    │   (https)     └── server_hostname sends SNI, so a server hosting    │
    │                   many sites can pick the right certificate         │
    │               └── the certificate is checked against the host name  │
    │                   unless verification is disabled (--insecure)      │
    │                                                                     │
    │  Either step failing raises ConnectError naming the step.           │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

After that the parser only sees a BufferedStream; it never knows whether
the bytes came through TLS.

=============================================================================
"""

import socket
import ssl
import logging
import uuid
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional

from .stream import BufferedStream
from ..http.errors import ConnectError, ConnectionLost


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Connection lifecycle states."""
    OPEN = "open"            # Connected, idle
    WRITING = "writing"      # Sending a request
    READING = "reading"      # Waiting for / reading a response
    CLOSED = "closed"        # Socket released


@dataclass
class Connection:
    """
    A connected client socket plus the stream the parser reads from.

    Attributes:
        socket: The connected (possibly TLS-wrapped) socket.
        host: Host name or address that was dialled.
        port: TCP port.
        secure: Whether the socket is TLS-wrapped.
        id: Short identifier for log lines.
        state: Current connection state.
    """

    socket: socket.socket
    host: str
    port: int
    secure: bool = False

    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.OPEN

    buffer_size: int = 8192
    max_line_length: int = 8192

    _stream: Optional[BufferedStream] = field(default=None, repr=False)

    @classmethod
    def open(
        cls,
        host: str,
        port: int,
        secure: bool = False,
        timeout: Optional[float] = 30.0,
        verify_tls: bool = True,
        server_hostname: Optional[str] = None,
        buffer_size: int = 8192,
        max_line_length: int = 8192,
    ) -> "Connection":
        """
        Dial host:port and, if secure, complete a TLS handshake.

        Raises:
            ConnectError: TCP connect or TLS handshake failed.
        """
        try:
            sock = socket.create_connection((host, port), timeout=timeout)
        except OSError as e:
            raise ConnectError(f"TCP connection to {host}:{port} failed: {e}") from e

        if secure:
            context = ssl.create_default_context()
            if not verify_tls:
                context.check_hostname = False
                context.verify_mode = ssl.CERT_NONE
            try:
                sock = context.wrap_socket(sock, server_hostname=server_hostname or host)
            except (ssl.SSLError, OSError) as e:
                sock.close()
                raise ConnectError(f"TLS handshake with {host}:{port} failed: {e}") from e

        conn = cls(
            socket=sock,
            host=host,
            port=port,
            secure=secure,
            buffer_size=buffer_size,
            max_line_length=max_line_length,
        )
        logger.debug(f"[{conn.id}] Connected to {conn.key}")
        return conn

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def key(self) -> tuple[str, int, bool]:
        """(host, port, secure) - what identifies this transport."""
        return (self.host, self.port, self.secure)

    @property
    def stream(self) -> BufferedStream:
        """The buffered reader over this socket (created on first use)."""
        if self._stream is None:
            self._stream = BufferedStream(
                self._recv,
                buffer_size=self.buffer_size,
                max_line_length=self.max_line_length,
            )
        return self._stream

    # =========================================================================
    # I/O
    # =========================================================================

    def _recv(self, n: int) -> bytes:
        # Timeouts and resets surface as OSError; the stream turns them
        # into ConnectionLost.
        self.state = ConnectionState.READING
        return self.socket.recv(n)

    def send(self, data: bytes) -> None:
        """
        Send all of data.

        Raises:
            ConnectionLost: The socket is closed or the send failed.
        """
        if self.state == ConnectionState.CLOSED:
            raise ConnectionLost("Connection lost: socket is closed")

        self.state = ConnectionState.WRITING
        try:
            self.socket.sendall(data)
        except OSError as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            raise ConnectionLost(f"Connection lost: {e}") from e

    def close(self) -> None:
        """Close the socket. Calling it again is a no-op."""
        if self.state == ConnectionState.CLOSED:
            return
        try:
            self.socket.close()
        except OSError:
            pass
        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection to {self.host}:{self.port} closed")

    # =========================================================================
    # CONTEXT MANAGER
    # =========================================================================

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
