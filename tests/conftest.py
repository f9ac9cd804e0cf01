"""
pytest configuration and fixtures.
"""

import socket
import threading
from typing import Callable, Dict, Generator, List, Optional
import pytest

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from httpconform import ClientConfig


@pytest.fixture
def sample_ok_response() -> bytes:
    """Well-formed 200 response with a Content-Length body."""
    return (
        b"HTTP/1.1 200 OK\r\n"
        b"Content-Type: text/plain\r\n"
        b"Content-Length: 5\r\n"
        b"\r\n"
        b"hello"
    )


@pytest.fixture
def sample_chunked_response() -> bytes:
    """Well-formed 200 response with a chunked body."""
    return (
        b"HTTP/1.1 200 OK\r\n"
        b"Transfer-Encoding: chunked\r\n"
        b"\r\n"
        b"5\r\nhello\r\n"
        b"7\r\n, world\r\n"
        b"0\r\n\r\n"
    )


@pytest.fixture
def config() -> ClientConfig:
    """Client configuration suited to a local test server."""
    return ClientConfig(timeout=5.0, color=False)


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(('127.0.0.1', 0))
        return s.getsockname()[1]


Responder = Callable[[bytes], bytes]


def _by_method(responses: Dict[str, bytes]) -> Responder:
    def respond(request: bytes) -> bytes:
        method = request.split(b" ", 1)[0].decode("ascii")
        return responses[method]
    return respond


@pytest.fixture
def by_method() -> Callable[[Dict[str, bytes]], Responder]:
    """Builds a responder answering each request according to its method."""
    return _by_method


class CannedServer:
    """
    TCP server in a background thread that answers every request head
    with whatever the responder returns. An empty answer closes the
    connection; so does every answer when close_after_response is set.
    """

    def __init__(self, responder: Responder, close_after_response: bool = False):
        self.responder = responder
        self.close_after_response = close_after_response
        self.requests: List[bytes] = []
        self.connections = 0
        self._socket: Optional[socket.socket] = None
        self._thread: Optional[threading.Thread] = None
        self._running = False
        self.port = 0

    def start(self):
        """Bind to a free port and start accepting."""
        self._socket = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._socket.bind(('127.0.0.1', 0))
        self._socket.listen(8)
        self._socket.settimeout(0.1)
        self.port = self._socket.getsockname()[1]
        self._running = True
        self._thread = threading.Thread(target=self._accept_loop, daemon=True)
        self._thread.start()

    def _accept_loop(self):
        while self._running:
            try:
                conn, _ = self._socket.accept()
            except socket.timeout:
                continue
            except OSError:
                return
            self.connections += 1
            threading.Thread(target=self._serve, args=(conn,), daemon=True).start()

    def _serve(self, conn: socket.socket):
        buffer = b""
        with conn:
            while True:
                while b"\r\n\r\n" not in buffer:
                    try:
                        data = conn.recv(4096)
                    except OSError:
                        return
                    if not data:
                        return
                    buffer += data
                head, buffer = buffer.split(b"\r\n\r\n", 1)
                self.requests.append(head)
                answer = self.responder(head)
                if not answer:
                    return
                try:
                    conn.sendall(answer)
                except OSError:
                    return
                if self.close_after_response:
                    return

    def stop(self):
        """Stop accepting; open connections die with their threads."""
        self._running = False
        if self._socket is not None:
            self._socket.close()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)


@pytest.fixture
def canned_server() -> Generator[Callable[..., CannedServer], None, None]:
    """Factory starting CannedServers that are stopped after the test."""
    servers: List[CannedServer] = []

    def start(responder: Responder, close_after_response: bool = False) -> CannedServer:
        server = CannedServer(responder, close_after_response)
        server.start()
        servers.append(server)
        return server

    yield start

    for server in servers:
        server.stop()
