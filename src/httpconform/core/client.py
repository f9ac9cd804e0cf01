"""
=============================================================================
HTTP CLIENT
=============================================================================

A small HTTP/1.1 client: it puts a request on the wire and hands the raw
answer to the strict ResponseParser.

=============================================================================
EXCHANGE FLOW
=============================================================================

    ┌──────────────┐   connect_url("https://example.com/")
    │  HttpClient  │──────────────────────────────────────┐
    └──────┬───────┘                                      ▼
           │ request("/", "GET")                  ┌──────────────┐
           │                                      │  Connection  │ TCP + TLS
           ├─► build_request()                    └──────┬───────┘
           │     GET / HTTP/1.1\\r\\n                      │
           │     Accept: */*\\r\\n                         │
           │     Host: example.com\\r\\n                   │
           │     Connection: keep-alive\\r\\n              │
           │     User-Agent: httpconform/1.0.0\\r\\n       │
           │     \\r\\n                                    │
           ├─► connection.send() ───────────────────────►│
           │                                             │
           ├─► parser.read(connection.stream, method) ◄──┘
           │
           └─► log_exchange(ExchangeLog(...))

One exchange at a time per client; the connection is kept open between
exchanges (keep-alive) until close(). After a failed exchange, or a
"Connection: close" response, the socket is dropped and the next request
dials the same target again.

=============================================================================
"""

import logging
import time
import uuid
from typing import Dict, Optional, Union

from .connection import Connection
from .exchange_log import ExchangeLog, log_exchange
from ..config import ClientConfig
from ..http.errors import ConformanceError, HttpClientError
from ..http.parser import ResponseParser
from ..http.response import ParsedResponse
from ..http.url import Url


logger = logging.getLogger(__name__)

DEFAULT_PORTS = {"http": 80, "https": 443}

REQUEST_ENCODING = "iso-8859-1"


class HttpClient:
    """
    Sends requests and parses responses strictly.

    Example:
        with HttpClient(ClientConfig(timeout=5)) as client:
            client.connect_url("http://localhost:8080/")
            response = client.request("/", "GET")
            print(response.status_text)
    """

    def __init__(self, config: Optional[ClientConfig] = None):
        self.config = config or ClientConfig()
        self.parser = ResponseParser(self.config.max_body_size)
        self.connection: Optional[Connection] = None
        self.host_header: Optional[str] = None
        # (host, port, secure) of the last connect, for reconnecting after
        # a failed exchange left the stream in an unknown position
        self._target: Optional[tuple[str, int, bool]] = None

    @property
    def is_connected(self) -> bool:
        return self.connection is not None

    # =========================================================================
    # CONNECTING
    # =========================================================================

    def connect(self, host: str, port: int, secure: bool = False,
                host_name: Optional[str] = None) -> Connection:
        """
        Open the transport, replacing any existing connection.

        Args:
            host: Name or address to dial.
            port: TCP port.
            secure: Wrap in TLS.
            host_name: Value for the Host header; defaults to host, plus
                the port when it is not the scheme's default.

        Raises:
            ConnectError: The connection could not be established.
        """
        self.close()

        self.connection = Connection.open(
            host,
            port,
            secure=secure,
            timeout=self.config.timeout,
            verify_tls=self.config.verify_tls,
            buffer_size=self.config.buffer_size,
            max_line_length=self.config.max_line_length,
        )

        if host_name is None:
            default_port = DEFAULT_PORTS["https" if secure else "http"]
            host_name = host if port == default_port else f"{host}:{port}"
        self.host_header = host_name
        self._target = (host, port, secure)

        logger.info(f"Connected to {host}:{port}{' (TLS)' if secure else ''}")
        return self.connection

    def connect_url(self, url: Union[Url, str]) -> Connection:
        """
        Connect to the authority of an http or https URL.

        The scheme is case-insensitive here (RFC 3986 Section 3.1); the
        parsed Url keeps it verbatim.

        Raises:
            UrlError: url is a string that does not parse.
            ValueError: The scheme is not http/https or there is no host.
            ConnectError: The connection could not be established.
        """
        if isinstance(url, str):
            url = Url.parse(url)

        scheme = url.scheme.lower()
        if scheme not in DEFAULT_PORTS:
            raise ValueError(f"Unsupported scheme '{url.scheme}' (only http and https)")
        if not url.host:
            raise ValueError(f"URL '{url}' has no host")

        host = url.host
        if host.startswith("[") and host.endswith("]"):
            host = host[1:-1]

        port = url.port if url.port is not None else DEFAULT_PORTS[scheme]
        return self.connect(host, port, secure=(scheme == "https"), host_name=url.authority)

    # =========================================================================
    # EXCHANGES
    # =========================================================================

    def build_request(self, target: str, method: str = "GET",
                      headers: Optional[Dict[str, str]] = None,
                      body: Optional[bytes] = None) -> bytes:
        """Serialize the request line, headers and optional body."""
        lines = [
            f"{method} {target} HTTP/1.1",
            "Accept: */*",
            f"Host: {self.host_header or ''}",
            "Connection: keep-alive",
            f"User-Agent: {self.config.user_agent}",
        ]
        for name, value in (headers or {}).items():
            lines.append(f"{name}: {value}")
        if body is not None:
            lines.append(f"Content-Length: {len(body)}")

        data = ("\r\n".join(lines) + "\r\n\r\n").encode(REQUEST_ENCODING)
        if body is not None:
            data += body
        return data

    def request(self, target: str, method: str = "GET",
                headers: Optional[Dict[str, str]] = None,
                body: Optional[bytes] = None) -> ParsedResponse:
        """
        Send one request and parse its response.

        Raises:
            ConformanceError: The response violates the grammar.
            HttpClientError: Not connected, connection lost, limits hit
                or an unsupported feature was used.
        """
        if self.connection is None:
            if self._target is None:
                raise HttpClientError("Not connected")
            host, port, secure = self._target
            self.connect(host, port, secure, host_name=self.host_header)

        exchange_id = str(uuid.uuid4())[:8]
        start_time = time.time()
        response: Optional[ParsedResponse] = None
        outcome = "ok"

        try:
            self.connection.send(self.build_request(target, method, headers, body))
            response = self.parser.read(self.connection.stream, method)
            if (response.headers.get("Connection") or "").lower() == "close":
                self._drop_connection()
            return response
        except ConformanceError:
            outcome = "rejected"
            self._drop_connection()
            raise
        except HttpClientError as e:
            outcome = type(e).__name__
            self._drop_connection()
            logger.warning(f"[{exchange_id}] {method} {target} failed: {e}")
            raise
        finally:
            duration_ms = (time.time() - start_time) * 1000
            log_exchange(
                ExchangeLog(
                    exchange_id=exchange_id,
                    method=method,
                    target=target,
                    host=self.host_header or "-",
                    status_code=response.status_code if response else None,
                    body_length=len(response.body) if response and response.body is not None else None,
                    duration_ms=duration_ms,
                    outcome=outcome,
                    timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
                ),
                self.config.log_format,
            )

    def _drop_connection(self) -> None:
        """Close the socket but remember where it went, so the next
        request reconnects."""
        if self.connection is not None:
            self.connection.close()
            self.connection = None

    def close(self) -> None:
        self._drop_connection()
        self._target = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
