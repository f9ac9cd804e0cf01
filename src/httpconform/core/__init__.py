"""
=============================================================================
CORE CLIENT COMPONENTS
=============================================================================

The networking side of the conformance tester: everything between a
socket and the grammar layer.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                          HTTP CLIENT                                │
    │  • Formats the request line and headers                             │
    │  • Sends them and runs the strict ResponseParser on the answer      │
    │  • Logs every exchange (exchange_log)                               │
    └─────────────────────────────────────────────────────────────────────┘
                                    │
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │                          CONNECTION                                 │
    │  • TCP connect, optional TLS with SNI                               │
    │  • Keyed by (host, port, secure)                                    │
    └─────────────────────────────────────────────────────────────────────┘
                                    │
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │                        BUFFERED STREAM                              │
    │  • read_line() / read_exact(n) over recv()                          │
    │  • Short reads retried, end-of-stream reported as ConnectionLost    │
    └─────────────────────────────────────────────────────────────────────┘

HttpClient lives in httpconform.core.client and is exported from the
top-level package; it depends on the grammar layer, which in turn reads
from BufferedStream, so it is not imported here.

=============================================================================
IMPORTS AND EXPORTS
=============================================================================
"""

from .stream import BufferedStream
from .connection import Connection, ConnectionState
from .exchange_log import ExchangeLog, log_exchange

__all__ = [
    "BufferedStream",   # Line / exact-length reads over recv()
    "Connection",       # Client socket, optionally TLS-wrapped
    "ConnectionState",  # Enum for connection lifecycle states
    "ExchangeLog",      # Structured record of one exchange
    "log_exchange",     # Emits an ExchangeLog as text or JSON
]
