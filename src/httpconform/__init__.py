"""
=============================================================================
HTTPCONFORM - STRICT HTTP/1.1 CONFORMANCE TESTER
=============================================================================

A tool that talks to an HTTP server and checks that what comes back obeys
the RFCs to the letter. At its heart are two hand-written grammar parsers:

    • a URL parser           (RFC 3986)
    • a response parser      (RFC 7230 / RFC 7231, chunked coding included)

Neither is lenient. Every rejection names the rule that was broken:

    'Version strings must start with 'HTTP/'' (RFC 7230 Section 2.6)
        [source='HTPP/1.1', position=0, section=status-line]

=============================================================================
ARCHITECTURE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                     │
    │   CLI (__main__)                                                    │
    │     │  parse_url(argv[1])                                           │
    │     ▼                                                               │
    │   HttpClient ──► Connection (TCP/TLS) ──► BufferedStream            │
    │     │                                          │                    │
    │     │  run_cases(DEFAULT_REGISTRY)             ▼                    │
    │     ▼                                    ResponseParser             │
    │   Conformance cases                        └─► ChunkedDecoder       │
    │     1.1 GET '/'                                                     │
    │     1.2 OPTIONS '*'                                                 │
    │     1.3 HEAD '/'                                                    │
    │                                                                     │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
QUICK START
=============================================================================

    python -m httpconform http://localhost:8080/

    > Test 1.1 [GET '/'] passed.
    > Test 1.2 [OPTIONS '*'] passed.
    > Test 1.3 [HEAD '/'] passed.

Or as a library:

    from httpconform import parse_response

    outcome = parse_response(b"HTTP/1.1 200 OK\\r\\nContent-Length: 2\\r\\n\\r\\nhi")
    if outcome.ok:
        print(outcome.value.body)       # b'hi'
    else:
        print(outcome.diagnosis)

=============================================================================
"""

__version__ = "1.0.0"

from .http import (
    ConformanceError,
    ConnectError,
    ConnectionLost,
    HttpClientError,
    HTTPStatus,
    ParseDiagnosis,
    Parsed,
    ParsedResponse,
    Rejected,
    ResourceExhausted,
    ResponseParser,
    UnsupportedFeature,
    Url,
    UrlError,
    format_status,
    parse_response,
    parse_url,
)
from .config import ClientConfig, setup_logging
from .core.client import HttpClient
from .conformance import DEFAULT_REGISTRY, run_cases

__all__ = [
    "__version__",
    "ClientConfig",
    "setup_logging",
    "HttpClient",
    "Url",
    "parse_url",
    "ResponseParser",
    "ParsedResponse",
    "parse_response",
    "ParseDiagnosis",
    "Parsed",
    "Rejected",
    "ConformanceError",
    "UrlError",
    "HttpClientError",
    "ConnectError",
    "ConnectionLost",
    "ResourceExhausted",
    "UnsupportedFeature",
    "HTTPStatus",
    "format_status",
    "DEFAULT_REGISTRY",
    "run_cases",
]
