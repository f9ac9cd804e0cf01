"""
=============================================================================
HTTP GRAMMAR LAYER
=============================================================================

Everything that turns untrusted text into validated values, and nothing
that touches a socket.

    ┌─────────────────────────────────────────────────────────────────────┐
    │  abnf          character classes (ALPHA, tchar, VCHAR, ...)         │
    │       │                                                             │
    │       ├──► url       "https://host:443/p?q#f"  ─► Url               │
    │       │                                                             │
    │       └──► parser    status-line / headers / body ─► ParsedResponse │
    │               └──► chunked   chunk-size lines + chunk data          │
    │                                                                     │
    │  errors        ParseDiagnosis, ConformanceError, HttpClientError    │
    │  status_codes  IANA registry, for readable output only              │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
IMPORTS AND EXPORTS
=============================================================================
"""

from .errors import (
    ConformanceError,
    ConnectError,
    ConnectionLost,
    HttpClientError,
    ParseDiagnosis,
    ParseOutcome,
    Parsed,
    Rejected,
    ResourceExhausted,
    UnsupportedFeature,
    UrlError,
)
from .url import HostKind, Url, parse_url
from .status_codes import HTTPStatus, StatusInfo, format_status, lookup
from .response import HeaderFields, ParsedResponse
from .chunked import ChunkedDecoder
from .parser import ReadSection, ResponseParser, parse_response

__all__ = [
    # Diagnoses and errors
    "ParseDiagnosis",
    "ConformanceError",
    "UrlError",
    "HttpClientError",
    "ConnectError",
    "ConnectionLost",
    "ResourceExhausted",
    "UnsupportedFeature",
    "Parsed",
    "Rejected",
    "ParseOutcome",

    # URL parsing
    "Url",
    "HostKind",
    "parse_url",

    # Response parsing
    "ResponseParser",
    "ReadSection",
    "parse_response",
    "ChunkedDecoder",
    "HeaderFields",
    "ParsedResponse",

    # Status codes
    "HTTPStatus",
    "StatusInfo",
    "lookup",
    "format_status",
]
