"""
=============================================================================
PARSED RESPONSE MODEL
=============================================================================

The value produced by a successful response parse.

    HTTP/1.1 200 OK\r\n                ─► version="HTTP/1.1", status_code=200
    Content-Type: text/plain\r\n       ─┐
    Set-Cookie: a=1\r\n                 ├► headers (ordered, duplicates kept)
    Set-Cookie: b=2\r\n                ─┘
    \r\n
    hello                              ─► body=b"hello"

=============================================================================
WHY NOT A DICT FOR HEADERS?
=============================================================================

A dict loses two things a conformance tester must see:

    1. ORDER       - the server's field order is part of what it sent
    2. DUPLICATES  - "Set-Cookie" may legally repeat; two DIFFERENT
                     "Content-Length" values are a protocol violation,
                     and a dict would silently keep only the last one

So fields are stored as a list of (name, value) pairs. Lookups are
case-insensitive (RFC 7230 Section 3.2: field names are case-insensitive)
but names are kept exactly as received.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from .abnf import is_digit
from .status_codes import HTTPStatus, format_status, lookup


class HeaderFields:
    """Ordered, case-insensitive multi-map of header fields."""

    def __init__(self, fields: Optional[List[Tuple[str, str]]] = None):
        self._fields: List[Tuple[str, str]] = list(fields or [])

    def add(self, name: str, value: str) -> None:
        self._fields.append((name, value))

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """First value of a field, or default."""
        wanted = name.lower()
        for field_name, value in self._fields:
            if field_name.lower() == wanted:
                return value
        return default

    def get_all(self, name: str) -> List[str]:
        """Every value of a field, in arrival order."""
        wanted = name.lower()
        return [value for field_name, value in self._fields if field_name.lower() == wanted]

    def items(self) -> List[Tuple[str, str]]:
        return list(self._fields)

    def names(self) -> List[str]:
        return [name for name, _ in self._fields]

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        wanted = name.lower()
        return any(field_name.lower() == wanted for field_name, _ in self._fields)

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HeaderFields):
            return NotImplemented
        return self._fields == other._fields

    def __repr__(self) -> str:
        return f"HeaderFields({self._fields!r})"


@dataclass
class ParsedResponse:
    """
    A response that passed every grammar and body-legality check.

    Attributes:
        version: Protocol version exactly as received, e.g. "HTTP/1.1".
        status_code: Three-digit status code.
        headers: Header fields in arrival order.
        body: Body bytes; None when the message has no body at all
              (HEAD, 1xx/204/304, or no framing header), which is
              different from an empty body (b"").
    """

    version: str
    status_code: int
    headers: HeaderFields = field(default_factory=HeaderFields)
    body: Optional[bytes] = None

    @property
    def status(self) -> Optional[HTTPStatus]:
        """Registered status for the code, or None if unregistered."""
        return lookup(self.status_code)

    @property
    def status_text(self) -> str:
        return format_status(self.status_code)

    @property
    def has_body(self) -> bool:
        return self.body is not None

    @property
    def content_length(self) -> Optional[int]:
        value = self.headers.get("Content-Length")
        if not value or not all(is_digit(c) for c in value):
            return None
        return int(value)

    @property
    def is_chunked(self) -> bool:
        value = self.headers.get("Transfer-Encoding")
        return value is not None and value.strip().lower() == "chunked"
