"""
=============================================================================
STRICT HTTP/1.1 RESPONSE PARSER
=============================================================================

Reads one response from a BufferedStream and checks every part of it
against RFC 7230 / RFC 7231. The first violation ends the parse with a
ParseDiagnosis naming the rule, the offending text and the parser state.

=============================================================================
HTTP RESPONSE STRUCTURE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │ HTTP/1.1 200 OK\\r\\n                          ◄── status-line       │
    ├─────────────────────────────────────────────────────────────────────┤
    │ Content-Type: text/plain\\r\\n                 ◄── header-field      │
    │ Content-Length: 5\\r\\n                        ◄── header-field      │
    │ \\r\\n                                         ◄── end of headers    │
    ├─────────────────────────────────────────────────────────────────────┤
    │ hello                                        ◄── message-body      │
    └─────────────────────────────────────────────────────────────────────┘

    status-line   = HTTP-version SP status-code SP reason-phrase CRLF
    HTTP-version  = "HTTP" "/" DIGIT "." DIGIT
    status-code   = 3DIGIT
    header-field  = field-name ":" OWS field-value OWS
    field-name    = token
    field-value   = *( field-content / obs-fold )

=============================================================================
PARSER STATES
=============================================================================

    INITIALIZATION ──► STATUS_LINE ──► HEADERS ──► BODY ──► DONE
          │                 │              │          │
          └─────────────────┴──────┬───────┴──────────┘
                                   ▼
                          failure, tagged with the
                          state it was detected in

=============================================================================
THREE KINDS OF FAILURE
=============================================================================

    ConformanceError    the server sent something the grammar forbids
    ConnectionLost      the stream ended or recv() failed mid-message
    ResourceExhausted   the body is larger than we are willing to hold

Only the first one says anything about the server. The other two are
raised as HttpClientError so a test harness never confuses "the server is
broken" with "the network is broken".

=============================================================================
INTERVIEW QUESTIONS
=============================================================================

Q: "How does a client know where a response body ends?"
A: "RFC 7230 Section 3.3.3, in order: responses to HEAD and 1xx/204/304
   responses have no body; Transfer-Encoding: chunked is decoded chunk by
   chunk; otherwise Content-Length gives the exact size. A response with
   neither is read until close, which this tool does not do; it reports
   the body as absent."

Q: "Why reject Content-Length together with Transfer-Encoding?"
A: "Two framings for the same message is the classic request smuggling
   vector. RFC 7230 Section 3.3.3 tells a recipient to treat it as an error."

=============================================================================
"""

import logging
from enum import Enum
from typing import Optional

from .abnf import is_digit, is_field_vchar, is_ows, is_tchar
from .chunked import ChunkedDecoder
from .errors import (
    ConformanceError,
    HttpClientError,
    ParseDiagnosis,
    ParseOutcome,
    Parsed,
    Rejected,
    ResourceExhausted,
    UnsupportedFeature,
)
from .response import HeaderFields, ParsedResponse
from ..core.stream import BufferedStream


logger = logging.getLogger(__name__)

# Content-Length is parsed as an unsigned 32-bit value
MAX_CONTENT_LENGTH = 2 ** 32 - 1

DEFAULT_MAX_BODY_SIZE = 64 * 1024 * 1024  # 64 MB


class ReadSection(Enum):
    """Where in the response the parser currently is."""
    INITIALIZATION = "initialization"
    STATUS_LINE = "status-line"
    HEADERS = "headers"
    BODY = "body"
    DONE = "done"


class ResponseParser:
    """
    Parses HTTP/1.1 responses.

    One parser may be reused for many exchanges; each read() starts from
    INITIALIZATION. Not thread-safe.

    Example:
        >>> parser = ResponseParser()
        >>> stream = BufferedStream.from_bytes(b"HTTP/1.1 204 No Content\\r\\n\\r\\n")
        >>> parser.read(stream, "GET").status_code
        204
    """

    def __init__(self, max_body_size: int = DEFAULT_MAX_BODY_SIZE):
        self.max_body_size = max_body_size
        self.section = ReadSection.INITIALIZATION

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def parse(self, stream: BufferedStream, method: str = "GET") -> ParseOutcome:
        """
        Read one response into a tagged result.

        Returns:
            Parsed(response), or Rejected(diagnosis) on a grammar violation.

        Raises:
            HttpClientError: Connection loss, resource limits or unsupported
                features. These are never folded into the result.
        """
        try:
            return Parsed(self.read(stream, method))
        except ConformanceError as e:
            return Rejected(e.diagnosis, e)

    def read(self, stream: BufferedStream, method: str = "GET") -> ParsedResponse:
        """
        Read one response, raising on the first failure.

        Args:
            stream: Source positioned at the start of a status line.
            method: The request method; it decides whether a body may follow.

        Raises:
            ConformanceError: Grammar or body-framing violation.
            ConnectionLost: The stream ended or failed mid-message.
            ResourceExhausted: The body exceeds the configured limits.
            UnsupportedFeature: The server used an unimplemented feature.
        """
        self.section = ReadSection.INITIALIZATION
        method = method.upper()

        try:
            self.section = ReadSection.STATUS_LINE
            version, status_code = self._read_status_line(stream)

            self.section = ReadSection.HEADERS
            headers = self._read_headers(stream)

            self.section = ReadSection.BODY
            self._check_body_legality(method, status_code, headers)
            body = self._read_body(stream, method, status_code, headers)

            self.section = ReadSection.DONE
            return ParsedResponse(
                version=version,
                status_code=status_code,
                headers=headers,
                body=body,
            )

        except ConformanceError as e:
            if e.diagnosis.section is not None:
                logger.debug(f"Response rejected: {e.diagnosis}")
                raise
            error = ConformanceError(e.diagnosis.with_section(self.section.value))
            logger.debug(f"Response rejected: {error.diagnosis}")
            raise error from e

        except MemoryError as e:
            raise ResourceExhausted("Out of memory!", self.section.value) from e

        except HttpClientError as e:
            if e.section is not None:
                raise
            raise type(e)(str(e), self.section.value) from e

    # =========================================================================
    # STATUS LINE
    # =========================================================================

    def _fail(self, reference: str, explanation: str,
              fragment: Optional[str] = None, position: Optional[int] = None) -> ConformanceError:
        return ConformanceError(ParseDiagnosis(
            reference=reference,
            explanation=explanation,
            fragment=fragment,
            position=position,
            section=self.section.value,
        ))

    def _read_status_line(self, stream: BufferedStream) -> tuple[str, int]:
        """
        status-line = HTTP-version SP status-code SP reason-phrase CRLF

        The reason-phrase is split off but never checked; RFC 7230
        Section 3.1.2 says a client SHOULD ignore it.
        """
        line = stream.read_line()
        if line is None:
            raise self._fail(
                "RFC 7230 Section 3.1.2",
                "the stream ended before a status-line was received",
            )

        parts = line.split(" ", 2)
        if len(parts) < 3:
            raise self._fail(
                "RFC 7230 Section 3.1.2",
                "a status-line must consist of HTTP-version SP status-code SP reason-phrase",
                fragment=line,
            )
        version, code, _reason = parts

        self._check_version(version)
        self._check_status_code(code)
        return version, int(code)

    def _check_version(self, version: str) -> None:
        """HTTP-version = "HTTP" "/" DIGIT "." DIGIT"""
        reference = "RFC 7230 Section 2.6"
        if len(version) != 8:
            raise self._fail(
                reference,
                f"Version strings must be exactly 8 characters long, not {len(version)}",
                fragment=version,
            )
        if not version.startswith("HTTP/"):
            raise self._fail(
                reference,
                "Version strings must start with 'HTTP/'",
                fragment=version,
                position=0,
            )
        if not is_digit(version[5]):
            raise self._fail(
                reference,
                f"the major version must be a DIGIT, not '{version[5]}'",
                fragment=version,
                position=5,
            )
        if version[6] != ".":
            raise self._fail(
                reference,
                f"major and minor version must be separated by '.', not '{version[6]}'",
                fragment=version,
                position=6,
            )
        if not is_digit(version[7]):
            raise self._fail(
                reference,
                f"the minor version must be a DIGIT, not '{version[7]}'",
                fragment=version,
                position=7,
            )

    def _check_status_code(self, code: str) -> None:
        """status-code = 3DIGIT, first digit 1-5"""
        if len(code) != 3 or not all(is_digit(c) for c in code):
            raise self._fail(
                "RFC 7230 Section 3.1.2",
                "the status-code must be exactly three DIGITs",
                fragment=code,
            )
        if code[0] > "5":
            raise self._fail(
                "RFC 7231 Section 6",
                f"the first digit of a status-code defines its class (1-5), not '{code[0]}'",
                fragment=code,
                position=0,
            )

    # =========================================================================
    # HEADERS
    # =========================================================================

    def _read_headers(self, stream: BufferedStream) -> HeaderFields:
        headers = HeaderFields()
        while True:
            line = stream.read_line()
            if not line:
                # Empty line ends the header section; so does end-of-stream.
                return headers
            name, value = self._parse_header_line(line)
            headers.add(name, value)

    def _parse_header_line(self, line: str) -> tuple[str, str]:
        """header-field = field-name ":" OWS field-value OWS"""
        colon = line.find(":")
        if colon == -1:
            raise self._fail(
                "RFC 7230 Section 3.2",
                "header fields must contain a ':' separating name and value",
                fragment=line,
            )

        name = line[:colon]
        if not name:
            raise self._fail(
                "RFC 7230 Appendix B",
                "the field-name must be a token of at least one tchar",
                fragment=line,
                position=0,
            )
        for i, c in enumerate(name):
            if not is_tchar(c):
                raise self._fail(
                    "RFC 7230 Appendix B",
                    f"invalid character {c!r} in field-name '{name}'",
                    fragment=c,
                    position=i,
                )

        start = colon + 1
        while start < len(line) and is_ows(line[start]):
            start += 1

        # Only the final run of whitespace is trailing OWS; runs that are
        # followed by more field-vchars belong to the value.
        end = start
        for i in range(start, len(line)):
            c = line[i]
            if is_field_vchar(c):
                end = i + 1
            elif not is_ows(c):
                raise self._fail(
                    "RFC 7230 Appendix B.1",
                    f"invalid character {c!r} (position={i}) in the value of '{name}'",
                    fragment=c,
                    position=i,
                )
        return name, line[start:end]

    # =========================================================================
    # BODY
    # =========================================================================

    def _check_body_legality(self, method: str, status_code: int, headers: HeaderFields) -> None:
        """Checks that need only the status line and the headers."""
        has_content_length = "Content-Length" in headers
        has_transfer_encoding = "Transfer-Encoding" in headers
        has_length = has_content_length or has_transfer_encoding

        if has_length and 100 <= status_code <= 199:
            raise self._fail(
                "RFC 7230 Section 3.3.2",
                "a 1xx (Informational) response must not carry Content-Length or Transfer-Encoding",
            )
        if has_length and status_code == 204:
            raise self._fail(
                "RFC 7230 Section 3.3.2/3.3.3.1",
                "a 204 (No Content) response must not carry Content-Length or Transfer-Encoding",
            )
        if has_content_length and status_code == 304:
            raise self._fail(
                "RFC 7230 Section 3.3.3.1",
                "a 304 (Not Modified) response must not carry Content-Length",
            )
        if method == "OPTIONS" and not has_length:
            raise self._fail(
                "RFC 7231 Section 4.3.7",
                "a response to OPTIONS must send Content-Length or Transfer-Encoding",
            )
        if method == "CONNECT" and has_length and 200 <= status_code <= 299:
            raise self._fail(
                "RFC 7231 Section 4.3.6",
                "a 2xx response to CONNECT must not carry Content-Length or Transfer-Encoding",
            )

        if has_content_length:
            values = headers.get_all("Content-Length")
            for value in values:
                if not value or not all(is_digit(c) for c in value):
                    raise self._fail(
                        "RFC 7230 Section 3.3.2",
                        "Content-Length must be 1*DIGIT",
                        fragment=value,
                    )
            if len(set(int(v) for v in values)) > 1:
                raise self._fail(
                    "RFC 7230 Section 3.3.2",
                    f"conflicting Content-Length values {values}",
                )
            if has_transfer_encoding:
                raise self._fail(
                    "RFC 7230 Section 3.3.3",
                    "a message must not carry both Content-Length and Transfer-Encoding",
                )

    def _read_body(self, stream: BufferedStream, method: str, status_code: int,
                   headers: HeaderFields) -> Optional[bytes]:
        if method == "HEAD":
            return None
        if 100 <= status_code <= 199 or status_code in (204, 304):
            return None

        content_length = headers.get("Content-Length")
        if content_length is not None:
            length = int(content_length)
            if length > MAX_CONTENT_LENGTH:
                raise ResourceExhausted(
                    f"Content-Length {length} does not fit in 32 bits"
                )
            if length > self.max_body_size:
                raise ResourceExhausted(
                    f"Content-Length {length} exceeds the limit of {self.max_body_size} bytes"
                )
            return stream.read_exact(length)

        transfer_encoding = headers.get("Transfer-Encoding")
        if transfer_encoding is not None:
            if len(headers.get_all("Transfer-Encoding")) > 1 or transfer_encoding.lower() != "chunked":
                raise UnsupportedFeature(
                    f"Transfer-Encoding {transfer_encoding!r} is not supported (only 'chunked')"
                )
            return ChunkedDecoder(stream, self.max_body_size).decode()

        return None


def parse_response(data: bytes, method: str = "GET", chunk_size: Optional[int] = None,
                   max_body_size: int = DEFAULT_MAX_BODY_SIZE) -> ParseOutcome:
    """
    Parse a complete response held in memory.

    Example:
        >>> outcome = parse_response(b"HTTP/1.1 700 X\\r\\n\\r\\n")
        >>> outcome.ok, outcome.diagnosis.reference
        (False, 'RFC 7231 Section 6')
    """
    stream = BufferedStream.from_bytes(data, chunk_size=chunk_size)
    return ResponseParser(max_body_size).parse(stream, method)
