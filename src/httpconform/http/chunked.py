"""
=============================================================================
CHUNKED TRANSFER CODING DECODER (RFC 7230 Section 4.1)
=============================================================================

Chunked coding lets a server send a body whose length it does not know
up front. The body is a series of size-prefixed chunks, terminated by a
zero-size chunk:

    5\\r\\n                  ◄── chunk-size (hex)
    hello\\r\\n              ◄── chunk-data + CRLF
    7\\r\\n
    , world\\r\\n
    0\\r\\n                  ◄── last-chunk
    \\r\\n                   ◄── end of chunked-body (no trailers)

    chunked-body = *chunk last-chunk trailer-part CRLF
    chunk        = chunk-size [ chunk-ext ] CRLF chunk-data CRLF
    chunk-size   = 1*HEXDIG
    last-chunk   = 1*("0") [ chunk-ext ] CRLF

=============================================================================
WHAT IS NOT SUPPORTED
=============================================================================

    chunk-ext     "5;name=value"   → UnsupportedFeature
    trailer-part  "0\\r\\nX: y\\r\\n" → UnsupportedFeature

Both are legal HTTP, so they are reported as a tool limitation, never as
a server defect.

Every CRLF of the chunked framing is read as a line, so a bare LF is
accepted wherever CRLF is (RFC 7230 Section 3.5), the same as in the
status-line and header section.

=============================================================================
"""

import logging

from .abnf import is_hexdig
from .errors import ConformanceError, ConnectionLost, ParseDiagnosis, ResourceExhausted, UnsupportedFeature


logger = logging.getLogger(__name__)


class ChunkedDecoder:
    """
    Decodes one chunked body from a BufferedStream.

    Every chunk is read exactly once and appended to a growing buffer;
    nothing is re-read or re-parsed.
    """

    def __init__(self, stream, max_body_size: int):
        self.stream = stream
        self.max_body_size = max_body_size

    def decode(self) -> bytes:
        body = bytearray()
        while True:
            size = self._read_chunk_size()
            if size == 0:
                self._expect_final_crlf()
                logger.debug(f"Chunked body complete: {len(body)} bytes")
                return bytes(body)

            if len(body) + size > self.max_body_size:
                raise ResourceExhausted(
                    f"Chunked body exceeds {self.max_body_size} bytes"
                )
            body.extend(self.stream.read_exact(size))
            self._expect_data_terminator()

    def _read_chunk_size(self) -> int:
        line = self.stream.read_line()
        if line is None:
            raise ConnectionLost("Connection lost before the last chunk")

        if ";" in line:
            raise UnsupportedFeature(f"Chunk extensions are not supported: {line!r}")

        if not line:
            raise ConformanceError(ParseDiagnosis(
                reference="RFC 7230 Section 4.1",
                explanation="chunk-size must contain at least one HEXDIG",
                fragment=line,
            ))
        for i, c in enumerate(line):
            if not is_hexdig(c):
                raise ConformanceError(ParseDiagnosis(
                    reference="RFC 7230 Section 4.1",
                    explanation=f"chunk-size contains non-HEXDIG character '{c}'",
                    fragment=line,
                    position=i,
                ))
        return int(line, 16)

    def _expect_data_terminator(self) -> None:
        """CRLF (or bare LF) directly after chunk-data."""
        line = self.stream.read_line()
        if line is None:
            raise ConnectionLost("Connection lost after chunk-data")
        if line:
            raise ConformanceError(ParseDiagnosis(
                reference="RFC 7230 Section 4.1",
                explanation="chunk-data must be followed by CRLF",
                fragment=line,
                position=0,
            ))

    def _expect_final_crlf(self) -> None:
        line = self.stream.read_line()
        if line is None:
            raise ConnectionLost("Connection lost before the end of the chunked body")
        if line:
            raise UnsupportedFeature(f"Trailer fields after the last chunk are not supported: {line!r}")
