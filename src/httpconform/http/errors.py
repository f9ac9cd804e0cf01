"""
=============================================================================
DIAGNOSES AND ERROR TAXONOMY
=============================================================================

A conformance tester has to answer one question very precisely:

    "Did the SERVER do something wrong, or did the TEST fail to run?"

So failures are split into families that never mix:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        FAILURE FAMILIES                             │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │  ConformanceError  ─── the wire data violates an RFC production     │
    │   └── UrlError          (the URL given to us violates RFC 3986)     │
    │        carries a ParseDiagnosis:                                    │
    │          reference   "RFC 7230 Section 2.6"                         │
    │          explanation "Version strings must start with 'HTTP/'"     │
    │          fragment    "HTPP/1.1"                                     │
    │          position    2                                              │
    │          section     "status-line"                                  │
    │                                                                      │
    │  HttpClientError  ──── the exchange could not be completed          │
    │   ├── ConnectError       transport never came up (TCP / TLS)        │
    │   ├── ConnectionLost     end-of-stream or I/O error mid-read        │
    │   ├── ResourceExhausted  body/line exceeds limits, MemoryError      │
    │   └── UnsupportedFeature the server used something we don't parse  │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
TAGGED RESULTS
=============================================================================

The parsers raise ConformanceError internally (fail-fast: the first
violation ends the parse). At the public boundary the grammar family is
turned into a value so a caller has to look at it:

    outcome = parse_url("http//example.com")
    if outcome.ok:
        url = outcome.value
    else:
        print(outcome.diagnosis)

HttpClientError is NEVER folded into a result. A dropped connection is a
tool-level event, and it keeps travelling as an exception.

=============================================================================
"""

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar, Union


T = TypeVar("T")


@dataclass(frozen=True)
class ParseDiagnosis:
    """
    A classified grammar/conformance failure.

    Attributes:
        reference:   RFC citation of the violated rule.
        explanation: Human-readable description of what is wrong.
        fragment:    The offending substring (None if there is none,
                     e.g. end-of-stream).
        position:    Index of the offending character inside the
                     component being checked, when it is known.
        section:     Parser state that detected the problem.
    """

    reference: str
    explanation: str
    fragment: Optional[str] = None
    position: Optional[int] = None
    section: Optional[str] = None

    def with_section(self, section: str) -> "ParseDiagnosis":
        """Copy of this diagnosis tagged with the parser state."""
        return ParseDiagnosis(
            reference=self.reference,
            explanation=self.explanation,
            fragment=self.fragment,
            position=self.position,
            section=section,
        )

    def __str__(self) -> str:
        text = f"'{self.explanation}' ({self.reference})"
        details = []
        if self.fragment is not None:
            details.append(f"source={self.fragment!r}")
        if self.position is not None:
            details.append(f"position={self.position}")
        if self.section is not None:
            details.append(f"section={self.section}")
        if details:
            text += " [" + ", ".join(details) + "]"
        return text


# =============================================================================
# GRAMMAR / CONFORMANCE FAILURES
# =============================================================================

class ConformanceError(Exception):
    """
    Raised when input violates a cited RFC production.

    Carries the structured ParseDiagnosis so callers never have to parse
    the message text.
    """

    def __init__(self, diagnosis: ParseDiagnosis):
        super().__init__(str(diagnosis))
        self.diagnosis = diagnosis

    @property
    def reference(self) -> str:
        return self.diagnosis.reference


class UrlError(ConformanceError):
    """Raised when a URL cannot be constructed from its source string."""

    def __init__(self, source: str, diagnosis: ParseDiagnosis):
        self.source = source
        super().__init__(diagnosis)
        self.args = (f'Invalid URL "{source}": {diagnosis}',)


# =============================================================================
# SESSION-LEVEL FAILURES
# =============================================================================

class HttpClientError(Exception):
    """Errors of the client that are not related to the standard."""

    def __init__(self, message: str, section: Optional[str] = None):
        if section is not None:
            message = f"{message} (Section: {section})"
        super().__init__(message)
        self.section = section


class ConnectError(HttpClientError):
    """The transport could not be established."""


class ConnectionLost(HttpClientError):
    """End-of-stream or I/O failure while an exchange was in flight."""


class ResourceExhausted(HttpClientError):
    """A body or line is larger than the configured limits allow."""


class UnsupportedFeature(HttpClientError):
    """The server used a protocol feature this tool does not implement."""


# =============================================================================
# TAGGED RESULT TYPE
# =============================================================================

@dataclass(frozen=True)
class Parsed(Generic[T]):
    """Successful parse carrying the parsed entity."""

    value: T

    @property
    def ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Rejected:
    """Failed parse carrying the structured diagnosis."""

    diagnosis: ParseDiagnosis
    error: Optional[ConformanceError] = None

    @property
    def ok(self) -> bool:
        return False

    def unwrap(self) -> Any:
        """Re-raise the original error (or a fresh one) for this diagnosis."""
        if self.error is not None:
            raise self.error
        raise ConformanceError(self.diagnosis)


ParseOutcome = Union[Parsed[T], Rejected]
