"""
=============================================================================
HTTP STATUS CODE METADATA (IANA REGISTRY)
=============================================================================

Static lookup data used ONLY to make status codes readable in diagnostics
and test output. The response parser itself treats status codes as plain
numbers: a server answering "299" is not wrong just because 299 is not
registered.

=============================================================================
STATUS CODE CATEGORIES
=============================================================================

    ┌────────┬───────────────────────────────────────────────────────────┐
    │  1xx   │ INFORMATIONAL: Request received, continuing process      │
    │  2xx   │ SUCCESS: Request received, understood, accepted          │
    │  3xx   │ REDIRECTION: Further action needed                       │
    │  4xx   │ CLIENT ERROR: Problem with the request                   │
    │  5xx   │ SERVER ERROR: Problem with the server                    │
    └────────┴───────────────────────────────────────────────────────────┘

    First digit 6-9? Those classes don't exist (RFC 7231 Section 6).

=============================================================================
WHERE EACH CODE IS DEFINED
=============================================================================

Every entry records the RFC and section defining the code, so output can
point straight at the text:

    >>> format_status(204)
    '204 No Content [RFC 7231, Section 6.3.5]'
    >>> format_status(418)
    "418 I'm a teapot [RFC 2324, Section 2.3.2] (AprilFools)"
    >>> format_status(299)
    '299 (Unknown)'

Source: https://www.iana.org/assignments/http-status-codes/

=============================================================================
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional


class StatusInfo(Enum):
    """Registry annotations attached to some status codes."""
    NONE = "None"
    OBSOLETE = "Obsolete"
    DEPRECATED = "Deprecated"
    UNUSED = "Unused"
    RESERVED = "Reserved"
    APRIL_FOOLS = "AprilFools"


@dataclass(frozen=True)
class StatusMetadata:
    """Reason phrase plus the RFC citation of one registered code."""
    phrase: str
    rfc: int = 0              # 0 = unknown
    section: str = ""         # "" = unspecified
    info: StatusInfo = StatusInfo.NONE

    @property
    def citation(self) -> str:
        if not self.rfc:
            return ""
        if self.section:
            return f"RFC {self.rfc}, Section {self.section}"
        return f"RFC {self.rfc}"


class HTTPStatus(IntEnum):
    """
    Registered HTTP status codes.

    IntEnum, so members compare equal to plain integers:

        >>> HTTPStatus.NO_CONTENT == 204
        True
        >>> HTTPStatus.NO_CONTENT.rfc, HTTPStatus.NO_CONTENT.rfc_section
        (7231, '6.3.5')
    """

    # =========================================================================
    # 1xx INFORMATIONAL
    # =========================================================================
    CONTINUE = 100
    SWITCHING_PROTOCOLS = 101
    PROCESSING = 102
    EARLY_HINTS = 103

    # =========================================================================
    # 2xx SUCCESS
    # =========================================================================
    OK = 200
    CREATED = 201
    ACCEPTED = 202
    NON_AUTHORITATIVE_INFORMATION = 203
    NO_CONTENT = 204
    RESET_CONTENT = 205
    PARTIAL_CONTENT = 206
    MULTI_STATUS = 207
    ALREADY_REPORTED = 208
    IM_USED = 226

    # =========================================================================
    # 3xx REDIRECTION
    # =========================================================================
    MULTIPLE_CHOICES = 300
    MOVED_PERMANENTLY = 301
    FOUND = 302
    SEE_OTHER = 303
    NOT_MODIFIED = 304
    USE_PROXY = 305
    UNUSED = 306
    TEMPORARY_REDIRECT = 307
    PERMANENT_REDIRECT = 308

    # =========================================================================
    # 4xx CLIENT ERRORS
    # =========================================================================
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    PAYMENT_REQUIRED = 402
    FORBIDDEN = 403
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    NOT_ACCEPTABLE = 406
    PROXY_AUTHENTICATION_REQUIRED = 407
    REQUEST_TIMEOUT = 408
    CONFLICT = 409
    GONE = 410
    LENGTH_REQUIRED = 411
    PRECONDITION_FAILED = 412
    PAYLOAD_TOO_LARGE = 413
    URI_TOO_LONG = 414
    UNSUPPORTED_MEDIA_TYPE = 415
    RANGE_NOT_SATISFIABLE = 416
    EXPECTATION_FAILED = 417
    IM_A_TEAPOT = 418
    MISDIRECTED_REQUEST = 421
    UNPROCESSABLE_ENTITY = 422
    LOCKED = 423
    FAILED_DEPENDENCY = 424
    UPGRADE_REQUIRED = 426
    PRECONDITION_REQUIRED = 428
    TOO_MANY_REQUESTS = 429
    REQUEST_HEADER_FIELDS_TOO_LARGE = 431
    UNAVAILABLE_FOR_LEGAL_REASONS = 451

    # =========================================================================
    # 5xx SERVER ERRORS
    # =========================================================================
    INTERNAL_SERVER_ERROR = 500
    NOT_IMPLEMENTED = 501
    BAD_GATEWAY = 502
    SERVICE_UNAVAILABLE = 503
    GATEWAY_TIMEOUT = 504
    HTTP_VERSION_NOT_SUPPORTED = 505
    VARIANT_ALSO_NEGOTIATES = 506
    INSUFFICIENT_STORAGE = 507
    LOOP_DETECTED = 508
    NOT_EXTENDED = 510
    NETWORK_AUTHENTICATION_REQUIRED = 511

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def metadata(self) -> StatusMetadata:
        return _STATUS_METADATA[self]

    @property
    def phrase(self) -> str:
        """
        The registered reason phrase.

            HTTP/1.1 200 OK
                     ─── ──
                      │   └── Reason phrase
                      └────── Status code

        Clients SHOULD ignore the phrase a server actually sends
        (RFC 7230 Section 3.1.2); this is the registry's wording.
        """
        return self.metadata.phrase

    @property
    def rfc(self) -> int:
        return self.metadata.rfc

    @property
    def rfc_section(self) -> str:
        return self.metadata.section

    @property
    def info(self) -> StatusInfo:
        return self.metadata.info

    @property
    def is_informational(self) -> bool:
        return 100 <= self < 200

    @property
    def is_success(self) -> bool:
        return 200 <= self < 300

    @property
    def is_redirect(self) -> bool:
        return 300 <= self < 400

    @property
    def is_client_error(self) -> bool:
        return 400 <= self < 500

    @property
    def is_server_error(self) -> bool:
        return 500 <= self < 600

    @property
    def is_error(self) -> bool:
        return self >= 400


# =============================================================================
# REGISTRY TABLE
# =============================================================================
#
# Loaded once at import time and never modified afterwards.
#
# =============================================================================

_M = StatusMetadata

_STATUS_METADATA = {
    # 1xx Informational
    HTTPStatus.CONTINUE: _M("Continue", 7231, "6.2.1"),
    HTTPStatus.SWITCHING_PROTOCOLS: _M("Switching Protocols", 7231, "6.2.2"),
    HTTPStatus.PROCESSING: _M("Processing", 2518, "10.1", StatusInfo.OBSOLETE),
    HTTPStatus.EARLY_HINTS: _M("Early Hints", 8297, "2"),

    # 2xx Success
    HTTPStatus.OK: _M("OK", 7231, "6.3.1"),
    HTTPStatus.CREATED: _M("Created", 7231, "6.3.2"),
    HTTPStatus.ACCEPTED: _M("Accepted", 7231, "6.3.3"),
    HTTPStatus.NON_AUTHORITATIVE_INFORMATION: _M("Non-Authoritative Information", 7231, "6.3.4"),
    HTTPStatus.NO_CONTENT: _M("No Content", 7231, "6.3.5"),
    HTTPStatus.RESET_CONTENT: _M("Reset Content", 7231, "6.3.6"),
    HTTPStatus.PARTIAL_CONTENT: _M("Partial Content", 7233, "4.1"),
    HTTPStatus.MULTI_STATUS: _M("Multi-Status", 4918, "11.1"),
    HTTPStatus.ALREADY_REPORTED: _M("Already Reported", 5842, "7.1"),
    HTTPStatus.IM_USED: _M("IM Used", 3229, "10.4.1"),

    # 3xx Redirection
    HTTPStatus.MULTIPLE_CHOICES: _M("Multiple Choices", 7231, "6.4.1"),
    HTTPStatus.MOVED_PERMANENTLY: _M("Moved Permanently", 7231, "6.4.2"),
    HTTPStatus.FOUND: _M("Found", 7231, "6.4.3"),
    HTTPStatus.SEE_OTHER: _M("See Other", 7231, "6.4.4"),
    HTTPStatus.NOT_MODIFIED: _M("Not Modified", 7232, "4.1"),
    HTTPStatus.USE_PROXY: _M("Use Proxy", 7231, "6.4.5", StatusInfo.DEPRECATED),
    HTTPStatus.UNUSED: _M("(Unused)", 7231, "6.4.6", StatusInfo.UNUSED),
    HTTPStatus.TEMPORARY_REDIRECT: _M("Temporary Redirect", 7231, "6.4.7"),
    HTTPStatus.PERMANENT_REDIRECT: _M("Permanent Redirect", 7538, "3"),

    # 4xx Client Errors
    HTTPStatus.BAD_REQUEST: _M("Bad Request", 7231, "6.5.1"),
    HTTPStatus.UNAUTHORIZED: _M("Unauthorized", 7235, "3.1"),
    HTTPStatus.PAYMENT_REQUIRED: _M("Payment Required", 7231, "6.5.2", StatusInfo.RESERVED),
    HTTPStatus.FORBIDDEN: _M("Forbidden", 7231, "6.5.3"),
    HTTPStatus.NOT_FOUND: _M("Not Found", 7231, "6.5.4"),
    HTTPStatus.METHOD_NOT_ALLOWED: _M("Method Not Allowed", 7231, "6.5.5"),
    HTTPStatus.NOT_ACCEPTABLE: _M("Not Acceptable", 7231, "6.5.6"),
    HTTPStatus.PROXY_AUTHENTICATION_REQUIRED: _M("Proxy Authentication Required", 7235, "3.2"),
    HTTPStatus.REQUEST_TIMEOUT: _M("Request Timeout", 7231, "6.5.7"),
    HTTPStatus.CONFLICT: _M("Conflict", 7231, "6.5.8"),
    HTTPStatus.GONE: _M("Gone", 7231, "6.5.9"),
    HTTPStatus.LENGTH_REQUIRED: _M("Length Required", 7231, "6.5.10"),
    HTTPStatus.PRECONDITION_FAILED: _M("Precondition Failed", 7232, "4.2"),
    HTTPStatus.PAYLOAD_TOO_LARGE: _M("Payload Too Large", 7231, "6.5.11"),
    HTTPStatus.URI_TOO_LONG: _M("URI Too Long", 7231, "6.5.12"),
    HTTPStatus.UNSUPPORTED_MEDIA_TYPE: _M("Unsupported Media Type", 7231, "6.5.13"),
    HTTPStatus.RANGE_NOT_SATISFIABLE: _M("Range Not Satisfiable", 7233, "4.4"),
    HTTPStatus.EXPECTATION_FAILED: _M("Expectation Failed", 7231, "6.5.14"),
    HTTPStatus.IM_A_TEAPOT: _M("I'm a teapot", 2324, "2.3.2", StatusInfo.APRIL_FOOLS),
    HTTPStatus.MISDIRECTED_REQUEST: _M("Misdirected Request", 7540, "9.1.2"),
    HTTPStatus.UNPROCESSABLE_ENTITY: _M("Unprocessable Entity", 4918, "11.2"),
    HTTPStatus.LOCKED: _M("Locked", 4918, "11.3"),
    HTTPStatus.FAILED_DEPENDENCY: _M("Failed Dependency", 4918, "11.4"),
    HTTPStatus.UPGRADE_REQUIRED: _M("Upgrade Required", 7231, "6.5.15"),
    HTTPStatus.PRECONDITION_REQUIRED: _M("Precondition Required", 6585, "3"),
    HTTPStatus.TOO_MANY_REQUESTS: _M("Too Many Requests", 6585, "4"),
    HTTPStatus.REQUEST_HEADER_FIELDS_TOO_LARGE: _M("Request Header Fields Too Large", 6585, "5"),
    HTTPStatus.UNAVAILABLE_FOR_LEGAL_REASONS: _M("Unavailable For Legal Reasons", 7725, "3"),

    # 5xx Server Errors
    HTTPStatus.INTERNAL_SERVER_ERROR: _M("Internal Server Error", 7231, "6.6.1"),
    HTTPStatus.NOT_IMPLEMENTED: _M("Not Implemented", 7231, "6.6.2"),
    HTTPStatus.BAD_GATEWAY: _M("Bad Gateway", 7231, "6.6.3"),
    HTTPStatus.SERVICE_UNAVAILABLE: _M("Service Unavailable", 7231, "6.6.4"),
    HTTPStatus.GATEWAY_TIMEOUT: _M("Gateway Timeout", 7231, "6.6.5"),
    HTTPStatus.HTTP_VERSION_NOT_SUPPORTED: _M("HTTP Version Not Supported", 7231, "6.6.6"),
    HTTPStatus.VARIANT_ALSO_NEGOTIATES: _M("Variant Also Negotiates", 2295, "8.1"),
    HTTPStatus.INSUFFICIENT_STORAGE: _M("Insufficient Storage", 4918, "11.5"),
    HTTPStatus.LOOP_DETECTED: _M("Loop Detected", 5842, "7.2"),
    HTTPStatus.NOT_EXTENDED: _M("Not Extended", 2774, "7"),
    HTTPStatus.NETWORK_AUTHENTICATION_REQUIRED: _M("Network Authentication Required", 6585, "6"),
}

del _M


def lookup(code: int) -> Optional[HTTPStatus]:
    """Registered status for a numeric code, or None."""
    try:
        return HTTPStatus(code)
    except ValueError:
        return None


def format_status(code: int) -> str:
    """
    Human-readable rendering of a status code with its citation.

    Unregistered codes are rendered as "<code> (Unknown)".
    """
    status = lookup(code)
    if status is None:
        return f"{code} (Unknown)"

    text = f"{code} {status.phrase}"
    citation = status.metadata.citation
    if citation:
        text += f" [{citation}]"
    if status.info is not StatusInfo.NONE:
        text += f" ({status.info.value})"
    return text
