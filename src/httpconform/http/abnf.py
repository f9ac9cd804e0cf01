"""
=============================================================================
ABNF CHARACTER CLASSES
=============================================================================

Single-character predicates for the core rules of RFC 5234 (ABNF) and the
character classes that RFC 3986 (URI) and RFC 7230 (HTTP/1.1 message
syntax) build on top of them.

=============================================================================
WHY NOT JUST USE str.isalpha() / str.isdigit()?
=============================================================================

Python's string predicates are UNICODE-aware:

    >>> "٣".isdigit()       # ARABIC-INDIC DIGIT THREE
    True
    >>> "é".isalpha()
    True

The RFC grammars are defined over OCTETS. A conformance checker that
accepted "é" as an ALPHA would let a broken server pass. Every predicate
here compares code points against the exact ranges from the RFCs.

=============================================================================
THE RULES
=============================================================================

    ┌──────────────┬──────────────────────────────────────┬───────────────┐
    │ Rule         │ Definition                           │ Source        │
    ├──────────────┼──────────────────────────────────────┼───────────────┤
    │ ALPHA        │ %x41-5A / %x61-7A                    │ RFC 5234 B.1  │
    │ DIGIT        │ %x30-39                              │ RFC 5234 B.1  │
    │ HEXDIG       │ DIGIT / "A" ... "F"  (any case)      │ RFC 5234 B.1  │
    │ VCHAR        │ %x21-7E                              │ RFC 5234 B.1  │
    │ obs-text     │ %x80-FF                              │ RFC 7230 3.2.6│
    │ tchar        │ ALPHA / DIGIT / !#$%&'*+-.^_`|~      │ RFC 7230 3.2.6│
    │ OWS          │ *( SP / HTAB )                       │ RFC 7230 3.2.3│
    │ unreserved   │ ALPHA / DIGIT / "-" / "." / "_" / "~"│ RFC 3986 2.3  │
    │ sub-delims   │ !$&'()*+,;=                          │ RFC 3986 2.2  │
    └──────────────┴──────────────────────────────────────┴───────────────┘

Strings that are not exactly one character long never belong to a class.

=============================================================================
"""

# RFC 7230 Section 3.2.6: the punctuation allowed in a token
TCHAR_SPECIALS = frozenset("!#$%&'*+-.^_`|~")

# RFC 3986 Section 2.2
SUB_DELIMS = frozenset("!$&'()*+,;=")

SP = " "
HTAB = "\t"


def _code(c: str) -> int:
    """Code point of a single character, or -1 for anything else."""
    if len(c) != 1:
        return -1
    return ord(c)


# =============================================================================
# RFC 5234 CORE RULES
# =============================================================================

def is_alpha(c: str) -> bool:
    """ALPHA = %x41-5A / %x61-7A ; A-Z / a-z"""
    code = _code(c)
    return 0x41 <= code <= 0x5A or 0x61 <= code <= 0x7A


def is_digit(c: str) -> bool:
    """DIGIT = %x30-39 ; 0-9"""
    return 0x30 <= _code(c) <= 0x39


def is_hexdig(c: str) -> bool:
    """
    HEXDIG = DIGIT / "A" / "B" / "C" / "D" / "E" / "F"

    ABNF string literals are case-insensitive (RFC 5234 Section 2.3),
    so "a" through "f" are hex digits too.
    """
    code = _code(c)
    return is_digit(c) or 0x41 <= code <= 0x46 or 0x61 <= code <= 0x66


def is_vchar(c: str) -> bool:
    """VCHAR = %x21-7E ; visible (printing) characters"""
    return 0x21 <= _code(c) <= 0x7E


# =============================================================================
# RFC 7230 RULES
# =============================================================================

def is_obs_text(c: str) -> bool:
    """obs-text = %x80-FF"""
    return 0x80 <= _code(c) <= 0xFF


def is_field_vchar(c: str) -> bool:
    """field-vchar = VCHAR / obs-text"""
    return is_vchar(c) or is_obs_text(c)


def is_ows(c: str) -> bool:
    """A single OWS character: SP or HTAB."""
    return c == SP or c == HTAB


def is_tchar(c: str) -> bool:
    """
    tchar = "!" / "#" / "$" / "%" / "&" / "'" / "*" / "+" / "-" / "."
          / "^" / "_" / "`" / "|" / "~" / DIGIT / ALPHA
    """
    return is_alpha(c) or is_digit(c) or (len(c) == 1 and c in TCHAR_SPECIALS)


# =============================================================================
# RFC 3986 RULES
# =============================================================================

def is_unreserved(c: str) -> bool:
    """unreserved = ALPHA / DIGIT / "-" / "." / "_" / "~" """
    return is_alpha(c) or is_digit(c) or (len(c) == 1 and c in "-._~")


def is_sub_delim(c: str) -> bool:
    """sub-delims = "!" / "$" / "&" / "'" / "(" / ")" / "*" / "+" / "," / ";" / "=" """
    return len(c) == 1 and c in SUB_DELIMS


def is_scheme_char(c: str) -> bool:
    """Any character after the first in: scheme = ALPHA *( ALPHA / DIGIT / "+" / "-" / "." )"""
    return is_alpha(c) or is_digit(c) or (len(c) == 1 and c in "+-.")
