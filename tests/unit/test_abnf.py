"""
Unit tests for ABNF character classes.
"""

import pytest

from httpconform.http.abnf import (
    is_alpha,
    is_digit,
    is_hexdig,
    is_vchar,
    is_obs_text,
    is_field_vchar,
    is_ows,
    is_tchar,
    is_unreserved,
    is_sub_delim,
    is_scheme_char,
)


class TestCoreRules:
    """Tests for the RFC 5234 core rules."""

    def test_alpha_is_ascii_only(self):
        """Test that only A-Z and a-z are ALPHA."""
        assert is_alpha("a") and is_alpha("Z")
        assert not is_alpha("é")
        assert not is_alpha("1")
        assert not is_alpha("[")  # between 'Z' and 'a'

    def test_digit_rejects_unicode_digits(self):
        """Test that non-ASCII digits are not DIGIT."""
        assert all(is_digit(c) for c in "0123456789")
        assert not is_digit("٣")

    def test_hexdig_is_case_insensitive(self):
        """Test HEXDIG accepts both cases of A-F."""
        assert all(is_hexdig(c) for c in "0123456789abcdefABCDEF")
        assert not is_hexdig("g")
        assert not is_hexdig("G")

    def test_vchar_range(self):
        """Test VCHAR is %x21-7E."""
        assert is_vchar("!") and is_vchar("~")
        assert not is_vchar(" ")
        assert not is_vchar("\x7f")

    @pytest.mark.parametrize("value", ["", "ab", "12"])
    def test_non_single_characters_never_match(self, value: str):
        """Test that empty and multi-character strings are in no class."""
        predicates = [
            is_alpha, is_digit, is_hexdig, is_vchar, is_obs_text,
            is_field_vchar, is_ows, is_tchar, is_unreserved,
            is_sub_delim, is_scheme_char,
        ]
        assert not any(predicate(value) for predicate in predicates)


class TestHttpRules:
    """Tests for the RFC 7230 rules."""

    def test_tchar_specials(self):
        """Test every token special is a tchar."""
        assert all(is_tchar(c) for c in "!#$%&'*+-.^_`|~")

    def test_tchar_excludes_delimiters(self):
        """Test delimiters and whitespace are not tchar."""
        for c in ' "(),/:;<=>?@[\\]{}\t':
            assert not is_tchar(c), repr(c)

    def test_obs_text_and_field_vchar(self):
        """Test obs-text covers %x80-FF and is a field-vchar."""
        assert is_obs_text("\x80") and is_obs_text("\xff")
        assert not is_obs_text("\x7f")
        assert not is_obs_text("Ā")
        assert is_field_vchar("\xe9")
        assert is_field_vchar("a")
        assert not is_field_vchar(" ")

    def test_ows(self):
        """Test OWS characters are SP and HTAB only."""
        assert is_ows(" ") and is_ows("\t")
        assert not is_ows("\r")


class TestUriRules:
    """Tests for the RFC 3986 rules."""

    def test_sub_delims_has_eleven_members(self):
        """Test the full sub-delims set and nothing else."""
        members = [chr(i) for i in range(0x20, 0x7f) if is_sub_delim(chr(i))]
        assert "".join(members) == "!$&'()*+,;="

    def test_unreserved(self):
        """Test unreserved characters."""
        assert all(is_unreserved(c) for c in "aZ09-._~")
        assert not is_unreserved("%")
        assert not is_unreserved("!")

    def test_scheme_char(self):
        """Test scheme characters after the first."""
        assert all(is_scheme_char(c) for c in "a1+-.")
        assert not is_scheme_char("_")
