"""
Unit tests for the strict HTTP/1.1 response parser.
"""

import pytest

from httpconform.core.stream import BufferedStream
from httpconform.http.errors import (
    ConformanceError,
    ConnectionLost,
    Parsed,
    Rejected,
    ResourceExhausted,
    UnsupportedFeature,
)
from httpconform.http.parser import ReadSection, ResponseParser, parse_response


def reject(data: bytes, method: str = "GET") -> Rejected:
    outcome = parse_response(data, method)
    assert isinstance(outcome, Rejected), outcome
    return outcome


class TestResponseParser:
    """Tests for successful parses."""

    def test_parse_content_length_body(self, sample_ok_response: bytes):
        """Test a simple 200 response."""
        outcome = parse_response(sample_ok_response)

        assert isinstance(outcome, Parsed)
        response = outcome.value
        assert response.version == "HTTP/1.1"
        assert response.status_code == 200
        assert response.headers.get("content-type") == "text/plain"
        assert response.body == b"hello"

    def test_one_byte_reads(self, sample_ok_response: bytes):
        """Test that the result does not depend on recv() sizes."""
        outcome = parse_response(sample_ok_response, chunk_size=1)

        assert outcome.value.body == b"hello"

    def test_parse_chunked_body(self, sample_chunked_response: bytes):
        """Test that a chunked body is decoded."""
        response = parse_response(sample_chunked_response).unwrap()

        assert response.body == b"hello, world"
        assert response.is_chunked

    def test_no_framing_means_no_body(self):
        """Test that without length headers there is no body (not b'')."""
        response = parse_response(b"HTTP/1.1 200 OK\r\n\r\n").unwrap()

        assert response.body is None
        assert not response.has_body

    def test_zero_content_length_is_empty_body(self):
        """Test that Content-Length: 0 gives b'' rather than None."""
        response = parse_response(b"HTTP/1.1 200 OK\r\nContent-Length: 0\r\n\r\n").unwrap()

        assert response.body == b""
        assert response.has_body

    def test_head_never_reads_body(self):
        """Test that HEAD responses keep the stream at the next message."""
        data = (
            b"HTTP/1.1 200 OK\r\nContent-Length: 5\r\n\r\n"
            b"HTTP/1.1 204 No Content\r\n\r\n"
        )
        stream = BufferedStream.from_bytes(data)
        parser = ResponseParser()

        first = parser.read(stream, "HEAD")
        second = parser.read(stream, "GET")

        assert first.body is None
        assert first.content_length == 5
        assert second.status_code == 204

    @pytest.mark.parametrize("status", [b"100 Continue", b"204 No Content"])
    def test_bodyless_statuses(self, status: bytes):
        """Test that 1xx and 204 responses have no body."""
        response = parse_response(b"HTTP/1.1 " + status + b"\r\n\r\n").unwrap()

        assert response.body is None

    def test_304_with_transfer_encoding_has_no_body(self):
        """Test that 304 never reads a body."""
        response = parse_response(
            b"HTTP/1.1 304 Not Modified\r\nTransfer-Encoding: chunked\r\n\r\n"
        ).unwrap()

        assert response.body is None

    def test_empty_reason_phrase(self):
        """Test that the reason-phrase may be empty."""
        assert parse_response(b"HTTP/1.1 200 \r\n\r\n").ok

    def test_reason_phrase_not_validated(self):
        """Test that any reason-phrase text is accepted."""
        assert parse_response(b"HTTP/1.1 200 Totally Fine \x01\r\n\r\n").ok

    def test_parser_is_reusable(self, sample_ok_response: bytes):
        """Test that each read starts from a fresh state."""
        parser = ResponseParser()
        with pytest.raises(ConformanceError):
            parser.read(BufferedStream.from_bytes(b"garbage\r\n\r\n"))

        response = parser.read(BufferedStream.from_bytes(sample_ok_response))

        assert response.status_code == 200
        assert parser.section == ReadSection.DONE


class TestStatusLine:
    """Tests for status-line validation."""

    def test_too_few_parts(self):
        """Test that a status-line needs three parts."""
        outcome = reject(b"HTTP/1.1 200\r\n\r\n")

        assert outcome.diagnosis.reference == "RFC 7230 Section 3.1.2"
        assert outcome.diagnosis.section == "status-line"

    def test_empty_stream(self):
        """Test that a stream without any bytes fails on the status-line."""
        outcome = reject(b"")

        assert outcome.diagnosis.reference == "RFC 7230 Section 3.1.2"

    @pytest.mark.parametrize("version,position", [
        (b"HTTP/1.10", None),
        (b"HTPP/1.1", 0),
        (b"HTTP/x.1", 5),
        (b"HTTP/1,1", 6),
        (b"HTTP/1.x", 7),
    ])
    def test_bad_versions(self, version: bytes, position):
        """Test each version deviation cites Section 2.6."""
        outcome = reject(version + b" 200 OK\r\n\r\n")

        assert outcome.diagnosis.reference == "RFC 7230 Section 2.6"
        assert outcome.diagnosis.position == position

    @pytest.mark.parametrize("code", [b"20", b"2000", b"2x0"])
    def test_status_code_must_be_three_digits(self, code: bytes):
        """Test that status-code is 3DIGIT."""
        outcome = reject(b"HTTP/1.1 " + code + b" OK\r\n\r\n")

        assert outcome.diagnosis.reference == "RFC 7230 Section 3.1.2"

    def test_status_class_above_five(self):
        """Test that 'HTTP/1.1 700 X' fails citing RFC 7231 Section 6."""
        outcome = reject(b"HTTP/1.1 700 X\r\n\r\n")

        assert outcome.diagnosis.reference == "RFC 7231 Section 6"

    def test_unregistered_code_is_fine(self):
        """Test that unregistered codes in a valid class are accepted."""
        response = parse_response(b"HTTP/1.1 299 Whatever\r\n\r\n").unwrap()

        assert response.status is None
        assert response.status_text == "299 (Unknown)"


class TestHeaders:
    """Tests for header-field validation."""

    def test_space_before_colon(self):
        """Test that 'X-Test : value' fails on the field-name."""
        outcome = reject(b"HTTP/1.1 200 OK\r\nX-Test : value\r\n\r\n")

        assert outcome.diagnosis.reference == "RFC 7230 Appendix B"
        assert outcome.diagnosis.fragment == " "
        assert outcome.diagnosis.position == 6
        assert outcome.diagnosis.section == "headers"

    def test_missing_colon(self):
        """Test that a header line needs a colon."""
        outcome = reject(b"HTTP/1.1 200 OK\r\nNoColonHere\r\n\r\n")

        assert outcome.diagnosis.reference == "RFC 7230 Section 3.2"

    def test_empty_field_name(self):
        """Test that the field-name cannot be empty."""
        outcome = reject(b"HTTP/1.1 200 OK\r\n: value\r\n\r\n")

        assert outcome.diagnosis.reference == "RFC 7230 Appendix B"

    def test_control_character_in_value(self):
        """Test that control characters fail citing Appendix B.1."""
        outcome = reject(b"HTTP/1.1 200 OK\r\nX-Test: a\x01b\r\n\r\n")

        assert outcome.diagnosis.reference == "RFC 7230 Appendix B.1"
        assert outcome.diagnosis.position == 9

    def test_ows_trimmed(self):
        """Test that leading and trailing OWS is removed."""
        response = parse_response(b"HTTP/1.1 200 OK\r\nX-Test: \t value \t \r\n\r\n").unwrap()

        assert response.headers.get("X-Test") == "value"

    def test_internal_whitespace_kept(self):
        """Test that whitespace runs inside a value are preserved."""
        response = parse_response(b"HTTP/1.1 200 OK\r\nX-Test: a  \tb c \r\n\r\n").unwrap()

        assert response.headers.get("X-Test") == "a  \tb c"

    def test_empty_value(self):
        """Test an empty field-value."""
        response = parse_response(b"HTTP/1.1 200 OK\r\nX-Empty:\r\n\r\n").unwrap()

        assert response.headers.get("X-Empty") == ""

    def test_obs_text_value(self):
        """Test that obs-text is accepted in values."""
        response = parse_response(b"HTTP/1.1 200 OK\r\nX-Name: caf\xe9\r\n\r\n").unwrap()

        assert response.headers.get("X-Name") == "caf\xe9"

    def test_order_and_duplicates_kept(self):
        """Test that fields keep arrival order and duplicates."""
        response = parse_response(
            b"HTTP/1.1 200 OK\r\n"
            b"Set-Cookie: a=1\r\n"
            b"X-Other: x\r\n"
            b"Set-Cookie: b=2\r\n"
            b"\r\n"
        ).unwrap()

        assert response.headers.names() == ["Set-Cookie", "X-Other", "Set-Cookie"]
        assert response.headers.get_all("set-cookie") == ["a=1", "b=2"]

    def test_end_of_stream_ends_headers(self):
        """Test that headers may end with the stream."""
        response = parse_response(b"HTTP/1.1 200 OK\r\nX-Test: 1\r\n").unwrap()

        assert response.headers.get("X-Test") == "1"


class TestBodyLegality:
    """Tests for the body-framing rules."""

    def test_content_length_on_1xx(self):
        """Test that 1xx responses cannot carry length headers."""
        outcome = reject(b"HTTP/1.1 101 Switching Protocols\r\nContent-Length: 0\r\n\r\n")

        assert outcome.diagnosis.reference == "RFC 7230 Section 3.3.2"
        assert outcome.diagnosis.section == "body"

    def test_content_length_on_204(self):
        """Test that 204 with Content-Length fails regardless of value."""
        outcome = reject(b"HTTP/1.1 204 No Content\r\nContent-Length: 0\r\n\r\n")

        assert outcome.diagnosis.reference == "RFC 7230 Section 3.3.2/3.3.3.1"

    def test_transfer_encoding_on_204(self):
        """Test that 204 with Transfer-Encoding fails."""
        outcome = reject(b"HTTP/1.1 204 No Content\r\nTransfer-Encoding: chunked\r\n\r\n")

        assert outcome.diagnosis.reference == "RFC 7230 Section 3.3.2/3.3.3.1"

    def test_content_length_on_304(self):
        """Test that 304 with Content-Length fails."""
        outcome = reject(b"HTTP/1.1 304 Not Modified\r\nContent-Length: 10\r\n\r\n")

        assert outcome.diagnosis.reference == "RFC 7230 Section 3.3.3.1"

    def test_options_requires_length(self):
        """Test that OPTIONS responses must be framed."""
        outcome = reject(b"HTTP/1.1 200 OK\r\nAllow: GET\r\n\r\n", method="OPTIONS")

        assert outcome.diagnosis.reference == "RFC 7231 Section 4.3.7"

    def test_options_with_length_passes(self):
        """Test that a framed OPTIONS response passes."""
        assert parse_response(b"HTTP/1.1 200 OK\r\nContent-Length: 0\r\n\r\n", "OPTIONS").ok

    @pytest.mark.parametrize("status", [b"200 OK", b"201 Created", b"299 X"])
    def test_connect_2xx_with_length(self, status: bytes):
        """Test that every 2xx answer to CONNECT rejects length headers."""
        outcome = reject(
            b"HTTP/1.1 " + status + b"\r\nContent-Length: 0\r\n\r\n",
            method="CONNECT",
        )

        assert outcome.diagnosis.reference == "RFC 7231 Section 4.3.6"

    def test_connect_error_with_length(self):
        """Test that a non-2xx answer to CONNECT may carry a body."""
        response = parse_response(
            b"HTTP/1.1 407 Proxy Authentication Required\r\nContent-Length: 2\r\n\r\nno",
            method="CONNECT",
        ).unwrap()

        assert response.body == b"no"

    @pytest.mark.parametrize("value", [b"abc", b"-1", b"1 2", b"+5", b""])
    def test_content_length_must_be_digits(self, value: bytes):
        """Test that Content-Length is 1*DIGIT."""
        outcome = reject(b"HTTP/1.1 200 OK\r\nContent-Length: " + value + b"\r\n\r\n")

        assert outcome.diagnosis.reference == "RFC 7230 Section 3.3.2"

    def test_conflicting_content_lengths(self):
        """Test that differing Content-Length values fail."""
        outcome = reject(
            b"HTTP/1.1 200 OK\r\nContent-Length: 5\r\nContent-Length: 6\r\n\r\nhello!"
        )

        assert outcome.diagnosis.reference == "RFC 7230 Section 3.3.2"

    def test_repeated_equal_content_lengths(self):
        """Test that identical repeated values are accepted."""
        response = parse_response(
            b"HTTP/1.1 200 OK\r\nContent-Length: 5\r\nContent-Length: 5\r\n\r\nhello"
        ).unwrap()

        assert response.body == b"hello"

    def test_both_framing_headers(self):
        """Test that Content-Length plus Transfer-Encoding fails."""
        outcome = reject(
            b"HTTP/1.1 200 OK\r\nContent-Length: 5\r\nTransfer-Encoding: chunked\r\n\r\n"
        )

        assert outcome.diagnosis.reference == "RFC 7230 Section 3.3.3"


class TestBodyRead:
    """Tests for session-level failures while reading a body."""

    def test_truncated_body(self):
        """Test that a short body is ConnectionLost, not a grammar error."""
        with pytest.raises(ConnectionLost) as exc_info:
            parse_response(b"HTTP/1.1 200 OK\r\nContent-Length: 10\r\n\r\nshort")

        assert exc_info.value.section == "body"
        assert "(Section: body)" in str(exc_info.value)

    @pytest.mark.parametrize("data, section", [
        (b"HTTP/1.1 2", "status-line"),
        (b"HTTP/1.1 200 OK\r\nContent-Le", "headers"),
        (b"HTTP/1.1 200 OK\r\nX-Foo: ba", "headers"),
        (b"HTTP/1.1 200 OK\r\nTransfer-Encoding: chunked\r\n\r\n5\r", "body"),
    ])
    def test_stream_ends_inside_a_line(self, data: bytes, section: str):
        """Test that a cut mid-line is ConnectionLost, never a verdict or a parse."""
        with pytest.raises(ConnectionLost) as exc_info:
            parse_response(data, chunk_size=3)

        assert exc_info.value.section == section

    def test_bare_lf_chunked_response(self):
        """Test a complete chunked response framed with bare LF."""
        response = parse_response(
            b"HTTP/1.1 200 OK\nTransfer-Encoding: chunked\n\n5\nhello\r\n0\n\n"
        ).unwrap()

        assert response.body == b"hello"

    def test_content_length_over_32_bits(self):
        """Test that lengths beyond 2**32-1 are refused."""
        with pytest.raises(ResourceExhausted):
            parse_response(b"HTTP/1.1 200 OK\r\nContent-Length: 4294967296\r\n\r\n")

    def test_content_length_over_limit(self):
        """Test the configured body limit."""
        with pytest.raises(ResourceExhausted):
            parse_response(
                b"HTTP/1.1 200 OK\r\nContent-Length: 100\r\n\r\n",
                max_body_size=10,
            )

    @pytest.mark.parametrize("coding", [b"gzip", b"gzip, chunked", b"identity"])
    def test_unsupported_transfer_coding(self, coding: bytes):
        """Test that anything but a lone 'chunked' is unsupported."""
        with pytest.raises(UnsupportedFeature):
            parse_response(b"HTTP/1.1 200 OK\r\nTransfer-Encoding: " + coding + b"\r\n\r\n")

    def test_chunked_is_case_insensitive(self):
        """Test 'Chunked' as the transfer coding."""
        response = parse_response(
            b"HTTP/1.1 200 OK\r\nTransfer-Encoding: Chunked\r\n\r\n0\r\n\r\n"
        ).unwrap()

        assert response.body == b""

    def test_memory_error_maps_to_resource_exhausted(self, monkeypatch):
        """Test that allocation failure is a session-level error."""
        def fail(self, n):
            raise MemoryError()

        monkeypatch.setattr(BufferedStream, "read_exact", fail)

        with pytest.raises(ResourceExhausted) as exc_info:
            parse_response(b"HTTP/1.1 200 OK\r\nContent-Length: 5\r\n\r\nhello")

        assert exc_info.value.section == "body"
        assert "Out of memory!" in str(exc_info.value)

    def test_chunked_grammar_error_is_tagged_with_section(self):
        """Test that decoder diagnoses carry the body section."""
        outcome = reject(b"HTTP/1.1 200 OK\r\nTransfer-Encoding: chunked\r\n\r\nzz\r\n")

        assert outcome.diagnosis.reference == "RFC 7230 Section 4.1"
        assert outcome.diagnosis.section == "body"
