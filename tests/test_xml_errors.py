"""
Tests for error document parsing
"""

from obs_sdk.xml_errors import ErrorResponse, parse_error_response, PARSE_CHUNK_SIZE

from conftest import FORBIDDEN_XML


class TestParseErrorResponse:
    """Test parse_error_response"""

    def test_full_document(self):
        """Test all four fields are extracted"""
        error = parse_error_response(FORBIDDEN_XML)
        assert error == ErrorResponse(
            code="AccessDenied",
            message="Access Denied",
            request_id="0000018A2B3C4D5E",
            host_id="host-id-value",
        )

    def test_missing_optional_fields(self):
        """Test absent fields default to empty strings"""
        error = parse_error_response(b"<Error><Code>NoSuchBucket</Code></Error>")
        assert error.code == "NoSuchBucket"
        assert error.message == ""
        assert error.request_id == ""
        assert error.host_id == ""

    def test_unknown_elements_ignored(self):
        """Test extra elements do not disturb extraction"""
        body = (
            b"<Error><BucketName>b</BucketName><Code>InvalidArgument</Code>"
            b"<ArgumentName>x-obs-acl</ArgumentName><Message>Bad ACL</Message></Error>"
        )
        error = parse_error_response(body)
        assert error.code == "InvalidArgument"
        assert error.message == "Bad ACL"

    def test_whitespace_trimmed(self):
        """Test surrounding whitespace in values is removed"""
        body = b"<Error>\n  <Code>\n    SignatureDoesNotMatch\n  </Code>\n  <Message> mismatch </Message>\n</Error>"
        error = parse_error_response(body)
        assert error.code == "SignatureDoesNotMatch"
        assert error.message == "mismatch"

    def test_namespaced_document(self):
        """Test namespaced element names are matched by local name"""
        body = b'<Error xmlns="http://obs.example.com/doc/2015-06-30/"><Code>AccessDenied</Code></Error>'
        assert parse_error_response(body).code == "AccessDenied"

    def test_large_document_across_chunks(self):
        """Test values split across parser chunks are reassembled"""
        padding = b"<Padding>" + b"x" * (PARSE_CHUNK_SIZE * 2) + b"</Padding>"
        message = "m" * PARSE_CHUNK_SIZE
        body = (
            b"<Error>" + padding + b"<Code>InternalError</Code><Message>"
            + message.encode() + b"</Message></Error>"
        )
        error = parse_error_response(body)
        assert error.code == "InternalError"
        assert error.message == message

    def test_empty_body(self):
        """Test empty or missing bodies yield None"""
        assert parse_error_response(b"") is None
        assert parse_error_response(None) is None

    def test_malformed_xml(self):
        """Test malformed XML yields None"""
        assert parse_error_response(b"<Error><Code>AccessDenied</Error>") is None
        assert parse_error_response(b"<html>Service Unavailable") is None

    def test_not_xml(self):
        """Test plain text bodies yield None"""
        assert parse_error_response(b"Service Unavailable") is None

    def test_missing_code(self):
        """Test documents without a code yield None"""
        assert parse_error_response(b"<Error><Message>oops</Message></Error>") is None
        assert parse_error_response(b"<Error><Code>  </Code></Error>") is None

    def test_str(self):
        """Test string rendering includes code and request id"""
        text = str(parse_error_response(FORBIDDEN_XML))
        assert "AccessDenied" in text
        assert "0000018A2B3C4D5E" in text
