"""
Unit tests for response writers and responses.
"""

from datetime import datetime, timedelta, timezone

import pytest

from httphandlers.errors import HeadersSentError
from httphandlers.http import (
    HTTPRequest,
    HTTPResponse,
    HTTPStatus,
    ResponseRecorder,
    canonical_header_key,
    format_http_date,
    reason_phrase,
    serve,
)


class TestResponseRecorder:
    """Tests for the in-memory ResponseWriter."""

    def test_write_commits_200(self):
        """The first write commits status 200."""
        recorder = ResponseRecorder()
        assert not recorder.headers_sent

        written = recorder.write(b"hello")

        assert written == 5
        assert recorder.headers_sent
        assert recorder.status == HTTPStatus.OK
        assert recorder.body == b"hello"

    def test_str_is_utf8(self):
        recorder = ResponseRecorder()
        assert recorder.write("zażółć") == 10
        assert recorder.body == "zażółć".encode("utf-8")

    def test_headers_frozen_after_write_header(self):
        """Headers cannot change once committed."""
        recorder = ResponseRecorder()
        recorder.set_header("Content-Type", "text/plain")
        recorder.write_header(HTTPStatus.NO_CONTENT)

        with pytest.raises(HeadersSentError) as exc_info:
            recorder.set_header("X-Late", "1")
        assert exc_info.value.header == "X-Late"

        with pytest.raises(HeadersSentError):
            recorder.del_header("Content-Type")

        assert dict(recorder.headers) == {"Content-Type": "text/plain"}

    def test_headers_view_is_read_only(self):
        recorder = ResponseRecorder()
        with pytest.raises(TypeError):
            recorder.headers["X-Sneaky"] = "1"

    def test_superfluous_write_header_is_ignored(self, caplog):
        recorder = ResponseRecorder()
        recorder.write_header(HTTPStatus.NOT_FOUND)
        recorder.write_header(HTTPStatus.OK)

        assert recorder.status == HTTPStatus.NOT_FOUND
        assert "Superfluous write_header(200)" in caplog.text

    def test_invalid_status_rejected(self):
        with pytest.raises(ValueError):
            ResponseRecorder().write_header(42)

    def test_non_standard_status(self):
        """Codes outside the enum are kept as plain ints."""
        recorder = ResponseRecorder()
        recorder.write_header(299)
        response = recorder.result()

        assert response.status == 299
        assert response.status_line == "HTTP/1.1 299 Unknown"

    def test_untouched_recorder_is_200(self):
        response = ResponseRecorder().result()
        assert response.status == HTTPStatus.OK
        assert response.body == b""

    def test_header_names_are_canonical(self):
        recorder = ResponseRecorder()
        recorder.set_header("x-request-id", "abc")
        assert dict(recorder.headers) == {"X-Request-Id": "abc"}
        assert recorder.get_header("X-REQUEST-ID") == "abc"


def test_canonical_header_key():
    assert canonical_header_key("content-type") == "Content-Type"
    assert canonical_header_key("ALLOW") == "Allow"
    assert canonical_header_key("www-authenticate") == "Www-Authenticate"


def test_serve_returns_http_response():
    def handler(writer, request):
        writer.set_header("Allow", "GET")
        writer.write_header(HTTPStatus.METHOD_NOT_ALLOWED)
        writer.write(b"nope")

    response = serve(handler, HTTPRequest("POST", "/x"))

    assert isinstance(response, HTTPResponse)
    assert response.status == HTTPStatus.METHOD_NOT_ALLOWED
    assert response.headers == {"Allow": "GET"}
    assert response.body == b"nope"


class TestHTTPResponse:
    """Tests for HTTPResponse serialization."""

    def test_status_line(self):
        assert HTTPResponse(status=HTTPStatus.OK).status_line == "HTTP/1.1 200 OK"
        assert (HTTPResponse(status=HTTPStatus.METHOD_NOT_ALLOWED).status_line
                == "HTTP/1.1 405 Method Not Allowed")

    def test_to_bytes_includes_headers(self):
        response = HTTPResponse(
            status=HTTPStatus.OK,
            headers={"Allow": "GET, POST"},
            body=b"test",
        )

        result = response.to_bytes()

        assert result.startswith(b"HTTP/1.1 200 OK\r\n")
        assert b"Allow: GET, POST\r\n" in result
        assert b"Content-Length: 4\r\n" in result
        assert b"Server: httphandlers/1.0\r\n" in result
        assert result.endswith(b"\r\n\r\ntest")

    def test_existing_headers_not_duplicated(self):
        response = HTTPResponse(headers={"content-length": "0", "Date": "x"})
        result = response.to_bytes()
        assert result.count(b"ength:") == 1
        assert b"Date: x\r\n" in result

    def test_get_header_case_insensitive(self):
        response = HTTPResponse(headers={"Allow": "GET"})
        assert response.get_header("allow") == "GET"
        assert response.get_header("missing", "-") == "-"


class TestStatus:
    """Tests for HTTPStatus helpers."""

    def test_phrases(self):
        assert HTTPStatus.METHOD_NOT_ALLOWED.phrase == "Method Not Allowed"
        assert reason_phrase(401) == "Unauthorized"
        assert reason_phrase(599) == "Unknown"

    def test_members_are_ints(self):
        assert HTTPStatus.METHOD_NOT_ALLOWED == 405
        assert HTTPStatus(404) is HTTPStatus.NOT_FOUND
        assert HTTPStatus.NO_CONTENT.phrase == "No Content"


def test_format_http_date_converts_to_gmt():
    ts = datetime(1983, 5, 26, 3, 30, 45, tzinfo=timezone(timedelta(hours=2)))
    assert format_http_date(ts) == "Thu, 26 May 1983 01:30:45 GMT"
