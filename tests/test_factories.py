"""
Test 11: Factories (factories.py)

Tests the construction helpers and the ASGI scope adapter.
"""

import io
import pytest

from plume.factories import (
    create_request,
    create_response,
    create_server_request,
    create_stream,
    create_stream_from_file,
    create_stream_from_resource,
    create_uploaded_file,
    create_uri,
    server_request_from_scope,
)
from plume.faults import InvalidProtocolVersion, InvalidStream, StreamReadError, UnsupportedScheme
from plume.request import Request
from plume.response import Response
from plume.server_request import ServerRequest
from plume.stream import Stream
from plume.uploads import UploadedFile, UploadErrorCode
from plume.uri import Uri

from tests.conftest import WriteOnlyResource, make_scope


# ============================================================================
# Message factories
# ============================================================================

class TestMessageFactories:

    def test_create_request(self):
        request = create_request("GET", "http://example.com/")
        assert type(request) is Request
        assert request.get_header("host") == ["example.com"]

    def test_create_response(self):
        response = create_response(404)
        assert type(response) is Response
        assert response.reason_phrase == "Not Found"
        assert create_response().status_code == 200
        assert create_response(200, "Fine").reason_phrase == "Fine"

    def test_create_server_request(self):
        request = create_server_request("POST", Uri("/submit"), {"REMOTE_ADDR": "::1"})
        assert type(request) is ServerRequest
        assert request.server_params == {"REMOTE_ADDR": "::1"}


# ============================================================================
# Stream factories
# ============================================================================

class TestStreamFactories:

    def test_create_stream(self):
        stream = create_stream("body")
        assert stream.tell() == 0
        assert stream.get_contents() == b"body"

    def test_create_empty_stream(self):
        assert create_stream().get_size() == 0

    def test_from_file(self, text_file):
        with create_stream_from_file(text_file) as stream:
            assert stream.get_contents() == b"Plume body"
            assert not stream.writable()

    def test_from_file_with_mode(self, tmp_path):
        with create_stream_from_file(tmp_path / "new.txt", "w+b") as stream:
            stream.write(b"written")
            assert str(stream) == "written"

    def test_from_file_empty_name(self):
        with pytest.raises(StreamReadError, match="cannot be empty"):
            create_stream_from_file("")

    def test_from_missing_file(self, tmp_path):
        with pytest.raises(StreamReadError) as exc_info:
            create_stream_from_file(tmp_path / "missing.txt")
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_from_file_bad_mode(self, text_file):
        with pytest.raises(StreamReadError):
            create_stream_from_file(text_file, "nonsense")

    def test_from_resource(self):
        resource = io.BytesIO(b"abc")
        stream = create_stream_from_resource(resource)
        assert stream.detach() is resource

    def test_from_invalid_resource(self):
        with pytest.raises(InvalidStream):
            create_stream_from_resource("not a resource")


# ============================================================================
# Upload & Uri factories
# ============================================================================

class TestUploadAndUriFactories:

    def test_create_uploaded_file_defaults_size(self):
        upload = create_uploaded_file(create_stream("12345"), client_filename="n.txt")
        assert isinstance(upload, UploadedFile)
        assert upload.size == 5
        assert upload.error is UploadErrorCode.OK
        assert upload.client_filename == "n.txt"

    def test_create_uploaded_file_explicit_size(self):
        assert create_uploaded_file(create_stream("12345"), size=3).size == 3

    def test_create_uploaded_file_with_error(self):
        upload = create_uploaded_file(create_stream(), error=UploadErrorCode.PARTIAL)
        assert upload.error is UploadErrorCode.PARTIAL

    def test_unreadable_stream_rejected(self):
        with pytest.raises(InvalidStream):
            create_uploaded_file(Stream(WriteOnlyResource()))

    def test_non_stream_rejected(self):
        with pytest.raises(InvalidStream):
            create_uploaded_file(b"raw")

    def test_create_uri(self):
        assert str(create_uri("HTTP://Example.com")) == "http://example.com"
        assert str(create_uri()) == ""


# ============================================================================
# ASGI scope
# ============================================================================

class TestServerRequestFromScope:

    def test_basic_scope(self):
        scope = make_scope(
            method="POST",
            path="/users",
            query_string="page=2&sort=",
            headers=[("Host", "example.com"), ("Content-Type", "application/json")],
        )
        request = server_request_from_scope(scope, body=b'{"a": 1}')
        assert request.method == "POST"
        assert str(request.uri) == "http://example.com/users?page=2&sort="
        assert request.request_target == "/users?page=2&sort="
        assert request.query_params == {"page": "2", "sort": ""}
        assert request.get_header_line("content-type") == "application/json"
        assert list(request.headers)[0] == "Host"
        assert str(request.body) == '{"a": 1}'
        assert request.protocol_version == "1.1"

    def test_server_address_used_without_host_header(self):
        request = server_request_from_scope(make_scope(path="/x"))
        assert str(request.uri) == "http://127.0.0.1:8000/x"
        assert request.get_header("host") == ["127.0.0.1:8000"]

    def test_host_header_with_port(self):
        scope = make_scope(scheme="https", headers=[("host", "example.com:8443")])
        request = server_request_from_scope(scope)
        assert request.uri.port == 8443
        assert request.uri.scheme == "https"

    def test_default_port_dropped(self):
        scope = make_scope(scheme="https", headers=[("host", "example.com:443")])
        assert server_request_from_scope(scope).uri.port is None

    def test_ipv6_host_header(self):
        scope = make_scope(headers=[("host", "[::1]:9000")])
        request = server_request_from_scope(scope)
        assert request.uri.host == "[::1]"
        assert request.uri.port == 9000

    def test_no_host_at_all(self):
        request = server_request_from_scope(make_scope(path="/p", server=None))
        assert request.uri.host == ""
        assert not request.has_header("host")

    def test_repeated_query_last_wins(self):
        request = server_request_from_scope(make_scope(query_string="a=1&a=2"))
        assert request.query_params == {"a": "2"}

    def test_cookies(self):
        scope = make_scope(headers=[("cookie", "session=abc; theme=dark")])
        request = server_request_from_scope(scope)
        assert request.cookie_params == {"session": "abc", "theme": "dark"}

    def test_malformed_cookie_ignored(self):
        scope = make_scope(headers=[("cookie", 'bad"cookie=\\x')])
        request = server_request_from_scope(scope)
        assert isinstance(request.cookie_params, dict)

    def test_http2_version(self):
        request = server_request_from_scope(make_scope(http_version="2"))
        assert request.protocol_version == "2.0"

    def test_unsupported_version(self):
        with pytest.raises(InvalidProtocolVersion):
            server_request_from_scope(make_scope(http_version="3"))

    def test_unsupported_scheme(self):
        with pytest.raises(UnsupportedScheme):
            server_request_from_scope(make_scope(scheme="ws"))

    def test_scope_is_server_params(self):
        scope = make_scope()
        request = server_request_from_scope(scope)
        assert request.server_params["client"] == ("127.0.0.1", 12345)
        assert request.server_params["type"] == "http"

    def test_latin1_header_values(self):
        scope = make_scope(headers=[(b"x-name", "caf\xe9".encode("latin-1"))])
        assert server_request_from_scope(scope).get_header_line("x-name") == "caf\xe9"
