"""
Factories - Construction helpers for messages, streams, uploads and URIs.

Thin module-level functions for code that prefers building through a single
entry point, plus ``server_request_from_scope`` which turns an ASGI HTTP
scope into a ServerRequest.
"""

from __future__ import annotations

import logging
from http.cookies import CookieError, SimpleCookie
from typing import Any, Dict, List, Mapping, Optional, Tuple
from urllib.parse import parse_qsl

from .faults import InvalidStream, StreamReadError
from .request import Request, UriLike
from .response import Response
from .server_request import ServerRequest
from .stream import Stream, StreamSource
from .uploads import PathLike, UploadedFile, UploadErrorCode
from .uri import Uri

logger = logging.getLogger("plume.factories")


# ============================================================================
# Messages
# ============================================================================

def create_request(method: str, uri: UriLike) -> Request:
    return Request(method, uri)


def create_response(code: int = 200, reason_phrase: Optional[str] = None) -> Response:
    return Response(code, reason_phrase=reason_phrase)


def create_server_request(
    method: str,
    uri: UriLike,
    server_params: Optional[Mapping[str, Any]] = None,
) -> ServerRequest:
    return ServerRequest(method, uri, server_params=server_params)


# ============================================================================
# Streams
# ============================================================================

def create_stream(content: str = "") -> Stream:
    """In-memory stream holding ``content``, positioned at the start."""
    return Stream.create(content)


def create_stream_from_file(filename: PathLike, mode: str = "rb") -> Stream:
    """
    Open ``filename`` with ``mode`` and wrap it.

    Raises:
        StreamReadError: The name is empty or the file cannot be opened
    """
    if not filename:
        raise StreamReadError("The filename cannot be empty")

    try:
        resource = open(filename, mode)
    except (OSError, ValueError) as e:
        raise StreamReadError(
            f'Unable to create stream from file "{filename}"',
            filename=str(filename),
            mode=mode,
        ) from e

    return Stream(resource)


def create_stream_from_resource(resource: Any) -> Stream:
    return Stream(resource)


# ============================================================================
# Uploads & URIs
# ============================================================================

def create_uploaded_file(
    stream: Stream,
    size: Optional[int] = None,
    error: int = UploadErrorCode.OK,
    client_filename: Optional[str] = None,
    client_media_type: Optional[str] = None,
) -> UploadedFile:
    """
    Wrap a readable stream as an UploadedFile.

    ``size`` defaults to the stream's size when known.
    """
    if not isinstance(stream, Stream) or not stream.readable():
        raise InvalidStream("File is not readable", value_type=type(stream).__name__)

    if size is None:
        size = stream.get_size()

    return UploadedFile(stream, size, error, client_filename, client_media_type)


def create_uri(uri: str = "") -> Uri:
    return Uri(uri)


# ============================================================================
# ASGI
# ============================================================================

def _split_host(value: str) -> Tuple[str, Optional[int]]:
    """Split a Host header into host and port; IPv6 brackets are dropped."""
    if value.startswith("["):
        host, _, rest = value[1:].partition("]")
        port = rest[1:] if rest.startswith(":") else ""
    elif value.count(":") == 1:
        host, port = value.split(":", 1)
    else:
        host, port = value, ""

    return host, int(port) if port.isdigit() else None


def _decode_headers(raw: List[Tuple[bytes, bytes]]) -> List[Tuple[str, str]]:
    return [(name.decode("latin-1"), value.decode("latin-1")) for name, value in raw]


def _parse_cookies(header: str) -> Dict[str, str]:
    if not header:
        return {}

    cookie = SimpleCookie()
    try:
        cookie.load(header)
    except CookieError as e:
        logger.debug(f"Ignoring malformed cookie header: {e}")
        return {}
    return {key: morsel.value for key, morsel in cookie.items()}


def server_request_from_scope(scope: Mapping[str, Any], body: StreamSource = None) -> ServerRequest:
    """
    Build a ServerRequest from an ASGI HTTP scope.

    The Host header names the target host when present, otherwise the
    scope's ``server`` address is used. Query parameters keep blank values
    and the last occurrence of a repeated name wins.

    Example:
        ```python
        request = server_request_from_scope({
            "type": "http",
            "method": "GET",
            "scheme": "https",
            "path": "/users",
            "query_string": b"page=2",
            "headers": [(b"host", b"example.com")],
            "http_version": "1.1",
        })
        str(request.uri)          # "https://example.com/users?page=2"
        request.query_params      # {"page": "2"}
        ```
    """
    headers = _decode_headers(scope.get("headers", []))
    header_map = {name.lower(): value for name, value in headers}

    host_header = header_map.get("host", "")
    if host_header:
        host, port = _split_host(host_header)
    elif scope.get("server"):
        host, port = scope["server"][0], scope["server"][1]
    else:
        host, port = "", None

    query_string = scope.get("query_string", b"")
    if isinstance(query_string, bytes):
        query_string = query_string.decode("latin-1")

    uri = Uri().with_scheme(scope.get("scheme", "http"))
    if host:
        uri = uri.with_host(host).with_port(port)
    uri = uri.with_path(scope.get("path", "/")).with_query(query_string)

    http_version = scope.get("http_version", "1.1")
    if http_version == "2":
        http_version = "2.0"

    request = ServerRequest(
        scope.get("method", "GET"),
        uri,
        headers=headers,
        body=body,
        server_params=dict(scope),
        protocol_version=http_version,
    )

    return (
        request
        .with_query_params(dict(parse_qsl(query_string, keep_blank_values=True)))
        .with_cookie_params(_parse_cookies(header_map.get("cookie", "")))
    )
