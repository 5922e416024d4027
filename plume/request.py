"""
Request - Immutable client-side HTTP request.

Adds the method, the target Uri and the request-target to Message, and
keeps the Host header in step with the Uri: whenever a Uri with a host is
installed (and the caller did not ask to preserve an existing Host), the
Host header is rewritten as ``host[:port]`` and moved to the front of the
header collection (RFC 7230 section 5.4).
"""

from __future__ import annotations

import logging
import re
from typing import Optional, Union

from .faults import InvalidMethod, InvalidRequestTarget
from .message import HeadersInit, Message
from .stream import StreamSource
from .uri import Uri

logger = logging.getLogger("plume.request")

_METHOD_RE = re.compile(r"[!#$%&'*+.^_`|~0-9a-z-]+", re.IGNORECASE)
_WHITESPACE_RE = re.compile(r"\s")

UriLike = Union[Uri, str]


class Request(Message):
    """
    Outgoing HTTP request.

    Example:
        ```python
        request = Request("GET", "http://example.com/users?page=2")
        request.headers            # {"Host": ["example.com"]}
        request.request_target     # "/users?page=2"
        ```
    """

    def __init__(
        self,
        method: str,
        uri: UriLike,
        headers: HeadersInit = None,
        body: StreamSource = None,
        protocol_version: Optional[str] = None,
    ):
        self._method = self._filter_method(method)
        self._uri = uri if isinstance(uri, Uri) else Uri(uri)
        self._request_target: Optional[str] = None

        super().__init__(headers, body, protocol_version)

        self._update_host_from_uri()

    # ========================================================================
    # Method
    # ========================================================================

    @property
    def method(self) -> str:
        return self._method

    def with_method(self, method: str) -> "Request":
        method = self._filter_method(method)
        if method == self._method:
            return self

        clone = self._clone()
        clone._method = method
        return clone

    @staticmethod
    def _filter_method(method: object) -> str:
        if not isinstance(method, str):
            raise InvalidMethod("HTTP method must be a string", value_type=type(method).__name__)
        if not _METHOD_RE.fullmatch(method):
            raise InvalidMethod(f'Unsupported HTTP method "{method}" provided', method=method)
        return method

    # ========================================================================
    # Request target
    # ========================================================================

    @property
    def request_target(self) -> str:
        """
        The explicit request-target if one was set, else ``path[?query]``.

        An empty path is reported as ``/``.
        """
        if self._request_target is not None:
            return self._request_target

        target = self._uri.path or "/"
        if self._uri.query != "":
            target += f"?{self._uri.query}"
        return target

    def with_request_target(self, request_target: str) -> "Request":
        if not isinstance(request_target, str) or _WHITESPACE_RE.search(request_target):
            raise InvalidRequestTarget(request_target=request_target)

        if request_target == self._request_target:
            return self

        clone = self._clone()
        clone._request_target = request_target
        return clone

    # ========================================================================
    # Uri
    # ========================================================================

    @property
    def uri(self) -> Uri:
        return self._uri

    def with_uri(self, uri: UriLike, preserve_host: bool = False) -> "Request":
        """
        Return a request targeting ``uri``.

        The Host header is recomputed from the new Uri unless
        ``preserve_host`` is set and the request already has one.
        """
        if uri is self._uri:
            return self

        clone = self._clone()
        clone._uri = uri if isinstance(uri, Uri) else Uri(uri)

        if not preserve_host or not self._headers.has("host"):
            clone._update_host_from_uri()

        return clone

    def _update_host_from_uri(self) -> None:
        host = self._uri.host
        if host == "":
            return

        if self._uri.port is not None:
            host += f":{self._uri.port}"

        self._headers.put_first("Host", [host])
        logger.debug(f"Host header synchronized from uri: {host}")
