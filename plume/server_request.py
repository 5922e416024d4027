"""
ServerRequest - Immutable server-side view of an incoming request.

Extends Request with the server environment snapshot, query and cookie
parameters, the parsed body, uploaded files and a free-form attribute bag
(route parameters, identities and similar values set by middleware).
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from .faults import InvalidParams, InvalidParsedBody, InvalidUploadedFiles
from .message import HeadersInit
from .request import Request, UriLike
from .stream import StreamSource
from .uploads import UploadedFile

_SCALAR_TYPES = (str, bytes, bytearray, int, float, complex, bool)


def _copy_uploaded_files(tree: Any, path: str = "") -> Any:
    """Validate an uploaded-files tree and rebuild its containers; leaves are shared."""
    if isinstance(tree, UploadedFile):
        return tree
    if isinstance(tree, Mapping):
        return {key: _copy_uploaded_files(value, f"{path}[{key}]") for key, value in tree.items()}
    if isinstance(tree, (list, tuple)):
        return [_copy_uploaded_files(value, f"{path}[{index}]") for index, value in enumerate(tree)]
    raise InvalidUploadedFiles(path=path or "<root>", value_type=type(tree).__name__)


class ServerRequest(Request):
    """
    Incoming HTTP request as seen by a server.

    Parameter mappings are copied on the way in and on the way out, so
    callers cannot alter a request through a dict they passed or received.
    """

    def __init__(
        self,
        method: str,
        uri: UriLike,
        headers: HeadersInit = None,
        body: StreamSource = None,
        server_params: Optional[Mapping[str, Any]] = None,
        protocol_version: Optional[str] = None,
    ):
        super().__init__(method, uri, headers, body, protocol_version)

        self._server_params = MappingProxyType(dict(server_params or {}))
        self._query_params: Dict[str, Any] = {}
        self._cookie_params: Dict[str, Any] = {}
        self._uploaded_files: Dict[str, Any] = {}
        self._parsed_body: Any = None
        self._attributes: Dict[str, Any] = {}

    def _clone(self) -> "ServerRequest":
        clone = super()._clone()
        clone._attributes = dict(self._attributes)
        return clone

    # ========================================================================
    # Server params
    # ========================================================================

    @property
    def server_params(self) -> Mapping[str, Any]:
        """Read-only snapshot of the server environment."""
        return self._server_params

    # ========================================================================
    # Query & Cookies
    # ========================================================================

    @property
    def query_params(self) -> Dict[str, Any]:
        return dict(self._query_params)

    def with_query_params(self, query: Mapping[str, Any]) -> "ServerRequest":
        if not isinstance(query, Mapping):
            raise InvalidParams("Query parameters must be a mapping", value_type=type(query).__name__)

        clone = self._clone()
        clone._query_params = dict(query)
        return clone

    @property
    def cookie_params(self) -> Dict[str, Any]:
        return dict(self._cookie_params)

    def with_cookie_params(self, cookies: Mapping[str, Any]) -> "ServerRequest":
        if not isinstance(cookies, Mapping):
            raise InvalidParams("Cookie parameters must be a mapping", value_type=type(cookies).__name__)

        clone = self._clone()
        clone._cookie_params = dict(cookies)
        return clone

    # ========================================================================
    # Uploaded files
    # ========================================================================

    @property
    def uploaded_files(self) -> Dict[str, Any]:
        """Tree of UploadedFile leaves keyed like the submitted form fields."""
        return _copy_uploaded_files(self._uploaded_files)

    def with_uploaded_files(self, uploaded_files: Mapping[str, Any]) -> "ServerRequest":
        if not isinstance(uploaded_files, Mapping):
            raise InvalidUploadedFiles(value_type=type(uploaded_files).__name__)
        files = _copy_uploaded_files(uploaded_files)

        clone = self._clone()
        clone._uploaded_files = files
        return clone

    # ========================================================================
    # Parsed body
    # ========================================================================

    @property
    def parsed_body(self) -> Any:
        return self._parsed_body

    def with_parsed_body(self, data: Any) -> "ServerRequest":
        """
        Return a request carrying ``data`` as the deserialized body.

        ``data`` must be None, a mapping, a list or an object; scalars such
        as str, bytes or numbers are rejected.
        """
        if isinstance(data, _SCALAR_TYPES):
            raise InvalidParsedBody(value_type=type(data).__name__)

        clone = self._clone()
        clone._parsed_body = data
        return clone

    # ========================================================================
    # Attributes
    # ========================================================================

    @property
    def attributes(self) -> Dict[str, Any]:
        return dict(self._attributes)

    def get_attribute(self, name: str, default: Any = None) -> Any:
        return self._attributes.get(name, default)

    def with_attribute(self, name: str, value: Any) -> "ServerRequest":
        clone = self._clone()
        clone._attributes[name] = value
        return clone

    def without_attribute(self, name: str) -> "ServerRequest":
        if name not in self._attributes:
            return self

        clone = self._clone()
        del clone._attributes[name]
        return clone
