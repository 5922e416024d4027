"""
Uri - Immutable, validated, percent-encoded URI value (RFC 3986).

Components are filtered once when set: the scheme is lower-cased and
restricted to http/https, the host lower-cased (IPv6 literals bracketed),
default ports dropped, and path/query/fragment/user-info percent-encoded
without double-encoding existing escapes.
"""

from __future__ import annotations

import copy
import ipaddress
import re
from types import MappingProxyType
from typing import Optional
from urllib.parse import quote, urlsplit

from .faults import InvalidPort, InvalidUri, InvalidUriComponent, UnsupportedScheme

SCHEMES = MappingProxyType({
    "http": 80,
    "https": 443,
})

_UNRESERVED = r"a-zA-Z0-9_\-.~"
_SUB_DELIMS = r"!$&'()*+,;="

# Runs of characters outside the allowed set, or a '%' that does not start
# a valid escape.
_USER_INFO_RE = re.compile(rf"(?:[^%{_UNRESERVED}{_SUB_DELIMS}]+|%(?![A-Fa-f0-9]{{2}}))")
_PATH_RE = re.compile(rf"(?:[^{_UNRESERVED}{_SUB_DELIMS}%:@/]+|%(?![A-Fa-f0-9]{{2}}))")
_QUERY_RE = re.compile(rf"(?:[^{_UNRESERVED}{_SUB_DELIMS}%:@/?]+|%(?![A-Fa-f0-9]{{2}}))")

_CONTROL_RE = re.compile(r"[\x00-\x20\x7f]")


def _encode_match(match: re.Match) -> str:
    try:
        return quote(match.group(0), safe="")
    except UnicodeEncodeError as e:
        raise InvalidUriComponent(
            "Uri component must be encodable as UTF-8",
            reason=str(e),
        ) from e


def _require_str(value: object, component: str) -> str:
    if not isinstance(value, str):
        raise InvalidUriComponent(
            f"Uri {component} must be a string",
            component=component,
            value_type=type(value).__name__,
        )
    return value


class Uri:
    """
    Parsed URI.

    Example:
        ```python
        uri = Uri("HTTPS://Example.com:443/a b?q=1")
        str(uri)              # "https://example.com/a%20b?q=1"
        uri.with_port(8443)   # new Uri, original untouched
        ```
    """

    __slots__ = ("_scheme", "_user_info", "_host", "_port", "_path", "_query", "_fragment")

    def __init__(self, uri: str = ""):
        if not isinstance(uri, str):
            raise InvalidUri("URI must be a string", value_type=type(uri).__name__)

        self._scheme = ""
        self._user_info = ""
        self._host = ""
        self._port: Optional[int] = None
        self._path = ""
        self._query = ""
        self._fragment = ""

        if uri == "":
            return

        try:
            uri.encode("utf-8")
        except UnicodeEncodeError as e:
            raise InvalidUri(f"Unable to parse URI: {uri!r}", reason=str(e)) from e

        # urlsplit strips or removes controls and surrounding spaces
        uri = _CONTROL_RE.sub(_encode_match, uri)

        try:
            parts = urlsplit(uri)
            port = parts.port
        except ValueError as e:
            raise InvalidUri(f"Unable to parse URI: {uri}", uri=uri, reason=str(e)) from e

        if parts.scheme and uri[len(parts.scheme) + 1:].startswith("//") and not parts.hostname:
            raise InvalidUri(f"Unable to parse URI: {uri}", uri=uri, reason="missing host")

        self._scheme = self._filter_scheme(parts.scheme) if parts.scheme else ""
        self._user_info = self._build_user_info(parts.username, parts.password)
        self._host = self._filter_host(parts.hostname or "")
        self._port = self._filter_port(port)
        self._path = self._filter_path(parts.path)
        self._query = self._filter_query(parts.query)
        self._fragment = self._filter_query(parts.fragment)

    # ========================================================================
    # Accessors
    # ========================================================================

    @property
    def scheme(self) -> str:
        return self._scheme

    @property
    def user_info(self) -> str:
        return self._user_info

    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> Optional[int]:
        """Port, or None when absent or equal to the scheme's default."""
        return self._port

    @property
    def path(self) -> str:
        return self._path

    @property
    def query(self) -> str:
        """Query string without the leading '?'."""
        return self._query

    @property
    def fragment(self) -> str:
        """Fragment without the leading '#'."""
        return self._fragment

    @property
    def authority(self) -> str:
        """``[user-info@]host[:port]``, empty when there is no host."""
        if self._host == "":
            return ""

        authority = self._host
        if self._user_info != "":
            authority = f"{self._user_info}@{authority}"
        if self._port is not None:
            authority += f":{self._port}"
        return authority

    # ========================================================================
    # Transformers
    # ========================================================================

    def _replace(self, **components) -> "Uri":
        clone = copy.copy(self)
        for name, value in components.items():
            setattr(clone, f"_{name}", value)
        return clone

    def with_scheme(self, scheme: str) -> "Uri":
        """
        Return an instance with the given scheme.

        An empty scheme removes it. The port is re-filtered, so a port equal
        to the new scheme's default is dropped.
        """
        scheme = _require_str(scheme, "scheme")
        scheme = self._filter_scheme(scheme) if scheme != "" else ""
        if scheme == self._scheme:
            return self

        clone = self._replace(scheme=scheme)
        clone._port = clone._filter_port(clone._port)
        return clone

    def with_user_info(self, user: str, password: Optional[str] = None) -> "Uri":
        user = _require_str(user, "user")
        if password is not None:
            password = _require_str(password, "password")

        info = self._build_user_info(user, password)
        if info == self._user_info:
            return self
        return self._replace(user_info=info)

    def with_host(self, host: str) -> "Uri":
        host = self._filter_host(_require_str(host, "host"))
        if host == self._host:
            return self
        return self._replace(host=host)

    def with_port(self, port: Optional[int]) -> "Uri":
        port = self._filter_port(port)
        if port == self._port:
            return self
        return self._replace(port=port)

    def with_path(self, path: str) -> "Uri":
        path = self._filter_path(_require_str(path, "path"))
        if path == self._path:
            return self
        return self._replace(path=path)

    def with_query(self, query: str) -> "Uri":
        query = self._filter_query(_require_str(query, "query"))
        if query == self._query:
            return self
        return self._replace(query=query)

    def with_fragment(self, fragment: str) -> "Uri":
        fragment = self._filter_query(_require_str(fragment, "fragment"))
        if fragment == self._fragment:
            return self
        return self._replace(fragment=fragment)

    # ========================================================================
    # Filters
    # ========================================================================

    @staticmethod
    def _filter_scheme(scheme: str) -> str:
        scheme = scheme.lower().rstrip(":/")
        if scheme not in SCHEMES:
            raise UnsupportedScheme(scheme=scheme)
        return scheme

    @staticmethod
    def _filter_host(host: str) -> str:
        try:
            ipaddress.IPv6Address(host)
        except ValueError:
            pass
        else:
            host = f"[{host}]"
        return host.lower()

    def _filter_port(self, port: Optional[int]) -> Optional[int]:
        if port is None:
            return None

        if isinstance(port, bool) or not isinstance(port, int):
            raise InvalidPort(
                f"Invalid port: {port!r}. Must be an integer between 0 and 65535",
                port=port,
            )
        if port < 0 or port > 65535:
            raise InvalidPort(f"Invalid port: {port}. Must be between 0 and 65535", port=port)

        if SCHEMES.get(self._scheme) == port:
            return None
        return port

    @staticmethod
    def _filter_path(path: str) -> str:
        return _PATH_RE.sub(_encode_match, path)

    @staticmethod
    def _filter_query(value: str) -> str:
        # Query and fragment share the same character set.
        return _QUERY_RE.sub(_encode_match, value)

    @staticmethod
    def _filter_user_info_part(part: Optional[str]) -> str:
        if part is None:
            return ""
        return _USER_INFO_RE.sub(_encode_match, part)

    @classmethod
    def _build_user_info(cls, user: Optional[str], password: Optional[str]) -> str:
        info = cls._filter_user_info_part(user)
        if password is not None and info != "":
            info += f":{cls._filter_user_info_part(password)}"
        return info

    # ========================================================================
    # Serialization
    # ========================================================================

    def __str__(self) -> str:
        uri = ""
        authority = self.authority

        if self._scheme != "":
            uri += f"{self._scheme}:"

        if authority != "" or self._scheme != "":
            uri += f"//{authority}"

        path = self._path
        if path != "":
            if uri != "" and not path.startswith("/"):
                path = f"/{path}"
            elif authority == "" and path.startswith("//"):
                path = "/" + path.lstrip("/")
            uri += path

        if self._query != "":
            uri += f"?{self._query}"

        if self._fragment != "":
            uri += f"#{self._fragment}"

        return uri

    def __repr__(self) -> str:
        return f"Uri({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Uri):
            return str(self) == str(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(str(self))
