"""
Message - Immutable HTTP message base.

Carries the protocol version, an RFC 7230 validated header collection and a
body Stream. Every ``with_*``/``without_*`` call returns a new message (or
the same one when nothing would change); the original is never mutated.
"""

from __future__ import annotations

import copy
from typing import Dict, Iterable, List, Mapping, Optional, Tuple, Union

from ._datastructures import (
    HeaderValue,
    Headers,
    filter_header_name,
    filter_header_values,
)
from .config import VALID_PROTOCOL_VERSIONS, get_config
from .faults import InvalidProtocolVersion, InvalidStream
from .stream import Stream, StreamSource

HeadersInit = Union[Mapping[str, HeaderValue], Iterable[Tuple[str, HeaderValue]], None]


class Message:
    """
    Base class shared by requests and responses.

    Headers may be given as a mapping or as an iterable of ``(name, value)``
    pairs; names that differ only in case are merged into the first form
    seen. The body defaults to an empty in-memory stream.
    """

    def __init__(
        self,
        headers: HeadersInit = None,
        body: StreamSource = None,
        protocol_version: Optional[str] = None,
    ):
        self._headers = Headers()
        self._set_headers(headers)
        self._body = Stream.create(body)
        self._protocol_version = self._filter_protocol_version(
            protocol_version if protocol_version is not None else get_config().protocol_version
        )

    def _set_headers(self, headers: HeadersInit) -> None:
        if not headers:
            return

        pairs = headers.items() if isinstance(headers, Mapping) else headers
        for name, value in pairs:
            self._headers.add(filter_header_name(name), filter_header_values(value))

    def _clone(self) -> "Message":
        """Shallow copy with a private header collection; the body is shared."""
        clone = copy.copy(self)
        clone._headers = self._headers.copy()
        return clone

    @staticmethod
    def _filter_protocol_version(version: object) -> str:
        if not isinstance(version, str) or version not in VALID_PROTOCOL_VERSIONS:
            raise InvalidProtocolVersion(
                f"Invalid HTTP version. Must be one of: {', '.join(sorted(VALID_PROTOCOL_VERSIONS))}",
                version=version,
            )
        return version

    # ========================================================================
    # Protocol version
    # ========================================================================

    @property
    def protocol_version(self) -> str:
        return self._protocol_version

    def with_protocol_version(self, version: str) -> "Message":
        version = self._filter_protocol_version(version)
        if version == self._protocol_version:
            return self

        clone = self._clone()
        clone._protocol_version = version
        return clone

    # ========================================================================
    # Headers
    # ========================================================================

    @property
    def headers(self) -> Dict[str, List[str]]:
        """Copy of all headers, original-case name -> values, in order."""
        return self._headers.as_dict()

    def has_header(self, name: str) -> bool:
        """Check if header exists (case-insensitive)."""
        return self._headers.has(name)

    def get_header(self, name: str) -> List[str]:
        """All values for a header, or an empty list."""
        return self._headers.get(name)

    def get_header_line(self, name: str) -> str:
        """
        Values of a header joined by a comma, without a space.

        Returns an empty string when the header is absent.
        """
        return self._headers.line(name)

    def with_header(self, name: str, value: HeaderValue) -> "Message":
        """Replace a header (case-insensitive); the new name's case wins."""
        name = filter_header_name(name)
        values = filter_header_values(value)

        clone = self._clone()
        clone._headers.set(name, values)
        return clone

    def with_added_header(self, name: str, value: HeaderValue) -> "Message":
        """Append values to a header, creating it when absent."""
        name = filter_header_name(name)
        values = filter_header_values(value)

        clone = self._clone()
        clone._headers.add(name, values)
        return clone

    def without_header(self, name: str) -> "Message":
        """Remove a header. Returns this same instance if it is absent."""
        if not self._headers.has(name):
            return self

        clone = self._clone()
        clone._headers.remove(name)
        return clone

    # ========================================================================
    # Body
    # ========================================================================

    @property
    def body(self) -> Stream:
        return self._body

    def with_body(self, body: Stream) -> "Message":
        if not isinstance(body, Stream):
            raise InvalidStream("Message body must be a Stream", value_type=type(body).__name__)
        if body is self._body:
            return self

        clone = self._clone()
        clone._body = body
        return clone
