"""
Stream - Single-owner wrapper around a file-like body resource.

A Stream owns exactly one underlying resource (a Python file object, an
io.BytesIO, a SpooledTemporaryFile...). Capabilities are read once from the
resource when the stream is built; detach() and close() hand the resource
back or release it and leave the Stream inert.

Streams are the one mutable piece of a message: cloning a message shares
its body stream, so only one owner should move a given stream's position
at a time.
"""

from __future__ import annotations

import io
import logging
import os
import tempfile
from typing import Any, Dict, Optional, Union

from .config import get_config
from .faults import (
    InvalidReadLength,
    InvalidStream,
    StreamNotReadable,
    StreamNotSeekable,
    StreamNotWritable,
    StreamReadError,
    StreamSeekError,
    StreamTellError,
    StreamWriteError,
)

logger = logging.getLogger("plume.stream")

StreamSource = Union["Stream", str, bytes, bytearray, None, Any]


def _mode_capabilities(mode: str) -> tuple[bool, bool]:
    """(readable, writable) for an open() style mode string."""
    readable = "r" in mode or "+" in mode
    writable = any(flag in mode for flag in "wax+")
    return readable, writable


def _is_file_like(resource: Any) -> bool:
    return callable(getattr(resource, "read", None)) or callable(getattr(resource, "write", None))


class Stream:
    """
    Body stream over a file-like resource.

    Example:
        ```python
        stream = Stream.create("hello")
        stream.read(2)        # b"he"
        str(stream)           # "hello"
        ```
    """

    def __init__(self, resource: Any, size: Optional[int] = None):
        if not _is_file_like(resource):
            raise InvalidStream(resource_type=type(resource).__name__)

        self._resource = resource
        self._size = size
        self._eof = False

        mode = getattr(resource, "mode", None)
        if isinstance(mode, str):
            self._readable, self._writable = _mode_capabilities(mode)
        else:
            self._readable = self._probe(resource, "readable")
            self._writable = self._probe(resource, "writable")
        self._seekable = self._probe(resource, "seekable", default=callable(getattr(resource, "seek", None)))

    @staticmethod
    def _probe(resource: Any, capability: str, default: bool = False) -> bool:
        check = getattr(resource, capability, None)
        if not callable(check):
            return default
        try:
            return bool(check())
        except (OSError, ValueError):
            return False

    @classmethod
    def create(cls, body: StreamSource = "") -> "Stream":
        """
        Build a Stream from a body value.

        Existing streams are returned as-is; str/bytes/None become a spooled
        temporary file holding the content, rewound to the start; file-like
        objects are wrapped.
        """
        if isinstance(body, Stream):
            return body

        if body is None or isinstance(body, (str, bytes, bytearray)):
            resource = tempfile.SpooledTemporaryFile(
                max_size=get_config().spool_max_size, mode="w+b"
            )
            content = body.encode("utf-8") if isinstance(body, str) else bytes(body or b"")
            if content:
                resource.write(content)
                resource.seek(0)
            return cls(resource)

        if _is_file_like(body):
            return cls(body)

        raise InvalidStream(
            "Stream.create() expects a str, bytes, file-like object or Stream",
            resource_type=type(body).__name__,
        )

    # ========================================================================
    # Capabilities
    # ========================================================================

    def readable(self) -> bool:
        return self._readable

    def writable(self) -> bool:
        return self._writable

    def seekable(self) -> bool:
        return self._seekable

    # ========================================================================
    # Lifecycle
    # ========================================================================

    def detach(self) -> Any:
        """Release ownership of the resource and return it."""
        resource = self._resource
        self._resource = None
        self._size = None
        self._readable = False
        self._writable = False
        self._seekable = False
        return resource

    def close(self) -> None:
        resource = self.detach()
        if resource is not None:
            resource.close()

    def __enter__(self) -> "Stream":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ========================================================================
    # I/O
    # ========================================================================

    def read(self, length: int) -> bytes:
        if not self._readable:
            raise StreamNotReadable()
        if length < 0:
            raise InvalidReadLength(length=length)

        try:
            data = self._resource.read(length)
        except (OSError, ValueError) as e:
            raise StreamReadError(reason=str(e)) from e

        if len(data) < length:
            self._eof = True
        return data

    def write(self, data: Union[bytes, str]) -> int:
        if not self._writable:
            raise StreamNotWritable()

        self._size = None

        if isinstance(data, str) and not isinstance(self._resource, io.TextIOBase):
            data = data.encode("utf-8")

        try:
            written = self._resource.write(data)
        except (OSError, ValueError, TypeError) as e:
            raise StreamWriteError(reason=str(e)) from e

        return len(data) if written is None else written

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> None:
        if not self._seekable:
            raise StreamNotSeekable()

        try:
            self._resource.seek(offset, whence)
        except (OSError, ValueError) as e:
            raise StreamSeekError(
                f"Unable to seek to stream position {offset} with whence {whence}",
                offset=offset,
                whence=whence,
            ) from e
        self._eof = False

    def rewind(self) -> None:
        self.seek(0)

    def tell(self) -> int:
        if self._resource is None:
            raise StreamTellError("Stream is detached")
        try:
            return self._resource.tell()
        except (OSError, ValueError, AttributeError) as e:
            raise StreamTellError(reason=str(e)) from e

    def eof(self) -> bool:
        return self._resource is None or self._eof

    def get_contents(self) -> bytes:
        """Read everything from the current position to the end."""
        if self._resource is None or not self._readable:
            raise StreamReadError("Unable to read stream contents")

        try:
            contents = self._resource.read()
        except (OSError, ValueError) as e:
            raise StreamReadError("Unable to read stream contents", reason=str(e)) from e

        self._eof = True
        return contents

    # ========================================================================
    # Metadata
    # ========================================================================

    def get_size(self) -> Optional[int]:
        """Known size, or the resource's current size; None when unknown."""
        if self._size is not None:
            return self._size

        resource = self._resource
        if resource is None:
            return None

        getbuffer = getattr(resource, "getbuffer", None)
        if callable(getbuffer):
            return getbuffer().nbytes

        if self._seekable:
            try:
                position = resource.tell()
                resource.seek(0, os.SEEK_END)
                end = resource.tell()
                resource.seek(position)
                return end
            except (OSError, ValueError):
                return None

        try:
            return os.fstat(resource.fileno()).st_size
        except (OSError, ValueError, AttributeError, io.UnsupportedOperation):
            return None

    def get_metadata(self, key: Optional[str] = None) -> Any:
        if self._resource is None:
            return None if key is not None else {}

        metadata: Dict[str, Any] = {
            "mode": getattr(self._resource, "mode", None),
            "seekable": self._seekable,
            "readable": self._readable,
            "writable": self._writable,
            "uri": getattr(self._resource, "name", None),
            "closed": getattr(self._resource, "closed", False),
        }

        if key is None:
            return metadata
        return metadata.get(key)

    # ========================================================================
    # Serialization
    # ========================================================================

    def __bytes__(self) -> bytes:
        try:
            if self._seekable:
                self.rewind()
            contents = self.get_contents()
        except Exception as e:
            logger.warning(f"Stream serialization failed: {e}")
            return b""
        return contents.encode("utf-8") if isinstance(contents, str) else contents

    def __str__(self) -> str:
        return bytes(self).decode("utf-8", errors="replace")

    def __repr__(self) -> str:
        state = "detached" if self._resource is None else type(self._resource).__name__
        return f"Stream({state}, readable={self._readable}, writable={self._writable}, seekable={self._seekable})"
