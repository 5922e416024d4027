"""
Shared test fixtures and helpers for Plume test suite.
"""

import io
import pytest
from typing import List, Optional

from plume.config import set_config
from plume.stream import Stream


@pytest.fixture(autouse=True)
def reset_config():
    """Every test starts and ends with the default message config."""
    set_config(None)
    yield
    set_config(None)


# ============================================================================
# Stream Helpers
# ============================================================================


class WriteOnlyResource:
    """File-like object that only accepts writes."""

    def __init__(self):
        self.chunks: List[bytes] = []

    def write(self, data):
        self.chunks.append(data)
        return len(data)

    def readable(self):
        return False

    def writable(self):
        return True

    def close(self):
        pass


class FailingResource(io.RawIOBase):
    """Readable, seekable resource whose I/O calls always fail."""

    def readable(self):
        return True

    def seekable(self):
        return True

    def read(self, size=-1):
        raise OSError("device unavailable")

    def seek(self, offset, whence=0):
        raise OSError("device unavailable")


class BreaksAfterFirstRead(io.RawIOBase):
    """Readable resource that returns one chunk, then fails."""

    def __init__(self, first: bytes):
        self._first = first
        self._reads = 0

    def readable(self):
        return True

    def read(self, size=-1):
        self._reads += 1
        if self._reads > 1:
            raise OSError("connection reset")
        return self._first


@pytest.fixture
def text_file(tmp_path):
    """A small file on disk holding b'Plume body'."""
    path = tmp_path / "body.txt"
    path.write_bytes(b"Plume body")
    return path


@pytest.fixture
def memory_stream():
    return Stream(io.BytesIO(b"0123456789"))


# ============================================================================
# ASGI Helpers
# ============================================================================


def make_scope(
    method: str = "GET",
    path: str = "/",
    query_string: str = "",
    headers: Optional[List[tuple]] = None,
    scheme: str = "http",
    server: Optional[tuple] = ("127.0.0.1", 8000),
    http_version: str = "1.1",
) -> dict:
    """Build a minimal ASGI HTTP scope."""
    raw_headers = []
    if headers:
        for name, value in headers:
            raw_headers.append(
                (name.encode("latin-1") if isinstance(name, str) else name,
                 value.encode("latin-1") if isinstance(value, str) else value)
            )
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": http_version,
        "method": method,
        "path": path,
        "raw_path": path.encode("utf-8"),
        "query_string": query_string.encode("utf-8"),
        "headers": raw_headers,
        "scheme": scheme,
        "server": server,
        "client": ("127.0.0.1", 12345),
        "root_path": "",
    }
