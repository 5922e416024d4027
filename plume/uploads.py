"""
Upload file handling for Plume server requests.

Provides:
- UploadErrorCode: The fixed set of upload status codes
- UploadedFile: One uploaded item, backed by a Stream or a file on disk,
  that can be consumed (moved) exactly once
"""

from __future__ import annotations

import logging
import os
import shutil
from enum import IntEnum
from pathlib import Path
from typing import Optional, Union

from .config import get_config
from .faults import (
    AlreadyMoved,
    InvalidErrorStatus,
    InvalidFileSource,
    InvalidTargetPath,
    MessageRuntimeFault,
    MoveFailed,
    StreamReadError,
    UploadError,
)
from .stream import Stream

logger = logging.getLogger("plume.uploads")

PathLike = Union[str, os.PathLike]


class UploadErrorCode(IntEnum):
    """Upload status codes, numbered as in the CGI/PHP upload convention."""
    OK = 0
    INI_SIZE = 1
    FORM_SIZE = 2
    PARTIAL = 3
    NO_FILE = 4
    NO_TMP_DIR = 6
    CANT_WRITE = 7
    EXTENSION = 8


class UploadedFile:
    """
    Uploaded file representation.

    A successful upload is backed by exactly one of a Stream or a path to a
    file on disk. Once moved, neither the stream nor another move is
    available.
    """

    def __init__(
        self,
        stream_or_file: Union[Stream, PathLike, None],
        size: Optional[int],
        error: int = UploadErrorCode.OK,
        client_filename: Optional[str] = None,
        client_media_type: Optional[str] = None,
    ):
        """
        Initialize UploadedFile.

        Args:
            stream_or_file: Backing Stream or path to the uploaded file
            size: Declared size in bytes
            error: One of the UploadErrorCode values
            client_filename: Filename sent by the client
            client_media_type: Media type sent by the client
        """
        if isinstance(error, bool) or not isinstance(error, int):
            raise InvalidErrorStatus(error=error)
        try:
            self._error = UploadErrorCode(error)
        except ValueError:
            raise InvalidErrorStatus(error=error) from None

        self._size = size
        self._client_filename = client_filename
        self._client_media_type = client_media_type
        self._file: Optional[str] = None
        self._stream: Optional[Stream] = None
        self._moved = False

        if self._error is UploadErrorCode.OK:
            if isinstance(stream_or_file, Stream):
                self._stream = stream_or_file
            elif isinstance(stream_or_file, (str, os.PathLike)) and os.fspath(stream_or_file) != "":
                self._file = os.fspath(stream_or_file)
            else:
                raise InvalidFileSource(source_type=type(stream_or_file).__name__)

    @property
    def size(self) -> Optional[int]:
        return self._size

    @property
    def error(self) -> UploadErrorCode:
        return self._error

    @property
    def client_filename(self) -> Optional[str]:
        return self._client_filename

    @property
    def client_media_type(self) -> Optional[str]:
        return self._client_media_type

    @property
    def moved(self) -> bool:
        return self._moved

    def _ensure_available(self) -> None:
        if self._error is not UploadErrorCode.OK:
            raise UploadError(error=int(self._error))
        if self._moved:
            raise AlreadyMoved()

    def get_stream(self) -> Stream:
        """
        Stream over the uploaded content.

        Raises:
            UploadError: The upload failed
            AlreadyMoved: The file was already moved
        """
        self._ensure_available()

        if self._stream is not None:
            return self._stream

        try:
            return Stream(open(self._file, "rb"))
        except OSError as e:
            raise StreamReadError(f"Unable to open uploaded file {self._file}", path=self._file) from e

    def move_to(self, target_path: PathLike) -> None:
        """
        Move the uploaded file to ``target_path``.

        Path-backed uploads are renamed (falling back to a copy across
        filesystems); stream-backed uploads are copied chunk by chunk into a
        new file.

        Raises:
            UploadError: The upload failed
            AlreadyMoved: The file was already moved
            InvalidTargetPath: target_path is empty or not a path
            MoveFailed: The file could not be relocated
        """
        self._ensure_available()

        if not isinstance(target_path, (str, os.PathLike)) or os.fspath(target_path) == "":
            raise InvalidTargetPath(target_path=target_path)
        target = Path(target_path)

        if self._file is not None:
            try:
                shutil.move(self._file, target)
            except OSError as e:
                raise MoveFailed(
                    f"Uploaded file could not be moved to {target}",
                    target_path=str(target),
                ) from e
        else:
            self._copy_stream_to(target)

        self._moved = True
        logger.debug(f"Uploaded file {self._client_filename or ''!r} moved to {target}")

    def _copy_stream_to(self, target: Path) -> None:
        chunk_size = get_config().upload_chunk_size
        source = self._stream

        try:
            dest = Stream(open(target, "wb"))
        except OSError as e:
            raise MoveFailed(
                f"Uploaded file could not be moved to {target}",
                target_path=str(target),
            ) from e

        try:
            with dest:
                if source.seekable():
                    source.rewind()

                while not source.eof():
                    chunk = source.read(chunk_size)
                    if not chunk:
                        break
                    dest.write(chunk)
        except (OSError, MessageRuntimeFault) as e:
            # Drop the partial copy
            target.unlink(missing_ok=True)
            raise MoveFailed(
                f"Uploaded file could not be moved to {target}",
                target_path=str(target),
            ) from e

    def __repr__(self) -> str:
        return (
            f"UploadedFile(filename={self._client_filename!r}, size={self._size}, "
            f"error={self._error.name}, moved={self._moved})"
        )
