"""
PlumeFaults - Domain-specific fault types.

Two families mirror the two ways a message operation can fail:

- MessageArgumentFault (also a ValueError): the caller passed something
  that can never form a valid message, URI, stream or upload.
- MessageRuntimeFault (also a RuntimeError): the operation was valid but
  the underlying resource or upload state refused it.
"""

from typing import Any

from .core import Fault, FaultDomain, Severity


class MessageArgumentFault(Fault, ValueError):
    """Base class for invalid-argument faults."""
    domain = FaultDomain.MESSAGE
    public = True

    def __init__(self, message: str = None, **metadata: Any):
        super().__init__(
            code=self.code,
            message=message or self.message,
            metadata=metadata,
        )


class MessageRuntimeFault(Fault, RuntimeError):
    """Base class for runtime faults raised by streams and uploads."""
    domain = FaultDomain.STREAM

    def __init__(self, message: str = None, **metadata: Any):
        super().__init__(
            code=self.code,
            message=message or self.message,
            metadata=metadata,
        )


# ============================================================================
# MESSAGE Faults
# ============================================================================

class InvalidHeaderName(MessageArgumentFault):
    """Header name is not an RFC 7230 token."""
    code = "INVALID_HEADER_NAME"
    message = "Header name must be an RFC 7230 compatible string"


class InvalidHeaderValue(MessageArgumentFault):
    """Header value is empty or contains forbidden characters."""
    code = "INVALID_HEADER_VALUE"
    message = "Header values must be RFC 7230 compatible strings"


class InvalidProtocolVersion(MessageArgumentFault):
    """Unsupported HTTP protocol version."""
    code = "INVALID_PROTOCOL_VERSION"
    message = "Invalid HTTP version"


class InvalidMethod(MessageArgumentFault):
    """HTTP method is not a token."""
    code = "INVALID_METHOD"
    message = "Unsupported HTTP method"


class InvalidRequestTarget(MessageArgumentFault):
    """Request target contains whitespace."""
    code = "INVALID_REQUEST_TARGET"
    message = "The request target provided cannot contain whitespace"


class InvalidStatusCode(MessageArgumentFault):
    """Status code outside 100-599."""
    code = "INVALID_STATUS_CODE"
    message = "Invalid HTTP status code"


class InvalidReasonPhrase(MessageArgumentFault):
    """Reason phrase is not a string."""
    code = "INVALID_REASON_PHRASE"
    message = "Response reason phrase must be a string"


class InvalidParsedBody(MessageArgumentFault):
    """Parsed body is a scalar."""
    code = "INVALID_PARSED_BODY"
    message = "Parsed body must be a mapping, a list, an object or None"


class InvalidParams(MessageArgumentFault):
    """Query or cookie parameters are not a mapping."""
    code = "INVALID_PARAMS"
    message = "Parameters must be a mapping"


class InvalidUploadedFiles(MessageArgumentFault):
    """Uploaded files tree contains something other than UploadedFile leaves."""
    code = "INVALID_UPLOADED_FILES"
    message = "Uploaded files must be a tree of UploadedFile instances"


# ============================================================================
# URI Faults
# ============================================================================

class InvalidUri(MessageArgumentFault):
    """URI string cannot be parsed."""
    code = "INVALID_URI"
    message = "Unable to parse URI"
    domain = FaultDomain.URI


class InvalidUriComponent(MessageArgumentFault):
    """URI component has the wrong type."""
    code = "INVALID_URI_COMPONENT"
    message = "URI component must be a string"
    domain = FaultDomain.URI


class UnsupportedScheme(MessageArgumentFault):
    """Scheme outside the allow-list."""
    code = "UNSUPPORTED_SCHEME"
    message = 'Uri scheme must be one of: "http", "https"'
    domain = FaultDomain.URI


class InvalidPort(MessageArgumentFault):
    """Port is not an integer between 0 and 65535."""
    code = "INVALID_PORT"
    message = "Invalid port. Must be between 0 and 65535"
    domain = FaultDomain.URI


# ============================================================================
# STREAM Faults
# ============================================================================

class InvalidStream(MessageArgumentFault):
    """Object cannot be used as a stream."""
    code = "INVALID_STREAM"
    message = "Invalid stream provided; must be a file-like object"
    domain = FaultDomain.STREAM


class InvalidReadLength(MessageArgumentFault):
    """Negative read length."""
    code = "INVALID_READ_LENGTH"
    message = "Length parameter cannot be negative"
    domain = FaultDomain.STREAM


class StreamNotReadable(MessageRuntimeFault):
    code = "STREAM_NOT_READABLE"
    message = "Cannot read from non-readable stream"


class StreamNotWritable(MessageRuntimeFault):
    code = "STREAM_NOT_WRITABLE"
    message = "Cannot write to a non-writable stream"


class StreamNotSeekable(MessageRuntimeFault):
    code = "STREAM_NOT_SEEKABLE"
    message = "Stream is not seekable"


class StreamReadError(MessageRuntimeFault):
    code = "STREAM_READ_ERROR"
    message = "Unable to read from stream"


class StreamWriteError(MessageRuntimeFault):
    code = "STREAM_WRITE_ERROR"
    message = "Unable to write to stream"


class StreamSeekError(MessageRuntimeFault):
    code = "STREAM_SEEK_ERROR"
    message = "Unable to seek stream"


class StreamTellError(MessageRuntimeFault):
    code = "STREAM_TELL_ERROR"
    message = "Unable to determine stream position"


# ============================================================================
# UPLOAD Faults
# ============================================================================

class InvalidErrorStatus(MessageArgumentFault):
    """Upload error code outside the known set."""
    code = "INVALID_ERROR_STATUS"
    message = "Upload file error status must be one of the UploadErrorCode values"
    domain = FaultDomain.UPLOAD


class InvalidFileSource(MessageArgumentFault):
    """Successful upload without a stream or file path."""
    code = "INVALID_FILE_SOURCE"
    message = "Invalid stream or file provided"
    domain = FaultDomain.UPLOAD


class InvalidTargetPath(MessageArgumentFault):
    """Move target is empty or not a path."""
    code = "INVALID_TARGET_PATH"
    message = "Invalid path provided for move operation; must be a non-empty path"
    domain = FaultDomain.UPLOAD


class UploadError(MessageRuntimeFault):
    """Upload carries an error code, there is nothing to read or move."""
    code = "UPLOAD_ERROR"
    message = "Cannot retrieve stream due to upload error"
    domain = FaultDomain.UPLOAD
    severity = Severity.ERROR


class AlreadyMoved(MessageRuntimeFault):
    """Upload was already moved."""
    code = "UPLOAD_ALREADY_MOVED"
    message = "Cannot retrieve stream after it has already been moved"
    domain = FaultDomain.UPLOAD
    severity = Severity.ERROR


class MoveFailed(MessageRuntimeFault):
    """Upload could not be relocated."""
    code = "UPLOAD_MOVE_FAILED"
    message = "Uploaded file could not be moved"
    domain = FaultDomain.UPLOAD
    severity = Severity.ERROR


# ============================================================================
# CONFIG Faults
# ============================================================================

class ConfigInvalidFault(Fault, ValueError):
    """Configuration value is invalid."""

    def __init__(self, key: str, reason: str, **kwargs):
        super().__init__(
            code="CONFIG_INVALID",
            message=f"Configuration key '{key}' is invalid: {reason}",
            domain=FaultDomain.CONFIG,
            retryable=False,
            public=False,
            metadata={"key": key, "reason": reason, **kwargs.get("metadata", {})},
        )
