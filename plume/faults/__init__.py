"""
PlumeFaults - Structured fault taxonomy for the message model.

Every validation failure is raised eagerly, at the constructor or ``with_*``
call that received the bad value, as a typed fault carrying a stable code.

Core exports:
- Fault: Base fault class
- FaultDomain: Domain enumeration
- Severity: Severity levels
- MessageArgumentFault / MessageRuntimeFault: the two fault families
"""

from .core import (
    Fault,
    FaultDomain,
    Severity,
    DOMAIN_DEFAULTS,
)

from .domains import (
    MessageArgumentFault,
    MessageRuntimeFault,
    # Message
    InvalidHeaderName,
    InvalidHeaderValue,
    InvalidProtocolVersion,
    InvalidMethod,
    InvalidRequestTarget,
    InvalidStatusCode,
    InvalidReasonPhrase,
    InvalidParsedBody,
    InvalidParams,
    InvalidUploadedFiles,
    # URI
    InvalidUri,
    InvalidUriComponent,
    UnsupportedScheme,
    InvalidPort,
    # Stream
    InvalidStream,
    InvalidReadLength,
    StreamNotReadable,
    StreamNotWritable,
    StreamNotSeekable,
    StreamReadError,
    StreamWriteError,
    StreamSeekError,
    StreamTellError,
    # Upload
    InvalidErrorStatus,
    InvalidFileSource,
    InvalidTargetPath,
    UploadError,
    AlreadyMoved,
    MoveFailed,
    # Config
    ConfigInvalidFault,
)

__all__ = [
    # Core types
    "Fault",
    "FaultDomain",
    "Severity",
    "DOMAIN_DEFAULTS",

    # Families
    "MessageArgumentFault",
    "MessageRuntimeFault",

    # Message
    "InvalidHeaderName",
    "InvalidHeaderValue",
    "InvalidProtocolVersion",
    "InvalidMethod",
    "InvalidRequestTarget",
    "InvalidStatusCode",
    "InvalidReasonPhrase",
    "InvalidParsedBody",
    "InvalidParams",
    "InvalidUploadedFiles",

    # URI
    "InvalidUri",
    "InvalidUriComponent",
    "UnsupportedScheme",
    "InvalidPort",

    # Stream
    "InvalidStream",
    "InvalidReadLength",
    "StreamNotReadable",
    "StreamNotWritable",
    "StreamNotSeekable",
    "StreamReadError",
    "StreamWriteError",
    "StreamSeekError",
    "StreamTellError",

    # Upload
    "InvalidErrorStatus",
    "InvalidFileSource",
    "InvalidTargetPath",
    "UploadError",
    "AlreadyMoved",
    "MoveFailed",

    # Config
    "ConfigInvalidFault",
]
