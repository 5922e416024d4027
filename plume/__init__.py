"""
Plume - Immutable HTTP message model

Complete set of:
- Messages: Request, ServerRequest and Response value objects
- Uri: Validated, percent-encoded RFC 3986 URIs
- Streams: Single-owner wrappers around file-like bodies
- Uploads: Move-once uploaded files
- Faults: Structured error handling with fault domains
- Config: Layered typed settings (files, .env, PLUME_* environment)

Every ``with_*`` call returns a new value; the original is never mutated.
"""

__version__ = "0.1.0"

# ============================================================================
# Messages
# ============================================================================

from .message import Message
from .request import Request
from .server_request import ServerRequest
from .response import Response, STATUS_PHRASES
from .uri import Uri, SCHEMES
from .stream import Stream
from .uploads import UploadedFile, UploadErrorCode

# Header collection
from ._datastructures import (
    Headers,
    filter_header_name,
    filter_header_values,
)

# ============================================================================
# Factories
# ============================================================================

from .factories import (
    create_request,
    create_response,
    create_server_request,
    create_stream,
    create_stream_from_file,
    create_stream_from_resource,
    create_uploaded_file,
    create_uri,
    server_request_from_scope,
)

# ============================================================================
# Config & Faults
# ============================================================================

from .config import (
    MessageConfig,
    ConfigLoader,
    get_config,
    set_config,
    VALID_PROTOCOL_VERSIONS,
)

from .faults import (
    Fault,
    FaultDomain,
    Severity,
    MessageArgumentFault,
    MessageRuntimeFault,
)

__all__ = [
    # Messages
    "Message",
    "Request",
    "ServerRequest",
    "Response",
    "STATUS_PHRASES",
    "Uri",
    "SCHEMES",
    "Stream",
    "UploadedFile",
    "UploadErrorCode",
    "Headers",
    "filter_header_name",
    "filter_header_values",

    # Factories
    "create_request",
    "create_response",
    "create_server_request",
    "create_stream",
    "create_stream_from_file",
    "create_stream_from_resource",
    "create_uploaded_file",
    "create_uri",
    "server_request_from_scope",

    # Config
    "MessageConfig",
    "ConfigLoader",
    "get_config",
    "set_config",
    "VALID_PROTOCOL_VERSIONS",

    # Faults
    "Fault",
    "FaultDomain",
    "Severity",
    "MessageArgumentFault",
    "MessageRuntimeFault",
]
