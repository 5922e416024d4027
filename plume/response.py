"""
Response - Immutable HTTP response.

Adds a validated status code and a reason phrase to Message. When no
phrase was set explicitly the standard phrase for the code is reported.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Optional

from .faults import InvalidReasonPhrase, InvalidStatusCode
from .message import HeadersInit, Message
from .stream import StreamSource

STATUS_PHRASES = MappingProxyType({
    # Informational 1xx
    100: "Continue",
    101: "Switching Protocols",
    102: "Processing",
    103: "Early Hints",
    # Successful 2xx
    200: "OK",
    201: "Created",
    202: "Accepted",
    203: "Non-Authoritative Information",
    204: "No Content",
    205: "Reset Content",
    206: "Partial Content",
    207: "Multi-Status",
    208: "Already Reported",
    226: "IM Used",
    # Redirection 3xx
    300: "Multiple Choices",
    301: "Moved Permanently",
    302: "Found",
    303: "See Other",
    304: "Not Modified",
    305: "Use Proxy",
    306: "(Unused)",
    307: "Temporary Redirect",
    308: "Permanent Redirect",
    # Client Error 4xx
    400: "Bad Request",
    401: "Unauthorized",
    402: "Payment Required",
    403: "Forbidden",
    404: "Not Found",
    405: "Method Not Allowed",
    406: "Not Acceptable",
    407: "Proxy Authentication Required",
    408: "Request Timeout",
    409: "Conflict",
    410: "Gone",
    411: "Length Required",
    412: "Precondition Failed",
    413: "Request Entity Too Large",
    414: "Request-URI Too Large",
    415: "Unsupported Media Type",
    416: "Requested Range not satisfiable",
    417: "Expectation Failed",
    418: "I'm a teapot",
    421: "Misdirected Request",
    422: "Unprocessable Entity",
    423: "Locked",
    424: "Failed Dependency",
    425: "Too Early",
    426: "Upgrade Required",
    428: "Precondition Required",
    429: "Too Many Requests",
    431: "Request Header Fields Too Large",
    444: "Connection Closed Without Response",
    451: "Unavailable For Legal Reasons",
    499: "Client Closed Request",
    # Server Error 5xx
    500: "Internal Server Error",
    501: "Not Implemented",
    502: "Bad Gateway",
    503: "Service Unavailable",
    504: "Gateway Timeout",
    505: "HTTP Version not supported",
    506: "Variant Also Negotiates",
    507: "Insufficient Storage",
    508: "Loop Detected",
    510: "Not Extended",
    511: "Network Authentication Required",
    599: "Network Connect Timeout Error",
})


class Response(Message):
    """
    HTTP response.

    Example:
        ```python
        response = Response(404)
        response.reason_phrase                     # "Not Found"
        response.with_status(200, "Fine").reason_phrase   # "Fine"
        ```
    """

    def __init__(
        self,
        status: int = 200,
        headers: HeadersInit = None,
        body: StreamSource = None,
        reason_phrase: Optional[str] = None,
        protocol_version: Optional[str] = None,
    ):
        self._status_code = self._filter_status(status)
        self._reason_phrase = self._filter_reason_phrase(reason_phrase)

        super().__init__(headers, body, protocol_version)

    @property
    def status_code(self) -> int:
        return self._status_code

    @property
    def reason_phrase(self) -> str:
        """Explicit phrase if one was set, else the standard one, else ''."""
        if self._reason_phrase is not None:
            return self._reason_phrase
        return STATUS_PHRASES.get(self._status_code, "")

    def with_status(self, code: int, reason_phrase: Optional[str] = None) -> "Response":
        """
        Return a response with the given status.

        ``reason_phrase=None`` falls back to the standard phrase for ``code``;
        an explicit empty string is kept as-is.
        """
        code = self._filter_status(code)
        reason_phrase = self._filter_reason_phrase(reason_phrase)

        clone = self._clone()
        clone._status_code = code
        clone._reason_phrase = reason_phrase
        return clone

    @staticmethod
    def _filter_status(status: object) -> int:
        if isinstance(status, bool) or not isinstance(status, int) or not 100 <= status <= 599:
            raise InvalidStatusCode(status=status)
        return status

    @staticmethod
    def _filter_reason_phrase(reason_phrase: object) -> Optional[str]:
        if reason_phrase is not None and not isinstance(reason_phrase, str):
            raise InvalidReasonPhrase(value_type=type(reason_phrase).__name__)
        return reason_phrase
