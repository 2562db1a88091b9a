"""
=============================================================================
HTTP PRIMITIVES
=============================================================================

The request/response pair the dispatcher consumes and produces, plus the
status code table they share.

    HTTPRequest ──► Dispatcher ──► HTTPResponse
        │                              │
    method, path,                 status line,
    query_string,                 headers,
    header(name)                  body

=============================================================================
"""

from .request import HTTPRequest
from .response import HTTPResponse, format_http_date
from .status_codes import HTTPStatus

__all__ = [
    "HTTPRequest",
    "HTTPResponse",
    "HTTPStatus",
    "format_http_date",
]
