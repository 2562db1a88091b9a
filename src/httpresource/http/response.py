"""
=============================================================================
HTTP RESPONSE
=============================================================================

The outbound side of the router. The dispatcher only ever talks to a
response through three operations:

    set_status(code, reason)   → the status line          (at most once)
    set_header(name, value)    → Location, Last-Modified, ...
    set_body(bytes)            → the rendered body         (at most once)

Nothing here writes to a socket: the WSGI adapter reads the fields and
hands them to its server.

=============================================================================
RESPONSE SHAPES PRODUCED BY DISPATCH
=============================================================================

    Success          200 OK + [Last-Modified] + rendered body
    Redirect         3xx + Location + short text/plain body
    Not Modified     304 + nothing else
    Client/Server    4xx/5xx + rendered error body

=============================================================================
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Dict, Union

from .status_codes import HTTPStatus


@dataclass
class HTTPResponse:
    """
    Represents an HTTP response produced by the dispatcher.

    Headers keep insertion order; setting a header twice replaces the
    previous value, which is what keeps "at most one Location header" true.
    """

    status: int = HTTPStatus.OK
    reason: str = HTTPStatus.OK.phrase
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    @property
    def status_text(self) -> str:
        """
        Status code and reason phrase, as WSGI start_response takes them.

        Format: STATUS-CODE SP REASON-PHRASE
        Example: "304 Not Modified"
        """
        return f"{int(self.status)} {self.reason}"

    def set_status(self, code: int, reason: str) -> "HTTPResponse":
        self.status = code
        self.reason = reason
        return self

    def set_header(self, name: str, value: str) -> "HTTPResponse":
        """Set a response header. Returns self for chaining."""
        self.headers[name] = value
        return self

    def set_body(self, body: Union[str, bytes]) -> "HTTPResponse":
        """Set the body, encoding str as UTF-8."""
        if isinstance(body, str):
            body = body.encode("utf-8")
        self.body = body
        return self


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

def format_http_date(dt: datetime) -> str:
    """
    Format a datetime as an HTTP-date (RFC 7231).

    Format: Day, DD Mon YYYY HH:MM:SS GMT
    Example: Wed, 01 Jan 2026 12:00:00 GMT

    Naive datetimes are taken to be UTC; aware ones are converted first.
    Sub-second precision is dropped, since HTTP-dates have none.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return format_datetime(dt.astimezone(timezone.utc).replace(microsecond=0), usegmt=True)
