"""
=============================================================================
HTTP REQUEST
=============================================================================

The inbound side of the router. Framing and parsing of the wire format are
somebody else's job (a WSGI server, a test, a socket loop); by the time a
request reaches the dispatcher it is already split into:

    GET /products/widget.json?_method=DELETE HTTP/1.1
    ─── ─────────────────────  ─────────────
     │            │                  │
     │            │                  └── query_string (raw, undecoded)
     │            └───────────────────── path (raw, still percent-encoded)
     └────────────────────────────────── method

    If-Modified-Since: Tue, 01 Jan 2030 00:00:00 GMT
    ─────────────────  ─────────────────────────────
          │                       └── header value
          └────────────────────────── header name (case-insensitive)

The path is kept percent-encoded on purpose: the route matcher decodes each
captured placeholder on its own, so an encoded "/" inside a value can never
be mistaken for a segment separator.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any
from urllib.parse import parse_qs, urlsplit
import json


@dataclass
class HTTPRequest:
    """
    A parsed HTTP request as seen by the dispatcher.

    Headers are stored with lowercase keys (HTTP header names are
    case-insensitive per RFC 7230), so lookups go through header().
    """

    method: str                          # Transport verb, e.g. "GET"
    path: str = "/"                      # Raw path, no query string
    query_string: str = ""               # Raw query string, no "?"
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    # Private cached values (computed lazily)
    _query_params: Optional[Dict[str, list[str]]] = field(default=None, repr=False)
    _body_json: Optional[Any] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self.method = self.method.upper()
        self.headers = {name.lower(): value for name, value in self.headers.items()}

    @classmethod
    def from_target(
        cls,
        method: str,
        target: str,
        headers: Optional[Dict[str, str]] = None,
        body: bytes = b"",
    ) -> "HTTPRequest":
        """
        Build a request from a request-target such as "/a/b?x=1".

        Handy in tests and in adapters that only hand over the full target.
        """
        parts = urlsplit(target)
        return cls(
            method=method,
            path=parts.path or "/",
            query_string=parts.query,
            headers=dict(headers or {}),
            body=body,
        )

    # =========================================================================
    # ACCESSORS
    # =========================================================================

    def header(self, name: str) -> Optional[str]:
        """
        Get a header value, or None when the header is absent.

        Example:
            request.header("If-Modified-Since")
        """
        return self.headers.get(name.lower())

    @property
    def query_params(self) -> Dict[str, list[str]]:
        """
        Decoded query string as a dict of lists.

            "a=1&a=2&b=3" → {"a": ["1", "2"], "b": ["3"]}
        """
        if self._query_params is None:
            self._query_params = parse_qs(self.query_string, keep_blank_values=True)
        return self._query_params

    def get_query(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """First value of a query parameter, or default."""
        values = self.query_params.get(name, [])
        return values[0] if values else default

    @property
    def content_type(self) -> Optional[str]:
        """Content-Type without parameters (e.g. "; charset=utf-8")."""
        value = self.headers.get("content-type", "")
        return value.split(";")[0].strip().lower() or None

    @property
    def json(self) -> Any:
        """
        The body parsed as JSON, cached after the first access.

        Raises:
            ValueError: If the body is not valid UTF-8 JSON.
        """
        if self._body_json is None and self.body:
            self._body_json = json.loads(self.body.decode("utf-8"))
        return self._body_json
