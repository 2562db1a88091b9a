"""
=============================================================================
WSGI ADAPTER
=============================================================================

Serves a Dispatcher from any WSGI server (wsgiref, gunicorn, uWSGI, ...):

    environ ──► HTTPRequest ──► Dispatcher ──► HTTPResponse ──► start_response

    from wsgiref.simple_server import make_server

    app = WSGIApplication(Dispatcher([Home, Product]))
    make_server("", 8080, app).serve_forever()

The application is mounted at SCRIPT_NAME; routes see only PATH_INFO.
absolute_url() puts the mount point (and scheme and host) back when a link
must leave the application, e.g. in a Location header.

=============================================================================
"""

from typing import Any, Callable, Dict, Iterable, List, Tuple
from urllib.parse import quote

from .dispatcher import Dispatcher
from .http.request import HTTPRequest


StartResponse = Callable[[str, List[Tuple[str, str]]], Any]

# Characters PATH_INFO may carry unencoded (RFC 3986 pchar plus "/")
_PATH_SAFE = "/:@!$&'()*+,;="

# Headers that reach the app without the HTTP_ prefix
_UNPREFIXED = {"CONTENT_TYPE": "Content-Type", "CONTENT_LENGTH": "Content-Length"}

_DEFAULT_PORTS = {"http": "80", "https": "443"}


def request_path(environ: Dict[str, Any]) -> str:
    """
    PATH_INFO, percent-encoded again.

    WSGI servers decode the path before handing it over (as latin-1 text
    holding UTF-8 bytes). Routes match encoded paths and decode each
    captured value themselves, so the decoding is undone here.
    """
    path = environ.get("PATH_INFO", "") or "/"
    path = path.encode("latin-1").decode("utf-8", "replace")
    return quote(path, safe=_PATH_SAFE)


def request_headers(environ: Dict[str, Any]) -> Dict[str, str]:
    headers = {}
    for key, value in environ.items():
        if key.startswith("HTTP_"):
            headers[key[5:].replace("_", "-").title()] = value
        elif key in _UNPREFIXED and value:
            headers[_UNPREFIXED[key]] = value
    return headers


def request_body(environ: Dict[str, Any]) -> bytes:
    try:
        length = int(environ.get("CONTENT_LENGTH") or 0)
    except ValueError:
        length = 0
    if length <= 0 or "wsgi.input" not in environ:
        return b""
    return environ["wsgi.input"].read(length)


def build_request(environ: Dict[str, Any]) -> HTTPRequest:
    """Turn a WSGI environ into an HTTPRequest."""
    return HTTPRequest(
        method=environ.get("REQUEST_METHOD", "GET"),
        path=request_path(environ),
        query_string=environ.get("QUERY_STRING", ""),
        headers=request_headers(environ),
        body=request_body(environ),
    )


def absolute_url(environ: Dict[str, Any], path: str) -> str:
    """
    Absolute URL for an application path, as the client sees it.

    Uses HTTP_HOST when present, SERVER_NAME and SERVER_PORT otherwise;
    the port is left out when it is the scheme's default.

    Example:
        >>> absolute_url({"wsgi.url_scheme": "https", "HTTP_HOST": "shop.example",
        ...               "SCRIPT_NAME": "/store"}, "/products/a")
        'https://shop.example/store/products/a'
    """
    scheme = environ.get("wsgi.url_scheme", "http")

    host = environ.get("HTTP_HOST")
    if not host:
        host = environ.get("SERVER_NAME", "localhost")
        port = str(environ.get("SERVER_PORT", ""))
        if port and port != _DEFAULT_PORTS.get(scheme):
            host = f"{host}:{port}"
    elif ":" in host:
        name, port = host.rsplit(":", 1)
        if port == _DEFAULT_PORTS.get(scheme):
            host = name

    script = quote(environ.get("SCRIPT_NAME", "").rstrip("/"), safe=_PATH_SAFE)
    return f"{scheme}://{host}{script}{path}"


class WSGIApplication:
    """
    WSGI callable around a Dispatcher.

    Adds Content-Length and Server headers, and makes an app-relative
    Location absolute so redirects stay under the mount point. For HEAD
    the body is dropped here, after dispatch, so Content-Length still reports the
    length of the GET body.
    """

    def __init__(self, dispatcher: Dispatcher):
        self.dispatcher = dispatcher

    def __call__(self, environ: Dict[str, Any], start_response: StartResponse) -> Iterable[bytes]:
        request = build_request(environ)
        response = self.dispatcher.dispatch(request)

        headers = dict(response.headers)
        location = headers.get("Location")
        if location and location.startswith("/") and not location.startswith("//"):
            headers["Location"] = absolute_url(environ, location)
        headers.setdefault("Content-Length", str(len(response.body)))
        headers.setdefault("Server", self.dispatcher.config.server_name)

        start_response(
            response.status_text,
            [(name, str(value)) for name, value in headers.items()],
        )

        if request.method == "HEAD":
            return [b""]
        return [response.body]
