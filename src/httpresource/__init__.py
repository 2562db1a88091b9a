"""
=============================================================================
HTTPRESOURCE - Declarative HTTP Resource Router
=============================================================================

Resources declare the URL templates they answer to; the router compiles the
templates once, dispatches each request to the first resource whose template
matches, runs the method for the request's verb, and maps every way that can
fail onto HTTP status semantics.

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    httpresource/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI (python -m httpresource)
    ├── dispatcher.py        # Dispatcher state machine
    ├── resource.py          # Resource base class
    ├── errors.py            # HTTPError taxonomy
    ├── initializers.py      # Pre-routing policies (trailing slash, override)
    ├── context.py           # Per-request DispatchContext
    ├── rendering.py         # TextRenderer, Jinja2 TwoStepRenderer
    ├── config.py            # RouterConfig dataclass
    ├── access_log.py        # Access log and fault logging
    ├── wsgi.py              # WSGI adapter
    ├── routing/             # Route pattern engine
    │   ├── template.py      # Template parser and compiler
    │   ├── matcher.py       # Path matching
    │   ├── link.py          # Reverse routing
    │   └── table.py         # Ordered route table
    └── http/                # Request/response primitives
        ├── request.py
        ├── response.py
        └── status_codes.py

=============================================================================
QUICK START
=============================================================================

    from httpresource import Dispatcher, HTTPRequest, NotFound, Resource

    class Product(Resource):
        path = "/products/:name(.:format)"

        def init(self, params):
            self.product = catalogue.get(params["name"])
            if self.product is None:
                raise NotFound()

        def get(self):
            return {"name": self.product.name}

    dispatcher = Dispatcher([Product])
    response = dispatcher.dispatch(HTTPRequest("GET", "/products/widget.json"))

    Product.link("widget", "json")   # "/products/widget.json"

=============================================================================
"""

__version__ = "1.0.0"

from .config import RouterConfig
from .dispatcher import Dispatcher, handle
from .errors import (
    BadRequest,
    ClientError,
    Conflict,
    Family,
    Forbidden,
    Found,
    Gone,
    HTTPError,
    InternalServerError,
    InvalidTemplate,
    LinkError,
    MethodNotAllowed,
    MovedPermanently,
    NotAcceptable,
    NotFound,
    NotModified,
    PermanentRedirect,
    Redirection,
    SeeOther,
    ServerError,
    ServiceUnavailable,
    TemporaryRedirect,
)
from .http import HTTPRequest, HTTPResponse, HTTPStatus
from .rendering import Renderer, TextRenderer, TwoStepRenderer, ViewResolver
from .resource import Resource
from .routing import RouteTable, compile_template, link, match

__all__ = [
    "BadRequest",
    "ClientError",
    "Conflict",
    "Dispatcher",
    "Family",
    "Forbidden",
    "Found",
    "Gone",
    "HTTPError",
    "HTTPRequest",
    "HTTPResponse",
    "HTTPStatus",
    "InternalServerError",
    "InvalidTemplate",
    "LinkError",
    "MethodNotAllowed",
    "MovedPermanently",
    "NotAcceptable",
    "NotFound",
    "NotModified",
    "PermanentRedirect",
    "Redirection",
    "Renderer",
    "Resource",
    "RouteTable",
    "RouterConfig",
    "SeeOther",
    "ServerError",
    "ServiceUnavailable",
    "TemporaryRedirect",
    "TextRenderer",
    "TwoStepRenderer",
    "ViewResolver",
    "__version__",
    "compile_template",
    "handle",
    "link",
    "match",
]
