"""
=============================================================================
ERROR TAXONOMY
=============================================================================

Every way a request can end other than "200 OK + rendered resource" is an
HTTPError. Each class declares an HTTP status and a family; the family
alone decides how the dispatcher turns the error into a response:

    ┌─────────────────────┬────────────┬─────────────────────────────────┐
    │ Family              │ Examples   │ Response                        │
    ├─────────────────────┼────────────┼─────────────────────────────────┤
    │ REDIRECT            │ 301 302 303│ status + Location + short text  │
    │                     │ 307 308    │ body, renderer never called     │
    ├─────────────────────┼────────────┼─────────────────────────────────┤
    │ NO_RENDER           │ 304        │ status line only                │
    ├─────────────────────┼────────────┼─────────────────────────────────┤
    │ RENDER              │ 4xx, 5xx   │ status + renderer(error, data)  │
    └─────────────────────┴────────────┴─────────────────────────────────┘

Handlers signal these by raising them:

    class Product(Resource):
        path = "/products/:name"

        def get(self):
            product = catalogue.find(self.params["name"])
            if product is None:
                raise NotFound()
            if product.renamed_to:
                raise MovedPermanently(Product.link(product.renamed_to))
            return product

Application-specific kinds just subclass a family and set `status`:

    class InvalidOrder(ClientError):
        status = HTTPStatus.UNPROCESSABLE_ENTITY

The dispatcher itself never raises them between its own stages; it passes
them along as plain values.

=============================================================================
"""

from enum import Enum
from typing import Iterable, Optional

from .http.status_codes import HTTPStatus


class Family(Enum):
    """How an HTTPError is turned into a response."""
    REDIRECT = "redirect"       # Location header, no rendering
    NO_RENDER = "no-render"     # status line only
    RENDER = "render"           # rendered through the Renderer


class HTTPError(Exception):
    """
    Base class of the taxonomy: an error that maps to an HTTP status.

    Subclasses set `status` (an HTTPStatus) and `family`. The reason
    phrase defaults to the status phrase and may be overridden per
    instance, e.g. NotFound(reason="No Such Product").
    """

    status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR
    family: Family = Family.RENDER

    def __init__(self, message: str = "", reason: Optional[str] = None):
        self.reason = reason or self.status.phrase
        super().__init__(message or self.reason)

    @property
    def code(self) -> int:
        return int(self.status)

    @property
    def message(self) -> str:
        return str(self)

    @property
    def headers(self) -> dict:
        """Extra response headers this error contributes."""
        return {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.code}, {self.reason!r})"


# =============================================================================
# REDIRECTION FAMILY
# =============================================================================

class Redirection(HTTPError):
    """A redirect to `location`. Rendering is bypassed."""

    status = HTTPStatus.FOUND
    family = Family.REDIRECT

    def __init__(self, location: str, message: str = ""):
        self.location = location
        super().__init__(message or f"Redirecting to {location}")

    @property
    def headers(self) -> dict:
        return {"Location": self.location}


class MovedPermanently(Redirection):
    status = HTTPStatus.MOVED_PERMANENTLY


class Found(Redirection):
    status = HTTPStatus.FOUND


class SeeOther(Redirection):
    status = HTTPStatus.SEE_OTHER


class TemporaryRedirect(Redirection):
    status = HTTPStatus.TEMPORARY_REDIRECT


class PermanentRedirect(Redirection):
    status = HTTPStatus.PERMANENT_REDIRECT


# =============================================================================
# NOT MODIFIED
# =============================================================================

class NotModified(HTTPError):
    """The client's cached copy is current: status line only, no body."""

    status = HTTPStatus.NOT_MODIFIED
    family = Family.NO_RENDER


# =============================================================================
# CLIENT ERRORS (4xx)
# =============================================================================

class ClientError(HTTPError):
    status = HTTPStatus.BAD_REQUEST
    family = Family.RENDER


class BadRequest(ClientError):
    status = HTTPStatus.BAD_REQUEST


class Forbidden(ClientError):
    status = HTTPStatus.FORBIDDEN


class NotFound(ClientError):
    """No registered resource matches the request path."""

    status = HTTPStatus.NOT_FOUND


class MethodNotAllowed(ClientError):
    """
    The matched resource does not implement the verb, or the verb is
    outside the allowed set. `allowed` feeds the Allow header (RFC 7231
    requires one on a 405).
    """

    status = HTTPStatus.METHOD_NOT_ALLOWED

    def __init__(self, allowed: Iterable[str] = (), message: str = ""):
        self.allowed = tuple(sorted(allowed))
        super().__init__(message)

    @property
    def headers(self) -> dict:
        return {"Allow": ", ".join(self.allowed)} if self.allowed else {}


class NotAcceptable(ClientError):
    status = HTTPStatus.NOT_ACCEPTABLE


class Conflict(ClientError):
    status = HTTPStatus.CONFLICT


class Gone(ClientError):
    status = HTTPStatus.GONE


# =============================================================================
# SERVER ERRORS (5xx)
# =============================================================================

class ServerError(HTTPError):
    status = HTTPStatus.INTERNAL_SERVER_ERROR
    family = Family.RENDER


class InternalServerError(ServerError):
    """
    Wraps an arbitrary fault raised by handler code.

    The message is the fault's message; the fault itself is kept as
    `cause` (and as __cause__, so tracebacks chain).
    """

    status = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str = "", cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message or (str(cause) if cause is not None else ""))
        self.__cause__ = cause


class ServiceUnavailable(ServerError):
    status = HTTPStatus.SERVICE_UNAVAILABLE


# =============================================================================
# ROUTING ERRORS
# =============================================================================
# Not HTTP errors: these are programming mistakes in route configuration or
# in a call to link(), and surface as ordinary ValueErrors.

class InvalidTemplate(ValueError):
    """A route template whose optional groups do not balance."""


class LinkError(ValueError):
    """A link could not be built from the supplied values."""
