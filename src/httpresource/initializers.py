"""
=============================================================================
REQUEST INITIALIZERS
=============================================================================

Small policies run in order before any route is tried. Each one looks at
the DispatchContext and either lets the request through (returns None),
adjusts it (e.g. the effective method), or ends it by returning an
HTTPError:

    request ──► NoTrailingSlash ──► MethodOverride ──► [custom ...] ──► routing
                      │                                      │
                      └──► 301 /products                     └──► any HTTPError

Returning the error, rather than raising it, keeps every way out of the
chain visible in the signature.

The dispatcher builds the default chain from RouterConfig:

    trailing_slash_redirect=True  → NoTrailingSlash()
    method_override_param="_method" → MethodOverride("_method", allowed)

and appends any extra initializers it was given. Plain callables with the
same signature work too:

    def maintenance(context):
        if MAINTENANCE:
            return ServiceUnavailable()
        return None

=============================================================================
"""

from abc import ABC, abstractmethod
from typing import Callable, FrozenSet, Iterable, Optional
import logging

from .context import DispatchContext
from .errors import HTTPError, MethodNotAllowed, MovedPermanently


logger = logging.getLogger(__name__)


InitializerFunc = Callable[[DispatchContext], Optional[HTTPError]]


class Initializer(ABC):
    """Base class for request initializers."""

    @abstractmethod
    def __call__(self, context: DispatchContext) -> Optional[HTTPError]:
        """
        Inspect (and possibly adjust) the context.

        Returns:
            None to continue, or the HTTPError that ends the request
        """

    @property
    def name(self) -> str:
        return self.__class__.__name__


class NoTrailingSlash(Initializer):
    """
    Redirect any path longer than "/" that ends in "/" to the same path
    without the trailing slash(es), keeping the query string.

        /products/      → 301 /products
        /products/?p=2  → 301 /products?p=2
        /               → (untouched)
    """

    def __call__(self, context: DispatchContext) -> Optional[HTTPError]:
        path = context.path
        if len(path) <= 1 or not path.endswith("/"):
            return None

        location = path.rstrip("/") or "/"
        if context.query_string:
            location = f"{location}?{context.query_string}"
        logger.debug("[%s] trailing slash: %s -> %s", context.request_id, path, location)
        return MovedPermanently(location)


class MethodOverride(Initializer):
    """
    Let a query parameter stand in for the transport verb.

        POST /products/a?_method=delete   → dispatched as DELETE

    Values outside `allowed` are ignored, as is an absent or empty
    parameter.
    """

    def __init__(self, param: str = "_method", allowed: Iterable[str] = ()):
        self.param = param
        self.allowed: FrozenSet[str] = frozenset(method.upper() for method in allowed)

    def __call__(self, context: DispatchContext) -> Optional[HTTPError]:
        value = context.request.get_query(self.param)
        if not value:
            return None

        method = value.upper()
        if method in self.allowed:
            logger.debug("[%s] method override: %s -> %s", context.request_id, context.method, method)
            context.method = method
        return None


class AllowedRequestMethods(Initializer):
    """
    Reject a verb outside `allowed` before routing, with 405.

    Stricter than the default behaviour, which only checks the verb once a
    resource has matched (so unknown paths answer 404 whatever the verb).
    Add it after MethodOverride to check the overridden verb.
    """

    def __init__(self, allowed: Iterable[str]):
        self.allowed: FrozenSet[str] = frozenset(method.upper() for method in allowed)

    def __call__(self, context: DispatchContext) -> Optional[HTTPError]:
        if context.method in self.allowed:
            return None
        return MethodNotAllowed(self.allowed)
