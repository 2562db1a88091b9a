"""
=============================================================================
RESOURCES
=============================================================================

A Resource is an adapter between HTTP and application code. One class per
kind of thing addressable by URL; one method per HTTP verb it supports:

    class Product(Resource):
        path = "/products/:name(.:format)"

        def init(self, params):
            self.product = catalogue.find(params["name"])
            if self.product is None:
                raise NotFound()

        def get(self):
            self.last_modified = self.product.updated_at
            return {"product": self.product}

        def put(self):
            self.product.update(self.request.json)
            raise SeeOther(Product.link(self.product.name))

=============================================================================
LIFECYCLE OF ONE INSTANCE
=============================================================================

    factory(Product)         → instance (default: Product())
    instance.request = ...   → the HTTPRequest being served
    instance.params = {...}  → captured placeholders, decoded
    instance.init(params)    → hook, runs before any verb method
    instance.get()           → return value is the data handed to the renderer
    (discarded)              → nothing outlives the request

Verb methods are plain lowercase methods. A class implements a verb if it
has a method of that name; HEAD is implemented whenever GET is, because the
default head() calls get().

=============================================================================
"""

from typing import Any, Callable, Dict, Iterable, Optional, Set, Union, TYPE_CHECKING

from .errors import MethodNotAllowed
from .routing.link import link as build_link
from .routing.matcher import MatchResult, match as match_template
from .routing.template import CompiledTemplate, compile_template

if TYPE_CHECKING:
    from .http.request import HTTPRequest


# Every verb a Resource may implement, as method names
KNOWN_METHODS = frozenset({"GET", "HEAD", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"})


class Resource:
    """
    Base class for HTTP resources.

    Class attributes:
        path:          Route template this resource answers to
        base:          Template prefix prepended to `path`
        layout:        Layout template name for the two-step renderer;
                       None uses the renderer's default, False disables it
        view:          Explicit view name, skipping class-name resolution
        last_modified: Set it (datetime, epoch seconds or HTTP-date string)
                       in a verb method to enable conditional GET
    """

    path: str = "/"
    base: str = ""
    layout: Union[str, bool, None] = None
    view: Optional[str] = None
    last_modified: Any = None

    def __init__(self) -> None:
        self.params: Dict[str, str] = {}
        self.request: Optional["HTTPRequest"] = None

    # =========================================================================
    # ROUTING (class level)
    # =========================================================================

    @classmethod
    def template(cls) -> str:
        return cls.base + cls.path

    @classmethod
    def compiled(cls) -> CompiledTemplate:
        return compile_template(cls.template())

    @classmethod
    def match(cls, path: str) -> Optional[MatchResult]:
        """Match `path` against this resource's own template."""
        return match_template(cls.compiled(), path)

    @classmethod
    def link(cls, *values: Any) -> str:
        """
        Path to this resource for the given placeholder values.

        Example:
            Product.link("widget", "json")  # "/products/widget.json"
        """
        return build_link(cls.compiled(), *values)

    # =========================================================================
    # VERBS
    # =========================================================================

    @classmethod
    def implements(cls, method: str) -> bool:
        """Whether this class has a handler for `method`."""
        method = method.upper()
        if method not in KNOWN_METHODS:
            return False
        if method == "HEAD" and getattr(cls, "head", None) is Resource.head:
            return callable(getattr(cls, "get", None))
        return callable(getattr(cls, method.lower(), None))

    @classmethod
    def allowed_methods(cls, allowed: Iterable[str] = KNOWN_METHODS) -> Set[str]:
        """The verbs in `allowed` this class implements (for the Allow header)."""
        return {method for method in allowed if cls.implements(method)}

    def handler_for(self, method: str) -> Callable[[], Any]:
        """
        The bound verb method for `method`.

        Raises:
            MethodNotAllowed: If this resource does not implement it.
        """
        if not self.implements(method):
            raise MethodNotAllowed(self.allowed_methods())
        return getattr(self, method.lower())

    # =========================================================================
    # HOOKS
    # =========================================================================

    def init(self, params: Dict[str, str]) -> None:
        """Called with the captured placeholders before the verb method."""

    def head(self) -> Any:
        """HEAD answers like GET."""
        get = getattr(self, "get", None)
        if get is None:
            raise MethodNotAllowed(self.allowed_methods())
        return get()
