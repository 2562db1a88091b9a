"""
=============================================================================
ROUTE TABLE
=============================================================================

An ordered list of routes. Each route pairs a template with the Resource
class that handles it:

    ┌──────────────────────────────────────────────────────────────────┐
    │  RouteTable                                                      │
    │                                                                  │
    │   1. /                            → Home                         │
    │   2. /products/new                → NewProduct                   │
    │   3. /products/:name(.:format)    → Product      ← GET /products/a│
    │   4. /*                           → CatchAll                     │
    └──────────────────────────────────────────────────────────────────┘

Order is priority. The first route whose template matches wins; there is
no ranking by specificity. Register "/products/new" before
"/products/:name", or ":name" will swallow it.

Templates are compiled once, when the route is added. Once the table is
handed to a Dispatcher it is frozen, and adding a route raises.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, Iterator, List, Optional, Type

from .link import link as build_link
from .matcher import MatchResult, match as match_template
from .template import CompiledTemplate, compile_template

if TYPE_CHECKING:
    from ..resource import Resource


@dataclass(frozen=True)
class Route:
    """
    A registered resource: its class, template, and compiled matcher.

    `base` is a template prefix prepended to `path`, so a whole family of
    resources can be mounted somewhere else without touching their paths.
    """

    resource: Type["Resource"]
    path: str
    base: str = ""
    compiled: CompiledTemplate = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "compiled", compile_template(self.template))

    @property
    def template(self) -> str:
        return self.base + self.path

    def match(self, path: str) -> Optional[MatchResult]:
        return match_template(self.compiled, path)

    def link(self, *values: Any) -> str:
        return build_link(self.compiled, *values)


@dataclass(frozen=True)
class RouteMatch:
    """
    Result of a successful lookup.

    Example:
        Template: /products/:name(.:format)
        Path:     /products/widget.json
        Result:   RouteMatch(route=<Product>, params={"name": "widget", "format": "json"})
    """

    route: Route
    params: Dict[str, str]


class RouteTable:
    """
    Ordered collection of routes.

    Usage:
        routes = RouteTable()

        @routes.resource("/products/:name(.:format)")
        class Product(Resource):
            def get(self):
                ...

        # or, using the class's own `path` and `base` attributes:
        routes.add(Home)
    """

    def __init__(self, resources: Iterable[Type["Resource"]] = ()):
        self._routes: List[Route] = []
        self._frozen = False
        for resource in resources:
            self.add(resource)

    # =========================================================================
    # REGISTRATION
    # =========================================================================

    def add(
        self,
        resource: Type["Resource"],
        path: Optional[str] = None,
        base: Optional[str] = None,
    ) -> Route:
        """
        Append a route for `resource`.

        Args:
            resource: The Resource subclass handling the route
            path: Template; defaults to resource.path
            base: Template prefix; defaults to resource.base

        Returns:
            The registered Route

        Raises:
            RuntimeError: If the table is frozen.
            InvalidTemplate: If the template's groups do not balance.
        """
        if self._frozen:
            raise RuntimeError("Cannot add routes to a frozen route table.")

        route = Route(
            resource=resource,
            path=resource.path if path is None else path,
            base=resource.base if base is None else base,
        )
        self._routes.append(route)
        return route

    def resource(
        self,
        path: Optional[str] = None,
        base: Optional[str] = None,
    ) -> Callable[[Type["Resource"]], Type["Resource"]]:
        """Class decorator form of add(). Returns the class unchanged."""
        def decorator(resource: Type["Resource"]) -> Type["Resource"]:
            if path is not None:
                resource.path = path
            if base is not None:
                resource.base = base
            self.add(resource)
            return resource
        return decorator

    def freeze(self) -> "RouteTable":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    # =========================================================================
    # LOOKUP
    # =========================================================================

    def lookup(self, path: str) -> Optional[RouteMatch]:
        """
        Find the first route matching `path`.

        Returns:
            RouteMatch, or None when no route matches
        """
        for route in self._routes:
            params = route.match(path)
            if params is not None:
                return RouteMatch(route=route, params=params)
        return None

    def find(self, resource: Type["Resource"]) -> Optional[Route]:
        """The first route registered for `resource`, if any."""
        for route in self._routes:
            if route.resource is resource:
                return route
        return None

    def link(self, resource: Type["Resource"], *values: Any) -> str:
        """
        Build a path to `resource` using its registered template.

        Raises:
            LookupError: If the resource is not registered.
            LinkError: If the values do not fit the template.
        """
        route = self.find(resource)
        if route is None:
            raise LookupError(f"{resource.__name__} is not registered")
        return route.link(*values)

    def __iter__(self) -> Iterator[Route]:
        return iter(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def describe(self) -> str:
        """
        Render the table for debugging:

            /                          Home
            /products/:name(.:format)  Product
        """
        if not self._routes:
            return ""
        width = max(len(route.template) for route in self._routes)
        return "\n".join(
            f"{route.template:<{width}}  {route.resource.__name__}"
            for route in self._routes
        )
