"""
=============================================================================
DISPATCHER
=============================================================================

Takes one request through the route table to a response:

    HTTPRequest
        │
        ▼
    ┌────────────────────────────────────────────────────────────────────┐
    │ IDLE        absolute path? initializers (trailing slash, override) │
    │   │                                                    ──► 301/404 │
    │   ▼                                                                │
    │ MATCHING    first route whose template matches         ──► 404     │
    │   │                                                                │
    │   ▼                                                                │
    │ BOUND       factory(Resource), verb allowed & implemented ──► 405  │
    │   │         bind params, init(params)                              │
    │   ▼                                                                │
    │ EXECUTING   verb method, Last-Modified vs If-Modified-Since ──► 304│
    │   │                                                                │
    │   ▼                                                                │
    │ RESPONDING  Success → 200 + render(resource, data)                 │
    │             HTTPError → by family (redirect / no body / render)    │
    └────────────────────────────────────────────────────────────────────┘
        │
        ▼
    HTTPResponse

=============================================================================
ERROR POLICY
=============================================================================

Stages hand their result to the next one as a value: either something to
continue with, or the HTTPError that ends the request. Exceptions only
come from code the dispatcher calls (factory, init, verb methods):

    raised HTTPError      → used as is
    any other Exception   → InternalServerError(cause=fault), and the error
                            observer is told about the fault exactly once

Nothing escapes dispatch(): even a renderer that fails while rendering an
error still yields a plain-text 500.

=============================================================================
"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime, time as dt_time, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Callable, Iterable, List, Optional, Type, Union
import logging
import time

from .access_log import RequestLog, log_fault, log_request, timestamp
from .config import RouterConfig
from .context import DispatchContext, DispatchState
from .errors import Family, HTTPError, InternalServerError, MethodNotAllowed, NotFound, NotModified
from .http.request import HTTPRequest
from .http.response import HTTPResponse, format_http_date
from .http.status_codes import HTTPStatus
from .initializers import InitializerFunc, MethodOverride, NoTrailingSlash
from .rendering import Renderer, TextRenderer, TwoStepRenderer
from .resource import Resource
from .routing.table import RouteMatch, RouteTable


logger = logging.getLogger(__name__)


# =============================================================================
# TYPE ALIASES
# =============================================================================

# Creates the Resource instance for a matched route (dependency injection)
Factory = Callable[[Type[Resource]], Resource]

# Told about every unhandled fault; must not raise
ErrorObserver = Callable[[BaseException], None]


@dataclass
class Success:
    """The verb method returned normally."""
    resource: Resource
    data: Any
    last_modified: Optional[str] = None


Outcome = Union[Success, HTTPError]


def default_factory(resource_cls: Type[Resource]) -> Resource:
    return resource_cls()


def to_http_date(value: Any) -> Optional[str]:
    """
    Normalize a last-modified value to an HTTP-date string.

    Accepts datetime, date, epoch seconds, or a string in HTTP-date or
    ISO 8601 form. Falsy values mean "no last-modified".

    Raises:
        ValueError: For a string in neither form.
        TypeError: For any other type.
    """
    if not value:
        return None
    if isinstance(value, datetime):
        return format_http_date(value)
    if isinstance(value, date):
        return format_http_date(datetime.combine(value, dt_time(), tzinfo=timezone.utc))
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return format_http_date(datetime.fromtimestamp(value, tz=timezone.utc))
    if isinstance(value, str):
        try:
            parsed = parsedate_to_datetime(value)
        except (TypeError, ValueError):
            parsed = datetime.fromisoformat(value)
        return format_http_date(parsed)
    raise TypeError(f"Unsupported last-modified value: {value!r}")


class Dispatcher:
    """
    Dispatches requests to resources.

    Usage:
        routes = RouteTable([Home, Product])
        dispatcher = Dispatcher(routes, renderer=TwoStepRenderer("views"))

        response = dispatcher.dispatch(HTTPRequest("GET", "/products/widget"))

    Args:
        routes: A RouteTable, or Resource classes in priority order.
                The table is frozen.
        config: RouterConfig (validated here)
        renderer: Body renderer; when omitted, a TwoStepRenderer if
                  config.views_dir is set, TextRenderer otherwise
        factory: Creates resource instances; plain construction by default
        on_error: Error observer; logs the fault by default
        initializers: Extra initializers, run after the default ones
    """

    def __init__(
        self,
        routes: Union[RouteTable, Iterable[Type[Resource]]],
        config: Optional[RouterConfig] = None,
        renderer: Optional[Renderer] = None,
        factory: Optional[Factory] = None,
        on_error: Optional[ErrorObserver] = None,
        initializers: Iterable[InitializerFunc] = (),
    ):
        self.config = config or RouterConfig()
        self.config.validate()

        self.routes = routes if isinstance(routes, RouteTable) else RouteTable(routes)
        self.routes.freeze()

        if renderer is None:
            renderer = TwoStepRenderer.from_config(self.config) if self.config.views_dir else TextRenderer()
        self.renderer = renderer
        self.factory = factory or default_factory
        self.on_error = on_error or log_fault
        self.initializers: List[InitializerFunc] = self._default_initializers() + list(initializers)

    def _default_initializers(self) -> List[InitializerFunc]:
        chain: List[InitializerFunc] = []
        if self.config.trailing_slash_redirect:
            chain.append(NoTrailingSlash())
        if self.config.method_override_param:
            chain.append(MethodOverride(self.config.method_override_param, self.config.allowed_methods))
        return chain

    def link(self, resource: Type[Resource], *values: Any) -> str:
        """Path to a registered resource (see RouteTable.link)."""
        return self.routes.link(resource, *values)

    # =========================================================================
    # ENTRY POINT
    # =========================================================================

    def dispatch(self, request: HTTPRequest) -> HTTPResponse:
        """
        Dispatch one request. Never raises.

        Returns:
            The response: one status line, at most one Location and one
            Last-Modified header, and at most one rendered body.
        """
        started = time.perf_counter()
        context = DispatchContext.from_request(request)

        outcome = self._resolve(context)

        context.advance(DispatchState.RESPONDING)
        response = self._respond(context, outcome)
        context.advance(DispatchState.DONE)

        self._log(context, response, started)
        return response

    __call__ = dispatch

    def _resolve(self, context: DispatchContext) -> Outcome:
        """IDLE → ... → EXECUTING. Returns the outcome to respond with."""
        try:
            error = self._prepare(context)
            if error is not None:
                return error

            found = self._match(context)
            if isinstance(found, HTTPError):
                return found

            resource = self._bind(context, found)
            if isinstance(resource, HTTPError):
                return resource

            return self._execute(context, resource)

        except HTTPError as error:
            logger.debug("[%s] %r raised in %s", context.request_id, error, context.state.name)
            return error
        except Exception as fault:
            self._notify(fault)
            return InternalServerError(cause=fault)

    # =========================================================================
    # STAGES
    # =========================================================================

    def _prepare(self, context: DispatchContext) -> Optional[HTTPError]:
        """IDLE → MATCHING: reject non-absolute paths, run initializers."""
        if not context.path.startswith("/"):
            return NotFound(f"Not an absolute path: {context.path!r}")

        for initializer in self.initializers:
            error = initializer(context)
            if error is not None:
                return error

        context.advance(DispatchState.MATCHING)
        return None

    def _match(self, context: DispatchContext) -> Union[RouteMatch, HTTPError]:
        """MATCHING → BOUND: first route in the table that matches."""
        found = self.routes.lookup(context.path)
        if found is None:
            return NotFound(f"No resource matches {context.path}")

        context.route_match = found
        context.advance(DispatchState.BOUND)
        return found

    def _bind(self, context: DispatchContext, found: RouteMatch) -> Union[Resource, HTTPError]:
        """BOUND → EXECUTING: create the resource, check the verb, init()."""
        resource = self.factory(found.route.resource)

        allowed = self.config.allowed_methods
        if context.method not in allowed or not resource.implements(context.method):
            return MethodNotAllowed(resource.allowed_methods(allowed))

        resource.request = context.request
        resource.params = dict(found.params)
        resource.init(resource.params)

        context.advance(DispatchState.EXECUTING)
        return resource

    def _execute(self, context: DispatchContext, resource: Resource) -> Outcome:
        """Run the verb method, then the If-Modified-Since check."""
        data = resource.handler_for(context.method)()

        last_modified = self._last_modified(resource, data)
        if last_modified is not None and context.if_modified_since == last_modified:
            return NotModified()

        return Success(resource=resource, data=data, last_modified=last_modified)

    def _last_modified(self, resource: Resource, data: Any) -> Optional[str]:
        attribute = self.config.last_modified_attribute
        value = getattr(resource, attribute, None)
        if value is None and isinstance(data, Mapping):
            value = data.get(attribute)
        return to_http_date(value)

    # =========================================================================
    # RESPONDING
    # =========================================================================

    def _respond(self, context: DispatchContext, outcome: Outcome) -> HTTPResponse:
        try:
            return self._build_response(context, outcome)
        except Exception as fault:
            self._notify(fault)
            error = outcome if isinstance(outcome, HTTPError) else InternalServerError(cause=fault)

        if isinstance(outcome, Success):
            # the resource failed to render; try rendering the error instead
            try:
                return self._build_response(context, error)
            except Exception as fault:
                self._notify(fault)

        return self._fallback_response(context, error)

    def _build_response(self, context: DispatchContext, outcome: Outcome) -> HTTPResponse:
        if isinstance(outcome, HTTPError) and outcome.family is Family.NO_RENDER:
            # status line only, not even X-Request-ID
            return HTTPResponse().set_status(outcome.code, outcome.reason)

        response = HTTPResponse()
        response.set_header("X-Request-ID", context.request_id)

        if isinstance(outcome, Success):
            response.set_status(HTTPStatus.OK, HTTPStatus.OK.phrase)
            if outcome.last_modified:
                response.set_header("Last-Modified", outcome.last_modified)
            self._render(response, outcome.resource, outcome.data)
            return response

        error = outcome
        response.set_status(error.code, error.reason)
        for name, value in error.headers.items():
            response.set_header(name, value)

        if error.family is Family.REDIRECT:
            response.set_header("Content-Type", "text/plain; charset=utf-8")
            response.set_body(error.message)
        else:
            self._render(response, error, {"error": error})

        return response

    def _render(self, response: HTTPResponse, subject: Any, data: Any) -> None:
        body = self.renderer.render(subject, data)
        response.set_header("Content-Type", self.renderer.media_type(subject, data))
        response.set_body(body)

    def _fallback_response(self, context: DispatchContext, error: HTTPError) -> HTTPResponse:
        fallback = TextRenderer()
        response = HTTPResponse()
        response.set_header("X-Request-ID", context.request_id)
        response.set_status(error.code, error.reason)
        response.set_header("Content-Type", fallback.content_type)
        response.set_body(fallback.render(error, {"error": error}))
        return response

    # =========================================================================
    # OBSERVABILITY
    # =========================================================================

    def _notify(self, fault: BaseException) -> None:
        try:
            self.on_error(fault)
        except Exception:
            logger.exception("Error observer failed while reporting %r", fault)

    def _log(self, context: DispatchContext, response: HTTPResponse, started: float) -> None:
        match = context.route_match
        log_request(
            RequestLog(
                request_id=context.request_id,
                method=context.method,
                path=context.path,
                query=context.query_string,
                resource=match.route.resource.__name__ if match else "-",
                status_code=int(response.status),
                content_length=len(response.body),
                duration_ms=(time.perf_counter() - started) * 1000,
                timestamp=timestamp(),
            ),
            self.config.log_format,
        )


def handle(
    request: HTTPRequest,
    resources: Iterable[Type[Resource]],
    factory: Optional[Factory] = None,
    renderer: Optional[Renderer] = None,
) -> HTTPResponse:
    """
    One-shot dispatch with default configuration.

    Builds a Dispatcher for `resources` (in priority order) and dispatches
    `request` through it. Long-lived applications should build the
    Dispatcher once instead.
    """
    return Dispatcher(resources, factory=factory, renderer=renderer).dispatch(request)
