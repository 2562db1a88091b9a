"""
=============================================================================
DISPATCH CONTEXT
=============================================================================

The per-request state the dispatcher carries from one stage to the next.

    ┌──────┐   ┌──────────┐   ┌───────┐   ┌───────────┐   ┌────────────┐   ┌──────┐
    │ IDLE │──►│ MATCHING │──►│ BOUND │──►│ EXECUTING │──►│ RESPONDING │──►│ DONE │
    └──┬───┘   └────┬─────┘   └───┬───┘   └─────┬─────┘   └────────────┘   └──────┘
       │            │             │             │               ▲
       └────────────┴─────────────┴─────────────┴───────────────┘
                    error edge, carrying an HTTPError

A context is created when a request arrives and discarded once the response
is produced. Transitions outside the diagram raise RuntimeError.

=============================================================================
"""

import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, TYPE_CHECKING

from .http.request import HTTPRequest

if TYPE_CHECKING:
    from .routing.table import RouteMatch


logger = logging.getLogger("httpresource.dispatcher")


class DispatchState(Enum):
    IDLE = "idle"
    MATCHING = "matching"
    BOUND = "bound"
    EXECUTING = "executing"
    RESPONDING = "responding"
    DONE = "done"


_TRANSITIONS = {
    DispatchState.IDLE: {DispatchState.MATCHING, DispatchState.RESPONDING},
    DispatchState.MATCHING: {DispatchState.BOUND, DispatchState.RESPONDING},
    DispatchState.BOUND: {DispatchState.EXECUTING, DispatchState.RESPONDING},
    DispatchState.EXECUTING: {DispatchState.RESPONDING},
    DispatchState.RESPONDING: {DispatchState.DONE},
    DispatchState.DONE: set(),
}


@dataclass
class DispatchContext:
    """
    State of one dispatch.

    Attributes:
        request:           The request being served
        method:            Effective verb; an initializer may override it
        path:              Request path
        query_string:      Raw query string
        if_modified_since: Conditional GET header value, if any
        request_id:        Short id shared by the access log and X-Request-ID
        route_match:       Set once a route matched
        state:             Current DispatchState
    """

    request: HTTPRequest
    method: str
    path: str
    query_string: str = ""
    if_modified_since: Optional[str] = None
    request_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    route_match: Optional["RouteMatch"] = None
    state: DispatchState = DispatchState.IDLE

    @classmethod
    def from_request(cls, request: HTTPRequest) -> "DispatchContext":
        return cls(
            request=request,
            method=request.method.upper(),
            path=request.path,
            query_string=request.query_string,
            if_modified_since=request.header("If-Modified-Since"),
        )

    def advance(self, state: DispatchState) -> None:
        """Move to `state`, enforcing the state diagram."""
        if state not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"Illegal dispatch transition {self.state.name} -> {state.name}")
        logger.debug("[%s] %s -> %s", self.request_id, self.state.name, state.name)
        self.state = state
