"""
=============================================================================
ROUTE PATTERN ENGINE
=============================================================================

    template ──compile_template()──► CompiledTemplate     (once, at startup)
                                          │
                 path ──match()──────────►├──► {name: value} | None
                                          │
               values ──link()───────────►└──► path

=============================================================================
"""

from .link import link
from .matcher import MatchResult, match
from .table import Route, RouteMatch, RouteTable
from .template import WILDCARD, CompiledTemplate, compile_template, parse_template

__all__ = [
    "CompiledTemplate",
    "MatchResult",
    "Route",
    "RouteMatch",
    "RouteTable",
    "WILDCARD",
    "compile_template",
    "link",
    "match",
    "parse_template",
]
