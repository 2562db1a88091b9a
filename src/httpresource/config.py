"""
=============================================================================
ROUTER CONFIGURATION
=============================================================================

Everything the dispatcher needs to know that is not a route: which verbs
are accepted, the URL policies applied before routing, the conditional-GET
attribute, view lookup and logging.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │   Priority (highest to lowest):                                     │
    │                                                                     │
    │   1. Code                                                           │
    │      └── RouterConfig(trailing_slash_redirect=False)                │
    │                                                                     │
    │   2. Environment variables                                          │
    │      └── HTTPRESOURCE_LOG_LEVEL=DEBUG                               │
    │                                                                     │
    │   3. Defaults (below)                                               │
    └─────────────────────────────────────────────────────────────────────┘

The config is built once at startup and held by the Dispatcher. Nothing
reads it from a global, and nothing changes it afterwards.

=============================================================================
"""

import logging
import os
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional

from .resource import KNOWN_METHODS


DEFAULT_METHODS = frozenset({"GET", "POST", "PUT", "DELETE", "HEAD"})

LOG_FORMATS = ("text", "json")


def _parse_methods(value: Iterable[str]) -> FrozenSet[str]:
    if isinstance(value, str):
        value = value.split(",")
    return frozenset(method.strip().upper() for method in value if method.strip())


def _parse_bool(value: str) -> bool:
    return value.strip().lower() not in ("", "0", "false", "no", "off")


@dataclass
class RouterConfig:
    """
    Configuration for a Dispatcher.

    Development:
        RouterConfig(log_level="DEBUG")      # logs every state transition

    Strict API server:
        RouterConfig(
            allowed_methods={"GET", "POST", "PATCH", "DELETE", "HEAD"},
            method_override_param=None,      # no ?_method= tunnelling
            log_format="json",
        )
    """

    # ─────────────────────────────────────────────────────────────────────
    # HTTP VERBS
    # ─────────────────────────────────────────────────────────────────────

    allowed_methods: FrozenSet[str] = field(default_factory=lambda: DEFAULT_METHODS)
    """
    Verbs the dispatcher will run at all. A resource must both implement
    a verb AND the verb must be listed here, or the answer is 405.
    """

    method_override_param: Optional[str] = "_method"
    """
    Query parameter that overrides the transport verb, so an HTML form
    (GET/POST only) can send PUT or DELETE: POST /products/a?_method=DELETE.
    Only verbs in allowed_methods are honoured. None disables overriding.
    """

    # ─────────────────────────────────────────────────────────────────────
    # URL POLICY
    # ─────────────────────────────────────────────────────────────────────

    trailing_slash_redirect: bool = True
    """
    Redirect /products/ to /products with 301 before any route is tried,
    so every resource has exactly one URL.
    """

    # ─────────────────────────────────────────────────────────────────────
    # CONDITIONAL GET
    # ─────────────────────────────────────────────────────────────────────

    last_modified_attribute: str = "last_modified"
    """
    Attribute of the resource (or key of a mapping returned by the verb
    method) holding the last-modified time. Compared with If-Modified-Since.
    """

    # ─────────────────────────────────────────────────────────────────────
    # VIEWS (two-step renderer)
    # ─────────────────────────────────────────────────────────────────────

    views_dir: Optional[str] = None
    """
    Directory searched for content and layout templates. When set, the
    Dispatcher renders through a TwoStepRenderer built from this section;
    None keeps the plain TextRenderer.
    """

    layout: Optional[str] = "layout.html"
    """Layout file name searched up the view's directories. None: no layout."""

    view_extension: str = ".html"
    """Extension appended to view names."""

    views_package: Optional[str] = None
    """
    Package whose sub-modules map to view directories: with "shop.web",
    shop.web.admin.Dashboard looks up admin/dashboard.html.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """DEBUG also logs every dispatch state transition."""

    log_format: str = "text"
    """Access log format: 'text' (Apache style) or 'json'."""

    server_name: str = "httpresource/1.0"
    """Value of the Server header."""

    def __post_init__(self) -> None:
        self.allowed_methods = _parse_methods(self.allowed_methods)

    @classmethod
    def from_env(cls) -> "RouterConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        HTTPRESOURCE_METHODS                  Comma-separated verbs
        HTTPRESOURCE_METHOD_OVERRIDE          Override parameter ("" disables)
        HTTPRESOURCE_TRAILING_SLASH_REDIRECT  1/0
        HTTPRESOURCE_LAST_MODIFIED_ATTRIBUTE  Attribute name
        HTTPRESOURCE_VIEWS_DIR                Views directory ("" disables)
        HTTPRESOURCE_VIEWS_PACKAGE            Package mapped to view directories
        HTTPRESOURCE_VIEW_EXTENSION           View file extension
        HTTPRESOURCE_LAYOUT                   Layout file name ("" disables)
        HTTPRESOURCE_LOG_LEVEL                Logging level
        HTTPRESOURCE_LOG_FORMAT               text | json

        =====================================================================
        """
        defaults = cls()
        override = os.getenv("HTTPRESOURCE_METHOD_OVERRIDE", defaults.method_override_param)
        layout = os.getenv("HTTPRESOURCE_LAYOUT", defaults.layout)
        return cls(
            allowed_methods=_parse_methods(
                os.getenv("HTTPRESOURCE_METHODS", ",".join(sorted(defaults.allowed_methods)))
            ),
            method_override_param=override or None,
            trailing_slash_redirect=_parse_bool(
                os.getenv("HTTPRESOURCE_TRAILING_SLASH_REDIRECT", "1")
            ),
            last_modified_attribute=os.getenv(
                "HTTPRESOURCE_LAST_MODIFIED_ATTRIBUTE", defaults.last_modified_attribute
            ),
            views_dir=os.getenv("HTTPRESOURCE_VIEWS_DIR") or None,
            layout=layout or None,
            view_extension=os.getenv("HTTPRESOURCE_VIEW_EXTENSION", defaults.view_extension),
            views_package=os.getenv("HTTPRESOURCE_VIEWS_PACKAGE") or None,
            log_level=os.getenv("HTTPRESOURCE_LOG_LEVEL", defaults.log_level),
            log_format=os.getenv("HTTPRESOURCE_LOG_FORMAT", defaults.log_format),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Called by the Dispatcher at construction, so a bad config fails
        at startup rather than on the first request.
        """
        if not self.allowed_methods:
            raise ValueError("allowed_methods must not be empty")

        unknown = self.allowed_methods - KNOWN_METHODS
        if unknown:
            raise ValueError(f"Unknown HTTP methods: {', '.join(sorted(unknown))}")

        if not self.last_modified_attribute:
            raise ValueError("last_modified_attribute must not be empty")

        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"Invalid log_format: {self.log_format!r}. Must be 'text' or 'json'.")

        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Invalid log_level: {self.log_level!r}")
