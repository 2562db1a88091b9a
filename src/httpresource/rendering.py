"""
=============================================================================
RENDERING
=============================================================================

The dispatcher does not know how bodies are produced. It hands a subject
and some data to a Renderer and gets bytes back:

    success:  renderer.render(resource_instance, value returned by the verb)
    error:    renderer.render(http_error, {"error": http_error})

Two renderers ship with the package:

    TextRenderer     bytes/str as is, mappings and lists as JSON,
                     errors as "404 Not Found". The default.

    TwoStepRenderer  Jinja2 templates from a views directory, in two steps:

=============================================================================
TWO-STEP VIEW
=============================================================================

    Step 1 - content. The subject's class hierarchy is walked and the first
    template that exists is rendered with the data:

        class Product(Resource)     → product.html
        (base) Resource             → resource.html

        class NotFound(ClientError) → not_found.html
        (base) ClientError          → client_error.html
        (base) HTTPError            → http_error.html

    Step 2 - layout. The content is wrapped in the first layout found
    walking UP from the view's directory:

        class Admin.Product         → admin/layout.html, then layout.html

    Which names are tried, and in which order, is the job of a ViewResolver,
    so the lookup can be replaced without touching the renderer.

=============================================================================
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional
import json
import posixpath
import re

from jinja2 import Environment, FileSystemLoader, TemplatesNotFound, select_autoescape
from markupsafe import Markup

from .errors import HTTPError

if TYPE_CHECKING:
    from .config import RouterConfig


class Renderer(ABC):
    """Turns a subject (resource or HTTPError) plus data into a body."""

    content_type: str = "text/html; charset=utf-8"

    @abstractmethod
    def render(self, subject: Any, data: Any) -> bytes:
        """Render the body for `subject`."""

    def media_type(self, subject: Any, data: Any) -> str:
        """Content-Type of what render() produces for these arguments."""
        return self.content_type


class TextRenderer(Renderer):
    """Renders data directly, with no templates involved."""

    content_type = "text/plain; charset=utf-8"

    def render(self, subject: Any, data: Any) -> bytes:
        if isinstance(subject, HTTPError):
            return f"{subject.code} {subject.reason}".encode("utf-8")
        if data is None:
            return b""
        if isinstance(data, bytes):
            return data
        if isinstance(data, str):
            return data.encode("utf-8")
        if isinstance(data, (Mapping, list, tuple)):
            return json.dumps(data, default=str).encode("utf-8")
        return str(data).encode("utf-8")

    def media_type(self, subject: Any, data: Any) -> str:
        if not isinstance(subject, HTTPError) and isinstance(data, (Mapping, list, tuple)):
            return "application/json"
        return self.content_type


# =============================================================================
# VIEW RESOLUTION
# =============================================================================

# Boundaries where an underscore goes: fooBar, FooBar, HTTPError
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def class_to_path(cls: type, package: Optional[str] = None) -> str:
    """
    Convert a class to a view path.

        FooBar          → foo_bar
        HTTPError       → http_error
        Admin.Products  → admin/products   (nested class)

    With `package`, modules below it become directories too:

        shop.web.admin.Dashboard, package="shop.web" → admin/dashboard

    A class defined inside a function is named as if defined at the top
    of its module.
    """
    parts = cls.__qualname__.split(".")
    if "<locals>" in parts:
        parts = parts[len(parts) - parts[::-1].index("<locals>"):]

    module = cls.__module__
    if package and module.startswith(package + "."):
        parts = module[len(package) + 1:].split(".") + parts

    return "/".join(_CAMEL_BOUNDARY.sub("_", part).lower() for part in parts)


class ViewResolver:
    """
    Decides which template names a TwoStepRenderer tries for a subject.

    Args:
        extension: Appended to every view name
        layout:    Default layout file name; None disables layouts
        package:   Package whose sub-modules map to view directories
    """

    def __init__(
        self,
        extension: str = ".html",
        layout: Optional[str] = "layout.html",
        package: Optional[str] = None,
    ):
        self.extension = extension
        self.layout = layout
        self.package = package

    def content_candidates(self, subject: Any) -> List[str]:
        """Content template names, most specific first."""
        candidates = []
        view = getattr(subject, "view", None)
        if isinstance(view, str) and view:
            candidates.append(view + self.extension)
        for cls in type(subject).__mro__:
            if cls.__module__ == "builtins":
                continue
            name = class_to_path(cls, self.package) + self.extension
            if name not in candidates:
                candidates.append(name)
        return candidates

    def layout_candidates(self, subject: Any) -> List[str]:
        """Layout names from the view's directory up to the views root."""
        layout = getattr(subject, "layout", None)
        if layout is False:
            return []
        if not isinstance(layout, str):
            layout = self.layout
        if not layout:
            return []

        view = getattr(subject, "view", None)
        name = view if isinstance(view, str) and view else class_to_path(type(subject), self.package)

        candidates = []
        directory = posixpath.dirname(name)
        while True:
            candidates.append(posixpath.join(directory, layout) if directory else layout)
            if not directory:
                break
            directory = posixpath.dirname(directory)
        return candidates


class TwoStepRenderer(Renderer):
    """
    Jinja2-backed two-step view renderer.

    Template context:
        the data's keys   when the data is a mapping
        data              the data itself otherwise
        resource / error  the subject
        content           (layouts only) the step-one output

    A subject without any content template renders an empty fragment; a
    subject without a layout renders the bare fragment.
    """

    def __init__(
        self,
        views_dir: str = "views",
        resolver: Optional[ViewResolver] = None,
        environment: Optional[Environment] = None,
    ):
        self.resolver = resolver or ViewResolver()
        self.environment = environment or Environment(
            loader=FileSystemLoader(views_dir),
            autoescape=select_autoescape(["html", "xml"]),
        )

    @classmethod
    def from_config(cls, config: "RouterConfig") -> "TwoStepRenderer":
        """Build a renderer from the VIEWS section of a RouterConfig."""
        resolver = ViewResolver(config.view_extension, config.layout, config.views_package)
        return cls(config.views_dir or "views", resolver=resolver)

    def render(self, subject: Any, data: Any) -> bytes:
        context = self._context(subject, data)

        # first step, logical presentation
        content = self._render_first(self.resolver.content_candidates(subject), context) or ""

        # second step, layout formatting
        wrapped = self._render_first(
            self.resolver.layout_candidates(subject),
            {**context, "content": Markup(content)},
        )
        if wrapped is not None:
            content = wrapped

        return content.encode("utf-8")

    def _render_first(self, names: Iterable[str], context: Dict[str, Any]) -> Optional[str]:
        names = list(names)
        if not names:
            return None
        try:
            template = self.environment.select_template(names)
        except TemplatesNotFound:
            return None
        return template.render(context)

    @staticmethod
    def _context(subject: Any, data: Any) -> Dict[str, Any]:
        context: Dict[str, Any] = dict(data) if isinstance(data, Mapping) else {"data": data}
        key = "error" if isinstance(subject, HTTPError) else "resource"
        context.setdefault(key, subject)
        context["subject"] = subject
        return context
