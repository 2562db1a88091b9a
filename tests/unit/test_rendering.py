"""
Unit tests for renderers and view resolution.
"""

import json

import pytest
from jinja2 import DictLoader, Environment

from httpresource import Resource, RouterConfig
from httpresource.errors import Conflict, HTTPError, NotFound, SeeOther
from httpresource.rendering import TextRenderer, TwoStepRenderer, ViewResolver, class_to_path


class Product(Resource):
    path = "/products/:name"


class FooBar(Resource):
    pass


class Admin:
    class Dashboard(Resource):
        path = "/admin"


class Bare(Product):
    layout = False


class Themed(Product):
    layout = "missing_layout.html"


class Unviewed(Resource):
    pass


class Explicit(Resource):
    view = "admin/dashboard"


class PackagedDashboard(Resource):
    pass


PackagedDashboard.__module__ = "shop.web.admin"


class TestClassToPath:
    """Tests for class_to_path()."""

    @pytest.mark.parametrize("cls, expected", [
        (Product, "product"),
        (FooBar, "foo_bar"),
        (HTTPError, "http_error"),
        (NotFound, "not_found"),
        (Admin.Dashboard, "admin/dashboard"),
    ])
    def test_paths(self, cls, expected):
        """Test CamelCase to snake_case, nesting to directories."""
        assert class_to_path(cls) == expected

    def test_class_defined_in_function(self):
        """Test that the enclosing function does not become a directory."""
        class LocalProduct(Resource):
            pass

        assert class_to_path(LocalProduct) == "local_product"

    def test_package_modules_become_directories(self):
        assert class_to_path(PackagedDashboard, package="shop.web") == "admin/packaged_dashboard"

    def test_module_outside_package_ignored(self):
        assert class_to_path(PackagedDashboard, package="blog") == "packaged_dashboard"
        assert class_to_path(PackagedDashboard) == "packaged_dashboard"


class TestViewResolver:
    """Tests for ViewResolver."""

    def test_content_walks_class_hierarchy(self):
        """Test that the most specific class comes first."""
        assert ViewResolver().content_candidates(Bare()) == [
            "bare.html",
            "product.html",
            "resource.html",
        ]

    def test_error_candidates(self):
        """Test the candidates for an error subject."""
        assert ViewResolver().content_candidates(NotFound()) == [
            "not_found.html",
            "client_error.html",
            "http_error.html",
        ]

    def test_explicit_view_first(self):
        """Test that a `view` attribute is tried before the class names."""
        candidates = ViewResolver().content_candidates(Explicit())
        assert candidates[0] == "admin/dashboard.html"
        assert candidates[1] == "explicit.html"

    def test_extension(self):
        """Test a custom view extension."""
        assert ViewResolver(extension=".jinja").content_candidates(Product())[0] == "product.jinja"

    def test_layout_directory_ancestry(self):
        """Test that layouts are searched from the view's directory up."""
        assert ViewResolver().layout_candidates(Admin.Dashboard()) == [
            "admin/layout.html",
            "layout.html",
        ]

    def test_layout_top_level(self):
        assert ViewResolver().layout_candidates(Product()) == ["layout.html"]

    def test_layout_disabled(self):
        assert ViewResolver().layout_candidates(Bare()) == []

    def test_no_default_layout(self):
        assert ViewResolver(layout=None).layout_candidates(Product()) == []

    def test_layout_ancestry_from_package(self):
        """Test that package modules count as view directories."""
        assert ViewResolver(package="shop.web").layout_candidates(PackagedDashboard()) == [
            "admin/layout.html",
            "layout.html",
        ]

    def test_layout_named_by_resource(self):
        assert ViewResolver().layout_candidates(Themed()) == ["missing_layout.html"]


class TestTextRenderer:
    """Tests for TextRenderer."""

    @pytest.mark.parametrize("data, expected", [
        (None, b""),
        (b"raw", b"raw"),
        ("café", "café".encode("utf-8")),
        (42, b"42"),
    ])
    def test_scalars(self, data, expected):
        """Test bytes, str and other scalars."""
        assert TextRenderer().render(Product(), data) == expected

    def test_mapping_as_json(self):
        """Test that mappings and lists become JSON."""
        renderer = TextRenderer()
        assert json.loads(renderer.render(Product(), {"a": [1, 2]})) == {"a": [1, 2]}
        assert renderer.media_type(Product(), {"a": 1}) == "application/json"
        assert renderer.media_type(Product(), "text") == "text/plain; charset=utf-8"

    def test_error(self):
        """Test that errors render as code and reason."""
        error = NotFound("whatever")
        renderer = TextRenderer()
        assert renderer.render(error, {"error": error}) == b"404 Not Found"
        assert renderer.media_type(error, {"error": error}) == "text/plain; charset=utf-8"


class TestTwoStepRenderer:
    """Tests for the Jinja2 two-step renderer."""

    @pytest.fixture
    def renderer(self, views_dir) -> TwoStepRenderer:
        return TwoStepRenderer(str(views_dir))

    def test_content_in_layout(self, renderer):
        """Test the two steps together."""
        assert renderer.render(Product(), {"name": "widget"}) == b"<main><h1>widget</h1></main>"

    def test_autoescape(self, renderer):
        """Test that data is escaped but the content is not escaped twice."""
        body = renderer.render(Product(), {"name": "<b>"})
        assert body == b"<main><h1>&lt;b&gt;</h1></main>"

    def test_inherited_view(self, renderer):
        """Test that a subclass falls back to its parent's view."""
        assert renderer.render(Themed(), {"name": "x"}) == b"<h1>x</h1>"

    def test_layout_disabled(self, renderer):
        assert renderer.render(Bare(), {"name": "x"}) == b"<h1>x</h1>"

    def test_nested_layout(self, renderer):
        """Test that the nearest layout wins."""
        body = renderer.render(Admin.Dashboard(), {"greeting": "hi"})
        assert body == b"<admin><p>hi</p></admin>"

    def test_explicit_view(self, renderer):
        body = renderer.render(Explicit(), {"greeting": "hello"})
        assert body == b"<admin><p>hello</p></admin>"

    def test_missing_content_renders_empty_fragment(self, renderer):
        assert renderer.render(Unviewed(), None) == b"<main></main>"

    def test_specific_error_view(self, renderer):
        error = NotFound("no widget")
        assert renderer.render(error, {"error": error}) == b"<main><p>missing: no widget</p></main>"

    def test_generic_error_view(self, renderer):
        error = Conflict()
        assert renderer.render(error, {"error": error}) == b"<main><p>409 Conflict</p></main>"

    def test_non_mapping_data(self):
        """Test that non-mapping data is available as `data`."""
        environment = Environment(loader=DictLoader({"product.html": "{{ data|join(',') }}"}))
        renderer = TwoStepRenderer(environment=environment)
        assert renderer.render(Product(), ["a", "b"]) == b"a,b"

    def test_resource_in_context(self):
        """Test that the subject is available to templates."""
        environment = Environment(loader=DictLoader({"product.html": "{{ resource.path }}"}))
        renderer = TwoStepRenderer(environment=environment)
        assert renderer.render(Product(), {}) == b"/products/:name"

    def test_from_config(self, views_dir):
        """Test that the VIEWS section of RouterConfig builds the renderer."""
        config = RouterConfig(views_dir=str(views_dir), views_package="shop.web", view_extension=".html")
        renderer = TwoStepRenderer.from_config(config)
        assert renderer.resolver.package == "shop.web"
        assert renderer.render(Product(), {"name": "x"}) == b"<main><h1>x</h1></main>"
        assert renderer.render(PackagedDashboard(), {}) == b"<admin></admin>"

    def test_from_config_without_layout(self, views_dir):
        renderer = TwoStepRenderer.from_config(RouterConfig(views_dir=str(views_dir), layout=None))
        assert renderer.render(Product(), {"name": "x"}) == b"<h1>x</h1>"

    def test_media_type(self, renderer):
        assert renderer.media_type(Product(), {}) == "text/html; charset=utf-8"

    def test_redirect_subject_with_no_views(self):
        """Test that any HTTPError subclass resolves through http_error.html."""
        environment = Environment(loader=DictLoader({"http_error.html": "{{ error.code }}"}))
        renderer = TwoStepRenderer(environment=environment)
        error = SeeOther("/a")
        assert renderer.render(error, {"error": error}) == b"303"
