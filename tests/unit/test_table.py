"""
Unit tests for the route table.
"""

import pytest

from httpresource import Resource
from httpresource.errors import InvalidTemplate, LinkError
from httpresource.routing import RouteTable


class Home(Resource):
    path = "/"


class NewProduct(Resource):
    path = "/products/new"


class Product(Resource):
    path = "/products/:name(.:format)"


class CatchAll(Resource):
    path = "/*"


class TestRegistration:
    """Tests for RouteTable.add() and friends."""

    def test_add_uses_class_path(self):
        routes = RouteTable()
        route = routes.add(Product)
        assert route.template == "/products/:name(.:format)"
        assert route.resource is Product

    def test_add_with_explicit_path(self):
        routes = RouteTable()
        route = routes.add(Product, "/items/:name")
        assert route.template == "/items/:name"

    def test_base_prefixes_path(self):
        routes = RouteTable()
        route = routes.add(Product, base="/shop")
        assert route.template == "/shop/products/:name(.:format)"
        assert route.match("/shop/products/a") == {"name": "a"}

    def test_constructor_registers_in_order(self):
        routes = RouteTable([Home, Product])
        assert [route.resource for route in routes] == [Home, Product]
        assert len(routes) == 2

    def test_decorator(self):
        routes = RouteTable()

        @routes.resource("/orders/:id")
        class Order(Resource):
            pass

        assert Order.path == "/orders/:id"
        assert routes.lookup("/orders/7").route.resource is Order

    def test_invalid_template_rejected_at_registration(self):
        class Broken(Resource):
            path = "/a(/:b"

        with pytest.raises(InvalidTemplate):
            RouteTable([Broken])

    def test_frozen_table_rejects_routes(self):
        routes = RouteTable([Home]).freeze()
        assert routes.frozen
        with pytest.raises(RuntimeError):
            routes.add(Product)


class TestLookup:
    """Tests for RouteTable.lookup()."""

    def test_first_match_wins(self):
        routes = RouteTable([NewProduct, Product])
        assert routes.lookup("/products/new").route.resource is NewProduct
        assert routes.lookup("/products/old").route.resource is Product

    def test_registration_order_not_specificity(self):
        routes = RouteTable([Product, NewProduct])
        assert routes.lookup("/products/new").route.resource is Product

    def test_params(self):
        routes = RouteTable([Product])
        found = routes.lookup("/products/widget.json")
        assert found.params == {"name": "widget", "format": "json"}

    def test_empty_params_still_match(self):
        routes = RouteTable([Home])
        found = routes.lookup("/")
        assert found is not None
        assert found.params == {}

    def test_falls_through_to_catch_all(self):
        routes = RouteTable([Home, Product, CatchAll])
        found = routes.lookup("/anything/else")
        assert found.route.resource is CatchAll
        assert found.params == {"rest": "anything/else"}

    def test_no_match(self):
        routes = RouteTable([Home, Product])
        assert routes.lookup("/about") is None


class TestReverseRouting:
    """Tests for RouteTable.link()."""

    def test_link(self):
        routes = RouteTable([Product])
        assert routes.link(Product, "widget", "json") == "/products/widget.json"

    def test_link_uses_registered_template(self):
        routes = RouteTable()
        routes.add(Product, base="/shop")
        assert routes.link(Product, "widget") == "/shop/products/widget"

    def test_unregistered_resource(self):
        routes = RouteTable([Home])
        with pytest.raises(LookupError):
            routes.link(Product, "widget")

    def test_bad_values(self):
        routes = RouteTable([Home])
        with pytest.raises(LinkError):
            routes.link(Home, "extra")


class TestDescribe:
    """Tests for RouteTable.describe()."""

    def test_describe(self):
        routes = RouteTable([Home, Product])
        lines = routes.describe().splitlines()
        assert lines[0].split() == ["/", "Home"]
        assert lines[1].split() == ["/products/:name(.:format)", "Product"]

    def test_describe_empty(self):
        assert RouteTable().describe() == ""
