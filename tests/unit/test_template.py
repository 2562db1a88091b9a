"""
Unit tests for the route template compiler.
"""

import pytest

from httpresource.errors import InvalidTemplate
from httpresource.routing.template import (
    WILDCARD,
    Group,
    Literal,
    Placeholder,
    compile_template,
    parse_template,
)


class TestParseTemplate:
    """Tests for parse_template()."""

    def test_literal_only(self):
        assert parse_template("/products") == (Literal("/products"),)

    def test_placeholder(self):
        assert parse_template("/products/:name") == (
            Literal("/products/"),
            Placeholder("name"),
        )

    def test_placeholder_stops_at_dot(self):
        """A "." ends a placeholder name and stays literal."""
        assert parse_template("/:name.:extension") == (
            Literal("/"),
            Placeholder("name"),
            Literal("."),
            Placeholder("extension"),
        )

    def test_wildcard(self):
        assert parse_template("/a/*") == (
            Literal("/a/"),
            Placeholder(WILDCARD, wildcard=True),
        )

    def test_nested_groups(self):
        nodes = parse_template("/:a(/:b(.:c))")
        assert nodes == (
            Literal("/"),
            Placeholder("a"),
            Group((
                Literal("/"),
                Placeholder("b"),
                Group((Literal("."), Placeholder("c"))),
            )),
        )

    def test_colon_without_name_is_literal(self):
        assert parse_template("/a:/b") == (Literal("/a:/b"),)

    def test_unclosed_group(self):
        with pytest.raises(InvalidTemplate):
            parse_template("/a(/:b")

    def test_unopened_group(self):
        with pytest.raises(InvalidTemplate):
            parse_template("/a/:b)")

    def test_invalid_template_is_value_error(self):
        with pytest.raises(ValueError):
            parse_template("(()")


class TestCompileTemplate:
    """Tests for compile_template()."""

    def test_placeholders_in_template_order(self):
        compiled = compile_template("/:controller(/:action(/:id(.:format)))")
        assert compiled.placeholders == ("controller", "action", "id", "format")

    def test_wildcard_named_rest(self):
        compiled = compile_template("/files(/*)")
        assert compiled.placeholders == ("rest",)
        assert compiled.has_wildcard

    def test_no_wildcard(self):
        assert not compile_template("/a/:b").has_wildcard

    def test_pattern_is_anchored(self):
        compiled = compile_template("/a")
        assert compiled.pattern.match("/a")
        assert compiled.pattern.match("/a/b") is None
        assert compiled.pattern.match("x/a") is None

    def test_literals_are_escaped(self):
        """Regex metacharacters in literals match only themselves."""
        compiled = compile_template("/a+b/:name")
        assert compiled.pattern.match("/a+b/x")
        assert compiled.pattern.match("/aab/x") is None

    def test_optional_groups_do_not_capture(self):
        compiled = compile_template("/a(/:b)")
        assert compiled.pattern.groups == 1

    def test_name_starting_with_digit(self):
        compiled = compile_template("/:1st")
        assert compiled.placeholders == ("1st",)
        assert compiled.pattern.match("/x")

    def test_repeated_name_compiles(self):
        compiled = compile_template("/:a/:a")
        assert compiled.placeholders == ("a", "a")

    def test_deterministic(self):
        first = compile_template("/products/:name(.:format)")
        second = compile_template("/products/:name(.:format)")
        assert first.pattern.pattern == second.pattern.pattern
        assert first.placeholders == second.placeholders

    def test_invalid_template(self):
        with pytest.raises(InvalidTemplate):
            compile_template("/a((/:b)")
