"""
=============================================================================
ROUTE TEMPLATE COMPILER
=============================================================================

Turns a route template into an anchored regular expression plus the ordered
list of placeholder names it captures.

=============================================================================
TEMPLATE SYNTAX
=============================================================================

    /products/:name(.:format)
    ───────── ───── ─────────
        │       │       └── optional group: may be absent as a whole
        │       └────────── placeholder: one or more chars, no "/" or "."
        └────────────────── literal: must match exactly

    /files(/*)
           ──┬
             └── wildcard: the rest of the path (lazy, may be empty),
                 captured under the name "rest"

Groups nest, and an inner group may be absent while the outer one is
present:

    /:controller(/:action(/:id(.:format)))

        /one             → {controller: one}
        /one/two         → {controller: one, action: two}
        /one/two/3.xml   → {controller: one, action: two, id: 3, format: xml}
        /one/two/3/4     → no match

=============================================================================
COMPILATION
=============================================================================

The template is scanned ONCE, left to right, into a small tree of nodes.
Both the regex compiler and the link generator walk that tree, so neither
has to re-parse the template with string substitutions (where a later
rewrite could corrupt what an earlier one produced):

    "/a(/:b)"
        │ parse_template()
        ▼
    (Literal("/a"), Group((Literal("/"), Placeholder("b"))))
        │ compile_template()
        ▼
    \\A/a(?:/(?P<p0>[^/.]+))?\\Z        placeholders = ("b",)

Capture groups are numbered p0, p1, ... rather than named after the
placeholder, so any name the template uses (even one starting with a digit,
or used twice) compiles to a valid expression. Optional groups are
non-capturing, which is why no positional capture ever shows up in a match.

=============================================================================
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import List, Tuple, Union
import re
import string

from ..errors import InvalidTemplate


# Characters allowed in a placeholder name (":name")
NAME_CHARS = frozenset(string.ascii_letters + string.digits + "_")

# Name under which the wildcard is captured
WILDCARD = "rest"

# A placeholder matches one path segment up to the next "/" or "."
SEGMENT_PATTERN = r"[^/.]+"

# The wildcard matches the remainder of the path, lazily
WILDCARD_PATTERN = r".*?"


# =============================================================================
# TEMPLATE NODES
# =============================================================================

@dataclass(frozen=True)
class Literal:
    text: str


@dataclass(frozen=True)
class Placeholder:
    name: str
    wildcard: bool = False

    @property
    def marker(self) -> str:
        """How the placeholder is spelled in the template (":id" or "*")."""
        return "*" if self.wildcard else f":{self.name}"


@dataclass(frozen=True)
class Group:
    """A parenthesized, optional sub-template."""
    children: Tuple["Node", ...]


Node = Union[Literal, Placeholder, Group]


@dataclass(frozen=True)
class CompiledTemplate:
    """
    The compiled form of a route template.

    Attributes:
        template:     The source template string
        pattern:      Anchored, case-sensitive regular expression
        placeholders: Placeholder names in template order; the capture
                      group for placeholders[i] is named "p<i>"
        nodes:        The parsed template, used by the link generator
    """

    template: str
    pattern: "re.Pattern[str]"
    placeholders: Tuple[str, ...]
    nodes: Tuple[Node, ...]

    @property
    def has_wildcard(self) -> bool:
        return any(p.wildcard for p in iter_placeholders(self.nodes))


# =============================================================================
# PARSING
# =============================================================================

def parse_template(template: str) -> Tuple[Node, ...]:
    """
    Parse a template into a tuple of nodes.

    Raises:
        InvalidTemplate: If "(" and ")" do not balance.
    """
    stack: List[List[Node]] = [[]]
    literal: List[str] = []

    def flush() -> None:
        if literal:
            stack[-1].append(Literal("".join(literal)))
            literal.clear()

    position = 0
    length = len(template)
    while position < length:
        char = template[position]

        if char == "(":
            flush()
            stack.append([])

        elif char == ")":
            flush()
            if len(stack) == 1:
                raise InvalidTemplate(
                    f"unbalanced ')' at position {position} in {template!r}"
                )
            children = stack.pop()
            stack[-1].append(Group(tuple(children)))

        elif char == ":" and position + 1 < length and template[position + 1] in NAME_CHARS:
            flush()
            end = position + 1
            while end < length and template[end] in NAME_CHARS:
                end += 1
            stack[-1].append(Placeholder(template[position + 1:end]))
            position = end
            continue

        elif char == "*":
            flush()
            stack[-1].append(Placeholder(WILDCARD, wildcard=True))

        else:
            # Everything else, "." included, is literal text
            literal.append(char)

        position += 1

    flush()
    if len(stack) != 1:
        raise InvalidTemplate(f"unclosed '(' in {template!r}")
    return tuple(stack[0])


def iter_placeholders(nodes: Tuple[Node, ...]):
    """Yield every Placeholder in template (left-to-right) order."""
    for node in nodes:
        if isinstance(node, Placeholder):
            yield node
        elif isinstance(node, Group):
            yield from iter_placeholders(node.children)


# =============================================================================
# COMPILATION
# =============================================================================

def _to_regex(nodes: Tuple[Node, ...], names: List[str]) -> str:
    parts = []
    for node in nodes:
        if isinstance(node, Literal):
            parts.append(re.escape(node.text))
        elif isinstance(node, Placeholder):
            group = f"p{len(names)}"
            names.append(node.name)
            body = WILDCARD_PATTERN if node.wildcard else SEGMENT_PATTERN
            parts.append(f"(?P<{group}>{body})")
        else:
            parts.append(f"(?:{_to_regex(node.children, names)})?")
    return "".join(parts)


@lru_cache(maxsize=512)
def compile_template(template: str) -> CompiledTemplate:
    """
    Compile a route template.

    Pure and deterministic: the same template always produces an
    equivalent CompiledTemplate (and, thanks to the cache, usually the
    very same object).

    Args:
        template: Route template, e.g. "/products/:name(.:format)"

    Returns:
        The CompiledTemplate

    Raises:
        InvalidTemplate: If optional groups are unbalanced.

    Example:
        >>> compiled = compile_template("/:file(.:format)")
        >>> compiled.placeholders
        ('file', 'format')
    """
    nodes = parse_template(template)
    names: List[str] = []
    expression = _to_regex(nodes, names)
    pattern = re.compile(rf"\A{expression}\Z", re.DOTALL)
    return CompiledTemplate(
        template=template,
        pattern=pattern,
        placeholders=tuple(names),
        nodes=nodes,
    )
