"""
=============================================================================
LINK GENERATION (REVERSE ROUTING)
=============================================================================

Builds a path for a known template from an ordered list of values, the
inverse of matching:

    link("/products/:name(.:format)", "widget")         → /products/widget
    link("/products/:name(.:format)", "widget", "json") → /products/widget.json
    link("/files/*", "a", "b", "c.txt")                 → /files/a/b/c.txt

=============================================================================
BINDING RULES
=============================================================================

1. Values are bound POSITIONALLY, left to right, to the placeholders in
   template order. Names are never consulted, so callers pass arguments in
   the order the template declares them.

2. Values left over once every placeholder is bound are joined with "/"
   and appended to the wildcard's value. Without a wildcard, leftovers are
   an error:

       link("/a/:b", "x", "y")  → LinkError("cannot match var pattern for y")

3. An optional group none of whose placeholders got a value is dropped;
   the parentheses of every other group are removed:

       "/:controller(/:action(/:id))" with ("one", "two")
           → /one/two         (the "(/:id)" group is dropped)

4. A placeholder still unbound after that is an error:

       link("/a/:b/:c", "x") → LinkError("incomplete link: /a/x/:c")

5. A named placeholder never takes an empty value; the wildcard may:

       link("/products/:name", "") → LinkError("cannot match var pattern for ''")
       link("/files/*", "")        → /files/

Values are percent-encoded so the result always matches its own template
and decodes back to the original values. A named placeholder cannot hold
"/" or ".", so both are encoded; the wildcard keeps "/" as is.

=============================================================================
"""

from itertools import count
from typing import Any, Dict, Iterator, Tuple, Union
from urllib.parse import quote

from ..errors import LinkError
from .template import CompiledTemplate, Group, Literal, Node, compile_template, iter_placeholders


def _encode(value: Any, wildcard: bool) -> str:
    if wildcard:
        return quote(str(value), safe="/")
    return quote(str(value), safe="").replace(".", "%2E")


def _render(
    nodes: Tuple[Node, ...],
    bound: Dict[int, str],
    counter: Iterator[int],
) -> Tuple[str, int, int]:
    """
    Render nodes, dropping optional groups that received no value.

    Returns (text, number of bound placeholders, number of unbound ones)
    for what was kept.
    """
    text = []
    bound_count = unbound_count = 0

    for node in nodes:
        if isinstance(node, Literal):
            text.append(node.text)
        elif isinstance(node, Group):
            inner, inner_bound, inner_unbound = _render(node.children, bound, counter)
            if inner_bound == 0 and inner_unbound > 0:
                continue  # nothing supplied for this group: drop it
            text.append(inner)
            bound_count += inner_bound
            unbound_count += inner_unbound
        else:
            index = next(counter)
            if index in bound:
                text.append(bound[index])
                bound_count += 1
            else:
                text.append(node.marker)
                unbound_count += 1

    return "".join(text), bound_count, unbound_count


def link(template: Union[CompiledTemplate, str], *values: Any) -> str:
    """
    Substitute values into a template.

    Args:
        template: Route template (or its compiled form)
        *values: Values in placeholder order; converted with str()

    Returns:
        The path

    Raises:
        LinkError: If a value has nowhere to go, or a required
                   placeholder is left without a value.
    """
    compiled = compile_template(template) if isinstance(template, str) else template
    slots = list(iter_placeholders(compiled.nodes))
    wildcards = [index for index, slot in enumerate(slots) if slot.wildcard]

    bound: Dict[int, str] = {}
    for position, value in enumerate(values):
        if position < len(slots):
            wildcard = slots[position].wildcard
            # A named segment matches one or more characters
            if not wildcard and str(value) == "":
                raise LinkError(f"cannot match var pattern for {value!r}")
            bound[position] = _encode(value, wildcard)
            continue

        # Out of placeholders: the leftovers belong to the wildcard
        if not wildcards:
            raise LinkError(f"cannot match var pattern for {value}")
        rest = wildcards[-1]
        leftovers = [_encode(extra, True) for extra in values[position:]]
        bound[rest] = "/".join([bound[rest], *leftovers])
        break

    result, _, unbound = _render(compiled.nodes, bound, count())
    if unbound:
        raise LinkError(f"incomplete link: {result}")
    return result
