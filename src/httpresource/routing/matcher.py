"""
Route matching: apply a compiled template to a request path.

A failed match is not an error. It returns None, and the route table simply
moves on to the next route.
"""

from typing import Dict, Optional, Union
from urllib.parse import unquote

from .template import CompiledTemplate, compile_template


MatchResult = Dict[str, str]


def match(compiled: Union[CompiledTemplate, str], path: str) -> Optional[MatchResult]:
    """
    Match a path against a compiled template.

    Only placeholders that took part in the match are returned, so an
    optional group that was absent contributes no keys at all. Each value
    is percent-decoded on its own, after matching.

    Note that a successful match of a template without placeholders is an
    empty dict, which is falsy: test the result with `is None`.

    Args:
        compiled: A CompiledTemplate (a template string is compiled first)
        path: Absolute request path, still percent-encoded

    Returns:
        {placeholder name: decoded value}, or None when the path does not match

    Example:
        >>> match(compile_template("/a(/*)"), "/a/x/y")
        {'rest': 'x/y'}
        >>> match(compile_template("/a(/*)"), "/a")
        {}
        >>> match(compile_template("/a/*"), "/a") is None
        True
    """
    if isinstance(compiled, str):
        compiled = compile_template(compiled)

    found = compiled.pattern.match(path)
    if found is None:
        return None

    params: MatchResult = {}
    for index, name in enumerate(compiled.placeholders):
        value = found.group(f"p{index}")
        if value is not None:
            params[name] = unquote(value)
    return params
