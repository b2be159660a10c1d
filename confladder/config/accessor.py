"""
Path Accessor
=============

Resolves dotted and bracketed path expressions against a configuration tree.

Supported syntax::

    root.child.leaf
    servers[0].host
    matrix[1][2]
    labels["app.kubernetes.io/name"]
    $.root.child          (optional JSONPath-style root)
"""

import re
from typing import Any, Dict, List, Sequence, Union

from .errors import PathNotFoundError, PathSyntaxError, format_path

Segment = Union[str, int]

_KEY = re.compile(r"[^.\[\]]+")
_INDEX = re.compile(r"[0-9]+")


def is_index(text: str) -> bool:
    """True for an ASCII decimal sequence index such as ``"0"`` or ``"12"``."""
    return _INDEX.fullmatch(text) is not None


def parse_path(expression: str) -> List[Segment]:
    """
    Split a path expression into segments.

    Args:
        expression: Path such as ``a.b[0].c``

    Returns:
        List of mapping keys (str) and sequence indices (int)

    Raises:
        PathSyntaxError: If the expression is empty or malformed
    """
    if not isinstance(expression, str):
        raise PathSyntaxError(repr(expression), "path must be a string")

    text = expression.strip()
    if not text:
        raise PathSyntaxError(expression, "empty path")

    pos = 0
    if text.startswith('$'):
        pos = 1
        if text[pos:pos + 1] == '.':
            pos += 1
            if pos == len(text):
                raise PathSyntaxError(expression, "trailing '.'")

    segments: List[Segment] = []
    while pos < len(text):
        char = text[pos]
        if char == '[':
            pos, segment = _read_bracket(expression, text, pos)
        else:
            if char == '.':
                if not segments:
                    raise PathSyntaxError(expression, "path cannot start with '.'")
                pos += 1
            elif segments:
                raise PathSyntaxError(expression, f"unexpected {char!r} at position {pos}")
            match = _KEY.match(text, pos)
            if match is None:
                raise PathSyntaxError(expression, f"expected a key at position {pos}")
            segment, pos = match.group(0), match.end()
        segments.append(segment)

    return segments


def _read_bracket(expression: str, text: str, pos: int):
    quote = text[pos + 1:pos + 2]
    if quote in ('"', "'"):
        end = text.find(quote, pos + 2)
        if end == -1 or text[end + 1:end + 2] != ']':
            raise PathSyntaxError(expression, f"unterminated quoted key at position {pos}")
        return end + 2, text[pos + 2:end]

    end = text.find(']', pos)
    if end == -1:
        raise PathSyntaxError(expression, f"unterminated '[' at position {pos}")
    inner = text[pos + 1:end].strip()
    if not is_index(inner):
        raise PathSyntaxError(expression, f"index must be a non-negative integer, got {inner!r}")
    return end + 1, int(inner)


def resolve(tree: Any, path: Union[str, Sequence[Segment]]) -> Any:
    """
    Return the value stored at ``path``.

    Raises:
        PathNotFoundError: On a missing key, an out-of-range index or an
            attempt to descend into a scalar
        PathSyntaxError: If ``path`` is a malformed expression
    """
    segments = parse_path(path) if isinstance(path, str) else list(path)
    shown = path if isinstance(path, str) else format_path(segments)

    node = tree
    for segment in segments:
        if isinstance(node, dict):
            if isinstance(segment, int):
                raise PathNotFoundError(shown, f"index [{segment}] applied to a mapping")
            if segment not in node:
                raise PathNotFoundError(shown, f"missing key '{segment}'")
            node = node[segment]
        elif isinstance(node, list):
            if isinstance(segment, str):
                if not is_index(segment):
                    raise PathNotFoundError(shown, f"key '{segment}' applied to a sequence")
                segment = int(segment)
            if not 0 <= segment < len(node):
                raise PathNotFoundError(shown, f"index {segment} out of range")
            node = node[segment]
        else:
            raise PathNotFoundError(shown, f"cannot descend into {type(node).__name__}")

    return node


def flatten_tree(tree: Any, prefix: Sequence[Segment] = ()) -> Dict[str, Any]:
    """
    Flatten a tree into ``{path expression: leaf value}``.

    Empty mappings and sequences are kept as leaves.
    """
    flattened: Dict[str, Any] = {}

    if isinstance(tree, dict) and tree:
        items = tree.items()
    elif isinstance(tree, list) and tree:
        items = enumerate(tree)
    else:
        flattened[format_path(prefix)] = tree
        return flattened

    for key, value in items:
        flattened.update(flatten_tree(value, list(prefix) + [key]))
    return flattened
