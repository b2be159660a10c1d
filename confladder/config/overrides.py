"""
Override Applier
================

Applies environment-variable overrides described by the ``env`` file.

The override tree mirrors the configuration tree; each of its leaves names
an environment variable. When that variable is set, its raw string value
replaces the configuration value at the same path::

    # env.yml
    database:
      host: DB_HOST
      replicas:
        - REPLICA_0

With ``DB_HOST=db.internal`` exported, ``database.host`` becomes
``"db.internal"``. Unset variables leave the file-derived value alone.
Intermediate containers must already exist in the merged tree; only the
final key of a mapping may be new.
"""

import os
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union
import logging

from .accessor import is_index
from .errors import InvalidOverrideError, PathNotFoundError, format_path

logger = logging.getLogger(__name__)

Segment = Union[str, int]


def iter_override_leaves(node: Any, path: Optional[List[Segment]] = None) -> Iterator[Tuple[List[Segment], str]]:
    """
    Walk every leaf of an override tree.

    Args:
        node: Override tree (or subtree)
        path: Segments leading to ``node``

    Yields:
        ``(path, variable_name)`` pairs

    Raises:
        InvalidOverrideError: If a leaf is not a string
    """
    path = path or []

    if isinstance(node, dict):
        for key, value in node.items():
            yield from iter_override_leaves(value, path + [key])
    elif isinstance(node, list):
        for index, value in enumerate(node):
            yield from iter_override_leaves(value, path + [index])
    elif isinstance(node, str):
        yield path, node
    else:
        raise InvalidOverrideError(path, node)


def _index(container: list, segment: Segment, path: List[Segment]) -> int:
    if isinstance(segment, int):
        index = segment
    elif isinstance(segment, str) and is_index(segment):
        index = int(segment)
    else:
        raise PathNotFoundError(path, f"'{segment}' is not a sequence index")
    if not 0 <= index < len(container):
        raise PathNotFoundError(path, f"index {index} out of range")
    return index


def _step(node: Any, segment: Segment, path: List[Segment]) -> Any:
    if isinstance(node, dict):
        key = str(segment)
        if key not in node:
            raise PathNotFoundError(path, f"missing key '{key}'")
        return node[key]
    if isinstance(node, list):
        return node[_index(node, segment, path)]
    raise PathNotFoundError(path, f"cannot descend into {type(node).__name__}")


def set_path(tree: Dict[str, Any], path: List[Segment], value: Any):
    """
    Overwrite the value at ``path`` in ``tree``.

    Numeric segments addressing a list are treated as indices. Missing
    intermediate containers are not created.

    Raises:
        PathNotFoundError: If the path does not exist up to its last segment
    """
    if not path:
        raise PathNotFoundError(path, "empty override path")

    node: Any = tree
    for segment in path[:-1]:
        node = _step(node, segment, path)

    last = path[-1]
    if isinstance(node, dict):
        node[str(last)] = value
    elif isinstance(node, list):
        node[_index(node, last, path)] = value
    else:
        raise PathNotFoundError(path, f"cannot set a key on {type(node).__name__}")


def apply_overrides(
    tree: Dict[str, Any],
    override_tree: Dict[str, Any],
    environ: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """
    Apply environment-variable overrides to a merged tree in place.

    Args:
        tree: Merged configuration tree
        override_tree: Parsed ``env`` file
        environ: Environment to read from (defaults to ``os.environ``)

    Returns:
        The mutated ``tree``

    Raises:
        InvalidOverrideError: If an override leaf is not a string
        PathNotFoundError: If an override path does not exist in ``tree``
    """
    environ = os.environ if environ is None else environ
    applied = 0

    for path, variable in iter_override_leaves(override_tree):
        if variable not in environ:
            logger.debug(f"Override {variable} not set, keeping '{format_path(path)}'")
            continue
        set_path(tree, path, environ[variable])
        applied += 1
        logger.info(f"Applied override {variable} -> '{format_path(path)}'")

    logger.debug(f"Applied {applied} environment override(s)")
    return tree
