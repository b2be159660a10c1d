"""
Format Parsers
==============

Maps file extensions to parsers turning raw bytes into a configuration tree
(dicts, lists and scalars). The registry order doubles as the extension
precedence used when a directory holds several files with the same basename.
"""

import json
import logging
from collections import OrderedDict
from typing import Any, Callable, Dict

import hjson
import json5
import toml
import yaml

from .accessor import flatten_tree

logger = logging.getLogger(__name__)

Parser = Callable[[bytes], Dict[str, Any]]


def _decode(content: bytes) -> str:
    return content.decode('utf-8')


def normalize_tree(node: Any) -> Any:
    """Convert parser output to plain dicts/lists with string keys."""
    if isinstance(node, dict):
        return {_normalize_key(k): normalize_tree(v) for k, v in node.items()}
    if isinstance(node, (list, tuple)):
        return [normalize_tree(v) for v in node]
    return node


def _normalize_key(key: Any) -> str:
    if isinstance(key, bool):
        return 'true' if key else 'false'
    return str(key)


def _as_mapping(data: Any) -> Dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Top-level value must be a mapping, got {type(data).__name__}")
    return normalize_tree(data)


def parse_yaml(content: bytes) -> Dict[str, Any]:
    return _as_mapping(yaml.safe_load(_decode(content)))


def parse_json(content: bytes) -> Dict[str, Any]:
    text = _decode(content)
    if not text.strip():
        return {}
    return _as_mapping(json.loads(text))


def parse_json5(content: bytes) -> Dict[str, Any]:
    text = _decode(content)
    if not text.strip():
        return {}
    return _as_mapping(json5.loads(text))


def parse_hjson(content: bytes) -> Dict[str, Any]:
    text = _decode(content)
    if not text.strip():
        return {}
    return _as_mapping(hjson.loads(text))


def parse_toml(content: bytes) -> Dict[str, Any]:
    return _as_mapping(toml.loads(_decode(content)))


# Insertion order is the extension precedence
DEFAULT_PARSERS: Dict[str, Parser] = OrderedDict([
    ('.yaml', parse_yaml),
    ('.yml', parse_yaml),
    ('.json', parse_json),
    ('.json5', parse_json5),
    ('.hjson', parse_hjson),
    ('.toml', parse_toml),
])


def serialize(tree: Dict[str, Any], extension: str) -> str:
    """
    Render a configuration tree in the format of the given extension.

    Args:
        tree: Configuration tree
        extension: Target extension, with or without the leading dot

    Returns:
        Serialized document

    Note:
        TOML has no null. Keys holding ``None`` are left out of the TOML
        output and a warning names them.
    """
    ext = extension.lower()
    if not ext.startswith('.'):
        ext = f".{ext}"

    if ext in ('.yaml', '.yml'):
        return yaml.safe_dump(tree, default_flow_style=False, sort_keys=False)
    elif ext == '.json':
        return json.dumps(tree, indent=2, default=str)
    elif ext == '.json5':
        return json5.dumps(tree, indent=2, default=str)
    elif ext == '.hjson':
        return hjson.dumps(tree, default=str)
    elif ext == '.toml':
        nulls = [path for path, value in flatten_tree(tree).items() if value is None]
        if nulls:
            logger.warning(f"TOML cannot represent null, dropping: {', '.join(nulls)}")
        return toml.dumps(tree)
    else:
        raise ValueError(f"Unsupported format: {extension}")
