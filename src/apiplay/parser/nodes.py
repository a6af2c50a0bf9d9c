"""Pure accessors over raw OpenAPI document nodes.

The loader hands the parser an untyped tree of dicts, lists and scalars
(:data:`~apiplay.models.RawNode`). Every read the parser performs goes
through these helpers so that a field holding the wrong kind of value
(a list where a mapping was expected, a number where a string was
expected) degrades to "absent" instead of raising.
"""

from __future__ import annotations

from typing import Any, Optional

from apiplay.models import RawNode

_ABSENT = object()


def is_mapping(node: RawNode) -> bool:
    return isinstance(node, dict)


def has_field(node: RawNode, key: str) -> bool:
    """Return ``True`` if *node* is a mapping that declares *key*."""
    return isinstance(node, dict) and key in node


def get_field(node: RawNode, key: str, default: Any = None) -> Any:
    """Return ``node[key]`` when *node* is a mapping holding *key*, else *default*."""
    if isinstance(node, dict):
        value = node.get(key, _ABSENT)
        if value is not _ABSENT:
            return value
    return default


def get_mapping(node: RawNode, key: str) -> dict[str, Any]:
    """Return the mapping stored under *key*, or an empty dict."""
    value = get_field(node, key)
    return value if isinstance(value, dict) else {}


def get_list(node: RawNode, key: str) -> list[Any]:
    """Return the list stored under *key*, or an empty list."""
    value = get_field(node, key)
    return value if isinstance(value, list) else []


def get_str(node: RawNode, key: str) -> Optional[str]:
    """Return the string stored under *key*, or ``None``."""
    value = get_field(node, key)
    return value if isinstance(value, str) else None


def get_bool(node: RawNode, key: str, default: bool = False) -> bool:
    """Return the boolean stored under *key*, or *default* for anything else.

    Strings such as ``"false"`` are not coerced.
    """
    value = get_field(node, key)
    return value if isinstance(value, bool) else default
