"""Follow in-document ``$ref`` pointers in OpenAPI specifications.

OpenAPI documents commonly use ``$ref`` pointers (e.g.,
``{"$ref": "#/components/schemas/Pet"}``) to avoid repetition. Unlike a
whole-document inliner, :func:`resolve_ref` follows exactly **one** pointer
on demand; the schema normalizer calls it as it walks a schema and keeps
track of which pointers are already being expanded.

Resolution is permissive: a pointer that leads nowhere (a missing segment,
a ``null`` target, or an external ``other.yaml#/...`` reference) returns the
original node unchanged. A partial spec yields a degraded model instead of
an error.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from apiplay.models import RawNode

logger = logging.getLogger(__name__)

REF_KEY = "$ref"
_LOCAL_PREFIX = "#/"
_MISSING = object()


def is_ref(node: RawNode) -> bool:
    """Return ``True`` if *node* is a mapping carrying a string ``$ref``."""
    return isinstance(node, dict) and isinstance(node.get(REF_KEY), str)


def ref_pointer(node: RawNode) -> Optional[str]:
    """Return the ``$ref`` string of *node*, or ``None`` for a plain node."""
    if is_ref(node):
        return node[REF_KEY]  # type: ignore[index]
    return None


def pointer_segments(pointer: str) -> Optional[list[str]]:
    """Split a local JSON Pointer into unescaped segments.

    Handles RFC 6901 escaping (``~1`` for ``/``, ``~0`` for ``~``).

    Returns:
        The segment list, or ``None`` if *pointer* is not a local
        (``#/...``) reference.
    """
    if not pointer.startswith(_LOCAL_PREFIX):
        return None
    return [
        segment.replace("~1", "/").replace("~0", "~")
        for segment in pointer[len(_LOCAL_PREFIX):].split("/")
    ]


def lookup_pointer(root: RawNode, pointer: str) -> Any:
    """Navigate *root* along *pointer*.

    Mappings are entered by key and lists by integer index.

    Returns:
        The target node, or the module-private ``_MISSING`` sentinel when
        the pointer is external or any segment does not exist. Use
        :func:`resolve_ref` unless you need to tell the two apart.
    """
    segments = pointer_segments(pointer)
    if segments is None:
        return _MISSING

    current: Any = root
    for segment in segments:
        if isinstance(current, dict):
            if segment not in current:
                return _MISSING
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError):
                return _MISSING
        else:
            return _MISSING
    return current


def is_missing(value: Any) -> bool:
    """Return ``True`` if *value* is the sentinel returned for a dead pointer."""
    return value is _MISSING


def resolve_ref(node: RawNode, root: RawNode) -> RawNode:
    """Resolve a single ``$ref`` pointer against *root*.

    Args:
        node: Any raw node. Nodes without a ``$ref`` are returned as-is.
        root: The whole decoded document.

    Returns:
        The referenced node, or *node* itself when the pointer cannot be
        followed or names a ``null`` value.

    Example::

        resolve_ref({"$ref": "#/components/parameters/Limit"}, raw)
        # -> {"name": "limit", "in": "query", ...}
    """
    pointer = ref_pointer(node)
    if pointer is None:
        return node

    target = lookup_pointer(root, pointer)
    if target is _MISSING or target is None:
        logger.debug("Leaving unresolvable $ref %r in place", pointer)
        return node
    return target
