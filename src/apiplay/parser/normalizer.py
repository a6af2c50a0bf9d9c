"""Convert raw schema nodes into canonical :class:`~apiplay.models.SchemaObject` values.

:func:`normalize_schema` is pure and recursive. References are followed
through :func:`~apiplay.parser.resolver.lookup_pointer` as they are met, so
the result never contains a ``$ref``.

Self-referencing schemas (trees, linked lists) are bounded by a set of
pointers currently being expanded on the recursion stack. Meeting one of
them again yields a shallow placeholder marked ``circular=True`` rather
than recursing. Each branch extends its own copy of the set, so a schema
referenced from two sibling properties is expanded under both.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from apiplay.models import RawNode, SchemaObject
from apiplay.parser.nodes import get_field, get_str, has_field
from apiplay.parser.resolver import (
    REF_KEY,
    is_missing,
    lookup_pointer,
    pointer_segments,
    ref_pointer,
)

logger = logging.getLogger(__name__)

# Values of the wrong kind are dropped so that a sloppy document never
# fails model validation.
_STRING_FIELDS = ("format", "description")
_NUMBER_FIELDS = ("minimum", "maximum")
_VERBATIM_FIELDS = ("default", "example")

_COMPONENT_PREFIX = "#/components/schemas/"


def normalize_schema(
    node: RawNode,
    root: RawNode,
    _expanding: frozenset[str] = frozenset(),
) -> SchemaObject:
    """Normalize a raw schema node into a :class:`~apiplay.models.SchemaObject`.

    Args:
        node: The raw schema (possibly a ``$ref``) from the decoded document.
        root: The whole decoded document, used as the ``$ref`` lookup target.

    Returns:
        A reference-free schema. Non-mapping input and schemas declaring
        neither ``type`` nor ``properties`` come back untyped; callers treat
        those as "unknown/any".
    """
    if not isinstance(node, dict):
        return SchemaObject()

    pointer = ref_pointer(node)
    if pointer is not None:
        if pointer in _expanding:
            logger.debug("Cycle detected at %s; emitting placeholder", pointer)
            return _circular_placeholder(pointer, root)

        target = lookup_pointer(root, pointer)
        if is_missing(target) or target is None:
            logger.debug("Unresolvable schema $ref %r; keeping sibling fields", pointer)
            return _copy_fields({k: v for k, v in node.items() if k != REF_KEY}, root, _expanding)
        return normalize_schema(target, root, _expanding | {pointer})

    return _copy_fields(node, root, _expanding)


def normalize_schemas(schemas: dict[str, Any], root: RawNode) -> dict[str, SchemaObject]:
    """Normalize every entry of ``components.schemas``, keeping declaration order.

    Each entry counts as being expanded under its own pointer, so a schema
    that refers to itself stops at the first self-reference.
    """
    return {
        str(name): normalize_schema(schema, root, frozenset({_component_pointer(str(name))}))
        for name, schema in schemas.items()
    }


def _component_pointer(name: str) -> str:
    return _COMPONENT_PREFIX + name.replace("~", "~0").replace("/", "~1")


def _copy_fields(
    node: dict[str, Any],
    root: RawNode,
    expanding: frozenset[str],
) -> SchemaObject:
    fields: dict[str, Any] = {}
    for name in _STRING_FIELDS:
        if isinstance(node.get(name), str):
            fields[name] = node[name]
    for name in _NUMBER_FIELDS:
        value = node.get(name)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            fields[name] = value
    for name in _VERBATIM_FIELDS:
        if name in node:
            fields[name] = node[name]
    if isinstance(node.get("nullable"), bool):
        fields["nullable"] = node["nullable"]

    declared_type = node.get("type")
    if isinstance(declared_type, str):
        fields["type"] = declared_type
    elif isinstance(declared_type, list):
        # OpenAPI 3.1: type: ["string", "null"]
        non_null = [t for t in declared_type if t != "null"]
        if non_null:
            fields["type"] = str(non_null[0])
        if "null" in declared_type and "nullable" not in fields:
            fields["nullable"] = True

    if has_field(node, "enum") and isinstance(node["enum"], list):
        fields["enum"] = list(node["enum"])

    if get_field(node, "items") is not None:
        fields["items"] = normalize_schema(node["items"], root, expanding)

    properties = get_field(node, "properties")
    if isinstance(properties, dict):
        fields["properties"] = {
            str(name): normalize_schema(prop, root, expanding)
            for name, prop in properties.items()
        }

    required = get_field(node, "required")
    if isinstance(required, list):
        fields["required"] = [str(name) for name in required]

    return SchemaObject.model_validate(fields)


def _circular_placeholder(pointer: str, root: RawNode) -> SchemaObject:
    target = lookup_pointer(root, pointer)
    segments = pointer_segments(pointer) or [pointer]
    fields: dict[str, Any] = {"title": segments[-1], "circular": True}

    schema_type = _placeholder_type(target)
    if schema_type is not None:
        fields["type"] = schema_type
    description = get_str(target, "description")
    if description is not None:
        fields["description"] = description

    return SchemaObject.model_validate(fields)


def _placeholder_type(target: Any) -> Optional[str]:
    declared = get_field(target, "type")
    if isinstance(declared, str):
        return declared
    if isinstance(declared, list):
        non_null = [t for t in declared if t != "null"]
        if non_null:
            return str(non_null[0])
    if isinstance(get_field(target, "properties"), dict):
        return "object"
    return None
