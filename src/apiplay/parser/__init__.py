"""OpenAPI document parser -- load, resolve ``$ref`` pointers, and extract endpoints.

This sub-package turns a raw OpenAPI 3.x document (JSON or YAML, local file,
remote URL or stdin) into a read-only :class:`~apiplay.models.ParsedSpec`.

Typical usage::

    from apiplay.parser import (
        extract_spec,
        group_endpoints_by_tag,
        load_spec,
        validate_openapi_version,
    )

    raw = load_spec("openapi.yaml")
    validate_openapi_version(raw)
    parsed = extract_spec(raw)
    groups = group_endpoints_by_tag(parsed.endpoints, parsed.tags)

Sub-modules:

* :mod:`~apiplay.parser.loader` -- I/O layer (URL, file, stdin, optional
  spec cache) plus format detection and OpenAPI version validation.
* :mod:`~apiplay.parser.nodes` -- Pure accessors over raw document nodes.
* :mod:`~apiplay.parser.resolver` -- Single-pointer ``$ref`` resolution
  with a permissive fallback.
* :mod:`~apiplay.parser.normalizer` -- Recursive schema canonicalization
  with cycle detection.
* :mod:`~apiplay.parser.extractor` -- Builds the
  :class:`~apiplay.models.ParsedSpec`.
* :mod:`~apiplay.parser.grouping` -- Orders endpoints into tag groups.
"""

from apiplay.parser.extractor import extract_endpoints, extract_spec
from apiplay.parser.grouping import group_endpoints_by_tag
from apiplay.parser.loader import load_spec, validate_openapi_version
from apiplay.parser.normalizer import normalize_schema
from apiplay.parser.resolver import resolve_ref

__all__ = [
    "load_spec",
    "validate_openapi_version",
    "extract_spec",
    "extract_endpoints",
    "group_endpoints_by_tag",
    "normalize_schema",
    "resolve_ref",
]
