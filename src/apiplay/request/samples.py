"""Synthesize representative JSON values from canonical schemas.

Sample bodies are deliberately over-inclusive: every declared property is
filled in, required or not, so the user can delete what they do not need.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Optional

from apiplay.models import ParsedEndpoint, SchemaObject


def build_sample_body(schema: SchemaObject, now: Optional[datetime] = None) -> Any:
    """Build a sample JSON value for *schema*.

    Total for any :class:`~apiplay.models.SchemaObject`: the untyped schema
    yields ``None``.

    Args:
        schema: A normalized schema.
        now: Clock value used for ``date`` and ``date-time`` strings.
            Defaults to the current UTC time.

    Returns:
        A JSON-serializable value.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    return _sample(schema, now)


def _sample(schema: SchemaObject, now: datetime) -> Any:
    if schema.is_set("example"):
        return schema.example

    schema_type = schema.type
    if schema_type is None and schema.properties is not None:
        schema_type = "object"

    if schema_type == "object":
        return {name: _sample(prop, now) for name, prop in (schema.properties or {}).items()}

    if schema_type == "array":
        return [_sample(schema.items, now)] if schema.items is not None else []

    if schema_type == "string":
        if schema.enum:
            return schema.enum[0]
        if schema.format == "date-time":
            return _iso_timestamp(now)
        if schema.format == "date":
            return _iso_timestamp(now).split("T")[0]
        if schema.is_set("default"):
            return schema.default
        return ""

    if schema_type in ("integer", "number"):
        if schema.is_set("default"):
            return schema.default
        if schema.minimum is not None:
            return schema.minimum
        return 0

    if schema_type == "boolean":
        return schema.default if schema.default is not None else False

    return schema.default


def _iso_timestamp(now: datetime) -> str:
    """Format *now* like ``2024-01-31T09:30:00.000Z`` (UTC, millisecond precision)."""
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def default_body_text(endpoint: ParsedEndpoint, now: Optional[datetime] = None) -> str:
    """Return the pre-filled body text for *endpoint*.

    Empty when the endpoint declares no request body; otherwise the sample
    body serialized as 2-space indented JSON.
    """
    if endpoint.request_body is None:
        return ""
    sample = build_sample_body(endpoint.request_body.schema_, now)
    return json.dumps(sample, indent=2, ensure_ascii=False, default=str)
