"""Load OpenAPI documents from a URL, local file, or stdin.

This is the only part of the parser that performs I/O. It decodes JSON or
YAML into a plain dictionary (the raw node tree the rest of the parser
reads) and checks that the document declares OpenAPI 3.x.

Unlike the extractor, the loader does raise: a document that cannot be
read or decoded at all is reported as
:class:`~apiplay.exceptions.SpecParseError`.
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import httpx
import yaml

from apiplay.cache import SpecCache
from apiplay.exceptions import SpecParseError

logger = logging.getLogger(__name__)

_URL_PREFIXES = ("http://", "https://")


def load_spec(
    source: str,
    timeout: float = 30.0,
    cache: Optional[SpecCache] = None,
) -> dict[str, Any]:
    """Load an OpenAPI document from URL, file path, or stdin (``-``).

    Args:
        source: An ``http(s)://`` URL, a file path, or ``-`` for stdin.
        timeout: Seconds to wait when fetching a URL.
        cache: Optional cache consulted before, and filled after, fetching
            a URL. Files and stdin bypass it.

    Returns:
        The decoded document as a dictionary.

    Raises:
        SpecParseError: If the source cannot be read or decoded.
    """
    logger.debug("Loading spec from %s", source)
    if source == "-":
        return _parse_content(sys.stdin.read(), hint="", origin="stdin")
    if source.startswith(_URL_PREFIXES):
        return _load_from_url(source, timeout, cache)
    return _load_from_file(Path(source))


def _load_from_url(url: str, timeout: float, cache: Optional[SpecCache]) -> dict[str, Any]:
    cached = cache.get(url) if cache is not None else None
    if cached is not None:
        text, content_type = cached
        return _parse_content(text, hint=_content_type_hint(content_type), origin=url)

    try:
        response = httpx.get(url, timeout=timeout, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise SpecParseError(
            f"HTTP {exc.response.status_code} fetching spec from {url}"
        ) from exc
    except httpx.RequestError as exc:
        raise SpecParseError(f"Failed to fetch spec from {url}: {exc}") from exc

    content_type = response.headers.get("content-type", "")
    document = _parse_content(response.text, hint=_content_type_hint(content_type), origin=url)
    if cache is not None:
        cache.set(url, response.text, content_type)
    return document


def _content_type_hint(content_type: str) -> str:
    if "json" in content_type:
        return "json"
    if "yaml" in content_type or "yml" in content_type:
        return "yaml"
    return ""


def _load_from_file(path: Path) -> dict[str, Any]:
    if not path.is_file():
        raise SpecParseError(f"Spec file not found: {path}")
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SpecParseError(f"Failed to read spec file {path}: {exc}") from exc

    suffix = path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"
    return _parse_content(content, hint=hint, origin=str(path))


def _parse_content(content: str, hint: str = "", origin: str = "input") -> dict[str, Any]:
    """Decode *content* as JSON or YAML.

    JSON is tried first unless *hint* says YAML: valid JSON is also valid
    YAML, but the JSON decoder is stricter and faster. A ``json`` hint
    disables the YAML fallback.

    Raises:
        SpecParseError: If the content is empty, cannot be decoded, or
            does not decode to a mapping.
    """
    if not content.strip():
        raise SpecParseError(f"Spec from {origin} is empty")

    json_error: Optional[Exception] = None
    if hint != "yaml":
        try:
            return _require_mapping(json.loads(content), origin)
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise SpecParseError(f"Invalid JSON in {origin}: {exc}") from exc
            json_error = exc

    try:
        return _require_mapping(yaml.safe_load(content), origin)
    except yaml.YAMLError as exc:
        msg = f"Failed to parse spec from {origin} as JSON or YAML"
        if json_error:
            msg += f"\n  JSON error: {json_error}"
        msg += f"\n  YAML error: {exc}"
        raise SpecParseError(msg) from exc


def _require_mapping(document: Any, origin: str) -> dict[str, Any]:
    if not isinstance(document, dict):
        kind = type(document).__name__ if document is not None else "empty document"
        raise SpecParseError(f"Spec from {origin} must be a JSON/YAML object (got {kind})")
    return document


def validate_openapi_version(spec: dict[str, Any]) -> str:
    """Validate and return the ``openapi`` version string.

    OpenAPI 3.0.x and 3.1.x are accepted uniformly; later 3.x revisions are
    let through as well.

    Raises:
        SpecParseError: For Swagger 2.x, a missing ``openapi`` field, or a
            non-3.x version.
    """
    if "swagger" in spec:
        raise SpecParseError(
            f"Swagger {spec['swagger']} is not supported. "
            "Only OpenAPI 3.0.x and 3.1.x are supported. "
            "Consider converting with https://converter.swagger.io"
        )

    openapi_version = spec.get("openapi")
    if openapi_version is None:
        raise SpecParseError("Missing 'openapi' field. Is this an OpenAPI 3.x document?")

    version = str(openapi_version)
    if not version.startswith("3."):
        raise SpecParseError(
            f"Unsupported OpenAPI version: {version}. "
            "Only OpenAPI 3.0.x and 3.1.x are supported."
        )
    return version
