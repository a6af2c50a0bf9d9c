"""Build a :class:`~apiplay.models.ParsedSpec` from a decoded OpenAPI document.

The single public entry point for a whole document is :func:`extract_spec`.
Internally it delegates to helpers that each handle one section of the
OpenAPI structure:

* ``_extract_info`` -- the ``info`` object (title, description, version).
* ``_extract_servers`` -- the ``servers`` array.
* ``_extract_tags`` -- the ``tags`` array, in declaration order.
* :func:`extract_endpoints` -- the ``paths`` object, one
  :class:`~apiplay.models.ParsedEndpoint` per path + supported verb.
* :func:`~apiplay.parser.normalizer.normalize_schemas` --
  ``components.schemas``.

Extraction never raises on malformed content: missing optional fields are
defaulted, bad references fall back to the original node, and unsupported
verbs or parameter locations are skipped.

Unlike a strict OpenAPI reader, path-level and operation-level parameters
are **concatenated**, not merged by ``(name, in)``; a parameter declared at
both levels appears twice.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

from apiplay.models import (
    HTTPMethod,
    ParameterLocation,
    ParsedEndpoint,
    ParsedParameter,
    ParsedRequestBody,
    ParsedResponse,
    ParsedSpec,
    RawNode,
    SpecInfo,
    SpecServer,
    SpecTag,
)
from apiplay.parser.nodes import (
    get_bool,
    get_field,
    get_list,
    get_mapping,
    get_str,
    has_field,
    is_mapping,
)
from apiplay.parser.normalizer import normalize_schema, normalize_schemas
from apiplay.parser.resolver import resolve_ref

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/json"

# Read in this order; anything else on a path item is ignored.
_SUPPORTED_METHODS = ("get", "post", "put", "patch", "delete")
_SKIPPED_METHODS = ("options", "head", "trace")

_NON_ALPHANUMERIC = re.compile(r"[^a-zA-Z0-9]")


def extract_spec(raw_spec: RawNode) -> ParsedSpec:
    """Extract a :class:`~apiplay.models.ParsedSpec` from a decoded document.

    Works uniformly for OpenAPI 3.0 and 3.1 documents. The input is never
    mutated, and calling this twice on the same document yields equal
    results.

    Args:
        raw_spec: The decoded document, as returned by
            :func:`~apiplay.parser.loader.load_spec`.

    Returns:
        A fully populated, reference-free :class:`~apiplay.models.ParsedSpec`.

    Example::

        raw = load_spec("openapi.yaml")
        parsed = extract_spec(raw)
        for endpoint in parsed.endpoints:
            print(endpoint.method.value, endpoint.path)
    """
    openapi_version = get_field(raw_spec, "openapi")
    return ParsedSpec(
        info=_extract_info(get_mapping(raw_spec, "info")),
        servers=_extract_servers(get_list(raw_spec, "servers")),
        tags=_extract_tags(get_list(raw_spec, "tags")),
        endpoints=extract_endpoints(get_mapping(raw_spec, "paths"), raw_spec),
        schemas=normalize_schemas(
            get_mapping(get_mapping(raw_spec, "components"), "schemas"), raw_spec
        ),
        openapi_version=str(openapi_version) if openapi_version is not None else None,
    )


def _extract_info(info: dict[str, Any]) -> SpecInfo:
    version = get_field(info, "version")
    return SpecInfo(
        title=get_str(info, "title") or "API",
        description=get_str(info, "description"),
        version=str(version) if version is not None else "1.0.0",
    )


def _extract_servers(servers: list[Any]) -> list[SpecServer]:
    return [
        SpecServer(
            url=get_str(server, "url") or "/",
            description=get_str(server, "description"),
        )
        for server in servers
        if is_mapping(server)
    ]


def _extract_tags(tags: list[Any]) -> list[SpecTag]:
    result: list[SpecTag] = []
    for tag in tags:
        name = get_field(tag, "name")
        if name is None:
            continue
        result.append(SpecTag(name=str(name), description=get_str(tag, "description")))
    return result


def derive_operation_id(method: str, path: str) -> str:
    """Synthesize an operationId from the verb and path template.

    Every non-alphanumeric character of *path* becomes ``_``; the result
    depends only on ``(method, path)``.

    Example::

        derive_operation_id("get", "/wallets/{address}")
        # -> "get__wallets__address_"
    """
    return f"{method.lower()}_{_NON_ALPHANUMERIC.sub('_', path)}"


def extract_endpoints(paths: dict[str, Any], root: RawNode) -> list[ParsedEndpoint]:
    """Walk the ``paths`` object and build one endpoint per supported verb.

    Args:
        paths: The document's ``paths`` mapping (path template to path item).
        root: The whole decoded document, for ``$ref`` resolution.

    Returns:
        Endpoints in path declaration order, and within a path in the order
        GET, POST, PUT, PATCH, DELETE. Operation ids are unique: a repeated
        id gets a numeric suffix.
    """
    endpoints: list[ParsedEndpoint] = []
    seen_ids: dict[str, int] = {}

    for path, raw_item in paths.items():
        path = str(path)
        path_item = resolve_ref(raw_item, root)
        if not is_mapping(path_item):
            continue

        for method in _SKIPPED_METHODS:
            if has_field(path_item, method):
                logger.debug("Skipping unsupported %s operation on %s", method.upper(), path)

        path_params = get_list(path_item, "parameters")

        for method in _SUPPORTED_METHODS:
            operation = get_field(path_item, method)
            if not is_mapping(operation):
                continue

            operation_id = _unique_operation_id(
                get_str(operation, "operationId") or derive_operation_id(method, path),
                seen_ids,
            )
            tags = [str(tag) for tag in get_list(operation, "tags")]

            endpoints.append(
                ParsedEndpoint(
                    operation_id=operation_id,
                    method=HTTPMethod(method.upper()),
                    path=path,
                    summary=get_str(operation, "summary"),
                    description=get_str(operation, "description"),
                    tags=tags,
                    deprecated=get_bool(operation, "deprecated", False),
                    parameters=_extract_parameters(
                        [*path_params, *get_list(operation, "parameters")], root
                    ),
                    request_body=_extract_request_body(
                        get_field(operation, "requestBody"), root
                    ),
                    responses=_extract_responses(get_mapping(operation, "responses"), root),
                )
            )

    return endpoints


def _unique_operation_id(candidate: str, seen_ids: dict[str, int]) -> str:
    count = seen_ids.get(candidate, 0) + 1
    seen_ids[candidate] = count
    if count == 1:
        return candidate

    unique = f"{candidate}_{count}"
    while unique in seen_ids:
        count += 1
        unique = f"{candidate}_{count}"
    seen_ids[candidate] = count
    seen_ids[unique] = 1
    logger.warning("Duplicate operationId %r renamed to %r", candidate, unique)
    return unique


def _extract_parameters(raw_params: list[Any], root: RawNode) -> list[ParsedParameter]:
    """Resolve and convert raw parameter objects, preserving order and duplicates."""
    parameters: list[ParsedParameter] = []

    for raw in raw_params:
        param = resolve_ref(raw, root)
        if not is_mapping(param):
            continue

        try:
            location = ParameterLocation(get_field(param, "in"))
        except ValueError:
            logger.debug("Skipping parameter %r with unknown location", get_field(param, "name"))
            continue

        parameters.append(
            ParsedParameter(
                name=str(get_field(param, "name", "")),
                location=location,
                required=get_bool(param, "required", False),
                description=get_str(param, "description"),
                schema=normalize_schema(get_field(param, "schema", {}), root),
                example=get_field(param, "example"),
            )
        )

    return parameters


def _extract_request_body(raw_body: Any, root: RawNode) -> Optional[ParsedRequestBody]:
    """Convert an operation's ``requestBody``; ``None`` when none is declared.

    The first content type in declaration order wins. An empty ``content``
    map defaults to ``application/json`` with an empty schema.
    """
    if not is_mapping(raw_body):
        return None

    body = resolve_ref(raw_body, root)
    content = get_mapping(body, "content")
    content_type = str(next(iter(content), DEFAULT_CONTENT_TYPE))
    media_type = get_field(content, content_type, {})

    return ParsedRequestBody(
        required=get_bool(body, "required", False),
        description=get_str(body, "description"),
        content_type=content_type,
        schema=normalize_schema(get_field(media_type, "schema", {}), root),
    )


def _extract_responses(responses: dict[Any, Any], root: RawNode) -> list[ParsedResponse]:
    """Convert the ``responses`` map in its own iteration order (not sorted)."""
    result: list[ParsedResponse] = []

    for status_code, raw_response in responses.items():
        response = resolve_ref(raw_response, root)
        content = get_mapping(response, "content")
        content_type = next(iter(content), None)

        schema = None
        if content_type is not None:
            media_type = content[content_type]
            if has_field(media_type, "schema"):
                schema = normalize_schema(media_type["schema"], root)

        result.append(
            ParsedResponse(
                status_code=str(status_code),
                description=get_str(response, "description"),
                content_type=str(content_type) if content_type is not None else None,
                schema=schema,
            )
        )

    return result
