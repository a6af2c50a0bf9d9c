"""Canonical Pydantic models shared across all apiplay modules.

This is the single source of truth for data shapes in the project. The
models fall into three groups:

**Configuration models** -- loaded by :mod:`apiplay.config` and passed
explicitly into the request builder and transport:
    :class:`AuthSettings`, :class:`RequestConfig`, :class:`FeaturesConfig`,
    and :class:`PlaygroundConfig`.

**Parser output models** -- produced once per document load by
:func:`apiplay.parser.extract_spec` and never mutated afterwards:
    :class:`SchemaObject`, :class:`ParsedParameter`,
    :class:`ParsedRequestBody`, :class:`ParsedResponse`,
    :class:`ParsedEndpoint`, :class:`SpecInfo`, :class:`SpecServer`,
    :class:`SpecTag`, :class:`TagGroup`, and :class:`ParsedSpec`.

**Runtime request models** -- filled in by the UI per endpoint selection:
    :class:`RequestState`, :class:`RequestDescriptor`, and
    :class:`ResponseState`.

Parser output models are frozen (``ConfigDict(frozen=True)``). A reload
produces a wholly new :class:`ParsedSpec` rather than patching an old one.
"""

from __future__ import annotations

import enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

RawNode = Union[dict[str, Any], list[Any], str, int, float, bool, None]
"""A node of the decoded OpenAPI document, exactly as the loader produced it."""


# --- Enumerations ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods the playground models.

    Only these five verbs are read from path items; ``options``, ``head``
    and ``trace`` operations are skipped by the extractor.
    """

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


class ParameterLocation(str, enum.Enum):
    """Locations where an API parameter can appear, per OpenAPI ``in`` field."""

    PATH = "path"
    QUERY = "query"
    HEADER = "header"
    COOKIE = "cookie"


class AuthType(str, enum.Enum):
    """Static credential styles the request builder knows how to inject."""

    BEARER = "bearer"
    API_KEY = "apiKey"
    BASIC = "basic"
    NONE = "none"


class SnippetTarget(str, enum.Enum):
    """Calling conventions :mod:`apiplay.request.snippets` can render."""

    CURL = "curl"
    JAVASCRIPT = "javascript"
    PYTHON = "python"


# --- Configuration ---


class AuthSettings(BaseModel):
    """Authentication defaults for the playground.

    Example::

        AuthSettings(type=AuthType.API_KEY, header_name="X-Token")
    """

    type: AuthType = Field(default=AuthType.BEARER, description="Default auth style")
    header_name: str = Field(
        default="X-API-Key", description="Header carrying the token for apiKey auth"
    )
    placeholder: Optional[str] = Field(
        default=None, description="Prompt text shown for the token input"
    )


class RequestConfig(BaseModel):
    """HTTP settings used by the transport clients."""

    timeout: int = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")


class CacheConfig(BaseModel):
    """Cache settings for specs fetched over HTTP."""

    enabled: bool = Field(default=True, description="Cache remote specs on disk")
    ttl_seconds: int = Field(default=3600, description="Cache TTL in seconds")


class FeaturesConfig(BaseModel):
    """Feature toggles for the terminal UI."""

    code_snippets: bool = True
    snippet_languages: list[SnippetTarget] = Field(
        default_factory=lambda: [
            SnippetTarget.CURL,
            SnippetTarget.JAVASCRIPT,
            SnippetTarget.PYTHON,
        ]
    )
    response_headers: bool = True
    try_it: bool = True


class PlaygroundConfig(BaseModel):
    """Top-level playground configuration.

    Loaded by :func:`~apiplay.config.load_config` from ``apiplay.json`` or
    ``apiplay.yaml`` and resolved against the environment and CLI flags by
    :func:`~apiplay.config.resolve_config`. Unknown keys are ignored so
    that config files written for richer front-ends still load.
    """

    model_config = ConfigDict(extra="ignore")

    name: str = "API Playground"
    description: Optional[str] = None
    spec: Optional[str] = Field(
        default=None, description="URL or file path of the OpenAPI document"
    )
    base_url: Optional[str] = Field(
        default=None, description="Override the first server URL from the spec"
    )
    auth: AuthSettings = Field(default_factory=AuthSettings)
    request: RequestConfig = Field(default_factory=RequestConfig)
    features: FeaturesConfig = Field(default_factory=FeaturesConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)


# --- Parser Output Models ---


class SchemaObject(BaseModel):
    """Canonical, ``$ref``-free description of a value's shape.

    Produced by :func:`~apiplay.parser.normalizer.normalize_schema`. Fields
    that were absent from the source document are left unset; use
    :meth:`is_set` to tell "absent" apart from an explicit ``null``,
    ``false`` or ``0``.

    ``title`` and ``circular`` are only populated on the placeholder that
    stands in for a reference already being expanded higher up the tree.
    """

    model_config = ConfigDict(frozen=True)

    type: Optional[str] = None
    format: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    nullable: Optional[bool] = None
    default: Any = None
    example: Any = None
    minimum: Optional[Union[int, float]] = None
    maximum: Optional[Union[int, float]] = None
    enum: Optional[list[Any]] = None
    items: Optional[SchemaObject] = None
    properties: Optional[dict[str, SchemaObject]] = None
    required: Optional[list[str]] = None
    circular: Optional[bool] = None

    def is_set(self, name: str) -> bool:
        """Return ``True`` if *name* was present in the source schema."""
        return name in self.model_fields_set

    def is_untyped(self) -> bool:
        """Return ``True`` for the "unknown/any" schema (no type, no properties)."""
        return self.type is None and self.properties is None


class ParsedParameter(BaseModel):
    """A single operation parameter.

    ``schema`` is exposed through the ``schema`` alias; the attribute is
    ``schema_`` to avoid shadowing :class:`~pydantic.BaseModel` internals.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    location: ParameterLocation
    required: bool = False
    description: Optional[str] = None
    schema_: SchemaObject = Field(default_factory=SchemaObject, alias="schema")
    example: Any = None


class ParsedRequestBody(BaseModel):
    """Request body metadata for an endpoint."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    required: bool = False
    description: Optional[str] = None
    content_type: str = "application/json"
    schema_: SchemaObject = Field(default_factory=SchemaObject, alias="schema")


class ParsedResponse(BaseModel):
    """Response metadata for a single status code entry."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    status_code: str
    description: Optional[str] = None
    content_type: Optional[str] = None
    schema_: Optional[SchemaObject] = Field(default=None, alias="schema")


class ParsedEndpoint(BaseModel):
    """One operation: a path template plus one supported HTTP verb.

    ``parameters`` keeps path-item-level parameters first, then
    operation-level ones, without de-duplicating by name.
    """

    model_config = ConfigDict(frozen=True)

    operation_id: str
    method: HTTPMethod
    path: str
    summary: Optional[str] = None
    description: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    deprecated: bool = False
    parameters: list[ParsedParameter] = Field(default_factory=list)
    request_body: Optional[ParsedRequestBody] = None
    responses: list[ParsedResponse] = Field(default_factory=list)

    def parameters_in(self, location: ParameterLocation) -> list[ParsedParameter]:
        """Return the parameters declared at *location*, in declaration order."""
        return [p for p in self.parameters if p.location == location]


class SpecInfo(BaseModel):
    """API metadata from the document's ``info`` object."""

    model_config = ConfigDict(frozen=True)

    title: str = "API"
    description: Optional[str] = None
    version: str = "1.0.0"


class SpecServer(BaseModel):
    """A ``servers`` entry. The first one is the default base URL."""

    model_config = ConfigDict(frozen=True)

    url: str
    description: Optional[str] = None


class SpecTag(BaseModel):
    """A declared (or synthesized) tag."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: Optional[str] = None


class TagGroup(BaseModel):
    """Endpoints that share the same first tag."""

    model_config = ConfigDict(frozen=True)

    tag: SpecTag
    endpoints: list[ParsedEndpoint]


class ParsedSpec(BaseModel):
    """Complete parsed representation of an OpenAPI document.

    The sole contract between the parsing core and the presentation layer.

    See Also:
        :func:`~apiplay.parser.grouping.group_endpoints_by_tag` for the
        sidebar-style grouping of :attr:`endpoints`.
    """

    model_config = ConfigDict(frozen=True)

    info: SpecInfo = Field(default_factory=SpecInfo)
    servers: list[SpecServer] = Field(default_factory=list)
    tags: list[SpecTag] = Field(default_factory=list)
    endpoints: list[ParsedEndpoint] = Field(default_factory=list)
    schemas: dict[str, SchemaObject] = Field(default_factory=dict)
    openapi_version: Optional[str] = None

    def find_endpoint(self, operation_id: str) -> Optional[ParsedEndpoint]:
        """Return the endpoint with *operation_id*, or ``None``."""
        for endpoint in self.endpoints:
            if endpoint.operation_id == operation_id:
                return endpoint
        return None


# --- Runtime request models ---


class RequestState(BaseModel):
    """User-entered values for the selected endpoint.

    Owned and mutated by the UI; the request builder only reads it.
    """

    path_params: dict[str, str] = Field(default_factory=dict)
    query_params: dict[str, str] = Field(default_factory=dict)
    header_params: dict[str, str] = Field(default_factory=dict)
    body: str = ""
    auth_token: str = ""
    auth_type: AuthType = AuthType.BEARER


class RequestDescriptor(BaseModel):
    """A concrete, executable request handed to the transport."""

    model_config = ConfigDict(frozen=True)

    method: HTTPMethod
    url: str
    headers: dict[str, str] = Field(default_factory=dict)
    body: Optional[str] = None


class ResponseState(BaseModel):
    """What the transport observed. ``status == 0`` means the call never completed."""

    status: int
    status_text: str = ""
    headers: dict[str, str] = Field(default_factory=dict)
    body: str = ""
    duration_ms: int = 0
    size_bytes: int = 0
