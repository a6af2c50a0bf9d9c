"""Turn an endpoint plus user input into a concrete request.

:func:`build_request` is the single source of the URL, header and body
rules; the snippet emitter and the transport both consume its output, so a
previewed snippet always matches what is sent.

Rules:

* Path parameters with a non-empty value replace every ``{name}`` token,
  percent-encoded. Empty values leave the token in the URL; nothing is
  validated at preview time.
* Query parameters with an empty value are dropped; the rest are
  percent-encoded and joined with ``&``.
* Auth headers come first, then ``Content-Type``, then the user's own
  header parameters, which may overwrite either.
* ``GET`` requests never carry a body.
"""

from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import quote

from apiplay.models import (
    AuthSettings,
    AuthType,
    HTTPMethod,
    ParsedEndpoint,
    RequestDescriptor,
    RequestState,
)

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"

# Characters encodeURIComponent leaves alone besides alphanumerics and "_.-~".
_URI_COMPONENT_SAFE = "!*'()"


def encode_component(value: str) -> str:
    """Percent-encode *value* as a single URI component."""
    return quote(value, safe=_URI_COMPONENT_SAFE)


def build_url(base_url: str, endpoint: ParsedEndpoint, state: RequestState) -> str:
    """Return ``base_url`` + substituted path + query string.

    Example::

        build_url("https://api.example.com", endpoint, RequestState(
            path_params={"address": "0xabc"}, query_params={"q": "", "limit": "10"},
        ))
        # -> "https://api.example.com/wallets/0xabc/portfolio?limit=10"
    """
    path = endpoint.path
    for name, value in state.path_params.items():
        if value:
            path = path.replace("{" + name + "}", encode_component(value))

    query = "&".join(
        f"{encode_component(name)}={encode_component(value)}"
        for name, value in state.query_params.items()
        if value != ""
    )
    return f"{base_url}{path}{'?' + query if query else ''}"


def build_headers(
    endpoint: ParsedEndpoint,
    state: RequestState,
    auth: Optional[AuthSettings] = None,
) -> dict[str, str]:
    """Assemble request headers for *endpoint*.

    Args:
        endpoint: The selected endpoint.
        state: User input, including the auth token and style.
        auth: Playground auth settings; supplies the API-key header name.

    Returns:
        Header name to value, in insertion order.
    """
    auth = auth or AuthSettings()
    headers: dict[str, str] = {}

    if state.auth_token:
        if state.auth_type == AuthType.BEARER:
            headers["Authorization"] = f"Bearer {state.auth_token}"
        elif state.auth_type == AuthType.API_KEY:
            headers[auth.header_name] = state.auth_token

    if endpoint.request_body is not None and state.body:
        headers["Content-Type"] = JSON_CONTENT_TYPE

    for name, value in state.header_params.items():
        if value:
            headers[name] = value

    return headers


def build_body(endpoint: ParsedEndpoint, state: RequestState) -> Optional[str]:
    """Return the body text to send, or ``None``.

    A body is only sent when the endpoint declares one, the text is
    non-empty, and the method is not ``GET``.
    """
    if endpoint.request_body is None or not state.body:
        return None
    if endpoint.method == HTTPMethod.GET:
        logger.debug("Dropping request body for GET %s", endpoint.path)
        return None
    return state.body


def build_request(
    base_url: str,
    endpoint: ParsedEndpoint,
    state: RequestState,
    auth: Optional[AuthSettings] = None,
) -> RequestDescriptor:
    """Merge *endpoint* with *state* into a :class:`~apiplay.models.RequestDescriptor`.

    Pure: the same inputs always produce an equal descriptor, and *state*
    is not modified.
    """
    return RequestDescriptor(
        method=endpoint.method,
        url=build_url(base_url, endpoint, state),
        headers=build_headers(endpoint, state, auth),
        body=build_body(endpoint, state),
    )
