"""Render a request as copy-pasteable source in several calling conventions.

Every generator starts from :func:`~apiplay.request.builder.build_request`,
so the URL, headers and body inclusion in a snippet are exactly those of
the request the playground would send. Layout lives in Jinja2 templates
under ``templates/``; quoting for each target language is done by the
filters registered in :func:`_create_jinja_env`. Nothing here performs
network I/O.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment, FileSystemLoader

from apiplay.models import (
    AuthSettings,
    ParsedEndpoint,
    RequestState,
    SnippetTarget,
)
from apiplay.request.builder import build_request

TEMPLATE_DIR = Path(__file__).parent / "templates"

_TEMPLATES: dict[SnippetTarget, str] = {
    SnippetTarget.CURL: "curl.sh.j2",
    SnippetTarget.JAVASCRIPT: "fetch.js.j2",
    SnippetTarget.PYTHON: "requests.py.j2",
}


def generate_curl(
    base_url: str,
    endpoint: ParsedEndpoint,
    state: RequestState,
    auth: Optional[AuthSettings] = None,
) -> str:
    """Render a ``curl`` command line, one option per continued line."""
    return _render(SnippetTarget.CURL, base_url, endpoint, state, auth)


def generate_javascript(
    base_url: str,
    endpoint: ParsedEndpoint,
    state: RequestState,
    auth: Optional[AuthSettings] = None,
) -> str:
    """Render a ``fetch`` call that logs the decoded JSON response."""
    return _render(SnippetTarget.JAVASCRIPT, base_url, endpoint, state, auth)


def generate_python(
    base_url: str,
    endpoint: ParsedEndpoint,
    state: RequestState,
    auth: Optional[AuthSettings] = None,
) -> str:
    """Render a ``requests`` call.

    A JSON body is embedded as a Python literal via ``json=``; a body that
    does not parse as JSON is passed verbatim via ``data=``.
    """
    return _render(SnippetTarget.PYTHON, base_url, endpoint, state, auth)


def emit_snippet(
    target: SnippetTarget | str,
    base_url: str,
    endpoint: ParsedEndpoint,
    state: RequestState,
    auth: Optional[AuthSettings] = None,
) -> str:
    """Render the request for *endpoint* in the *target* convention.

    Args:
        target: A :class:`~apiplay.models.SnippetTarget` or its string
            value (``"curl"``, ``"javascript"``, ``"python"``).
        base_url: Base URL prepended to the path.
        endpoint: The selected endpoint.
        state: User input.
        auth: Playground auth settings (API-key header name).

    Raises:
        ValueError: If *target* is not a known snippet target.
    """
    return _render(SnippetTarget(target), base_url, endpoint, state, auth)


def _render(
    target: SnippetTarget,
    base_url: str,
    endpoint: ParsedEndpoint,
    state: RequestState,
    auth: Optional[AuthSettings],
) -> str:
    request = build_request(base_url, endpoint, state, auth)
    template = _create_jinja_env().get_template(_TEMPLATES[target])
    return template.render(
        method=request.method.value,
        url=request.url,
        headers=request.headers,
        body=request.body,
    )


@lru_cache(maxsize=1)
def _create_jinja_env() -> Environment:
    """Build the template environment shared by all snippet targets.

    Autoescaping is off: the output is source code, not HTML.
    """
    env = Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["shell_quote"] = _shell_quote
    env.filters["js_string"] = _js_string
    env.filters["json_literal"] = _json_literal
    env.filters["python_body_argument"] = _python_body_argument
    return env


def _shell_quote(text: str) -> str:
    """Single-quote *text* for a POSIX shell, escaping embedded quotes."""
    return "'" + text.replace("'", "'\\''") + "'"


def _js_string(text: str) -> str:
    return "'" + text.replace("\\", "\\\\").replace("'", "\\'") + "'"


def _json_literal(value: Any, indent: Optional[int] = None) -> str:
    return json.dumps(value, indent=indent, ensure_ascii=False)


def _python_body_argument(body: str) -> str:
    try:
        parsed = json.loads(body)
    except ValueError:
        return f"data={body!r}"
    return f"json={parsed!r}"
