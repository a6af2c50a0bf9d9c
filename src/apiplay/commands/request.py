"""Request commands -- render code snippets and send live requests.

Both commands take the same request options and build one
:class:`~apiplay.models.RequestState`, so ``apiplay snippet`` prints
exactly what ``apiplay call`` would send.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Optional

import typer

from apiplay.client import SyncClient
from apiplay.client.response import format_bytes, status_class
from apiplay.commands import exit_on_error, load_playground, parse_pairs, require_endpoint
from apiplay.config import resolve_base_url
from apiplay.exceptions import InvalidUsageError
from apiplay.exit_codes import EXIT_CONNECTION_ERROR, EXIT_INVALID_USAGE
from apiplay.models import (
    AuthType,
    ParsedEndpoint,
    PlaygroundConfig,
    RequestState,
    SnippetTarget,
)
from apiplay.output import get_output
from apiplay.request import build_request, default_body_text, emit_snippet

_LEXERS = {
    SnippetTarget.CURL: "bash",
    SnippetTarget.JAVASCRIPT: "javascript",
    SnippetTarget.PYTHON: "python",
}

_STATUS_STYLES = {
    "success": "bold green",
    "redirect": "bold yellow",
    "client_error": "bold dark_orange",
    "error": "bold red",
}

_PATH_TOKEN = re.compile(r"\{([^}]+)\}")

PathOption = typer.Option(None, "--path", "-P", help="Path parameter as name=value.")
QueryOption = typer.Option(None, "--query", "-Q", help="Query parameter as name=value.")
HeaderOption = typer.Option(None, "--header", "-H", help="Header as name=value.")
BodyOption = typer.Option(
    None, "--body", "-d", help="Request body text, or @file. Defaults to a sample body."
)
TokenOption = typer.Option(None, "--token", "-t", envvar="APIPLAY_TOKEN", help="Auth token.")
AuthTypeOption = typer.Option(
    None, "--auth-type", "-a", help="bearer, apiKey, basic or none. Defaults to config."
)


def build_request_state(
    endpoint: ParsedEndpoint,
    config: PlaygroundConfig,
    path: Optional[list[str]],
    query: Optional[list[str]],
    header: Optional[list[str]],
    body: Optional[str],
    token: Optional[str],
    auth_type: Optional[AuthType],
) -> RequestState:
    """Collect CLI request options into a :class:`~apiplay.models.RequestState`.

    Raises:
        InvalidUsageError: For malformed ``name=value`` pairs or an
            unreadable ``@file`` body.
    """
    if body is None:
        body_text = default_body_text(endpoint)
    elif body.startswith("@"):
        body_path = Path(body[1:])
        try:
            body_text = body_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise InvalidUsageError(f"Cannot read body file {body_path}: {exc}") from exc
    else:
        body_text = body

    return RequestState(
        path_params=parse_pairs(path, "--path"),
        query_params=parse_pairs(query, "--query"),
        header_params=parse_pairs(header, "--header"),
        body=body_text,
        auth_token=token or "",
        auth_type=auth_type or config.auth.type,
    )


def _hint_missing_token(config: PlaygroundConfig, state: RequestState) -> None:
    """Show the configured token hint when an auth style is active but no token was given."""
    placeholder = config.auth.placeholder
    if not placeholder or state.auth_token:
        return
    if state.auth_type in (AuthType.BEARER, AuthType.API_KEY):
        get_output().info(f"No token given ({placeholder}). Pass --token or set APIPLAY_TOKEN.")


def snippet(

    ctx: typer.Context,
    operation_id: str = typer.Argument(..., help="operationId to render."),
    lang: Optional[SnippetTarget] = typer.Option(
        None, "--lang", "-l", help="curl, javascript or python. Defaults to the first configured."
    ),
    path: Optional[list[str]] = PathOption,
    query: Optional[list[str]] = QueryOption,
    header: Optional[list[str]] = HeaderOption,
    body: Optional[str] = BodyOption,
    token: Optional[str] = TokenOption,
    auth_type: Optional[AuthType] = AuthTypeOption,
) -> None:
    """Print a code snippet for a request.

    Example::

        apiplay snippet getPortfolio -P address=0xabc -l python
    """
    with exit_on_error():
        config, spec = load_playground(ctx)
        endpoint = require_endpoint(spec, operation_id)
        state = build_request_state(
            endpoint, config, path, query, header, body, token, auth_type
        )
    _hint_missing_token(config, state)

    if not config.features.code_snippets:
        get_output().error(
            "Code snippets are disabled by the playground config (features.code_snippets)."
        )
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    target = lang
    if target is None:
        languages = config.features.snippet_languages
        target = languages[0] if languages else SnippetTarget.CURL

    code = emit_snippet(target, resolve_base_url(config, spec), endpoint, state, config.auth)
    get_output().print_code(code, _LEXERS[target])


def call(
    ctx: typer.Context,
    operation_id: str = typer.Argument(..., help="operationId to call."),
    path: Optional[list[str]] = PathOption,
    query: Optional[list[str]] = QueryOption,
    header: Optional[list[str]] = HeaderOption,
    body: Optional[str] = BodyOption,
    token: Optional[str] = TokenOption,
    auth_type: Optional[AuthType] = AuthTypeOption,
    show_headers: Optional[bool] = typer.Option(
        None, "--headers/--no-headers", help="Print response headers. Defaults to config."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n", help="Print the request instead of sending it."
    ),
) -> None:
    """Send a request and print the response.

    The status line, timing and size go to stderr; the (pretty-printed)
    body goes to stdout. Exits with code 6 when the request could not be
    completed at all.
    """
    with exit_on_error():
        config, spec = load_playground(ctx)
        endpoint = require_endpoint(spec, operation_id)
        state = build_request_state(
            endpoint, config, path, query, header, body, token, auth_type
        )
    _hint_missing_token(config, state)

    output = get_output()
    request = build_request(resolve_base_url(config, spec), endpoint, state, config.auth)

    missing = _PATH_TOKEN.findall(request.url.split("?", 1)[0])
    if missing:
        output.warning(f"Unfilled path parameter(s): {', '.join(missing)}")

    if dry_run:
        output.format_json(request.model_dump(mode="json"))
        return

    if not config.features.try_it:
        output.error("Sending requests is disabled by the playground config (features.try_it).")
        raise typer.Exit(code=EXIT_INVALID_USAGE)

    with SyncClient(config.request) as client:
        result = client.send(request)

    output.status(
        f"{result.status} {result.status_text}  {result.duration_ms} ms  "
        f"{format_bytes(result.size_bytes)}",
        _STATUS_STYLES[status_class(result.status)],
    )

    if show_headers if show_headers is not None else config.features.response_headers:
        for name, value in result.headers.items():
            output.info(f"{name}: {value}")

    output.format_response_body(result.body)

    if result.status == 0:
        raise typer.Exit(code=EXIT_CONNECTION_ERROR)
