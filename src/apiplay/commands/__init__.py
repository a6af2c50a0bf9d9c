"""Built-in CLI commands for apiplay.

* :mod:`~apiplay.commands.explore` -- list grouped endpoints, show one
  endpoint, list schemas, print a sample body.
* :mod:`~apiplay.commands.request` -- render snippets and send requests.

Each module exports plain callback functions that :mod:`apiplay.app`
registers on the root application. The helpers below are shared by both:
they resolve the configuration from the Typer context, load the spec, and
translate :class:`~apiplay.exceptions.ApiplayError` into a clean exit.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Optional

import typer

from apiplay.cache import SpecCache
from apiplay.config import get_cache_dir, resolve_config
from apiplay.exceptions import ApiplayError, InvalidUsageError, OperationNotFoundError
from apiplay.models import ParsedEndpoint, ParsedSpec, PlaygroundConfig
from apiplay.output import get_output
from apiplay.parser import extract_spec, load_spec, validate_openapi_version


@contextmanager
def exit_on_error() -> Iterator[None]:
    """Print an :class:`ApiplayError` to stderr and exit with its code."""
    try:
        yield
    except ApiplayError as exc:
        get_output().error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None


def load_playground(ctx: typer.Context) -> tuple[PlaygroundConfig, ParsedSpec]:
    """Resolve the configuration and parse its spec.

    Reads the ``--spec``, ``--config``, ``--base-url`` and ``--no-cache``
    values stored on ``ctx.obj`` by
    :func:`~apiplay.app.main_callback`. Remote specs go through the
    :class:`~apiplay.cache.SpecCache` unless caching is off.

    Raises:
        InvalidUsageError: If no spec source is configured anywhere.
        ConfigError: If the config file is invalid.
        SpecParseError: If the spec cannot be loaded or is not OpenAPI 3.x.
    """
    options = ctx.obj or {}
    config = resolve_config(
        cli_config=options.get("config"),
        cli_spec=options.get("spec"),
        cli_base_url=options.get("base_url"),
    )
    if not config.spec:
        raise InvalidUsageError(
            "No spec given. Pass --spec <file-or-url>, set APIPLAY_SPEC, "
            "or add 'spec' to apiplay.json"
        )

    output = get_output()
    output.debug(f"Loading spec from {config.spec}")
    cache: Optional[SpecCache] = None
    if _is_remote(config.spec) and config.cache.enabled and not options.get("no_cache"):
        cache = SpecCache(get_cache_dir(), config.cache)
    try:
        raw = load_spec(config.spec, timeout=config.request.timeout, cache=cache)
    finally:
        if cache is not None:
            cache.close()

    version = validate_openapi_version(raw)
    spec = extract_spec(raw)
    output.debug(f"Parsed OpenAPI {version}: {len(spec.endpoints)} endpoints")
    return config, spec


def _is_remote(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def require_endpoint(spec: ParsedSpec, operation_id: str) -> ParsedEndpoint:
    """Return the endpoint named *operation_id*.

    Raises:
        OperationNotFoundError: If the spec has no such operation.
    """
    endpoint = spec.find_endpoint(operation_id)
    if endpoint is None:
        raise OperationNotFoundError(
            f"Unknown operation '{operation_id}'. Run 'apiplay endpoints' to list them."
        )
    return endpoint


def parse_pairs(values: list[str] | None, option: str) -> dict[str, str]:
    """Parse repeated ``name=value`` options into a dict, keeping order.

    The value may be empty (``limit=``); the name may not.

    Raises:
        InvalidUsageError: If an entry has no ``=`` or an empty name.
    """
    pairs: dict[str, str] = {}
    for item in values or []:
        name, sep, value = item.partition("=")
        if not sep or not name:
            raise InvalidUsageError(f"{option} expects name=value, got '{item}'")
        pairs[name] = value
    return pairs
