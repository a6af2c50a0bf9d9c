"""Typer application and CLI entry point for apiplay.

This module wires together the root Typer application and registers the
built-in commands from :mod:`apiplay.commands`. The root callback stores
the spec, config and base-URL overrides on the Typer context; commands
resolve them into a :class:`~apiplay.models.PlaygroundConfig` and pass it
explicitly into the parser, request builder and transport.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. Unhandled exceptions are written to a crash log under
the data directory.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from apiplay import __version__
from apiplay.commands.explore import list_endpoints, list_schemas, sample_body, show_endpoint
from apiplay.commands.request import call, snippet
from apiplay.exit_codes import EXIT_GENERIC_FAILURE

app = typer.Typer(
    name="apiplay",
    help="Explore and call OpenAPI 3.0/3.1 APIs from the terminal.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.command("endpoints")(list_endpoints)
app.command("show")(show_endpoint)
app.command("schemas")(list_schemas)
app.command("sample")(sample_body)
app.command("snippet")(snippet)
app.command("call")(call)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"apiplay {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    spec: Optional[str] = typer.Option(
        None, "--spec", "-s", help="OpenAPI document: file path, URL, or '-' for stdin."
    ),
    config: Optional[str] = typer.Option(
        None, "--config", "-c", help="Playground config file (JSON or YAML)."
    ),
    base_url: Optional[str] = typer.Option(
        None, "--base-url", help="Override the spec's first server URL."
    ),
    no_cache: bool = typer.Option(
        False, "--no-cache", help="Fetch a remote spec even if a cached copy exists."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
) -> None:
    """Root callback executed before every command.

    Installs the :class:`~apiplay.output.OutputManager`, configures the
    ``apiplay`` logger, and stores source overrides in ``ctx.obj``.
    """
    from apiplay.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))
    _configure_logging(verbose, no_color)

    ctx.ensure_object(dict)
    ctx.obj["spec"] = spec
    ctx.obj["config"] = config
    ctx.obj["base_url"] = base_url
    ctx.obj["no_cache"] = no_cache


def _configure_logging(verbose: bool, no_color: bool) -> None:
    """Route ``apiplay.*`` log records to stderr through Rich."""
    handler = RichHandler(
        console=Console(file=sys.stderr, no_color=no_color),
        show_path=False,
        show_time=False,
    )
    logger = logging.getLogger("apiplay")
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from apiplay.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    )
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``apiplay`` console script.

    :class:`~apiplay.exceptions.ApiplayError` instances that escape a
    command exit with the error's ``exit_code``. All other exceptions
    produce a crash log and a generic failure exit.
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from apiplay.exceptions import ApiplayError
        from apiplay.output import get_output

        if isinstance(exc, ApiplayError):
            get_output().error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        get_output().error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)


if __name__ == "__main__":
    main()
