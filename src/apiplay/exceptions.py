"""Exception hierarchy for apiplay.

The parsing and request-modeling core never raises for malformed spec
content; these exceptions only come from the edges (loading a document,
reading configuration, CLI usage). All of them inherit from
:class:`ApiplayError`, which carries an ``exit_code`` attribute mapped to a
constant from :mod:`apiplay.exit_codes`.

Subclass hierarchy::

    ApiplayError (exit 1)
    +-- InvalidUsageError       (exit 2)
    +-- OperationNotFoundError  (exit 4)
    +-- SpecParseError          (exit 7)
    +-- ConfigError             (exit 1)
"""

from apiplay.exit_codes import (
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_NOT_FOUND,
    EXIT_SPEC_PARSE_ERROR,
)


class ApiplayError(Exception):
    """Base exception for all apiplay errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(ApiplayError):
    """Raised for malformed CLI arguments (e.g. ``--query`` without ``=``)."""

    exit_code = EXIT_INVALID_USAGE


class OperationNotFoundError(ApiplayError):
    """Raised when an operationId is not present in the loaded spec."""

    exit_code = EXIT_NOT_FOUND


class SpecParseError(ApiplayError):
    """Raised when a document cannot be loaded or is not OpenAPI 3.x."""

    exit_code = EXIT_SPEC_PARSE_ERROR


class ConfigError(ApiplayError):
    """Raised for unreadable or invalid playground configuration files."""

    exit_code = EXIT_GENERIC_FAILURE
