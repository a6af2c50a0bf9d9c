"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~apiplay.exceptions.ApiplayError` subclass.
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments."""

EXIT_NOT_FOUND = 4
"""The requested operation does not exist in the loaded spec."""

EXIT_CONNECTION_ERROR = 6
"""A request could not be completed (DNS failure, refused connection, timeout)."""

EXIT_SPEC_PARSE_ERROR = 7
"""The OpenAPI document could not be loaded or is not OpenAPI 3.x."""
