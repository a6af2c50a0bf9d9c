"""apiplay -- explore OpenAPI 3.0/3.1 specs from the terminal."""

__version__ = "0.1.0"
