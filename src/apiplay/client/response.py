"""Bridge between :class:`httpx.Response` and :class:`~apiplay.models.ResponseState`.

Also holds the small presentation helpers the CLI uses for the status
line: human-readable sizes and a status class for colouring.
"""

from __future__ import annotations

import json

import httpx

from apiplay.models import ResponseState

NETWORK_ERROR_TEXT = "Network Error"


def response_state_from_httpx(response: httpx.Response, duration_ms: int) -> ResponseState:
    """Describe a completed HTTP exchange.

    ``size_bytes`` is the UTF-8 length of the decoded body text.
    """
    text = response.text
    return ResponseState(
        status=response.status_code,
        status_text=response.reason_phrase or "",
        headers={name: value for name, value in response.headers.items()},
        body=text,
        duration_ms=duration_ms,
        size_bytes=len(text.encode("utf-8")),
    )


def network_error_state(exc: Exception, duration_ms: int) -> ResponseState:
    """Describe a request that never completed as a zero-status response."""
    message = str(exc) or "Request failed"
    return ResponseState(
        status=0,
        status_text=NETWORK_ERROR_TEXT,
        headers={},
        body=json.dumps({"error": message}, indent=2),
        duration_ms=duration_ms,
        size_bytes=0,
    )


def format_bytes(size: int) -> str:
    """Format a byte count as ``B``, ``KB`` or ``MB`` with one decimal."""
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def status_class(status: int) -> str:
    """Classify *status*: ``success``, ``redirect``, ``client_error`` or ``error``.

    Zero (network failure) and 5xx both count as ``error``.
    """
    if 200 <= status < 300:
        return "success"
    if 300 <= status < 400:
        return "redirect"
    if 400 <= status < 500:
        return "client_error"
    return "error"
