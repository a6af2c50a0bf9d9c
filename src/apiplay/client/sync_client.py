"""Synchronous transport that executes a :class:`~apiplay.models.RequestDescriptor`.

:class:`SyncClient` wraps :class:`httpx.Client`. It sends exactly the
method, URL, headers and body the request builder produced; it adds no
auth, query parameters or content negotiation of its own.

Network-level failures (DNS, refused connections, timeouts) and requests
httpx refuses to build (an invalid URL, a header value that is not ASCII)
are not raised.
They come back as a :class:`~apiplay.models.ResponseState` with
``status == 0`` and a JSON error body, which the UI renders like any other
response.

See Also:
    :class:`~apiplay.client.async_client.AsyncClient` for the
    equivalent non-blocking implementation.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

import httpx

from apiplay.client.response import network_error_state, response_state_from_httpx
from apiplay.models import RequestConfig, RequestDescriptor, ResponseState

logger = logging.getLogger(__name__)


class SyncClient:
    """Blocking transport for playground requests.

    Must be used as a context manager so that the underlying connection
    pool is opened and closed.

    Args:
        config: Timeout and SSL settings. Defaults to :class:`RequestConfig`.
        transport: Optional httpx transport, e.g. :class:`httpx.MockTransport`
            in tests.

    Example::

        with SyncClient(config.request) as client:
            result = client.send(build_request(base_url, endpoint, state))
    """

    def __init__(
        self,
        config: Optional[RequestConfig] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._config = config or RequestConfig()
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    def __enter__(self) -> SyncClient:
        self._client = httpx.Client(
            timeout=self._config.timeout,
            verify=self._config.verify_ssl,
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    def send(self, request: RequestDescriptor) -> ResponseState:
        """Execute *request* and describe the outcome.

        Returns:
            The observed :class:`~apiplay.models.ResponseState`; ``status``
            is ``0`` when the request never completed.

        Raises:
            RuntimeError: If called outside the ``with`` block.
        """
        if self._client is None:
            raise RuntimeError("SyncClient must be used as a context manager")

        start = time.perf_counter()
        try:
            response = self._client.request(
                request.method.value,
                request.url,
                headers=request.headers,
                content=request.body.encode("utf-8") if request.body is not None else None,
            )
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeEncodeError) as exc:
            duration_ms = round((time.perf_counter() - start) * 1000)
            logger.warning("%s %s failed: %s", request.method.value, request.url, exc)
            return network_error_state(exc, duration_ms)

        duration_ms = round((time.perf_counter() - start) * 1000)
        return response_state_from_httpx(response, duration_ms)
