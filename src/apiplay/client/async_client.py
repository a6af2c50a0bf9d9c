"""Asynchronous transport -- mirrors :class:`~apiplay.client.sync_client.SyncClient`.

Wraps :class:`httpx.AsyncClient` for use inside an event loop. Cancelling
the awaiting task cancels the in-flight call; the request descriptor it was
given is never touched.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

import httpx

from apiplay.client.response import network_error_state, response_state_from_httpx
from apiplay.models import RequestConfig, RequestDescriptor, ResponseState

logger = logging.getLogger(__name__)


class AsyncClient:
    """Non-blocking transport for playground requests.

    Example::

        async with AsyncClient(config.request) as client:
            result = await client.send(descriptor)
    """

    def __init__(
        self,
        config: Optional[RequestConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config or RequestConfig()
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> AsyncClient:
        self._client = httpx.AsyncClient(
            timeout=self._config.timeout,
            verify=self._config.verify_ssl,
            follow_redirects=True,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args: object) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    async def send(self, request: RequestDescriptor) -> ResponseState:
        """Execute *request*; network failures yield ``status == 0``."""
        if self._client is None:
            raise RuntimeError("AsyncClient must be used as an async context manager")

        start = time.perf_counter()
        try:
            response = await self._client.request(
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
