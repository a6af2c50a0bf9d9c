"""HTTP transport for apiplay.

Executes :class:`~apiplay.models.RequestDescriptor` values built by
:mod:`apiplay.request.builder` and reports a
:class:`~apiplay.models.ResponseState`. The parsing and request-modeling
core never imports this package; it is the transport collaborator.

Classes:
    :class:`SyncClient` -- blocking client backed by :class:`httpx.Client`.
    :class:`AsyncClient` -- non-blocking client backed by :class:`httpx.AsyncClient`.

Example::

    from apiplay.client import SyncClient

    with SyncClient(config.request) as client:
        result = client.send(descriptor)
"""

from apiplay.client.async_client import AsyncClient
from apiplay.client.sync_client import SyncClient

__all__ = ["SyncClient", "AsyncClient"]
