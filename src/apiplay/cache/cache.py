"""Disk-based caching of remote OpenAPI documents.

Fetching a large spec on every command is slow, so documents loaded from an
``http(s)://`` URL are kept in a :mod:`diskcache` directory for
:attr:`~apiplay.models.CacheConfig.ttl_seconds`. Files and stdin are never
cached.

Entries hold the undecoded response text together with its
``Content-Type``, so a cache hit goes through exactly the same decoding
path as a fresh download.
"""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import Any, Optional

import diskcache

from apiplay.models import CacheConfig

logger = logging.getLogger(__name__)


class SpecCache:
    """Disk-backed cache of fetched spec documents, keyed by URL.

    Args:
        cache_dir: Root directory for the cache. A ``specs/`` subdirectory
            is created inside it.
        config: Cache configuration (``enabled`` flag and ``ttl_seconds``).

    Example::

        cache = SpecCache(get_cache_dir(), CacheConfig(ttl_seconds=600))
        cache.set("https://api.example.com/openapi.json", text, "application/json")
        hit = cache.get("https://api.example.com/openapi.json")
    """

    def __init__(self, cache_dir: str | Path, config: CacheConfig) -> None:
        self._config = config
        self._cache: Optional[diskcache.Cache] = None
        self._cache_dir = Path(cache_dir)
        if config.enabled:
            self._cache = diskcache.Cache(str(self._cache_dir / "specs"))

    @property
    def enabled(self) -> bool:
        return self._cache is not None

    def get(self, url: str) -> Optional[tuple[str, str]]:
        """Return ``(text, content_type)`` for *url*, or ``None`` on a miss."""
        if self._cache is None:
            return None
        entry = self._cache.get(self._make_key(url))
        if not isinstance(entry, dict):
            return None
        logger.debug("Spec cache hit for %s", url)
        return entry["text"], entry.get("content_type", "")

    def set(self, url: str, text: str, content_type: str = "") -> None:
        """Store the fetched document for *url* until the TTL runs out."""
        if self._cache is None:
            return
        self._cache.set(
            self._make_key(url),
            {"text": text, "content_type": content_type},
            expire=self._config.ttl_seconds,
        )

    def invalidate(self, url: str) -> None:
        """Drop the entry for *url*, if any."""
        if self._cache is not None:
            self._cache.delete(self._make_key(url))

    def clear(self) -> None:
        """Remove all entries from the cache."""
        if self._cache is not None:
            self._cache.clear()

    def stats(self) -> dict[str, Any]:
        """Return ``enabled`` and, when enabled, ``size``, ``directory`` and ``ttl_seconds``."""
        if self._cache is None:
            return {"enabled": False}
        return {
            "enabled": True,
            "size": len(self._cache),
            "directory": str(self._cache_dir / "specs"),
            "ttl_seconds": self._config.ttl_seconds,
        }

    def close(self) -> None:
        if self._cache is not None:
            self._cache.close()

    def _make_key(self, url: str) -> str:
        return hashlib.sha256(url.encode()).hexdigest()
