"""On-disk cache for OpenAPI documents fetched over HTTP."""

from apiplay.cache.cache import SpecCache

__all__ = ["SpecCache"]
