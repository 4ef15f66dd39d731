"""Result caching and execution scopes."""

from recordspec.core.cache import CacheEntry, CacheKey, CacheKeyLike, CacheStats, ResultCache
from recordspec.core.scope import ExecutionScope

__all__ = ("CacheEntry", "CacheKey", "CacheKeyLike", "CacheStats", "ExecutionScope", "ResultCache")
