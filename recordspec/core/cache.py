"""Per-scope result cache for record queries.

A ``ResultCache`` memoises the records returned by a query under a logical
key, so a query for a given key runs at most once per execution scope unless
the caller forces a refresh. There is no TTL and no automatic invalidation;
callers pass ``force_refresh=True`` whenever they know the store changed.

Components:
- CacheKey: ``(entity_type, discriminator)`` key
- CacheEntry: the records stored under one key
- CacheStats: hit/miss/refresh/failure counters
- ResultCache: the cache itself, owned by one execution scope
"""

import threading
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Final

from mypy_extensions import mypyc_attr
from typing_extensions import TypeAlias

from recordspec.exceptions import CacheScopeError
from recordspec.utils.logging import get_logger

if TYPE_CHECKING:
    from recordspec.protocols import QueryExecutor
    from recordspec.typing import Record

__all__ = ("CacheEntry", "CacheKey", "CacheKeyLike", "CacheStats", "ResultCache")

logger = get_logger("core.cache")

CACHE_KEY_SLOTS: Final = ("_hash", "discriminator", "entity_type")
CACHE_STATS_SLOTS: Final = ("failures", "hits", "misses", "refreshes")
RESULT_CACHE_SLOTS: Final = ("_closed", "_enforce_owner_thread", "_entries", "_owner_thread_id", "_scope_id", "_stats")

CacheKeyLike: TypeAlias = "CacheKey | str | tuple[str, str | None]"


@mypyc_attr(allow_interpreted_subclasses=False)
class CacheKey:
    """Immutable cache key.

    Args:
        entity_type: Entity type the cached query targets.
        discriminator: Caller-chosen name telling apart several cached queries
            on the same entity type. None for the single default query.
    """

    __slots__ = CACHE_KEY_SLOTS

    def __init__(self, entity_type: str, discriminator: "str | None" = None) -> None:
        self.entity_type = entity_type
        self.discriminator = discriminator
        self._hash = hash((entity_type, discriminator))

    @classmethod
    def coerce(cls, key: Any) -> "CacheKey":
        """Normalise a string, pair or ``CacheKey`` into a ``CacheKey``.

        Raises:
            TypeError: If ``key`` has any other shape.
        """
        if isinstance(key, CacheKey):
            return key
        if isinstance(key, str):
            return cls(key)
        if isinstance(key, tuple) and len(key) == 2 and isinstance(key[0], str):  # noqa: PLR2004
            return cls(key[0], key[1])
        msg = f"Cache keys must be a string, an (entity_type, discriminator) pair or a CacheKey, got {key!r}"
        raise TypeError(msg)

    def __hash__(self) -> int:
        """Return cached hash value."""
        return self._hash

    def __eq__(self, other: object) -> bool:
        if type(other) is not CacheKey:
            return False
        return self.entity_type == other.entity_type and self.discriminator == other.discriminator

    def __repr__(self) -> str:
        if self.discriminator is None:
            return f"CacheKey({self.entity_type!r})"
        return f"CacheKey({self.entity_type!r}, {self.discriminator!r})"


@mypyc_attr(allow_interpreted_subclasses=False)
class CacheStats:
    """Cache statistics tracking."""

    __slots__ = CACHE_STATS_SLOTS

    def __init__(self) -> None:
        self.hits = 0
        self.misses = 0
        self.refreshes = 0
        self.failures = 0

    @property
    def executions(self) -> int:
        """Number of times a query was actually run through the cache."""
        return self.misses + self.refreshes

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate as percentage."""
        total = self.hits + self.executions
        return (self.hits / total * 100) if total > 0 else 0.0

    def record_hit(self) -> None:
        self.hits += 1

    def record_miss(self) -> None:
        self.misses += 1

    def record_refresh(self) -> None:
        self.refreshes += 1

    def record_failure(self) -> None:
        self.failures += 1

    def reset(self) -> None:
        """Reset all statistics."""
        self.hits = 0
        self.misses = 0
        self.refreshes = 0
        self.failures = 0

    def as_dict(self) -> "dict[str, Any]":
        return {
            "hits": self.hits,
            "misses": self.misses,
            "refreshes": self.refreshes,
            "failures": self.failures,
            "hit_rate": self.hit_rate,
        }

    def __repr__(self) -> str:
        return (
            f"CacheStats(hits={self.hits}, misses={self.misses}, "
            f"refreshes={self.refreshes}, failures={self.failures}, hit_rate={self.hit_rate:.1f}%)"
        )


@dataclass
class CacheEntry:
    """Records stored under one cache key.

    ``records`` is None until the entry has been populated.
    """

    key: CacheKey
    records: "list[Record] | None" = None
    populated: bool = False

    def fill(self, records: "list[Record]") -> None:
        self.records = records
        self.populated = True

    def reset(self) -> None:
        self.records = None
        self.populated = False


@mypyc_attr(allow_interpreted_subclasses=True)
class ResultCache:
    """Memoises query results for the lifetime of one execution scope.

    The cache is not thread-safe and must not be shared between concurrent
    units of work. By default it remembers the thread that created it and
    rejects use from any other thread.
    """

    __slots__ = RESULT_CACHE_SLOTS

    def __init__(self, scope_id: "str | None" = None, *, enforce_owner_thread: bool = True) -> None:
        self._entries: dict[CacheKey, CacheEntry] = {}
        self._stats = CacheStats()
        self._scope_id = scope_id
        self._closed = False
        self._enforce_owner_thread = enforce_owner_thread
        self._owner_thread_id = threading.get_ident()

    @property
    def scope_id(self) -> "str | None":
        return self._scope_id

    @property
    def stats(self) -> CacheStats:
        return self._stats

    @property
    def closed(self) -> bool:
        return self._closed

    def get_or_execute(
        self, key: "CacheKeyLike", query: "QueryExecutor", force_refresh: bool = False
    ) -> "list[Record]":
        """Return the records cached under ``key``, executing ``query`` at most once.

        A populated entry is returned as is, without calling
        ``query.execute()``, unless ``force_refresh`` is set. Otherwise the
        entry is cleared, the query runs and its records replace the entry.
        When the query raises, the entry stays unpopulated and the error
        propagates, so the next call executes again.

        Args:
            key: Entity type string, ``(entity_type, discriminator)`` pair or ``CacheKey``.
            query: Query to execute on a miss.
            force_refresh: Re-execute even when the entry is populated.

        Raises:
            CacheScopeError: If the cache is closed or used from a foreign thread.

        Returns:
            The cached records. Repeated hits return the same list object.
        """
        self._check_usable()
        cache_key = CacheKey.coerce(key)
        entry = self._entries.get(cache_key)
        if entry is None:
            entry = CacheEntry(cache_key)
            self._entries[cache_key] = entry

        if entry.populated and not force_refresh:
            self._stats.record_hit()
            logger.debug("Result cache hit for %r", cache_key)
            return entry.records  # type: ignore[return-value]

        if entry.populated:
            self._stats.record_refresh()
            logger.debug("Refreshing result cache entry %r", cache_key)
        else:
            self._stats.record_miss()
            logger.debug("Result cache miss for %r", cache_key)

        entry.reset()
        try:
            records = query.execute()
        except Exception:
            self._stats.record_failure()
            logger.debug("Query for %r failed; entry left unpopulated", cache_key)
            raise
        entry.fill(list(records))
        return entry.records  # type: ignore[return-value]

    def get_or_execute_for(
        self, query: "QueryExecutor", discriminator: "str | None" = None, force_refresh: bool = False
    ) -> "list[Record]":
        """Like :meth:`get_or_execute`, keyed by ``(query.entity_type, discriminator)``."""
        return self.get_or_execute(CacheKey(query.entity_type, discriminator), query, force_refresh=force_refresh)

    def peek(self, key: "CacheKeyLike") -> "list[Record] | None":
        """Return the cached records without executing anything, or None if unpopulated."""
        self._check_usable()
        entry = self._entries.get(CacheKey.coerce(key))
        if entry is None or not entry.populated:
            return None
        return entry.records

    def is_populated(self, key: "CacheKeyLike") -> bool:
        entry = self._entries.get(CacheKey.coerce(key))
        return entry is not None and entry.populated

    def invalidate(self, key: "CacheKeyLike") -> bool:
        """Drop the entry for ``key``.

        Returns:
            True if a populated entry was dropped.
        """
        self._check_usable()
        entry = self._entries.pop(CacheKey.coerce(key), None)
        return entry is not None and entry.populated

    def invalidate_entity(self, entity_type: str) -> int:
        """Drop every entry for ``entity_type``, whatever its discriminator.

        Returns:
            Number of populated entries dropped.
        """
        self._check_usable()
        keys = [key for key in self._entries if key.entity_type == entity_type]
        dropped = 0
        for key in keys:
            if self._entries.pop(key).populated:
                dropped += 1
        return dropped

    def clear(self) -> None:
        """Drop all entries. Statistics are kept."""
        self._entries.clear()

    def close(self) -> None:
        """Destroy all entries; any further use raises :class:`CacheScopeError`."""
        if self._closed:
            return
        logger.debug("Closing result cache for scope %s: %r", self._scope_id, self._stats)
        self._entries.clear()
        self._closed = True

    def keys(self) -> "list[CacheKey]":
        """Keys of populated entries."""
        return [key for key, entry in self._entries.items() if entry.populated]

    def __len__(self) -> int:
        return sum(1 for entry in self._entries.values() if entry.populated)

    def __contains__(self, key: object) -> bool:
        try:
            return self.is_populated(key)  # type: ignore[arg-type]
        except TypeError:
            return False

    def _check_usable(self) -> None:
        if self._closed:
            msg = f"Result cache for scope {self._scope_id!r} is closed"
            raise CacheScopeError(msg)
        if self._enforce_owner_thread and threading.get_ident() != self._owner_thread_id:
            msg = f"Result cache for scope {self._scope_id!r} used outside its owning thread"
            raise CacheScopeError(msg)
