"""Execution scopes: one logical unit of work and the cache it owns."""

import uuid
from typing import TYPE_CHECKING

from recordspec.builder import SelectQuery
from recordspec.config import RecordSpecConfig
from recordspec.core.cache import ResultCache
from recordspec.utils.logging import get_logger, reset_correlation_id, set_correlation_id

if TYPE_CHECKING:
    from contextvars import Token
    from types import TracebackType

    from recordspec.core.cache import CacheKeyLike
    from recordspec.protocols import MetadataProvider, QueryExecutor, RecordStore
    from recordspec.typing import Record

__all__ = ("ExecutionScope",)

logger = get_logger("core.scope")


class ExecutionScope:
    """One unit of work (a transaction, a request, a bulk operation).

    The scope owns a fresh :class:`ResultCache`; closing the scope destroys it.
    While entered as a context manager the scope ID is the logging correlation
    ID, so log records from queries run inside it can be grouped.

    Example::

        with ExecutionScope(store=store) as scope:
            for batch in batches:
                accounts = scope.get_or_execute("Account", scope.query("Account").select_fields(["Id"]))
    """

    __slots__ = ("_cache", "_correlation_token", "config", "metadata", "scope_id", "store")

    def __init__(
        self,
        store: "RecordStore | None" = None,
        metadata: "MetadataProvider | None" = None,
        config: "RecordSpecConfig | None" = None,
        scope_id: "str | None" = None,
    ) -> None:
        self.store = store
        self.metadata = metadata
        self.config = config or RecordSpecConfig()
        self.scope_id = scope_id or uuid.uuid4().hex
        self._cache = ResultCache(self.scope_id, enforce_owner_thread=self.config.enforce_owner_thread)
        self._correlation_token: "Token[str | None] | None" = None

    @property
    def cache(self) -> ResultCache:
        return self._cache

    @property
    def closed(self) -> bool:
        return self._cache.closed

    def query(self, entity_type: str) -> SelectQuery:
        """Start a query bound to this scope's store, metadata and config."""
        return SelectQuery(entity_type, store=self.store, metadata=self.metadata, config=self.config)

    def get_or_execute(
        self, key: "CacheKeyLike", query: "QueryExecutor", force_refresh: bool = False
    ) -> "list[Record]":
        """Shortcut for ``scope.cache.get_or_execute``."""
        return self._cache.get_or_execute(key, query, force_refresh=force_refresh)

    def close(self) -> None:
        """End the scope and destroy its cache."""
        if self._correlation_token is not None:
            reset_correlation_id(self._correlation_token)
            self._correlation_token = None
        if not self._cache.closed:
            logger.debug("Execution scope %s closed", self.scope_id)
        self._cache.close()

    def __enter__(self) -> "ExecutionScope":
        self._correlation_token = set_correlation_id(self.scope_id)
        logger.debug("Execution scope %s opened", self.scope_id)
        return self

    def __exit__(
        self,
        exc_type: "type[BaseException] | None",
        exc_val: "BaseException | None",
        exc_tb: "TracebackType | None",
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"ExecutionScope(scope_id={self.scope_id!r}, {state})"
