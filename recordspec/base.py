from collections.abc import Generator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from recordspec.builder import SelectQuery
from recordspec.config import RecordSpecConfig
from recordspec.core.scope import ExecutionScope
from recordspec.triggers import TriggerRegistry

if TYPE_CHECKING:
    from recordspec.protocols import MetadataProvider, RecordStore
    from recordspec.triggers import HandlerFactory, TriggerContext

__all__ = ("RecordSpec",)


class RecordSpec:
    """Entry point binding a record store, a metadata provider and configuration.

    Example::

        spec = RecordSpec(store=store, metadata=metadata)
        with spec.execution_scope() as scope:
            rows = scope.get_or_execute("Account", spec.query("Account").select_all_fields())
    """

    __slots__ = ("config", "metadata", "store", "triggers")

    def __init__(
        self,
        store: "RecordStore | None" = None,
        metadata: "MetadataProvider | None" = None,
        config: "RecordSpecConfig | None" = None,
    ) -> None:
        self.store = store
        self.metadata = metadata
        self.config = config or RecordSpecConfig()
        self.triggers = TriggerRegistry()
        if self.config.logging is not None:
            self.config.logging.apply()

    def query(self, entity_type: str) -> SelectQuery:
        """Start a query on ``entity_type`` against the configured store."""
        return SelectQuery(entity_type, store=self.store, metadata=self.metadata, config=self.config)

    def create_scope(self, scope_id: "str | None" = None) -> ExecutionScope:
        """Create an execution scope with a fresh result cache. The caller closes it."""
        return ExecutionScope(store=self.store, metadata=self.metadata, config=self.config, scope_id=scope_id)

    @contextmanager
    def execution_scope(self, scope_id: "str | None" = None) -> "Generator[ExecutionScope, None, None]":
        """Open an execution scope for the duration of the block."""
        with self.create_scope(scope_id) as scope:
            yield scope

    def register_trigger_handler(self, entity_type: str, factory: "HandlerFactory") -> None:
        self.triggers.register(entity_type, factory)

    def handle_trigger(self, context: "TriggerContext", entity_type: "str | None" = None) -> bool:
        """Dispatch a lifecycle event through the trigger registry."""
        return self.triggers.dispatch(context, entity_type)
