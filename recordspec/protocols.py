"""Runtime-checkable protocols for the collaborators RecordSpec depends on.

The record store and the metadata provider belong to the hosting application.
RecordSpec only consumes them through these protocols, so tests and adapters
can supply any object with the right methods.
"""

from collections.abc import Iterable
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from recordspec.data_dictionary import EntityDescription
    from recordspec.parameters import AccessMode
    from recordspec.typing import Bindings, Record

__all__ = ("MetadataProvider", "QueryExecutor", "RecordStore")


@runtime_checkable
class MetadataProvider(Protocol):
    """Describes entity types: their field names and named field sets."""

    def describe(self, entity_type: str) -> "EntityDescription":
        """Return the description of ``entity_type``.

        Raises:
            MetadataError: If the entity type is unknown.
        """
        ...


@runtime_checkable
class RecordStore(Protocol):
    """Executes rendered query text and returns records."""

    def query(self, text: str) -> "Iterable[Record]":
        """Execute query text that carries no bound parameters."""
        ...

    def query_with_bindings(self, text: str, bindings: "Bindings", access_mode: "AccessMode") -> "Iterable[Record]":
        """Execute query text, resolving ``:name`` placeholders from ``bindings``."""
        ...


@runtime_checkable
class QueryExecutor(Protocol):
    """Anything the result cache can execute: a query builder or a stand-in."""

    entity_type: str

    def execute(self) -> "list[Record]":
        """Run the query against the store."""
        ...