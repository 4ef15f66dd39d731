"""Fluent SELECT query builder.

A ``SelectQuery`` accumulates clauses in any order and renders them in the
fixed order ``SELECT .. FROM .. WHERE .. WITH .. GROUP BY .. ORDER BY .. LIMIT``.
The query text is rebuilt from the current state on every ``render()`` and
``execute()`` call.
"""

import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from mypy_extensions import mypyc_attr
from typing_extensions import Self

from recordspec.builder.mixins import (
    AccessModeMixin,
    GroupByClauseMixin,
    LimitClauseMixin,
    OrderByClauseMixin,
    SelectFieldsMixin,
    WhereClauseMixin,
)
from recordspec.config import RecordSpecConfig
from recordspec.exceptions import ImproperConfigurationError, ValidationError, wrap_store_exceptions
from recordspec.parameters import has_placeholders
from recordspec.utils.logging import get_logger, log_with_context

if TYPE_CHECKING:
    from recordspec.parameters import AccessMode
    from recordspec.protocols import MetadataProvider, RecordStore
    from recordspec.typing import Record

__all__ = ("SelectQuery",)

logger = get_logger("builder")


@mypyc_attr(allow_interpreted_subclasses=True)
@dataclass
class SelectQuery(
    SelectFieldsMixin, WhereClauseMixin, AccessModeMixin, GroupByClauseMixin, OrderByClauseMixin, LimitClauseMixin
):
    """Builds and executes SELECT queries against one entity type.

    Every configuration method returns the same instance so calls can be chained::

        records = (
            SelectQuery("Account", store=store)
            .select_fields(["Id", "Name"])
            .where("Id IN :ids")
            .bind_parameters({"ids": [1, 2]})
            .with_user_mode()
            .execute()
        )
    """

    entity_type: str
    store: "RecordStore | None" = field(default=None, repr=False, compare=False)
    metadata: "MetadataProvider | None" = field(default=None, repr=False, compare=False)
    config: RecordSpecConfig = field(default_factory=RecordSpecConfig, repr=False, compare=False)
    _selected_fields: "list[str]" = field(default_factory=list, init=False)
    _filter_expression: "str | None" = field(default=None, init=False)
    _group_by_expression: "str | None" = field(default=None, init=False)
    _order_by_expression: "str | None" = field(default=None, init=False)
    _limit: "int | None" = field(default=None, init=False)
    _bound_parameters: "dict[str, Any]" = field(default_factory=dict, init=False)
    _user_mode_requested: bool = field(default=False, init=False)
    _security_enforced_requested: bool = field(default=False, init=False)

    def __post_init__(self) -> None:
        if not isinstance(self.entity_type, str) or not self.entity_type.strip():
            msg = f"Entity type must be a non-blank string, got {self.entity_type!r}"
            raise ValidationError(msg)
        self.entity_type = self.entity_type.strip()

    @property
    def selected_fields(self) -> "tuple[str, ...]":
        return tuple(self._selected_fields)

    @property
    def filter_expression(self) -> "str | None":
        return self._filter_expression

    @property
    def group_by_expression(self) -> "str | None":
        return self._group_by_expression

    @property
    def order_by_expression(self) -> "str | None":
        return self._order_by_expression

    @property
    def limit_value(self) -> "int | None":
        return self._limit

    @property
    def bound_parameters(self) -> "dict[str, Any]":
        """A copy of the bound parameters."""
        return dict(self._bound_parameters)

    def bind_parameters(self, parameters: "Mapping[str, Any] | None") -> Self:
        """Replace the bound parameters.

        The mapping is copied and replaces any previous bindings wholesale; it
        is never merged. An empty mapping (or None) removes all bindings.

        Args:
            parameters: Placeholder name to value mapping.

        Raises:
            ValidationError: If ``parameters`` is not a mapping with string keys.

        Returns:
            The current builder instance for method chaining.
        """
        if parameters is None:
            self._bound_parameters = {}
            return self
        if not isinstance(parameters, Mapping):
            msg = f"Bound parameters must be a mapping, got {type(parameters).__name__}"
            raise ValidationError(msg)
        bindings: dict[str, Any] = {}
        for name, value in parameters.items():
            if not isinstance(name, str) or not name:
                msg = f"Bound parameter names must be non-empty strings, got {name!r}"
                raise ValidationError(msg)
            bindings[name.lstrip(":")] = value
        self._bound_parameters = bindings
        return self

    def render(self) -> str:
        """Render the query text from the current builder state.

        Raises:
            ValidationError: If no fields are selected.

        Returns:
            The query text.
        """
        if not self._selected_fields:
            msg = f"Query on {self.entity_type!r} has no selected fields"
            raise ValidationError(msg)

        parts = [f"SELECT {', '.join(self._selected_fields)} FROM {self.entity_type}"]
        if self._filter_expression is not None:
            parts.append(f"WHERE {self._filter_expression}")
        access_clause = self.access_mode.clause
        if access_clause is not None:
            parts.append(access_clause)
        if self._group_by_expression is not None:
            parts.append(f"GROUP BY {self._group_by_expression}")
        if self._order_by_expression is not None:
            parts.append(f"ORDER BY {self._order_by_expression}")
        if self._limit is not None:
            parts.append(f"LIMIT {self._limit}")
        return " ".join(parts)

    def uses_bindings(self, rendered: "str | None" = None) -> bool:
        """Whether execution takes the bound-parameter path.

        Args:
            rendered: Already rendered text, to avoid rendering twice.
        """
        if self._bound_parameters:
            return True
        return has_placeholders(rendered if rendered is not None else self.render())

    def execute(self) -> "list[Record]":
        """Render the query and run it against the record store.

        Queries with bound parameters or placeholders go through
        ``query_with_bindings`` under the effective access mode. All others
        go through ``query``, whose text already carries the access mode clause.

        Raises:
            ImproperConfigurationError: If the builder has no record store.
            ValidationError: If no fields are selected.
            ExecutionError: If the store fails. The store error is the cause.

        Returns:
            The records, in store order.
        """
        store = self._require_store()
        text = self.render()
        access_mode: AccessMode = self.access_mode
        bound = self.uses_bindings(text)

        if self.config.log_queries:
            log_with_context(
                logger,
                logging.DEBUG,
                "Executing query",
                entity_type=self.entity_type,
                sql=text,
                access_mode=str(access_mode),
                bound=bound,
            )

        started = time.perf_counter()
        with wrap_store_exceptions(text):
            if bound:
                rows = store.query_with_bindings(text, dict(self._bound_parameters), access_mode)
            else:
                rows = store.query(text)
            records = list(rows)

        logger.debug(
            "Query on %s returned %d record(s) in %.2fms",
            self.entity_type,
            len(records),
            (time.perf_counter() - started) * 1000,
        )
        return records

    def first(self) -> "Record | None":
        """Apply ``LIMIT 1``, execute, and return the first record.

        Returns:
            The first record, or None when nothing matched.
        """
        records = self.limit(1).execute()
        return records[0] if records else None

    def _require_store(self) -> "RecordStore":
        if self.store is None:
            msg = f"Query on {self.entity_type!r} has no record store to execute against"
            raise ImproperConfigurationError(msg)
        return self.store
