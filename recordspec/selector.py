"""Per-entity selectors: reusable, cached read paths for one entity type."""

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any, ClassVar

from recordspec.core.cache import CacheKey
from recordspec.exceptions import ImproperConfigurationError

if TYPE_CHECKING:
    from recordspec.builder import SelectQuery
    from recordspec.core.scope import ExecutionScope
    from recordspec.typing import Record, RecordId

__all__ = ("RecordSelector",)


class RecordSelector:
    """Base class for the read side of one entity type.

    Subclasses declare the entity type and the fields they read. Queries run
    through the result cache of the execution scope passed in, so trigger
    handlers called once per batch share one store round trip per query.

    Example::

        class AccountSelector(RecordSelector):
            entity_type = "Account"
            default_fields = ("Id", "Name", "Industry")
            default_order_by = "Name"


        accounts = AccountSelector(scope).select_all()
    """

    entity_type: ClassVar[str] = ""
    default_fields: ClassVar["tuple[str, ...]"] = ()
    default_order_by: ClassVar["str | None"] = None
    id_field: ClassVar[str] = "Id"

    def __init__(self, scope: "ExecutionScope") -> None:
        if not self.entity_type:
            msg = f"{type(self).__name__} must define entity_type"
            raise ImproperConfigurationError(msg)
        self.scope = scope

    def new_query(self) -> "SelectQuery":
        """Return a query selecting this selector's fields.

        Fields come from ``default_fields``; failing that from the configured
        default field set; failing that every field of the entity.
        """
        query = self.scope.query(self.entity_type)
        if self.default_fields:
            query.select_fields(self.default_fields)
        elif self.scope.config.default_field_set:
            query.select_fields_from_field_set(self.scope.config.default_field_set)
        else:
            query.select_all_fields()
        if self.default_order_by:
            query.order_by(self.default_order_by)
        return query

    def select_all(self, force_refresh: bool = False) -> "list[Record]":
        """Every record of the entity, cached for the scope per distinct query text."""
        query = self.new_query()
        return self.scope.cache.get_or_execute(
            CacheKey(self.entity_type, f"all:{query.render()}"), query, force_refresh=force_refresh
        )

    def select_by_ids(self, ids: "Iterable[RecordId]", force_refresh: bool = False) -> "list[Record]":
        """Records whose id is in ``ids``, cached per distinct query text and id set.

        Ids are keyed by their ``repr``, so ``1`` and ``"1"`` are different ids.
        """
        id_list = list(dict.fromkeys(ids))
        if not id_list:
            return []
        query = self.new_query().where(f"{self.id_field} IN :ids").bind_parameters({"ids": id_list})
        discriminator = f"ids:{query.render()}:{tuple(sorted(map(repr, id_list)))!r}"
        return self.scope.cache.get_or_execute(
            CacheKey(self.entity_type, discriminator), query, force_refresh=force_refresh
        )

    def select_where(
        self,
        predicate: str,
        parameters: "Mapping[str, Any] | None" = None,
        discriminator: "str | None" = None,
        force_refresh: bool = False,
    ) -> "list[Record]":
        """Records matching ``predicate``.

        Cached under ``discriminator`` when one is given; executed directly otherwise.
        """
        query = self.new_query().where(predicate).bind_parameters(parameters)
        if discriminator is None:
            return query.execute()
        return self.scope.cache.get_or_execute(
            CacheKey(self.entity_type, discriminator), query, force_refresh=force_refresh
        )

    def select_first(self, predicate: str, parameters: "Mapping[str, Any] | None" = None) -> "Record | None":
        """First record matching ``predicate``, uncached."""
        return self.new_query().where(predicate).bind_parameters(parameters).first()
