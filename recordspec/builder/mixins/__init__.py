"""SelectQuery clause mixins."""

from recordspec.builder.mixins._access_mode import AccessModeMixin
from recordspec.builder.mixins._group_order import GroupByClauseMixin, OrderByClauseMixin
from recordspec.builder.mixins._limit import LimitClauseMixin
from recordspec.builder.mixins._select_fields import SelectFieldsMixin
from recordspec.builder.mixins._where import WhereClauseMixin

__all__ = (
    "AccessModeMixin",
    "GroupByClauseMixin",
    "LimitClauseMixin",
    "OrderByClauseMixin",
    "SelectFieldsMixin",
    "WhereClauseMixin",
)
