"""Fluent query builders."""

from recordspec.builder._select import SelectQuery
from recordspec.builder.mixins import (
    AccessModeMixin,
    GroupByClauseMixin,
    LimitClauseMixin,
    OrderByClauseMixin,
    SelectFieldsMixin,
    WhereClauseMixin,
)

__all__ = (
    "AccessModeMixin",
    "GroupByClauseMixin",
    "LimitClauseMixin",
    "OrderByClauseMixin",
    "SelectFieldsMixin",
    "SelectQuery",
    "WhereClauseMixin",
)
