from typing import TYPE_CHECKING, cast

from typing_extensions import Self

from recordspec.builder.mixins._clause_text import normalize_clause

if TYPE_CHECKING:
    from recordspec.builder.protocols import BuilderProtocol

__all__ = ("GroupByClauseMixin", "OrderByClauseMixin")


class GroupByClauseMixin:
    """Mixin providing the GROUP BY clause."""

    __slots__ = ()

    def group_by(self, expression: "str | None") -> Self:
        """Set the GROUP BY expression, or clear it with None."""
        builder = cast("BuilderProtocol", self)
        builder._group_by_expression = normalize_clause("GROUP BY", expression)
        return self


class OrderByClauseMixin:
    """Mixin providing the ORDER BY clause."""

    __slots__ = ()

    def order_by(self, expression: "str | None") -> Self:
        """Set the ORDER BY expression, or clear it with None.

        Args:
            expression: Ordering text such as ``"Name ASC NULLS LAST"``.

        Returns:
            The current builder instance for method chaining.
        """
        builder = cast("BuilderProtocol", self)
        builder._order_by_expression = normalize_clause("ORDER BY", expression)
        return self
