from typing import TYPE_CHECKING, cast

from typing_extensions import Self

from recordspec.builder.mixins._clause_text import normalize_clause
from recordspec.parameters import extract_placeholder_names

if TYPE_CHECKING:
    from recordspec.builder.protocols import BuilderProtocol

__all__ = ("WhereClauseMixin",)


class WhereClauseMixin:
    """Mixin providing the WHERE clause."""

    __slots__ = ()

    def where(self, expression: "str | None") -> Self:
        """Set the WHERE predicate, replacing any previous one.

        The predicate is kept verbatim and may reference bound parameters with
        ``:name`` placeholders.

        Args:
            expression: Predicate text, or None to remove the clause.

        Raises:
            ValidationError: If the predicate is blank or not a string.

        Returns:
            The current builder instance for method chaining.
        """
        builder = cast("BuilderProtocol", self)
        builder._filter_expression = normalize_clause("WHERE", expression)
        return self

    @property
    def placeholder_names(self) -> "tuple[str, ...]":
        """Placeholder names referenced by the WHERE predicate."""
        builder = cast("BuilderProtocol", self)
        return extract_placeholder_names(builder._filter_expression)
