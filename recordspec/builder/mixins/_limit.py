from typing import TYPE_CHECKING, cast

from typing_extensions import Self

from recordspec.exceptions import ValidationError

if TYPE_CHECKING:
    from recordspec.builder.protocols import BuilderProtocol

__all__ = ("LimitClauseMixin",)


class LimitClauseMixin:
    """Mixin providing the LIMIT clause."""

    __slots__ = ()

    def limit(self, value: int) -> Self:
        """Set the LIMIT clause.

        Args:
            value: The maximum number of records to return.

        Raises:
            ValidationError: If the value is negative or not an integer.

        Returns:
            The current builder instance for method chaining.
        """
        if isinstance(value, bool) or not isinstance(value, int):
            msg = f"Limit must be an integer, got {type(value).__name__}"
            raise ValidationError(msg)
        if value < 0:
            msg = f"Limit must be non-negative, got {value}"
            raise ValidationError(msg)
        builder = cast("BuilderProtocol", self)
        builder._limit = value
        return self
