from collections.abc import Iterable
from typing import TYPE_CHECKING, cast

from typing_extensions import Self

from recordspec.data_dictionary import all_fields, field_set
from recordspec.exceptions import ValidationError

if TYPE_CHECKING:
    from recordspec.builder.protocols import BuilderProtocol

__all__ = ("SelectFieldsMixin",)


class SelectFieldsMixin:
    """Mixin providing the field list of the SELECT clause."""

    __slots__ = ()

    def select_fields(self, fields: "Iterable[str] | str") -> Self:
        """Append fields to the SELECT clause.

        Insertion order is kept and duplicates are tolerated.

        Args:
            fields: Field names, or a single field name.

        Raises:
            ValidationError: If a field name is not a non-blank string.

        Returns:
            The current builder instance for method chaining.
        """
        builder = cast("BuilderProtocol", self)
        names = (fields,) if isinstance(fields, str) else tuple(fields)
        for name in names:
            if not isinstance(name, str) or not name.strip():
                msg = f"Field names must be non-blank strings, got {name!r}"
                raise ValidationError(msg)
        builder._selected_fields.extend(name.strip() for name in names)
        return self

    def select_fields_from_field_set(self, name: str) -> Self:
        """Append the fields of a named field set of the target entity.

        Raises:
            MetadataError: If the entity or the field set is unknown.

        Returns:
            The current builder instance for method chaining.
        """
        builder = cast("BuilderProtocol", self)
        return self.select_fields(field_set(builder.metadata, builder.entity_type, name))

    def select_all_fields(self) -> Self:
        """Append every field of the target entity.

        Raises:
            MetadataError: If the entity is unknown.

        Returns:
            The current builder instance for method chaining.
        """
        builder = cast("BuilderProtocol", self)
        return self.select_fields(all_fields(builder.metadata, builder.entity_type))
