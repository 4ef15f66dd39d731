from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

__all__ = ("EntityDescription",)


def _dedupe(names: "Iterable[str]") -> "tuple[str, ...]":
    return tuple(dict.fromkeys(names))


@dataclass(frozen=True)
class EntityDescription:
    """Schema description of one entity type.

    ``all_field_names`` holds each field once, in the order the provider reports
    them. ``field_sets`` maps a field set name to its ordered field names.
    """

    entity_type: str
    all_field_names: "tuple[str, ...]" = ()
    field_sets: "Mapping[str, tuple[str, ...]]" = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "all_field_names", _dedupe(self.all_field_names))
        object.__setattr__(self, "field_sets", {name: tuple(fields) for name, fields in self.field_sets.items()})

    @classmethod
    def from_dict(cls, entity_type: str, data: "Mapping[str, Any]") -> "EntityDescription":
        """Build a description from ``{"fields": [...], "field_sets": {...}}``.

        Args:
            entity_type: Entity type name.
            data: Mapping with a ``fields`` sequence and an optional ``field_sets`` mapping.

        Returns:
            The entity description.
        """
        return cls(
            entity_type=entity_type,
            all_field_names=tuple(data.get("fields", ())),
            field_sets=dict(data.get("field_sets", {})),
        )

    def has_field(self, name: str) -> bool:
        """Case-insensitive field membership check."""
        lowered = name.lower()
        return any(candidate.lower() == lowered for candidate in self.all_field_names)
