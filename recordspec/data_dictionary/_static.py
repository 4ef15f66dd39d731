from collections.abc import Iterable, Mapping
from typing import Any

from mypy_extensions import mypyc_attr

from recordspec.data_dictionary._types import EntityDescription
from recordspec.exceptions import MetadataError
from recordspec.utils.logging import get_logger

__all__ = ("StaticMetadataProvider",)

logger = get_logger("data_dictionary")


@mypyc_attr(allow_interpreted_subclasses=True)
class StaticMetadataProvider:
    """Metadata provider backed by descriptions registered up front.

    Entity type lookups are case-insensitive, matching how record stores treat
    entity names.
    """

    __slots__ = ("_descriptions",)

    def __init__(self, descriptions: "Iterable[EntityDescription] | None" = None) -> None:
        self._descriptions: dict[str, EntityDescription] = {}
        for description in descriptions or ():
            self.register(description)

    @classmethod
    def from_mapping(cls, data: "Mapping[str, Mapping[str, Any]]") -> "StaticMetadataProvider":
        """Build a provider from ``{entity_type: {"fields": [...], "field_sets": {...}}}``."""
        return cls(EntityDescription.from_dict(entity_type, entry) for entity_type, entry in data.items())

    def register(self, description: EntityDescription) -> None:
        """Register or replace the description of an entity type."""
        self._descriptions[description.entity_type.lower()] = description
        logger.debug("Registered metadata for entity %s", description.entity_type)

    def describe(self, entity_type: str) -> EntityDescription:
        """Return the registered description of ``entity_type``.

        Raises:
            MetadataError: If the entity type was never registered.
        """
        description = self._descriptions.get(entity_type.lower())
        if description is None:
            msg = f"Unknown entity type: {entity_type!r}"
            raise MetadataError(msg, entity_type=entity_type)
        return description

    def entity_types(self) -> "list[str]":
        """Return registered entity type names."""
        return sorted(description.entity_type for description in self._descriptions.values())
