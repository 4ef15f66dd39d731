"""Field resolution helpers shared by builders and selectors."""

from typing import TYPE_CHECKING

from recordspec.exceptions import MetadataError

if TYPE_CHECKING:
    from recordspec.data_dictionary._types import EntityDescription
    from recordspec.protocols import MetadataProvider

__all__ = ("all_fields", "describe_entity", "field_set")


def describe_entity(provider: "MetadataProvider | None", entity_type: str) -> "EntityDescription":
    """Describe ``entity_type`` through ``provider``.

    Args:
        provider: Metadata provider, or None when none is configured.
        entity_type: Entity type to describe.

    Raises:
        MetadataError: If no provider is configured or the entity is unknown.

    Returns:
        The entity description.
    """
    if provider is None:
        msg = f"No metadata provider configured; cannot describe entity {entity_type!r}"
        raise MetadataError(msg, entity_type=entity_type)
    return provider.describe(entity_type)


def all_fields(provider: "MetadataProvider | None", entity_type: str) -> "tuple[str, ...]":
    """Return every field name of ``entity_type``."""
    description = describe_entity(provider, entity_type)
    if not description.all_field_names:
        msg = f"Entity {entity_type!r} has no fields"
        raise MetadataError(msg, entity_type=entity_type)
    return description.all_field_names


def field_set(provider: "MetadataProvider | None", entity_type: str, name: str) -> "tuple[str, ...]":
    """Return the field names in field set ``name`` of ``entity_type``.

    Field set names match case-insensitively.

    Raises:
        MetadataError: If the entity or the field set is unknown.
    """
    description = describe_entity(provider, entity_type)
    if name in description.field_sets:
        return description.field_sets[name]
    lowered = name.lower()
    for candidate, fields in description.field_sets.items():
        if candidate.lower() == lowered:
            return fields
    available = ", ".join(sorted(description.field_sets)) or "none"
    msg = f"Unknown field set {name!r} for entity {entity_type!r}. Available: {available}"
    raise MetadataError(msg, entity_type=entity_type)
