"""SQLite-backed metadata provider."""

import re
import sqlite3
from collections.abc import Mapping, Sequence
from typing import Final

from recordspec.data_dictionary import EntityDescription
from recordspec.exceptions import MetadataError
from recordspec.utils.logging import get_logger

__all__ = ("SqliteMetadataProvider",)

logger = get_logger("adapters.sqlite.data_dictionary")

_IDENTIFIER_REGEX: Final = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class SqliteMetadataProvider:
    """Describes entity types from SQLite table definitions.

    Field names come from ``PRAGMA table_info``. SQLite has no notion of field
    sets, so they are supplied per entity type and checked against the table.
    Descriptions are cached until :meth:`refresh` is called.

    Args:
        connection: Open SQLite connection.
        field_sets: Entity type to ``{field set name: field names}``.
    """

    __slots__ = ("_descriptions", "_field_sets", "connection")

    def __init__(
        self,
        connection: "sqlite3.Connection",
        field_sets: "Mapping[str, Mapping[str, Sequence[str]]] | None" = None,
    ) -> None:
        self.connection = connection
        self._field_sets: dict[str, dict[str, tuple[str, ...]]] = {
            entity.lower(): {name: tuple(fields) for name, fields in sets.items()}
            for entity, sets in (field_sets or {}).items()
        }
        self._descriptions: dict[str, EntityDescription] = {}

    def describe(self, entity_type: str) -> EntityDescription:
        """Describe the table named ``entity_type``.

        Raises:
            MetadataError: If the name is not a plain identifier, the table does
                not exist, or a configured field set names a missing column.
        """
        key = entity_type.lower()
        cached = self._descriptions.get(key)
        if cached is not None:
            return cached

        if not _IDENTIFIER_REGEX.match(entity_type):
            msg = f"Invalid entity type name: {entity_type!r}"
            raise MetadataError(msg, entity_type=entity_type)

        try:
            rows = self.connection.execute(f'PRAGMA table_info("{entity_type}")').fetchall()
        except sqlite3.Error as e:
            msg = f"Failed to read table definition for {entity_type!r}: {e}"
            raise MetadataError(msg, entity_type=entity_type) from e
        if not rows:
            msg = f"Unknown entity type: {entity_type!r}"
            raise MetadataError(msg, entity_type=entity_type)

        description = EntityDescription(
            entity_type=entity_type,
            all_field_names=tuple(row[1] for row in rows),
            field_sets=self._field_sets.get(key, {}),
        )
        for set_name, fields in description.field_sets.items():
            missing = [name for name in fields if not description.has_field(name)]
            if missing:
                msg = f"Field set {set_name!r} of {entity_type!r} references unknown field(s): {', '.join(missing)}"
                raise MetadataError(msg, entity_type=entity_type)

        logger.debug("Described %s with %d field(s)", entity_type, len(description.all_field_names))
        self._descriptions[key] = description
        return description

    def refresh(self, entity_type: "str | None" = None) -> None:
        """Forget cached descriptions, for one entity type or all of them."""
        if entity_type is None:
            self._descriptions.clear()
        else:
            self._descriptions.pop(entity_type.lower(), None)
