"""Shared type aliases for RecordSpec."""

from collections.abc import Hashable, Mapping, Sequence
from typing import Any

from typing_extensions import TypeAlias

__all__ = (
    "Bindings",
    "Record",
    "RecordId",
    "RecordMap",
    "RecordSequence",
)

Record: TypeAlias = "dict[str, Any]"
"""A single row returned by a record store, keyed by field name."""

RecordId: TypeAlias = Hashable
RecordSequence: TypeAlias = "Sequence[Record]"
RecordMap: TypeAlias = "Mapping[RecordId, Record]"
Bindings: TypeAlias = "Mapping[str, Any]"

