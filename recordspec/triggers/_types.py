from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from recordspec.typing import RecordMap, RecordSequence

__all__ = ("TriggerContext", "TriggerOperation")


class TriggerOperation(str, Enum):
    """Record lifecycle stages a host raises once per batch of affected records."""

    BEFORE_INSERT = "before_insert"
    AFTER_INSERT = "after_insert"
    BEFORE_UPDATE = "before_update"
    AFTER_UPDATE = "after_update"
    BEFORE_DELETE = "before_delete"
    AFTER_DELETE = "after_delete"
    AFTER_UNDELETE = "after_undelete"

    def __str__(self) -> str:
        return self.value

    @property
    def is_before(self) -> bool:
        return self.value.startswith("before_")

    @property
    def is_after(self) -> bool:
        return self.value.startswith("after_")


@dataclass(frozen=True)
class TriggerContext:
    """The payload of one lifecycle event.

    Which record collections are present depends on the operation: inserts
    carry new records, deletes carry old records, updates carry both. The
    dispatcher forwards them as given and never checks them.
    """

    operation: TriggerOperation
    new_records: "RecordSequence | None" = None
    new_by_id: "RecordMap | None" = None
    old_records: "RecordSequence | None" = None
    old_by_id: "RecordMap | None" = None
    entity_type: "str | None" = None

    @property
    def size(self) -> int:
        """Number of records in the batch."""
        records = self.new_records if self.new_records is not None else self.old_records
        return len(records) if records is not None else 0
