"""The handler capability invoked by the trigger dispatcher."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from recordspec.typing import RecordMap, RecordSequence

__all__ = ("NoOpTriggerHandler", "TriggerHandler")


class TriggerHandler(ABC):
    """Business logic for the lifecycle events of one entity type.

    Concrete handlers implement all seven operations; handlers that only react
    to a few events can extend :class:`NoOpTriggerHandler` instead.
    """

    @abstractmethod
    def before_insert(self, new_records: "RecordSequence") -> None: ...

    @abstractmethod
    def after_insert(self, new_records: "RecordSequence", new_by_id: "RecordMap") -> None: ...

    @abstractmethod
    def before_update(
        self,
        new_records: "RecordSequence",
        new_by_id: "RecordMap",
        old_records: "RecordSequence",
        old_by_id: "RecordMap",
    ) -> None: ...

    @abstractmethod
    def after_update(
        self,
        new_records: "RecordSequence",
        new_by_id: "RecordMap",
        old_records: "RecordSequence",
        old_by_id: "RecordMap",
    ) -> None: ...

    @abstractmethod
    def before_delete(self, old_records: "RecordSequence", old_by_id: "RecordMap") -> None: ...

    @abstractmethod
    def after_delete(self, old_records: "RecordSequence", old_by_id: "RecordMap") -> None: ...

    @abstractmethod
    def after_undelete(self, new_records: "RecordSequence", new_by_id: "RecordMap") -> None: ...


class NoOpTriggerHandler(TriggerHandler):
    """Handler whose operations do nothing; override the ones you need."""

    def before_insert(self, new_records: "RecordSequence") -> None:
        return None

    def after_insert(self, new_records: "RecordSequence", new_by_id: "RecordMap") -> None:
        return None

    def before_update(
        self,
        new_records: "RecordSequence",
        new_by_id: "RecordMap",
        old_records: "RecordSequence",
        old_by_id: "RecordMap",
    ) -> None:
        return None

    def after_update(
        self,
        new_records: "RecordSequence",
        new_by_id: "RecordMap",
        old_records: "RecordSequence",
        old_by_id: "RecordMap",
    ) -> None:
        return None

    def before_delete(self, old_records: "RecordSequence", old_by_id: "RecordMap") -> None:
        return None

    def after_delete(self, old_records: "RecordSequence", old_by_id: "RecordMap") -> None:
        return None

    def after_undelete(self, new_records: "RecordSequence", new_by_id: "RecordMap") -> None:
        return None
