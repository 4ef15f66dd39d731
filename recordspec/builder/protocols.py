from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from recordspec.protocols import MetadataProvider

__all__ = ("BuilderProtocol",)


class BuilderProtocol(Protocol):
    entity_type: str
    metadata: "MetadataProvider | None"
    _selected_fields: list[str]
    _filter_expression: "str | None"
    _group_by_expression: "str | None"
    _order_by_expression: "str | None"
    _limit: "int | None"
    _bound_parameters: dict[str, Any]
    _user_mode_requested: bool
    _security_enforced_requested: bool
