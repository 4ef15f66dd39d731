"""Routes lifecycle events to the matching :class:`TriggerHandler` method.

The routing table below covers every :class:`TriggerOperation`; it is checked
at import time, so adding an operation without a route fails immediately.
There is no default route.
"""

from typing import TYPE_CHECKING, Any, Final, NamedTuple

from recordspec.exceptions import UnknownTriggerOperationError
from recordspec.triggers._types import TriggerOperation
from recordspec.utils.logging import get_logger

if TYPE_CHECKING:
    from recordspec.triggers._types import TriggerContext
    from recordspec.triggers.handler import TriggerHandler

__all__ = ("TriggerDispatcher", "TriggerRoute", "dispatch", "route_for")

logger = get_logger("triggers")


class TriggerRoute(NamedTuple):
    """Handler method name and the context attributes passed to it, in order."""

    method_name: str
    arguments: "tuple[str, ...]"


_NEW = ("new_records", "new_by_id")
_OLD = ("old_records", "old_by_id")

TRIGGER_ROUTES: "Final[dict[TriggerOperation, TriggerRoute]]" = {
    TriggerOperation.BEFORE_INSERT: TriggerRoute("before_insert", ("new_records",)),
    TriggerOperation.AFTER_INSERT: TriggerRoute("after_insert", _NEW),
    TriggerOperation.BEFORE_UPDATE: TriggerRoute("before_update", _NEW + _OLD),
    TriggerOperation.AFTER_UPDATE: TriggerRoute("after_update", _NEW + _OLD),
    TriggerOperation.BEFORE_DELETE: TriggerRoute("before_delete", _OLD),
    TriggerOperation.AFTER_DELETE: TriggerRoute("after_delete", _OLD),
    TriggerOperation.AFTER_UNDELETE: TriggerRoute("after_undelete", _NEW),
}


def _check_routes() -> None:
    missing = [operation for operation in TriggerOperation if operation not in TRIGGER_ROUTES]
    if missing:
        raise UnknownTriggerOperationError(missing[0])


_check_routes()


def route_for(operation: Any) -> TriggerRoute:
    """Return the route for ``operation``.

    Args:
        operation: A :class:`TriggerOperation` or its string value.

    Raises:
        UnknownTriggerOperationError: If the operation has no route.
    """
    try:
        resolved = TriggerOperation(operation)
    except ValueError:
        raise UnknownTriggerOperationError(operation) from None
    route = TRIGGER_ROUTES.get(resolved)
    if route is None:
        raise UnknownTriggerOperationError(operation)
    return route


def dispatch(context: "TriggerContext", handler: "TriggerHandler") -> None:
    """Invoke the handler method matching ``context.operation``.

    Exceptions raised by the handler propagate unchanged.

    Raises:
        UnknownTriggerOperationError: If the operation has no route.
    """
    route = route_for(context.operation)
    logger.debug(
        "Dispatching %s (%d record(s)) to %s.%s",
        context.operation,
        context.size,
        type(handler).__name__,
        route.method_name,
    )
    method = getattr(handler, route.method_name)
    method(*(getattr(context, argument) for argument in route.arguments))


class TriggerDispatcher:
    """Dispatches lifecycle events to one handler."""

    __slots__ = ("handler",)

    def __init__(self, handler: "TriggerHandler") -> None:
        self.handler = handler

    def dispatch(self, context: "TriggerContext") -> None:
        """Route ``context`` to the handler. See :func:`dispatch`."""
        dispatch(context, self.handler)

    def __repr__(self) -> str:
        return f"TriggerDispatcher(handler={type(self.handler).__name__})"
