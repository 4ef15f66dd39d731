"""Record lifecycle (trigger) event routing."""

from recordspec.triggers._types import TriggerContext, TriggerOperation
from recordspec.triggers.dispatcher import TRIGGER_ROUTES, TriggerDispatcher, TriggerRoute, dispatch, route_for
from recordspec.triggers.handler import NoOpTriggerHandler, TriggerHandler
from recordspec.triggers.registry import HandlerFactory, TriggerRegistry

__all__ = (
    "TRIGGER_ROUTES",
    "HandlerFactory",
    "NoOpTriggerHandler",
    "TriggerContext",
    "TriggerDispatcher",
    "TriggerHandler",
    "TriggerOperation",
    "TriggerRegistry",
    "TriggerRoute",
    "dispatch",
    "route_for",
)
