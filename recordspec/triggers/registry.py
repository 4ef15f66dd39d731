"""Entity type to trigger handler registry."""

from collections.abc import Callable, Generator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from recordspec.exceptions import ImproperConfigurationError
from recordspec.triggers.dispatcher import dispatch
from recordspec.utils.logging import get_logger

if TYPE_CHECKING:
    from recordspec.triggers._types import TriggerContext
    from recordspec.triggers.handler import TriggerHandler

__all__ = ("HandlerFactory", "TriggerRegistry")

logger = get_logger("triggers.registry")

HandlerFactory = Callable[[], "TriggerHandler"]


class TriggerRegistry:
    """Maps entity types to handler factories and dispatches their events.

    A fresh handler is built for every dispatch, so handlers can keep per-batch
    state. Entity type names match case-insensitively. Dispatch for an entity
    type can be bypassed, which hosts use to stop a handler's own writes from
    re-entering it.
    """

    __slots__ = ("_bypassed", "_factories")

    def __init__(self) -> None:
        self._factories: dict[str, HandlerFactory] = {}
        self._bypassed: set[str] = set()

    def register(self, entity_type: str, factory: HandlerFactory) -> None:
        """Register the handler factory for ``entity_type``, replacing any previous one.

        Args:
            entity_type: Entity type name.
            factory: Zero-argument callable returning a handler, typically the handler class.
        """
        self._factories[entity_type.lower()] = factory
        logger.debug("Registered trigger handler for %s", entity_type)

    def unregister(self, entity_type: str) -> None:
        self._factories.pop(entity_type.lower(), None)

    def is_registered(self, entity_type: str) -> bool:
        return entity_type.lower() in self._factories

    def handler_for(self, entity_type: str) -> "TriggerHandler":
        """Build a handler for ``entity_type``.

        Raises:
            ImproperConfigurationError: If no handler is registered for the entity type.
        """
        factory = self._factories.get(entity_type.lower())
        if factory is None:
            msg = f"No trigger handler registered for entity type {entity_type!r}"
            raise ImproperConfigurationError(msg)
        return factory()

    def bypass(self, entity_type: str) -> None:
        """Suppress dispatch for ``entity_type`` until :meth:`clear_bypass` is called."""
        self._bypassed.add(entity_type.lower())

    def clear_bypass(self, entity_type: "str | None" = None) -> None:
        """Re-enable dispatch for ``entity_type``, or for every entity type when None."""
        if entity_type is None:
            self._bypassed.clear()
        else:
            self._bypassed.discard(entity_type.lower())

    def is_bypassed(self, entity_type: str) -> bool:
        return entity_type.lower() in self._bypassed

    @contextmanager
    def bypassed(self, entity_type: str) -> "Generator[None, None, None]":
        """Bypass ``entity_type`` for the duration of the block, restoring the previous state."""
        already_bypassed = self.is_bypassed(entity_type)
        self.bypass(entity_type)
        try:
            yield
        finally:
            if not already_bypassed:
                self.clear_bypass(entity_type)

    def dispatch(self, context: "TriggerContext", entity_type: "str | None" = None) -> bool:
        """Dispatch ``context`` to the handler registered for its entity type.

        Args:
            context: Event payload.
            entity_type: Entity type; defaults to ``context.entity_type``.

        Raises:
            ImproperConfigurationError: If no entity type is given or no handler is registered.
            UnknownTriggerOperationError: If the operation has no route.

        Returns:
            False when dispatch was bypassed, True otherwise.
        """
        target = entity_type or context.entity_type
        if not target:
            msg = "Trigger context has no entity type to dispatch on"
            raise ImproperConfigurationError(msg)
        if self.is_bypassed(target):
            logger.debug("Trigger dispatch bypassed for %s (%s)", target, context.operation)
            return False
        dispatch(context, self.handler_for(target))
        return True
