from collections.abc import Generator
from contextlib import contextmanager
from typing import Any, Optional

__all__ = (
    "CacheScopeError",
    "ExecutionError",
    "ImproperConfigurationError",
    "MetadataError",
    "RecordSpecError",
    "UnknownTriggerOperationError",
    "ValidationError",
    "wrap_store_exceptions",
)


class RecordSpecError(Exception):
    """Base exception class from which all RecordSpec exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``RecordSpecError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class ImproperConfigurationError(RecordSpecError):
    """Improper Configuration error.

    Raised when a component is asked for something it was never configured with,
    such as a trigger handler for an unregistered entity type.
    """


class MetadataError(RecordSpecError):
    """Entity or field set could not be resolved by the metadata provider."""

    entity_type: Optional[str]

    def __init__(self, message: Optional[str] = None, entity_type: Optional[str] = None) -> None:
        if message is None:
            message = "Unable to resolve entity metadata."
        super().__init__(message)
        self.entity_type = entity_type


class ValidationError(RecordSpecError):
    """Invalid arguments were passed to a query builder."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "Invalid query builder argument."
        super().__init__(message)


class ExecutionError(RecordSpecError):
    """The record store rejected or failed a query.

    The original store exception is always available as ``__cause__``.
    """

    sql: Optional[str]

    def __init__(self, message: Optional[str] = None, sql: Optional[str] = None) -> None:
        if message is None:
            message = "Query execution failed."
        detail_message = message
        if sql:
            detail_message = f"{message}\nSQL: {sql}"
        super().__init__(detail=detail_message)
        self.sql = sql


class CacheScopeError(RecordSpecError):
    """A result cache was used outside of the execution scope that owns it."""


class UnknownTriggerOperationError(RecordSpecError):
    """A trigger operation has no route in the dispatcher.

    This is a programming error: every operation must be routed.
    """

    def __init__(self, operation: Any) -> None:
        super().__init__(f"No trigger route defined for operation {operation!r}")
        self.operation = operation


@contextmanager
def wrap_store_exceptions(sql: Optional[str] = None) -> Generator[None, None, None]:
    """Convert record store failures into :class:`ExecutionError`.

    Errors that already are :class:`ExecutionError` pass through untouched so
    a store adapter can raise its own, more specific message.

    Args:
        sql: Rendered query text attached to the raised error.

    Raises:
        ExecutionError: When the wrapped block raises.
    """
    try:
        yield
    except ExecutionError:
        raise
    except Exception as exc:
        msg = f"Record store failed to execute query: {exc}"
        raise ExecutionError(msg, sql=sql) from exc
