"""Type guard functions for runtime type checking in RecordSpec."""

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from typing_extensions import TypeGuard

__all__ = ("is_list_binding",)


def is_list_binding(value: Any) -> "TypeGuard[Iterable[Any]]":
    """Check whether a bound value should expand into an ``IN`` list.

    Strings, bytes and mappings are scalar bindings even though they are iterable.

    Args:
        value: Value bound to a placeholder.

    Returns:
        True if the value is a non-string, non-mapping iterable.
    """
    if isinstance(value, (str, bytes, bytearray, Mapping)):
        return False
    return isinstance(value, Iterable)
