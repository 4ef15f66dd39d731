from typing import TYPE_CHECKING, cast

from typing_extensions import Self

from recordspec.parameters import AccessMode, has_placeholders

if TYPE_CHECKING:
    from recordspec.builder.protocols import BuilderProtocol

__all__ = ("AccessModeMixin",)


class AccessModeMixin:
    """Mixin providing access-mode requests and their resolution."""

    __slots__ = ()

    def with_security_enforced(self) -> Self:
        """Request field-level security enforcement."""
        builder = cast("BuilderProtocol", self)
        builder._security_enforced_requested = True
        return self

    def with_user_mode(self) -> Self:
        """Request user-mode execution (field and row level permissions)."""
        builder = cast("BuilderProtocol", self)
        builder._user_mode_requested = True
        return self

    @property
    def access_mode(self) -> AccessMode:
        """Effective access mode for the current builder state.

        User mode wins only when parameters are bound or the predicate has no
        placeholders. Otherwise a security-enforced request applies, and with
        neither request the query runs in system mode.
        """
        builder = cast("BuilderProtocol", self)
        if builder._user_mode_requested and (
            builder._bound_parameters or not has_placeholders(builder._filter_expression)
        ):
            return AccessMode.USER_MODE
        if builder._security_enforced_requested:
            return AccessMode.SECURITY_ENFORCED
        return AccessMode.SYSTEM
