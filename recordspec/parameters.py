"""Access modes and bound-parameter placeholder handling.

Predicates reference bound values with ``:name`` placeholders. Detection skips
quoted literals, comments, ``::type`` casts and positional ``:1`` markers so
that a colon inside a string literal never routes a query to the bound path.
"""

import re
from enum import Enum
from typing import Final, NamedTuple

__all__ = (
    "AccessMode",
    "PlaceholderInfo",
    "extract_placeholder_names",
    "extract_placeholders",
    "has_placeholders",
)


class AccessMode(str, Enum):
    """Permission enforcement applied when a query is executed."""

    SYSTEM = "system"
    SECURITY_ENFORCED = "security_enforced"
    USER_MODE = "user_mode"

    def __str__(self) -> str:
        """String representation for better error messages."""
        return self.value

    @property
    def clause(self) -> "str | None":
        """Query clause for this mode, or None when nothing is rendered."""
        return _ACCESS_MODE_CLAUSES[self]


_ACCESS_MODE_CLAUSES: "Final[dict[AccessMode, str | None]]" = {
    AccessMode.SYSTEM: None,
    AccessMode.SECURITY_ENFORCED: "WITH SECURITY_ENFORCED",
    AccessMode.USER_MODE: "WITH USER_MODE",
}


class PlaceholderInfo(NamedTuple):
    """A named placeholder found in query text."""

    name: str
    position: int
    placeholder_text: str


_PLACEHOLDER_REGEX: Final = re.compile(
    r"""
    (?P<dquote>"(?:[^"\\]|\\.)*") |                 # double-quoted strings
    (?P<squote>'(?:[^'\\]|\\.)*') |                 # single-quoted strings
    (?P<line_comment>--[^\r\n]*) |
    (?P<block_comment>/\*(?:[^*]|\*(?!/))*\*/) |
    (?P<cast>::\w+) |                               # ::type casts are not placeholders
    (?P<positional_colon>:\d+) |                    # :1 positional markers are not named placeholders
    (?P<named_colon>:(?P<colon_name>[A-Za-z_]\w*))
    """,
    re.VERBOSE | re.MULTILINE | re.DOTALL,
)


def extract_placeholders(text: "str | None") -> "list[PlaceholderInfo]":
    """Extract named ``:name`` placeholders from query text.

    Args:
        text: Query or predicate text. ``None`` yields no placeholders.

    Returns:
        Placeholders in order of appearance, repeats included.
    """
    if not text:
        return []
    placeholders: list[PlaceholderInfo] = []
    for match in _PLACEHOLDER_REGEX.finditer(text):
        if not match.group("named_colon"):
            continue
        placeholders.append(
            PlaceholderInfo(
                name=match.group("colon_name"),
                position=match.start("named_colon"),
                placeholder_text=match.group("named_colon"),
            )
        )
    return placeholders


def extract_placeholder_names(text: "str | None") -> "tuple[str, ...]":
    """Return the distinct placeholder names referenced by ``text`` in order of first use."""
    return tuple(dict.fromkeys(info.name for info in extract_placeholders(text)))


def has_placeholders(text: "str | None") -> bool:
    """Check whether ``text`` contains at least one ``:name`` placeholder."""
    if not text or ":" not in text:
        return False
    return any(match.group("named_colon") for match in _PLACEHOLDER_REGEX.finditer(text))
