"""Translation of rendered record queries into executable SQLite statements."""

import re
from collections.abc import Mapping
from typing import Any, Final

from recordspec.parameters import AccessMode, extract_placeholders
from recordspec.utils.type_guards import is_list_binding

__all__ = ("expand_bindings", "split_access_mode")

_ACCESS_CLAUSE_REGEX: Final = re.compile(r"\s+WITH\s+(?P<mode>USER_MODE|SECURITY_ENFORCED)\b", re.IGNORECASE)
_CLAUSE_MODES: Final = {"USER_MODE": AccessMode.USER_MODE, "SECURITY_ENFORCED": AccessMode.SECURITY_ENFORCED}


def split_access_mode(text: str) -> "tuple[AccessMode, str]":
    """Remove the access mode clause from query text.

    Args:
        text: Rendered query text.

    Returns:
        The access mode named by the clause (``SYSTEM`` when absent) and the
        text without it.
    """
    matches = list(_ACCESS_CLAUSE_REGEX.finditer(text))
    if not matches:
        return AccessMode.SYSTEM, text
    match = matches[-1]
    mode = _CLAUSE_MODES[match.group("mode").upper()]
    return mode, text[: match.start()] + text[match.end() :]


def expand_bindings(text: str, bindings: "Mapping[str, Any]") -> "tuple[str, dict[str, Any]]":
    """Prepare ``:name`` placeholders for sqlite3.

    Scalar bindings stay as named parameters. Collection bindings are expanded
    into a parenthesised list of generated parameters, so ``Id IN :ids`` with
    ``ids=[1, 2]`` becomes ``Id IN (:ids__0, :ids__1)``. An empty collection
    becomes ``(NULL)``, which matches nothing.

    Args:
        text: Query text with the access mode clause already removed.
        bindings: Bound parameter values.

    Returns:
        The rewritten text and the parameters referenced by it.
    """
    parameters: dict[str, Any] = {}
    pieces: list[str] = []
    cursor = 0
    for placeholder in extract_placeholders(text):
        if placeholder.name not in bindings:
            continue
        value = bindings[placeholder.name]
        if not is_list_binding(value):
            parameters[placeholder.name] = value
            continue
        items = list(value)
        expanded_names = [f"{placeholder.name}__{index}" for index in range(len(items))]
        parameters.update(zip(expanded_names, items))
        replacement = "(" + ", ".join(f":{name}" for name in expanded_names) + ")" if items else "(NULL)"
        pieces.append(text[cursor : placeholder.position])
        pieces.append(replacement)
        cursor = placeholder.position + len(placeholder.placeholder_text)
    pieces.append(text[cursor:])
    return "".join(pieces), parameters
