from recordspec.exceptions import ValidationError

__all__ = ("normalize_clause",)


def normalize_clause(clause_name: str, expression: "str | None") -> "str | None":
    """Validate clause text, returning it stripped or None to clear the clause.

    Raises:
        ValidationError: If the expression is not a string or is blank.
    """
    if expression is None:
        return None
    if not isinstance(expression, str):
        msg = f"{clause_name} expression must be a string, got {type(expression).__name__}"
        raise ValidationError(msg)
    stripped = expression.strip()
    if not stripped:
        msg = f"{clause_name} expression cannot be blank; pass None to clear it"
        raise ValidationError(msg)
    return stripped
