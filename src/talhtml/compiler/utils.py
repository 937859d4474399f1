"""Argument parsing helpers shared by the command mixins."""

from __future__ import annotations

import re

# A single ";" ends a clause; ";;" is a literal semicolon.
_CLAUSE_SEPARATOR = re.compile(r";;|;")


def split_clauses(value: str) -> list[str]:
    """Split a ``tal:define`` / ``tal:attributes`` value into clauses.

    Clauses are separated by ``;``. A doubled ``;;`` stands for a literal
    semicolon inside a clause. Clauses are stripped and empty ones dropped.

    Example:
        >>> split_clauses("a x; b string:1;;2")
        ['a x', 'b string:1;2']
    """
    clauses: list[str] = []
    current: list[str] = []
    position = 0
    for match in _CLAUSE_SEPARATOR.finditer(value):
        current.append(value[position : match.start()])
        position = match.end()
        if match.group() == ";;":
            current.append(";")
        else:
            clauses.append("".join(current))
            current = []
    current.append(value[position:])
    clauses.append("".join(current))
    return [clause.strip() for clause in clauses if clause.strip()]


def split_content_value(value: str) -> tuple[str, bool]:
    """Strip a ``text `` / ``structure `` prefix from a content expression.

    Returns ``(expression, structure)``.
    """
    if value.startswith("text ") and value[5:].strip():
        return value[5:].strip(), False
    if value.startswith("structure ") and value[10:].strip():
        return value[10:].strip(), True
    return value, False
