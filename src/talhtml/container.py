"""Scoped variable storage used while rendering.

One ``VariableContainer`` holds each of: local variables, global variables,
repeat cursors and slot fillings.

Two independent mechanisms restore earlier state:

- ``add_value`` / ``remove_value`` form a LIFO stack. Each ``add_value``
  records what the name was bound to before (or that it was unbound) and the
  matching ``remove_value`` puts that back. ``tal:define`` locals and repeat
  cursors use this.
- ``save_all`` / ``restore_all`` snapshot and roll back the whole mapping.
  Macro and slot rendering use this so globals and slot fillings set inside a
  macro do not leak into the caller.
"""

from __future__ import annotations

from typing import Any, NamedTuple


class _Shadowed(NamedTuple):
    name: str
    value: Any
    existed: bool


class VariableContainer:
    """Mapping of names to values with stack and snapshot restore."""

    __slots__ = ("_saved", "_stack", "_values")

    def __init__(self) -> None:
        self._values: dict[str, Any] = {}
        self._stack: list[_Shadowed] = []
        self._saved: list[dict[str, Any]] = []

    def __contains__(self, name: str) -> bool:
        return name in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"<VariableContainer {self._values!r}>"

    def get_value(self, name: str) -> tuple[Any, bool]:
        """Return ``(value, found)`` for ``name``."""
        try:
            return self._values[name], True
        except KeyError:
            return None, False

    def set_value(self, name: str, value: Any) -> None:
        """Bind ``name`` without recording anything to restore."""
        self._values[name] = value

    def add_value(self, name: str, value: Any) -> None:
        """Bind ``name``, remembering the previous binding for ``remove_value``."""
        values = self._values
        if name in values:
            self._stack.append(_Shadowed(name, values[name], True))
        else:
            self._stack.append(_Shadowed(name, None, False))
        values[name] = value

    def remove_value(self) -> None:
        """Undo the most recent ``add_value``.

        Raises:
            RuntimeError: If there is nothing to undo. Compiled templates
                always pair adds and removes, so this indicates a compiler bug.
        """
        if not self._stack:
            raise RuntimeError("remove_value() called with no variable to remove")
        name, value, existed = self._stack.pop()
        if existed:
            self._values[name] = value
        else:
            self._values.pop(name, None)

    def save_all(self) -> None:
        """Snapshot every binding; the next ``restore_all`` returns to it."""
        self._saved.append(self._values)
        self._values = dict(self._values)

    def restore_all(self) -> None:
        """Roll back to the most recent ``save_all`` snapshot (no-op if none)."""
        if self._saved:
            self._values = self._saved.pop()
