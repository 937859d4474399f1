"""TALES expression evaluator.

Expression forms:

- ``path:a/b``, or just ``a/b``: path lookup, with ``|`` alternatives
- ``string:Hello $name, ${user/name}``: interpolation (``$$`` is a dollar)
- ``exists:a/b``: whether the path resolves
- ``not:expr``: negated truth of any expression

Path roots are tried in this order: ``nothing``, ``default``, ``attrs``,
``repeat``, local variables, global variables, then the render context.
A segment written ``?name`` is replaced by the value of the path ``name``.

Evaluation never raises for bad data. An unresolvable path evaluates to
``None`` (``NOT_FOUND`` internally, so that alternatives and ``exists:``
can tell "missing" from "explicitly None").
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any

from talhtml.container import VariableContainer
from talhtml.instructions import Attributes
from talhtml.tales.resolution import resolve_property
from talhtml.tales.values import DEFAULT, NOT_FOUND, to_text, true_or_false

DebugFunc = Callable[..., None]

# $$ | ${path} | $path (ends at whitespace or the next $)
_INTERPOLATION_RE = re.compile(r"\$(?:(\$)|\{([^}]*)\}|([^\s$]+))")


def no_debug(msg: str, *args: Any) -> None:
    """Default trace function: discard everything."""


class Tales:
    """Evaluation state for one render.

    Holds the render context plus the three variable containers. Macro and
    slot rendering share a single instance with the template that invoked
    them.
    """

    __slots__ = ("_attributes", "data", "debug", "globals", "locals", "repeats")

    def __init__(self, data: Any = None, debug: DebugFunc | None = None) -> None:
        self.data = data
        self.locals = VariableContainer()
        self.globals = VariableContainer()
        self.repeats = VariableContainer()
        self.debug: DebugFunc = debug or no_debug
        self._attributes: Attributes = ()

    def evaluate(self, expression: str, attributes: Attributes = ()) -> Any:
        """Evaluate ``expression``; ``attributes`` back the ``attrs/`` root.

        Returns the value, ``DEFAULT``, or ``None`` when nothing was found.
        """
        self._attributes = attributes
        result = self._evaluate(expression)
        if result is NOT_FOUND:
            result = None
        self.debug("TALES evaluated %r to value %r", expression, result)
        return result

    # ------------------------------------------------------------------
    # Expressions
    # ------------------------------------------------------------------

    def _evaluate(self, expression: str) -> Any:
        expression = expression.strip()
        if expression.startswith("path:"):
            return self._path(expression[5:])
        if expression.startswith("string:"):
            return self._string(expression[7:])
        if expression.startswith("exists:"):
            return self._path(expression[7:]) is not NOT_FOUND
        if expression.startswith("not:"):
            return not true_or_false(self._evaluate(expression[4:]))
        return self._path(expression)

    def _string(self, text: str) -> str:
        def substitute(match: re.Match[str]) -> str:
            if match.group(1):
                return "$"
            path = match.group(2) if match.group(2) is not None else match.group(3)
            return to_text(self._path(path))

        return _INTERPOLATION_RE.sub(substitute, text.strip())

    def _path(self, expression: str) -> Any:
        """Evaluate a path, falling through ``|`` alternatives while not found."""
        path, bar, alternatives = expression.partition("|")
        value = self._resolve(path.strip())
        if value is NOT_FOUND and bar:
            return self._evaluate(alternatives)
        return value

    # ------------------------------------------------------------------
    # Paths
    # ------------------------------------------------------------------

    def _resolve(self, path: str) -> Any:
        segments = path.split("/")
        root = segments[0]

        if root == "nothing":
            return None
        if root == "default":
            return DEFAULT

        if root in ("attrs", "repeat"):
            if len(segments) < 2:
                return NOT_FOUND
            name = self._expand(segments[1])
            if name is None:
                return NOT_FOUND
            if root == "attrs":
                return self._walk(self._attribute(name), segments[2:])
            cursor, found = self.repeats.get_value(name)
            if not found:
                self.debug("Unable to find repeat variable %s - returning not found", name)
                return NOT_FOUND
            self.debug("Found repeat variable %s - resolving %s", name, segments[2:])
            return self._walk(cursor, segments[2:])

        name = self._expand(root)
        if name is None:
            return NOT_FOUND
        for scope in (self.locals, self.globals):
            value, found = scope.get_value(name)
            if found:
                return self._walk(value, segments[1:])
        return self._walk(resolve_property(self.data, name), segments[1:])

    def _walk(self, value: Any, segments: list[str]) -> Any:
        """Resolve each segment in turn against the previous result."""
        for segment in segments:
            if value is NOT_FOUND:
                break
            name = self._expand(segment)
            if name is None:
                return NOT_FOUND
            self.debug("Looking for property %s in %s", name, type(value).__name__)
            value = resolve_property(value, name)
        return value

    def _expand(self, segment: str) -> str | None:
        """Expand a ``?variable`` segment; None means the segment is unusable."""
        if not segment:
            return None
        if len(segment) < 2 or segment[0] != "?":
            return segment
        value = self._resolve(segment[1:])
        if value is None or value is DEFAULT or value is NOT_FOUND:
            return None
        return str(value)

    def _attribute(self, name: str) -> Any:
        for key, value in self._attributes:
            if key == name:
                return value
        return NOT_FOUND
