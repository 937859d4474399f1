"""Property resolution: how one path segment is looked up on a value.

Resolution order for ``value/name``:

1. ``value.tales_value(name)`` if the value implements :class:`TalesValue`
2. Mappings: ``value[name]`` (a missing key is not found)
3. Other objects: ``getattr(value, name)``, then ``value[name]`` if the
   object supports subscripting (digit names index sequences). Names
   starting with ``_`` are never looked up as attributes.

A callable found by (2) or (3) is called with no arguments and its result
used. Any exception raised along the way makes the segment not found.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from talhtml.tales.values import NOT_FOUND, Sentinel, is_sequence

logger = logging.getLogger(__name__)


@runtime_checkable
class TalesValue(Protocol):
    """Custom path resolution hook.

    Objects implementing ``tales_value`` decide for themselves what
    ``obj/name`` means in a template:

        >>> class Person:
        ...     def __init__(self, name):
        ...         self.name = name
        ...     def tales_value(self, name):
        ...         if name == "upper":
        ...             return self.name.upper()
        ...         return None
    """

    def tales_value(self, name: str) -> Any: ...


def resolve_property(value: Any, name: str) -> Any:
    """Return ``name`` looked up on ``value``, or ``NOT_FOUND``."""
    if value is None or isinstance(value, Sentinel):
        return NOT_FOUND
    try:
        if isinstance(value, TalesValue):
            return value.tales_value(name)
        if isinstance(value, Mapping):
            if name not in value:
                return NOT_FOUND
            result = value[name]
        else:
            result = _lookup_attribute(value, name)
            if result is NOT_FOUND:
                return NOT_FOUND
        if callable(result):
            result = result()
    except Exception:
        logger.debug(
            "Resolving %r on %s failed; treating as not found",
            name,
            type(value).__name__,
            exc_info=True,
        )
        return NOT_FOUND
    return result


def _lookup_attribute(obj: Any, name: str) -> Any:
    if not name.startswith("_"):
        try:
            return getattr(obj, name)
        except AttributeError:
            pass
    if hasattr(obj, "__getitem__") and not isinstance(obj, (str, bytes)):
        key: Any = int(name) if name.isdigit() and is_sequence(obj) else name
        try:
            return obj[key]
        except (KeyError, IndexError, TypeError):
            return NOT_FOUND
    return NOT_FOUND
