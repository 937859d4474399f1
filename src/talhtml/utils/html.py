"""HTML escaping for rendered output.

Both helpers are single-pass via ``str.translate()``.

``html_escape`` is used for values produced by TALES expressions and for
attribute values, so quotes are escaped as well. ``escape_text`` is used for
literal template text, where quotes are left alone so that a template without
TAL commands renders back to its own source.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

_ESCAPE_TABLE = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&#34;",
        "'": "&#39;",
    }
)

_TEXT_TABLE = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
    }
)


def html_escape(value: Any) -> str:
    """Escape ``&<>"'`` in the string form of ``value``.

    Example:
        >>> html_escape('<a href="x">')
        '&lt;a href=&#34;x&#34;&gt;'
    """
    return str(value).translate(_ESCAPE_TABLE)


def escape_text(text: str) -> str:
    """Escape ``&<>`` in literal template text."""
    return text.translate(_TEXT_TABLE)


def format_start_tag(
    tag: str,
    attributes: Iterable[tuple[str, str | None]],
    self_closing: bool = False,
) -> str:
    """Render ``<tag name="value" ...>``.

    Attributes whose value is None are written bare (``<input disabled>``).

    Example:
        >>> format_start_tag("img", [("src", "a.png"), ("ismap", None)], True)
        '<img src="a.png" ismap/>'
    """
    parts = ["<", tag]
    for name, value in attributes:
        if value is None:
            parts.append(f" {name}")
        else:
            parts.append(f' {name}="{value.translate(_ESCAPE_TABLE)}"')
    parts.append("/>" if self_closing else ">")
    return "".join(parts)
