"""ANSI colours for compile error diagnostics.

Colours are used only when stdout is a TTY, unless overridden by the
``NO_COLOR`` / ``FORCE_COLOR`` environment variables.
"""

from __future__ import annotations

import os
import re
import sys
from typing import Literal

_CODES = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "cyan": "\033[36m",
    "yellow": "\033[33m",
    "bright_red": "\033[91m",
}

Style = Literal["reset", "bold", "dim", "cyan", "yellow", "bright_red"]

_ANSI_RE = re.compile(r"\x1B\[[0-?]*[ -/]*[@-~]")


def _colors_enabled() -> bool:
    if os.environ.get("FORCE_COLOR"):
        return True
    if os.environ.get("NO_COLOR"):
        return False
    return sys.stdout.isatty()


_USE_COLORS = _colors_enabled()


def supports_color() -> bool:
    """True if diagnostics will carry ANSI colour codes."""
    return _USE_COLORS


def colorize(text: str, *styles: Style) -> str:
    """Wrap ``text`` in the given styles (no-op when colours are disabled)."""
    if not _USE_COLORS or not styles:
        return text
    prefix = "".join(_CODES[style] for style in styles)
    return f"{prefix}{text}{_CODES['reset']}"


def strip_colors(text: str) -> str:
    """Remove ANSI escape sequences from ``text``."""
    return _ANSI_RE.sub("", text)


def error_code(text: str) -> str:
    return colorize(text, "bright_red", "bold")


def location(text: str) -> str:
    return colorize(text, "cyan")


def dim_text(text: str) -> str:
    return colorize(text, "dim")


def format_source_line(lineno: int, content: str, is_error: bool = False) -> str:
    """Format one numbered source line, marking the error line with ``>``.

    Without colours, line 3 renders as ``">  3 | <b tal:foo="x">"``.
    """
    marker = ">" if is_error else " "
    number = colorize(f"{marker}{lineno:>3}", "yellow")
    body = colorize(content, "bright_red") if is_error else dim_text(content)
    return f"{number} | {body}"
