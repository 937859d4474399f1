"""Shared utilities for talhtml (escaping, static HTML tables, terminal colours)."""

from talhtml.utils.html import escape_text, format_start_tag, html_escape

__all__ = ["escape_text", "format_start_tag", "html_escape"]
