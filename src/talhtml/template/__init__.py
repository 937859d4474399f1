"""Compiled templates and the renderer that executes them."""

from talhtml.template.core import Template
from talhtml.template.repeat import RepeatCursor

__all__ = ["RepeatCursor", "Template"]
