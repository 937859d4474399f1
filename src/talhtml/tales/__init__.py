"""TALES: the expression language used in TAL and METAL attribute values."""

from talhtml.tales.evaluator import Tales, no_debug
from talhtml.tales.resolution import TalesValue, resolve_property
from talhtml.tales.values import (
    DEFAULT,
    NOT_FOUND,
    Sentinel,
    is_sequence,
    to_text,
    true_or_false,
)

__all__ = [
    "DEFAULT",
    "NOT_FOUND",
    "Sentinel",
    "Tales",
    "TalesValue",
    "is_sequence",
    "no_debug",
    "resolve_property",
    "to_text",
    "true_or_false",
]
