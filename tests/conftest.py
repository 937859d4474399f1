"""Pytest configuration and fixtures for talhtml tests."""

from collections.abc import Callable
from typing import Any

import pytest

from talhtml import compile_template


@pytest.fixture
def render() -> Callable[..., str]:
    """Compile a template string and render it in one step."""

    def _render(source: str, context: Any = None, **kwargs: Any) -> str:
        return compile_template(source).render(context, **kwargs)

    return _render


@pytest.fixture
def trace() -> list[str]:
    """Formatted debug trace lines collected by ``tracer``."""
    return []


@pytest.fixture
def tracer(trace: list[str]) -> Callable[..., None]:
    """Debug callable with the ``logging.Logger.debug`` signature."""

    def _debug(msg: str, *args: Any) -> None:
        trace.append(msg % args)

    return _debug


@pytest.fixture
def shared_macros():
    """A template defining macros for other templates to use."""
    return compile_template(
        '<html><body><p metal:define-macro="greeting">Hi '
        '<b metal:define-slot="name">Default Person</b> there.</p>'
        '<h2 metal:define-macro="header" tal:content="title">Title</h2>'
        "</body></html>",
        name="shared.html",
    )
