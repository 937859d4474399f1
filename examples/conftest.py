"""Shared pytest configuration for talhtml examples.

Every example directory holds an ``app.py`` that compiles and renders its
templates at import time, exposing the results as module attributes. The
``example_app`` fixture runs that file afresh for each test, so a test that
re-renders a template never sees state left by another.
"""

import importlib.util
from pathlib import Path
from types import ModuleType

import pytest


def _load_app(directory: Path) -> ModuleType:
    app_path = directory / "app.py"
    loader_spec = importlib.util.spec_from_file_location(
        f"talhtml_example_{directory.name}", app_path
    )
    assert loader_spec is not None and loader_spec.loader is not None
    module = importlib.util.module_from_spec(loader_spec)
    loader_spec.loader.exec_module(module)
    return module


@pytest.fixture
def example_dir(request: pytest.FixtureRequest) -> Path:
    """Directory of the example the requesting test belongs to."""
    return Path(request.path).parent


@pytest.fixture
def example_app(example_dir: Path) -> ModuleType:
    """The example's ``app.py``, executed in a fresh module."""
    return _load_app(example_dir)
