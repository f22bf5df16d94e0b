"""Fixtures for the runnable stache examples.

Every example directory holds an ``app.py`` that renders at import time and
a test module next to it. ``example_app`` imports that ``app.py`` under a
unique module name, once per test, so module-level renders never leak
between tests.
"""

import importlib.util
from pathlib import Path
from types import ModuleType

import pytest


def _load_app(app_file: Path) -> ModuleType:
    name = f"stache_example_{app_file.parent.name}"
    loader_spec = importlib.util.spec_from_file_location(name, app_file)
    if loader_spec is None or loader_spec.loader is None:
        raise ImportError(f"Cannot load example from {app_file}")
    module = importlib.util.module_from_spec(loader_spec)
    loader_spec.loader.exec_module(module)
    return module


@pytest.fixture
def example_app(request: pytest.FixtureRequest) -> ModuleType:
    """The freshly executed ``app.py`` of the requesting test's directory."""
    app_file = Path(request.path).with_name("app.py")
    return _load_app(app_file)
