from __future__ import annotations

import importlib.metadata
import json
import os
import platform
import sys
from pathlib import Path

import pytest

BASE_DIR = Path(__file__).resolve().parent
BENCHMARK_OUTPUT_DIR = BASE_DIR.parent / ".benchmarks"
BENCHMARK_OUTPUT_DIR.mkdir(exist_ok=True)


def _version(dist: str) -> str:
    try:
        return importlib.metadata.version(dist)
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


def collect_environment_metadata() -> dict[str, object]:
    """Capture reproducibility metadata for each benchmark run."""
    gil_enabled = getattr(sys, "_is_gil_enabled", lambda: True)()
    return {
        "python": {
            "version": platform.python_version(),
            "implementation": platform.python_implementation(),
            "executable": sys.executable,
            "gil_enabled": gil_enabled,
        },
        "os": {
            "system": platform.system(),
            "release": platform.release(),
            "machine": platform.machine(),
        },
        "cpu": {
            "processor": platform.processor(),
            "count": os.cpu_count(),
        },
        "stache": _version("stache"),
    }


@pytest.fixture(scope="session")
def environment_metadata() -> dict[str, object]:
    """Write environment metadata to .benchmarks for ingestion."""
    metadata = collect_environment_metadata()
    (BENCHMARK_OUTPUT_DIR / "environment.json").write_text(json.dumps(metadata, indent=2))
    return metadata


SMALL_TEMPLATE = "Hello {{ user.name }}, you have {{ inbox.count }} new messages."

MEDIUM_TEMPLATE = "\n".join(
    f"<li>{{{{ items[{i}].name }}}}: {{{{ items[{i}].price }}}} ({{{{ items[{i}].tags }}}})</li>"
    for i in range(20)
)


@pytest.fixture(scope="session")
def small_scope() -> dict[str, object]:
    return {"user": {"name": "Ada"}, "inbox": {"count": 3}}


@pytest.fixture(scope="session")
def medium_scope() -> dict[str, object]:
    return {
        "items": [
            {"name": f"Item {i}", "price": i * 1.5, "tags": ["a", "b", str(i)]}
            for i in range(20)
        ]
    }


@pytest.fixture(scope="session")
def small_template() -> str:
    return SMALL_TEMPLATE


@pytest.fixture(scope="session")
def medium_template() -> str:
    return MEDIUM_TEMPLATE
