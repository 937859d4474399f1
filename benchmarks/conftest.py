"""Shared fixtures for talhtml benchmarks.

Each template is written twice, once with TAL attributes and once in Jinja2
syntax, producing the same HTML from the same context.
"""

from __future__ import annotations

import importlib.metadata as importlib_metadata
import json
import os
import platform
import sys
from pathlib import Path

import pytest
from jinja2 import Environment as Jinja2Environment

BASE_DIR = Path(__file__).resolve().parent
BENCHMARK_OUTPUT_DIR = BASE_DIR.parent / ".benchmarks"

TAL_TEMPLATES = {
    "minimal": '<p tal:content="name">Name</p>',
    "small": (
        '<html><head><title tal:content="title">T</title></head><body>'
        '<h1 tal:content="title">T</h1>'
        '<ul><li tal:repeat="item items" tal:content="item">x</li></ul>'
        "</body></html>"
    ),
    "medium": (
        '<html><body><h1 tal:content="title">T</h1>'
        '<table><tr tal:repeat="user users" tal:attributes="class user/css">'
        '<td tal:content="repeat/user/number">1</td>'
        '<td tal:content="user/name">name</td>'
        '<td><a tal:attributes="href string:/users/${user/id}" tal:content="user/email">e</a></td>'
        '<td tal:condition="user/admin">admin</td>'
        "</tr></table></body></html>"
    ),
    "large": (
        '<ul><li tal:repeat="row rows"><b tal:content="row/title">t</b> '
        '<i tal:content="row/value">v</i></li></ul>'
    ),
}

JINJA2_TEMPLATES = {
    "minimal": "<p>{{ name }}</p>",
    "small": (
        "<html><head><title>{{ title }}</title></head><body>"
        "<h1>{{ title }}</h1>"
        "<ul>{% for item in items %}<li>{{ item }}</li>{% endfor %}</ul>"
        "</body></html>"
    ),
    "medium": (
        "<html><body><h1>{{ title }}</h1><table>"
        '{% for user in users %}<tr class="{{ user.css }}">'
        "<td>{{ loop.index }}</td><td>{{ user.name }}</td>"
        '<td><a href="/users/{{ user.id }}">{{ user.email }}</a></td>'
        "{% if user.admin %}<td>admin</td>{% endif %}"
        "</tr>{% endfor %}</table></body></html>"
    ),
    "large": (
        "<ul>{% for row in rows %}<li><b>{{ row.title }}</b> <i>{{ row.value }}</i></li>"
        "{% endfor %}</ul>"
    ),
}

CONTEXTS: dict[str, dict[str, object]] = {
    "minimal": {"name": "Benchmark"},
    "small": {"title": "Small page", "items": [f"Item {n}" for n in range(5)]},
    "medium": {
        "title": "Users",
        "users": [
            {
                "id": n,
                "name": f"User {n}",
                "email": f"user{n}@example.com",
                "css": "odd" if n % 2 else "even",
                "admin": n % 10 == 0,
            }
            for n in range(100)
        ],
    },
    "large": {"rows": [{"title": f"Row {n}", "value": n * 3} for n in range(1000)]},
}


def _version(dist: str) -> str:
    try:
        return importlib_metadata.version(dist)
    except importlib_metadata.PackageNotFoundError:
        return "unknown"


def collect_environment_metadata() -> dict[str, object]:
    """Capture reproducibility metadata for each benchmark run."""
    return {
        "python": {
            "version": platform.python_version(),
            "implementation": platform.python_implementation(),
            "executable": sys.executable,
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
        "talhtml": _version("talhtml"),
        "jinja2": _version("jinja2"),
    }


@pytest.fixture(scope="session", autouse=True)
def environment_metadata() -> dict[str, object]:
    """Write environment metadata to .benchmarks for ingestion."""
    metadata = collect_environment_metadata()
    BENCHMARK_OUTPUT_DIR.mkdir(exist_ok=True)
    (BENCHMARK_OUTPUT_DIR / "environment.json").write_text(json.dumps(metadata, indent=2))
    return metadata


@pytest.fixture(scope="session")
def jinja2_env() -> Jinja2Environment:
    return Jinja2Environment(autoescape=True)
