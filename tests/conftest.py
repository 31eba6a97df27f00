"""Shared fixtures."""

from __future__ import annotations

import io
import subprocess
from pathlib import Path
from unittest.mock import Mock

import pytest
from rich.console import Console

from collider.config import ProjectConfig
from collider.console import Reporter
from collider.context import Orchestrator
from collider.isolation import ErrorIsolation
from collider.runner import Runner
from collider.tasks import TaskRegistry


@pytest.fixture()
def reporter():
    return Reporter(
        Console(file=io.StringIO(), width=200),
        Console(file=io.StringIO(), width=200),
    )


@pytest.fixture()
def notifier():
    return Mock()


@pytest.fixture()
def registry():
    return TaskRegistry()


@pytest.fixture()
def runner(registry, reporter, notifier):
    return Runner(registry, ErrorIsolation(reporter, notifier), reporter)


@pytest.fixture()
def site(tmp_path) -> Path:
    """A small project tree with pages, partials, data, styles, scripts and assets."""
    root = tmp_path.resolve()
    project = root / "project"
    (project / "common").mkdir(parents=True)
    (project / "data").mkdir()
    (project / "assets" / "img").mkdir(parents=True)
    (project / "blog").mkdir()

    (project / "common" / "header.html").write_text("<header>{{ data.site.name }}</header>\n")
    (project / "data" / "site.json").write_text('{"name": "Collider"}')
    (project / "index.html").write_text(
        "---\ntitle: Home\n---\n"
        "<!-- hidden -->\n"
        "<html>\n  <title>{{ page.title }}</title>\n"
        "  {% include 'common/header.html' %}\n</html>\n"
    )
    (project / "blog" / "post.html").write_text("<p>{{ path }}</p>\n")
    (project / "main.scss").write_text("body { color: red; }\n")
    (project / "main.js").write_text("console.log('hi');\n")
    (project / "assets" / "img" / "logo.png").write_bytes(b"\x89PNG")
    return root


def fake_compiler(cmd, capture_output=True, text=True, cwd=None):
    """Stand-in for sass/esbuild: write a deterministic output file."""
    output = None
    for arg in cmd:
        if arg.startswith("--outfile="):
            output = Path(arg.split("=", 1)[1])
    if output is None:
        output = Path(cmd[-1])
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(f"/* built by {cmd[0]} */\n")
    return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")


@pytest.fixture()
def compilers(monkeypatch):
    monkeypatch.setattr("collider.transforms.subprocess.run", fake_compiler)
    return fake_compiler


@pytest.fixture()
def ctx(site, reporter, notifier):
    orchestrator = Orchestrator(ProjectConfig(root=site), reporter=reporter, notifier=notifier)
    yield orchestrator
    orchestrator.close()
