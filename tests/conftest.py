"""Shared test fixtures for swagen.

Provides fixture documents, an isolated working directory with
:class:`~swagen.config.Settings` pointing at it, output-state management,
and helpers for writing configuration files and local generators.
"""

from __future__ import annotations

import json
import shutil
import textwrap
from pathlib import Path
from typing import Any, Callable

import pytest

from swagen.config import Settings
from swagen.output import OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager's Rich consoles hold references to sys.stdout and
    sys.stderr from creation time, which go stale once pytest or Typer's
    CliRunner swaps the streams.
    """
    yield
    reset_output()


@pytest.fixture
def plain_output() -> OutputManager:
    """Install a colourless, verbose OutputManager so capsys sees every message."""
    output = OutputManager(no_color=True, verbose=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_raw() -> dict[str, Any]:
    """Raw Swagger 2.0 petstore document."""
    with open(FIXTURES_DIR / "petstore.json") as f:
        return json.load(f)


@pytest.fixture
def petstore_30_raw() -> dict[str, Any]:
    """Raw OpenAPI 3.0 petstore document."""
    with open(FIXTURES_DIR / "petstore_3.0.json") as f:
        return json.load(f)


@pytest.fixture
def minimal_document() -> dict[str, Any]:
    """A Swagger 2.0 document with one path and one operation."""
    return {
        "swagger": "2.0",
        "info": {"title": "Minimal", "version": "1.0"},
        "paths": {
            "/ping": {
                "get": {
                    "operationId": "ping",
                    "responses": {
                        "200": {"description": "pong", "schema": {"type": "string"}}
                    },
                }
            }
        },
    }


# ---------------------------------------------------------------------------
# Working directory
# ---------------------------------------------------------------------------


@pytest.fixture
def workdir(tmp_path: Path) -> Path:
    """An empty project directory holding a copy of the petstore fixture."""
    project = tmp_path / "project"
    project.mkdir()
    shutil.copy(FIXTURES_DIR / "petstore.json", project / "petstore.json")
    return project


@pytest.fixture
def settings(workdir: Path) -> Settings:
    """Settings resolving every relative path against ``workdir``."""
    return Settings(cwd=workdir, timeout=5.0)


@pytest.fixture
def write_config(workdir: Path) -> Callable[[dict[str, Any]], Path]:
    """Return a helper that writes ``swagen.config.json`` into ``workdir``."""

    def _write(config: dict[str, Any]) -> Path:
        path = workdir / "swagen.config.json"
        path.write_text(json.dumps(config, indent=4), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_generator(workdir: Path) -> Callable[[str, str], Path]:
    """Return a helper that writes a local generator module into ``workdir``."""

    def _write(name: str, body: str) -> Path:
        path = workdir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(textwrap.dedent(body), encoding="utf-8")
        return path

    return _write
