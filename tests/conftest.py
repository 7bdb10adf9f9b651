"""Shared pytest fixtures for nanocad tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from click.testing import CliRunner

from nanocad.infrastructure.session import Session
from nanocad.services.interpreter import InterpreterService

SAMPLE_DRAWING = """\
# kitchen wall
layer 1, Walls, ff0000
set $len, 2000
line x0;y0, x$len;y0, l1 = &wall

rect x0;y0, x90cm;y2m = &door
dimen x0;y0, x2m;y0, x0;y-20, x2m;y-20
odimen &door[0], &door[1], u, 10
"""


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def session() -> Session:
    """Fresh session with default config (layer 0 already created)."""
    return Session()


@pytest.fixture
def interpreter() -> InterpreterService:
    """Interpreter over a fresh session."""
    return InterpreterService.create()


@pytest.fixture
def write_drawing(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write drawing text to a file under tmp_path and return its path."""

    def _write(text: str, name: str = "drawing.cad") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def drawing_file(write_drawing: Callable[[str, str], Path]) -> Path:
    """A small valid drawing exercising layers, variables and dimensions."""
    return write_drawing(SAMPLE_DRAWING, "kitchen.cad")


@pytest.fixture
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run from tmp_path with no config file in reach."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("NANOCAD_CONFIG", raising=False)
