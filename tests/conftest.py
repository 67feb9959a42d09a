"""
Pytest fixtures for the yamlgen tests.

Fake formatters are small shell scripts placed in a temporary directory that
is put in front of PATH.
"""

import io
import os
import stat
from pathlib import Path
from typing import Callable

import pytest

from yamlgen.codegen import GeneratorConfig

SCENARIO_TEMPLATE = 'package {{ Output.Package }}\nvar Name = "{{ Input.Data.name }}"'


class TerminalInput(io.BytesIO):
    """Standard input stand-in attached to a terminal."""

    def isatty(self) -> bool:
        return True


# =============================================================================
# Formatter Fixtures
# =============================================================================


@pytest.fixture
def bin_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Directory prepended to PATH for fake executables."""
    path = tmp_path / "bin"
    path.mkdir()
    monkeypatch.setenv("PATH", f"{path}{os.pathsep}{os.environ.get('PATH', '')}")
    return path


@pytest.fixture
def make_formatter(bin_dir: Path) -> Callable[[str, str], Path]:
    """Factory writing an executable shell script into bin_dir."""

    def _make(name: str, body: str) -> Path:
        script = bin_dir / name
        script.write_text(f"#!/bin/sh\n{body}\n", encoding="utf-8")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return _make


@pytest.fixture
def cat_formatter(make_formatter) -> str:
    """Formatter that returns its input unchanged."""
    make_formatter("fake-fmt", "exec cat")
    return "fake-fmt"


@pytest.fixture
def empty_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """PATH containing only an empty directory."""
    path = tmp_path / "empty-bin"
    path.mkdir()
    monkeypatch.setenv("PATH", str(path))
    return path


# =============================================================================
# Project Fixtures
# =============================================================================


@pytest.fixture
def demo_dir(tmp_path: Path) -> Path:
    """Directory named ``demo`` without any Go files."""
    path = tmp_path / "demo"
    path.mkdir()
    return path


@pytest.fixture
def widget_yaml(demo_dir: Path) -> Path:
    """Input document ``{name: widget}`` inside demo_dir."""
    path = demo_dir / "widget.yaml"
    path.write_text("name: widget\n", encoding="utf-8")
    return path


@pytest.fixture
def config() -> GeneratorConfig:
    """Configuration rendering the widget scenario without formatting."""
    return GeneratorConfig(
        use="test-gen",
        version="v1.2.3",
        template=SCENARIO_TEMPLATE,
        default_format=False,
        formatter="fake-fmt",
    )
