"""Example generator: turns a YAML document into Go variable declarations."""

from __future__ import annotations

from importlib import resources
from typing import Sequence

from ..cli import main as cli_main
from ..codegen import GeneratorConfig

VERSION = "v0.0.0-alpha.1"


def _read(name: str) -> str:
    return resources.files(__name__).joinpath(name).read_text(encoding="utf-8")


def headline(text: str) -> str:
    """Return the first non-empty line of markdown text without heading marks."""
    for line in text.splitlines():
        line = line.strip().lstrip("#").strip()
        if line:
            return line
    return ""


def load_config() -> GeneratorConfig:
    usage = _read("usage.md")
    return GeneratorConfig(
        use="example-yaml-gen-go",
        short=headline(usage),
        long=usage,
        version=VERSION,
        template=_read("main.tmpl"),
    )


def main(argv: Sequence[str] | None = None) -> int:
    return cli_main(load_config(), argv)
