"""
yamlgen - generate source code from YAML documents.

A generator program supplies a GeneratorConfig (name, version, template)
and hands control to ``yamlgen.cli.main``.
"""

from .codegen import (
    GenerationResult,
    Generator,
    GeneratorConfig,
    InvocationFlags,
    generate,
)
from .errors import GeneratorError

__version__ = "0.1.0"

__all__ = [
    "GenerationResult",
    "Generator",
    "GeneratorConfig",
    "GeneratorError",
    "InvocationFlags",
    "generate",
]
