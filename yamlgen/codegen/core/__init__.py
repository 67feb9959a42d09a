"""
Core code generation components.

Configuration, rendering model, package name inference, template engine
and the pipeline tying them together.
"""

from .config import ConfigError, GeneratorConfig, InvocationFlags
from .model import STDIN, GenerationModel, Gen, Input, Output, build_model
from .templates import HELPERS, TemplateEngine, TemplateError
from .naming import (
    InferenceError,
    infer_package,
    read_package,
    read_package_name,
    sanitize_package_name,
)
from .generator import (
    STDOUT,
    FormatterNotFoundError,
    GenerationResult,
    Generator,
    OutputError,
    generate,
    output_path_for,
    write_output,
)

__all__ = [
    # Configuration
    "ConfigError",
    "GeneratorConfig",
    "InvocationFlags",
    # Rendering model
    "STDIN",
    "GenerationModel",
    "Gen",
    "Input",
    "Output",
    "build_model",
    # Templates
    "HELPERS",
    "TemplateEngine",
    "TemplateError",
    # Package inference
    "InferenceError",
    "infer_package",
    "read_package",
    "read_package_name",
    "sanitize_package_name",
    # Pipeline
    "STDOUT",
    "FormatterNotFoundError",
    "GenerationResult",
    "Generator",
    "OutputError",
    "generate",
    "output_path_for",
    "write_output",
]
