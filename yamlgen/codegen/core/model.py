"""
Rendering model exposed to templates.

Templates see three top-level names, ``Gen``, ``Input`` and ``Output``::

    package {{ Output.Package }}
    // Code generated by {{ Gen.Name }} {{ Gen.Version }}. DO NOT EDIT.
    var Name = "{{ Input.Data.name }}"
"""

from dataclasses import dataclass
from typing import Any, Dict

from .config import GeneratorConfig

# Origin tag used instead of a path when the document came from standard input
STDIN = "(stdin)"


@dataclass(frozen=True)
class Gen:
    name: str
    version: str


@dataclass(frozen=True)
class Input:
    path: str
    data: Any

    @property
    def from_stdin(self) -> bool:
        return self.path == STDIN


@dataclass(frozen=True)
class Output:
    package: str


@dataclass(frozen=True)
class GenerationModel:
    """Root context of one template execution."""

    gen: Gen
    input: Input
    output: Output

    def to_context(self) -> Dict[str, Any]:
        """Return the mapping handed to the template."""
        return {
            "Gen": {"Name": self.gen.name, "Version": self.gen.version},
            "Input": {"Path": self.input.path, "Data": self.input.data},
            "Output": {"Package": self.output.package},
        }


def build_model(
    config: GeneratorConfig, origin: str, data: Any, package: str
) -> GenerationModel:
    """
    Assemble the generation model.

    Args:
        config: Generator configuration providing name and version
        origin: Absolute input path or ``STDIN``
        data: Decoded input document
        package: Package name of the generated code

    Returns:
        A new GenerationModel
    """
    return GenerationModel(
        gen=Gen(name=config.use, version=config.version),
        input=Input(path=origin, data=data),
        output=Output(package=package),
    )
