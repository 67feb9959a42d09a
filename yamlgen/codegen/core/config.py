"""
Configuration for generation runs.

``GeneratorConfig`` is supplied once by the program embedding the generator
(name, version, template, defaults). ``InvocationFlags`` holds the values of a
single invocation and is never mutated after it is built.
"""

from dataclasses import dataclass, field
from typing import Tuple

from ...errors import GeneratorError


class ConfigError(GeneratorError):
    """Exception raised for configuration-related errors."""

    pass


@dataclass
class GeneratorConfig:
    """Settings of a generator program."""

    # Program identity
    use: str = "yamlgen"
    short: str = ""
    long: str = ""
    version: str = "0.0.0"

    # Jinja2 template source rendered against the generation model
    template: str = ""

    # Flag defaults
    default_input: str = ""
    default_output: str = ""
    default_package: str = ""
    default_format: bool = True

    # External formatter, located on PATH
    formatter: str = "goimports"
    formatter_args: Tuple[str, ...] = field(default_factory=tuple)

    # Generated source language
    source_extension: str = ".go"
    package_keyword: str = "package"

    def validate(self) -> "GeneratorConfig":
        """
        Check the configuration for values the pipeline cannot work with.

        Returns:
            The configuration itself, for chaining

        Raises:
            ConfigError: If a setting is unusable
        """
        if not self.template:
            raise ConfigError("template must not be empty")
        if not self.formatter:
            raise ConfigError("formatter executable name must not be empty")
        if not self.source_extension.startswith("."):
            raise ConfigError(
                f"source_extension must start with '.': {self.source_extension!r}"
            )
        if not self.package_keyword.isidentifier():
            raise ConfigError(f"Invalid package keyword: {self.package_keyword!r}")
        return self


@dataclass(frozen=True)
class InvocationFlags:
    """Values of one generator invocation.

    An empty ``input`` means standard input. Empty ``output`` and ``package``
    mean "derive it".
    """

    input: str = ""
    output: str = ""
    package: str = ""
    format: bool = True

    @classmethod
    def from_config(cls, config: GeneratorConfig) -> "InvocationFlags":
        """Build the flags an invocation without arguments would get."""
        return cls(
            input=config.default_input,
            output=config.default_output,
            package=config.default_package,
            format=config.default_format,
        )

    @property
    def from_stdin(self) -> bool:
        return not self.input
