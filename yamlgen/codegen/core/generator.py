"""
Generation pipeline.

Reads the input document, infers the package name, renders the template,
optionally pipes the result through the formatter and writes it out. A run
is all-or-nothing: nothing is written unless every stage succeeds.
"""

import os
import sys
from dataclasses import dataclass
from typing import IO, Optional

from .config import GeneratorConfig, InvocationFlags
from .model import STDIN, build_model
from .naming import infer_package
from .templates import TemplateEngine
from ... import execpipe
from ...errors import GeneratorError
from ...logging_config import get_logger
from ...utils import check_stdin, resolve_input

logger = get_logger(__name__)

# Output path meaning standard output
STDOUT = "-"

OUTPUT_MODE = 0o644


class OutputError(GeneratorError):
    """Exception raised when generated code cannot be written."""

    pass


class FormatterNotFoundError(GeneratorError):
    """Exception raised when formatting is on but the formatter is missing."""

    pass


@dataclass(frozen=True)
class GenerationResult:
    """Summary of a successful run."""

    origin: str
    package: str
    output: Optional[str]  # None means standard output
    formatted: bool
    size: int

    @property
    def to_stdout(self) -> bool:
        return self.output is None


def output_path_for(
    origin: str, flags: InvocationFlags, config: GeneratorConfig
) -> Optional[str]:
    """
    Decide where generated code goes.

    Args:
        origin: ``STDIN`` or the absolute input path
        flags: Invocation flags; a non-empty output overrides the derivation
            for file input. Standard input always goes to standard output.
        config: Generator configuration providing the source extension

    Returns:
        Output file path, or None for standard output
    """
    if origin == STDIN:
        return None
    if flags.output:
        return None if flags.output == STDOUT else flags.output
    root, _ = os.path.splitext(origin)
    return root + config.source_extension


def write_output(data: bytes, path: Optional[str], stdout: Optional[IO] = None):
    """
    Write generated code to a file or to standard output.

    Args:
        data: Final bytes
        path: Output file, None for standard output
        stdout: Stream to use as standard output

    Raises:
        OutputError: If writing fails
    """
    if path is None:
        stream = stdout if stdout is not None else sys.stdout
        stream = getattr(stream, "buffer", stream)
        try:
            stream.write(data)
            stream.flush()
        except OSError as e:
            raise OutputError(f"Failed to write standard output: {e}") from e
        return

    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, OUTPUT_MODE)
        with os.fdopen(fd, "wb") as f:
            f.write(data)
    except OSError as e:
        raise OutputError(f"Failed to write {path}: {e}") from e
    logger.info("Wrote %s (%d bytes)", path, len(data))


class Generator:
    """Document-to-source generator built from a GeneratorConfig."""

    def __init__(self, config: GeneratorConfig):
        """
        Validate the configuration and parse its template.

        Raises:
            ConfigError: If the configuration is unusable
            TemplateError: If the template does not parse
        """
        self.config = config.validate()
        self.engine = TemplateEngine(config.template, name=f"{config.use} template")

    def render(self, flags: InvocationFlags, stdin: Optional[IO] = None):
        """
        Run every stage except writing.

        Args:
            flags: Invocation flags
            stdin: Stream to use as standard input

        Returns:
            Tuple of (origin, package, final bytes)
        """
        config = self.config

        if flags.from_stdin:
            stdin = check_stdin(stdin)

        # Fail before reading anything when the formatter cannot run
        if flags.format:
            try:
                execpipe.check_path(config.formatter)
            except execpipe.ExecutableNotFoundError as e:
                raise FormatterNotFoundError(
                    f"{config.formatter} was not found, consider using --no-format"
                ) from e

        origin, data = resolve_input(flags, stdin)

        if flags.package:
            package = flags.package
            logger.debug("Using package %s from flags", package)
        else:
            package = infer_package(
                origin, config.source_extension, config.package_keyword
            )
        logger.info("Package name: %s", package)

        model = build_model(config, origin, data, package)
        code = self.engine.render(model)

        if flags.format:
            code = execpipe.format_source(
                code, True, config.formatter, *config.formatter_args
            )
        return origin, package, code

    def generate(
        self,
        flags: InvocationFlags,
        stdin: Optional[IO] = None,
        stdout: Optional[IO] = None,
    ) -> GenerationResult:
        """
        Generate code for one invocation and write it out.

        Args:
            flags: Invocation flags
            stdin: Stream to use as standard input
            stdout: Stream to use as standard output

        Returns:
            GenerationResult describing the run

        Raises:
            GeneratorError: On any failure; nothing has been written then
        """
        origin, package, code = self.render(flags, stdin)
        output = output_path_for(origin, flags, self.config)
        write_output(code, output, stdout)
        return GenerationResult(
            origin=origin,
            package=package,
            output=output,
            formatted=flags.format,
            size=len(code),
        )


def generate(
    config: GeneratorConfig,
    flags: Optional[InvocationFlags] = None,
    stdin: Optional[IO] = None,
    stdout: Optional[IO] = None,
) -> GenerationResult:
    """Convenience wrapper running one invocation with a fresh Generator."""
    if flags is None:
        flags = InvocationFlags.from_config(config)
    return Generator(config).generate(flags, stdin, stdout)
