"""Command line front end for generator programs.

Builds an argparse parser from a GeneratorConfig, turns the parsed arguments
into InvocationFlags and runs the generation pipeline.
"""

from __future__ import annotations

import argparse
import sys
from typing import IO, Sequence

from rich.console import Console
from rich.markdown import Markdown

from .codegen import Generator, GeneratorConfig, InvocationFlags
from .errors import GeneratorError
from .logging_config import get_logger, setup_logging
from .utils import MissingInputError, is_terminal

logger = get_logger(__name__)

HELP_WIDTH = 100


def render_usage(text: str, stream: IO | None = None) -> str:
    """Render markdown usage text for a terminal.

    Args:
        text: Markdown usage text.
        stream: Stream the text will be printed to.

    Returns:
        The rendered text when stream is a terminal, otherwise text unchanged.
    """
    stream = stream if stream is not None else sys.stdout
    if not text or not is_terminal(stream):
        return text
    console = Console(width=HELP_WIDTH, force_terminal=True)
    with console.capture() as capture:
        console.print(Markdown(text))
    return capture.get()


def build_parser(config: GeneratorConfig) -> argparse.ArgumentParser:
    """Create the argument parser of a generator program."""
    parser = argparse.ArgumentParser(
        prog=config.use,
        description=config.short or None,
        epilog=render_usage(config.long) or None,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-i",
        "--in",
        dest="input",
        metavar="FILENAME.yaml",
        default=config.default_input,
        help="Input file (default: standard input)",
    )
    parser.add_argument(
        "-o",
        "--out",
        dest="output",
        metavar=f"FILENAME{config.source_extension}",
        default=config.default_output,
        help="Output file for file input, '-' for standard output "
        "(default: derived from the input file name)",
    )
    parser.add_argument(
        "-p",
        "--package",
        metavar="PACKAGE",
        default=config.default_package,
        help="Package name (default: inferred from the output directory)",
    )
    parser.add_argument(
        "-F",
        "--format",
        action=argparse.BooleanOptionalAction,
        default=config.default_format,
        help=f"Pipe the generated code through {config.formatter}",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log pipeline progress to stderr",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {config.version}",
    )
    return parser


def flags_from_args(args: argparse.Namespace) -> InvocationFlags:
    """Convert parsed arguments into invocation flags."""
    return InvocationFlags(
        input=args.input or "",
        output=args.output or "",
        package=args.package or "",
        format=bool(args.format),
    )


def main(
    config: GeneratorConfig,
    argv: Sequence[str] | None = None,
    stdin: IO | None = None,
    stdout: IO | None = None,
) -> int:
    """Run a generator program.

    Args:
        config: Generator configuration.
        argv: Command line arguments without the program name.
        stdin: Stream to use as standard input.
        stdout: Stream to use as standard output.

    Returns:
        Exit code (0 for success, 1 for failure).
    """
    parser = build_parser(config)
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    err_console = Console(stderr=True, highlight=False, emoji=False)
    try:
        generator = Generator(config)
        result = generator.generate(flags_from_args(args), stdin, stdout)
    except MissingInputError as e:
        parser.print_usage(sys.stderr)
        err_console.print(f"error: {e}", markup=False, soft_wrap=True)
        return 1
    except GeneratorError as e:
        logger.debug("Generation failed", exc_info=True)
        err_console.print(f"error: {e}", markup=False, soft_wrap=True)
        return 1

    logger.info(
        "Generated %s from %s (package %s)",
        result.output or "standard output",
        result.origin,
        result.package,
    )
    return 0
