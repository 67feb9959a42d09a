"""Utility functions for loading the input document.

The document comes either from a named file or from standard input and is
decoded as YAML, which also accepts JSON.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import IO, Any

import yaml

from .codegen.core.config import InvocationFlags
from .codegen.core.model import STDIN
from .errors import GeneratorError
from .logging_config import get_logger

logger = get_logger(__name__)


class InputError(GeneratorError):
    """Exception raised when the input document cannot be read or decoded."""

    pass


class MissingInputError(InputError):
    """No input file was given and standard input is an interactive terminal."""

    pass


class _DocumentLoader(yaml.SafeLoader):
    """Safe loader that keeps timestamps as plain strings.

    Every decoded value is then representable as JSON.
    """


_DocumentLoader.yaml_implicit_resolvers = {
    key: [
        (tag, regexp)
        for tag, regexp in resolvers
        if tag != "tag:yaml.org,2002:timestamp"
    ]
    for key, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def decode_document(stream: IO) -> Any:
    """Decode the first YAML document of a stream.

    Args:
        stream: Text or binary stream.

    Returns:
        The decoded structured value, ``None`` for an empty document.

    Raises:
        yaml.YAMLError: If the document is not valid YAML.
    """
    loader = _DocumentLoader(stream)
    try:
        return loader.get_data() if loader.check_data() else None
    finally:
        loader.dispose()


def is_terminal(stream: Any) -> bool:
    """Return True if the stream is attached to an interactive terminal."""
    isatty = getattr(stream, "isatty", None)
    if isatty is None:
        return False
    try:
        return bool(isatty())
    except ValueError:
        # closed stream
        return False


def check_stdin(stdin: IO | None = None) -> IO:
    """Make sure standard input can be read without blocking on a terminal.

    Args:
        stdin: Stream to check instead of ``sys.stdin``.

    Returns:
        The stream that will be read.

    Raises:
        MissingInputError: If the stream is an interactive terminal.
    """
    stdin = stdin if stdin is not None else sys.stdin
    if is_terminal(stdin):
        logger.debug("Standard input is a terminal, refusing to read it")
        raise MissingInputError(
            "no input: give an input file or pipe a document to standard input"
        )
    return stdin


def load_from_stdin(stdin: IO | None = None) -> tuple[str, Any]:
    """Load the document from standard input.

    Args:
        stdin: Stream to read instead of ``sys.stdin``.

    Returns:
        Tuple of (``STDIN`` origin tag, decoded data).

    Raises:
        MissingInputError: If the stream is an interactive terminal.
        InputError: If the stream cannot be decoded.
    """
    stdin = check_stdin(stdin)

    # Prefer the binary buffer so YAML can detect the encoding itself
    stream = getattr(stdin, "buffer", stdin)
    try:
        data = decode_document(stream)
    except yaml.YAMLError as e:
        logger.debug(f"Invalid YAML on standard input: {e}")
        raise InputError(f"Invalid YAML in {STDIN}: {e}") from e
    except OSError as e:
        raise InputError(f"Error reading {STDIN}: {e}") from e

    logger.info(f"Loaded document from {STDIN}")
    return STDIN, data


def load_from_file(file_path: str | Path) -> tuple[str, Any]:
    """Load the document from a file.

    Args:
        file_path: Path to the YAML or JSON file.

    Returns:
        Tuple of (absolute file path, decoded data).

    Raises:
        InputError: If the file cannot be opened or decoded.
    """
    path = os.path.abspath(file_path)
    logger.debug(f"Attempting to load document from file: {path}")

    try:
        with open(path, "rb") as f:
            data = decode_document(f)
    except yaml.YAMLError as e:
        raise InputError(f"Invalid YAML in file {path}: {e}") from e
    except OSError as e:
        raise InputError(f"Error reading file {path}: {e}") from e

    logger.info(f"Loaded document from {path}")
    return path, data


def resolve_input(
    flags: InvocationFlags, stdin: IO | None = None
) -> tuple[str, Any]:
    """Load the input document the flags point at.

    Args:
        flags: Invocation flags; an empty input path means standard input.
        stdin: Stream to use as standard input.

    Returns:
        Tuple of (origin, decoded data) where origin is ``STDIN`` or an
        absolute path.
    """
    if flags.from_stdin:
        return load_from_stdin(stdin)
    return load_from_file(flags.input)
