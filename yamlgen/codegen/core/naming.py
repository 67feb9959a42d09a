"""
Package name inference for generated code.

Looks for an existing package declaration in the source files next to the
output; when there is none, derives a name from the directory itself.
"""

import os
import re
from functools import lru_cache
from typing import Optional, Pattern

from .model import STDIN
from .templates import basename
from ...errors import GeneratorError
from ...logging_config import get_logger

logger = get_logger(__name__)


class InferenceError(GeneratorError):
    """Exception raised when not even a fallback package name can be derived."""

    pass


_INVALID_CHARS = re.compile(r"[^a-zA-Z0-9_]")


@lru_cache(maxsize=None)
def _declaration_pattern(keyword: str) -> Pattern[str]:
    return re.compile(rf"^{re.escape(keyword)}\s+([a-zA-Z][a-zA-Z0-9_]*)")


def sanitize_package_name(name: str) -> str:
    """Replace every character outside ``[A-Za-z0-9_]`` with an underscore."""
    return _INVALID_CHARS.sub("_", name)


def read_package(file_path: str, keyword: str = "package") -> Optional[str]:
    """
    Find the package declaration of a source file.

    Args:
        file_path: Source file to scan
        keyword: Declaration keyword, ``package`` for Go

    Returns:
        The declared identifier, or None if the file has no declaration or
        cannot be opened. Undecodable bytes do not stop the scan.
    """
    pattern = _declaration_pattern(keyword)
    try:
        with open(file_path, "r", encoding="utf-8", errors="replace") as f:
            for line in f:
                match = pattern.match(line.strip())
                if match:
                    return match.group(1)
    except OSError as e:
        logger.debug("Skipping %s: %s", file_path, e)
    return None


def read_package_name(
    directory: str, extension: str = ".go", keyword: str = "package"
) -> str:
    """
    Determine the package name for code generated into a directory.

    Files are scanned in sorted name order and the first declaration found
    wins. Without one, the sanitized directory name is used.

    Args:
        directory: Directory the generated file belongs to
        extension: Extension of the source files to scan
        keyword: Declaration keyword

    Returns:
        Package name
    """
    try:
        entries = sorted(os.scandir(directory), key=lambda entry: entry.name)
    except OSError as e:
        logger.warning("Cannot scan %s for package declarations: %s", directory, e)
        entries = []

    for entry in entries:
        try:
            if entry.is_dir() or not entry.name.endswith(extension):
                continue
        except OSError:
            continue
        name = read_package(entry.path, keyword)
        if name:
            logger.debug("Package %s declared in %s", name, entry.path)
            return name

    name = sanitize_package_name(basename(directory))
    logger.debug("No package declaration in %s, using %s", directory, name)
    return name


def infer_package(
    origin: str, extension: str = ".go", keyword: str = "package"
) -> str:
    """
    Infer the package name for an input origin.

    Args:
        origin: ``STDIN`` or the absolute input file path
        extension: Extension of the source files to scan
        keyword: Declaration keyword

    Returns:
        Package name

    Raises:
        InferenceError: If the working directory cannot be determined
    """
    if origin == STDIN:
        try:
            directory = os.getcwd()
        except OSError as e:
            raise InferenceError(
                f"Cannot determine the working directory: {e}"
            ) from e
    else:
        directory = os.path.dirname(origin)
    return read_package_name(directory, extension, keyword)
