"""Logging setup shared by every yamlgen module.

Modules obtain loggers with ``get_logger(__name__)``; the command line front
end calls ``setup_logging`` once to attach a rich handler to stderr.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "yamlgen"


def get_logger(name: str) -> logging.Logger:
    """Return a logger namespaced under the yamlgen root logger."""
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Configure the yamlgen root logger.

    Args:
        verbose: Log at DEBUG level instead of WARNING.

    Returns:
        The configured root logger.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    # Re-running setup (tests, repeated main() calls) must not stack handlers
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=verbose,
        rich_tracebacks=verbose,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
