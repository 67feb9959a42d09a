"""
Template engine wrapper for code generation.

Templates are Jinja2 sources rendered against a GenerationModel. The helper
functions below are available as globals, and except for ``abs`` also as
filters::

    // source: {{ basename(Input.Path) }}
    var raw = `{{ Input.Data | jsonify }}`
"""

import json
import os
from collections.abc import Mapping
from typing import Any, Callable, Dict

from jinja2 import Environment, StrictUndefined, TemplateError as JinjaError

from .model import GenerationModel
from ...errors import GeneratorError
from ...logging_config import get_logger

logger = get_logger(__name__)


class TemplateError(GeneratorError):
    """Exception raised for template parse or execution errors."""

    pass


def basename(path: str) -> str:
    """Return the last element of path, ignoring trailing separators."""
    if not path:
        return "."
    stripped = path.rstrip(os.sep)
    if not stripped:
        return os.sep
    return os.path.basename(stripped)


def dirname(path: str) -> str:
    """Return all but the last element of path."""
    parent = os.path.dirname(path)
    return os.path.normpath(parent) if parent else "."


def abspath(path: str) -> str:
    """Return the absolute form of path."""
    return os.path.abspath(path)


def jsonify(value: Any) -> str:
    """Serialize value as indented JSON without HTML escaping.

    Keys are sorted and the text ends with a newline. NaN and infinities
    are rejected since JSON cannot represent them.
    """
    return json.dumps(
        value, indent=2, sort_keys=True, ensure_ascii=False, allow_nan=False
    ) + "\n"


class DocumentEnvironment(Environment):
    """Jinja2 environment where dot access on a mapping reads its keys first.

    ``Input.Data.items`` is the document's ``items`` key, not ``dict.items``.
    """

    def getattr(self, obj: Any, attribute: str) -> Any:
        if isinstance(obj, Mapping):
            try:
                return obj[attribute]
            except (KeyError, TypeError):
                pass
        return super().getattr(obj, attribute)


HELPERS: Dict[str, Callable[..., Any]] = {
    "basename": basename,
    "dirname": dirname,
    "abs": abspath,
    "jsonify": jsonify,
}


class TemplateEngine:
    """Jinja2 template parsed once and rendered against a generation model."""

    def __init__(self, source: str, name: str = "template"):
        """
        Parse a template.

        Args:
            source: Jinja2 template source
            name: Name used in error messages

        Raises:
            TemplateError: If the template does not parse
        """
        self.name = name
        self._env = self._create_environment()
        try:
            self._template = self._env.from_string(source)
        except JinjaError as e:
            raise TemplateError(f"Failed to parse {name}: {e}") from e

    @staticmethod
    def _create_environment() -> Environment:
        env = DocumentEnvironment(
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        env.globals.update(HELPERS)
        # builtin filters such as abs take precedence
        env.filters.update(
            {name: func for name, func in HELPERS.items() if name not in env.filters}
        )
        return env

    def render(self, model: GenerationModel) -> bytes:
        """
        Execute the template.

        Args:
            model: Generation model

        Returns:
            Rendered text encoded as UTF-8

        Raises:
            TemplateError: If execution fails, including helper failures
        """
        try:
            text = self._template.render(**model.to_context())
        except JinjaError as e:
            raise TemplateError(f"Failed to execute {self.name}: {e}") from e
        except (TypeError, ValueError, OSError) as e:
            # raised from helpers, e.g. jsonify on a non-serializable value
            raise TemplateError(f"Failed to execute {self.name}: {e}") from e

        logger.debug("Rendered %s (%d characters)", self.name, len(text))
        return text.encode("utf-8")
