"""
yamlgen code generation module.

Renders a YAML document into source code through a Jinja2 template.
"""

from .core import *  # noqa: F401,F403
from .core import __all__
