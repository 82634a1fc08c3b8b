"""Jinja2 environment for the TypeScript templates in ``generator/templates/``."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

TEMPLATE_DIR = Path(__file__).parent / "templates"
"""Path to the Jinja2 template directory (``generator/templates/``)."""


@lru_cache(maxsize=1)
def get_environment() -> Environment:
    """Create the Jinja2 environment shared by the synthesizers.

    Autoescape is disabled for ``.ts.j2`` templates since they produce
    TypeScript, not HTML.  Block trimming and lstrip are enabled for cleaner
    template authoring, and undefined variables raise instead of rendering
    as empty strings.
    """
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(disabled_extensions=("ts.j2",)),
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )


def render_template(template_name: str, **context: Any) -> str:
    """Render *template_name* with *context* and return the text."""
    return get_environment().get_template(template_name).render(**context)
