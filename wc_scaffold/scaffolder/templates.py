"""Jinja2 rendering for the generated project files.

Templates live next to this module under ``templates/`` and mirror the
layout of the project they produce.  Component sections are rendered from
inline strings through the same environment.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined


_BUNDLED_TEMPLATES = Path(__file__).parent / "templates"


class TemplateRenderer:
    """Renders source-code templates.

    Output is never autoescaped (the targets are TypeScript, JSON and HTML
    written by hand).  Undefined variables raise instead of rendering empty.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        self.template_dir = Path(template_dir or _BUNDLED_TEMPLATES)
        self.env = Environment(
            loader=FileSystemLoader(self.template_dir),
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render the template at *template_path* (e.g. ``"src/index.ts.j2"``)."""
        return self.env.get_template(template_path).render(**context)

    def render_string(self, source: str, context: dict[str, Any]) -> str:
        return self.env.from_string(source).render(**context)

    def list_templates(self) -> list[str]:
        """Sorted ``/``-separated paths of every ``.j2`` template."""
        return self.env.list_templates(extensions=["j2"])
