"""Jinja2 template loading for project scaffolding.

Provides the TemplateRenderer class which loads templates from the
``wails_setup/scaffolder/templates/`` directory.  Scaffolded files are copied
verbatim from their template source; only the console report is rendered
with a context.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Loads and renders the packaged ``.j2`` templates."""

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    # -- Verbatim source ---------------------------------------------------

    def source(self, template_path: str) -> str:
        """Return the unrendered text of a template.

        Raises:
            jinja2.TemplateNotFound: If no such template exists.
        """
        text, _filename, _uptodate = self.env.loader.get_source(self.env, template_path)
        return text

    async def copy_to_file(self, template_path: str, output_path: str | Path) -> Path:
        """Write a template's verbatim text to *output_path*.

        Parent directories are created automatically and any existing file
        is overwritten.  Returns the output path.
        """
        content = self.source(template_path)
        out = Path(output_path)
        await asyncio.to_thread(_write_file, out, content)
        return out

    # -- Rendering ---------------------------------------------------------

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context."""
        template = self.env.get_template(template_path)
        return template.render(**context)

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _write_file(path: Path, content: str) -> None:
    """Synchronous helper: create parent dirs and write content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
