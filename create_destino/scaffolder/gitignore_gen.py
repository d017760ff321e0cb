"""``.gitignore`` generation.

The content does not depend on the project configuration.  The file is
written inside the project directory, next to ``package.json``.
"""

from __future__ import annotations

from pathlib import Path

from create_destino.models import ProjectConfig

from .templates import TemplateRenderer

GITIGNORE_FILE = ".gitignore"


class IgnoreFileGenerator:
    """Writes a ``.gitignore`` that excludes ``node_modules/``."""

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    def render(self) -> str:
        return self.renderer.render("gitignore.j2", {})

    async def generate(self, config: ProjectConfig, target: Path) -> Path:
        return await self.renderer.render_to_file(
            "gitignore.j2", target / GITIGNORE_FILE, {}
        )
